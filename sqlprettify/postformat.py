"""

Line-based passes over already formatted SQL.

These work on text rather than tokens: they align trailing commas,
move commas to the front of continuation lines and line up column
aliases in SELECT clauses.

"""
import re
from typing import List, Optional, Sequence, Tuple

from .options import CommaPosition

_SELECT_RE = re.compile(r"^\s*SELECT\b", re.IGNORECASE)
_SELECT_WITH_ITEM_RE = re.compile(r"^\s*SELECT\s+\S", re.IGNORECASE)
# the last token of a line is its alias, optionally preceded by AS
_ALIAS_RE = re.compile(r"^(.*?\S) +(AS )?(\S+)$", re.IGNORECASE)
_TRAILING_COMMA_RE = re.compile(r"\s*,\s*$")


def format_comma_positions(
    query: str, comma_position: CommaPosition, indent: str
) -> str:
    if comma_position is CommaPosition.after:
        return query
    lines = query.split("\n")
    new_lines: List[str] = []
    i = 0
    while i < len(lines):
        if not lines[i].endswith(","):
            new_lines.append(lines[i])
            i += 1
            continue
        # a comma-bound run plus the line holding its last item
        end = i
        while end < len(lines) and lines[end].endswith(","):
            end += 1
        run = lines[i : end + 1]
        if comma_position is CommaPosition.tabular:
            new_lines += _tabulate_commas(run)
        else:
            new_lines += _commas_before(run, indent)
        i = end + 1
    return "\n".join(new_lines)


def _tabulate_commas(run: Sequence[str]) -> List[str]:
    stripped = [line[:-1] if line.endswith(",") else line for line in run]
    width = max(len(line) for line in stripped)
    return [
        line.ljust(width) + "," if original.endswith(",") else line
        for line, original in zip(stripped, run)
    ]


def _commas_before(run: Sequence[str], indent: str) -> List[str]:
    is_tabs = "\t" in indent
    unit = "\t" if is_tabs else indent
    # tabs are treated as four columns
    comma_unit = "    " if is_tabs else indent
    comma_unit = comma_unit[:-2] + ", " if len(comma_unit) >= 2 else ", "
    new_lines = []
    for j, line in enumerate(run):
        if line.endswith(","):
            line = line[:-1]
        if j > 0:
            content = line.lstrip()
            leading = line[: len(line) - len(content)]
            if leading.endswith(unit):
                leading = leading[: -len(unit)] + comma_unit
            else:
                leading += ", "
            line = leading + content
        new_lines.append(line)
    return new_lines


def format_alias_positions(query: str) -> str:
    lines = query.split("\n")
    new_lines: List[str] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        i += 1
        if not _SELECT_RE.match(line):
            new_lines.append(line)
            continue
        if line.endswith(","):
            # ten-space layouts keep the first column on the SELECT line
            alias_lines = [line]
        else:
            new_lines.append(line)
            if _SELECT_WITH_ITEM_RE.match(line) or i >= len(lines):
                continue
            alias_lines = [lines[i]]
            i += 1
        while alias_lines[-1].endswith(",") and i < len(lines):
            alias_lines.append(lines[i])
            i += 1
        new_lines += _tabulate_aliases(alias_lines)
    return "\n".join(new_lines)


def _split_alias(line: str) -> Tuple[str, str, Optional[str]]:
    match = _ALIAS_RE.match(line)
    if match is None:
        return line, "", None
    return match.group(1), match.group(2) or "", match.group(3)


def _tabulate_aliases(lines: Sequence[str]) -> List[str]:
    split_lines = [_split_alias(line) for line in lines]
    width = max(
        len(_TRAILING_COMMA_RE.sub("", preceding)) for preceding, _, _ in split_lines
    )
    new_lines = []
    for preceding, as_keyword, alias in split_lines:
        if alias is None:
            new_lines.append(preceding)
        else:
            padding = " " * (width - len(preceding) + 1)
            new_lines.append(preceding + padding + as_keyword + alias)
    return new_lines

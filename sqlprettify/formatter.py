import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Sequence

from .api import tokenize_sql
from .indentation import Indentation
from .inline_block import InlineBlock
from .options import AliasMode, FormatOptions, KeywordMode, NewlineMode
from .params import Params, UnresolvedParameterError
from .postformat import format_alias_positions, format_comma_positions
from .tokens import (
    ZWS,
    Token,
    TokenType,
    equalize_whitespace,
    flatten,
    has_value,
    is_command,
    is_reserved,
    is_token,
    normalize,
)

logger = logging.getLogger(__name__)

TEN_SPACE_KEYWORD_WIDTH = 9

# An opening parenthesis keeps the space before it after these
PRESERVE_WHITESPACE_FOR = frozenset(
    {TokenType.BLOCK_START, TokenType.LINE_COMMENT, TokenType.OPERATOR}
)

_COMMENT_NEWLINE_RE = re.compile(r"[ \t]*\n[ \t]*")


def format(sql: str, options: Optional[FormatOptions] = None, **kwargs: Any) -> str:
    """Format a SQL string.

    Keyword arguments override individual fields of ``options``::

        format("select a from b", uppercase=False, indent="    ")

    """
    if options is None:
        options = FormatOptions(**kwargs)
    elif kwargs:
        options = replace(options, **kwargs)
    return Formatter(options).format(sql)


def trim_spaces_end(text: str) -> str:
    return text.rstrip(" \t" + ZWS)


@dataclass
class Formatter:
    options: FormatOptions
    tokens: List[Token] = field(default_factory=list)
    index: int = -1
    # whether the clause being formatted puts each item on its own line
    current_newline: bool = True
    within_select: bool = False
    previous_reserved: Optional[Token] = None
    indentation: Indentation = field(init=False)
    inline_block: InlineBlock = field(init=False)
    params: Params = field(init=False)

    def __post_init__(self) -> None:
        self.indentation = Indentation(self.options.indent_unit)
        self.inline_block = InlineBlock(self.options.line_width)
        self.params = Params(self.options.params)

    def format(self, sql: str) -> str:
        self.tokens = tokenize_sql(sql, self.options.dialect)
        query = self.format_tokens()
        query = self.post_format(query)
        return query.lstrip("\n").rstrip()

    def post_format(self, query: str) -> str:
        if self.options.tabulate_alias:
            query = format_alias_positions(query)
        return format_comma_positions(
            query, self.options.comma_position, self.options.indent_unit
        )

    def format_tokens(self) -> str:
        query = ""
        for index, token in enumerate(self.tokens):
            self.index = index
            if is_reserved(token):
                self.previous_reserved = token
                if token.typ is not TokenType.RESERVED_KEYWORD:
                    token = self.ten_spaced(token)
                if token.typ is TokenType.RESERVED_COMMAND:
                    self.within_select = is_token(
                        token, "SELECT", TokenType.RESERVED_COMMAND
                    )
            method = getattr(
                self, f"format_{token.typ.name.lower()}", self.generic_format
            )
            query = method(token, query)
        return query.replace(ZWS, " ")

    def generic_format(self, token: Token, query: str) -> str:
        raise NotImplementedError(token)

    # Token kinds

    def format_line_comment(self, token: Token, query: str) -> str:
        return self.add_newline(query + self.show(token))

    def format_block_comment(self, token: Token, query: str) -> str:
        query = self.add_newline(query) + self.indent_comment(token.value)
        return self.add_newline(query)

    def format_reserved_command(self, token: Token, query: str) -> str:
        if is_token(token, "DELIMITER", TokenType.RESERVED_COMMAND):
            return self.format_delimiter(token, query)
        self.indentation.decrease_top_level()
        self.current_newline = self.check_newline(token)
        query = self.add_newline(query)

        following = self.look_ahead()
        if self.options.is_ten_space:
            if not has_value(following, "("):
                self.indentation.increase_top_level()
        elif not (
            has_value(following, "(")
            and is_token(token, "FROM", TokenType.RESERVED_COMMAND)
        ):
            self.indentation.increase_top_level()

        query += self.show(token)
        if self.current_newline and not self.options.is_ten_space:
            return self.add_newline(query)
        return query + " "

    def format_reserved_binary_command(self, token: Token, query: str) -> str:
        text = normalize(token.value)
        is_join = "JOIN" in text or "APPLY" in text
        if not is_join or self.options.is_ten_space:
            # set operators end the clause before them
            self.indentation.decrease_top_level()
        query = self.add_newline(query) + self.show(token)
        if is_join:
            return query + " "
        return self.add_newline(query)

    def format_reserved_dependent_clause(self, token: Token, query: str) -> str:
        if self.inline_block.is_active():
            return self.format_with_spaces(token, query)
        return self.add_newline(query) + self.show(token) + " "

    def format_reserved_logical_operator(self, token: Token, query: str) -> str:
        if (
            is_token(token, "AND", TokenType.RESERVED_LOGICAL_OPERATOR)
            and self.follows_between()
        ):
            return self.format_with_spaces(token, query)
        if self.inline_block.is_active():
            return self.format_with_spaces(token, query)

        if self.options.is_ten_space:
            self.indentation.decrease_top_level()

        if self.options.break_before_boolean_operator:
            if self.current_newline:
                query = self.add_newline(query)
            return query + self.show(token) + " "
        query += self.show(token)
        if self.current_newline:
            return self.add_newline(query)
        return query + " "

    def format_reserved_keyword(self, token: Token, query: str) -> str:
        if is_token(token, "AS", TokenType.RESERVED_KEYWORD) and self.skips_as():
            return query
        return self.format_with_spaces(token, query)

    def format_block_start(self, token: Token, query: str) -> str:
        is_case = is_token(token, "CASE", TokenType.BLOCK_START)
        if is_case:
            query = self.format_with_spaces(token, query)
        else:
            # Take out the preceding space unless there was whitespace there in
            # the original query or another opening parenthesis or line comment
            previous = self.look_behind()
            if not token.whitespace_before and (
                previous is None or previous.typ not in PRESERVE_WHITESPACE_FOR
            ):
                query = trim_spaces_end(query)
            elif not self.options.paren_options.open_paren_newline:
                query = query.rstrip()
                if query:
                    query += " "
            query += self.show(token)
            self.inline_block.begin_if_possible(self.tokens, self.index)

        if not self.inline_block.is_active():
            self.indentation.increase_block_level()
            if not is_case or self.options.newline is NewlineMode.always:
                query = self.add_newline(query)
        return query

    def format_block_end(self, token: Token, query: str) -> str:
        if self.inline_block.is_active():
            if self.inline_block.closes_at(self.index):
                self.inline_block.end()
            if token.value == ")":
                return self.format_with_spaces(token, query, preserve="after")
            return self.format_with_spaces(token, query)

        self.indentation.decrease_block_level()
        if self.options.is_ten_space:
            query = self.add_newline(query) + self.options.indent_unit
        elif self.options.paren_options.close_paren_newline:
            query = self.add_newline(query)
        else:
            query = query.rstrip() + " "
        return self.format_with_spaces(token, query)

    def format_placeholder(self, token: Token, query: str) -> str:
        try:
            value = self.params.get(token)
        except UnresolvedParameterError as e:
            logger.warning("%s, leaving the placeholder in place", e)
            value = token.value
        return query + value + " "

    def format_operator(self, token: Token, query: str) -> str:
        value = token.value
        if is_token(self.look_behind(), "DELIMITER", TokenType.RESERVED_COMMAND):
            # the new delimiter itself, as in DELIMITER ;
            return self.format_with_spaces(token, query)
        elif value == ",":
            return self.format_comma(token, query)
        elif value == ";":
            return self.format_query_separator(token, query)
        elif value in ("$", "["):
            return self.format_with_spaces(token, query, preserve="before")
        elif value in (":", "]"):
            return self.format_with_spaces(token, query, preserve="after")
        elif value in (".", "::", "{", "}", "`"):
            return self.format_without_spaces(token, query)

        previous = self.look_behind()
        if self.options.dense_operators and not (
            previous is not None and previous.typ is TokenType.RESERVED_COMMAND
        ):
            # SELECT * keeps its space
            return self.format_without_spaces(token, query)
        return self.format_with_spaces(token, query)

    def format_word(self, token: Token, query: str) -> str:
        if self.options.alias_as is not AliasMode.never:
            query = self.format_alias(token, query)
        return self.format_with_spaces(token, query)

    format_string = format_word
    format_number = format_word

    # Helpers for the token kinds

    def format_comma(self, token: Token, query: str) -> str:
        query = trim_spaces_end(query) + self.show(token) + " "
        if self.inline_block.is_active():
            return query
        elif is_token(self.previous_reserved, "LIMIT", TokenType.RESERVED_COMMAND):
            return query
        elif self.current_newline:
            return self.add_newline(query)
        return query

    def format_delimiter(self, token: Token, query: str) -> str:
        self.indentation.decrease_top_level()
        return self.add_newline(query) + self.show(token) + " "

    def format_query_separator(self, token: Token, query: str) -> str:
        self.indentation.reset()
        query = trim_spaces_end(query)
        if self.options.semicolon_newline:
            query += "\n"
            if self.options.is_ten_space:
                query += self.options.indent_unit
        newlines = "\n" * (self.options.lines_between_statements + 1)
        return query + self.show(token) + newlines

    def format_alias(self, token: Token, query: str) -> str:
        if token.typ is not TokenType.WORD:
            return query
        previous = self.look_behind()
        following = self.look_ahead()

        missing_table_alias = self.options.alias_as is AliasMode.always and has_value(
            previous, ")"
        )
        missing_select_column_alias = self.within_select and (
            is_token(previous, "END", TokenType.BLOCK_END)
            or (
                previous is not None
                and previous.typ is TokenType.WORD
                and (
                    following is None
                    or following.value in (",", ";")
                    or is_command(following)
                )
            )
        )
        if missing_table_alias or missing_select_column_alias:
            as_token = TokenType.RESERVED_KEYWORD.make("AS")
            return self.format_with_spaces(as_token, query)
        return query

    def skips_as(self) -> bool:
        mode = self.options.alias_as
        previous = self.look_behind()
        following = self.look_ahead()
        if has_value(following, "("):
            # WITH name AS (
            return False
        if mode is AliasMode.never:
            # CAST(x AS type) and friends
            return not self.inline_block.is_active()
        # (subquery) [AS] alias, but not SELECT (a) [AS] alpha
        return (
            mode is AliasMode.select
            and has_value(previous, ")")
            and not self.within_select
        )

    def follows_between(self) -> bool:
        """Is the current AND the one in BETWEEN x AND y?"""
        depth = 0
        for i in range(self.index - 1, -1, -1):
            token = self.tokens[i]
            if token.typ is TokenType.BLOCK_END:
                depth += 1
            elif token.typ is TokenType.BLOCK_START:
                depth -= 1
                if depth < 0:
                    return False
            elif depth > 0:
                continue
            elif is_token(token, "BETWEEN", TokenType.RESERVED_KEYWORD):
                return True
            elif token.typ is TokenType.RESERVED_KEYWORD:
                # keyword operands such as CURRENT_DATE or COUNT(x)
                continue
            elif is_reserved(token) or token.value in (",", ";"):
                return False
        return False

    def check_newline(self, token: Token) -> bool:
        clause = self.clause_tokens(self.index)
        newline = self.options.newline
        if newline is NewlineMode.always:
            return True
        if any(is_token(t, "CASE", TokenType.BLOCK_START) for t in clause):
            return True
        if newline is NewlineMode.never:
            return False

        num_items = count_items(clause)
        inline_width = (
            len(self.indentation.get_indent())
            + len(self.show(token))
            + 1
            + len(flatten(clause))
        )
        logger.debug(
            "%s clause: %d items, %d columns inline",
            normalize(token.value),
            num_items,
            inline_width,
        )
        if newline is NewlineMode.line_width:
            return inline_width > self.options.line_width
        return num_items > newline or inline_width > self.options.line_width

    def clause_tokens(self, index: int) -> List[Token]:
        """Tokens after the command at index, up to the next command or ;."""
        clause = []
        for token in self.tokens[index + 1 :]:
            if is_command(token) or token.value == ";":
                break
            clause.append(token)
        return clause

    # Output

    def format_with_spaces(
        self, token: Token, query: str, preserve: str = "both"
    ) -> str:
        before = trim_spaces_end(query) if preserve == "after" else query
        after = "" if preserve == "before" else " "
        return before + self.show(token) + after

    def format_without_spaces(self, token: Token, query: str) -> str:
        return trim_spaces_end(query) + self.show(token)

    def show(self, token: Token) -> str:
        """Convert a token to text, applying keyword case."""
        if is_reserved(token) or token.typ in (
            TokenType.BLOCK_START,
            TokenType.BLOCK_END,
        ):
            value = equalize_whitespace(token.value)
            return value.upper() if self.options.uppercase else value.lower()
        return token.value

    def add_newline(self, query: str) -> str:
        query = trim_spaces_end(query)
        if not query.endswith("\n"):
            query += "\n"
        return query + self.indentation.get_indent()

    def indent_comment(self, comment: str) -> str:
        indent = "\n" + self.indentation.get_indent() + " "
        return _COMMENT_NEWLINE_RE.sub(lambda _: indent, comment)

    def ten_spaced(self, token: Token) -> Token:
        """Pad a keyword to the ten-space column with zero-width spaces."""
        if not self.options.is_ten_space:
            return token
        head = equalize_whitespace(token.value)
        tail = ""
        if len(head) >= TEN_SPACE_KEYWORD_WIDTH + 1 and " " in head:
            # long keywords like INNER JOIN only pad their first word
            head, rest = head.split(" ", 1)
            tail = " " + rest
        padding = ZWS * max(TEN_SPACE_KEYWORD_WIDTH - len(head), 0)
        if self.options.keyword_position is KeywordMode.ten_space_left:
            head += padding
        else:
            head = padding + head
        return replace(token, value=head + tail)

    def look_behind(self, n: int = 1) -> Optional[Token]:
        index = self.index - n
        if index < 0:
            return None
        return self.tokens[index]

    def look_ahead(self, n: int = 1) -> Optional[Token]:
        index = self.index + n
        if index >= len(self.tokens):
            return None
        return self.tokens[index]


def count_items(clause: Sequence[Token]) -> int:
    """Number of comma-separated items, ignoring commas inside parentheses."""
    count = 1
    depth = 0
    for token in clause:
        if token.typ is TokenType.BLOCK_START:
            depth += 1
        elif token.typ is TokenType.BLOCK_END:
            depth = max(depth - 1, 0)
        elif token.value == "," and depth == 0:
            count += 1
    return count

"""

Indentation tracking for the formatter.

Each open level is either a top-level clause (SELECT, FROM, ...) or a
block (a parenthesis that is not rendered inline). Closing a block also
closes the top-level clauses opened inside it, so a subquery leaves the
indentation exactly where it found it.

"""
import enum
from dataclasses import dataclass, field
from typing import List

from .options import DEFAULT_INDENT


class IndentType(enum.Enum):
    top_level = 1
    block_level = 2


@dataclass
class Indentation:
    indent: str = DEFAULT_INDENT
    indent_types: List[IndentType] = field(default_factory=list)

    @property
    def top_level_depth(self) -> int:
        return self.indent_types.count(IndentType.top_level)

    @property
    def block_depth(self) -> int:
        return self.indent_types.count(IndentType.block_level)

    def get_indent(self) -> str:
        return self.indent * len(self.indent_types)

    def increase_top_level(self) -> None:
        self.indent_types.append(IndentType.top_level)

    def increase_block_level(self) -> None:
        self.indent_types.append(IndentType.block_level)

    def decrease_top_level(self) -> None:
        if self.indent_types and self.indent_types[-1] is IndentType.top_level:
            self.indent_types.pop()

    def decrease_block_level(self) -> None:
        while self.indent_types:
            if self.indent_types.pop() is not IndentType.top_level:
                break

    def reset(self) -> None:
        self.indent_types.clear()

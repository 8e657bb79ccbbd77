from dataclasses import dataclass
from typing import Optional, Sequence

from .options import DEFAULT_LINE_WIDTH
from .tokens import Token, TokenType, equalize_whitespace, flatten

FORBIDDEN_TYPES = frozenset(
    {
        TokenType.RESERVED_COMMAND,
        TokenType.RESERVED_BINARY_COMMAND,
        TokenType.LINE_COMMENT,
        TokenType.BLOCK_COMMENT,
    }
)


@dataclass
class InlineSpan:
    start: int
    end: int  # index of the matching BLOCK_END


@dataclass
class InlineBlock:
    """Decides whether a parenthesized block is written on a single line.

    Only one span is active at a time; blocks nested inside it are part of
    the same inline run.

    """

    line_width: int = DEFAULT_LINE_WIDTH
    active: Optional[InlineSpan] = None

    def begin_if_possible(self, tokens: Sequence[Token], index: int) -> None:
        if self.active is not None:
            return
        end = self._find_inline_end(tokens, index)
        if end is not None:
            self.active = InlineSpan(index, end)

    def is_active(self) -> bool:
        return self.active is not None

    def closes_at(self, index: int) -> bool:
        return self.active is not None and self.active.end == index

    def end(self) -> None:
        self.active = None

    def _find_inline_end(self, tokens: Sequence[Token], index: int) -> Optional[int]:
        width = 0
        level = 0
        for i in range(index, len(tokens)):
            token = tokens[i]
            if token.typ in FORBIDDEN_TYPES or token.value == ";":
                return None
            # lower bound of the flattened width
            width += len(equalize_whitespace(token.value))
            if width > self.line_width:
                return None
            if token.typ is TokenType.BLOCK_START:
                level += 1
            elif token.typ is TokenType.BLOCK_END:
                level -= 1
                if level == 0:
                    span = flatten(tokens[index : i + 1])
                    return i if len(span) <= self.line_width else None
        return None

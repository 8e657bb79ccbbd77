import enum
import re
from dataclasses import dataclass
from typing import Iterable, Optional

# Padding used by the ten-space keyword modes. It is not whitespace, so it
# survives whitespace normalization until the end of the formatting pass.
ZWS = "\u200b"

_WHITESPACE_RE = re.compile(r"\s+")


class TokenType(enum.Enum):
    WORD = 1
    STRING = 2
    RESERVED_KEYWORD = 3
    RESERVED_LOGICAL_OPERATOR = 4
    RESERVED_DEPENDENT_CLAUSE = 5
    RESERVED_BINARY_COMMAND = 6
    RESERVED_COMMAND = 7
    OPERATOR = 8
    BLOCK_START = 9
    BLOCK_END = 10
    LINE_COMMENT = 11
    BLOCK_COMMENT = 12
    NUMBER = 13
    PLACEHOLDER = 14

    def make(
        self, value: str, whitespace_before: str = "", key: Optional[str] = None
    ) -> "Token":
        return Token(self, value, whitespace_before, key)


@dataclass(frozen=True)
class Token:
    typ: TokenType
    value: str
    whitespace_before: str = ""
    # parameter key of a placeholder; None for positional placeholders
    key: Optional[str] = None


RESERVED_TYPES = frozenset(
    {
        TokenType.RESERVED_KEYWORD,
        TokenType.RESERVED_LOGICAL_OPERATOR,
        TokenType.RESERVED_DEPENDENT_CLAUSE,
        TokenType.RESERVED_COMMAND,
        TokenType.RESERVED_BINARY_COMMAND,
    }
)
COMMAND_TYPES = frozenset(
    {TokenType.RESERVED_COMMAND, TokenType.RESERVED_BINARY_COMMAND}
)


def equalize_whitespace(text: str) -> str:
    """Replace any run of whitespace with a single space."""
    return _WHITESPACE_RE.sub(" ", text)


def normalize(value: str) -> str:
    return equalize_whitespace(value.replace(ZWS, " ")).strip().upper()


def is_reserved(token: Optional[Token]) -> bool:
    return token is not None and token.typ in RESERVED_TYPES


def is_command(token: Optional[Token]) -> bool:
    return token is not None and token.typ in COMMAND_TYPES


def is_token(token: Optional[Token], value: str, typ: TokenType) -> bool:
    """Is this token the given word of the given kind?

    Comparison ignores case, ten-space padding and internal whitespace, so
    ``is_token(token, "GROUP BY", TokenType.RESERVED_COMMAND)`` matches
    ``group\\n  by`` too.

    """
    return token is not None and token.typ is typ and normalize(token.value) == value


def has_value(token: Optional[Token], value: str) -> bool:
    return token is not None and token.value == value


_NO_SPACE_BEFORE = {",", ")", ".", ";"}
_NO_SPACE_AFTER = {"(", "."}


def flatten(tokens: Iterable[Token]) -> str:
    """Render tokens on a single line, the way the formatter would inline them."""
    pieces = []
    previous = None
    for token in tokens:
        value = equalize_whitespace(token.value)
        glued = value == "(" and not token.whitespace_before
        if previous is not None and not (
            glued or value in _NO_SPACE_BEFORE or previous in _NO_SPACE_AFTER
        ):
            pieces.append(" ")
        pieces.append(value)
        previous = value
    return "".join(pieces)

"""

The mangler merges multi-word reserved phrases into a single token, so
the formatter sees GROUP BY or LEFT OUTER JOIN as one unit.

The merged token keeps the original whitespace between the words; the
formatter collapses it when the token is written out. Words are only
merged when nothing but whitespace separates them, so a comment inside
a phrase keeps the words apart.

"""
from typing import List, Sequence, Tuple

from .dialect import Dialect
from .tokens import Token, TokenType


def mangle(tokens: Sequence[Token], dialect: Dialect) -> List[Token]:
    phrases = dialect.get_syntax().phrases
    new_tokens = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        merged = None
        if token.typ is TokenType.WORD and not _follows_dot(tokens, i):
            for words in phrases.get(token.value.upper(), ()):
                candidate = tokens[i : i + len(words)]
                if _matches(candidate, words):
                    merged = _merge_tokens(candidate)
                    break
        if merged is None:
            new_tokens.append(token)
            i += 1
        else:
            new_tokens.append(merged)
            i += len(candidate)
    return new_tokens


def _follows_dot(tokens: Sequence[Token], index: int) -> bool:
    return index > 0 and tokens[index - 1].value == "."


def _matches(candidate: Sequence[Token], words: Tuple[str, ...]) -> bool:
    if len(candidate) != len(words):
        return False
    return all(
        token.typ is TokenType.WORD and token.value.upper() == word
        for token, word in zip(candidate, words)
    )


def _merge_tokens(tokens: Sequence[Token]) -> Token:
    first, *rest = tokens
    value = first.value + "".join(t.whitespace_before + t.value for t in rest)
    return TokenType.WORD.make(value, first.whitespace_before)

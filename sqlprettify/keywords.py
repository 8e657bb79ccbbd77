from dataclasses import replace
from typing import Iterable, List, Optional

from .dialect import Dialect, Syntax
from .tokens import Token, TokenType, equalize_whitespace


def distinguish_keywords(tokens: Iterable[Token], dialect: Dialect) -> List[Token]:
    syntax = dialect.get_syntax()
    new_tokens: List[Token] = []
    for token in tokens:
        typ = None
        previous = new_tokens[-1] if new_tokens else None
        # a word after a dot is a column or table name, as in t.from
        if token.typ is TokenType.WORD and not (
            previous is not None and previous.value == "."
        ):
            typ = classify(token.value, syntax)
        new_tokens.append(token if typ is None else replace(token, typ=typ))
    return new_tokens


def classify(word: str, syntax: Syntax) -> Optional[TokenType]:
    text = equalize_whitespace(word).upper()
    if text == "CASE":
        return TokenType.BLOCK_START
    elif text == "END":
        return TokenType.BLOCK_END
    elif text in syntax.reserved_commands:
        return TokenType.RESERVED_COMMAND
    elif text in syntax.binary_commands:
        return TokenType.RESERVED_BINARY_COMMAND
    elif text in syntax.dependent_clauses:
        return TokenType.RESERVED_DEPENDENT_CLAUSE
    elif text in syntax.logical_operators:
        return TokenType.RESERVED_LOGICAL_OPERATOR
    elif text in syntax.reserved_keywords:
        return TokenType.RESERVED_KEYWORD
    return None

from typing import List

from .dialect import DEFAULT_DIALECT, Dialect
from .keywords import distinguish_keywords
from .mangler import mangle
from .tokenizer import tokenize
from .tokens import Token


def tokenize_sql(sql: str, dialect: Dialect = DEFAULT_DIALECT) -> List[Token]:
    tokens = tokenize(sql, dialect)
    tokens = mangle(tokens, dialect)
    return distinguish_keywords(tokens, dialect)

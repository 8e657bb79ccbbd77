import re
from collections import defaultdict
from typing import Dict, List, Optional

from .dialect import Dialect, Syntax
from .peeking_iterator import PeekingIterator
from .tokens import Token, TokenType

# Characters that always form an operator on their own
PUNCTUATION = set("()+-*/%<>=!~&|^,;.:$[]{}`@#?\\")

_DOLLAR_QUOTE_RE = re.compile(r"\$(?:[A-Za-z_][A-Za-z_0-9]*)?\$")

OperatorTable = Dict[str, List[str]]


def tokenize(sql: str, dialect: Dialect) -> List[Token]:
    """Split SQL into tokens. Reserved words are still plain WORD tokens here.

    The scan never fails: characters that fit no rule become WORD tokens and
    unterminated strings or comments run to the end of the input.

    """
    syntax = dialect.get_syntax()
    operators = _operator_table(syntax)
    pi = PeekingIterator(sql)
    tokens = []
    while pi.has_next():
        whitespace = pi.consume_while(str.isspace)
        if not pi.has_next():
            break
        tokens.append(_next_token(pi, syntax, operators, whitespace))
    return tokens


def _next_token(
    pi: PeekingIterator, syntax: Syntax, operators: OperatorTable, whitespace: str
) -> Token:
    if pi.startswith("/*"):
        return TokenType.BLOCK_COMMENT.make(pi.consume_until("*/"), whitespace)
    for start in syntax.line_comment_starts:
        if pi.startswith(start):
            text = pi.consume_while(lambda c: c not in "\r\n")
            return TokenType.LINE_COMMENT.make(text, whitespace)

    char = pi.peek()
    assert char is not None
    if char in syntax.string_quotes:
        pi.next()
        text = char + _consume_string_literal(pi, char, syntax.backslash_escapes)
        return TokenType.STRING.make(text, whitespace)
    if syntax.dollar_quoted_strings and char == "$":
        match = _DOLLAR_QUOTE_RE.match(pi.text, pi.next_pos)
        if match is not None:
            tag = pi.take(len(match.group()))
            return TokenType.STRING.make(tag + pi.consume_until(tag), whitespace)

    placeholder = _consume_placeholder(pi, syntax, whitespace)
    if placeholder is not None:
        return placeholder

    if char.isdigit():
        return TokenType.NUMBER.make(_consume_number(pi), whitespace)
    if _is_word_start(char):
        text = _consume_identifier(pi)
        if text.upper() in syntax.string_prefixes and pi.peek() == "'":
            pi.next()
            backslash_escapes = syntax.backslash_escapes or text.upper() == "E"
            text += "'" + _consume_string_literal(pi, "'", backslash_escapes)
            return TokenType.STRING.make(text, whitespace)
        return TokenType.WORD.make(text, whitespace)
    for prefix in syntax.variable_prefixes:
        if pi.startswith(prefix) and _is_word_start(pi.peek(len(prefix))):
            text = pi.take(len(prefix)) + _consume_identifier(pi)
            return TokenType.WORD.make(text, whitespace)

    operator = _consume_operator(pi, operators)
    if operator == "(":
        return TokenType.BLOCK_START.make(operator, whitespace)
    elif operator == ")":
        return TokenType.BLOCK_END.make(operator, whitespace)
    elif operator is not None:
        return TokenType.OPERATOR.make(operator, whitespace)

    text = pi.consume_while(
        lambda c: not c.isspace() and not _is_word_start(c) and c not in PUNCTUATION
    )
    return TokenType.WORD.make(text, whitespace)


def _operator_table(syntax: Syntax) -> OperatorTable:
    starting_char_to_operators: OperatorTable = defaultdict(list)
    for operator in syntax.operators:
        starting_char_to_operators[operator[0]].append(operator)
    for candidates in starting_char_to_operators.values():
        candidates.sort(key=len, reverse=True)
    return starting_char_to_operators


def _consume_operator(pi: PeekingIterator, operators: OperatorTable) -> Optional[str]:
    char = pi.peek()
    if char is None:
        return None
    for operator in operators.get(char, ()):
        if pi.startswith(operator):
            return pi.take(len(operator))
    if char in PUNCTUATION:
        return pi.next()
    return None


def _consume_placeholder(
    pi: PeekingIterator, syntax: Syntax, whitespace: str
) -> Optional[Token]:
    for prefix in syntax.indexed_placeholder_prefixes:
        following = pi.peek(len(prefix))
        if pi.startswith(prefix) and following is not None and following.isdigit():
            pi.take(len(prefix))
            key = pi.consume_while(str.isdigit)
            return TokenType.PLACEHOLDER.make(prefix + key, whitespace, key)
    for prefix in syntax.named_placeholder_prefixes:
        if pi.startswith(prefix) and _is_word_start(pi.peek(len(prefix))):
            pi.take(len(prefix))
            key = _consume_identifier(pi)
            return TokenType.PLACEHOLDER.make(prefix + key, whitespace, key)
    if syntax.positional_placeholder and pi.peek() == "?":
        return TokenType.PLACEHOLDER.make(pi.next(), whitespace)
    if syntax.pyformat_placeholders and pi.peek() == "%" and not _follows_operand(pi):
        # Python DB-API style: %s and %(name)s, but a%s is a modulo
        if pi.peek(1) == "s" and not _is_word_char(pi.peek(2)):
            return TokenType.PLACEHOLDER.make(pi.take(2), whitespace)
        if pi.startswith("%(") and _is_word_start(pi.peek(2)):
            start = pi.next_pos
            pi.take(2)
            key = _consume_identifier(pi)
            if pi.startswith(")s"):
                pi.take(2)
                return TokenType.PLACEHOLDER.make(f"%({key})s", whitespace, key)
            pi.wind_back(pi.next_pos - start)
    return None


def _consume_string_literal(
    pi: PeekingIterator, end: str, backslash_escapes: bool
) -> str:
    chars = []
    for c in pi:
        chars.append(c)
        if backslash_escapes and c == "\\":
            if pi.has_next():
                chars.append(pi.next())
            continue
        if c == end:
            # In a '-quoted string, you can use '' to escape a '
            if pi.peek() == end:
                chars.append(pi.next())
                continue
            break
    return "".join(chars)


def _consume_number(pi: PeekingIterator) -> str:
    if pi.startswith("0x") or pi.startswith("0X"):
        return pi.take(2) + pi.consume_while(lambda c: c in "0123456789abcdefABCDEF")
    text = pi.consume_while(str.isdigit)
    following = pi.peek(1)
    if pi.peek() == "." and following is not None and following.isdigit():
        text += pi.take(1) + pi.consume_while(str.isdigit)
    if pi.peek() in ("e", "E"):
        following = pi.peek(1)
        if following in ("-", "+"):
            following = pi.peek(2)
            sign_length = 2
        else:
            sign_length = 1
        if following is not None and following.isdigit():
            text += pi.take(sign_length) + pi.consume_while(str.isdigit)
    return text


def _is_word_start(char: Optional[str]) -> bool:
    return char is not None and (char.isalpha() or char == "_")


def _is_word_char(char: Optional[str]) -> bool:
    return char is not None and (char.isalnum() or char == "_" or char == "$")


def _follows_operand(pi: PeekingIterator) -> bool:
    if pi.next_pos == 0:
        return False
    previous = pi.text[pi.next_pos - 1]
    return _is_word_char(previous) or previous in ")'\"`"


def _consume_identifier(pi: PeekingIterator) -> str:
    return pi.consume_while(_is_word_char)

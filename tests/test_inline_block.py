from sqlprettify.api import tokenize_sql
from sqlprettify.inline_block import InlineBlock


def test_inline() -> None:
    tokens = tokenize_sql("x in (a, f(b)) and (c)")
    block = InlineBlock(50)
    block.begin_if_possible(tokens, 2)
    assert block.is_active()
    assert not block.closes_at(7)
    assert block.closes_at(9)

    # nested blocks stay part of the active span
    block.begin_if_possible(tokens, 6)
    assert block.closes_at(9)
    block.end()
    assert not block.is_active()


def test_forbidden_tokens() -> None:
    for sql in ["(select a)", "(a -- b\n)", "(a /* b */)", "(a; b)", "(a union b)"]:
        block = InlineBlock(50)
        block.begin_if_possible(tokenize_sql(sql), 0)
        assert not block.is_active(), sql


def test_too_wide() -> None:
    tokens = tokenize_sql("(a, b)")
    block = InlineBlock(5)
    block.begin_if_possible(tokens, 0)
    assert not block.is_active()
    block = InlineBlock(6)
    block.begin_if_possible(tokens, 0)
    assert block.is_active()


def test_unmatched() -> None:
    block = InlineBlock(50)
    block.begin_if_possible(tokenize_sql("(a, b"), 0)
    assert not block.is_active()

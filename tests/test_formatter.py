import logging
from typing import Any

import pytest

from sqlprettify.dialect import Dialect, Vendor
from sqlprettify.formatter import format
from sqlprettify.options import (
    AliasMode,
    CommaPosition,
    FormatOptions,
    InvalidOptionsError,
    KeywordMode,
    NewlineMode,
    ParenOptions,
    Parameters,
)


def check(sql: str, expected: str, **kwargs: Any) -> None:
    actual = format(sql, **kwargs)
    assert actual == expected, actual
    assert format(actual, **kwargs) == expected, "not idempotent"


def test_basic() -> None:
    check("select a,b from t", "SELECT\n  a,\n  b\nFROM\n  t")
    check("SELECT a FROM t", "select\n  a\nfrom\n  t", uppercase=False)
    check(
        "SELECT Foo FROM Bar WHERE x IS NOT NULL",
        "select\n  Foo\nfrom\n  Bar\nwhere\n  x is not null",
        uppercase=False,
    )
    check("select a from t group   by a", "SELECT\n  a\nFROM\n  t\nGROUP BY\n  a")
    check("select a from t limit 5, 10", "SELECT\n  a\nFROM\n  t\nLIMIT\n  5, 10")
    assert format("   ") == ""


def test_indent() -> None:
    check("select a from t", "SELECT\n    a\nFROM\n    t", indent="    ")
    check("select a from t", "SELECT\n\ta\nFROM\n\tt", indent="\t")


def test_boolean_operators() -> None:
    sql = "select a from t where x = 1 and y = 2"
    check(sql, "SELECT\n  a\nFROM\n  t\nWHERE\n  x = 1\n  AND y = 2")
    check(
        sql,
        "SELECT\n  a\nFROM\n  t\nWHERE\n  x = 1 AND\n  y = 2",
        break_before_boolean_operator=False,
    )
    check(
        "select * from t where a between 1 and 2",
        "SELECT\n  *\nFROM\n  t\nWHERE\n  a BETWEEN 1 AND 2",
    )
    check(
        "select * from t where d between current_date and current_timestamp",
        "SELECT\n  *\nFROM\n  t\nWHERE\n  d BETWEEN CURRENT_DATE AND CURRENT_TIMESTAMP",
    )
    check(
        "select * from t where n between count(a) and 3 and m = 1",
        "SELECT\n  *\nFROM\n  t\nWHERE\n  n BETWEEN COUNT(a) AND 3\n  AND m = 1",
    )


def test_newline_modes() -> None:
    check(
        "select a, b from t where x = 1 and y = 2",
        "SELECT a, b\nFROM t\nWHERE x = 1 AND y = 2",
        newline=NewlineMode.never,
    )
    check("select a, b from t", "SELECT a, b\nFROM t", newline=NewlineMode.line_width)
    check(
        "select aaaaaa, bbbbbbbb, ccccc from t",
        "SELECT\n  aaaaaa,\n  bbbbbbbb,\n  ccccc\nFROM t",
        newline=NewlineMode.line_width,
        line_width=20,
    )
    check(
        "select a, b, c from t where x = 1",
        "SELECT\n  a,\n  b,\n  c\nFROM t\nWHERE x = 1",
        newline=2,
    )
    check("select a, b from t", "SELECT a, b\nFROM t", newline=2)


def test_case() -> None:
    sql = "select case when a then b else c end from t"
    check(sql, "SELECT\n  CASE\n    WHEN a THEN b\n    ELSE c\n  END\nFROM\n  t")
    check(
        sql,
        "SELECT\n  CASE\n    WHEN a THEN b\n    ELSE c\n  END\nFROM t",
        newline=NewlineMode.never,
    )


def test_alias() -> None:
    check("select a b, c d from t", "SELECT\n  a AS b,\n  c AS d\nFROM\n  t")
    check("select a as b from t", "SELECT\n  a b\nFROM\n  t", alias_as=AliasMode.never)
    sql = "select a from (select b from c) x"
    check(
        sql,
        "SELECT\n  a\nFROM\n(\n  SELECT\n    b\n  FROM\n    c\n) AS x",
        alias_as=AliasMode.always,
    )
    check(sql, "SELECT\n  a\nFROM\n(\n  SELECT\n    b\n  FROM\n    c\n) x")
    check(
        "select a from (select b from c) as x",
        "SELECT\n  a\nFROM\n(\n  SELECT\n    b\n  FROM\n    c\n) x",
    )


def test_tabulate_alias() -> None:
    check(
        "SELECT a AS x, bb AS yy FROM t",
        "SELECT\n  a  AS x,\n  bb AS yy\nFROM\n  t",
        tabulate_alias=True,
    )


def test_statements() -> None:
    check("select a; select b", "SELECT\n  a;\n\nSELECT\n  b")
    check(
        "select a; select b",
        "SELECT\n  a;\n\n\nSELECT\n  b",
        lines_between_statements=2,
    )
    check("select a; select b", "SELECT\n  a;\nSELECT\n  b", lines_between_statements=0)
    check(
        "select a; select b",
        "SELECT\n  a\n;\n\nSELECT\n  b",
        semicolon_newline=True,
    )


def test_ten_space() -> None:
    sql = "select a, b from t where x = 1"
    check(
        sql,
        "SELECT    a,\n          b\nFROM      t\nWHERE     x = 1",
        keyword_position=KeywordMode.ten_space_left,
    )
    check(
        sql,
        "   SELECT a,\n          b\n     FROM t\n    WHERE x = 1",
        keyword_position=KeywordMode.ten_space_right,
    )


def test_comma_position() -> None:
    sql = "select a, bbb, c from t"
    check(
        sql,
        "SELECT\n  a  ,\n  bbb,\n  c\nFROM\n  t",
        comma_position=CommaPosition.tabular,
    )
    assert (
        format(sql, comma_position=CommaPosition.before)
        == "SELECT\n  a\n, bbb\n, c\nFROM\n  t"
    )
    assert (
        format(sql, comma_position=CommaPosition.before, indent="    ")
        == "SELECT\n    a\n  , bbb\n  , c\nFROM\n    t"
    )


def test_params() -> None:
    check(
        "select * from t where a = ? and b = :name",
        "SELECT\n  *\nFROM\n  t\nWHERE\n  a = 1\n  AND b = 'x'",
        params=Parameters(["1"], {"name": "'x'"}),
    )
    check(
        "select * from t where a = ? and b = :name",
        "SELECT\n  *\nFROM\n  t\nWHERE\n  a = ?\n  AND b = :name",
    )


def test_unresolved_param(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="sqlprettify.formatter"):
        assert format("select ?", params=Parameters()) == "SELECT\n  ?"
    assert "leaving the placeholder in place" in caplog.text


def test_parens() -> None:
    check(
        "select a from t where x in (1, 2, 3)",
        "SELECT\n  a\nFROM\n  t\nWHERE\n  x IN (1, 2, 3)",
    )
    check("select count(a) from t", "SELECT\n  COUNT(a)\nFROM\n  t")
    check(
        "select a from t where x in (select b from c)",
        "SELECT\n  a\nFROM\n  t\nWHERE\n  x IN (\n"
        "    SELECT\n      b\n    FROM\n      c\n  )",
    )


def test_unbalanced() -> None:
    assert format("select a) from t") == "SELECT\n  a\n)\nFROM\n  t"


def test_joins_and_unions() -> None:
    check(
        "select a from t inner join u on t.id = u.id",
        "SELECT\n  a\nFROM\n  t\n  INNER JOIN u ON t.id = u.id",
    )
    check(
        "select a from t union select b from u",
        "SELECT\n  a\nFROM\n  t\nUNION\nSELECT\n  b\nFROM\n  u",
    )


def test_dense_operators() -> None:
    check(
        "select a + b from t where x = 1",
        "SELECT\n  a+b\nFROM\n  t\nWHERE\n  x=1",
        dense_operators=True,
    )


def test_comments() -> None:
    check("select a -- first\nfrom t", "SELECT\n  a -- first\nFROM\n  t")
    check("/* hi */ select a", "/* hi */\nSELECT\n  a")


def test_mysql() -> None:
    check(
        "SELECT @@GLOBAL.time, @@SYSTEM.date, @@hour FROM foo;",
        "SELECT\n  @@GLOBAL.time,\n  @@SYSTEM.date,\n  @@hour\nFROM\n  foo;",
        dialect=Dialect(Vendor.mysql),
    )


def test_delimiter() -> None:
    sql = "DELIMITER $$ CREATE PROCEDURE sp_name() BEGIN END $$\t DELIMITER ;"
    expected = (
        "DELIMITER $$\nCREATE PROCEDURE\n  sp_name() BEGIN\nEND $$\nDELIMITER ;"
    )
    check(sql, expected, dialect=Dialect(Vendor.mysql))
    check(sql, expected, dialect=Dialect(Vendor.mariadb))


def test_cast_operator() -> None:
    check("select a::int from t", "SELECT\n  a::int\nFROM\n  t")
    check(
        "select a::int from t",
        "SELECT\n  a::int\nFROM\n  t",
        dialect=Dialect(Vendor.postgresql),
    )


def test_options_object() -> None:
    options = FormatOptions(uppercase=False)
    assert format("select a from t", options) == "select\n  a\nfrom\n  t"
    assert format("select a from t", options, indent="    ") == (
        "select\n    a\nfrom\n    t"
    )


def test_invalid_options() -> None:
    for kwargs in [
        {"indent": "x"},
        {"indent": ""},
        {"line_width": 0},
        {"lines_between_statements": -1},
        {"newline": 0},
        {"newline": True},
    ]:
        with pytest.raises(InvalidOptionsError):
            FormatOptions(**kwargs)


def test_paren_options() -> None:
    check(
        "select a from (select b from c) x",
        "SELECT\n  a\nFROM (\n  SELECT\n    b\n  FROM\n    c ) x",
        paren_options=ParenOptions(open_paren_newline=False, close_paren_newline=False),
    )


def test_block_comment_whitespace() -> None:
    check(
        "select a /* x  \n   y */ from t",
        "SELECT\n  a\n  /* x\n   y */\nFROM\n  t",
    )


def test_no_trailing_whitespace() -> None:
    queries = [
        "select a /* first  \n\t second   \n */ from t",
        "select a -- note   \nfrom t where x = 1   and y = 2  ;  select 1",
        "select case when a then b else c end from t",
        "select a, b from (select c from d) x",
    ]
    for sql in queries:
        for position in CommaPosition:
            for keyword_position in KeywordMode:
                formatted = format(
                    sql, comma_position=position, keyword_position=keyword_position
                )
                for line in formatted.split("\n"):
                    assert line == line.rstrip(), formatted

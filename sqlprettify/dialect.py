from dataclasses import dataclass, field
import enum
from typing import Dict, FrozenSet, List, Optional, Tuple

Version = Optional[Tuple[int, ...]]


class Vendor(enum.Enum):
    sql = 1
    mysql = 2
    mariadb = 3
    postgresql = 4


@dataclass(frozen=True)
class Syntax:
    """Lexical rules of one SQL dialect."""

    reserved_commands: FrozenSet[str]
    binary_commands: FrozenSet[str]
    dependent_clauses: FrozenSet[str]
    logical_operators: FrozenSet[str]
    reserved_keywords: FrozenSet[str]
    # multi-character operators; single characters are always operators
    operators: FrozenSet[str]
    string_quotes: str = "'\"`"
    # letters that may prefix a '-quoted string, as in N'text'
    string_prefixes: FrozenSet[str] = frozenset({"N"})
    backslash_escapes: bool = False
    dollar_quoted_strings: bool = False
    line_comment_starts: Tuple[str, ...] = ("--",)
    positional_placeholder: bool = True
    indexed_placeholder_prefixes: Tuple[str, ...] = ("?",)
    named_placeholder_prefixes: Tuple[str, ...] = (":", "@")
    # prefixes of variables that are plain words, like MySQL's @@GLOBAL
    variable_prefixes: Tuple[str, ...] = ()
    pyformat_placeholders: bool = True
    phrases: Dict[str, List[Tuple[str, ...]]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        phrases: Dict[str, List[Tuple[str, ...]]] = {}
        for group in (
            self.reserved_commands,
            self.binary_commands,
            self.dependent_clauses,
            self.logical_operators,
            self.reserved_keywords,
        ):
            for keyword in group:
                words = tuple(keyword.split())
                if len(words) > 1:
                    phrases.setdefault(words[0], []).append(words)
        for candidates in phrases.values():
            candidates.sort(key=len, reverse=True)
        object.__setattr__(self, "phrases", phrases)


@dataclass
class Dialect:
    vendor: Vendor
    # If omitted, we assume the most recent version
    version: Version = None
    _syntax: Optional[Syntax] = None

    def get_syntax(self) -> Syntax:
        if self._syntax is not None:
            return self._syntax
        syntax = _compute_syntax(self.vendor, self.version)
        self._syntax = syntax
        return syntax


DEFAULT_DIALECT = Dialect(Vendor.sql)


def version_is_in(
    version: Version, *, start_version: Version = None, end_version: Version = None
) -> bool:
    """Is this version within this range?

    For example, if a feature was added in version 1.1 and removed in 1.3, you would query:

        version_is_in(version, start_version=(1, 1), end_version=(1, 3))

    """
    if version is None:
        # If we haven't specified a version, we assume the most recent version, so anything
        # without an end_version matches.
        return end_version is None
    if start_version is not None and version < start_version:
        return False
    if end_version is not None and version >= end_version:
        return False
    return True


STANDARD_COMMANDS = {
    "ADD",
    "ALTER COLUMN",
    "ALTER TABLE",
    "CREATE TABLE",
    "CREATE VIEW",
    "CREATE OR REPLACE VIEW",
    "DELETE FROM",
    "DROP TABLE",
    "FETCH FIRST",
    "FETCH NEXT",
    "FROM",
    "GROUP BY",
    "HAVING",
    "INSERT INTO",
    "INSERT",
    "LIMIT",
    "MERGE INTO",
    "ORDER BY",
    "PARTITION BY",
    "RETURNING",
    "SELECT",
    "SET",
    "TRUNCATE TABLE",
    "UPDATE",
    "VALUES",
    "WHERE",
    "WITH",
}
STANDARD_BINARY_COMMANDS = {
    "CROSS APPLY",
    "CROSS JOIN",
    "EXCEPT",
    "EXCEPT ALL",
    "FULL JOIN",
    "FULL OUTER JOIN",
    "INNER JOIN",
    "INTERSECT",
    "INTERSECT ALL",
    "JOIN",
    "LEFT JOIN",
    "LEFT OUTER JOIN",
    "NATURAL JOIN",
    "OUTER APPLY",
    "RIGHT JOIN",
    "RIGHT OUTER JOIN",
    "UNION",
    "UNION ALL",
    "UNION DISTINCT",
}
STANDARD_DEPENDENT_CLAUSES = {"WHEN", "ELSE"}
STANDARD_LOGICAL_OPERATORS = {"AND", "OR"}
STANDARD_KEYWORDS = {
    "ALL",
    "ANY",
    "AS",
    "ASC",
    "AVG",
    "BETWEEN",
    "BY",
    "CAST",
    "COALESCE",
    "COUNT",
    "CURRENT_DATE",
    "CURRENT_TIME",
    "CURRENT_TIMESTAMP",
    "DEFAULT",
    "DESC",
    "DISTINCT",
    "ESCAPE",
    "EXISTS",
    "FALSE",
    "FOR",
    "FOREIGN KEY",
    "IF",
    "IN",
    "INDEX",
    "INTERVAL",
    "INTO",
    "IS",
    "IS NOT",
    "KEY",
    "LIKE",
    "MAX",
    "MIN",
    "NOT",
    "NOT IN",
    "NOT LIKE",
    "NULL",
    "NULLS FIRST",
    "NULLS LAST",
    "OFFSET",
    "ON",
    "OVER",
    "PRIMARY KEY",
    "REFERENCES",
    "ROWS",
    "SOME",
    "SUM",
    "TABLE",
    "THEN",
    "TRUE",
    "UNIQUE",
    "USING",
    "VIEW",
}
STANDARD_OPERATORS = {"<>", "<=", ">=", "!=", "||", "::"}

MYSQL_COMMANDS = STANDARD_COMMANDS | {
    "ALTER DATABASE",
    "CHANGE",
    "CREATE PROCEDURE",
    "DELETE",
    "DELIMITER",
    "MODIFY",
    "ON DUPLICATE KEY UPDATE",
    "REPLACE INTO",
    "SHOW",
    "USE",
}
MYSQL_BINARY_COMMANDS = {
    "CROSS JOIN",
    "INNER JOIN",
    "JOIN",
    "LEFT JOIN",
    "LEFT OUTER JOIN",
    "NATURAL JOIN",
    "RIGHT JOIN",
    "RIGHT OUTER JOIN",
    "STRAIGHT_JOIN",
    "UNION",
    "UNION ALL",
    "UNION DISTINCT",
}
MYSQL_KEYWORDS = STANDARD_KEYWORDS | {
    "AUTO_INCREMENT",
    "DIV",
    "DUPLICATE",
    "ENGINE",
    "HIGH_PRIORITY",
    "IGNORE",
    "LOCK IN SHARE MODE",
    "MOD",
    "REGEXP",
    "RLIKE",
    "SEPARATOR",
    "SQL_CALC_FOUND_ROWS",
    "SQL_NO_CACHE",
    "UNSIGNED",
}
MYSQL_OPERATORS = STANDARD_OPERATORS | {
    ":=",
    "<<",
    ">>",
    "<=>",
    "&&",
    "->",
    "->>",
    # statement delimiters set with DELIMITER
    "$$",
    "//",
}
MYSQL8_NEW_COMMANDS = {"WINDOW"}
MYSQL8_NEW_BINARY_COMMANDS = {"EXCEPT", "INTERSECT"}
MYSQL8_NEW_DEPENDENT_CLAUSES = {"LATERAL"}
MARIADB_NEW_BINARY_COMMANDS = {"EXCEPT", "EXCEPT ALL", "INTERSECT", "INTERSECT ALL"}

POSTGRESQL_COMMANDS = STANDARD_COMMANDS | {
    "ALTER SCHEMA",
    "COPY",
    "CREATE INDEX",
    "CREATE SCHEMA",
    "DELETE",
    "ON CONFLICT",
    "WINDOW",
}
POSTGRESQL_KEYWORDS = STANDARD_KEYWORDS | {
    "DO NOTHING",
    "FILTER",
    "ILIKE",
    "NOT ILIKE",
    "RECURSIVE",
    "SIMILAR TO",
}
POSTGRESQL_OPERATORS = STANDARD_OPERATORS | {
    "::",
    "->",
    "->>",
    "#>",
    "#>>",
    "@>",
    "<@",
    "?|",
    "?&",
    "~*",
    "!~",
    "!~*",
    "<<",
    ">>",
}


def _compute_syntax(vendor: Vendor, version: Version) -> Syntax:
    if vendor is Vendor.sql:
        return Syntax(
            reserved_commands=frozenset(STANDARD_COMMANDS),
            binary_commands=frozenset(STANDARD_BINARY_COMMANDS),
            dependent_clauses=frozenset(STANDARD_DEPENDENT_CLAUSES),
            logical_operators=frozenset(STANDARD_LOGICAL_OPERATORS),
            reserved_keywords=frozenset(STANDARD_KEYWORDS),
            operators=frozenset(STANDARD_OPERATORS),
        )
    elif vendor is Vendor.mysql or vendor is Vendor.mariadb:
        commands = set(MYSQL_COMMANDS)
        binary_commands = set(MYSQL_BINARY_COMMANDS)
        dependent_clauses = set(STANDARD_DEPENDENT_CLAUSES)
        if vendor is Vendor.mariadb:
            binary_commands |= MARIADB_NEW_BINARY_COMMANDS
        elif version_is_in(version, start_version=(8,)):
            commands |= MYSQL8_NEW_COMMANDS
            binary_commands |= MYSQL8_NEW_BINARY_COMMANDS
            dependent_clauses |= MYSQL8_NEW_DEPENDENT_CLAUSES
        return Syntax(
            reserved_commands=frozenset(commands),
            binary_commands=frozenset(binary_commands),
            dependent_clauses=frozenset(dependent_clauses),
            logical_operators=frozenset(STANDARD_LOGICAL_OPERATORS | {"XOR"}),
            reserved_keywords=frozenset(MYSQL_KEYWORDS),
            operators=frozenset(MYSQL_OPERATORS),
            string_prefixes=frozenset({"N", "X", "B"}),
            backslash_escapes=True,
            line_comment_starts=("--", "#"),
            indexed_placeholder_prefixes=(),
            named_placeholder_prefixes=(),
            variable_prefixes=("@@", "@"),
        )
    elif vendor is Vendor.postgresql:
        return Syntax(
            reserved_commands=frozenset(POSTGRESQL_COMMANDS),
            binary_commands=frozenset(STANDARD_BINARY_COMMANDS),
            dependent_clauses=frozenset(STANDARD_DEPENDENT_CLAUSES | {"LATERAL"}),
            logical_operators=frozenset(STANDARD_LOGICAL_OPERATORS),
            reserved_keywords=frozenset(POSTGRESQL_KEYWORDS),
            operators=frozenset(POSTGRESQL_OPERATORS),
            string_quotes="'\"",
            string_prefixes=frozenset({"E", "X", "B"}),
            dollar_quoted_strings=True,
            positional_placeholder=False,
            indexed_placeholder_prefixes=("$",),
            named_placeholder_prefixes=(":",),
        )
    else:
        raise NotImplementedError(vendor)

import enum
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence, Union

from .dialect import DEFAULT_DIALECT, Dialect

DEFAULT_LINE_WIDTH = 50
DEFAULT_INDENT = "  "
TEN_SPACE_WIDTH = 10


class InvalidOptionsError(ValueError):
    pass


class KeywordMode(enum.Enum):
    standard = 1
    ten_space_left = 2
    ten_space_right = 3


class AliasMode(enum.Enum):
    never = 1
    select = 2
    always = 3


class CommaPosition(enum.Enum):
    after = 1
    before = 2
    tabular = 3


class NewlineMode(enum.Enum):
    always = 1
    never = 2
    line_width = 3


@dataclass(frozen=True)
class ParenOptions:
    open_paren_newline: bool = True
    close_paren_newline: bool = True


@dataclass(frozen=True)
class Parameters:
    """Values substituted for placeholders.

    ``positional`` feeds ``?`` and ``%s`` in order and indexed placeholders
    such as ``$1`` (1-based); ``named`` feeds ``:name``, ``@name`` and
    ``%(name)s``, and may also hold indexed keys like ``"1"``.

    """

    positional: Sequence[str] = ()
    named: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class FormatOptions:
    dialect: Dialect = field(default_factory=lambda: DEFAULT_DIALECT)
    indent: str = DEFAULT_INDENT
    uppercase: bool = True
    keyword_position: KeywordMode = KeywordMode.standard
    break_before_boolean_operator: bool = True
    alias_as: AliasMode = AliasMode.select
    tabulate_alias: bool = False
    comma_position: CommaPosition = CommaPosition.after
    # a NewlineMode, or wrap clauses with more than this many items
    newline: Union[NewlineMode, int] = NewlineMode.always
    paren_options: ParenOptions = field(default_factory=ParenOptions)
    line_width: int = DEFAULT_LINE_WIDTH
    lines_between_statements: int = 1
    dense_operators: bool = False
    semicolon_newline: bool = False
    params: Optional[Parameters] = None

    def __post_init__(self) -> None:
        if not self.indent or not self.indent.isspace():
            raise InvalidOptionsError(f"indent must be whitespace, got {self.indent!r}")
        if self.line_width < 1:
            raise InvalidOptionsError(f"line_width must be positive: {self.line_width}")
        if self.lines_between_statements < 0:
            raise InvalidOptionsError(
                "lines_between_statements cannot be negative:"
                f" {self.lines_between_statements}"
            )
        if not isinstance(self.newline, NewlineMode) and (
            isinstance(self.newline, bool)
            or not isinstance(self.newline, int)
            or self.newline < 1
        ):
            raise InvalidOptionsError(
                f"newline must be a NewlineMode or a positive int: {self.newline!r}"
            )

    @property
    def is_ten_space(self) -> bool:
        return self.keyword_position is not KeywordMode.standard

    @property
    def indent_unit(self) -> str:
        if self.is_ten_space:
            return " " * TEN_SPACE_WIDTH
        return self.indent

import argparse
import logging
import sys
from typing import Dict, List, Optional, Sequence, Union

from .dialect import DEFAULT_DIALECT, Dialect, Vendor, Version
from .formatter import format
from .options import (
    AliasMode,
    CommaPosition,
    FormatOptions,
    InvalidOptionsError,
    KeywordMode,
    NewlineMode,
    ParenOptions,
    Parameters,
)


def parse_version(version: str) -> Version:
    pieces = version.split(".")
    try:
        return tuple(int(piece) for piece in pieces)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid version {version!r}")


def parse_newline(value: str) -> Union[NewlineMode, int]:
    if value in NewlineMode.__members__:
        return NewlineMode[value]
    try:
        return int(value)
    except ValueError:
        choices = ", ".join(NewlineMode.__members__)
        raise argparse.ArgumentTypeError(
            f"Invalid newline mode {value!r} (expected one of {choices} or a number)"
        )


def parse_params(values: Sequence[str]) -> Optional[Parameters]:
    if not values:
        return None
    positional: List[str] = []
    named: Dict[str, str] = {}
    for value in values:
        name, sep, text = value.partition("=")
        if sep:
            named[name] = text
        else:
            positional.append(value)
    return Parameters(positional, named)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("sqlprettify", description="Format SQL")
    parser.add_argument("sql", nargs="?", help="SQL string to format")
    parser.add_argument("-f", "--file", help="read SQL from this file ('-' for stdin)")
    parser.add_argument("--dialect", choices=Vendor, type=Vendor.__getitem__)
    parser.add_argument("--version", type=parse_version)
    parser.add_argument("--indent", type=int, default=2, help="spaces per indent level")
    parser.add_argument("--tabs", action="store_true", help="indent with tabs")
    parser.add_argument("--lowercase", action="store_true", help="lowercase keywords")
    parser.add_argument(
        "--keyword-position",
        choices=KeywordMode,
        type=KeywordMode.__getitem__,
        default=KeywordMode.standard,
    )
    parser.add_argument("--break-after-boolean-operator", action="store_true")
    parser.add_argument(
        "--alias-as",
        choices=AliasMode,
        type=AliasMode.__getitem__,
        default=AliasMode.select,
    )
    parser.add_argument("--tabulate-alias", action="store_true")
    parser.add_argument(
        "--comma-position",
        choices=CommaPosition,
        type=CommaPosition.__getitem__,
        default=CommaPosition.after,
    )
    parser.add_argument(
        "--newline",
        type=parse_newline,
        default=NewlineMode.always,
        help="always, never, line_width, or the item count above which to wrap",
    )
    parser.add_argument("--no-open-paren-newline", action="store_true")
    parser.add_argument("--no-close-paren-newline", action="store_true")
    parser.add_argument("--line-width", type=int, default=50)
    parser.add_argument("--lines-between-statements", type=int, default=1)
    parser.add_argument("--dense-operators", action="store_true")
    parser.add_argument("--semicolon-newline", action="store_true")
    parser.add_argument(
        "--param",
        action="append",
        default=[],
        help="placeholder value, either VALUE (positional) or NAME=VALUE",
    )
    parser.add_argument("--trailing-newline", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def options_from_args(args: argparse.Namespace) -> FormatOptions:
    if args.dialect is not None:
        dialect = Dialect(args.dialect, args.version)
    else:
        dialect = DEFAULT_DIALECT
    return FormatOptions(
        dialect=dialect,
        indent="\t" if args.tabs else " " * args.indent,
        uppercase=not args.lowercase,
        keyword_position=args.keyword_position,
        break_before_boolean_operator=not args.break_after_boolean_operator,
        alias_as=args.alias_as,
        tabulate_alias=args.tabulate_alias,
        comma_position=args.comma_position,
        newline=args.newline,
        paren_options=ParenOptions(
            open_paren_newline=not args.no_open_paren_newline,
            close_paren_newline=not args.no_close_paren_newline,
        ),
        line_width=args.line_width,
        lines_between_statements=args.lines_between_statements,
        dense_operators=args.dense_operators,
        semicolon_newline=args.semicolon_newline,
        params=parse_params(args.param),
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        options = options_from_args(args)
    except InvalidOptionsError as e:
        parser.error(str(e))
    if args.sql is not None:
        sql = args.sql
    elif args.file is not None and args.file != "-":
        with open(args.file) as f:
            sql = f.read()
    else:
        sql = sys.stdin.read()
    formatted = format(sql, options)
    if args.trailing_newline:
        formatted += "\n"
    sys.stdout.write(formatted)
    return 0


if __name__ == "__main__":
    sys.exit(main())

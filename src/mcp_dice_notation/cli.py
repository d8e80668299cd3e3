from __future__ import annotations

import argparse
import json
import sys

from .config import get_settings
from .dice import roll_direction, roll_stats
from .errors import EvalError, ParseError
from .formatting import format_stats, format_table, roll_inline
from .interpreter import evaluate
from .logging_config import setup_logging
from .parser import parse
from .service import roll_from_text


EXIT_SYNTAX = 1
EXIT_EVAL = 2

USAGE_EPILOG = (
    "Instead of a dice code you can also put \"stats\" or \"dir\" "
    "for a stats roll or direction roll respectively."
)


def _cmd_stats() -> int:
    print(format_stats(roll_stats()))
    return 0


def _cmd_dir() -> int:
    print(roll_direction())
    return 0


def _cmd_roll(args: argparse.Namespace) -> int:
    settings = get_settings()
    text = " ".join(args.expression)
    advanced = args.advanced or settings.advanced

    try:
        if args.json:
            print(json.dumps(roll_from_text(text, advanced=advanced), indent=2))
        elif args.short:
            print(roll_inline(text, advanced=advanced, max_dice=settings.max_dice))
        else:
            total, rolls = evaluate(parse(text, advanced=advanced), max_dice=settings.max_dice)
            print(format_table(text, total, rolls))
    except ParseError as e:
        print(e, file=sys.stderr)
        return EXIT_SYNTAX
    except EvalError as e:
        print(e, file=sys.stderr)
        return EXIT_EVAL
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roll",
        description="Syntax is: roll <dice_code>. Example: roll 2d8 + 6 + d8",
        epilog=USAGE_EPILOG,
    )
    parser.add_argument("-a", "--advanced", action="store_true", help="advanced mode (composite dice notation)")
    parser.add_argument("-s", "--short", action="store_true", help="smaller output")
    parser.add_argument("--json", action="store_true", help="print the full roll report as JSON")
    parser.add_argument("expression", nargs="*", help="dice code, or 'stats' / 'dir'")
    return parser


def main(argv: list[str] | None = None) -> int:
    setup_logging(get_settings())

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.expression:
        parser.print_help()
        return 0
    if args.expression == ["stats"]:
        return _cmd_stats()
    if args.expression == ["dir"]:
        return _cmd_dir()
    return _cmd_roll(args)


if __name__ == "__main__":
    raise SystemExit(main())

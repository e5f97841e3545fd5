from __future__ import annotations

import argparse
import logging
import os
import sys

from . import __version__
from .errors import DiceConfigError, DiceError
from .models import format_number
from .parser import DiceParser


MAX_DICE_ENV = "DICE_MAX_COUNT"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dice-expressions",
        description="Roll a dice expression such as '2d6 + 3' or '(d20 + 4) * 2'.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--max-dice",
        type=int,
        default=None,
        help=f"Reject expressions rolling more dice than this (default: ${MAX_DICE_ENV}, else unlimited).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Also print every die rolled.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for diagnostics on stderr.",
    )
    parser.add_argument("expression", nargs=argparse.REMAINDER, help="Dice expression to roll.")
    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def _resolve_max_dice(args: argparse.Namespace) -> int | None:
    if args.max_dice is not None:
        return args.max_dice
    raw = os.environ.get(MAX_DICE_ENV, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise DiceConfigError(f"[INVALID_CONFIG] {MAX_DICE_ENV} must be an integer, got {raw!r}.") from None


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    text = " ".join(args.expression)
    try:
        parser = DiceParser(maximum_dice_count=_resolve_max_dice(args))
        result = parser.parse(text).roll()
    except DiceError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(format_number(result.value))
    if args.verbose:
        print(result.explain())
    return 0


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    run()

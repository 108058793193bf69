"""Command line entrypoint: sync a player's history and print its statistics."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from datetime import date, datetime

from chessmirror.config import Settings, get_settings
from chessmirror.constants import AUTO
from chessmirror.history import GameHistory, build_game_history
from chessmirror.utils import Now, set_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chessmirror",
        description="Mirror a chess.com game history and print aggregate statistics.",
    )
    parser.add_argument("--nick", help="Player handle (defaults to CHESSMIRROR_USER).")
    start = parser.add_mutually_exclusive_group()
    start.add_argument("--start-ts", type=int, help="Start of the window in epoch seconds.")
    start.add_argument(
        "--start-date",
        type=date.fromisoformat,
        help="Start of the window as YYYY-MM-DD (defaults to CHESSMIRROR_START_DATE).",
    )
    parser.add_argument("--time-class", default=AUTO, help="Time class to analyse.")
    parser.add_argument("--rules", default=AUTO, help="Rule set to analyse.")
    parser.add_argument(
        "--include-unrated",
        action="store_true",
        default=None,
        help="Keep unrated games (defaults to CHESSMIRROR_INCLUDE_UNRATED).",
    )
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Run an incremental refresh of the current month after loading.",
    )
    return parser


def resolve_start(args: argparse.Namespace, settings: Settings) -> datetime:
    """Pick the window start from the arguments, the settings, or this month."""
    if args.start_ts is not None:
        return Now.coerce(args.start_ts)
    if args.start_date is not None:
        return Now.coerce(args.start_date)
    if settings.start_date is not None:
        return Now.coerce(settings.start_date)
    now = Now.as_datetime()
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def run(
    args: argparse.Namespace,
    settings: Settings,
    history: GameHistory | None = None,
) -> dict[str, object]:
    """Load, optionally refresh, and analyse; return a JSON-ready payload."""
    nick = args.nick or settings.user
    include_unrated = (
        settings.include_unrated if args.include_unrated is None else args.include_unrated
    )
    start = resolve_start(args, settings)
    history = history or build_game_history(settings)
    report = history.load_history(nick, start, include_unrated)
    changed = history.refresh(nick, start, include_unrated) if args.refresh else False
    stats = history.analyze(nick, args.time_class, args.rules)
    return {
        "nick": nick,
        "startTs": int(start.timestamp()),
        "stats": stats.to_dict(),
        "sync": {
            "months": len(report.months),
            "failedMonths": report.failed_months,
            "dropped": report.dropped,
            "stored": len(history.games),
            "refreshChanged": changed,
        },
    }


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line interface."""
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    set_level(settings.log_level)
    if not (args.nick or settings.user):
        parser.print_usage(sys.stderr)
        print("chessmirror: error: a player nick is required", file=sys.stderr)
        return 2
    payload = run(args, settings)
    print(json.dumps(payload, indent=2))
    return 0

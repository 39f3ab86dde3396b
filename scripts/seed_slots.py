"""Cron entry point for publishing upcoming deployment slots."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from datetime import date

from src.slotbook.config import load_config
from src.slotbook.logging import configure_logging
from src.slotbook.repositories.factory import build_ledger
from src.slotbook.slots.slot_generator import seed_slots


@dataclass(slots=True)
class SeedSummary:
    start: date
    weeks: int
    created: int


def perform_seed(*, weeks: int, start: date | None = None) -> SeedSummary:
    """Create missing slots for ``weeks`` weeks and return summary counters."""
    config = load_config()
    ledger = build_ledger(config)
    start = start or date.today()
    created = seed_slots(ledger, start=start, weeks=weeks)
    return SeedSummary(start=start, weeks=weeks, created=created)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD") from exc


def parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate deployment slots for upcoming weeks.")
    parser.add_argument("--weeks", type=int, default=4, help="Number of weeks to generate.")
    parser.add_argument(
        "--start",
        type=_parse_date,
        default=None,
        help="Any day of the first week (YYYY-MM-DD); defaults to today.",
    )
    args = parser.parse_args(argv)
    if args.weeks < 0:
        parser.error("--weeks must not be negative")
    return args


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = parse_args(argv)
    try:
        summary = perform_seed(weeks=args.weeks, start=args.start)
    except Exception as exc:
        print(f"seeding failed: {exc}", file=sys.stderr)
        return 2
    print(
        f"seeding done, start={summary.start.isoformat()}, weeks={summary.weeks}, created={summary.created}",
        file=sys.stdout,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Weekly deployment slot generation.

Monday to Thursday publish three windows per day, Friday only the first two,
weekends none. Seeding is idempotent per ``(date, ordinal)`` so the generator
can run on every startup.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING, Iterator

import structlog

from ..domain.weeks import week_start
from .slots_models import SlotSpec

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from ..repositories.interfaces import BookingLedger

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SlotWindow:
    ordinal: int
    time_detail: str

    @property
    def label(self) -> str:
        return f"Slot {self.ordinal}"


MORNING = SlotWindow(1, "09:00 AM - 11:00 AM IST")
AFTERNOON = SlotWindow(2, "02:00 PM - 04:00 PM IST")
EVENING = SlotWindow(3, "07:00 PM - 09:00 PM IST")

# keyed by date.weekday(): Monday == 0
WEEKDAY_WINDOWS: dict[int, tuple[SlotWindow, ...]] = {
    0: (MORNING, AFTERNOON, EVENING),
    1: (MORNING, AFTERNOON, EVENING),
    2: (MORNING, AFTERNOON, EVENING),
    3: (MORNING, AFTERNOON, EVENING),
    4: (MORNING, AFTERNOON),
}


def slots_for_day(day: date) -> list[SlotSpec]:
    return [
        SlotSpec(date=day, ordinal=window.ordinal, time=window.label, time_detail=window.time_detail)
        for window in WEEKDAY_WINDOWS.get(day.weekday(), ())
    ]


def generate_week(day: date) -> list[SlotSpec]:
    """Return slot specs for the Monday-start week containing ``day``."""

    monday = week_start(day)
    specs: list[SlotSpec] = []
    for offset in range(7):
        specs.extend(slots_for_day(monday + timedelta(days=offset)))
    return specs


def generate_horizon(start: date, weeks: int) -> Iterator[SlotSpec]:
    """Yield specs for ``weeks`` consecutive weeks starting with the week of ``start``."""

    if weeks < 0:
        raise ValueError("weeks must not be negative")
    monday = week_start(start)
    for index in range(weeks):
        yield from generate_week(monday + timedelta(weeks=index))


def seed_slots(ledger: "BookingLedger", *, start: date | None = None, weeks: int = 4) -> int:
    """Create any missing slots for the horizon and return how many were added."""

    start = start or date.today()
    created = ledger.add_slots(generate_horizon(start, weeks))
    logger.info(
        "slots.seed.completed",
        start=week_start(start).isoformat(),
        weeks=weeks,
        created=created,
    )
    return created


__all__ = [
    "SlotWindow",
    "WEEKDAY_WINDOWS",
    "generate_horizon",
    "generate_week",
    "seed_slots",
    "slots_for_day",
]

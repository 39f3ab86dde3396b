"""Statistics aggregation over a ledger snapshot."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Any

from ..domain.weeks import next_week_bounds, week_bounds
from ..slots.slots_models import LedgerSnapshot

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from ..repositories.interfaces import BookingLedger


def summarize(snapshot: LedgerSnapshot, *, today: date) -> dict[str, Any]:
    """Derive booking statistics considering only slots dated ``today`` or later."""

    upcoming_slots = {slot.id: slot for slot in snapshot.slots if slot.date >= today}
    available = sum(1 for slot in upcoming_slots.values() if not slot.booked)

    this_week_start, this_week_end = week_bounds(today)
    next_week_start, next_week_end = next_week_bounds(today)

    total = this_week = next_week = 0
    by_type: Counter[str] = Counter()
    by_team: Counter[str] = Counter()
    for release in snapshot.releases:
        slot = upcoming_slots.get(release.slot_id)
        if slot is None:
            continue
        total += 1
        if this_week_start <= slot.date <= this_week_end:
            this_week += 1
        elif next_week_start <= slot.date <= next_week_end:
            next_week += 1
        by_type[release.release_type] += 1
        by_team[release.team] += 1

    return {
        "stats": {
            "total": total,
            "this_week": this_week,
            "next_week": next_week,
            "available": available,
        },
        "by_type": dict(by_type),
        "by_team": dict(by_team),
    }


@dataclass(slots=True)
class StatsService:
    """Expose deployment statistics for the dashboard."""

    ledger: "BookingLedger"

    def overview(self, today: date | None = None) -> dict[str, Any]:
        return summarize(self.ledger.snapshot(), today=today or date.today())

from collections import Counter
from datetime import date

import pytest

from src.slotbook.slots.memory_ledger import InMemoryBookingLedger
from src.slotbook.slots.slot_generator import generate_horizon, generate_week, seed_slots


def test_generate_week_produces_fourteen_weekday_slots() -> None:
    specs = generate_week(date(2026, 10, 15))

    assert len(specs) == 14
    per_day = Counter(spec.date for spec in specs)
    assert per_day == {
        date(2026, 10, 12): 3,
        date(2026, 10, 13): 3,
        date(2026, 10, 14): 3,
        date(2026, 10, 15): 3,
        date(2026, 10, 16): 2,
    }


def test_generate_week_labels_and_windows() -> None:
    specs = generate_week(date(2026, 10, 12))
    monday = [spec for spec in specs if spec.date == date(2026, 10, 12)]
    friday = [spec for spec in specs if spec.date == date(2026, 10, 16)]

    assert [spec.ordinal for spec in monday] == [1, 2, 3]
    assert [spec.time for spec in monday] == ["Slot 1", "Slot 2", "Slot 3"]
    assert monday[0].time_detail == "09:00 AM - 11:00 AM IST"
    assert monday[2].time_detail == "07:00 PM - 09:00 PM IST"
    assert [spec.ordinal for spec in friday] == [1, 2]


def test_generate_week_from_sunday_covers_preceding_monday() -> None:
    specs = generate_week(date(2026, 10, 18))

    assert min(spec.date for spec in specs) == date(2026, 10, 12)
    assert all(spec.date.weekday() < 5 for spec in specs)


def test_generate_horizon_spans_consecutive_weeks() -> None:
    specs = list(generate_horizon(date(2026, 10, 14), 3))

    assert len(specs) == 42
    assert min(spec.date for spec in specs) == date(2026, 10, 12)
    assert max(spec.date for spec in specs) == date(2026, 10, 30)


def test_generate_horizon_rejects_negative_weeks() -> None:
    with pytest.raises(ValueError):
        list(generate_horizon(date(2026, 10, 14), -1))


def test_seed_slots_is_idempotent() -> None:
    ledger = InMemoryBookingLedger()

    assert seed_slots(ledger, start=date(2026, 10, 12), weeks=2) == 28
    assert seed_slots(ledger, start=date(2026, 10, 12), weeks=2) == 0
    assert seed_slots(ledger, start=date(2026, 10, 19), weeks=2) == 14
    assert len(ledger.snapshot().slots) == 42

"""Behaviour shared by every booking ledger implementation."""

from __future__ import annotations

import threading
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.slotbook.db.db_models import Base, ReleaseModel, SlotModel
from src.slotbook.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from src.slotbook.slots.memory_ledger import InMemoryBookingLedger
from src.slotbook.slots.slots_models import SlotSpec
from src.slotbook.slots.slots_repository import SqlAlchemyBookingLedger

from tests.helpers.booking import TODAY, make_draft

PAST_FRIDAY = date(2026, 10, 9)
NEXT_TUESDAY = date(2026, 10, 20)

SPECS = [
    SlotSpec(date=PAST_FRIDAY, ordinal=1, time="Slot 1"),
    SlotSpec(date=TODAY, ordinal=1, time="Slot 1", time_detail="09:00 AM - 11:00 AM IST"),
    SlotSpec(date=TODAY, ordinal=2, time="Slot 2", time_detail="02:00 PM - 04:00 PM IST"),
    SlotSpec(date=NEXT_TUESDAY, ordinal=1, time="Slot 1"),
]


class LedgerHarness:
    """Wrap a ledger with hooks for corrupting its state behind its back."""

    def __init__(self, backend: str) -> None:
        self.backend = backend
        if backend == "memory":
            self.ledger = InMemoryBookingLedger()
            self.session_factory = None
        else:
            engine = create_engine(
                "sqlite://",
                future=True,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
            Base.metadata.create_all(engine)
            self.session_factory = sessionmaker(bind=engine, expire_on_commit=False)
            self.ledger = SqlAlchemyBookingLedger(self.session_factory)
        self.ledger.add_slots(SPECS)

    def slot_id(self, day: date, ordinal: int) -> int:
        for entry in self.ledger.list_slots(day, day):
            if entry.slot.ordinal == ordinal:
                return entry.slot.id
        raise AssertionError(f"no slot {day} #{ordinal}")

    def point_slot_at(self, slot_id: int, release_id: int) -> None:
        if self.session_factory is None:
            slot = self.ledger._slots[slot_id]  # type: ignore[attr-defined]
            slot.booked = True
            slot.release_id = release_id
            return
        with self.session_factory() as session:
            row = session.get(SlotModel, slot_id)
            row.booked = True
            row.release_id = release_id
            session.commit()

    def drop_slot(self, slot_id: int) -> None:
        if self.session_factory is None:
            del self.ledger._slots[slot_id]  # type: ignore[attr-defined]
            return
        with self.session_factory() as session:
            session.delete(session.get(SlotModel, slot_id))
            session.commit()

    def release_count(self) -> int:
        if self.session_factory is None:
            return len(self.ledger.snapshot().releases)
        with self.session_factory() as session:
            return session.query(ReleaseModel).count()


@pytest.fixture(params=["memory", "sqlalchemy"])
def harness(request) -> LedgerHarness:
    return LedgerHarness(request.param)


def test_book_creates_pending_release_and_marks_slot(harness: LedgerHarness) -> None:
    ledger = harness.ledger
    slot_id = harness.slot_id(TODAY, 1)

    release = ledger.book(slot_id, make_draft(), today=TODAY)

    assert release.status == "pending"
    assert release.slot_id == slot_id
    assert release.name == "Payments API"
    slot = ledger.get_slot(slot_id)
    assert slot.booked is True
    assert slot.release_id == release.id
    assert ledger.get_release(release.id).slot_id == slot_id


def test_book_twice_conflicts_and_keeps_first_release(harness: LedgerHarness) -> None:
    ledger = harness.ledger
    slot_id = harness.slot_id(TODAY, 1)
    first = ledger.book(slot_id, make_draft(), today=TODAY)

    with pytest.raises(ConflictError):
        ledger.book(slot_id, make_draft(name="Other"), today=TODAY)

    assert ledger.get_slot(slot_id).release_id == first.id
    assert harness.release_count() == 1


def test_book_past_slot_is_rejected_without_side_effects(harness: LedgerHarness) -> None:
    ledger = harness.ledger
    slot_id = harness.slot_id(PAST_FRIDAY, 1)

    with pytest.raises(InvalidArgumentError):
        ledger.book(slot_id, make_draft(), today=TODAY)

    assert ledger.get_slot(slot_id).booked is False
    assert harness.release_count() == 0


def test_book_slot_dated_today_is_allowed(harness: LedgerHarness) -> None:
    slot_id = harness.slot_id(TODAY, 2)

    release = harness.ledger.book(slot_id, make_draft(), today=TODAY)

    assert release.slot_id == slot_id


def test_book_unknown_slot_raises_not_found(harness: LedgerHarness) -> None:
    with pytest.raises(NotFoundError):
        harness.ledger.book(9999, make_draft(), today=TODAY)


def test_book_validates_draft_before_looking_up_slot(harness: LedgerHarness) -> None:
    with pytest.raises(InvalidArgumentError):
        harness.ledger.book(9999, make_draft(name="  "), today=TODAY)


def test_cancel_frees_slot_and_removes_release(harness: LedgerHarness) -> None:
    ledger = harness.ledger
    slot_id = harness.slot_id(TODAY, 1)
    release = ledger.book(slot_id, make_draft(), today=TODAY)

    removed = ledger.cancel(release.id)

    assert removed.id == release.id
    slot = ledger.get_slot(slot_id)
    assert slot.booked is False
    assert slot.release_id is None
    with pytest.raises(NotFoundError):
        ledger.get_release(release.id)


def test_book_after_cancel_succeeds(harness: LedgerHarness) -> None:
    ledger = harness.ledger
    slot_id = harness.slot_id(TODAY, 1)
    first = ledger.book(slot_id, make_draft(), today=TODAY)
    ledger.cancel(first.id)

    second = ledger.book(slot_id, make_draft(name="Retry"), today=TODAY)

    assert second.id != first.id
    assert ledger.get_slot(slot_id).release_id == second.id


def test_cancel_with_stale_release_id_keeps_newer_booking(harness: LedgerHarness) -> None:
    ledger = harness.ledger
    slot_id = harness.slot_id(TODAY, 1)
    first = ledger.book(slot_id, make_draft(team="Backend Team"), today=TODAY)
    ledger.cancel(first.id)
    second = ledger.book(slot_id, make_draft(team="Data Team"), today=TODAY)

    with pytest.raises(NotFoundError):
        ledger.cancel(first.id)

    assert ledger.get_release(second.id).team == "Data Team"
    assert ledger.get_slot(slot_id).release_id == second.id


def test_cancel_leaves_slot_claimed_by_another_release(harness: LedgerHarness) -> None:
    ledger = harness.ledger
    first_slot = harness.slot_id(TODAY, 1)
    second_slot = harness.slot_id(TODAY, 2)
    first = ledger.book(first_slot, make_draft(), today=TODAY)
    second = ledger.book(second_slot, make_draft(name="Search v2"), today=TODAY)
    harness.point_slot_at(first_slot, second.id)

    ledger.cancel(first.id)

    slot = ledger.get_slot(first_slot)
    assert slot.booked is True
    assert slot.release_id == second.id
    assert ledger.get_release(second.id).slot_id == second_slot


def test_cancel_unknown_release_raises_not_found(harness: LedgerHarness) -> None:
    with pytest.raises(NotFoundError):
        harness.ledger.cancel(12345)


def test_cancel_with_missing_slot_still_removes_release(harness: LedgerHarness) -> None:
    ledger = harness.ledger
    slot_id = harness.slot_id(TODAY, 1)
    release = ledger.book(slot_id, make_draft(), today=TODAY)
    harness.drop_slot(slot_id)

    removed = ledger.cancel(release.id)

    assert removed.id == release.id
    assert harness.release_count() == 0


def test_update_status_changes_status_and_comments_only(harness: LedgerHarness) -> None:
    ledger = harness.ledger
    slot_id = harness.slot_id(TODAY, 1)
    release = ledger.book(slot_id, make_draft(), today=TODAY)

    updated = ledger.update_status(release.id, "released", "shipped at 10:05")

    assert updated.status == "released"
    assert updated.comments == "shipped at 10:05"
    assert updated.slot_id == slot_id
    assert updated.name == release.name
    slot = ledger.get_slot(slot_id)
    assert slot.booked is True
    assert slot.release_id == release.id


def test_update_status_allows_any_transition(harness: LedgerHarness) -> None:
    ledger = harness.ledger
    release = ledger.book(harness.slot_id(TODAY, 1), make_draft(), today=TODAY)

    for status in ("released", "reverted", "pending", "unbooked", "skipped"):
        assert ledger.update_status(release.id, status).status == status


def test_update_status_rejects_unknown_status(harness: LedgerHarness) -> None:
    ledger = harness.ledger
    release = ledger.book(harness.slot_id(TODAY, 1), make_draft(), today=TODAY)

    with pytest.raises(InvalidArgumentError):
        ledger.update_status(release.id, "done")
    assert ledger.get_release(release.id).status == "pending"


def test_update_status_unknown_release_raises_not_found(harness: LedgerHarness) -> None:
    with pytest.raises(NotFoundError):
        harness.ledger.update_status(777, "released")


def test_list_slots_orders_by_date_and_ordinal_within_bounds(harness: LedgerHarness) -> None:
    entries = harness.ledger.list_slots(TODAY, NEXT_TUESDAY)

    assert [(entry.slot.date, entry.slot.ordinal) for entry in entries] == [
        (TODAY, 1),
        (TODAY, 2),
        (NEXT_TUESDAY, 1),
    ]


def test_list_slots_attaches_release(harness: LedgerHarness) -> None:
    ledger = harness.ledger
    slot_id = harness.slot_id(TODAY, 2)
    release = ledger.book(slot_id, make_draft(), today=TODAY)

    entries = {entry.slot.id: entry for entry in ledger.list_slots(TODAY, TODAY)}

    assert entries[slot_id].release is not None
    assert entries[slot_id].release.id == release.id
    assert entries[harness.slot_id(TODAY, 1)].release is None


def test_list_slots_reports_dangling_release_as_available(harness: LedgerHarness) -> None:
    slot_id = harness.slot_id(TODAY, 1)
    harness.point_slot_at(slot_id, 4242)

    entries = {entry.slot.id: entry for entry in harness.ledger.list_slots(TODAY, TODAY)}

    assert entries[slot_id].slot.booked is False
    assert entries[slot_id].release is None


def test_list_upcoming_releases_skips_past_slots(harness: LedgerHarness) -> None:
    ledger = harness.ledger
    later = ledger.book(harness.slot_id(NEXT_TUESDAY, 1), make_draft(name="Later"), today=TODAY)
    sooner = ledger.book(harness.slot_id(TODAY, 1), make_draft(name="Sooner"), today=TODAY)

    upcoming = ledger.list_upcoming_releases(today=TODAY)
    assert [pair.release.id for pair in upcoming] == [sooner.id, later.id]
    assert upcoming[0].slot.date == TODAY

    assert [pair.release.id for pair in ledger.list_upcoming_releases(today=NEXT_TUESDAY)] == [
        later.id
    ]


def test_add_slots_is_idempotent_per_day_and_ordinal(harness: LedgerHarness) -> None:
    ledger = harness.ledger

    created = ledger.add_slots(SPECS + [SlotSpec(date=NEXT_TUESDAY, ordinal=2, time="Slot 2")])

    assert created == 1
    assert len(ledger.snapshot().slots) == 5


def test_snapshot_copies_are_detached(harness: LedgerHarness) -> None:
    ledger = harness.ledger
    slot_id = harness.slot_id(TODAY, 1)
    snapshot = ledger.snapshot()
    ledger.book(slot_id, make_draft(), today=TODAY)

    before = {slot.id: slot for slot in snapshot.slots}
    assert before[slot_id].booked is False
    assert snapshot.releases == []


def test_concurrent_bookings_yield_single_release(harness: LedgerHarness) -> None:
    ledger = harness.ledger
    slot_id = harness.slot_id(TODAY, 1)
    workers = 8
    barrier = threading.Barrier(workers)
    outcomes: list[str] = []
    outcomes_lock = threading.Lock()

    def attempt(index: int) -> None:
        barrier.wait()
        try:
            ledger.book(slot_id, make_draft(name=f"Release {index}"), today=TODAY)
            result = "booked"
        except ConflictError:
            result = "conflict"
        with outcomes_lock:
            outcomes.append(result)

    threads = [threading.Thread(target=attempt, args=(index,)) for index in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count("booked") == 1
    assert outcomes.count("conflict") == workers - 1
    assert harness.release_count() == 1
    slot = ledger.get_slot(slot_id)
    assert slot.booked is True
    assert ledger.get_release(slot.release_id).slot_id == slot_id

"""In-memory booking ledger used for tests and the ``memory`` storage backend."""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Iterable

import structlog

from ..exceptions import NotFoundError, ensure_found
from .booking_rules import ensure_bookable, ensure_status, pair_slot, validate_draft
from .slots_models import (
    LedgerSnapshot,
    Release,
    ReleaseDraft,
    ReleaseStatus,
    ReleaseWithSlot,
    Slot,
    SlotSpec,
    SlotWithRelease,
)

logger = structlog.get_logger(__name__)


class InMemoryBookingLedger:
    """Keep slots and releases in dictionaries guarded by a single lock.

    Readers receive copies, so a returned object never changes underneath
    the caller when another request books or cancels.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._slots: dict[int, Slot] = {}
        self._releases: dict[int, Release] = {}
        self._slot_keys: dict[tuple[date, int], int] = {}
        self._next_slot_id = 1
        self._next_release_id = 1

    def get_slot(self, slot_id: int) -> Slot:
        with self._lock:
            slot = ensure_found(self._slots.get(slot_id), entity="Slot", identifier=slot_id)
            return replace(slot)

    def list_slots(self, start: date, end: date) -> list[SlotWithRelease]:
        with self._lock:
            selected = [
                replace(slot)
                for slot in self._slots.values()
                if start <= slot.date <= end
            ]
            releases = {
                slot.release_id: replace(self._releases[slot.release_id])
                for slot in selected
                if slot.release_id in self._releases
            }
        selected.sort(key=lambda slot: (slot.date, slot.ordinal))
        return [pair_slot(slot, releases.get(slot.release_id)) for slot in selected]

    def get_release(self, release_id: int) -> Release:
        with self._lock:
            release = ensure_found(
                self._releases.get(release_id), entity="Release", identifier=release_id
            )
            return replace(release)

    def list_upcoming_releases(self, today: date | None = None) -> list[ReleaseWithSlot]:
        today = today or date.today()
        with self._lock:
            pairs = [
                ReleaseWithSlot(release=replace(release), slot=replace(slot))
                for release in self._releases.values()
                if (slot := self._slots.get(release.slot_id)) is not None
                and slot.date >= today
            ]
        pairs.sort(key=lambda pair: (pair.slot.date, pair.slot.ordinal))
        return pairs

    def book(self, slot_id: int, draft: ReleaseDraft, today: date | None = None) -> Release:
        draft = validate_draft(draft)
        today = today or date.today()
        with self._lock:
            slot = ensure_found(self._slots.get(slot_id), entity="Slot", identifier=slot_id)
            ensure_bookable(slot, today=today)
            now = datetime.now(timezone.utc)
            release = Release(
                id=self._next_release_id,
                name=draft.name,
                team=draft.team,
                release_type=draft.release_type,
                slot_id=slot.id,
                version=draft.version,
                description=draft.description,
                status=ReleaseStatus.PENDING.value,
                created_at=now,
                updated_at=now,
            )
            self._next_release_id += 1
            self._releases[release.id] = release
            slot.booked = True
            slot.release_id = release.id
            logger.info("ledger.book.success", slot_id=slot.id, release_id=release.id)
            return replace(release)

    def cancel(self, release_id: int) -> Release:
        with self._lock:
            release = self._releases.pop(release_id, None)
            if release is None:
                raise NotFoundError(f"Release '{release_id}' not found")
            slot = self._slots.get(release.slot_id)
            if slot is None:
                logger.warning(
                    "ledger.cancel.slot_missing",
                    release_id=release_id,
                    slot_id=release.slot_id,
                )
            elif slot.release_id != release_id:
                logger.warning(
                    "ledger.cancel.slot_mismatch",
                    release_id=release_id,
                    slot_id=slot.id,
                    slot_release_id=slot.release_id,
                )
            else:
                slot.booked = False
                slot.release_id = None
            logger.info("ledger.cancel.success", release_id=release_id, slot_id=release.slot_id)
            return replace(release)

    def update_status(
        self, release_id: int, status: str, comments: str | None = None
    ) -> Release:
        status = ensure_status(status)
        with self._lock:
            release = ensure_found(
                self._releases.get(release_id), entity="Release", identifier=release_id
            )
            previous = release.status
            release.status = status
            release.comments = comments
            release.updated_at = datetime.now(timezone.utc)
            logger.info(
                "ledger.status.updated",
                release_id=release_id,
                previous=previous,
                status=status,
            )
            return replace(release)

    def add_slots(self, specs: Iterable[SlotSpec]) -> int:
        created = 0
        with self._lock:
            for spec in specs:
                key = (spec.date, spec.ordinal)
                if key in self._slot_keys:
                    continue
                slot = Slot(
                    id=self._next_slot_id,
                    date=spec.date,
                    ordinal=spec.ordinal,
                    time=spec.time,
                    time_detail=spec.time_detail,
                )
                self._next_slot_id += 1
                self._slots[slot.id] = slot
                self._slot_keys[key] = slot.id
                created += 1
        return created

    def snapshot(self) -> LedgerSnapshot:
        with self._lock:
            return LedgerSnapshot(
                slots=[replace(slot) for slot in self._slots.values()],
                releases=[replace(release) for release in self._releases.values()],
            )

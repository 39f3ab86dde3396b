"""Booking ledger backed by SQLAlchemy."""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import date, datetime, timezone
from typing import Iterable

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.db_models import ReleaseModel, SlotModel
from ..exceptions import (
    ConflictError,
    IntegrityConstraintViolation,
    ensure_found,
    handle_sqlalchemy_errors,
)
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


class SqlAlchemyBookingLedger:
    """Persist slots and releases, updating both rows in one transaction.

    Writers are serialised by a process lock and the slot row is selected
    ``FOR UPDATE`` where the dialect supports it; the unique constraint on
    ``releases.slot_id`` rejects a second release for the same slot even
    across processes.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory
        self._write_lock = threading.Lock()

    def get_slot(self, slot_id: int) -> Slot:
        with self._session_factory() as session:
            row = ensure_found(
                session.get(SlotModel, slot_id), entity="Slot", identifier=slot_id
            )
            return self._to_slot(row)

    def list_slots(self, start: date, end: date) -> list[SlotWithRelease]:
        with self._session_factory() as session:
            rows = (
                session.execute(
                    select(SlotModel)
                    .where(SlotModel.date >= start, SlotModel.date <= end)
                    .order_by(SlotModel.date, SlotModel.ordinal, SlotModel.id)
                )
                .scalars()
                .all()
            )
            release_ids = [row.release_id for row in rows if row.release_id is not None]
            releases: dict[int, Release] = {}
            if release_ids:
                for model in session.execute(
                    select(ReleaseModel).where(ReleaseModel.id.in_(release_ids))
                ).scalars():
                    releases[model.id] = self._to_release(model)
            return [
                pair_slot(self._to_slot(row), releases.get(row.release_id))
                for row in rows
            ]

    def get_release(self, release_id: int) -> Release:
        with self._session_factory() as session:
            model = ensure_found(
                session.get(ReleaseModel, release_id),
                entity="Release",
                identifier=release_id,
            )
            return self._to_release(model)

    def list_upcoming_releases(self, today: date | None = None) -> list[ReleaseWithSlot]:
        today = today or date.today()
        with self._session_factory() as session:
            rows = session.execute(
                select(ReleaseModel, SlotModel)
                .join(SlotModel, SlotModel.id == ReleaseModel.slot_id)
                .where(SlotModel.date >= today)
                .order_by(SlotModel.date, SlotModel.ordinal)
            ).all()
            return [
                ReleaseWithSlot(release=self._to_release(release), slot=self._to_slot(slot))
                for release, slot in rows
            ]

    def book(self, slot_id: int, draft: ReleaseDraft, today: date | None = None) -> Release:
        draft = validate_draft(draft)
        today = today or date.today()
        with self._write_lock, self._session_factory() as session:
            slot_row = session.execute(
                select(SlotModel).where(SlotModel.id == slot_id).with_for_update()
            ).scalar_one_or_none()
            slot_row = ensure_found(slot_row, entity="Slot", identifier=slot_id)
            ensure_bookable(self._to_slot(slot_row), today=today)

            now = datetime.now(timezone.utc)
            model = ReleaseModel(
                name=draft.name,
                version=draft.version,
                team=draft.team,
                release_type=draft.release_type,
                description=draft.description,
                status=ReleaseStatus.PENDING.value,
                slot_id=slot_row.id,
                created_at=now,
                updated_at=now,
            )
            try:
                with handle_sqlalchemy_errors(entity="Release"):
                    session.add(model)
                    session.flush()
                    slot_row.booked = True
                    slot_row.release_id = model.id
                    session.commit()
            except IntegrityConstraintViolation as exc:
                session.rollback()
                raise ConflictError(f"Slot '{slot_id}' is already booked") from exc
            logger.info("ledger.book.success", slot_id=slot_id, release_id=model.id)
            return self._to_release(model)

    def cancel(self, release_id: int) -> Release:
        with self._write_lock, self._session_factory() as session:
            model = ensure_found(
                session.get(ReleaseModel, release_id),
                entity="Release",
                identifier=release_id,
            )
            removed = self._to_release(model)
            slot_row = session.get(SlotModel, model.slot_id, with_for_update=True)
            with handle_sqlalchemy_errors(entity="Release"):
                if slot_row is None:
                    logger.warning(
                        "ledger.cancel.slot_missing",
                        release_id=release_id,
                        slot_id=model.slot_id,
                    )
                elif slot_row.release_id != release_id:
                    logger.warning(
                        "ledger.cancel.slot_mismatch",
                        release_id=release_id,
                        slot_id=slot_row.id,
                        slot_release_id=slot_row.release_id,
                    )
                else:
                    slot_row.booked = False
                    slot_row.release_id = None
                session.delete(model)
                session.commit()
        logger.info("ledger.cancel.success", release_id=release_id, slot_id=removed.slot_id)
        return removed

    def update_status(
        self, release_id: int, status: str, comments: str | None = None
    ) -> Release:
        status = ensure_status(status)
        with self._write_lock, self._session_factory() as session:
            model = ensure_found(
                session.get(ReleaseModel, release_id),
                entity="Release",
                identifier=release_id,
            )
            previous = model.status
            with handle_sqlalchemy_errors(entity="Release"):
                model.status = status
                model.comments = comments
                model.updated_at = datetime.now(timezone.utc)
                session.commit()
            logger.info(
                "ledger.status.updated",
                release_id=release_id,
                previous=previous,
                status=status,
            )
            return self._to_release(model)

    def add_slots(self, specs: Iterable[SlotSpec]) -> int:
        pending = {(spec.date, spec.ordinal): spec for spec in specs}
        if not pending:
            return 0
        with self._write_lock, self._session_factory() as session:
            days = {day for day, _ in pending}
            existing = {
                (day, ordinal)
                for day, ordinal in session.execute(
                    select(SlotModel.date, SlotModel.ordinal).where(SlotModel.date.in_(sorted(days)))
                )
            }
            created = 0
            with handle_sqlalchemy_errors(entity="Slot"):
                for key, spec in pending.items():
                    if key in existing:
                        continue
                    session.add(
                        SlotModel(
                            date=spec.date,
                            ordinal=spec.ordinal,
                            time=spec.time,
                            time_detail=spec.time_detail,
                            booked=False,
                        )
                    )
                    created += 1
                session.commit()
            return created

    def snapshot(self) -> LedgerSnapshot:
        with self._session_factory() as session:
            slots = session.execute(select(SlotModel).order_by(SlotModel.id)).scalars().all()
            releases = (
                session.execute(select(ReleaseModel).order_by(ReleaseModel.id)).scalars().all()
            )
            return LedgerSnapshot(
                slots=[self._to_slot(row) for row in slots],
                releases=[self._to_release(row) for row in releases],
            )

    @staticmethod
    def _to_slot(model: SlotModel) -> Slot:
        return Slot(
            id=model.id,
            date=model.date,
            ordinal=model.ordinal,
            time=model.time,
            time_detail=model.time_detail,
            booked=bool(model.booked),
            release_id=model.release_id,
        )

    @staticmethod
    def _to_release(model: ReleaseModel) -> Release:
        return Release(
            id=model.id,
            name=model.name,
            team=model.team,
            release_type=model.release_type,
            slot_id=model.slot_id,
            version=model.version,
            description=model.description,
            status=model.status,
            comments=model.comments,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

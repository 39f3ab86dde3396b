"""Preconditions shared by every booking ledger implementation."""

from __future__ import annotations

from dataclasses import replace
from datetime import date

import structlog

from ..domain.weeks import is_past
from ..exceptions import ConflictError, InvalidArgumentError
from .slots_models import (
    Release,
    ReleaseDraft,
    ReleaseStatus,
    ReleaseType,
    Slot,
    SlotWithRelease,
    Team,
)

logger = structlog.get_logger(__name__)

ALLOWED_TEAMS = frozenset(team.value for team in Team)
ALLOWED_RELEASE_TYPES = frozenset(kind.value for kind in ReleaseType)
ALLOWED_STATUSES = frozenset(status.value for status in ReleaseStatus)


def _clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_draft(draft: ReleaseDraft) -> ReleaseDraft:
    """Return a normalised copy of ``draft`` or raise :class:`InvalidArgumentError`."""

    name = (draft.name or "").strip()
    if not name:
        raise InvalidArgumentError("Release name is required")
    if draft.team not in ALLOWED_TEAMS:
        raise InvalidArgumentError(f"Unknown team '{draft.team}'")
    if draft.release_type not in ALLOWED_RELEASE_TYPES:
        raise InvalidArgumentError(f"Unknown release type '{draft.release_type}'")
    return replace(
        draft,
        name=name,
        version=_clean_optional(draft.version),
        description=_clean_optional(draft.description),
    )


def ensure_bookable(slot: Slot, *, today: date) -> None:
    """Reject booked or past slots; the caller already resolved existence."""

    if slot.booked:
        raise ConflictError(f"Slot '{slot.id}' is already booked")
    if is_past(slot.date, today=today):
        raise InvalidArgumentError(
            f"Slot '{slot.id}' on {slot.date.isoformat()} is in the past"
        )


def ensure_status(status: str) -> str:
    if status not in ALLOWED_STATUSES:
        raise InvalidArgumentError(f"Unknown release status '{status}'")
    return status


def pair_slot(slot: Slot, release: Release | None) -> SlotWithRelease:
    """Attach ``release`` to ``slot`` for read views.

    A slot whose ``release_id`` does not resolve to a release pointing back at
    it is reported as available instead of failing the whole listing.
    """

    if slot.release_id is None and not slot.booked:
        return SlotWithRelease(slot=slot)
    if release is None or release.slot_id != slot.id:
        logger.warning(
            "ledger.slot.dangling_release",
            slot_id=slot.id,
            release_id=slot.release_id,
        )
        return SlotWithRelease(slot=replace(slot, booked=False, release_id=None))
    return SlotWithRelease(slot=slot, release=release)


__all__ = [
    "ALLOWED_RELEASE_TYPES",
    "ALLOWED_STATUSES",
    "ALLOWED_TEAMS",
    "ensure_bookable",
    "ensure_status",
    "pair_slot",
    "validate_draft",
]

"""Slot and release domain dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum


class ReleaseStatus(StrEnum):
    """Lifecycle statuses for a release occupying a slot."""

    PENDING = "pending"
    RELEASED = "released"
    REVERTED = "reverted"
    SKIPPED = "skipped"
    UNBOOKED = "unbooked"


class ReleaseType(StrEnum):
    FEATURE = "feature"
    ENHANCEMENT = "enhancement"
    BUGFIX = "bugfix"
    MIGRATION = "migration"
    OTHER = "other"


class Team(StrEnum):
    BACKEND = "Backend Team"
    FRONTEND = "Frontend Team"
    DATA = "Data Team"
    SECURITY = "Security Team"
    FINANCE = "Finance Team"


@dataclass(slots=True)
class Slot:
    id: int
    date: date
    ordinal: int
    time: str
    time_detail: str | None = None
    booked: bool = False
    release_id: int | None = None


@dataclass(slots=True)
class Release:
    id: int
    name: str
    team: str
    release_type: str
    slot_id: int
    version: str | None = None
    description: str | None = None
    status: str = ReleaseStatus.PENDING.value
    comments: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(slots=True)
class ReleaseDraft:
    """Release attributes supplied by a booking request."""

    name: str
    team: str
    release_type: str
    version: str | None = None
    description: str | None = None


@dataclass(slots=True)
class SlotSpec:
    """Slot definition produced by the generator before it is persisted."""

    date: date
    ordinal: int
    time: str
    time_detail: str | None = None


@dataclass(slots=True)
class SlotWithRelease:
    slot: Slot
    release: Release | None = None


@dataclass(slots=True)
class ReleaseWithSlot:
    release: Release
    slot: Slot | None = None


@dataclass(slots=True)
class LedgerSnapshot:
    """Consistent copy of every slot and release at one point in time."""

    slots: list[Slot]
    releases: list[Release]

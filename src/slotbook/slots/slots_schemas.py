"""Pydantic schemas for slot booking API."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field

from .slots_models import Release, Slot


class ReleasePayload(BaseModel):
    id: int
    name: str
    version: str | None = None
    team: str
    release_type: str
    description: str | None = None
    status: str
    comments: str | None = None
    slot_id: int
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    @classmethod
    def from_domain(cls, release: Release) -> "ReleasePayload":
        return cls(
            id=release.id,
            name=release.name,
            version=release.version,
            team=release.team,
            release_type=release.release_type,
            description=release.description,
            status=release.status,
            comments=release.comments,
            slot_id=release.slot_id,
            created_at=release.created_at,
            updated_at=release.updated_at,
        )


class SlotPayload(BaseModel):
    id: int
    date: dt.date
    ordinal: int
    time: str
    time_detail: str | None = None
    booked: bool
    release_id: int | None = None

    @classmethod
    def from_domain(cls, slot: Slot) -> "SlotPayload":
        return cls(
            id=slot.id,
            date=slot.date,
            ordinal=slot.ordinal,
            time=slot.time,
            time_detail=slot.time_detail,
            booked=slot.booked,
            release_id=slot.release_id,
        )


class SlotWithReleasePayload(SlotPayload):
    release: ReleasePayload | None = None


class UpcomingReleasePayload(ReleasePayload):
    slot: SlotPayload | None = None


class BookSlotRequest(BaseModel):
    slot_id: int
    release_name: str = Field(..., min_length=1)
    team: str
    release_type: str
    version: str | None = None
    description: str | None = None


class BookingResponse(BaseModel):
    message: str
    release: ReleasePayload


class UpdateReleaseStatusRequest(BaseModel):
    status: str
    comments: str | None = None


class ReleaseStatusResponse(BaseModel):
    message: str
    release: ReleasePayload


class MessageResponse(BaseModel):
    message: str

"""Slot booking and release routes."""

from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, Query, Request, status

from ..api_errors import http_error
from ..auth.auth_dependencies import require_user
from ..domain.weeks import week_bounds
from ..exceptions import AppError
from ..repositories.interfaces import BookingLedger
from .slots_models import ReleaseDraft, SlotWithRelease
from .slots_schemas import (
    BookingResponse,
    BookSlotRequest,
    MessageResponse,
    ReleasePayload,
    ReleaseStatusResponse,
    SlotPayload,
    SlotWithReleasePayload,
    UpcomingReleasePayload,
    UpdateReleaseStatusRequest,
)

router = APIRouter(
    prefix="/api/slots",
    tags=["slots"],
    dependencies=[Depends(require_user)],
)

releases_router = APIRouter(
    prefix="/api/releases",
    tags=["releases"],
    dependencies=[Depends(require_user)],
)


def get_ledger(request: Request) -> BookingLedger:
    try:
        return request.app.state.ledger  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("BookingLedger is not configured") from exc


@router.get("/")
def list_week_slots(
    day: dt.date | None = Query(default=None, alias="date"),
    ledger: BookingLedger = Depends(get_ledger),
) -> dict[str, list[SlotWithReleasePayload]]:
    """Return the Monday-start week containing ``date`` grouped by ISO day."""
    start, end = week_bounds(day or dt.date.today())
    grouped: dict[str, list[SlotWithReleasePayload]] = {}
    for entry in ledger.list_slots(start, end):
        grouped.setdefault(entry.slot.date.isoformat(), []).append(_slot_with_release(entry))
    return grouped


@router.get("/{slot_id}")
def fetch_slot(
    slot_id: int,
    ledger: BookingLedger = Depends(get_ledger),
) -> SlotWithReleasePayload:
    try:
        slot = ledger.get_slot(slot_id)
    except AppError as exc:
        raise http_error(exc) from None
    for entry in ledger.list_slots(slot.date, slot.date):
        if entry.slot.id == slot_id:
            return _slot_with_release(entry)
    return _slot_with_release(SlotWithRelease(slot=slot))


@router.post("/book", status_code=status.HTTP_201_CREATED)
def book_slot(
    payload: BookSlotRequest,
    ledger: BookingLedger = Depends(get_ledger),
) -> BookingResponse:
    draft = ReleaseDraft(
        name=payload.release_name,
        team=payload.team,
        release_type=payload.release_type,
        version=payload.version,
        description=payload.description,
    )
    try:
        release = ledger.book(payload.slot_id, draft)
    except AppError as exc:
        raise http_error(exc) from None
    return BookingResponse(
        message="Slot booked successfully",
        release=ReleasePayload.from_domain(release),
    )


@releases_router.get("/")
def list_upcoming_releases(
    ledger: BookingLedger = Depends(get_ledger),
) -> list[UpcomingReleasePayload]:
    return [
        UpcomingReleasePayload(
            **ReleasePayload.from_domain(pair.release).model_dump(),
            slot=SlotPayload.from_domain(pair.slot) if pair.slot else None,
        )
        for pair in ledger.list_upcoming_releases()
    ]


@releases_router.delete("/{release_id}")
def cancel_booking(
    release_id: int,
    ledger: BookingLedger = Depends(get_ledger),
) -> MessageResponse:
    try:
        ledger.cancel(release_id)
    except AppError as exc:
        raise http_error(exc) from None
    return MessageResponse(message="Booking canceled successfully")


@releases_router.patch("/{release_id}/status")
def update_release_status(
    release_id: int,
    payload: UpdateReleaseStatusRequest,
    ledger: BookingLedger = Depends(get_ledger),
) -> ReleaseStatusResponse:
    try:
        release = ledger.update_status(
            release_id, payload.status, payload.comments or None
        )
    except AppError as exc:
        raise http_error(exc) from None
    return ReleaseStatusResponse(
        message="Release status updated successfully",
        release=ReleasePayload.from_domain(release),
    )


def _slot_with_release(entry: SlotWithRelease) -> SlotWithReleasePayload:
    return SlotWithReleasePayload(
        **SlotPayload.from_domain(entry.slot).model_dump(),
        release=ReleasePayload.from_domain(entry.release) if entry.release else None,
    )

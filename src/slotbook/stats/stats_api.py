"""Dashboard statistics route."""

from __future__ import annotations

import datetime as dt
from typing import Any

from fastapi import APIRouter, Depends, Query, Request

from ..auth.auth_dependencies import require_user
from .stats_service import StatsService

router = APIRouter(
    prefix="/api/stats",
    tags=["stats"],
    dependencies=[Depends(require_user)],
)


def get_stats_service(request: Request) -> StatsService:
    try:
        return request.app.state.stats_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("StatsService is not configured") from exc


@router.get("/")
def stats_overview(
    as_of: dt.date | None = Query(default=None, alias="date"),
    service: StatsService = Depends(get_stats_service),
) -> dict[str, Any]:
    """Return booking counters for slots dated ``date`` (default today) or later."""
    return service.overview(today=as_of)

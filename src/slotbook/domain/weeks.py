"""Calendar helpers for Monday-start booking weeks.

Slots are published per calendar week and every listing or statistic groups
them by the week that starts on Monday. Day granularity only: callers pass
``date`` objects, never datetimes.
"""

from __future__ import annotations

from datetime import date, timedelta


def week_start(day: date) -> date:
    """Return the Monday of the week containing ``day``."""

    return day - timedelta(days=day.weekday())


def week_end(day: date) -> date:
    """Return the Sunday of the week containing ``day``."""

    return week_start(day) + timedelta(days=6)


def week_bounds(day: date) -> tuple[date, date]:
    """Return inclusive ``(monday, sunday)`` bounds for the week of ``day``."""

    start = week_start(day)
    return start, start + timedelta(days=6)


def next_week_bounds(day: date) -> tuple[date, date]:
    start, end = week_bounds(day)
    return start + timedelta(days=7), end + timedelta(days=7)


def is_past(day: date, *, today: date) -> bool:
    """Return ``True`` when ``day`` is strictly before ``today``."""

    return day < today


__all__ = ["week_start", "week_end", "week_bounds", "next_week_bounds", "is_past"]

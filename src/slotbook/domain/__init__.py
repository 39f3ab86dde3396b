"""Pure calendar helpers shared by the ledger, generator and statistics."""

from .weeks import is_past, next_week_bounds, week_bounds, week_end, week_start

__all__ = ["is_past", "next_week_bounds", "week_bounds", "week_end", "week_start"]

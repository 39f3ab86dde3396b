"""Database initialization helpers."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from .db_models import Base


def init_db(engine: Engine) -> None:
    """Create missing tables; slots and templates are seeded by their services."""
    Base.metadata.create_all(engine)

"""Application configuration builder."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .db.db_init import init_db


class StorageBackend(StrEnum):
    MEMORY = "memory"
    SQLALCHEMY = "sqlalchemy"


@dataclass(slots=True)
class AppConfig:
    database_url: str
    storage_backend: str
    slot_horizon_weeks: int
    jwt_signing_key: str
    admin_credentials_path: Path
    admin_jwt_ttl_hours: int
    engine: Engine | None = None
    session_factory: sessionmaker[Session] | None = None


def build_session_factory(database_url: str) -> tuple[Engine, sessionmaker[Session]]:
    """Create engine + session factory and make sure the schema exists."""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    engine = create_engine(database_url, future=True, connect_args=connect_args)
    session_factory: sessionmaker[Session] = sessionmaker(bind=engine, expire_on_commit=False)
    init_db(engine)
    return engine, session_factory


def load_config() -> AppConfig:
    """Load configuration from environment (SQLite by default)."""
    storage_backend = os.getenv("STORAGE_BACKEND", StorageBackend.SQLALCHEMY.value).lower()
    if storage_backend not in {item.value for item in StorageBackend}:
        raise ValueError(f"Unsupported STORAGE_BACKEND '{storage_backend}'")

    slot_horizon_weeks = int(os.getenv("SLOT_HORIZON_WEEKS", 4))
    if slot_horizon_weeks < 0:
        raise ValueError("SLOT_HORIZON_WEEKS must not be negative")

    database_url = os.getenv("DATABASE_URL", "sqlite:///slotbook.db")
    engine: Engine | None = None
    session_factory: sessionmaker[Session] | None = None
    if storage_backend == StorageBackend.SQLALCHEMY:
        engine, session_factory = build_session_factory(database_url)

    return AppConfig(
        database_url=database_url,
        storage_backend=storage_backend,
        slot_horizon_weeks=slot_horizon_weeks,
        jwt_signing_key=os.getenv("JWT_SIGNING_KEY", ""),
        admin_credentials_path=Path(
            os.getenv("ADMIN_CREDENTIALS_PATH", "secrets/runtime_credentials.json")
        ),
        admin_jwt_ttl_hours=int(os.getenv("ADMIN_JWT_TTL_HOURS", 12)),
        engine=engine,
        session_factory=session_factory,
    )

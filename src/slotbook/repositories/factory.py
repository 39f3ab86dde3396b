"""Build storage implementations for the configured backend."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..email_templates.memory_repository import InMemoryTemplateRepository
from ..email_templates.templates_repository import SqlAlchemyTemplateRepository
from ..slots.memory_ledger import InMemoryBookingLedger
from ..slots.slots_repository import SqlAlchemyBookingLedger
from .interfaces import BookingLedger, TemplateRepository

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from ..config import AppConfig


def _require_session_factory(config: "AppConfig"):
    if config.session_factory is None:
        raise RuntimeError("sqlalchemy storage requires a configured session factory")
    return config.session_factory


def build_ledger(config: "AppConfig") -> BookingLedger:
    if config.storage_backend == "memory":
        return InMemoryBookingLedger()
    return SqlAlchemyBookingLedger(_require_session_factory(config))


def build_template_repository(config: "AppConfig") -> TemplateRepository:
    if config.storage_backend == "memory":
        return InMemoryTemplateRepository()
    return SqlAlchemyTemplateRepository(_require_session_factory(config))


__all__ = ["build_ledger", "build_template_repository"]

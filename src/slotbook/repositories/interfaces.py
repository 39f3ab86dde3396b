"""Repository interfaces for persistence layer implementations."""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Protocol

from ..email_templates.templates_models import EmailTemplate
from ..slots.slots_models import (
    LedgerSnapshot,
    Release,
    ReleaseDraft,
    ReleaseWithSlot,
    Slot,
    SlotSpec,
    SlotWithRelease,
)


class BookingLedger(Protocol):
    """Owns slots and releases and keeps their pairing consistent."""

    def get_slot(self, slot_id: int) -> Slot:
        """Return a slot by identifier or raise ``NotFoundError``."""

    def list_slots(self, start: date, end: date) -> list[SlotWithRelease]:
        """Return slots dated within ``[start, end]`` ordered by date and ordinal."""

    def get_release(self, release_id: int) -> Release:
        """Return a release by identifier or raise ``NotFoundError``."""

    def list_upcoming_releases(self, today: date | None = None) -> list[ReleaseWithSlot]:
        """Return releases whose slot is dated ``today`` or later."""

    def book(self, slot_id: int, draft: ReleaseDraft, today: date | None = None) -> Release:
        """Create a pending release and mark its slot booked in one unit."""

    def cancel(self, release_id: int) -> Release:
        """Delete the release and free its slot in one unit."""

    def update_status(
        self, release_id: int, status: str, comments: str | None = None
    ) -> Release:
        """Set ``status`` and ``comments`` leaving the pairing untouched."""

    def add_slots(self, specs: Iterable[SlotSpec]) -> int:
        """Persist slots that do not exist yet for their (date, ordinal)."""

    def snapshot(self) -> LedgerSnapshot:
        """Return a consistent copy of all slots and releases."""


class TemplateRepository(Protocol):
    """Persistence operations for notification e-mail templates."""

    def list(self, category: str | None = None) -> list[EmailTemplate]:
        """Return templates ordered by category and id."""

    def get(self, template_id: int) -> EmailTemplate:
        """Return a template or raise ``NotFoundError``."""

    def create(self, values: dict[str, Any]) -> EmailTemplate:
        """Persist a new template."""

    def update(self, template_id: int, changes: dict[str, Any]) -> EmailTemplate:
        """Apply a partial update and return the stored template."""

    def delete(self, template_id: int) -> None:
        """Remove a template or raise ``NotFoundError``."""

    def count(self) -> int:
        """Return the number of stored templates."""


__all__ = ["BookingLedger", "TemplateRepository"]

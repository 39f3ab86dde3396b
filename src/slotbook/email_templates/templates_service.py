"""Manage notification e-mail templates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from ..exceptions import ForbiddenError, InvalidArgumentError
from .default_templates import default_template_values
from .templates_models import EmailTemplate, TemplateCategory, render_text

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from ..repositories.interfaces import TemplateRepository

logger = structlog.get_logger(__name__)

_CATEGORIES = frozenset(category.value for category in TemplateCategory)


@dataclass(slots=True)
class RenderedTemplate:
    subject: str
    body: str


@dataclass(slots=True)
class EmailTemplateService:
    """CRUD over templates with the default-template deletion guard."""

    repo: "TemplateRepository"

    def ensure_defaults(self) -> int:
        """Seed default templates when the store is empty; return how many were added."""
        if self.repo.count():
            return 0
        seeded = default_template_values()
        for values in seeded:
            self.repo.create(values)
        logger.info("templates.defaults.seeded", count=len(seeded))
        return len(seeded)

    def list(self, category: str | None = None) -> list[EmailTemplate]:
        if category is not None:
            self._check_category(category)
        return self.repo.list(category)

    def get(self, template_id: int) -> EmailTemplate:
        return self.repo.get(template_id)

    def create(self, values: dict[str, Any]) -> EmailTemplate:
        self._check_category(values.get("category"))
        template = self.repo.create({**values, "is_default": False})
        logger.info("templates.created", template_id=template.id, category=template.category)
        return template

    def update(self, template_id: int, changes: dict[str, Any]) -> EmailTemplate:
        changes = {key: value for key, value in changes.items() if key != "is_default"}
        nulls = sorted(key for key, value in changes.items() if value is None)
        if nulls:
            raise InvalidArgumentError(f"Template fields cannot be null: {', '.join(nulls)}")
        if "category" in changes:
            self._check_category(changes["category"])
        template = self.repo.update(template_id, changes)
        logger.info("templates.updated", template_id=template_id, fields=sorted(changes))
        return template

    def delete(self, template_id: int) -> None:
        template = self.repo.get(template_id)
        if template.is_default:
            logger.warning("templates.delete.forbidden", template_id=template_id)
            raise ForbiddenError("Default templates cannot be deleted")
        self.repo.delete(template_id)
        logger.info("templates.deleted", template_id=template_id)

    def render(self, template_id: int, values: dict[str, str]) -> RenderedTemplate:
        template = self.repo.get(template_id)
        return RenderedTemplate(
            subject=render_text(template.subject, values),
            body=render_text(template.body, values),
        )

    @staticmethod
    def _check_category(category: Any) -> None:
        if category not in _CATEGORIES:
            raise InvalidArgumentError(f"Unknown template category '{category}'")

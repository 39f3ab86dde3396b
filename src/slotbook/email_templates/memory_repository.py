"""In-memory e-mail template store."""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from ..exceptions import NotFoundError, ensure_found
from .templates_models import EmailTemplate

_MUTABLE_FIELDS = ("name", "subject", "body", "category", "variables", "is_default")


def _copy(template: EmailTemplate) -> EmailTemplate:
    return replace(template, variables=dict(template.variables))


class InMemoryTemplateRepository:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._templates: dict[int, EmailTemplate] = {}
        self._next_id = 1

    def list(self, category: str | None = None) -> list[EmailTemplate]:
        with self._lock:
            items = [
                _copy(template)
                for template in self._templates.values()
                if category is None or template.category == category
            ]
        items.sort(key=lambda template: (template.category, template.id))
        return items

    def get(self, template_id: int) -> EmailTemplate:
        with self._lock:
            template = ensure_found(
                self._templates.get(template_id), entity="Email template", identifier=template_id
            )
            return _copy(template)

    def create(self, values: dict[str, Any]) -> EmailTemplate:
        now = datetime.now(timezone.utc)
        with self._lock:
            template = EmailTemplate(
                id=self._next_id,
                name=values["name"],
                subject=values["subject"],
                body=values["body"],
                category=values["category"],
                variables=dict(values.get("variables") or {}),
                is_default=bool(values.get("is_default", False)),
                created_at=now,
                updated_at=now,
            )
            self._next_id += 1
            self._templates[template.id] = template
            return _copy(template)

    def update(self, template_id: int, changes: dict[str, Any]) -> EmailTemplate:
        with self._lock:
            template = ensure_found(
                self._templates.get(template_id), entity="Email template", identifier=template_id
            )
            for key in _MUTABLE_FIELDS:
                if key in changes:
                    value = changes[key]
                    setattr(template, key, dict(value) if key == "variables" else value)
            template.updated_at = datetime.now(timezone.utc)
            return _copy(template)

    def delete(self, template_id: int) -> None:
        with self._lock:
            if self._templates.pop(template_id, None) is None:
                raise NotFoundError(f"Email template '{template_id}' not found")

    def count(self) -> int:
        with self._lock:
            return len(self._templates)

"""E-mail template domain dataclass."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")


class TemplateCategory(StrEnum):
    BOOKING = "booking"
    STATUS_UPDATE = "status-update"
    REMINDER = "reminder"


@dataclass(slots=True)
class EmailTemplate:
    id: int
    name: str
    subject: str
    body: str
    category: str
    variables: dict[str, str] = field(default_factory=dict)
    is_default: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


def render_text(text: str, values: dict[str, str]) -> str:
    """Substitute ``{{name}}`` placeholders, leaving unknown names untouched."""

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in values:
            return str(values[key])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_replace, text)

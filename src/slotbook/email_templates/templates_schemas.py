"""Pydantic schemas for e-mail template endpoints."""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field

from .templates_models import EmailTemplate, TemplateCategory


class EmailTemplatePayload(BaseModel):
    id: int
    name: str
    subject: str
    body: str
    category: str
    variables: dict[str, str] = Field(default_factory=dict)
    is_default: bool = False
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    @classmethod
    def from_domain(cls, template: EmailTemplate) -> "EmailTemplatePayload":
        return cls(
            id=template.id,
            name=template.name,
            subject=template.subject,
            body=template.body,
            category=template.category,
            variables=dict(template.variables),
            is_default=template.is_default,
            created_at=template.created_at,
            updated_at=template.updated_at,
        )


class EmailTemplateCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    subject: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    category: TemplateCategory
    variables: dict[str, str] = Field(default_factory=dict)


class EmailTemplateUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    subject: str | None = Field(default=None, min_length=1)
    body: str | None = Field(default=None, min_length=1)
    category: TemplateCategory | None = None
    variables: dict[str, str] | None = None


class TemplatePreviewRequest(BaseModel):
    values: dict[str, str] = Field(default_factory=dict)


class TemplatePreviewResponse(BaseModel):
    subject: str
    body: str

"""E-mail template repository backed by SQLAlchemy."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..db.db_models import EmailTemplateModel
from ..exceptions import ensure_found, handle_sqlalchemy_errors
from .templates_models import EmailTemplate

_MUTABLE_FIELDS = ("name", "subject", "body", "category", "variables", "is_default")


class SqlAlchemyTemplateRepository:
    """Provide access to notification templates stored in the database."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def list(self, category: str | None = None) -> list[EmailTemplate]:
        with self._session_factory() as session:
            query = select(EmailTemplateModel).order_by(
                EmailTemplateModel.category, EmailTemplateModel.id
            )
            if category is not None:
                query = query.where(EmailTemplateModel.category == category)
            return [self._to_domain(row) for row in session.execute(query).scalars()]

    def get(self, template_id: int) -> EmailTemplate:
        with self._session_factory() as session:
            row = ensure_found(
                session.get(EmailTemplateModel, template_id),
                entity="Email template",
                identifier=template_id,
            )
            return self._to_domain(row)

    def create(self, values: dict[str, Any]) -> EmailTemplate:
        now = datetime.now(timezone.utc)
        with self._session_factory() as session:
            row = EmailTemplateModel(
                name=values["name"],
                subject=values["subject"],
                body=values["body"],
                category=values["category"],
                variables=dict(values.get("variables") or {}),
                is_default=bool(values.get("is_default", False)),
                created_at=now,
                updated_at=now,
            )
            with handle_sqlalchemy_errors(entity="Email template"):
                session.add(row)
                session.commit()
            return self._to_domain(row)

    def update(self, template_id: int, changes: dict[str, Any]) -> EmailTemplate:
        with self._session_factory() as session:
            row = ensure_found(
                session.get(EmailTemplateModel, template_id),
                entity="Email template",
                identifier=template_id,
            )
            for key in _MUTABLE_FIELDS:
                if key in changes:
                    value = changes[key]
                    setattr(row, key, dict(value) if key == "variables" else value)
            row.updated_at = datetime.now(timezone.utc)
            with handle_sqlalchemy_errors(entity="Email template"):
                session.commit()
            return self._to_domain(row)

    def delete(self, template_id: int) -> None:
        with self._session_factory() as session:
            row = ensure_found(
                session.get(EmailTemplateModel, template_id),
                entity="Email template",
                identifier=template_id,
            )
            with handle_sqlalchemy_errors(entity="Email template"):
                session.delete(row)
                session.commit()

    def count(self) -> int:
        with self._session_factory() as session:
            return session.execute(select(func.count(EmailTemplateModel.id))).scalar() or 0

    @staticmethod
    def _to_domain(model: EmailTemplateModel) -> EmailTemplate:
        return EmailTemplate(
            id=model.id,
            name=model.name,
            subject=model.subject,
            body=model.body,
            category=model.category,
            variables=dict(model.variables or {}),
            is_default=bool(model.is_default),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

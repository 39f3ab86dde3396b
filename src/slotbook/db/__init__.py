"""Database models and schema helpers."""

from .db_models import Base, EmailTemplateModel, ReleaseModel, SlotModel

__all__ = ["Base", "EmailTemplateModel", "ReleaseModel", "SlotModel"]

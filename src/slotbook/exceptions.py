"""Domain level exceptions and helpers for repository layers."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, TypeVar

import structlog
from sqlalchemy import exc as sa_exc

__all__ = [
    "AppError",
    "NotFoundError",
    "ConflictError",
    "InvalidArgumentError",
    "ForbiddenError",
    "RepositoryError",
    "IntegrityConstraintViolation",
    "DatabaseOperationError",
    "ensure_found",
    "handle_sqlalchemy_errors",
]

T = TypeVar("T")

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base class for application specific errors."""

    failure_reason = "internal_error"


class NotFoundError(AppError):
    """Raised when a slot, release or template could not be located."""

    failure_reason = "not_found"


class ConflictError(AppError):
    """Raised when a slot is already occupied by another release."""

    failure_reason = "conflict"


class InvalidArgumentError(AppError):
    """Raised for malformed input or a booking attempt on a past slot."""

    failure_reason = "invalid_argument"


class ForbiddenError(AppError):
    """Raised when an operation is not allowed on the target record."""

    failure_reason = "forbidden"


class RepositoryError(AppError):
    """Base class for persistence layer failures."""


class IntegrityConstraintViolation(RepositoryError):
    """Raised when a database constraint is violated."""


class DatabaseOperationError(RepositoryError):
    """Raised for unexpected database errors."""


def ensure_found(record: T | None, *, entity: str, identifier: object) -> T:
    """Ensure a record exists, otherwise raise :class:`NotFoundError`."""

    if record is None:
        raise NotFoundError(f"{entity} '{identifier}' not found")
    return record


def _prefixed(entity: str | None, message: str) -> str:
    return f"{entity}: {message}" if entity else message


@contextmanager
def handle_sqlalchemy_errors(*, entity: str | None = None) -> Iterator[None]:
    """Translate SQLAlchemy errors raised inside the block into repository errors.

    Constraint violations become :class:`IntegrityConstraintViolation` so the
    ledger can report a lost booking race as a conflict; every other driver
    error becomes :class:`DatabaseOperationError`.
    """

    try:
        yield
    except sa_exc.IntegrityError as exc:
        logger.warning("repository.integrity_error", entity=entity, error=str(exc.orig))
        raise IntegrityConstraintViolation(
            _prefixed(entity, "integrity constraint violated")
        ) from exc
    except sa_exc.DBAPIError as exc:
        logger.error("repository.database_error", entity=entity, error=str(exc.orig))
        raise DatabaseOperationError(_prefixed(entity, "database operation failed")) from exc

"""Translate domain errors into HTTP responses for the routers."""

from __future__ import annotations

from fastapi import HTTPException, status

from .exceptions import (
    AppError,
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
)

_STATUS_BY_ERROR: dict[type[AppError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
}


def http_error(exc: AppError) -> HTTPException:
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            status_code = code
            break
    return HTTPException(
        status_code=status_code,
        detail={
            "status": "error",
            "failure_reason": exc.failure_reason,
            "details": str(exc),
        },
    )


__all__ = ["http_error"]

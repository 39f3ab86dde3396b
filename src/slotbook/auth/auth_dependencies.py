"""Bearer-token dependencies shared by every protected router."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .auth_service import (
    AuthService,
    InsufficientRoleError,
    InvalidTokenError,
    Role,
    TokenExpiredError,
)

security = HTTPBearer(auto_error=False)


@dataclass(slots=True, frozen=True)
class Principal:
    """Caller identity decoded from a validated token."""

    username: str
    role: str
    expires_at: int

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value


def get_auth_service(request: Request) -> AuthService:
    try:
        return request.app.state.auth_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("AuthService is not configured") from exc


def _auth_error(status_code: int, reason: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"status": "error", "failure_reason": reason},
    )


def _authorize(
    credentials: HTTPAuthorizationCredentials | None,
    service: AuthService,
    required_role: str | None,
) -> Principal:
    if credentials is None:
        raise _auth_error(status.HTTP_401_UNAUTHORIZED, "missing_token")
    try:
        claims = service.validate_token(credentials.credentials, required_role=required_role)
    except TokenExpiredError as exc:
        raise _auth_error(status.HTTP_401_UNAUTHORIZED, "token_expired") from exc
    except InvalidTokenError as exc:
        raise _auth_error(status.HTTP_401_UNAUTHORIZED, "invalid_token") from exc
    except InsufficientRoleError as exc:
        raise _auth_error(status.HTTP_403_FORBIDDEN, "insufficient_role") from exc
    return Principal(
        username=claims["sub"],
        role=claims.get("role", Role.TEAM.value),
        expires_at=int(claims.get("exp", 0)),
    )


def _role_dependency(required_role: str | None) -> Callable[..., Principal]:
    def dependency(
        credentials: HTTPAuthorizationCredentials | None = Depends(security),
        service: AuthService = Depends(get_auth_service),
    ) -> Principal:
        return _authorize(credentials, service, required_role)

    return dependency


# module-level callables so tests can target them in dependency_overrides
require_user = _role_dependency(None)
require_admin_user = _role_dependency(Role.ADMIN.value)


__all__ = ["Principal", "get_auth_service", "require_admin_user", "require_user"]

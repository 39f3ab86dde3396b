"""Login and session introspection endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel

from .auth_dependencies import Principal, get_auth_service, require_user
from .auth_service import AuthService, InvalidCredentialsError, LoginThrottledError

router = APIRouter(prefix="/api", tags=["auth"])


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    username: str
    role: str


class SessionResponse(BaseModel):
    username: str
    role: str
    is_admin: bool
    expires_at: int


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    client_ip = request.client.host if request.client else None
    try:
        issued = service.authenticate(
            username=payload.username,
            password=payload.password,
            client_ip=client_ip,
        )
    except LoginThrottledError as exc:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={"status": "error", "failure_reason": "throttled", "details": str(exc)},
        ) from exc
    except InvalidCredentialsError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"status": "error", "failure_reason": "invalid_credentials"},
        ) from exc
    return LoginResponse(
        access_token=issued.access_token,
        expires_in=issued.expires_in,
        username=issued.username,
        role=issued.role,
    )


@router.get("/me", response_model=SessionResponse)
def current_session(principal: Principal = Depends(require_user)) -> SessionResponse:
    """Tell the dashboard who is signed in and whether admin actions apply."""
    return SessionResponse(
        username=principal.username,
        role=principal.role,
        is_admin=principal.is_admin,
        expires_at=principal.expires_at,
    )

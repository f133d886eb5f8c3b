"""Shared FastAPI dependencies for API routes."""

from __future__ import annotations

from fastapi import Cookie, Depends, Header, HTTPException, Request, Response, status

from sermon_wizard.config import get_settings
from sermon_wizard.services.access import decode_access_token
from sermon_wizard.services.rate_limit import FixedWindowRateLimiter
from sermon_wizard.services.wizard import SermonWizard, SessionStore

__all__ = [
    "AUTH_COOKIE",
    "CONVERSATION_COOKIE",
    "enforce_rate_limit",
    "get_rate_limiter",
    "get_session_store",
    "get_wizard",
    "has_access",
    "require_access",
    "set_conversation_cookie",
]

# Cookie names for browser sessions
AUTH_COOKIE = "access_token"
CONVERSATION_COOKIE = "conversation_id"


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_wizard(request: Request) -> SermonWizard:
    return request.app.state.wizard


def get_rate_limiter(request: Request) -> FixedWindowRateLimiter:
    return request.app.state.rate_limiter


def has_access(
    authorization: str | None = Header(None),
    access_token: str | None = Cookie(None),
) -> bool:
    """Return True when the caller passed the monthly password gate.

    Checks (in order):
    1. Authorization: Bearer <token> header
    2. access_token cookie

    Always True when no monthly password table is configured.
    """
    if not get_settings().access_gate_enabled:
        return True

    token: str | None = None
    if authorization and authorization.startswith("Bearer "):
        token = authorization[len("Bearer ") :]
    if token is None and access_token:
        token = access_token
    if token is None:
        return False
    return decode_access_token(token) is not None


def require_access(allowed: bool = Depends(has_access)) -> None:
    """Dependency that requires a valid access token for API requests (401 otherwise)."""
    if not allowed:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Acesso não autorizado. Faça login novamente.",
        )


def enforce_rate_limit(
    request: Request,
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
) -> None:
    """Reject the request with 429 when the client exceeded its per-minute budget."""
    client = request.client.host if request.client else "unknown"
    if not limiter.hit(client):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Muitas requisições. Aguarde um minuto e tente novamente.",
        )


def set_conversation_cookie(response: Response, conversation_id: str) -> None:
    """Attach the conversation id cookie; its lifetime matches the session TTL."""
    response.set_cookie(
        key=CONVERSATION_COOKIE,
        value=conversation_id,
        httponly=True,
        samesite="lax",
        max_age=get_settings().session_ttl_seconds,
        path="/",
    )

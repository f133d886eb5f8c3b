"""Access gate API routes."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Response, status

from sermon_wizard.api.deps import AUTH_COOKIE
from sermon_wizard.schemas.auth import LoginRequest, TokenResponse
from sermon_wizard.services.access import (
    access_token_expiry,
    create_access_token,
    verify_access_password,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, response: Response) -> TokenResponse:
    """Check the monthly password and return a JWT token.

    Also sets an httponly cookie for browser sessions.
    """
    if not verify_access_password(body.password):
        logger.info("Login rejected: wrong monthly password")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Senha inválida.",
        )

    now = datetime.now(timezone.utc)
    token = create_access_token(now=now)
    max_age = int((access_token_expiry(now) - now).total_seconds())

    # Set httponly cookie for browser sessions
    response.set_cookie(
        key=AUTH_COOKIE,
        value=token,
        httponly=True,
        samesite="lax",
        max_age=max_age,
        path="/",
    )

    return TokenResponse(access_token=token)


@router.post("/logout")
def logout(response: Response) -> dict:
    """Clear the authentication cookie."""
    response.delete_cookie(key=AUTH_COOKIE, path="/")
    return {"detail": "Logged out"}

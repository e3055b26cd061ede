from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from company_api.core.errors import ConfigError, InvalidTokenError
from company_api.core.security import Claims, verify_token
from company_api.core.settings import Settings
from company_api.deps import get_settings

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=_BEARER_CHALLENGE,
    )


def require_auth(request: Request, settings: Settings = Depends(get_settings)) -> Claims:
    header = request.headers.get("Authorization", "")
    if not header:
        raise _unauthorized("authorization header required")

    parts = header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise _unauthorized("authorization header must be Bearer token")

    secret = settings.AUTH_JWT_SECRET
    if not secret:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="authentication not configured")

    try:
        claims = verify_token(parts[1].strip(), secret)
    except (InvalidTokenError, ConfigError):
        raise _unauthorized("invalid or expired token")

    request.state.user_id = claims.sub
    return claims

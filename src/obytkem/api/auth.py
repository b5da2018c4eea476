"""Owner authentication with a shared password and HS256 session tokens.

Provides:
- issue_token(): signs a short-lived token after a password check
- verify_token(): validates a token and returns its subject
- require_admin(): FastAPI dependency guarding admin routes
"""

from __future__ import annotations

import hmac
import time

import jwt
from fastapi import Depends, HTTPException, Request

from obytkem.api.runtime import get_settings
from obytkem.infra.settings import Settings

ADMIN_SUBJECT = "owner"
_ALGORITHM = "HS256"


def _require_auth_configured(settings: Settings) -> str:
    if not settings.admin_password or not settings.session_secret:
        raise HTTPException(status_code=503, detail="auth_not_configured")
    return settings.session_secret


def check_password(password: str, settings: Settings) -> bool:
    _require_auth_configured(settings)
    return hmac.compare_digest(password.encode("utf-8"), settings.admin_password.encode("utf-8"))


def issue_token(settings: Settings, now: float | None = None) -> str:
    secret = _require_auth_configured(settings)
    issued_at = int(now if now is not None else time.time())
    payload = {
        "sub": ADMIN_SUBJECT,
        "iat": issued_at,
        "exp": issued_at + settings.session_ttl_seconds,
    }
    return jwt.encode(payload, secret, algorithm=_ALGORITHM)


def verify_token(token: str, settings: Settings) -> str:
    """Verify a session token and return its subject.

    Raises:
        HTTPException: 401 if the token is invalid or expired.
    """
    secret = _require_auth_configured(settings)
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")

    if payload.get("sub") != ADMIN_SUBJECT:
        raise HTTPException(status_code=401, detail="Invalid token")
    return payload["sub"]


def _extract_bearer_token(request: Request) -> str:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(status_code=401, detail="Missing authorization header")

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid authorization header")

    return parts[1]


def require_admin(request: Request, settings: Settings = Depends(get_settings)) -> str:
    """FastAPI dependency: the caller must hold a valid owner token."""
    return verify_token(_extract_bearer_token(request), settings)

"""Auth routes - owner login and identity."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from obytkem.api.auth import check_password, issue_token, require_admin
from obytkem.api.runtime import get_settings
from obytkem.infra.settings import Settings
from obytkem.observability.logging import get_logger

router = APIRouter(prefix="/auth", tags=["auth"])

logger = get_logger(__name__)


class LoginRequest(BaseModel):
    password: str


@router.post("/login")
def login(body: LoginRequest, settings: Settings = Depends(get_settings)) -> dict:
    """Exchange the owner password for a bearer token."""
    if not check_password(body.password, settings):
        logger.warning("owner login rejected")
        raise HTTPException(status_code=401, detail="invalid_credentials")

    logger.info("owner logged in")
    return {
        "access_token": issue_token(settings),
        "token_type": "bearer",
        "expires_in": settings.session_ttl_seconds,
    }


@router.get("/whoami")
def whoami(subject: str = Depends(require_admin)) -> dict:
    return {"subject": subject, "role": "admin"}

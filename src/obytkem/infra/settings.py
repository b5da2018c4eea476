"""Application settings loaded from environment variables.

Every setting has a safe default so the app starts in demo mode (no
database, no AI key) with nothing configured.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _bool(raw: str | None, default: bool) -> bool:
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration.

    Attributes:
        database_url: PostgreSQL DSN; None selects the in-memory demo store.
        gemini_api_key: Key for the text-generation API; None disables AI.
        optimistic_completion: Report booking success even when the store
            write fails (the failure is logged). Conflicts are never hidden.
        extra_km_rate: Surcharge per km beyond the daily allowance.
        pending_max_age_hours: Age after which PENDING requests expire.
    """

    database_url: str | None = None
    db_password: str | None = None
    db_connect_timeout: int = 5
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    ai_http_timeout: int = 20
    admin_password: str | None = None
    session_secret: str | None = None
    session_ttl_seconds: int = 8 * 3600
    optimistic_completion: bool = True
    extra_km_rate: int = 8
    pending_max_age_hours: int = 72
    id_number_key: str | None = None
    lessor_name: str = "obytkem.cz"
    handover_place: str = "Brno - Bohunice"
    currency_label: str = "Kč"

    @property
    def ai_configured(self) -> bool:
        return bool(self.gemini_api_key)


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from *env* (defaults to os.environ)."""
    if env is None:
        env = os.environ

    return Settings(
        database_url=env.get("DATABASE_URL") or None,
        db_password=env.get("DB_PASSWORD") or None,
        db_connect_timeout=_int(env, "DB_CONNECT_TIMEOUT", 5),
        gemini_api_key=env.get("GEMINI_API_KEY") or env.get("API_KEY") or None,
        gemini_model=env.get("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
        ai_http_timeout=_int(env, "AI_HTTP_TIMEOUT", 20),
        admin_password=env.get("ADMIN_PASSWORD") or None,
        session_secret=env.get("SESSION_SECRET") or None,
        session_ttl_seconds=_int(env, "SESSION_TTL_SECONDS", 8 * 3600),
        optimistic_completion=_bool(env.get("OPTIMISTIC_COMPLETION"), True),
        extra_km_rate=_int(env, "EXTRA_KM_RATE", 8),
        pending_max_age_hours=_int(env, "PENDING_MAX_AGE_HOURS", 72),
        id_number_key=env.get("ID_NUMBER_KEY") or None,
        lessor_name=env.get("LESSOR_NAME") or "obytkem.cz",
        handover_place=env.get("HANDOVER_PLACE") or "Brno - Bohunice",
        currency_label=env.get("CURRENCY_LABEL") or "Kč",
    )

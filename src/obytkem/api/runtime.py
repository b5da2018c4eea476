"""Process-wide collaborators exposed as FastAPI dependencies.

Tests override these via app.dependency_overrides.
"""

from __future__ import annotations

import threading

from obytkem.ai.gemini import GeminiTextGenerator
from obytkem.domain.lifecycle import ReservationLifecycle
from obytkem.infra.settings import Settings, load_settings
from obytkem.infra.store import build_store
from obytkem.observability.logging import get_logger

logger = get_logger(__name__)

_settings: Settings | None = None
_lifecycle: ReservationLifecycle | None = None
_lock = threading.Lock()


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def get_lifecycle() -> ReservationLifecycle:
    """Build the lifecycle manager on first use and load its state."""
    global _lifecycle
    with _lock:
        if _lifecycle is None:
            settings = get_settings()
            lifecycle = ReservationLifecycle(
                build_store(settings),
                GeminiTextGenerator.from_settings(settings),
                settings,
            )
            lifecycle.refresh()
            logger.info(
                "lifecycle initialised",
                extra={
                    "extra_fields": {
                        "database": bool(settings.database_url),
                        "ai": settings.ai_configured,
                    }
                },
            )
            _lifecycle = lifecycle
        return _lifecycle


def reset() -> None:
    """Drop cached settings and lifecycle (test helper)."""
    global _settings, _lifecycle
    with _lock:
        _settings = None
        _lifecycle = None

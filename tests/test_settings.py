"""Tests for environment-driven settings."""

import pytest

from obytkem.infra.settings import DEFAULT_GEMINI_MODEL, load_settings


def test_defaults_select_demo_mode():
    settings = load_settings({})
    assert settings.database_url is None
    assert settings.gemini_api_key is None
    assert settings.ai_configured is False
    assert settings.gemini_model == DEFAULT_GEMINI_MODEL
    assert settings.optimistic_completion is True
    assert settings.extra_km_rate == 8
    assert settings.pending_max_age_hours == 72
    assert settings.currency_label == "Kč"


def test_reads_environment():
    settings = load_settings(
        {
            "DATABASE_URL": "postgresql://u@h/db",
            "GEMINI_API_KEY": "g-key",
            "OPTIMISTIC_COMPLETION": "false",
            "EXTRA_KM_RATE": "10",
            "SESSION_TTL_SECONDS": "600",
            "HANDOVER_PLACE": "Praha",
        }
    )
    assert settings.database_url == "postgresql://u@h/db"
    assert settings.ai_configured is True
    assert settings.optimistic_completion is False
    assert settings.extra_km_rate == 10
    assert settings.session_ttl_seconds == 600
    assert settings.handover_place == "Praha"


def test_api_key_fallback():
    assert load_settings({"API_KEY": "legacy"}).gemini_api_key == "legacy"
    assert load_settings({"API_KEY": "legacy", "GEMINI_API_KEY": "new"}).gemini_api_key == "new"


def test_blank_values_use_defaults():
    settings = load_settings({"DATABASE_URL": "", "EXTRA_KM_RATE": " ", "OPTIMISTIC_COMPLETION": ""})
    assert settings.database_url is None
    assert settings.extra_km_rate == 8
    assert settings.optimistic_completion is True


def test_invalid_integer():
    with pytest.raises(RuntimeError, match="EXTRA_KM_RATE"):
        load_settings({"EXTRA_KM_RATE": "eight"})

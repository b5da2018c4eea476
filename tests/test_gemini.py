"""Tests for the Gemini text generator (HTTP mocked)."""

from __future__ import annotations

import json
from datetime import date
from unittest.mock import MagicMock

import pytest
import requests

from obytkem.ai.gemini import GEMINI_BASE_URL, GeminiTextGenerator
from obytkem.domain.contracts import build_contract_details
from obytkem.domain.errors import CollaboratorUnavailable
from obytkem.infra.settings import Settings

from helpers import make_reservation, make_vehicle


def _response(text: str | None = None, payload: dict | None = None) -> MagicMock:
    resp = MagicMock()
    resp.raise_for_status.return_value = None
    if payload is None:
        payload = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    resp.json.return_value = payload
    return resp


def _generator(session: MagicMock, api_key: str | None = "test-key") -> GeminiTextGenerator:
    return GeminiTextGenerator(api_key=api_key, model="gemini-1.5-flash", timeout=7, session=session)


def _details():
    return build_contract_details(
        make_reservation(date(2026, 7, 10), date(2026, 7, 20)),
        make_vehicle(),
        None,
        lessor_name="obytkem.cz",
        handover_place="Brno",
    )


class TestContractText:
    def test_posts_prompt_with_timeout(self):
        session = MagicMock()
        session.post.return_value = _response("  CONTRACT  ")

        assert _generator(session).generate_contract_text(_details()) == "CONTRACT"

        args, kwargs = session.post.call_args
        assert args[0] == f"{GEMINI_BASE_URL}/gemini-1.5-flash:generateContent"
        assert kwargs["params"] == {"key": "test-key"}
        assert kwargs["timeout"] == 7
        assert "systemInstruction" in kwargs["json"]
        assert "1AB 2345" in kwargs["json"]["contents"][0]["parts"][0]["text"]

    def test_unconfigured_raises_without_request(self):
        session = MagicMock()
        with pytest.raises(CollaboratorUnavailable) as exc_info:
            _generator(session, api_key=None).generate_contract_text(_details())
        assert exc_info.value.reason_code == "text_generator_unavailable"
        session.post.assert_not_called()

    def test_transport_error(self):
        session = MagicMock()
        session.post.side_effect = requests.Timeout("slow")
        with pytest.raises(CollaboratorUnavailable):
            _generator(session).generate_contract_text(_details())

    def test_http_error(self):
        session = MagicMock()
        resp = _response("x")
        resp.raise_for_status.side_effect = requests.HTTPError("500")
        session.post.return_value = resp
        with pytest.raises(CollaboratorUnavailable):
            _generator(session).generate_contract_text(_details())

    @pytest.mark.parametrize("payload", [{}, {"candidates": []}, {"candidates": [{"content": {"parts": [{"text": "  "}]}}]}])
    def test_empty_response(self, payload):
        session = MagicMock()
        session.post.return_value = _response(payload=payload)
        with pytest.raises(CollaboratorUnavailable):
            _generator(session).generate_contract_text(_details())


class TestSummary:
    def test_parses_json_answer(self):
        session = MagicMock()
        session.post.return_value = _response(
            json.dumps({"summary": "Busy summer", "occupancyRate": "42 %", "recommendation": "Raise prices"})
        )
        summary = _generator(session).summarize_reservations(
            [make_reservation(date(2026, 7, 10), date(2026, 7, 20))]
        )
        assert summary.summary == "Busy summer"
        assert summary.occupancy_rate == "42 %"
        assert summary.source == "ai"
        body = session.post.call_args.kwargs["json"]
        assert body["generationConfig"] == {"responseMimeType": "application/json"}

    def test_malformed_json(self):
        session = MagicMock()
        session.post.return_value = _response("not json")
        with pytest.raises(CollaboratorUnavailable):
            _generator(session).summarize_reservations([])


def test_from_settings():
    generator = GeminiTextGenerator.from_settings(Settings(gemini_api_key="k", gemini_model="m"))
    assert generator.configured
    assert not GeminiTextGenerator.from_settings(Settings()).configured

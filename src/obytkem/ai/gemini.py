"""Text generation via the Gemini REST API.

Both operations are best effort: any configuration, transport or payload
problem is raised as CollaboratorUnavailable and the caller falls back to
local output. Security: prompts contain customer data; they are never logged.
"""

from __future__ import annotations

import json
from typing import Any, Protocol

import requests

from obytkem.domain.contracts import ContractDetails
from obytkem.domain.errors import CollaboratorUnavailable
from obytkem.domain.models import Reservation, ReservationSummary
from obytkem.infra.settings import Settings
from obytkem.observability.logging import get_logger

logger = get_logger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

_CONTRACT_SYSTEM_INSTRUCTION = (
    "Write only the contract text, without any introduction. "
    "Use formal, professional legal language."
)


class TextGenerator(Protocol):
    """Text-generation collaborator used by the reservation lifecycle."""

    def generate_contract_text(self, details: ContractDetails) -> str:
        ...

    def summarize_reservations(self, reservations: list[Reservation]) -> ReservationSummary:
        ...


def _contract_prompt(details: ContractDetails) -> str:
    return (
        "You are a legal assistant for a motorhome rental company in the Czech Republic.\n"
        "Draft a professional, binding motorhome rental agreement with these details:\n\n"
        f"LESSOR: {details.lessor_name}\n"
        f"LESSEE: {details.customer_name}, address: {details.customer_address}, "
        f"e-mail: {details.customer_email}\n"
        f"VEHICLE: {details.vehicle_name}, licence plate: {details.license_plate}\n"
        f"PERIOD: from {details.start_date} to {details.end_date}\n"
        f"PRICE: {details.price}\n"
        f"DEPOSIT: {details.deposit}\n"
        f"DAILY KM ALLOWANCE: {details.km_limit_per_day} km\n\n"
        "The agreement must contain:\n"
        "- a clear definition of the rented vehicle\n"
        "- conditions of use (no smoking, no pets without consent)\n"
        "- penalties for late return or excessive soiling\n"
        "- the procedure in case of an accident\n"
        f"- place of handover: {details.handover_place}\n"
    )


def _summary_prompt(reservations: list[Reservation]) -> str:
    data = [
        {
            "start": r.start_date.isoformat(),
            "end": r.end_date.isoformat(),
            "price": r.total_price,
            "status": r.status.value,
        }
        for r in reservations
    ]
    return (
        "Analyse these motorhome reservations and answer in JSON:\n"
        f"{json.dumps(data)}\n\n"
        "Required JSON format:\n"
        '{"summary": "short summary of the booking situation", '
        '"occupancyRate": "occupancy as a percentage string", '
        '"recommendation": "concrete pricing and marketing advice for the owner"}'
    )


class GeminiTextGenerator:
    """Gemini client with explicit timeouts.

    Args:
        api_key: API key; None means unconfigured (every call raises).
        model: Model name, e.g. "gemini-1.5-flash".
        timeout: Request timeout in seconds.
        session: Optional requests session (tests inject a mock).
    """

    def __init__(
        self,
        api_key: str | None,
        model: str,
        timeout: int = 20,
        session: requests.Session | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiTextGenerator":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout=settings.ai_http_timeout,
        )

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def _generate(self, prompt: str, *, system: str | None = None, json_output: bool = False) -> str:
        if not self._api_key:
            raise CollaboratorUnavailable("text_generator", "GEMINI_API_KEY not configured")

        body: dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        if system:
            body["systemInstruction"] = {"parts": [{"text": system}]}
        if json_output:
            body["generationConfig"] = {"responseMimeType": "application/json"}

        url = f"{GEMINI_BASE_URL}/{self._model}:generateContent"
        try:
            resp = self._session.post(
                url,
                params={"key": self._api_key},
                json=body,
                timeout=self._timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(
                "text generation request failed",
                extra={"extra_fields": {"model": self._model, "error_type": type(e).__name__}},
            )
            raise CollaboratorUnavailable("text_generator", str(e)) from e

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            raise CollaboratorUnavailable("text_generator", "empty response")

        text = (text or "").strip()
        if not text:
            raise CollaboratorUnavailable("text_generator", "empty response")
        return text

    def generate_contract_text(self, details: ContractDetails) -> str:
        return self._generate(_contract_prompt(details), system=_CONTRACT_SYSTEM_INSTRUCTION)

    def summarize_reservations(self, reservations: list[Reservation]) -> ReservationSummary:
        raw = self._generate(_summary_prompt(reservations), json_output=True)
        try:
            parsed = json.loads(raw)
            return ReservationSummary(
                summary=str(parsed["summary"]),
                occupancy_rate=str(parsed["occupancyRate"]),
                recommendation=str(parsed["recommendation"]),
                source="ai",
            )
        except (ValueError, KeyError, TypeError) as e:
            raise CollaboratorUnavailable("text_generator", "malformed analysis payload") from e

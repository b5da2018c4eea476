"""Booking session endpoints - one draft per customer.

Flow: open -> dates -> advance -> contact -> advance -> submit.
Submit requires the Idempotency-Key header; it must match the draft's key
so a retried request never creates a second reservation.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Header, HTTPException, Path
from pydantic import BaseModel

from obytkem.api.runtime import get_lifecycle
from obytkem.api.serializers import booking_to_dict, quote_to_dict, reservation_to_dict
from obytkem.api.sessions import BookingSessions, get_sessions
from obytkem.domain.lifecycle import CreateResult, ReservationLifecycle
from obytkem.domain.models import ContactDetails
from obytkem.domain.pricing import price_breakdown
from obytkem.observability.logging import get_logger
from obytkem.observability.redaction import safe_log_context


class OpenBookingRequest(BaseModel):
    vehicle_id: str


class DatesRequest(BaseModel):
    start_date: date
    end_date: date


class ContactRequest(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    note: str | None = None
    id_number: str | None = None


router = APIRouter(prefix="/bookings", tags=["bookings"])

logger = get_logger(__name__)


@router.post("", status_code=201)
def open_booking(
    body: OpenBookingRequest,
    idempotency_key: str | None = Header(None, alias="Idempotency-Key"),
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
    sessions: BookingSessions = Depends(get_sessions),
) -> dict:
    workflow = lifecycle.start_booking(body.vehicle_id, idempotency_key=idempotency_key)
    session_id = sessions.open(workflow)
    logger.info(
        "booking session opened",
        extra={"extra_fields": {"session_id": session_id, "vehicle_id": body.vehicle_id}},
    )
    return booking_to_dict(session_id, workflow)


@router.get("/{session_id}")
def get_booking(
    session_id: str = Path(...),
    sessions: BookingSessions = Depends(get_sessions),
) -> dict:
    return booking_to_dict(session_id, sessions.get(session_id))


@router.put("/{session_id}/dates")
def set_dates(
    body: DatesRequest,
    session_id: str = Path(...),
    sessions: BookingSessions = Depends(get_sessions),
) -> dict:
    workflow = sessions.get(session_id)
    workflow.select_dates(body.start_date, body.end_date)
    return booking_to_dict(session_id, workflow)


@router.get("/{session_id}/quote")
def get_quote(
    session_id: str = Path(...),
    sessions: BookingSessions = Depends(get_sessions),
) -> dict:
    workflow = sessions.get(session_id)
    quote = workflow.quote()
    return quote_to_dict(quote, price_breakdown(workflow.vehicle, quote.start_date, quote.end_date))


@router.put("/{session_id}/contact")
def set_contact(
    body: ContactRequest,
    session_id: str = Path(...),
    sessions: BookingSessions = Depends(get_sessions),
) -> dict:
    workflow = sessions.get(session_id)
    workflow.set_contact(
        ContactDetails(
            first_name=body.first_name,
            last_name=body.last_name,
            email=body.email,
            phone=body.phone,
            address=body.address,
            note=body.note,
            id_number=body.id_number,
        )
    )
    return booking_to_dict(session_id, workflow)


@router.post("/{session_id}/actions/advance")
def advance(
    session_id: str = Path(...),
    sessions: BookingSessions = Depends(get_sessions),
) -> dict:
    workflow = sessions.get(session_id)
    workflow.advance()
    return booking_to_dict(session_id, workflow)


@router.post("/{session_id}/actions/back")
def back(
    session_id: str = Path(...),
    sessions: BookingSessions = Depends(get_sessions),
) -> dict:
    workflow = sessions.get(session_id)
    workflow.back()
    return booking_to_dict(session_id, workflow)


@router.post("/{session_id}/actions/submit", status_code=201)
def submit(
    session_id: str = Path(...),
    idempotency_key: str = Header(..., alias="Idempotency-Key"),
    sessions: BookingSessions = Depends(get_sessions),
) -> dict:
    """Submit the draft as a PENDING reservation request.

    Returns:
        reservation, persisted (False when completed without the store),
        replayed (True when this key was already processed).
    """
    workflow = sessions.get(session_id)
    if idempotency_key != workflow.idempotency_key:
        raise HTTPException(status_code=422, detail="idempotency_key_mismatch")

    result: CreateResult = workflow.submit()

    logger.info(
        "booking submitted",
        extra={
            "extra_fields": {
                "reservation_id": result.reservation.id,
                **safe_log_context(
                    session_id=session_id,
                    persisted=result.persisted,
                    replayed=result.replayed,
                ),
            }
        },
    )
    return {
        "reservation": reservation_to_dict(result.reservation),
        "persisted": result.persisted,
        "replayed": result.replayed,
    }

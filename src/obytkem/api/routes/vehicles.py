"""Public catalogue endpoints: vehicles, reserved-day calendar, quotes."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel

from obytkem.api.runtime import get_lifecycle
from obytkem.api.serializers import quote_to_dict, vehicle_to_dict
from obytkem.domain.lifecycle import ReservationLifecycle
from obytkem.domain.pricing import price_breakdown


class QuoteRequest(BaseModel):
    vehicle_id: str
    start_date: date
    end_date: date


router = APIRouter(tags=["vehicles"])


@router.get("/vehicles")
def list_vehicles(lifecycle: ReservationLifecycle = Depends(get_lifecycle)) -> list[dict]:
    return [vehicle_to_dict(v) for v in lifecycle.vehicles() if v.is_active]


@router.get("/vehicles/{vehicle_id}")
def get_vehicle(
    vehicle_id: str = Path(...),
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
) -> dict:
    return vehicle_to_dict(lifecycle.get_vehicle(vehicle_id))


@router.get("/vehicles/{vehicle_id}/calendar")
def vehicle_calendar(
    vehicle_id: str = Path(...),
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
) -> dict:
    """Days of the month on which the vehicle is already taken.

    Only dates are returned; reservation and customer data stay private.
    """
    days = lifecycle.reserved_calendar(vehicle_id, year, month)
    return {
        "vehicle_id": vehicle_id,
        "year": year,
        "month": month,
        "reserved_days": [d.isoformat() for d in days],
    }


@router.post("/quotes")
def create_quote(
    body: QuoteRequest,
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
) -> dict:
    """Validate a date range and price it without opening a booking."""
    workflow = lifecycle.start_booking(body.vehicle_id)
    workflow.select_dates(body.start_date, body.end_date)
    quote = workflow.quote()
    return quote_to_dict(quote, price_breakdown(workflow.vehicle, quote.start_date, quote.end_date))

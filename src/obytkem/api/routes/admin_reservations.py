"""Owner endpoints for reservations: status actions, protocols, contracts."""

from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from pydantic import BaseModel, Field

from obytkem.api.auth import require_admin
from obytkem.api.runtime import get_lifecycle
from obytkem.api.serializers import (
    contract_to_dict,
    customer_to_dict,
    handover_to_dict,
    reservation_to_dict,
    return_to_dict,
)
from obytkem.domain.lifecycle import ReservationLifecycle
from obytkem.domain.models import ReservationStatus


class HandoverRequest(BaseModel):
    mileage: int = Field(..., ge=0)
    fuel_level: int
    cleanliness: str = ""
    damages: str = ""
    notes: str = ""


class ReturnRequest(BaseModel):
    return_mileage: int = Field(..., ge=0)
    return_fuel_level: int
    return_damages: str = ""
    notes: str = ""


class ExpirePendingRequest(BaseModel):
    max_age_hours: int | None = Field(None, ge=1)


router = APIRouter(
    prefix="/admin/reservations",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("")
def list_reservations(
    status: ReservationStatus | None = Query(None),
    vehicle_id: str | None = Query(None),
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
) -> list[dict]:
    items = lifecycle.reservations()
    if status is not None:
        items = [r for r in items if r.status == status]
    if vehicle_id is not None:
        items = [r for r in items if r.vehicle_id == vehicle_id]
    return [reservation_to_dict(r) for r in items]


@router.post("/actions/expire-pending")
def expire_pending(
    body: ExpirePendingRequest,
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
) -> dict:
    max_age = timedelta(hours=body.max_age_hours) if body.max_age_hours else None
    return {"cancelled": lifecycle.expire_stale_pending(max_age)}


@router.get("/{reservation_id}")
def get_reservation(
    reservation_id: str = Path(...),
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
) -> dict:
    """Reservation with its customer, protocols and contracts."""
    reservation = lifecycle.get_reservation(reservation_id)
    customer = lifecycle.get_customer(reservation.customer_id)
    handover = lifecycle.handover_for(reservation_id)
    returned = lifecycle.return_for(reservation_id)
    data = reservation_to_dict(reservation)
    data["customer"] = customer_to_dict(customer) if customer else None
    data["handover"] = handover_to_dict(handover) if handover else None
    data["return"] = return_to_dict(returned) if returned else None
    data["contracts"] = [
        contract_to_dict(c) for c in lifecycle.contracts() if c.reservation_id == reservation_id
    ]
    return data


@router.post("/{reservation_id}/actions/confirm")
def confirm(
    reservation_id: str = Path(...),
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
) -> dict:
    return reservation_to_dict(lifecycle.confirm(reservation_id))


@router.post("/{reservation_id}/actions/cancel")
def cancel(
    reservation_id: str = Path(...),
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
) -> dict:
    return reservation_to_dict(lifecycle.cancel(reservation_id))


@router.post("/{reservation_id}/actions/complete")
def complete(
    reservation_id: str = Path(...),
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
) -> dict:
    return reservation_to_dict(lifecycle.complete(reservation_id))


@router.delete("/{reservation_id}", status_code=204)
def delete_reservation(
    reservation_id: str = Path(...),
    confirm: bool = Query(False),
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
) -> None:
    """Permanently delete; requires ?confirm=true."""
    if not confirm:
        raise HTTPException(status_code=422, detail="confirmation_required")
    lifecycle.delete(reservation_id, confirmed=True)


@router.post("/{reservation_id}/handover", status_code=201)
def record_handover(
    body: HandoverRequest,
    reservation_id: str = Path(...),
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
) -> dict:
    protocol = lifecycle.record_handover(
        reservation_id,
        mileage=body.mileage,
        fuel_level=body.fuel_level,
        cleanliness=body.cleanliness,
        damages=body.damages,
        notes=body.notes,
    )
    return handover_to_dict(protocol)


@router.post("/{reservation_id}/return", status_code=201)
def record_return(
    body: ReturnRequest,
    reservation_id: str = Path(...),
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
) -> dict:
    protocol = lifecycle.record_return(
        reservation_id,
        return_mileage=body.return_mileage,
        return_fuel_level=body.return_fuel_level,
        return_damages=body.return_damages,
        notes=body.notes,
    )
    return return_to_dict(protocol)


@router.post("/{reservation_id}/contract", status_code=201)
def generate_contract(
    reservation_id: str = Path(...),
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
) -> dict:
    return contract_to_dict(lifecycle.generate_contract(reservation_id))

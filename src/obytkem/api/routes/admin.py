"""Owner dashboard endpoints: stats, analysis, contracts, vehicle editing."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Path, Query
from pydantic import BaseModel, Field

from obytkem.api.auth import require_admin
from obytkem.api.runtime import get_lifecycle
from obytkem.api.serializers import contract_to_dict, customer_to_dict, vehicle_to_dict
from obytkem.domain.lifecycle import ReservationLifecycle
from obytkem.domain.models import SeasonRule, Vehicle


class SeasonRuleBody(BaseModel):
    id: str | None = None
    name: str
    start_date: date
    end_date: date
    price_per_day: int


class VehicleBody(BaseModel):
    name: str
    description: str = ""
    license_plate: str = ""
    vin: str | None = None
    base_price: int
    min_days: int = Field(..., ge=1)
    deposit: int
    km_limit_per_day: int
    is_active: bool = True
    season_rules: list[SeasonRuleBody] = []
    equipment: list[str] = []
    images: list[str] = []


router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/stats")
def stats(
    year: int | None = Query(None, ge=2000, le=2100),
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
) -> dict:
    s = lifecycle.stats(year)
    return {
        "total_reservations": s.total_reservations,
        "total_revenue": s.total_revenue,
        "active_bookings": s.active_bookings,
        "pending_bookings": s.pending_bookings,
        "occupancy_rate": s.occupancy_rate,
    }


@router.get("/analysis")
def analysis(lifecycle: ReservationLifecycle = Depends(get_lifecycle)) -> dict:
    summary = lifecycle.analyze()
    return {
        "summary": summary.summary,
        "occupancy_rate": summary.occupancy_rate,
        "recommendation": summary.recommendation,
        "source": summary.source,
    }


@router.get("/contracts")
def list_contracts(lifecycle: ReservationLifecycle = Depends(get_lifecycle)) -> list[dict]:
    return [contract_to_dict(c) for c in lifecycle.contracts()]


@router.get("/customers")
def list_customers(lifecycle: ReservationLifecycle = Depends(get_lifecycle)) -> list[dict]:
    return [customer_to_dict(c) for c in lifecycle.customers()]


@router.get("/vehicles")
def list_vehicles(lifecycle: ReservationLifecycle = Depends(get_lifecycle)) -> list[dict]:
    return [vehicle_to_dict(v, include_vin=True) for v in lifecycle.vehicles()]


@router.put("/vehicles/{vehicle_id}")
def update_vehicle(
    body: VehicleBody,
    vehicle_id: str = Path(...),
    lifecycle: ReservationLifecycle = Depends(get_lifecycle),
) -> dict:
    vehicle = Vehicle(
        id=vehicle_id,
        name=body.name,
        description=body.description,
        license_plate=body.license_plate,
        vin=body.vin,
        base_price=body.base_price,
        min_days=body.min_days,
        deposit=body.deposit,
        km_limit_per_day=body.km_limit_per_day,
        is_active=body.is_active,
        season_rules=tuple(
            SeasonRule(r.name, r.start_date, r.end_date, r.price_per_day, r.id)
            for r in body.season_rules
        ),
        equipment=tuple(body.equipment),
        images=tuple(body.images),
    )
    return vehicle_to_dict(lifecycle.update_vehicle(vehicle), include_vin=True)


@router.post("/refresh")
def refresh(lifecycle: ReservationLifecycle = Depends(get_lifecycle)) -> dict:
    """Reload state from the store; refreshed is False when the store is unreachable."""
    return {"refreshed": lifecycle.refresh()}

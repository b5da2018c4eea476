"""JSON shapes returned by the HTTP API."""

from __future__ import annotations

from obytkem.domain.booking_flow import BookingWorkflow, Quote
from obytkem.domain.models import (
    Customer,
    HandoverProtocol,
    Reservation,
    ReturnProtocol,
    SavedContract,
    SeasonRule,
    Vehicle,
)
from obytkem.domain.pricing import NightPrice


def season_to_dict(rule: SeasonRule) -> dict:
    return {
        "id": rule.id,
        "name": rule.name,
        "start_date": rule.start_date.isoformat(),
        "end_date": rule.end_date.isoformat(),
        "price_per_day": rule.price_per_day,
    }


def vehicle_to_dict(vehicle: Vehicle, *, include_vin: bool = False) -> dict:
    data = {
        "id": vehicle.id,
        "name": vehicle.name,
        "description": vehicle.description,
        "license_plate": vehicle.license_plate,
        "base_price": vehicle.base_price,
        "min_days": vehicle.min_days,
        "deposit": vehicle.deposit,
        "km_limit_per_day": vehicle.km_limit_per_day,
        "is_active": vehicle.is_active,
        "season_rules": [season_to_dict(r) for r in vehicle.season_rules],
        "equipment": list(vehicle.equipment),
        "images": list(vehicle.images),
    }
    if include_vin:
        data["vin"] = vehicle.vin
    return data


def reservation_to_dict(reservation: Reservation) -> dict:
    return {
        "id": reservation.id,
        "vehicle_id": reservation.vehicle_id,
        "customer_id": reservation.customer_id,
        "start_date": reservation.start_date.isoformat(),
        "end_date": reservation.end_date.isoformat(),
        "days": reservation.rental_days,
        "total_price": reservation.total_price,
        "deposit": reservation.deposit,
        "status": reservation.status.value,
        "created_at": reservation.created_at.isoformat(),
        "customer_note": reservation.customer_note,
    }


def customer_to_dict(customer: Customer) -> dict:
    return {
        "id": customer.id,
        "first_name": customer.first_name,
        "last_name": customer.last_name,
        "email": customer.email,
        "phone": customer.phone,
        "address": customer.address,
        "id_number": customer.id_number,
    }


def handover_to_dict(protocol: HandoverProtocol) -> dict:
    return {
        "id": protocol.id,
        "reservation_id": protocol.reservation_id,
        "mileage": protocol.mileage,
        "fuel_level": protocol.fuel_level,
        "cleanliness": protocol.cleanliness,
        "damages": protocol.damages,
        "notes": protocol.notes,
        "recorded_at": protocol.recorded_at.isoformat(),
    }


def return_to_dict(protocol: ReturnProtocol) -> dict:
    return {
        "id": protocol.id,
        "reservation_id": protocol.reservation_id,
        "return_mileage": protocol.return_mileage,
        "return_fuel_level": protocol.return_fuel_level,
        "return_damages": protocol.return_damages,
        "extra_km_charge": protocol.extra_km_charge,
        "notes": protocol.notes,
        "recorded_at": protocol.recorded_at.isoformat(),
    }


def contract_to_dict(contract: SavedContract) -> dict:
    return {
        "id": contract.id,
        "reservation_id": contract.reservation_id,
        "customer_name": contract.customer_name,
        "created_at": contract.created_at.isoformat(),
        "content": contract.content,
        "source": contract.source,
    }


def quote_to_dict(quote: Quote, nights: list[NightPrice]) -> dict:
    return {
        "start_date": quote.start_date.isoformat(),
        "end_date": quote.end_date.isoformat(),
        "days": quote.days,
        "total_price": quote.total_price,
        "deposit": quote.deposit,
        "nights": [
            {"date": n.day.isoformat(), "price": n.price, "season": n.season_name} for n in nights
        ],
    }


def booking_to_dict(session_id: str, workflow: BookingWorkflow) -> dict:
    """Draft state; contact details are echoed back only to the session owner."""
    contact = workflow.contact
    return {
        "session_id": session_id,
        "vehicle_id": workflow.vehicle.id,
        "step": workflow.step.value,
        "idempotency_key": workflow.idempotency_key,
        "start_date": workflow.start_date.isoformat() if workflow.start_date else None,
        "end_date": workflow.end_date.isoformat() if workflow.end_date else None,
        "contact": {
            "first_name": contact.first_name,
            "last_name": contact.last_name,
            "email": contact.email,
            "phone": contact.phone,
            "address": contact.address,
            "note": contact.note,
        },
    }

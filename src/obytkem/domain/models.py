"""Domain records for the camper rental.

All amounts are whole currency units (CZK). Dates are ``datetime.date``;
reservation end dates are the return day and are not billed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class SeasonRule:
    """Per-day price override for an inclusive date range."""

    name: str
    start_date: date
    end_date: date
    price_per_day: int
    id: str | None = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class Vehicle:
    id: str
    name: str
    base_price: int
    min_days: int
    deposit: int
    km_limit_per_day: int
    season_rules: tuple[SeasonRule, ...] = ()
    description: str = ""
    license_plate: str = ""
    vin: str | None = None
    is_active: bool = True
    equipment: tuple[str, ...] = ()
    images: tuple[str, ...] = ()


@dataclass(frozen=True)
class Customer:
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    address: str
    id_number: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Reservation:
    """A booking of one vehicle. ``total_price`` is frozen at creation."""

    id: str
    vehicle_id: str
    customer_id: str
    start_date: date
    end_date: date
    total_price: int
    deposit: int
    status: ReservationStatus
    created_at: datetime
    customer_note: str | None = None
    idempotency_key: str | None = None

    @property
    def rental_days(self) -> int:
        return (self.end_date - self.start_date).days


@dataclass(frozen=True)
class HandoverProtocol:
    reservation_id: str
    mileage: int
    fuel_level: int
    recorded_at: datetime
    cleanliness: str = ""
    damages: str = ""
    notes: str = ""
    id: str | None = None


@dataclass(frozen=True)
class ReturnProtocol:
    reservation_id: str
    return_mileage: int
    return_fuel_level: int
    extra_km_charge: int
    recorded_at: datetime
    return_damages: str = ""
    notes: str = ""
    id: str | None = None


@dataclass(frozen=True)
class SavedContract:
    id: str
    reservation_id: str
    customer_name: str
    created_at: datetime
    content: str
    source: str = "template"


@dataclass(frozen=True)
class ContactDetails:
    """Customer fields collected by the booking flow."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    note: str | None = None
    id_number: str | None = None


@dataclass(frozen=True)
class ReservationRequest:
    """Reservation-creation request emitted by a submitted booking flow."""

    vehicle_id: str
    contact: ContactDetails
    start_date: date
    end_date: date
    total_price: int
    deposit: int
    idempotency_key: str
    status: ReservationStatus = ReservationStatus.PENDING


@dataclass(frozen=True)
class DashboardStats:
    total_reservations: int
    total_revenue: int
    active_bookings: int
    pending_bookings: int
    occupancy_rate: float = 0.0


@dataclass
class ReservationSummary:
    """Owner-facing analysis of the booking calendar."""

    summary: str
    occupancy_rate: str
    recommendation: str
    source: str = "local"

"""Rental contract details and the local (non-AI) contract template.

The template is plain string substitution so a contract can always be
produced, even when the text-generation service is down or unconfigured.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from obytkem.domain.models import (
    Customer,
    Reservation,
    ReservationStatus,
    ReservationSummary,
    Vehicle,
)

UNKNOWN_CUSTOMER = "Unknown customer"


def format_amount(amount: int, currency_label: str = "Kč") -> str:
    """Format whole currency units with a thin thousands separator: 46 000 Kč."""
    return f"{amount:,}".replace(",", " ") + f" {currency_label}"


def format_day(day: date) -> str:
    return f"{day.day}. {day.month}. {day.year}"


@dataclass(frozen=True)
class ContractDetails:
    lessor_name: str
    handover_place: str
    vehicle_name: str
    license_plate: str
    customer_name: str
    customer_address: str
    customer_email: str
    start_date: str
    end_date: str
    price: str
    deposit: str
    km_limit_per_day: int


def build_contract_details(
    reservation: Reservation,
    vehicle: Vehicle | None,
    customer: Customer | None,
    *,
    lessor_name: str,
    handover_place: str,
    currency_label: str = "Kč",
) -> ContractDetails:
    return ContractDetails(
        lessor_name=lessor_name,
        handover_place=handover_place,
        vehicle_name=vehicle.name if vehicle else reservation.vehicle_id,
        license_plate=vehicle.license_plate if vehicle else "",
        customer_name=customer.full_name if customer else UNKNOWN_CUSTOMER,
        customer_address=customer.address if customer else "",
        customer_email=customer.email if customer else "",
        start_date=format_day(reservation.start_date),
        end_date=format_day(reservation.end_date),
        price=format_amount(reservation.total_price, currency_label),
        deposit=format_amount(reservation.deposit, currency_label),
        km_limit_per_day=vehicle.km_limit_per_day if vehicle else 0,
    )


_CONTRACT_TEMPLATE = """\
VEHICLE RENTAL AGREEMENT

1. Parties
Lessor: {lessor_name}
Lessee: {customer_name}, {customer_address}, e-mail: {customer_email}

2. Subject of the rental
The lessor rents to the lessee the motorhome {vehicle_name}, licence plate {license_plate}.

3. Rental period
From {start_date} to {end_date}. Handover and return take place at {handover_place}.

4. Price and deposit
Rental price: {price}. Refundable deposit: {deposit}, paid at handover.
The rental includes {km_limit_per_day} km per day; additional kilometres are charged according to the price list.

5. Conditions of use
Smoking is prohibited in the vehicle. Pets are allowed only with the lessor's prior consent.
The lessee returns the vehicle clean, with the fuel level recorded in the handover protocol.

6. Late return and excessive soiling
Late return and excessive soiling are charged according to the price list and may be deducted from the deposit.

7. Accidents
In case of an accident the lessee notifies the police and the lessor without delay and follows their instructions.

Signed on the day of handover.
Lessor: ____________________    Lessee: ____________________
"""


def render_contract_template(details: ContractDetails) -> str:
    return _CONTRACT_TEMPLATE.format(**details.__dict__)


def occupancy_rate(reservations: Iterable[Reservation], year: int) -> float:
    """Share of the year's days booked by confirmed or completed reservations."""
    year_start = date(year, 1, 1)
    year_end = date(year + 1, 1, 1)
    total_days = (year_end - year_start).days
    booked = 0
    for r in reservations:
        if r.status not in (ReservationStatus.CONFIRMED, ReservationStatus.COMPLETED):
            continue
        lo = max(r.start_date, year_start)
        hi = min(r.end_date, year_end)
        if hi > lo:
            booked += (hi - lo).days
    return min(1.0, booked / total_days)


def local_summary(reservations: list[Reservation], year: int, currency_label: str = "Kč") -> ReservationSummary:
    """Deterministic reservation summary used when AI analysis is unavailable."""
    confirmed = [
        r for r in reservations
        if r.status in (ReservationStatus.CONFIRMED, ReservationStatus.COMPLETED)
    ]
    pending = [r for r in reservations if r.status == ReservationStatus.PENDING]
    revenue = sum(r.total_price for r in confirmed)
    rate = occupancy_rate(reservations, year)

    if pending:
        recommendation = f"Review {len(pending)} pending request(s) so dates are not blocked needlessly."
    elif rate < 0.25:
        recommendation = "Occupancy is low; consider promoting shoulder-season dates."
    else:
        recommendation = "Occupancy is healthy; keep current seasonal prices."

    return ReservationSummary(
        summary=(
            f"{len(confirmed)} confirmed and {len(pending)} pending reservations "
            f"in {year}, confirmed revenue {format_amount(revenue, currency_label)}."
        ),
        occupancy_rate=f"{round(rate * 100)} %",
        recommendation=recommendation,
        source="local",
    )

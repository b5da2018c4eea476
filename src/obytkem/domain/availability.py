"""Vehicle availability checks.

Overlap formula:  (new_start <= existing_end) AND (new_end >= existing_start)

Both ends are inclusive, so a booking returned on day X and another picked up
on day X conflict: same-day turnover is not offered. Cancelled reservations
never block a range.
"""

from __future__ import annotations

import calendar
from datetime import date
from typing import Iterable

from obytkem.domain.errors import ValidationError
from obytkem.domain.models import Reservation, ReservationStatus, Vehicle
from obytkem.domain.pricing import iter_days


def ranges_overlap(s1: date, e1: date, s2: date, e2: date) -> bool:
    return s1 <= e2 and e1 >= s2


def _blocking(reservations: Iterable[Reservation], vehicle_id: str) -> list[Reservation]:
    return [
        r
        for r in reservations
        if r.vehicle_id == vehicle_id and r.status != ReservationStatus.CANCELLED
    ]


def find_conflict(
    reservations: Iterable[Reservation],
    vehicle_id: str,
    start_date: date,
    end_date: date,
    exclude_reservation_id: str | None = None,
) -> Reservation | None:
    """Return the first reservation overlapping the range, or None."""
    for r in sorted(_blocking(reservations, vehicle_id), key=lambda r: r.start_date):
        if exclude_reservation_id is not None and r.id == exclude_reservation_id:
            continue
        if ranges_overlap(start_date, end_date, r.start_date, r.end_date):
            return r
    return None


def is_available(
    reservations: Iterable[Reservation],
    vehicle_id: str,
    start_date: date,
    end_date: date,
) -> bool:
    """True iff no non-cancelled reservation of the vehicle overlaps the range."""
    return find_conflict(reservations, vehicle_id, start_date, end_date) is None


def rental_days(start_date: date, end_date: date) -> int:
    return (end_date - start_date).days


def check_min_days(vehicle: Vehicle, start_date: date, end_date: date) -> int:
    """Validate the range length against the vehicle minimum.

    Returns:
        Number of rental days.

    Raises:
        ValidationError: invalid_dates or below_min_days.
    """
    days = rental_days(start_date, end_date)
    if days <= 0:
        raise ValidationError("invalid_dates", "End date must be after start date")
    if days < vehicle.min_days:
        raise ValidationError(
            "below_min_days",
            f"Minimum rental is {vehicle.min_days} days",
            {"days": days, "min_days": vehicle.min_days},
        )
    return days


def reserved_days(
    reservations: Iterable[Reservation],
    vehicle_id: str,
    year: int,
    month: int,
) -> set[date]:
    """Days of the month covered by a blocking reservation (end day included)."""
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    days: set[date] = set()
    for r in _blocking(reservations, vehicle_id):
        lo = max(r.start_date, first)
        hi = min(r.end_date, last)
        if lo > hi:
            continue
        days.update(iter_days(lo, hi))
        days.add(hi)
    return days

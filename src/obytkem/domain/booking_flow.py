"""Booking workflow - linear state machine for one customer's booking draft.

SELECTING_DATES -> ENTERING_CONTACT_INFO -> REVIEWING_AND_CONFIRMING -> SUBMITTED

Leaving SELECTING_DATES is gated on min-days, availability and a non-zero
price. Availability is always re-read through ``reservations_provider`` so a
draft that navigates back and forth sees bookings made by other sessions
meanwhile. SUBMITTED is terminal; a repeated submit() replays the first
result instead of creating a second reservation.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any, Callable, Iterable

from obytkem.domain.availability import check_min_days, find_conflict
from obytkem.domain.errors import ConflictError, ValidationError
from obytkem.domain.models import ContactDetails, Reservation, ReservationRequest, Vehicle
from obytkem.domain.pricing import compute_price


class BookingStep(str, Enum):
    SELECTING_DATES = "selecting_dates"
    ENTERING_CONTACT_INFO = "entering_contact_info"
    REVIEWING_AND_CONFIRMING = "reviewing_and_confirming"
    SUBMITTED = "submitted"


_STEP_ORDER = [
    BookingStep.SELECTING_DATES,
    BookingStep.ENTERING_CONTACT_INFO,
    BookingStep.REVIEWING_AND_CONFIRMING,
    BookingStep.SUBMITTED,
]

REQUIRED_CONTACT_FIELDS = ("first_name", "last_name", "email", "phone", "address")


@dataclass(frozen=True)
class Quote:
    start_date: date
    end_date: date
    days: int
    total_price: int
    deposit: int


def missing_contact_fields(contact: ContactDetails) -> list[str]:
    return [f for f in REQUIRED_CONTACT_FIELDS if not (getattr(contact, f) or "").strip()]


class BookingWorkflow:
    """Booking draft for a single vehicle.

    Args:
        vehicle: Vehicle being booked.
        reservations_provider: Returns the current reservations snapshot.
        submit_handler: Receives the ReservationRequest on submit().
        idempotency_key: Client token for the draft; generated if omitted.
        today: Clock for the "no bookings in the past" rule.
    """

    def __init__(
        self,
        vehicle: Vehicle,
        reservations_provider: Callable[[], Iterable[Reservation]],
        submit_handler: Callable[[ReservationRequest], Any],
        idempotency_key: str | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.vehicle = vehicle
        self._reservations_provider = reservations_provider
        self._submit_handler = submit_handler
        self._today = today
        self.idempotency_key = idempotency_key or str(uuid.uuid4())
        self.step = BookingStep.SELECTING_DATES
        self.start_date: date | None = None
        self.end_date: date | None = None
        self.contact = ContactDetails()
        self.request: ReservationRequest | None = None
        self.result: Any = None
        self._submit_lock = threading.Lock()

    # ── Input ────────────────────────────────────────────────────────────

    def select_dates(self, start_date: date, end_date: date) -> None:
        self._require_step(BookingStep.SELECTING_DATES)
        self.start_date = start_date
        self.end_date = end_date

    def set_contact(self, contact: ContactDetails) -> None:
        self._require_step(BookingStep.ENTERING_CONTACT_INFO)
        self.contact = contact

    # ── Validation ───────────────────────────────────────────────────────

    def quote(self) -> Quote:
        """Validate the entered range and price it.

        Raises:
            ValidationError: dates missing/invalid, in the past, below the
                vehicle minimum, or priced at zero.
            ConflictError: range overlaps a non-cancelled reservation.
        """
        if self.start_date is None or self.end_date is None:
            raise ValidationError("dates_required", "Pick-up and return dates are required")
        if self.start_date < self._today():
            raise ValidationError("start_in_past", "Pick-up date cannot be in the past")

        days = check_min_days(self.vehicle, self.start_date, self.end_date)

        snapshot = list(self._reservations_provider())
        # A reservation already stored under this draft's key is its own booking.
        own = next((r for r in snapshot if r.idempotency_key == self.idempotency_key), None)
        conflict = find_conflict(
            snapshot,
            self.vehicle.id,
            self.start_date,
            self.end_date,
            exclude_reservation_id=own.id if own else None,
        )
        if conflict is not None:
            raise ConflictError(self.vehicle.id, self.start_date, self.end_date, conflict.id)

        total = compute_price(self.vehicle, self.start_date, self.end_date)
        if total <= 0:
            raise ValidationError("price_unavailable", "No price could be computed for these dates")

        return Quote(
            start_date=self.start_date,
            end_date=self.end_date,
            days=days,
            total_price=total,
            deposit=self.vehicle.deposit,
        )

    def _validate_contact(self) -> None:
        missing = missing_contact_fields(self.contact)
        if missing:
            raise ValidationError(
                "contact_incomplete",
                "Missing contact fields: " + ", ".join(missing),
                {"missing": missing},
            )
        if "@" not in self.contact.email:
            raise ValidationError("email_invalid", "E-mail address is not valid")

    # ── Transitions ──────────────────────────────────────────────────────

    def advance(self) -> BookingStep:
        if self.step == BookingStep.SELECTING_DATES:
            self.quote()
        elif self.step == BookingStep.ENTERING_CONTACT_INFO:
            self._validate_contact()
        elif self.step == BookingStep.REVIEWING_AND_CONFIRMING:
            raise ValidationError("use_submit", "Confirm the booking with submit()")
        else:
            raise ValidationError("already_submitted", "Booking was already submitted")

        self.step = _STEP_ORDER[_STEP_ORDER.index(self.step) + 1]
        return self.step

    def back(self) -> BookingStep:
        if self.step == BookingStep.SUBMITTED:
            raise ValidationError("already_submitted", "Booking was already submitted")
        if self.step != BookingStep.SELECTING_DATES:
            self.step = _STEP_ORDER[_STEP_ORDER.index(self.step) - 1]
        return self.step

    def submit(self) -> Any:
        """Hand the reservation request to the submit handler.

        Availability and price are checked once more against a fresh snapshot.
        Concurrent calls are serialised; later ones return the first result.
        """
        with self._submit_lock:
            return self._submit()

    def _submit(self) -> Any:
        if self.step == BookingStep.SUBMITTED:
            return self.result
        self._require_step(BookingStep.REVIEWING_AND_CONFIRMING)

        quote = self.quote()
        self._validate_contact()

        contact = replace(
            self.contact,
            first_name=self.contact.first_name.strip(),
            last_name=self.contact.last_name.strip(),
            email=self.contact.email.strip(),
            phone=self.contact.phone.strip(),
            address=self.contact.address.strip(),
        )
        self.request = ReservationRequest(
            vehicle_id=self.vehicle.id,
            contact=contact,
            start_date=quote.start_date,
            end_date=quote.end_date,
            total_price=quote.total_price,
            deposit=quote.deposit,
            idempotency_key=self.idempotency_key,
        )
        self.result = self._submit_handler(self.request)
        self.step = BookingStep.SUBMITTED
        return self.result

    def _require_step(self, step: BookingStep) -> None:
        if self.step != step:
            raise ValidationError(
                "wrong_step",
                f"Expected step {step.value}, booking is at {self.step.value}",
                {"step": self.step.value},
            )

"""Error taxonomy for booking, pricing and reservation lifecycle.

- ValidationError: bad date range, missing field, duration below minimum.
- ConflictError: requested range overlaps an existing reservation.
- PreconditionError: operation requires a prior step (e.g. handover before return).
- NotFoundError: unknown vehicle / reservation id.
- CollaboratorUnavailable: store or text generator unreachable or unconfigured.
"""

from __future__ import annotations

from datetime import date


class BookingError(Exception):
    """Base class for all domain errors."""

    def __init__(self, reason_code: str, message: str | None = None, meta: dict | None = None):
        self.reason_code = reason_code
        self.meta = meta or {}
        super().__init__(message or reason_code)


class ValidationError(BookingError):
    """Raised when input fails validation."""

    pass


class ConflictError(BookingError):
    """Raised when a date range overlaps an existing reservation."""

    def __init__(
        self,
        vehicle_id: str,
        start_date: date,
        end_date: date,
        conflicting_reservation_id: str | None = None,
    ) -> None:
        self.vehicle_id = vehicle_id
        self.start_date = start_date
        self.end_date = end_date
        self.conflicting_reservation_id = conflicting_reservation_id
        super().__init__(
            "dates_unavailable",
            f"Vehicle {vehicle_id} is not available from {start_date} to {end_date}",
            {"conflicting_reservation_id": conflicting_reservation_id},
        )


class PreconditionError(BookingError):
    """Raised when an operation is attempted before its prerequisite exists."""

    pass


class NotFoundError(BookingError):
    """Raised when the referenced record does not exist."""

    pass


class CollaboratorUnavailable(BookingError):
    """Raised when the store or the text generator cannot be reached."""

    def __init__(self, collaborator: str, message: str | None = None):
        self.collaborator = collaborator
        super().__init__(
            f"{collaborator}_unavailable",
            message or f"{collaborator} is unavailable",
        )

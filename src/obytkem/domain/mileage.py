"""Extra-mileage settlement at vehicle return."""

from __future__ import annotations

from dataclasses import dataclass

from obytkem.domain.errors import ValidationError


@dataclass(frozen=True)
class MileageSettlement:
    allowed_km: int
    driven_km: int
    overage_km: int
    charge: int


def settle_mileage(
    rental_days: int,
    allowance_per_day: int,
    handover_mileage: int,
    return_mileage: int,
    rate_per_extra_km: int,
) -> MileageSettlement:
    """Compute the distance allowance, distance driven and surcharge.

    Raises:
        ValidationError: negative inputs, or an odometer reading at return
            lower than at handover (a data-entry error, never clamped).
    """
    if rental_days < 0 or allowance_per_day < 0 or rate_per_extra_km < 0:
        raise ValidationError("invalid_mileage_terms", "Days, allowance and rate must be non-negative")

    driven = return_mileage - handover_mileage
    if driven < 0:
        raise ValidationError(
            "odometer_rollback",
            "Return mileage is lower than handover mileage",
            {"handover_mileage": handover_mileage, "return_mileage": return_mileage},
        )

    allowed = rental_days * allowance_per_day
    overage = max(0, driven - allowed)
    return MileageSettlement(
        allowed_km=allowed,
        driven_km=driven,
        overage_km=overage,
        charge=overage * rate_per_extra_km,
    )


def compute_overage(
    rental_days: int,
    allowance_per_day: int,
    handover_mileage: int,
    return_mileage: int,
    rate_per_extra_km: int,
) -> int:
    """Surcharge owed for distance beyond rental_days * allowance_per_day."""
    return settle_mileage(
        rental_days,
        allowance_per_day,
        handover_mileage,
        return_mileage,
        rate_per_extra_km,
    ).charge

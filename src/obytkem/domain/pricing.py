"""Seasonal price calculation.

Each night in [start_date, end_date) is priced by the first season rule
(stored list order) whose inclusive range contains it, else by the vehicle
base price. The return day itself is not charged.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Iterator

from obytkem.domain.errors import ValidationError
from obytkem.domain.models import SeasonRule, Vehicle


@dataclass(frozen=True)
class NightPrice:
    day: date
    price: int
    season_name: str | None = None


def iter_days(start_date: date, end_date: date) -> Iterator[date]:
    """Yield each calendar day in [start_date, end_date)."""
    current = start_date
    while current < end_date:
        yield current
        current += timedelta(days=1)


def season_for_day(rules: Iterable[SeasonRule], day: date) -> SeasonRule | None:
    """Return the first rule covering *day*, or None."""
    for rule in rules:
        if rule.covers(day):
            return rule
    return None


def price_breakdown(vehicle: Vehicle, start_date: date, end_date: date) -> list[NightPrice]:
    """Per-night prices for the range; empty when end_date <= start_date."""
    nights: list[NightPrice] = []
    for day in iter_days(start_date, end_date):
        rule = season_for_day(vehicle.season_rules, day)
        if rule is not None:
            nights.append(NightPrice(day, rule.price_per_day, rule.name))
        else:
            nights.append(NightPrice(day, vehicle.base_price))
    return nights


def compute_price(vehicle: Vehicle, start_date: date, end_date: date) -> int:
    """Total rental price for [start_date, end_date).

    Returns 0 when end_date is not strictly after start_date. Callers must
    treat 0 as an invalid range, not a free rental.
    """
    if end_date <= start_date:
        return 0
    return sum(n.price for n in price_breakdown(vehicle, start_date, end_date))


def validate_season_rules(rules: Iterable[SeasonRule]) -> None:
    """Reject season rules that are malformed or overlap each other.

    Raises:
        ValidationError: reason_code is one of season_range_invalid,
            season_price_invalid, season_overlap.
    """
    checked: list[SeasonRule] = []
    for rule in rules:
        if rule.end_date < rule.start_date:
            raise ValidationError(
                "season_range_invalid",
                f"Season '{rule.name}' ends before it starts",
            )
        if rule.price_per_day < 0:
            raise ValidationError(
                "season_price_invalid",
                f"Season '{rule.name}' has a negative price",
            )
        for other in checked:
            if rule.start_date <= other.end_date and rule.end_date >= other.start_date:
                raise ValidationError(
                    "season_overlap",
                    f"Season '{rule.name}' overlaps season '{other.name}'",
                    {"season": rule.name, "overlaps": other.name},
                )
        checked.append(rule)

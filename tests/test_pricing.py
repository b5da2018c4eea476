"""Tests for seasonal pricing."""

from datetime import date

import pytest

from obytkem.domain.errors import ValidationError
from obytkem.domain.models import SeasonRule
from obytkem.domain.pricing import (
    compute_price,
    iter_days,
    price_breakdown,
    season_for_day,
    validate_season_rules,
)

from helpers import SUMMER, make_vehicle


class TestComputePrice:
    def test_all_nights_in_season(self):
        vehicle = make_vehicle()
        assert compute_price(vehicle, date(2026, 6, 10), date(2026, 6, 15)) == 23000

    def test_all_nights_at_base_price(self):
        vehicle = make_vehicle()
        assert compute_price(vehicle, date(2026, 3, 2), date(2026, 3, 5)) == 3 * 3200

    def test_range_crossing_season_start(self):
        vehicle = make_vehicle()
        # May 30, May 31 at base; June 1 in season; June 2 is the return day
        assert compute_price(vehicle, date(2026, 5, 30), date(2026, 6, 2)) == 3200 + 3200 + 4600

    def test_return_day_not_charged(self):
        vehicle = make_vehicle()
        # Aug 31 is the last season day, Sep 1 (return) would be base price
        assert compute_price(vehicle, date(2026, 8, 30), date(2026, 9, 1)) == 2 * 4600

    def test_end_equal_start_is_zero(self):
        assert compute_price(make_vehicle(), date(2026, 6, 10), date(2026, 6, 10)) == 0

    def test_end_before_start_is_zero(self):
        assert compute_price(make_vehicle(), date(2026, 6, 15), date(2026, 6, 10)) == 0

    def test_first_matching_rule_wins(self):
        vehicle = make_vehicle(
            season_rules=(
                SeasonRule("Peak", date(2026, 7, 1), date(2026, 7, 31), 5000),
                SeasonRule("Summer", date(2026, 6, 1), date(2026, 8, 31), 4600),
            )
        )
        assert compute_price(vehicle, date(2026, 7, 1), date(2026, 7, 2)) == 5000
        assert compute_price(vehicle, date(2026, 6, 30), date(2026, 7, 1)) == 4600

    def test_no_seasons_uses_base_price(self):
        vehicle = make_vehicle(season_rules=())
        assert compute_price(vehicle, date(2026, 7, 1), date(2026, 7, 8)) == 7 * 3200


class TestBreakdown:
    def test_nights_carry_season_name(self):
        nights = price_breakdown(make_vehicle(), date(2026, 5, 31), date(2026, 6, 2))
        assert [(n.day, n.price, n.season_name) for n in nights] == [
            (date(2026, 5, 31), 3200, None),
            (date(2026, 6, 1), 4600, "Summer"),
        ]

    def test_empty_for_invalid_range(self):
        assert price_breakdown(make_vehicle(), date(2026, 6, 2), date(2026, 6, 1)) == []

    def test_iter_days_excludes_end(self):
        assert list(iter_days(date(2026, 1, 30), date(2026, 2, 2))) == [
            date(2026, 1, 30),
            date(2026, 1, 31),
            date(2026, 2, 1),
        ]

    def test_season_bounds_inclusive(self):
        assert season_for_day([SUMMER], date(2026, 6, 1)) is SUMMER
        assert season_for_day([SUMMER], date(2026, 8, 31)) is SUMMER
        assert season_for_day([SUMMER], date(2026, 9, 1)) is None


class TestValidateSeasonRules:
    def test_accepts_adjacent_seasons(self):
        validate_season_rules(
            [
                SeasonRule("A", date(2026, 6, 1), date(2026, 6, 30), 4000),
                SeasonRule("B", date(2026, 7, 1), date(2026, 7, 31), 4500),
            ]
        )

    def test_rejects_overlap(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_season_rules(
                [
                    SeasonRule("A", date(2026, 6, 1), date(2026, 6, 30), 4000),
                    SeasonRule("B", date(2026, 6, 30), date(2026, 7, 31), 4500),
                ]
            )
        assert exc_info.value.reason_code == "season_overlap"
        assert exc_info.value.meta == {"season": "B", "overlaps": "A"}

    def test_rejects_inverted_range(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_season_rules([SeasonRule("A", date(2026, 7, 1), date(2026, 6, 1), 4000)])
        assert exc_info.value.reason_code == "season_range_invalid"

    def test_rejects_negative_price(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_season_rules([SeasonRule("A", date(2026, 6, 1), date(2026, 6, 2), -1)])
        assert exc_info.value.reason_code == "season_price_invalid"

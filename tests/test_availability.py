"""Tests for availability checks.

Both range ends are inclusive: a pick-up on another booking's return day
is a conflict.
"""

from datetime import date

import pytest

from obytkem.domain.availability import (
    check_min_days,
    find_conflict,
    is_available,
    ranges_overlap,
    rental_days,
    reserved_days,
)
from obytkem.domain.errors import ValidationError
from obytkem.domain.models import ReservationStatus

from helpers import make_reservation, make_vehicle

EXISTING = make_reservation(date(2026, 7, 10), date(2026, 7, 20))


class TestOverlap:
    def test_disjoint_ranges(self):
        assert not ranges_overlap(date(2026, 7, 1), date(2026, 7, 5), date(2026, 7, 6), date(2026, 7, 9))

    def test_touching_boundary_overlaps(self):
        assert ranges_overlap(date(2026, 7, 1), date(2026, 7, 5), date(2026, 7, 5), date(2026, 7, 9))

    def test_contained_range_overlaps(self):
        assert ranges_overlap(date(2026, 7, 12), date(2026, 7, 14), date(2026, 7, 10), date(2026, 7, 20))


class TestIsAvailable:
    def test_free_range(self):
        assert is_available([EXISTING], "v1", date(2026, 7, 21), date(2026, 7, 25))

    def test_pickup_on_return_day_conflicts(self):
        assert not is_available([EXISTING], "v1", date(2026, 7, 20), date(2026, 7, 25))

    def test_return_on_pickup_day_conflicts(self):
        assert not is_available([EXISTING], "v1", date(2026, 7, 5), date(2026, 7, 10))

    def test_cancelled_reservation_does_not_block(self):
        cancelled = make_reservation(date(2026, 7, 10), date(2026, 7, 20), status=ReservationStatus.CANCELLED)
        assert is_available([cancelled], "v1", date(2026, 7, 12), date(2026, 7, 15))

    @pytest.mark.parametrize("status", [ReservationStatus.PENDING, ReservationStatus.COMPLETED])
    def test_pending_and_completed_block(self, status):
        r = make_reservation(date(2026, 7, 10), date(2026, 7, 20), status=status)
        assert not is_available([r], "v1", date(2026, 7, 12), date(2026, 7, 15))

    def test_other_vehicle_does_not_block(self):
        assert is_available([EXISTING], "v9", date(2026, 7, 12), date(2026, 7, 15))

    def test_empty_list(self):
        assert is_available([], "v1", date(2026, 7, 12), date(2026, 7, 15))


class TestFindConflict:
    def test_returns_earliest_overlap(self):
        later = make_reservation(date(2026, 7, 22), date(2026, 7, 25), id="r2")
        assert find_conflict([later, EXISTING], "v1", date(2026, 7, 15), date(2026, 7, 23)).id == "r1"

    def test_excluded_reservation_ignored(self):
        assert find_conflict([EXISTING], "v1", date(2026, 7, 12), date(2026, 7, 15), exclude_reservation_id="r1") is None


class TestMinDays:
    def test_two_days_below_three_day_minimum(self):
        with pytest.raises(ValidationError) as exc_info:
            check_min_days(make_vehicle(min_days=3), date(2026, 7, 1), date(2026, 7, 3))
        assert exc_info.value.reason_code == "below_min_days"
        assert exc_info.value.meta == {"days": 2, "min_days": 3}

    def test_exact_minimum_allowed(self):
        assert check_min_days(make_vehicle(min_days=3), date(2026, 7, 1), date(2026, 7, 4)) == 3

    def test_inverted_range(self):
        with pytest.raises(ValidationError) as exc_info:
            check_min_days(make_vehicle(), date(2026, 7, 4), date(2026, 7, 4))
        assert exc_info.value.reason_code == "invalid_dates"

    def test_rental_days(self):
        assert rental_days(date(2026, 6, 28), date(2026, 7, 3)) == 5


class TestReservedDays:
    def test_includes_return_day(self):
        days = reserved_days([EXISTING], "v1", 2026, 7)
        assert min(days) == date(2026, 7, 10)
        assert max(days) == date(2026, 7, 20)
        assert len(days) == 11

    def test_clipped_to_month(self):
        r = make_reservation(date(2026, 7, 28), date(2026, 8, 3))
        assert sorted(reserved_days([r], "v1", 2026, 8)) == [date(2026, 8, d) for d in (1, 2, 3)]
        assert sorted(reserved_days([r], "v1", 2026, 7)) == [date(2026, 7, d) for d in (28, 29, 30, 31)]

    def test_cancelled_excluded(self):
        r = make_reservation(date(2026, 7, 1), date(2026, 7, 5), status=ReservationStatus.CANCELLED)
        assert reserved_days([r], "v1", 2026, 7) == set()

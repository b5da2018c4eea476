"""Tests for the raw-SQL repositories with mocked cursors."""

from __future__ import annotations

import json
from datetime import date, datetime, timezone
from unittest.mock import MagicMock

from obytkem.domain.models import ReservationStatus, SeasonRule
from obytkem.infra.repositories import (
    customers_repository,
    protocols_repository,
    reservations_repository,
    vehicles_repository,
)

from helpers import make_contact, make_vehicle

CREATED = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

RESERVATION_ROW = (
    "b9b0c0de-0000-4000-8000-000000000001",
    "v1",
    "c1",
    date(2026, 7, 10),
    date(2026, 7, 20),
    46000,
    25000,
    "CONFIRMED",
    CREATED,
    None,
    "key-1",
)


class TestVehicles:
    def _row(self, seasons):
        return (
            "v2", "Laika", None, "7BM 2026", None, 3200, 3, 25000, 300,
            None, True, seasons, ["Solar"],
        )

    def test_reads_camel_case_seasons(self):
        seasons = [{"id": "s1", "name": "Summer", "startDate": "2026-06-01", "endDate": "2026-08-31", "pricePerDay": 4600}]
        vehicle = vehicles_repository.row_to_vehicle(self._row(seasons))
        assert vehicle.season_rules == (SeasonRule("Summer", date(2026, 6, 1), date(2026, 8, 31), 4600, "s1"),)
        assert vehicle.description == ""
        assert vehicle.images == ()
        assert vehicle.equipment == ("Solar",)

    def test_reads_snake_case_seasons_from_json_text(self):
        seasons = json.dumps(
            [{"name": "Sep", "start_date": "2026-09-01T00:00:00Z", "end_date": "2026-09-30", "price_per_day": 3800}]
        )
        vehicle = vehicles_repository.row_to_vehicle(self._row(seasons))
        assert vehicle.season_rules[0].start_date == date(2026, 9, 1)
        assert vehicle.season_rules[0].price_per_day == 3800

    def test_season_written_as_snake_case(self):
        record = vehicles_repository.season_to_record(SeasonRule("Summer", date(2026, 6, 1), date(2026, 8, 31), 4600))
        assert record == {
            "id": None,
            "name": "Summer",
            "start_date": "2026-06-01",
            "end_date": "2026-08-31",
            "price_per_day": 4600,
        }

    def test_lock_vehicle(self):
        cur = MagicMock()
        cur.fetchone.return_value = ("v1",)
        assert vehicles_repository.lock_vehicle(cur, "v1") is True
        assert "FOR UPDATE" in cur.execute.call_args[0][0]
        cur.fetchone.return_value = None
        assert vehicles_repository.lock_vehicle(cur, "v9") is False

    def test_update_vehicle_serialises_json(self):
        cur = MagicMock()
        cur.rowcount = 1
        assert vehicles_repository.update_vehicle(cur, make_vehicle()) == 1
        params = cur.execute.call_args[0][1]
        assert params[-1] == "v1"
        assert any(isinstance(p, str) and "price_per_day" in p for p in params)


class TestReservations:
    def test_row_mapping(self):
        reservation = reservations_repository.row_to_reservation(RESERVATION_ROW)
        assert reservation.status == ReservationStatus.CONFIRMED
        assert reservation.rental_days == 10
        assert reservation.idempotency_key == "key-1"

    def test_find_overlapping_uses_inclusive_bounds(self):
        cur = MagicMock()
        cur.fetchone.return_value = ("r1",)
        found = reservations_repository.find_overlapping(
            cur, vehicle_id="v1", start_date=date(2026, 7, 20), end_date=date(2026, 7, 25)
        )
        assert found == "r1"
        sql, params = cur.execute.call_args[0]
        assert "start_date <= %s" in sql
        assert "end_date >= %s" in sql
        assert params == ("v1", "CANCELLED", date(2026, 7, 25), date(2026, 7, 20))

    def test_insert_returns_none_on_duplicate_key(self):
        cur = MagicMock()
        cur.fetchone.return_value = None
        created = reservations_repository.insert_reservation(
            cur,
            vehicle_id="v1",
            customer_id="c1",
            start_date=date(2026, 7, 10),
            end_date=date(2026, 7, 20),
            total_price=46000,
            deposit=25000,
            status=ReservationStatus.PENDING,
            customer_note=None,
            idempotency_key="key-1",
        )
        assert created is None
        assert "ON CONFLICT (idempotency_key) DO NOTHING" in cur.execute.call_args[0][0]
        assert "PENDING" in cur.execute.call_args[0][1]

    def test_update_status(self):
        cur = MagicMock()
        cur.rowcount = 1
        assert reservations_repository.update_status(cur, "r1", ReservationStatus.CANCELLED) == 1
        assert cur.execute.call_args[0][1] == ("CANCELLED", "r1")


class TestCustomers:
    def test_insert_encrypts_id_number(self):
        cur = MagicMock()
        cur.fetchone.return_value = ("c-new",)
        customer_id = customers_repository.insert_customer(
            cur, make_contact(id_number="123456789"), id_number_key="ab" * 32
        )
        assert customer_id == "c-new"
        params = cur.execute.call_args[0][1]
        assert params[:2] == ("Jana", "Dvořáková")
        assert params[5].startswith("enc:")

    def test_fetch_passes_plaintext_through(self):
        cur = MagicMock()
        cur.fetchall.return_value = [("c1", "Jan", "Novák", "j@x.cz", "1", None, "123")]
        customers = customers_repository.fetch_customers(cur)
        assert customers[0].address == ""
        assert customers[0].id_number == "123"


class TestProtocols:
    def test_fetch_handovers(self):
        cur = MagicMock()
        cur.fetchall.return_value = [("h1", "r1", 50000, 100, None, "scratch", None, CREATED)]
        handover = protocols_repository.fetch_handovers(cur)[0]
        assert handover.mileage == 50000
        assert handover.damages == "scratch"
        assert handover.cleanliness == ""

    def test_insert_return(self):
        from obytkem.domain.models import ReturnProtocol

        cur = MagicMock()
        cur.fetchone.return_value = ("p1",)
        protocol = ReturnProtocol("r1", 53500, 75, 4000, CREATED)
        assert protocols_repository.insert_return(cur, protocol) == "p1"
        assert cur.execute.call_args[0][1][4] == 4000

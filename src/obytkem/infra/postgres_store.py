"""PostgreSQL-backed ReservationStore.

Each call runs in its own short transaction (txn()). Driver and connection
errors surface as CollaboratorUnavailable so the lifecycle manager can apply
its failure policy.

Booking race: create_reservation() locks the vehicle row FOR UPDATE, then
looks up the idempotency key, runs the overlap query and inserts the
customer and the reservation in one transaction. Two sessions cannot both
book the same days, and a repeated key returns the stored reservation
without leaving a second customer row behind. The no_vehicle_overlap
exclusion constraint is the second layer; its violation is also reported
as ConflictError.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from typing import Iterator

import psycopg2
from psycopg2 import errors as pg_errors
from psycopg2.extensions import cursor as PgCursor

from obytkem.domain.errors import CollaboratorUnavailable, ConflictError, NotFoundError
from obytkem.domain.models import (
    ContactDetails,
    Customer,
    HandoverProtocol,
    Reservation,
    ReservationStatus,
    ReturnProtocol,
    SavedContract,
    Vehicle,
)
from obytkem.infra.db import txn
from obytkem.infra.repositories import (
    customers_repository,
    protocols_repository,
    reservations_repository,
    vehicles_repository,
)
from obytkem.infra.settings import Settings
from obytkem.observability.logging import get_logger

logger = get_logger(__name__)


class PostgresStore:
    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    @contextmanager
    def _cursor(self, operation: str) -> Iterator[PgCursor]:
        try:
            with txn(
                dsn=self._settings.database_url,
                password=self._settings.db_password,
                connect_timeout=self._settings.db_connect_timeout,
            ) as cur:
                yield cur
        except (psycopg2.OperationalError, psycopg2.InterfaceError, RuntimeError) as e:
            logger.error(
                "store unavailable",
                extra={"extra_fields": {"operation": operation, "error_type": type(e).__name__}},
            )
            raise CollaboratorUnavailable("store", str(e)) from e

    # ── Reads ────────────────────────────────────────────────────────────

    def list_vehicles(self) -> list[Vehicle]:
        with self._cursor("list_vehicles") as cur:
            return vehicles_repository.fetch_vehicles(cur)

    def list_reservations(self) -> list[Reservation]:
        with self._cursor("list_reservations") as cur:
            return reservations_repository.fetch_reservations(cur)

    def list_customers(self) -> list[Customer]:
        with self._cursor("list_customers") as cur:
            return customers_repository.fetch_customers(
                cur, id_number_key=self._settings.id_number_key
            )

    def find_reservation_by_key(self, idempotency_key: str) -> Reservation | None:
        with self._cursor("find_reservation_by_key") as cur:
            return reservations_repository.get_by_idempotency_key(cur, idempotency_key)

    def list_handovers(self) -> list[HandoverProtocol]:
        with self._cursor("list_handovers") as cur:
            return protocols_repository.fetch_handovers(cur)

    def list_returns(self) -> list[ReturnProtocol]:
        with self._cursor("list_returns") as cur:
            return protocols_repository.fetch_returns(cur)

    def list_contracts(self) -> list[SavedContract]:
        with self._cursor("list_contracts") as cur:
            return protocols_repository.fetch_contracts(cur)

    # ── Writes ───────────────────────────────────────────────────────────

    def create_reservation(
        self,
        *,
        vehicle_id: str,
        contact: ContactDetails,
        start_date: date,
        end_date: date,
        total_price: int,
        deposit: int,
        status: ReservationStatus,
        customer_note: str | None,
        idempotency_key: str,
    ) -> tuple[Reservation, bool]:
        try:
            with self._cursor("create_reservation") as cur:
                if not vehicles_repository.lock_vehicle(cur, vehicle_id):
                    raise NotFoundError("vehicle_not_found", f"Vehicle {vehicle_id} not found")

                # Read under the vehicle lock so a concurrent same-key insert is visible.
                existing = reservations_repository.get_by_idempotency_key(cur, idempotency_key)
                if existing is not None:
                    return existing, False

                conflicting_id = reservations_repository.find_overlapping(
                    cur,
                    vehicle_id=vehicle_id,
                    start_date=start_date,
                    end_date=end_date,
                )
                if conflicting_id is not None:
                    raise ConflictError(vehicle_id, start_date, end_date, conflicting_id)

                customer_id = customers_repository.insert_customer(
                    cur, contact, id_number_key=self._settings.id_number_key
                )
                created = reservations_repository.insert_reservation(
                    cur,
                    vehicle_id=vehicle_id,
                    customer_id=customer_id,
                    start_date=start_date,
                    end_date=end_date,
                    total_price=total_price,
                    deposit=deposit,
                    status=status,
                    customer_note=customer_note,
                    idempotency_key=idempotency_key,
                )
                if created is None:
                    # Same key committed for another vehicle meanwhile.
                    customers_repository.delete_customer(cur, customer_id)
                    return reservations_repository.get_by_idempotency_key(cur, idempotency_key), False
                return created, True
        except pg_errors.ExclusionViolation as e:
            raise ConflictError(vehicle_id, start_date, end_date) from e

    def update_reservation_status(self, reservation_id: str, status: ReservationStatus) -> None:
        with self._cursor("update_reservation_status") as cur:
            reservations_repository.update_status(cur, reservation_id, status)

    def delete_reservation(self, reservation_id: str) -> None:
        with self._cursor("delete_reservation") as cur:
            reservations_repository.delete_reservation(cur, reservation_id)

    def update_vehicle(self, vehicle: Vehicle) -> None:
        with self._cursor("update_vehicle") as cur:
            if vehicles_repository.update_vehicle(cur, vehicle) == 0:
                raise NotFoundError("vehicle_not_found", f"Vehicle {vehicle.id} not found")

    def save_handover(self, protocol: HandoverProtocol) -> str:
        with self._cursor("save_handover") as cur:
            return protocols_repository.insert_handover(cur, protocol)

    def save_return(self, protocol: ReturnProtocol) -> str:
        with self._cursor("save_return") as cur:
            return protocols_repository.insert_return(cur, protocol)

    def save_contract(self, contract: SavedContract) -> None:
        with self._cursor("save_contract") as cur:
            protocols_repository.insert_contract(cur, contract)

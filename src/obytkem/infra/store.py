"""Persistence collaborator interface and backend selection.

Backend selection follows DATABASE_URL:
- set: PostgresStore (psycopg2)
- unset: InMemoryStore seeded with demo data

Every method raises CollaboratorUnavailable when the backend cannot be
reached. create_reservation() additionally raises ConflictError: the
idempotency-key lookup, the overlap check, the customer insert and the
reservation insert are one atomic step inside the store.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol

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
from obytkem.infra.settings import Settings


class ReservationStore(Protocol):
    def list_vehicles(self) -> list[Vehicle]:
        ...

    def list_reservations(self) -> list[Reservation]:
        ...

    def list_customers(self) -> list[Customer]:
        ...

    def find_reservation_by_key(self, idempotency_key: str) -> Reservation | None:
        ...

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
        """Insert the customer and the reservation.

        Returns:
            (reservation, created); created is False when the key was
            already stored and the existing reservation is returned.
        """
        ...

    def update_reservation_status(self, reservation_id: str, status: ReservationStatus) -> None:
        ...

    def delete_reservation(self, reservation_id: str) -> None:
        ...

    def update_vehicle(self, vehicle: Vehicle) -> None:
        ...

    def save_handover(self, protocol: HandoverProtocol) -> str:
        ...

    def save_return(self, protocol: ReturnProtocol) -> str:
        ...

    def list_handovers(self) -> list[HandoverProtocol]:
        ...

    def list_returns(self) -> list[ReturnProtocol]:
        ...

    def save_contract(self, contract: SavedContract) -> None:
        ...

    def list_contracts(self) -> list[SavedContract]:
        ...


def build_store(settings: Settings) -> ReservationStore:
    """Pick the store backend for *settings*."""
    if settings.database_url:
        from obytkem.infra.postgres_store import PostgresStore

        return PostgresStore(settings)

    from obytkem.infra.demo_data import seed_demo_store
    from obytkem.infra.memory_store import InMemoryStore

    return seed_demo_store(InMemoryStore())

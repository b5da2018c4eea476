"""In-memory ReservationStore for demo mode and tests.

Thread-safe: one lock guards all tables, so the overlap check and insert in
create_reservation() are atomic just like the PostgreSQL backend.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from datetime import date

from obytkem.domain.availability import find_conflict
from obytkem.domain.errors import ConflictError, NotFoundError
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
from obytkem.infra.clock import utc_now


class InMemoryStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.vehicles: dict[str, Vehicle] = {}
        self.customers: dict[str, Customer] = {}
        self.reservations: dict[str, Reservation] = {}
        self.handovers: dict[str, HandoverProtocol] = {}
        self.returns: dict[str, ReturnProtocol] = {}
        self.contracts: dict[str, SavedContract] = {}

    def add_vehicle(self, vehicle: Vehicle) -> None:
        with self._lock:
            self.vehicles[vehicle.id] = vehicle

    def add_customer(self, customer: Customer) -> None:
        with self._lock:
            self.customers[customer.id] = customer

    def add_reservation(self, reservation: Reservation) -> None:
        with self._lock:
            self.reservations[reservation.id] = reservation

    def list_vehicles(self) -> list[Vehicle]:
        with self._lock:
            return sorted(self.vehicles.values(), key=lambda v: v.name)

    def list_reservations(self) -> list[Reservation]:
        with self._lock:
            return sorted(self.reservations.values(), key=lambda r: r.created_at, reverse=True)

    def list_customers(self) -> list[Customer]:
        with self._lock:
            return list(self.customers.values())

    def find_reservation_by_key(self, idempotency_key: str) -> Reservation | None:
        with self._lock:
            return self._by_key(idempotency_key)

    def _by_key(self, idempotency_key: str) -> Reservation | None:
        for r in self.reservations.values():
            if r.idempotency_key == idempotency_key:
                return r
        return None

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
        with self._lock:
            existing = self._by_key(idempotency_key)
            if existing is not None:
                return existing, False
            if vehicle_id not in self.vehicles:
                raise NotFoundError("vehicle_not_found", f"Vehicle {vehicle_id} not found")

            conflict = find_conflict(self.reservations.values(), vehicle_id, start_date, end_date)
            if conflict is not None:
                raise ConflictError(vehicle_id, start_date, end_date, conflict.id)

            customer = Customer(
                id=str(uuid.uuid4()),
                first_name=contact.first_name,
                last_name=contact.last_name,
                email=contact.email,
                phone=contact.phone,
                address=contact.address,
                id_number=contact.id_number,
            )
            reservation = Reservation(
                id=str(uuid.uuid4()),
                vehicle_id=vehicle_id,
                customer_id=customer.id,
                start_date=start_date,
                end_date=end_date,
                total_price=total_price,
                deposit=deposit,
                status=status,
                created_at=utc_now(),
                customer_note=customer_note,
                idempotency_key=idempotency_key,
            )
            self.customers[customer.id] = customer
            self.reservations[reservation.id] = reservation
            return reservation, True

    def update_reservation_status(self, reservation_id: str, status: ReservationStatus) -> None:
        with self._lock:
            current = self.reservations.get(reservation_id)
            if current is not None:
                self.reservations[reservation_id] = replace(current, status=status)

    def delete_reservation(self, reservation_id: str) -> None:
        with self._lock:
            self.reservations.pop(reservation_id, None)
            self.handovers.pop(reservation_id, None)
            self.returns.pop(reservation_id, None)
            for cid in [c.id for c in self.contracts.values() if c.reservation_id == reservation_id]:
                del self.contracts[cid]

    def update_vehicle(self, vehicle: Vehicle) -> None:
        with self._lock:
            if vehicle.id not in self.vehicles:
                raise NotFoundError("vehicle_not_found", f"Vehicle {vehicle.id} not found")
            self.vehicles[vehicle.id] = vehicle

    def save_handover(self, protocol: HandoverProtocol) -> str:
        protocol_id = protocol.id or str(uuid.uuid4())
        with self._lock:
            self.handovers[protocol.reservation_id] = replace(protocol, id=protocol_id)
        return protocol_id

    def save_return(self, protocol: ReturnProtocol) -> str:
        protocol_id = protocol.id or str(uuid.uuid4())
        with self._lock:
            self.returns[protocol.reservation_id] = replace(protocol, id=protocol_id)
        return protocol_id

    def list_handovers(self) -> list[HandoverProtocol]:
        with self._lock:
            return list(self.handovers.values())

    def list_returns(self) -> list[ReturnProtocol]:
        with self._lock:
            return list(self.returns.values())

    def save_contract(self, contract: SavedContract) -> None:
        with self._lock:
            self.contracts[contract.id] = contract

    def list_contracts(self) -> list[SavedContract]:
        with self._lock:
            return sorted(self.contracts.values(), key=lambda c: c.created_at, reverse=True)

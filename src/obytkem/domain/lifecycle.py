"""Reservation lifecycle - status bookkeeping and downstream records.

Status transitions (all owner-initiated):

    PENDING   -> CONFIRMED | CANCELLED
    CONFIRMED -> CANCELLED | COMPLETED

CANCELLED and COMPLETED are terminal.

Local state mirrors the store. Every change is written to the store first;
if the store is unavailable the failure is logged, the local state still
advances and the missed write is kept pending. refresh() retries pending
writes and keeps them over what the store returns until it accepts them.

Booking creation follows Settings.optimistic_completion: when True a store
outage still completes the booking locally (persisted=False), when False
the outage is raised to the caller. Conflicts reported by the
store are always raised.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from typing import Any, Callable

from obytkem.domain.availability import reserved_days
from obytkem.domain.booking_flow import BookingWorkflow
from obytkem.domain.contracts import (
    build_contract_details,
    local_summary,
    occupancy_rate,
    render_contract_template,
)
from obytkem.domain.errors import (
    CollaboratorUnavailable,
    NotFoundError,
    PreconditionError,
    ValidationError,
)
from obytkem.domain.mileage import compute_overage
from obytkem.domain.models import (
    Customer,
    DashboardStats,
    HandoverProtocol,
    Reservation,
    ReservationRequest,
    ReservationStatus,
    ReservationSummary,
    ReturnProtocol,
    SavedContract,
    Vehicle,
)
from obytkem.domain.pricing import validate_season_rules
from obytkem.infra.clock import utc_now
from obytkem.infra.settings import Settings
from obytkem.observability.logging import get_logger
from obytkem.observability.redaction import safe_log_context

logger = get_logger(__name__)

ALLOWED_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset({ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}),
    ReservationStatus.CONFIRMED: frozenset({ReservationStatus.CANCELLED, ReservationStatus.COMPLETED}),
    ReservationStatus.CANCELLED: frozenset(),
    ReservationStatus.COMPLETED: frozenset(),
}


@dataclass(frozen=True)
class CreateResult:
    reservation: Reservation
    persisted: bool
    replayed: bool = False


def _check_fuel_level(value: int, field_name: str) -> None:
    if not 0 <= value <= 100:
        raise ValidationError("fuel_level_invalid", f"{field_name} must be between 0 and 100")


class ReservationLifecycle:
    """Owner of vehicles, reservations, protocols and contracts.

    Args:
        store: Persistence collaborator (ReservationStore).
        text_generator: Text-generation collaborator (TextGenerator).
        settings: Runtime settings.
        clock: Returns the current aware datetime.
    """

    def __init__(
        self,
        store: Any,
        text_generator: Any,
        settings: Settings,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._text_generator = text_generator
        self._settings = settings
        self._clock = clock
        self._lock = threading.RLock()
        self._create_lock = threading.Lock()
        self._protocol_lock = threading.Lock()
        self._vehicles: dict[str, Vehicle] = {}
        self._customers: dict[str, Customer] = {}
        self._reservations: dict[str, Reservation] = {}
        self._by_key: dict[str, str] = {}
        self._unsynced: set[str] = set()
        self._handovers: dict[str, HandoverProtocol] = {}
        self._returns: dict[str, ReturnProtocol] = {}
        self._contracts: dict[str, SavedContract] = {}
        # Writes the store missed; retried and kept over store data on refresh().
        self._pending_status: dict[str, ReservationStatus] = {}
        self._pending_deletes: set[str] = set()
        self._pending_handovers: set[str] = set()
        self._pending_returns: set[str] = set()
        self._pending_contracts: set[str] = set()
        self._pending_vehicles: set[str] = set()

    # ── Loading ──────────────────────────────────────────────────────────

    def refresh(self) -> bool:
        """Retry missed writes, then reload local state from the store.

        Changes the store has still not accepted stay in local state.

        Returns:
            False if the store was unavailable (local state kept as is).
        """
        self._retry_pending()
        try:
            vehicles = self._store.list_vehicles()
            reservations = self._store.list_reservations()
            customers = self._store.list_customers()
            handovers = self._store.list_handovers()
            returns = self._store.list_returns()
            contracts = self._store.list_contracts()
        except CollaboratorUnavailable:
            logger.warning("refresh skipped, store unavailable; keeping local state")
            return False

        with self._lock:
            if vehicles:
                local_vehicles = self._vehicles
                self._vehicles = {v.id: v for v in vehicles}
                self._vehicles.update(
                    (vid, local_vehicles[vid]) for vid in self._pending_vehicles if vid in local_vehicles
                )

            local_customers = self._customers
            self._customers = {c.id: c for c in customers}
            unsynced = {rid: self._reservations[rid] for rid in self._unsynced if rid in self._reservations}
            for r in unsynced.values():
                if r.customer_id in local_customers:
                    self._customers.setdefault(r.customer_id, local_customers[r.customer_id])

            self._reservations = {r.id: r for r in reservations}
            self._reservations.update(unsynced)
            for rid in self._pending_deletes:
                self._reservations.pop(rid, None)
            for rid, status in self._pending_status.items():
                if rid in self._reservations:
                    self._reservations[rid] = replace(self._reservations[rid], status=status)
            self._by_key = {
                r.idempotency_key: r.id for r in self._reservations.values() if r.idempotency_key
            }

            local_handovers, local_returns = self._handovers, self._returns
            local_contracts = self._contracts
            self._handovers = {h.reservation_id: h for h in handovers}
            self._handovers.update((rid, local_handovers[rid]) for rid in self._pending_handovers)
            self._returns = {p.reservation_id: p for p in returns}
            self._returns.update((rid, local_returns[rid]) for rid in self._pending_returns)
            self._contracts = {c.id: c for c in contracts}
            self._contracts.update((cid, local_contracts[cid]) for cid in self._pending_contracts)
            for rid in self._pending_deletes:
                self._handovers.pop(rid, None)
                self._returns.pop(rid, None)
            self._contracts = {
                cid: c for cid, c in self._contracts.items() if c.reservation_id not in self._pending_deletes
            }

        logger.info(
            "state refreshed",
            extra={"extra_fields": {"vehicles": len(vehicles), "reservations": len(reservations)}},
        )
        return True

    # ── Reads ────────────────────────────────────────────────────────────

    def vehicles(self) -> list[Vehicle]:
        with self._lock:
            return list(self._vehicles.values())

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        with self._lock:
            vehicle = self._vehicles.get(vehicle_id)
        if vehicle is None:
            raise NotFoundError("vehicle_not_found", f"Vehicle {vehicle_id} not found")
        return vehicle

    def reservations(self) -> list[Reservation]:
        with self._lock:
            return sorted(self._reservations.values(), key=lambda r: r.created_at, reverse=True)

    def get_reservation(self, reservation_id: str) -> Reservation:
        with self._lock:
            reservation = self._reservations.get(reservation_id)
        if reservation is None:
            raise NotFoundError("reservation_not_found", f"Reservation {reservation_id} not found")
        return reservation

    def customers(self) -> list[Customer]:
        with self._lock:
            return list(self._customers.values())

    def get_customer(self, customer_id: str) -> Customer | None:
        with self._lock:
            return self._customers.get(customer_id)

    def contracts(self) -> list[SavedContract]:
        with self._lock:
            return sorted(self._contracts.values(), key=lambda c: c.created_at, reverse=True)

    def handover_for(self, reservation_id: str) -> HandoverProtocol | None:
        with self._lock:
            return self._handovers.get(reservation_id)

    def return_for(self, reservation_id: str) -> ReturnProtocol | None:
        with self._lock:
            return self._returns.get(reservation_id)

    def current_reservations(self) -> list[Reservation]:
        """Fresh reservation snapshot for availability checks.

        Reads the store; falls back to local state when it is unavailable.
        Locally completed bookings that never reached the store are included,
        and status changes or deletes the store missed are applied.
        """
        try:
            stored = self._store.list_reservations()
        except CollaboratorUnavailable:
            return self.reservations()
        with self._lock:
            unsynced = [self._reservations[rid] for rid in self._unsynced if rid in self._reservations]
            pending_status = dict(self._pending_status)
            pending_deletes = set(self._pending_deletes)
        current = [
            replace(r, status=pending_status[r.id]) if r.id in pending_status else r
            for r in stored
            if r.id not in pending_deletes
        ]
        return current + unsynced

    # ── Booking ──────────────────────────────────────────────────────────

    def start_booking(self, vehicle_id: str, idempotency_key: str | None = None) -> BookingWorkflow:
        vehicle = self.get_vehicle(vehicle_id)
        if not vehicle.is_active:
            raise ValidationError("vehicle_inactive", f"Vehicle {vehicle_id} is not bookable")
        return BookingWorkflow(
            vehicle,
            reservations_provider=self.current_reservations,
            submit_handler=self.create,
            idempotency_key=idempotency_key,
            today=lambda: self._clock().date(),
        )

    def create(self, request: ReservationRequest) -> CreateResult:
        """Persist the customer and the reservation in one store call.

        A request whose idempotency key was already processed returns the
        existing reservation (replayed=True) without writing anything.
        Creates are serialised, so concurrent submits of one key yield a
        single reservation and a single customer.

        Raises:
            ConflictError: The store found an overlapping reservation.
            CollaboratorUnavailable: Store down and optimistic completion off.
        """
        with self._create_lock:
            return self._create(request)

    def _create(self, request: ReservationRequest) -> CreateResult:
        key = request.idempotency_key
        with self._lock:
            known_id = self._by_key.get(key)
            if known_id is not None and known_id in self._reservations:
                return CreateResult(
                    self._reservations[known_id], persisted=known_id not in self._unsynced, replayed=True
                )

        self.get_vehicle(request.vehicle_id)
        contact = request.contact

        try:
            existing = self._store.find_reservation_by_key(key)
            if existing is not None:
                self._remember(existing)
                return CreateResult(existing, persisted=True, replayed=True)

            reservation, created = self._store.create_reservation(
                vehicle_id=request.vehicle_id,
                contact=contact,
                start_date=request.start_date,
                end_date=request.end_date,
                total_price=request.total_price,
                deposit=request.deposit,
                status=request.status,
                customer_note=contact.note,
                idempotency_key=key,
            )
            if not created:
                self._remember(reservation)
                return CreateResult(reservation, persisted=True, replayed=True)
            persisted = True
        except CollaboratorUnavailable:
            if not self._settings.optimistic_completion:
                raise
            logger.error(
                "booking not persisted, completing optimistically",
                extra={"extra_fields": safe_log_context(vehicle_id=request.vehicle_id, idempotency_key=key)},
            )
            reservation = Reservation(
                id=str(uuid.uuid4()),
                vehicle_id=request.vehicle_id,
                customer_id=str(uuid.uuid4()),
                start_date=request.start_date,
                end_date=request.end_date,
                total_price=request.total_price,
                deposit=request.deposit,
                status=request.status,
                created_at=self._clock(),
                customer_note=contact.note,
                idempotency_key=key,
            )
            persisted = False

        customer = Customer(
            id=reservation.customer_id,
            first_name=contact.first_name,
            last_name=contact.last_name,
            email=contact.email,
            phone=contact.phone,
            address=contact.address,
            id_number=contact.id_number,
        )
        with self._lock:
            self._customers[customer.id] = customer
            self._remember(reservation)
            if not persisted:
                self._unsynced.add(reservation.id)

        logger.info(
            "reservation created",
            extra={
                "extra_fields": {
                    "reservation_id": reservation.id,
                    **safe_log_context(
                        vehicle_id=reservation.vehicle_id,
                        start_date=reservation.start_date,
                        end_date=reservation.end_date,
                        total_price=reservation.total_price,
                        persisted=persisted,
                    ),
                }
            },
        )
        return CreateResult(reservation, persisted=persisted)

    def _remember(self, reservation: Reservation) -> None:
        with self._lock:
            self._reservations[reservation.id] = reservation
            if reservation.idempotency_key:
                self._by_key[reservation.idempotency_key] = reservation.id

    def _mirror(self, operation: str, fn: Callable[..., Any], *args: Any) -> bool:
        """Write a change to the store; a store outage is logged, not raised."""
        try:
            fn(*args)
            return True
        except CollaboratorUnavailable:
            logger.warning(
                "store write failed, local state advanced",
                extra={"extra_fields": {"operation": operation}},
            )
            return False

    def _save(self, operation: str, fn: Callable[[Any], str], record: Any) -> str | None:
        """Like _mirror() for inserts; returns the store id or None on an outage."""
        try:
            return fn(record)
        except CollaboratorUnavailable:
            logger.warning(
                "store write failed, local state advanced",
                extra={"extra_fields": {"operation": operation}},
            )
            return None

    def _retry_pending(self) -> None:
        """Replay writes the store missed while it was unavailable.

        Records of reservations that only exist locally stay pending.
        """
        with self._lock:
            deletes = set(self._pending_deletes)
            statuses = {rid: s for rid, s in self._pending_status.items() if rid not in self._unsynced}
            handovers = [
                self._handovers[rid] for rid in self._pending_handovers if rid not in self._unsynced
            ]
            returns = [self._returns[rid] for rid in self._pending_returns if rid not in self._unsynced]
            contracts = [
                self._contracts[cid]
                for cid in self._pending_contracts
                if self._contracts[cid].reservation_id not in self._unsynced
            ]
            vehicles = [self._vehicles[vid] for vid in self._pending_vehicles]
        if not (deletes or statuses or handovers or returns or contracts or vehicles):
            return

        for rid in deletes:
            if self._mirror("delete_reservation", self._store.delete_reservation, rid):
                with self._lock:
                    self._pending_deletes.discard(rid)
        for rid, status in statuses.items():
            if self._mirror("update_reservation_status", self._store.update_reservation_status, rid, status):
                with self._lock:
                    if self._pending_status.get(rid) == status:
                        del self._pending_status[rid]
        for handover in handovers:
            protocol_id = self._save("save_handover", self._store.save_handover, handover)
            if protocol_id is not None:
                with self._lock:
                    self._handovers[handover.reservation_id] = replace(handover, id=protocol_id)
                    self._pending_handovers.discard(handover.reservation_id)
        for returned in returns:
            protocol_id = self._save("save_return", self._store.save_return, returned)
            if protocol_id is not None:
                with self._lock:
                    self._returns[returned.reservation_id] = replace(returned, id=protocol_id)
                    self._pending_returns.discard(returned.reservation_id)
        for contract in contracts:
            if self._mirror("save_contract", self._store.save_contract, contract):
                with self._lock:
                    self._pending_contracts.discard(contract.id)
        for vehicle in vehicles:
            if self._mirror("update_vehicle", self._store.update_vehicle, vehicle):
                with self._lock:
                    if self._vehicles.get(vehicle.id) is vehicle:
                        self._pending_vehicles.discard(vehicle.id)

        with self._lock:
            remaining = (
                len(self._pending_deletes) + len(self._pending_status) + len(self._pending_handovers)
                + len(self._pending_returns) + len(self._pending_contracts) + len(self._pending_vehicles)
            )
        logger.info("pending store writes retried", extra={"extra_fields": {"remaining": remaining}})

    # ── Status transitions ───────────────────────────────────────────────

    def transition(self, reservation_id: str, new_status: ReservationStatus) -> Reservation:
        """Move a reservation to *new_status*.

        Re-applying the current status is a no-op.

        Raises:
            NotFoundError: Unknown reservation.
            ValidationError: Transition not allowed from the current status.
        """
        current = self.get_reservation(reservation_id)
        if current.status == new_status:
            return current
        if new_status not in ALLOWED_TRANSITIONS[current.status]:
            raise ValidationError(
                "invalid_transition",
                f"Cannot change status from {current.status.value} to {new_status.value}",
                {"from": current.status.value, "to": new_status.value},
            )

        stored = self._mirror(
            "update_reservation_status", self._store.update_reservation_status, reservation_id, new_status
        )

        updated = replace(current, status=new_status)
        with self._lock:
            self._reservations[reservation_id] = updated
            if stored:
                self._pending_status.pop(reservation_id, None)
            else:
                self._pending_status[reservation_id] = new_status

        logger.info(
            "reservation status changed",
            extra={
                "extra_fields": {
                    "reservation_id": reservation_id,
                    "from": current.status.value,
                    "to": new_status.value,
                }
            },
        )
        return updated

    def confirm(self, reservation_id: str) -> Reservation:
        return self.transition(reservation_id, ReservationStatus.CONFIRMED)

    def cancel(self, reservation_id: str) -> Reservation:
        return self.transition(reservation_id, ReservationStatus.CANCELLED)

    def complete(self, reservation_id: str) -> Reservation:
        return self.transition(reservation_id, ReservationStatus.COMPLETED)

    def delete(self, reservation_id: str, *, confirmed: bool = False) -> None:
        """Permanently remove a reservation and its protocols and contracts."""
        if not confirmed:
            raise ValidationError("confirmation_required", "Deleting a reservation must be confirmed")
        reservation = self.get_reservation(reservation_id)

        stored = self._mirror("delete_reservation", self._store.delete_reservation, reservation_id)

        with self._lock:
            if not stored and reservation_id not in self._unsynced:
                self._pending_deletes.add(reservation_id)
            self._pending_status.pop(reservation_id, None)
            self._pending_handovers.discard(reservation_id)
            self._pending_returns.discard(reservation_id)
            self._pending_contracts = {
                cid for cid in self._pending_contracts if self._contracts[cid].reservation_id != reservation_id
            }
            self._reservations.pop(reservation_id, None)
            self._unsynced.discard(reservation_id)
            if reservation.idempotency_key:
                self._by_key.pop(reservation.idempotency_key, None)
            self._handovers.pop(reservation_id, None)
            self._returns.pop(reservation_id, None)
            self._contracts = {
                cid: c for cid, c in self._contracts.items() if c.reservation_id != reservation_id
            }

        logger.info("reservation deleted", extra={"extra_fields": {"reservation_id": reservation_id}})

    def expire_stale_pending(self, max_age: timedelta | None = None, now: datetime | None = None) -> list[str]:
        """Cancel PENDING requests older than *max_age*; returns their ids."""
        if max_age is None:
            max_age = timedelta(hours=self._settings.pending_max_age_hours)
        cutoff = (now or self._clock()) - max_age
        stale = [
            r.id
            for r in self.reservations()
            if r.status == ReservationStatus.PENDING and r.created_at < cutoff
        ]
        for reservation_id in stale:
            self.cancel(reservation_id)
        if stale:
            logger.info("stale pending reservations expired", extra={"extra_fields": {"count": len(stale)}})
        return stale

    # ── Handover / return ────────────────────────────────────────────────

    def record_handover(
        self,
        reservation_id: str,
        *,
        mileage: int,
        fuel_level: int,
        cleanliness: str = "",
        damages: str = "",
        notes: str = "",
    ) -> HandoverProtocol:
        """Record the vehicle state at handover (once per reservation).

        Raises:
            PreconditionError: Reservation not confirmed, or handover exists.
            ValidationError: Negative mileage or fuel level outside 0..100.
        """
        reservation = self.get_reservation(reservation_id)
        if reservation.status != ReservationStatus.CONFIRMED:
            raise PreconditionError(
                "reservation_not_confirmed",
                "Handover requires a confirmed reservation",
                {"status": reservation.status.value},
            )
        if mileage < 0:
            raise ValidationError("mileage_invalid", "Mileage must be non-negative")
        _check_fuel_level(fuel_level, "fuel_level")

        protocol = HandoverProtocol(
            reservation_id=reservation_id,
            mileage=mileage,
            fuel_level=fuel_level,
            cleanliness=cleanliness,
            damages=damages,
            notes=notes,
            recorded_at=self._clock(),
        )
        # Check, save and set as one step: a handover is recorded once.
        with self._protocol_lock:
            if self.handover_for(reservation_id) is not None:
                raise PreconditionError("handover_exists", "Handover protocol already recorded")
            protocol_id = self._save("save_handover", self._store.save_handover, protocol)
            with self._lock:
                if protocol_id is None:
                    protocol_id = str(uuid.uuid4())
                    self._pending_handovers.add(reservation_id)
                protocol = replace(protocol, id=protocol_id)
                self._handovers[reservation_id] = protocol
        logger.info("handover recorded", extra={"extra_fields": {"reservation_id": reservation_id}})
        return protocol

    def record_return(
        self,
        reservation_id: str,
        *,
        return_mileage: int,
        return_fuel_level: int,
        return_damages: str = "",
        notes: str = "",
    ) -> ReturnProtocol:
        """Record the vehicle state at return and settle extra kilometres.

        Raises:
            PreconditionError: No handover protocol yet, or return exists.
            ValidationError: Return mileage below handover mileage, or fuel
                level outside 0..100.
        """
        reservation = self.get_reservation(reservation_id)
        handover = self.handover_for(reservation_id)
        if handover is None:
            raise PreconditionError(
                "handover_missing",
                "Return protocol requires a handover protocol first",
            )
        _check_fuel_level(return_fuel_level, "return_fuel_level")

        vehicle = self.get_vehicle(reservation.vehicle_id)
        charge = compute_overage(
            reservation.rental_days,
            vehicle.km_limit_per_day,
            handover.mileage,
            return_mileage,
            self._settings.extra_km_rate,
        )

        protocol = ReturnProtocol(
            reservation_id=reservation_id,
            return_mileage=return_mileage,
            return_fuel_level=return_fuel_level,
            return_damages=return_damages,
            extra_km_charge=charge,
            notes=notes,
            recorded_at=self._clock(),
        )
        with self._protocol_lock:
            if self.return_for(reservation_id) is not None:
                raise PreconditionError("return_exists", "Return protocol already recorded")
            protocol_id = self._save("save_return", self._store.save_return, protocol)
            with self._lock:
                if protocol_id is None:
                    protocol_id = str(uuid.uuid4())
                    self._pending_returns.add(reservation_id)
                protocol = replace(protocol, id=protocol_id)
                self._returns[reservation_id] = protocol
        logger.info(
            "return recorded",
            extra={"extra_fields": {"reservation_id": reservation_id, "extra_km_charge": charge}},
        )
        return protocol

    # ── Contracts & analysis ─────────────────────────────────────────────

    def generate_contract(self, reservation_id: str) -> SavedContract:
        """Generate and save the rental contract text.

        Uses the text generator; any CollaboratorUnavailable falls back to
        the local template so a contract is always produced.
        """
        reservation = self.get_reservation(reservation_id)
        with self._lock:
            vehicle = self._vehicles.get(reservation.vehicle_id)
            customer = self._customers.get(reservation.customer_id)

        details = build_contract_details(
            reservation,
            vehicle,
            customer,
            lessor_name=self._settings.lessor_name,
            handover_place=self._settings.handover_place,
            currency_label=self._settings.currency_label,
        )
        try:
            content = self._text_generator.generate_contract_text(details)
            source = "ai"
        except CollaboratorUnavailable as e:
            logger.info(
                "contract generated from local template",
                extra={"extra_fields": {"reservation_id": reservation_id, "reason": e.reason_code}},
            )
            content = render_contract_template(details)
            source = "template"

        contract = SavedContract(
            id=f"cnt-{uuid.uuid4().hex[:12]}",
            reservation_id=reservation_id,
            customer_name=details.customer_name,
            created_at=self._clock(),
            content=content,
            source=source,
        )
        stored = self._mirror("save_contract", self._store.save_contract, contract)
        with self._lock:
            self._contracts[contract.id] = contract
            if not stored:
                self._pending_contracts.add(contract.id)
        return contract

    def analyze(self) -> ReservationSummary:
        reservations = self.reservations()
        try:
            return self._text_generator.summarize_reservations(reservations)
        except CollaboratorUnavailable:
            return local_summary(
                reservations,
                self._clock().year,
                self._settings.currency_label,
            )

    def stats(self, year: int | None = None) -> DashboardStats:
        reservations = self.reservations()
        return DashboardStats(
            total_reservations=len(reservations),
            total_revenue=sum(
                r.total_price for r in reservations if r.status != ReservationStatus.CANCELLED
            ),
            active_bookings=sum(1 for r in reservations if r.status == ReservationStatus.CONFIRMED),
            pending_bookings=sum(1 for r in reservations if r.status == ReservationStatus.PENDING),
            occupancy_rate=occupancy_rate(reservations, year or self._clock().year),
        )

    # ── Vehicle administration ───────────────────────────────────────────

    def update_vehicle(self, vehicle: Vehicle) -> Vehicle:
        """Replace the vehicle's owner-editable data.

        Raises:
            NotFoundError: Unknown vehicle.
            ValidationError: Invalid prices/limits or overlapping seasons.
        """
        self.get_vehicle(vehicle.id)
        if vehicle.base_price <= 0 or vehicle.deposit < 0 or vehicle.km_limit_per_day < 0:
            raise ValidationError(
                "vehicle_terms_invalid",
                "Base price must be positive; deposit and km limit must be non-negative",
            )
        if vehicle.min_days < 1:
            raise ValidationError("vehicle_terms_invalid", "Minimum rental must be at least one day")
        validate_season_rules(vehicle.season_rules)

        stored = self._mirror("update_vehicle", self._store.update_vehicle, vehicle)
        with self._lock:
            self._vehicles[vehicle.id] = vehicle
            if stored:
                self._pending_vehicles.discard(vehicle.id)
            else:
                self._pending_vehicles.add(vehicle.id)
        logger.info("vehicle updated", extra={"extra_fields": {"vehicle_id": vehicle.id}})
        return vehicle

    def reserved_calendar(self, vehicle_id: str, year: int, month: int) -> list[date]:
        self.get_vehicle(vehicle_id)
        return sorted(reserved_days(self.current_reservations(), vehicle_id, year, month))

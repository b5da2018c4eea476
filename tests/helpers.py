"""Shared test builders.

Regular functions and small fakes, importable from conftest.py and tests.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from obytkem.domain.errors import CollaboratorUnavailable
from obytkem.domain.lifecycle import ReservationLifecycle
from obytkem.domain.models import (
    ContactDetails,
    Reservation,
    ReservationStatus,
    SeasonRule,
    Vehicle,
)
from obytkem.infra.memory_store import InMemoryStore
from obytkem.infra.settings import Settings

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

SUMMER = SeasonRule("Summer", date(2026, 6, 1), date(2026, 8, 31), 4600, "s-summer")


def make_vehicle(**overrides) -> Vehicle:
    fields = dict(
        id="v1",
        name="Test Camper",
        base_price=3200,
        min_days=3,
        deposit=25000,
        km_limit_per_day=300,
        season_rules=(SUMMER,),
        license_plate="1AB 2345",
    )
    fields.update(overrides)
    return Vehicle(**fields)


def make_reservation(
    start: date,
    end: date,
    *,
    id: str = "r1",
    vehicle_id: str = "v1",
    status: ReservationStatus = ReservationStatus.CONFIRMED,
    created_at: datetime = NOW,
    total_price: int = 10000,
    customer_id: str = "c1",
    idempotency_key: str | None = None,
) -> Reservation:
    return Reservation(
        id=id,
        vehicle_id=vehicle_id,
        customer_id=customer_id,
        start_date=start,
        end_date=end,
        total_price=total_price,
        deposit=25000,
        status=status,
        created_at=created_at,
        idempotency_key=idempotency_key,
    )


def make_contact(**overrides) -> ContactDetails:
    fields = dict(
        first_name="Jana",
        last_name="Dvořáková",
        email="jana@example.cz",
        phone="+420 600 111 222",
        address="Lidická 5, Brno",
        note="Two kids",
    )
    fields.update(overrides)
    return ContactDetails(**fields)


class OfflineStore:
    """Store whose every call fails like an unreachable database."""

    def __getattr__(self, name):
        def _fail(*args, **kwargs):
            raise CollaboratorUnavailable("store", "connection refused")

        return _fail


class OfflineTextGenerator:
    def generate_contract_text(self, details):
        raise CollaboratorUnavailable("text_generator", "not configured")

    def summarize_reservations(self, reservations):
        raise CollaboratorUnavailable("text_generator", "not configured")


def make_store(*vehicles: Vehicle) -> InMemoryStore:
    store = InMemoryStore()
    for v in vehicles or (make_vehicle(),):
        store.add_vehicle(v)
    return store


def make_lifecycle(
    store=None,
    text_generator=None,
    settings: Settings | None = None,
    now: datetime = NOW,
) -> ReservationLifecycle:
    lifecycle = ReservationLifecycle(
        store if store is not None else make_store(),
        text_generator if text_generator is not None else OfflineTextGenerator(),
        settings or Settings(),
        clock=lambda: now,
    )
    lifecycle.refresh()
    return lifecycle


API_SETTINGS = Settings(admin_password="pw", session_secret="test-session-secret-0123456789abcdef")


def make_client(lifecycle: ReservationLifecycle, settings: Settings = API_SETTINGS, sessions=None):
    """TestClient with lifecycle, settings and booking sessions overridden."""
    from fastapi.testclient import TestClient

    from obytkem.api.factory import create_app
    from obytkem.api.runtime import get_lifecycle, get_settings
    from obytkem.api.sessions import BookingSessions, get_sessions

    app = create_app()
    booking_sessions = sessions if sessions is not None else BookingSessions()
    app.dependency_overrides[get_lifecycle] = lambda: lifecycle
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_sessions] = lambda: booking_sessions
    return TestClient(app)


def admin_headers(client) -> dict:
    response = client.post("/auth/login", json={"password": "pw"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}

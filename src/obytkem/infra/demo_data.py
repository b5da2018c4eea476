"""Demo catalogue used when no database is configured."""

from __future__ import annotations

from datetime import date, datetime, timezone

from obytkem.domain.models import (
    Customer,
    Reservation,
    ReservationStatus,
    SeasonRule,
    Vehicle,
)
from obytkem.infra.memory_store import InMemoryStore

DEMO_VEHICLE = Vehicle(
    id="v2",
    name="Laika Kreos 7010 (2016)",
    description=(
        "Italian top-of-the-range Kreos motorhome with a double floor, "
        "excellent insulation and an AL-KO chassis."
    ),
    license_plate="7BM 2026",
    vin="ZFA2016LAIKAKREOS7010X",
    base_price=3200,
    min_days=3,
    deposit=25000,
    km_limit_per_day=300,
    season_rules=(
        SeasonRule("Main summer season 2026", date(2026, 6, 1), date(2026, 8, 31), 4600, "s2026-1"),
        SeasonRule("September late summer", date(2026, 9, 1), date(2026, 9, 30), 3800, "s2026-2"),
        SeasonRule("Spring expedition", date(2026, 4, 1), date(2026, 5, 31), 3500, "s2026-3"),
    ),
    equipment=(
        "ALDE hot-water heating (winter ready)",
        "175 W solar panels",
        "12 V / 230 V inverter (600 W)",
        "120 l fresh water tank",
        "Heated waste water tank",
        "160 l fridge with freezer",
        "Gas oven and 3-burner hob",
        "Thule 4.5 m awning with LED lighting",
    ),
)

DEMO_CUSTOMER = Customer(
    id="c1",
    first_name="Jan",
    last_name="Novák",
    email="jan.novak@example.cz",
    phone="+420 777 123 456",
    address="Václavské náměstí 1, Praha 110 00",
    id_number="123456789",
)

DEMO_RESERVATION = Reservation(
    id="r1",
    vehicle_id="v2",
    customer_id="c1",
    start_date=date(2026, 7, 10),
    end_date=date(2026, 7, 20),
    total_price=46000,
    deposit=25000,
    status=ReservationStatus.CONFIRMED,
    created_at=datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc),
)


def seed_demo_store(store: InMemoryStore) -> InMemoryStore:
    store.add_vehicle(DEMO_VEHICLE)
    store.add_customer(DEMO_CUSTOMER)
    store.add_reservation(DEMO_RESERVATION)
    return store

"""Vehicles repository - row <-> Vehicle mapping and vehicle writes.

Uses raw SQL with psycopg2 (no ORM).

The seasonal_pricing JSONB column holds a list of season objects. Rows
written by the earlier web client use camelCase keys (startDate, endDate,
pricePerDay); this module reads both shapes and always writes snake_case.
"""

from __future__ import annotations

import json
from datetime import date
from typing import Any

from psycopg2.extensions import cursor as PgCursor

from obytkem.domain.models import SeasonRule, Vehicle

VEHICLE_COLUMNS = (
    "id, name, description, license_plate, vin, base_price, min_days, "
    "deposit, km_limit_per_day, images, is_active, seasonal_pricing, equipment"
)


def _as_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def season_from_record(record: dict) -> SeasonRule:
    def pick(snake: str, camel: str) -> Any:
        return record[snake] if snake in record else record[camel]

    return SeasonRule(
        id=record.get("id"),
        name=record.get("name", ""),
        start_date=_as_date(pick("start_date", "startDate")),
        end_date=_as_date(pick("end_date", "endDate")),
        price_per_day=int(pick("price_per_day", "pricePerDay")),
    )


def season_to_record(rule: SeasonRule) -> dict:
    return {
        "id": rule.id,
        "name": rule.name,
        "start_date": rule.start_date.isoformat(),
        "end_date": rule.end_date.isoformat(),
        "price_per_day": rule.price_per_day,
    }


def _json_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, str):
        return json.loads(value)
    return list(value)


def row_to_vehicle(row: tuple) -> Vehicle:
    """Map a row selected with VEHICLE_COLUMNS to a Vehicle."""
    return Vehicle(
        id=str(row[0]),
        name=row[1],
        description=row[2] or "",
        license_plate=row[3] or "",
        vin=row[4],
        base_price=int(row[5]),
        min_days=int(row[6]),
        deposit=int(row[7]),
        km_limit_per_day=int(row[8]),
        images=tuple(_json_list(row[9])),
        is_active=bool(row[10]),
        season_rules=tuple(season_from_record(s) for s in _json_list(row[11])),
        equipment=tuple(_json_list(row[12])),
    )


def fetch_vehicles(cur: PgCursor) -> list[Vehicle]:
    cur.execute(f"SELECT {VEHICLE_COLUMNS} FROM vehicles ORDER BY name")
    return [row_to_vehicle(r) for r in cur.fetchall()]


def lock_vehicle(cur: PgCursor, vehicle_id: str) -> bool:
    """Lock the vehicle row FOR UPDATE. Serialises bookings of one vehicle.

    Returns:
        True if the vehicle exists.
    """
    cur.execute("SELECT id FROM vehicles WHERE id = %s FOR UPDATE", (vehicle_id,))
    return cur.fetchone() is not None


def update_vehicle(cur: PgCursor, vehicle: Vehicle) -> int:
    """Write owner-editable vehicle fields.

    Returns:
        Number of rows updated (0 if the vehicle does not exist).
    """
    cur.execute(
        """
        UPDATE vehicles
        SET name = %s,
            description = %s,
            license_plate = %s,
            vin = %s,
            base_price = %s,
            min_days = %s,
            deposit = %s,
            km_limit_per_day = %s,
            images = %s::jsonb,
            is_active = %s,
            seasonal_pricing = %s::jsonb,
            equipment = %s::jsonb,
            updated_at = now()
        WHERE id = %s
        """,
        (
            vehicle.name,
            vehicle.description,
            vehicle.license_plate,
            vehicle.vin,
            vehicle.base_price,
            vehicle.min_days,
            vehicle.deposit,
            vehicle.km_limit_per_day,
            json.dumps(list(vehicle.images)),
            vehicle.is_active,
            json.dumps([season_to_record(s) for s in vehicle.season_rules]),
            json.dumps(list(vehicle.equipment)),
            vehicle.id,
        ),
    )
    return cur.rowcount

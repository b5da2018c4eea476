"""Reservations repository.

Uses raw SQL with psycopg2 (no ORM).

Overlap uses inclusive bounds on both ends, matching the application check
and the no_vehicle_overlap exclusion constraint (daterange '[]'):

    start_date <= new_end AND end_date >= new_start
"""

from __future__ import annotations

from datetime import date

from psycopg2.extensions import cursor as PgCursor

from obytkem.domain.models import Reservation, ReservationStatus

RESERVATION_COLUMNS = (
    "id, vehicle_id, customer_id, start_date, end_date, total_price, "
    "deposit, status, created_at, customer_note, idempotency_key"
)


def row_to_reservation(row: tuple) -> Reservation:
    return Reservation(
        id=str(row[0]),
        vehicle_id=str(row[1]),
        customer_id=str(row[2]),
        start_date=row[3],
        end_date=row[4],
        total_price=int(row[5]),
        deposit=int(row[6]),
        status=ReservationStatus(row[7]),
        created_at=row[8],
        customer_note=row[9],
        idempotency_key=row[10],
    )


def fetch_reservations(cur: PgCursor) -> list[Reservation]:
    cur.execute(f"SELECT {RESERVATION_COLUMNS} FROM reservations ORDER BY created_at DESC")
    return [row_to_reservation(r) for r in cur.fetchall()]


def get_by_idempotency_key(cur: PgCursor, idempotency_key: str) -> Reservation | None:
    cur.execute(
        f"SELECT {RESERVATION_COLUMNS} FROM reservations WHERE idempotency_key = %s",
        (idempotency_key,),
    )
    row = cur.fetchone()
    return row_to_reservation(row) if row else None


def find_overlapping(
    cur: PgCursor,
    *,
    vehicle_id: str,
    start_date: date,
    end_date: date,
) -> str | None:
    """Return the id of the first non-cancelled overlapping reservation, or None."""
    cur.execute(
        """
        SELECT id
        FROM reservations
        WHERE vehicle_id = %s
          AND status <> %s
          AND start_date <= %s
          AND end_date >= %s
        ORDER BY start_date
        LIMIT 1
        """,
        (vehicle_id, ReservationStatus.CANCELLED.value, end_date, start_date),
    )
    row = cur.fetchone()
    return str(row[0]) if row else None


def insert_reservation(
    cur: PgCursor,
    *,
    vehicle_id: str,
    customer_id: str,
    start_date: date,
    end_date: date,
    total_price: int,
    deposit: int,
    status: ReservationStatus,
    customer_note: str | None,
    idempotency_key: str,
) -> Reservation | None:
    """Insert a reservation; a repeated idempotency_key inserts nothing.

    Returns:
        The new Reservation, or None if the idempotency key already exists.
    """
    cur.execute(
        f"""
        INSERT INTO reservations (
            vehicle_id, customer_id, start_date, end_date,
            total_price, deposit, status, customer_note, idempotency_key
        )
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
        ON CONFLICT (idempotency_key) DO NOTHING
        RETURNING {RESERVATION_COLUMNS}
        """,
        (
            vehicle_id,
            customer_id,
            start_date,
            end_date,
            total_price,
            deposit,
            status.value,
            customer_note,
            idempotency_key,
        ),
    )
    row = cur.fetchone()
    return row_to_reservation(row) if row else None


def update_status(cur: PgCursor, reservation_id: str, status: ReservationStatus) -> int:
    cur.execute(
        "UPDATE reservations SET status = %s WHERE id = %s",
        (status.value, reservation_id),
    )
    return cur.rowcount


def delete_reservation(cur: PgCursor, reservation_id: str) -> int:
    cur.execute("DELETE FROM reservations WHERE id = %s", (reservation_id,))
    return cur.rowcount

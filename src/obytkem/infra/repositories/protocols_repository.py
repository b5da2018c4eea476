"""Handover / return protocol and saved contract persistence.

Uses raw SQL with psycopg2 (no ORM). One handover and one return row per
reservation, enforced by unique reservation_id columns.
"""

from psycopg2.extensions import cursor as PgCursor

from obytkem.domain.models import HandoverProtocol, ReturnProtocol, SavedContract


def insert_handover(cur: PgCursor, protocol: HandoverProtocol) -> str:
    cur.execute(
        """
        INSERT INTO handover_protocols (
            reservation_id, mileage, fuel_level, cleanliness, damages, notes, recorded_at
        )
        VALUES (%s, %s, %s, %s, %s, %s, %s)
        RETURNING id
        """,
        (
            protocol.reservation_id,
            protocol.mileage,
            protocol.fuel_level,
            protocol.cleanliness,
            protocol.damages,
            protocol.notes,
            protocol.recorded_at,
        ),
    )
    return str(cur.fetchone()[0])


def insert_return(cur: PgCursor, protocol: ReturnProtocol) -> str:
    cur.execute(
        """
        INSERT INTO return_protocols (
            reservation_id, return_mileage, return_fuel_level, return_damages,
            extra_km_charge, notes, recorded_at
        )
        VALUES (%s, %s, %s, %s, %s, %s, %s)
        RETURNING id
        """,
        (
            protocol.reservation_id,
            protocol.return_mileage,
            protocol.return_fuel_level,
            protocol.return_damages,
            protocol.extra_km_charge,
            protocol.notes,
            protocol.recorded_at,
        ),
    )
    return str(cur.fetchone()[0])


def fetch_handovers(cur: PgCursor) -> list[HandoverProtocol]:
    cur.execute(
        """
        SELECT id, reservation_id, mileage, fuel_level, cleanliness, damages, notes, recorded_at
        FROM handover_protocols
        """
    )
    return [
        HandoverProtocol(
            id=str(r[0]),
            reservation_id=str(r[1]),
            mileage=r[2],
            fuel_level=r[3],
            cleanliness=r[4] or "",
            damages=r[5] or "",
            notes=r[6] or "",
            recorded_at=r[7],
        )
        for r in cur.fetchall()
    ]


def fetch_returns(cur: PgCursor) -> list[ReturnProtocol]:
    cur.execute(
        """
        SELECT id, reservation_id, return_mileage, return_fuel_level, return_damages,
               extra_km_charge, notes, recorded_at
        FROM return_protocols
        """
    )
    return [
        ReturnProtocol(
            id=str(r[0]),
            reservation_id=str(r[1]),
            return_mileage=r[2],
            return_fuel_level=r[3],
            return_damages=r[4] or "",
            extra_km_charge=r[5],
            notes=r[6] or "",
            recorded_at=r[7],
        )
        for r in cur.fetchall()
    ]


def insert_contract(cur: PgCursor, contract: SavedContract) -> None:
    cur.execute(
        """
        INSERT INTO saved_contracts (id, reservation_id, customer_name, content, source, created_at)
        VALUES (%s, %s, %s, %s, %s, %s)
        """,
        (
            contract.id,
            contract.reservation_id,
            contract.customer_name,
            contract.content,
            contract.source,
            contract.created_at,
        ),
    )


def fetch_contracts(cur: PgCursor) -> list[SavedContract]:
    cur.execute(
        """
        SELECT id, reservation_id, customer_name, created_at, content, source
        FROM saved_contracts
        ORDER BY created_at DESC
        """
    )
    return [
        SavedContract(
            id=str(r[0]),
            reservation_id=str(r[1]),
            customer_name=r[2],
            created_at=r[3],
            content=r[4],
            source=r[5],
        )
        for r in cur.fetchall()
    ]

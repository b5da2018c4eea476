"""Customers repository.

Uses raw SQL with psycopg2 (no ORM). Every booking inserts a new customer
row; customers are not deduplicated.
"""

from psycopg2.extensions import cursor as PgCursor

from obytkem.domain.models import ContactDetails, Customer
from obytkem.infra.pii_vault import decrypt_id_number, encrypt_id_number


def insert_customer(
    cur: PgCursor,
    contact: ContactDetails,
    *,
    id_number_key: str | None = None,
) -> str:
    """Insert a customer and return its id."""
    cur.execute(
        """
        INSERT INTO customers (first_name, last_name, email, phone, address, id_number)
        VALUES (%s, %s, %s, %s, %s, %s)
        RETURNING id
        """,
        (
            contact.first_name,
            contact.last_name,
            contact.email,
            contact.phone,
            contact.address,
            encrypt_id_number(contact.id_number, id_number_key),
        ),
    )
    return str(cur.fetchone()[0])


def fetch_customers(cur: PgCursor, *, id_number_key: str | None = None) -> list[Customer]:
    cur.execute(
        """
        SELECT id, first_name, last_name, email, phone, address, id_number
        FROM customers
        ORDER BY created_at DESC
        """
    )
    return [
        Customer(
            id=str(row[0]),
            first_name=row[1],
            last_name=row[2],
            email=row[3],
            phone=row[4],
            address=row[5] or "",
            id_number=decrypt_id_number(row[6], id_number_key),
        )
        for row in cur.fetchall()
    ]


def delete_customer(cur: PgCursor, customer_id: str) -> None:
    cur.execute("DELETE FROM customers WHERE id = %s", (customer_id,))

"""Database access layer using psycopg2.

Provides:
- get_conn(): Open a connection from DATABASE_URL (DB_PASSWORD fallback)
- txn(): Context manager for short, safe transactions
"""

import os
import re
from contextlib import contextmanager
from typing import Any, Iterator
from urllib.parse import urlparse

import psycopg2
from psycopg2.extensions import connection as PgConnection, cursor as PgCursor

_DSN_PASSWORD = re.compile(r"(^|\s)password=")


def _dsn_has_password(dsn: str) -> bool:
    if "://" in dsn:
        return bool(urlparse(dsn).password)
    return bool(_DSN_PASSWORD.search(dsn))


def get_conn(
    dsn: str | None = None,
    *,
    password: str | None = None,
    connect_timeout: int | None = None,
) -> PgConnection:
    """Open a new database connection.

    Args:
        dsn: URL or libpq key=value DSN. Defaults to DATABASE_URL.
        password: Used only when the DSN carries none. Defaults to DB_PASSWORD.
        connect_timeout: Seconds to wait for the server. Defaults to
            DB_CONNECT_TIMEOUT, then 5.

    Raises:
        RuntimeError: If no DSN is configured.
        psycopg2.Error: On connection failure.
    """
    dsn = dsn or os.environ.get("DATABASE_URL")
    if not dsn:
        raise RuntimeError("DATABASE_URL environment variable not set")

    kwargs: dict[str, Any] = {
        "connect_timeout": connect_timeout or int(os.environ.get("DB_CONNECT_TIMEOUT", "5")),
    }
    password = password or os.environ.get("DB_PASSWORD")
    if password and not _dsn_has_password(dsn):
        kwargs["password"] = password

    return psycopg2.connect(dsn, **kwargs)


@contextmanager
def txn(conn: PgConnection | None = None, **conn_kwargs: Any) -> Iterator[PgCursor]:
    """Run a block inside one transaction.

    Commits on success, rolls back on any exception. A connection opened
    here (conn is None) is closed on exit; keyword arguments go to get_conn().

    Example:
        with txn() as cur:
            cur.execute("UPDATE reservations SET status = %s WHERE id = %s", (s, rid))
    """
    owns_conn = conn is None
    if owns_conn:
        conn = get_conn(**conn_kwargs)

    try:
        with conn.cursor() as cur:
            yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        if owns_conn:
            conn.close()

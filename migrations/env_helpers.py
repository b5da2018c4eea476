"""Database URL helpers for Alembic migrations.

Kept out of env.py so they can be tested without alembic.context.
DATABASE_URL may be a URL or a libpq key=value DSN; DB_PASSWORD fills in a
missing password in either form.
"""

from __future__ import annotations

import os
import re
from typing import Mapping
from urllib.parse import quote_plus, urlsplit, urlunsplit

_DRIVER_SCHEME = "postgresql+psycopg2"
_DSN_PAIR = re.compile(r"(\w+)\s*=\s*('(?:[^'\\]|\\.)*'|\S*)")


def parse_libpq_dsn(dsn: str) -> dict[str, str]:
    """Parse `key=value` pairs; single-quoted values may contain spaces and \\ escapes."""
    pairs: dict[str, str] = {}
    for key, raw in _DSN_PAIR.findall(dsn):
        if raw.startswith("'") and raw.endswith("'") and len(raw) >= 2:
            raw = re.sub(r"\\(.)", r"\1", raw[1:-1])
        pairs[key] = raw
    return pairs


def libpq_dsn_to_url(dsn: str, db_password: str = "") -> str:
    tokens = parse_libpq_dsn(dsn)
    password = tokens.get("password") or db_password
    user = quote_plus(tokens.get("user", ""))
    credentials = f"{user}:{quote_plus(password)}" if password else user
    dbname = quote_plus(tokens.get("dbname", ""))
    host = tokens.get("host", "localhost")
    port = tokens.get("port", "5432")

    if host.startswith("/"):
        # Unix socket directory
        return f"{_DRIVER_SCHEME}://{credentials}@/{dbname}?host={quote_plus(host)}"
    return f"{_DRIVER_SCHEME}://{credentials}@{host}:{port}/{dbname}"


def normalize_url(url: str, db_password: str = "") -> str:
    for legacy in ("postgres://", "postgresql://"):
        if url.startswith(legacy):
            url = f"{_DRIVER_SCHEME}://" + url[len(legacy):]
            break

    parts = urlsplit(url)
    if db_password and parts.username is not None and not parts.password:
        host = parts.netloc.rsplit("@", 1)[1]
        netloc = f"{parts.username}:{quote_plus(db_password)}@{host}"
        url = urlunsplit(parts._replace(netloc=netloc))
    return url


def get_database_url(env: Mapping[str, str] | None = None) -> str:
    env = os.environ if env is None else env
    url = env.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is required to run migrations")
    db_password = env.get("DB_PASSWORD", "")
    if "://" in url:
        return normalize_url(url, db_password)
    return libpq_dsn_to_url(url, db_password)

"""Time utilities for consistent timestamp handling."""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Return current UTC timestamp (timezone-aware)."""
    return datetime.now(timezone.utc)


def today() -> date:
    """Current UTC calendar date."""
    return utc_now().date()

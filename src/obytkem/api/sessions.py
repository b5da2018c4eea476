"""In-process registry of open booking drafts.

Each customer's draft lives under an opaque session id. Drafts expire after
a period of inactivity; a submitted draft is kept until it expires so a
retried submit replays the first result.
"""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass

from obytkem.domain.booking_flow import BookingWorkflow
from obytkem.domain.errors import NotFoundError

DEFAULT_TTL_SECONDS = 2 * 60 * 60


@dataclass
class _Entry:
    workflow: BookingWorkflow
    touched_at: float


class BookingSessions:
    def __init__(self, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> None:
        self._ttl = ttl_seconds
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def open(self, workflow: BookingWorkflow) -> str:
        session_id = uuid.uuid4().hex
        with self._lock:
            self._prune()
            self._entries[session_id] = _Entry(workflow, time.monotonic())
        return session_id

    def get(self, session_id: str) -> BookingWorkflow:
        with self._lock:
            self._prune()
            entry = self._entries.get(session_id)
            if entry is None:
                raise NotFoundError("booking_session_not_found", "Booking session not found or expired")
            entry.touched_at = time.monotonic()
            return entry.workflow

    def close(self, session_id: str) -> None:
        with self._lock:
            self._entries.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _prune(self) -> None:
        cutoff = time.monotonic() - self._ttl
        for sid in [sid for sid, e in self._entries.items() if e.touched_at < cutoff]:
            del self._entries[sid]


_sessions = BookingSessions()


def get_sessions() -> BookingSessions:
    """Registry singleton (allows override in tests)."""
    return _sessions

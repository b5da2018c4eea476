"""Tests for the booking session registry."""

from unittest.mock import patch

import pytest

from obytkem.api.sessions import BookingSessions
from obytkem.domain.errors import NotFoundError


def test_open_get_close(lifecycle):
    sessions = BookingSessions()
    workflow = lifecycle.start_booking("v1")
    sid = sessions.open(workflow)
    assert sessions.get(sid) is workflow
    sessions.close(sid)
    assert len(sessions) == 0


def test_idle_session_expires(lifecycle):
    sessions = BookingSessions(ttl_seconds=60)
    with patch("obytkem.api.sessions.time.monotonic", return_value=1000.0):
        sid = sessions.open(lifecycle.start_booking("v1"))
    with patch("obytkem.api.sessions.time.monotonic", return_value=1061.0):
        with pytest.raises(NotFoundError) as exc_info:
            sessions.get(sid)
    assert exc_info.value.reason_code == "booking_session_not_found"


def test_access_keeps_session_alive(lifecycle):
    sessions = BookingSessions(ttl_seconds=60)
    with patch("obytkem.api.sessions.time.monotonic", return_value=1000.0):
        sid = sessions.open(lifecycle.start_booking("v1"))
    with patch("obytkem.api.sessions.time.monotonic", return_value=1050.0):
        sessions.get(sid)
    with patch("obytkem.api.sessions.time.monotonic", return_value=1100.0):
        assert sessions.get(sid).vehicle.id == "v1"

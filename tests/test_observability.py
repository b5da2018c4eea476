"""Tests for JSON logging, correlation IDs and redaction."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import date

from obytkem.observability.correlation import (
    bind_correlation_id,
    current_correlation_id,
    new_correlation_id,
    unbind_correlation_id,
)
from obytkem.observability.logging import JsonFormatter, get_logger
from obytkem.observability.redaction import redact_string, redact_value, safe_log_context


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("obytkem.test", logging.INFO, __file__, 1, msg, None, None)
    for k, v in extra.items():
        setattr(record, k, v)
    return record


class TestJsonFormatter:
    def test_basic_fields(self):
        entry = json.loads(JsonFormatter().format(_record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "obytkem.test"
        assert entry["msg"] == "hello"
        assert "correlationId" not in entry

    def test_extra_fields_merged(self):
        entry = json.loads(JsonFormatter().format(_record(extra_fields={"reservation_id": "r1"})))
        assert entry["reservation_id"] == "r1"

    def test_correlation_id_included(self):
        token = bind_correlation_id("cid-123")
        try:
            entry = json.loads(JsonFormatter().format(_record()))
        finally:
            unbind_correlation_id(token)
        assert entry["correlationId"] == "cid-123"
        assert current_correlation_id() == ""

    def test_get_logger_attaches_one_handler(self):
        logger = get_logger("obytkem.test.single")
        get_logger("obytkem.test.single")
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)
        assert logger.propagate is False


def test_new_correlation_id_is_hex():
    cid = new_correlation_id()
    assert len(cid) == 32
    int(cid, 16)


class TestRedaction:
    def test_sensitive_keys_masked(self):
        ctx = safe_log_context(email="jan@example.cz", phone="+420 777 123 456", reservation_id="r1")
        assert ctx == {"email": "[REDACTED]", "phone": "[REDACTED]", "reservation_id": "r1"}

    def test_empty_sensitive_value_not_masked(self):
        assert safe_log_context(note=None) == {"note": "null"}

    def test_free_text_scrubbed(self):
        text = redact_string("call +420 777 123 456 or write jan@example.cz")
        assert "777" not in text
        assert "example.cz" not in text

    def test_uuid_left_intact(self):
        rid = str(uuid.uuid4())
        assert redact_string(rid) == rid
        assert safe_log_context(reservation_id=rid) == {"reservation_id": rid}

    def test_digit_heavy_ids_left_intact(self):
        for value in ("00000000-0000-4000-8000-000000000000", "123e4567-e89b-12d3-a456-426614174000",
                      "cnt-123456789012", "abc1234567890"):
            assert redact_string(value) == value

    def test_phone_next_to_uuid_still_scrubbed(self):
        rid = str(uuid.uuid4())
        text = redact_string(f"{rid} called from 777 123 456")
        assert text == f"{rid} called from [REDACTED]"

    def test_values(self):
        assert redact_value(True) == "true"
        assert redact_value(23000) == "23000"
        assert redact_value(date(2026, 6, 10)) == "2026-06-10"
        assert redact_value({"b": 1, "a": 2}) == "dict(keys=['a', 'b'])"
        assert redact_value([1, 2, 3]) == "list(len=3)"

"""Redaction helpers. Customer contact data never reaches the logs unmasked."""

import re
from typing import Any

_UUID = r"[0-9a-fA-F]{8}-(?:[0-9a-fA-F]{4}-){3}[0-9a-fA-F]{12}"
# Digit runs glued to letters or hyphens (uuids, prefixed ids) are not phone numbers.
_PHONE_PATTERN = re.compile(r"(?<![\w-])(?!" + _UUID + r")\+?\d[\d\s\-()]{7,}\d(?![\w-])")
_EMAIL_PATTERN = re.compile(r"[\w.%+-]+@[\w.-]+\.[A-Za-z]{2,}")

_REDACTED = "[REDACTED]"

# Keys whose values are always masked regardless of content
SENSITIVE_KEYS = frozenset(
    {
        "first_name",
        "last_name",
        "customer_name",
        "email",
        "phone",
        "address",
        "id_number",
        "password",
        "note",
    }
)


def redact_string(value: str) -> str:
    """Mask phone numbers and e-mail addresses inside free text."""
    return _EMAIL_PATTERN.sub(_REDACTED, _PHONE_PATTERN.sub(_REDACTED, value))


def redact_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return redact_string(value)
    if isinstance(value, dict):
        return f"dict(keys={sorted(value.keys())})"
    if isinstance(value, (list, tuple, set)):
        return f"list(len={len(value)})"
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return f"<{type(value).__name__}>"


def safe_log_context(**kwargs: Any) -> dict[str, str]:
    """Build log fields; sensitive keys are masked, other values redacted."""
    return {
        k: (_REDACTED if k in SENSITIVE_KEYS and v else redact_value(v))
        for k, v in kwargs.items()
    }

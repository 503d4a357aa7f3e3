# app/backend/services/sanitize.py
"""
Cleaning of untrusted text fields.

sanitize_text_field: single-line values (task text, category, dates).
sanitize_textarea_field: multi-line values (description); newlines survive.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Any, Optional

_SCRIPT_STYLE_RE = re.compile(r"<(script|style)[^>]*?>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[a-zA-Z/!?][^>]*>?")
_OCTET_RE = re.compile(r"%[a-fA-F0-9]{2}")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_INLINE_WS_RE = re.compile(r"[ \t\f\v]+")
_ANY_WS_RE = re.compile(r"\s+")
_DATE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:[T ][0-9:.+\-Z]*)?$")

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off", ""}


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError("must be a string")


def _strip_markup(value: str) -> str:
    value = _SCRIPT_STYLE_RE.sub("", value)
    value = _TAG_RE.sub("", value)
    value = _OCTET_RE.sub("", value)
    return _CONTROL_RE.sub("", value)


def sanitize_text_field(value: Any) -> str:
    """Strip markup and collapse all whitespace (line breaks included) to single spaces."""
    cleaned = _strip_markup(_as_text(value))
    return _ANY_WS_RE.sub(" ", cleaned).strip()


def sanitize_textarea_field(value: Any) -> str:
    """Like sanitize_text_field but keeps line breaks."""
    cleaned = _strip_markup(_as_text(value)).replace("\r\n", "\n").replace("\r", "\n")
    lines = [_INLINE_WS_RE.sub(" ", line).strip() for line in cleaned.split("\n")]
    return "\n".join(lines).strip()


def normalize_due_date(value: Any) -> Optional[date]:
    """'' / None clear the date; ISO dates (or datetimes, truncated) are accepted."""
    if value is None:
        return None
    if isinstance(value, date):
        return value
    cleaned = sanitize_text_field(value)
    if not cleaned:
        return None
    match = _DATE_RE.match(cleaned)
    if not match:
        raise ValueError("due_date must be an ISO date (YYYY-MM-DD)")
    try:
        return date.fromisoformat(match.group(1))
    except ValueError:
        raise ValueError("due_date is not a valid calendar date")


def coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError("completed must be a boolean")

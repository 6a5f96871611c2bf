"""Shared parsing utilities for Plaid payloads.

Plaid's SDK returns ``date``/``datetime`` objects while stored JSON and
test fixtures carry ISO strings; these helpers accept both.
"""

import json
import logging
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation

logger = logging.getLogger(__name__)


def parse_iso_datetime(value) -> datetime | None:
    """Parse an ISO 8601 string (or date/datetime object) to a UTC-aware datetime.

    Handles ``Z`` suffixes, ``+0000`` offsets without a colon, and
    date-only strings.

    Returns:
        A timezone-aware UTC datetime, or None if the value cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    value_str = str(value)

    # "2024-01-15T10:30:00Z" -> "2024-01-15T10:30:00+00:00"
    if value_str.endswith("Z"):
        value_str = value_str[:-1] + "+00:00"

    # "...+0000" -> "...+00:00"
    if (
        len(value_str) >= 5
        and value_str[-5] in ("+", "-")
        and value_str[-4:].isdigit()
    ):
        value_str = value_str[:-2] + ":" + value_str[-2:]

    try:
        dt = datetime.fromisoformat(value_str)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt
    except (ValueError, TypeError):
        pass

    try:
        d = date.fromisoformat(str(value))
        return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
    except (ValueError, TypeError):
        return None


def parse_date(value) -> date | None:
    """Parse a date object or ``YYYY-MM-DD`` string; None on failure."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except (ValueError, TypeError):
        return None


def to_decimal(value) -> Decimal | None:
    """Convert a value to Decimal, returning None on failure."""
    if value is None:
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def load_json_object(value) -> dict | None:
    """Decode a JSON object stored as text.

    Dicts pass through. Anything that is not a JSON object (malformed
    text, lists, scalars) is treated as absent.
    """
    if value is None or value == "":
        return None
    if isinstance(value, dict):
        return value
    try:
        decoded = json.loads(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring malformed JSON blob: %.80r", value)
        return None
    return decoded if isinstance(decoded, dict) else None


def load_json_list(value) -> list | None:
    """Decode a JSON array stored as text; anything else is treated as absent."""
    if value is None or value == "":
        return None
    if isinstance(value, list):
        return value
    try:
        decoded = json.loads(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring malformed JSON blob: %.80r", value)
        return None
    return decoded if isinstance(decoded, list) else None


def dump_json(value) -> str | None:
    """Serialize a value to JSON text for storage (None stays None)."""
    if value is None:
        return None
    return json.dumps(value, default=str)

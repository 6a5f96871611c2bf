"""Column defaults shared by the ORM models."""

import uuid
from datetime import datetime, timezone


def generate_uuid() -> str:
    """Primary key default: a random UUID4 as a 36-char string."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Timestamp default for ``created_at``/``updated_at`` columns."""
    return datetime.now(timezone.utc)

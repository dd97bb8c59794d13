"""Datetime and identifier helpers shared by the adapter and the routes."""
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID


def utc_now() -> datetime:
    """Return the current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Convert a datetime to aware UTC.

    Naive datetimes are taken to be UTC already.

    Args:
        value: Datetime value or None

    Returns:
        Aware UTC datetime or None
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_uuid(value: Any) -> Optional[UUID]:
    """
    Parse a UUID from a vendor value, tolerating surrounding quotes.

    Args:
        value: UUID, string, or None

    Returns:
        UUID, or None when the value is empty or not a UUID
    """
    if value is None:
        return None
    if isinstance(value, UUID):
        return value
    text = str(value).strip().strip('"')
    if not text:
        return None
    try:
        return UUID(text)
    except ValueError:
        return None

from datetime import datetime, timezone
from typing import Any, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: Any) -> Optional[str]:
    """
    Converts a stored timestamp to an ISO-8601 string.
    MongoDB hands back naive datetimes that are UTC, so naive values get UTC attached.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    if isinstance(value, str):
        return value
    return None

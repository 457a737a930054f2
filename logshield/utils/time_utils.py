"""
Timestamp helpers shared by the adapters and the record model.
"""
from datetime import datetime
from typing import Optional

from dateutil import parser as dt


def now() -> datetime:
    """Current instant as a timezone-aware local datetime."""
    return datetime.now().astimezone()


def ensure_aware(value: datetime) -> datetime:
    """Naive datetimes are interpreted as local time."""
    return value.astimezone() if value.tzinfo is None else value


def check_local_range(value: datetime) -> datetime:
    """Raise OverflowError when the instant cannot be expressed in local time (dashboard buckets need it)."""
    value.astimezone()
    return value


def parse_timestamp(text: Optional[str]) -> Optional[datetime]:
    """Parse a free-form timestamp string. Returns None when it is not a usable time."""
    if not text or not text.strip():
        return None
    try:
        return check_local_range(ensure_aware(dt.parse(text.strip())))
    except (ValueError, OverflowError):
        return None

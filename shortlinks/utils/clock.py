from datetime import datetime, timezone
from typing import Callable

# Every timestamp in the service is naive UTC; day buckets are UTC dates.
Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(value: datetime) -> datetime:
    """Drop tzinfo after converting aware datetimes to UTC; naive ones are taken as UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)

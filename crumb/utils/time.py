import sys
from datetime import MAXYEAR, MINYEAR, datetime, timedelta, timezone
from typing import Optional

UTC = timezone.utc

MIN_DATETIME = datetime(MINYEAR, 1, 1, tzinfo=None)
MAX_DATETIME = datetime(MAXYEAR, 12, 31, 23, 59, 59, 999000, tzinfo=None)

EPOCH = datetime(1970, 1, 1, tzinfo=None)

ONE_MILLISECOND = timedelta(milliseconds=1)


def utcnow() -> datetime:
    if sys.version_info < (3, 12):
        return datetime.utcnow()
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """
    Returns the given datetime as naive UTC. Naive values are assumed to be UTC
    already.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def truncate_to_milliseconds(value: datetime) -> datetime:
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


def utcnow_milliseconds() -> datetime:
    return truncate_to_milliseconds(utcnow())


def datetime_to_milliseconds(value: datetime) -> int:
    """Returns the number of milliseconds elapsed since the Unix epoch."""
    return (to_naive_utc(value) - EPOCH) // ONE_MILLISECOND


def datetime_from_milliseconds(value: float) -> Optional[datetime]:
    """
    Returns a naive UTC datetime from Unix epoch milliseconds, or None if the value
    does not fit in the datetime range.
    """
    try:
        return EPOCH + timedelta(milliseconds=value)
    except (OverflowError, ValueError):
        return None

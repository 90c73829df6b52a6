"""
This module implements the cookie-date grammar of RFC 6265, and the ISO-8601
representation of dates used by serialized cookies.

https://www.rfc-editor.org/rfc/rfc6265.html#section-5.1.1
"""
import re
from datetime import datetime
from email.utils import format_datetime
from typing import Optional

from dateutil.parser import isoparse

from .utils.time import UTC, to_naive_utc

DATE_DELIMITERS = re.compile(r"[\x09\x20-\x2F\x3B-\x40\x5B-\x60\x7B-\x7E]")

# hms-time = time-field ":" time-field ":" time-field, only the last field may be
# followed by non-digit octets
TIME_RE = re.compile(r"([0-9]{1,2}):([0-9]{1,2}):([0-9]{1,2})(?:[^0-9:][^:]*)?")
DAY_OF_MONTH_RE = re.compile(r"([0-9]{1,2})(?![0-9])")
YEAR_RE = re.compile(r"([0-9]{2,4})(?![0-9])")

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parses a cookie-date using the algorithm described in RFC 6265 S5.1.1,
    returning a naive UTC datetime, or None if the value is not a valid cookie-date.

    The first token matching each of the time, day-of-month, month and year
    productions is used; later matching tokens are ignored.
    """
    if not value:
        return None

    hour = minute = second = None
    day_of_month = month = year = None

    for token in DATE_DELIMITERS.split(value):
        token = token.strip()
        if not token:
            continue

        if second is None:
            match = TIME_RE.fullmatch(token)
            if match:
                hour, minute, second = (int(part) for part in match.groups())
                continue

        if day_of_month is None:
            match = DAY_OF_MONTH_RE.match(token)
            if match:
                day_of_month = int(match.group(1))
                continue

        if month is None:
            month = MONTHS.get(token[:3].lower())
            if month is not None:
                continue

        if year is None:
            match = YEAR_RE.match(token)
            if match:
                year = int(match.group(1))
                if 70 <= year <= 99:
                    year += 1900
                elif 0 <= year <= 69:
                    year += 2000

    if (
        day_of_month is None
        or month is None
        or year is None
        or second is None
        or day_of_month < 1
        or day_of_month > 31
        or year < 1601
        or hour > 23
        or minute > 59
        or second > 59
    ):
        return None

    try:
        return datetime(year, month, day_of_month, hour, minute, second)
    except ValueError:
        # for example the 31st of February
        return None


def format_date(value: datetime) -> str:
    """
    Formats a datetime for the Expires attribute, for example:
    Tue, 19 Jan 2038 03:14:07 GMT.
    """
    return format_datetime(to_naive_utc(value).replace(tzinfo=UTC), usegmt=True)


def datetime_to_iso(value: datetime) -> str:
    return to_naive_utc(value).isoformat(timespec="milliseconds") + "Z"


def datetime_from_iso(value: str) -> Optional[datetime]:
    """
    Parses an ISO-8601 date, falling back to the cookie-date grammar for values like
    "Tue, 19 Jan 2038 03:14:07 GMT". Returns None for values that cannot be parsed.
    """
    try:
        return to_naive_utc(isoparse(value))
    except (ValueError, OverflowError):
        return parse_date(value)

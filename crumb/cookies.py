import itertools
import math
import re
import threading
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Union

from .dates import format_date, parse_date
from .domains import canonical_domain, get_public_suffix
from .exceptions import InvalidCookieAttribute, SpecialUseDomainError
from .logs import get_logger
from .utils.time import (
    MAX_DATETIME,
    MIN_DATETIME,
    datetime_from_milliseconds,
    datetime_to_milliseconds,
    to_naive_utc,
    utcnow,
    utcnow_milliseconds,
)

if TYPE_CHECKING:
    from .parser import ParseCookieOptions


logger = get_logger("cookies")

# RFC 6265 S4.1.1, note that it excludes \x3B ";"
COOKIE_OCTETS = re.compile(r"[\x21\x23-\x2B\x2D-\x3A\x3C-\x5B\x5D-\x7E]+")

# RFC 6265 S4.1.1 defines path-value as any CHAR except CTLs or ";"
PATH_VALUE = re.compile(r"[\x20-\x3A\x3C-\x7E]+")

# 2038-01-19T03:14:07Z, used to sort cookies without a creation time
MAX_TIME = 2147483647000


class Unbounded(Enum):
    """
    Represents dates and durations that cannot be expressed by a datetime or an
    integer: a cookie that never expires, or a Max-Age of negative infinity.
    """

    POSITIVE = "Infinity"
    NEGATIVE = "-Infinity"


INFINITY = Unbounded.POSITIVE
NEGATIVE_INFINITY = Unbounded.NEGATIVE

CookieDate = Union[datetime, Unbounded]
CookieMaxAge = Union[int, Unbounded]


class CookieSameSiteMode(str, Enum):
    STRICT = "strict"
    LAX = "lax"
    NONE = "none"


SAME_SITE_LEVEL = {
    CookieSameSiteMode.STRICT: 3,
    CookieSameSiteMode.LAX: 2,
    CookieSameSiteMode.NONE: 1,
}

SAME_SITE_CANONICAL = {
    "strict": "Strict",
    "lax": "Lax",
}

# the order in which the RFC has them
COOKIE_DEFAULTS: Dict[str, Any] = {
    "key": "",
    "value": "",
    "expires": INFINITY,
    "max_age": None,
    "domain": None,
    "path": None,
    "secure": False,
    "http_only": False,
    "extensions": None,
    # set by a cookie jar:
    "host_only": None,
    "path_is_default": None,
    "creation": None,
    "last_accessed": None,
    "same_site": None,
}


_creation_counter = itertools.count(1)
_creation_lock = threading.Lock()


def _next_creation_index() -> int:
    with _creation_lock:
        return next(_creation_counter)


def _same_site_text(value: str) -> str:
    if isinstance(value, CookieSameSiteMode):
        return value.value
    return value


def same_site_mode(value: Optional[str]) -> Optional[str]:
    """
    Returns the CookieSameSiteMode matching exactly the given value, or the value
    itself if it does not match any mode.
    """
    if value is None or isinstance(value, CookieSameSiteMode):
        return value
    try:
        return CookieSameSiteMode(value)
    except ValueError:
        return value


def _date_attribute(name: str, value: Any) -> Optional[CookieDate]:
    if value is None or value is INFINITY:
        return value
    if isinstance(value, datetime):
        return to_naive_utc(value)
    raise InvalidCookieAttribute(name, value)


class Cookie:
    """
    An HTTP cookie, as defined by RFC 6265 and the SameSite attribute of
    RFC 6265bis.

    Arguments left to None fall back to the values of COOKIE_DEFAULTS, except the
    creation time which defaults to the current UTC time.
    """

    def __init__(
        self,
        key: Optional[str] = None,
        value: Optional[str] = None,
        *,
        expires: Union[CookieDate, str, None] = None,
        max_age: Union[CookieMaxAge, float, None] = None,
        domain: Optional[str] = None,
        path: Optional[str] = None,
        secure: Optional[bool] = None,
        http_only: Optional[bool] = None,
        extensions: Optional[Iterable[str]] = None,
        creation: Optional[CookieDate] = None,
        host_only: Optional[bool] = None,
        path_is_default: Optional[bool] = None,
        last_accessed: Optional[CookieDate] = None,
        same_site: Optional[str] = None,
    ):
        self.key: str = COOKIE_DEFAULTS["key"] if key is None else key
        self.value: str = COOKIE_DEFAULTS["value"] if value is None else value
        self.expires: Union[CookieDate, str, None] = COOKIE_DEFAULTS["expires"]
        if expires is not None:
            self.set_expires(expires)
        self.max_age: Optional[CookieMaxAge] = COOKIE_DEFAULTS["max_age"]
        if max_age is not None:
            self.set_max_age(max_age)
        self.domain: Optional[str] = domain
        self.path: Optional[str] = path
        self.secure: bool = COOKIE_DEFAULTS["secure"] if secure is None else secure
        self.http_only: bool = (
            COOKIE_DEFAULTS["http_only"] if http_only is None else http_only
        )
        self.extensions: Optional[List[str]] = (
            None if extensions is None else list(extensions)
        )
        self.host_only: Optional[bool] = host_only
        self.path_is_default: Optional[bool] = path_is_default
        self.creation: Optional[CookieDate] = (
            utcnow_milliseconds()
            if creation is None
            else _date_attribute("creation", creation)
        )
        self.last_accessed: Optional[CookieDate] = _date_attribute(
            "last_accessed", last_accessed
        )
        self.same_site: Optional[str] = same_site_mode(same_site)

        # used to break creation ties in cookie_compare
        self._creation_index = _next_creation_index()

    @property
    def creation_index(self) -> int:
        return self._creation_index

    @classmethod
    def parse(
        cls,
        value: str,
        options: Optional["ParseCookieOptions"] = None,
        *,
        loose: Optional[bool] = None,
    ) -> Optional["Cookie"]:
        """
        Parses a Set-Cookie header value, returning None if the value is not a valid
        cookie. A Cookie header with many cookies must be split by ";" before
        parsing each of its parts.
        """
        from .parser import parse

        return parse(value, options, loose=loose)

    @classmethod
    def from_json(cls, value: Any) -> Optional["Cookie"]:
        """
        Restores a cookie from the output of to_json, either as JSON text or as an
        already decoded dictionary.
        """
        from .serialization import from_json

        return from_json(value)

    def to_json(self) -> Dict[str, Any]:
        from .serialization import to_json

        return to_json(self)

    def clone(self) -> "Cookie":
        """
        Returns a deep copy of this cookie, obtained through its JSON representation.
        """
        from .serialization import from_mapping, to_json

        return from_mapping(to_json(self))

    def set_expires(self, value: Union[datetime, str, Unbounded]) -> None:
        """
        Sets the Expires attribute. Strings are parsed as cookie-dates; a string
        that cannot be parsed sets the cookie to never expire.
        """
        if isinstance(value, str):
            self.expires = parse_date(value) or INFINITY
        elif value is INFINITY or isinstance(value, datetime):
            self.expires = _date_attribute("expires", value)
        else:
            raise InvalidCookieAttribute("expires", value)

    def set_max_age(self, value: Union[int, float, Unbounded]) -> None:
        """
        Sets the Max-Age attribute, in seconds. Infinite values are stored as the
        INFINITY and NEGATIVE_INFINITY sentinels.
        """
        if isinstance(value, Unbounded):
            self.max_age = value
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidCookieAttribute("max_age", value)
        elif value == math.inf:
            self.max_age = INFINITY
        elif value == -math.inf:
            self.max_age = NEGATIVE_INFINITY
        elif isinstance(value, float) and not value.is_integer():
            # this includes NaN
            raise InvalidCookieAttribute("max_age", value)
        else:
            self.max_age = int(value)

    def cookie_string(self) -> str:
        """
        Returns the value for a Cookie header: the key and value joined by "=", or
        only the value for keyless cookies.
        """
        value = self.value or ""
        if self.key:
            return f"{self.key}={value}"
        return value

    def to_string(self) -> str:
        """Returns the value for a Set-Cookie header."""
        parts = [self.cookie_string()]

        if isinstance(self.expires, datetime):
            parts.append(f"Expires={format_date(self.expires)}")

        if self.max_age is not None and self.max_age is not INFINITY:
            if isinstance(self.max_age, Unbounded):
                parts.append(f"Max-Age={self.max_age.value}")
            else:
                parts.append(f"Max-Age={self.max_age}")

        if self.domain and not self.host_only:
            parts.append(f"Domain={self.domain}")

        if self.path:
            parts.append(f"Path={self.path}")

        if self.secure:
            parts.append("Secure")

        if self.http_only:
            parts.append("HttpOnly")

        if self.same_site:
            same_site = _same_site_text(self.same_site)
            if same_site != "none":
                same_site = SAME_SITE_CANONICAL.get(same_site.lower(), same_site)
                parts.append(f"SameSite={same_site}")

        if self.extensions:
            parts.extend(self.extensions)

        return "; ".join(parts)

    def __str__(self) -> str:
        return self.to_string()

    def ttl(self, now: Optional[datetime] = None) -> float:
        """
        Returns the time to live of this cookie in milliseconds: math.inf for cookies
        without an explicit expiry, and 0 for expired cookies.

        Max-Age has precedence over Expires (RFC 6265 S4.1.2.2).
        """
        max_age = self.max_age
        if isinstance(max_age, int):
            return 0 if max_age <= 0 else max_age * 1000

        expires = self.expires
        if expires is INFINITY:
            return math.inf

        if isinstance(expires, datetime):
            return datetime_to_milliseconds(expires) - datetime_to_milliseconds(
                now or utcnow()
            )
        return 0

    def expiry_time(self, now: Optional[datetime] = None) -> Optional[float]:
        """
        Returns the Unix epoch milliseconds when this cookie expires, math.inf if it
        never expires, or None if it has no expiry.

        Max-Age is offset from the given time, or from the last access time of the
        cookie, or from the current time.
        """
        if self.max_age is not None:
            relative_to = now or self.last_accessed or utcnow()
            if relative_to is INFINITY:
                return math.inf
            if self.max_age is INFINITY:
                return math.inf
            if isinstance(self.max_age, int) and self.max_age > 0:
                return datetime_to_milliseconds(relative_to) + self.max_age * 1000
            return -math.inf

        if self.expires is INFINITY:
            return math.inf

        if isinstance(self.expires, datetime):
            return datetime_to_milliseconds(self.expires)
        return None

    def expiry_date(self, now: Optional[datetime] = None) -> Optional[datetime]:
        """
        Returns the expiry time of this cookie as a naive UTC datetime; cookies that
        never expire return MAX_DATETIME, expired cookies MIN_DATETIME.
        """
        expiry_time = self.expiry_time(now)
        if expiry_time is None:
            return None
        if expiry_time == math.inf:
            return MAX_DATETIME
        if expiry_time == -math.inf:
            return MIN_DATETIME
        value = datetime_from_milliseconds(expiry_time)
        if value is None:
            return MAX_DATETIME if expiry_time > 0 else MIN_DATETIME
        return value

    def is_persistent(self) -> bool:
        return self.max_age is not None or self.expires is not INFINITY

    def canonicalized_domain(self) -> Optional[str]:
        return canonical_domain(self.domain)

    def cdomain(self) -> Optional[str]:
        """Alias for canonicalized_domain."""
        return canonical_domain(self.domain)

    def _invalid(self, reason: str) -> bool:
        logger.debug(f"Cookie {self.key!r} is not valid: {reason}")
        return False

    def validate(self) -> bool:
        """
        Returns a value indicating whether the attributes of this cookie are
        semantically valid, for example to lint Set-Cookie headers before sending
        them. The checks are not comprehensive.
        """
        if not self.value or not COOKIE_OCTETS.fullmatch(self.value):
            return self._invalid("the value contains characters not allowed")

        expires = self.expires
        if (
            expires is not INFINITY
            and not isinstance(expires, datetime)
            and not (isinstance(expires, str) and parse_date(expires))
        ):
            return self._invalid("Expires is not a date")

        max_age = self.max_age
        if (
            max_age is not None
            and max_age is not INFINITY
            and (max_age is NEGATIVE_INFINITY or max_age <= 0)
        ):
            # Max-Age = non-zero-digit *DIGIT
            return self._invalid("Max-Age is not a positive number")

        if self.path is not None and not PATH_VALUE.fullmatch(self.path):
            return self._invalid("the path contains characters not allowed")

        domain = self.cdomain()
        if domain:
            if domain.endswith("."):
                # S4.1.2.3
                return self._invalid("the domain ends with a dot")
            try:
                suffix = get_public_suffix(domain)
            except SpecialUseDomainError as special_use_error:
                return self._invalid(str(special_use_error))
            if suffix is None:
                return self._invalid("the domain is a public suffix")
        return True

    def _fields(self):
        return tuple(getattr(self, name) for name in COOKIE_DEFAULTS)

    def __eq__(self, other):
        if isinstance(other, Cookie):
            return self._fields() == other._fields()
        return NotImplemented

    def __repr__(self):
        now = utcnow()
        host_only = "?" if self.host_only is None else str(self.host_only)
        return (
            f'Cookie="{self.to_string()}; hostOnly={host_only}; '
            f"aAge={_age(now, self.last_accessed)}; cAge={_age(now, self.creation)}\""
        )


def _age(now: datetime, value: Optional[CookieDate]) -> str:
    if isinstance(value, datetime):
        return f"{datetime_to_milliseconds(now) - datetime_to_milliseconds(value)}ms"
    return "?"


def _creation_time(cookie: Cookie) -> int:
    if isinstance(cookie.creation, datetime):
        return datetime_to_milliseconds(cookie.creation)
    return MAX_TIME


def cookie_sort_key(cookie: Cookie):
    """
    Returns a key to sort cookies in the order recommended by RFC 6265 S5.4 step 2:
    longer paths first, then earlier creation times, then by creation index.
    """
    path_length = len(cookie.path) if cookie.path else 0
    return (-path_length, _creation_time(cookie), cookie.creation_index)


def cookie_compare(a: Cookie, b: Cookie) -> int:
    """
    Compares two cookies using the same ordering of cookie_sort_key, returning a
    negative number if a comes first, a positive number if b comes first.
    """
    a_key = cookie_sort_key(a)
    b_key = cookie_sort_key(b)
    for a_item, b_item in zip(a_key, b_key):
        if a_item != b_item:
            return a_item - b_item
    return 0

"""
This module implements parsing of Set-Cookie header values, following the
algorithm of RFC 6265 S5.2 and the SameSite attribute of RFC 6265bis.

https://www.rfc-editor.org/rfc/rfc6265.html#section-5.2
"""
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import AnyStr, Callable, Dict, Optional

from .cookies import Cookie, CookieSameSiteMode
from .dates import parse_date
from .exceptions import InvalidCookie
from .logs import get_logger
from .utils import ensure_str

logger = get_logger("parser")

CONTROL_CHARS = re.compile(r"[\x00-\x1F]")

# whitespace trimmed around names, values and attributes: unlike str.strip() it
# keeps \x1C-\x1F, which are control characters
WHITESPACE = (
    " \t\n\v\f\r\xa0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007"
    "\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)

MAX_AGE_RE = re.compile(r"-?[0-9]+")

# longer values do not fit a double and are read as unbounded
MAX_AGE_DIGITS = 309

# '\r', '\n' and '\0' are treated as terminators in "relaxed" mode, like Chromium
# does in net/cookies/parsed_cookie.cc
TERMINATORS = ("\n", "\r", "\0")


@dataclass
class ParseCookieOptions:
    """
    Options for parsing cookies. When loose is True, keyless cookies like "=abc",
    which are not RFC compliant, are parsed too.
    """

    loose: bool = False


class Directive(Enum):
    EXPIRES = "expires"
    MAX_AGE = "max-age"
    DOMAIN = "domain"
    PATH = "path"
    SECURE = "secure"
    HTTP_ONLY = "httponly"
    SAME_SITE = "samesite"
    EXTENSION = None

    @classmethod
    def _missing_(cls, value):
        return cls.EXTENSION


def trim_terminator(value: str) -> str:
    for terminator in TERMINATORS:
        index = value.find(terminator)
        if index != -1:
            value = value[:index]
    return value


def parse_cookie_pair(value: str, loose: bool) -> Optional[Cookie]:
    """
    Parses the cookie-pair portion of a Set-Cookie header value (before the first
    ";"), returning a Cookie with only key and value set, or None.
    """
    value = trim_terminator(value)

    first_eq = value.find("=")
    if loose:
        if first_eq == 0:
            # '=' is immediately at start, there might be another one to split on
            value = value[1:]
            first_eq = value.find("=")
    elif first_eq <= 0:
        # a non-empty cookie-name is required
        return None

    if first_eq <= 0:
        name = ""
        cookie_value = value.strip(WHITESPACE)
    else:
        name = value[:first_eq].strip(WHITESPACE)
        cookie_value = value[first_eq + 1 :].strip(WHITESPACE)

    if CONTROL_CHARS.search(name) or CONTROL_CHARS.search(cookie_value):
        return None

    return Cookie(name, cookie_value)


def _set_expires(cookie: Cookie, value: Optional[str]) -> None:
    if not value:
        return
    expires = parse_date(value)
    if expires is None:
        # "If the attribute-value failed to parse as a cookie date, ignore the
        # cookie-av."
        logger.debug(f"Ignoring the Expires attribute, invalid date: {value!r}")
        return
    cookie.expires = expires


def _set_max_age(cookie: Cookie, value: Optional[str]) -> None:
    if not value:
        return
    # "If the first character of the attribute-value is not a DIGIT or a "-"
    # character ...[or]... If the remainder of attribute-value contains a
    # non-DIGIT character, ignore the cookie-av."
    if not MAX_AGE_RE.fullmatch(value):
        logger.debug(f"Ignoring the Max-Age attribute, invalid value: {value!r}")
        return

    negative = value.startswith("-")
    digits = value.lstrip("-").lstrip("0")
    if len(digits) > MAX_AGE_DIGITS:
        cookie.set_max_age(-math.inf if negative else math.inf)
        return

    max_age = int(digits) if digits else 0
    cookie.set_max_age(-max_age if negative else max_age)


def _set_domain(cookie: Cookie, value: Optional[str]) -> None:
    # "If the attribute-value is empty, the behavior is undefined. However, the
    # user agent SHOULD ignore the cookie-av entirely."
    if not value:
        return
    domain = value.strip(WHITESPACE)
    if domain.startswith("."):
        domain = domain[1:]
    if not domain:
        logger.debug("Ignoring an empty Domain attribute")
        return
    cookie.domain = domain.lower()


def _set_path(cookie: Cookie, value: Optional[str]) -> None:
    # None stands for the default-path, which depends on the request URL
    cookie.path = value if value and value.startswith("/") else None


def _set_secure(cookie: Cookie, value: Optional[str]) -> None:
    cookie.secure = True


def _set_http_only(cookie: Cookie, value: Optional[str]) -> None:
    cookie.http_only = True


def _set_same_site(cookie: Cookie, value: Optional[str]) -> None:
    try:
        cookie.same_site = CookieSameSiteMode(value.lower() if value else "")
    except ValueError:
        cookie.same_site = None


DirectiveHandler = Callable[[Cookie, Optional[str]], None]

DIRECTIVE_HANDLERS: Dict[Directive, DirectiveHandler] = {
    Directive.EXPIRES: _set_expires,
    Directive.MAX_AGE: _set_max_age,
    Directive.DOMAIN: _set_domain,
    Directive.PATH: _set_path,
    Directive.SECURE: _set_secure,
    Directive.HTTP_ONLY: _set_http_only,
    Directive.SAME_SITE: _set_same_site,
}


def _parse_attributes(cookie: Cookie, unparsed: str) -> None:
    # The RFC says to use the attribute-value of the last attribute in the
    # cookie-attribute-list, so later attributes overwrite earlier ones.
    for item in unparsed.split(";"):
        attribute = item.strip(WHITESPACE)
        if not attribute:
            # happens with ";;"
            continue

        name, separator, value = attribute.partition("=")
        attribute_value = value.strip(WHITESPACE) if separator else None

        directive = Directive(name.strip(WHITESPACE).lower())

        if directive is Directive.EXTENSION:
            if cookie.extensions is None:
                cookie.extensions = []
            cookie.extensions.append(attribute)
        else:
            DIRECTIVE_HANDLERS[directive](cookie, attribute_value)


def parse(
    value: str,
    options: Optional[ParseCookieOptions] = None,
    *,
    loose: Optional[bool] = None,
) -> Optional[Cookie]:
    """
    Parses a Set-Cookie header value into a Cookie, returning None if the value is
    not a valid cookie. Invalid attributes are ignored, as required by the RFC.
    """
    if not isinstance(value, str):
        return None

    value = value.strip(WHITESPACE)
    if not value:
        return None

    if loose is None:
        loose = options.loose if options is not None else False

    pair, separator, unparsed = value.partition(";")

    cookie = parse_cookie_pair(pair, loose)
    if cookie is None:
        logger.debug(f"Invalid cookie-pair: {pair!r}")
        return None

    if separator:
        unparsed = unparsed.strip(WHITESPACE)
        if unparsed:
            _parse_attributes(cookie, unparsed)

    return cookie


def parse_cookie(value: AnyStr, loose: bool = False) -> Cookie:
    """
    Parses a Set-Cookie header value, as str or bytes, into a Cookie, raising
    InvalidCookie if the value is not a valid cookie.
    """
    text = ensure_str(value)
    cookie = parse(text, loose=loose)
    if cookie is None:
        raise InvalidCookie(text)
    return cookie

from typing import Iterable

from .cookies import Cookie


def write_set_cookie(cookie: Cookie) -> bytes:
    """Returns the value of a Set-Cookie header for the given cookie."""
    return cookie.to_string().encode()


def write_cookie_header(cookies: Iterable[Cookie]) -> bytes:
    """Returns the value of a Cookie header sending the given cookies."""
    return "; ".join(cookie.cookie_string() for cookie in cookies).encode()

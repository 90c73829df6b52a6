"""
Root module of the library. This module re-exports the most commonly used types
to reduce the verbosity of the imports statements.
"""

__version__ = "1.0.0"

from .cookies import COOKIE_DEFAULTS as COOKIE_DEFAULTS
from .cookies import INFINITY as INFINITY
from .cookies import NEGATIVE_INFINITY as NEGATIVE_INFINITY
from .cookies import Cookie as Cookie
from .cookies import CookieSameSiteMode as CookieSameSiteMode
from .cookies import Unbounded as Unbounded
from .cookies import cookie_compare as cookie_compare
from .cookies import cookie_sort_key as cookie_sort_key
from .dates import format_date as format_date
from .dates import parse_date as parse_date
from .domains import canonical_domain as canonical_domain
from .domains import get_public_suffix as get_public_suffix
from .exceptions import CookieError as CookieError
from .exceptions import InvalidCookie as InvalidCookie
from .exceptions import InvalidCookieAttribute as InvalidCookieAttribute
from .exceptions import SpecialUseDomainError as SpecialUseDomainError
from .parser import ParseCookieOptions as ParseCookieOptions
from .parser import parse as parse
from .parser import parse_cookie as parse_cookie
from .serialization import from_json as from_json
from .serialization import to_json as to_json

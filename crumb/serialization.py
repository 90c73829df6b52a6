"""
This module implements the JSON representation of cookies, used to store them.

Only the properties listed in SERIALIZABLE_PROPERTIES are serialized; each of them
is bound to a codec that checks the shape of values in both directions. Values that
do not fit their slot are dropped, rather than causing errors.
"""
import math
from datetime import datetime
from typing import Any, AnyStr, Callable, Dict, List, Mapping, NamedTuple, Optional

from .cookies import (
    COOKIE_DEFAULTS,
    INFINITY,
    NEGATIVE_INFINITY,
    Cookie,
    CookieSameSiteMode,
    Unbounded,
    same_site_mode,
)
from .dates import datetime_from_iso, datetime_to_iso
from .logs import get_logger
from .settings.json import json_settings
from .utils.time import datetime_from_milliseconds, to_naive_utc

logger = get_logger("serialization")


class _Drop:
    def __repr__(self):
        return "<drop>"


# returned by codecs for values that do not fit their slot
DROP = _Drop()


def _string(value: Any) -> Any:
    if isinstance(value, CookieSameSiteMode):
        return value.value
    if isinstance(value, str):
        return value
    return DROP


def _nullable_string(value: Any) -> Any:
    if value is None:
        return None
    return _string(value)


def _flag(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    return DROP


def _nullable_flag(value: Any) -> Any:
    if value is None:
        return None
    return _flag(value)


def _decode_date(value: Any) -> Any:
    if value is None or value is INFINITY:
        return value
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, bool):
        return DROP
    if isinstance(value, (int, float)):
        # Unix epoch milliseconds
        return datetime_from_milliseconds(value) or DROP
    if isinstance(value, str):
        if value == INFINITY.value:
            return INFINITY
        return datetime_from_iso(value) or DROP
    return DROP


def _encode_date(value: Any) -> Any:
    value = _decode_date(value)
    if value is INFINITY:
        return INFINITY.value
    if isinstance(value, datetime):
        return datetime_to_iso(value)
    return value


def _decode_max_age(value: Any) -> Any:
    if isinstance(value, Unbounded):
        return value
    if isinstance(value, bool):
        return DROP
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value == math.inf:
            return INFINITY
        if value == -math.inf:
            return NEGATIVE_INFINITY
        if value.is_integer():
            return int(value)
        return DROP
    if value == INFINITY.value:
        return INFINITY
    if value == NEGATIVE_INFINITY.value:
        return NEGATIVE_INFINITY
    return DROP


def _encode_max_age(value: Any) -> Any:
    value = _decode_max_age(value)
    if isinstance(value, Unbounded):
        return value.value
    return value


def _encode_extensions(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return list(value)
    return DROP


def _decode_extensions(value: Any) -> Any:
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    return DROP


def _decode_same_site(value: Any) -> Any:
    value = _string(value)
    if value is DROP:
        return DROP
    return same_site_mode(value)


Codec = Callable[[Any], Any]


class SerializableProperty(NamedTuple):
    name: str
    attribute: str
    encode: Codec
    decode: Codec


SERIALIZABLE_PROPERTIES: List[SerializableProperty] = [
    SerializableProperty("key", "key", _string, _string),
    SerializableProperty("value", "value", _string, _string),
    SerializableProperty("expires", "expires", _encode_date, _decode_date),
    SerializableProperty("maxAge", "max_age", _encode_max_age, _decode_max_age),
    SerializableProperty("domain", "domain", _nullable_string, _nullable_string),
    SerializableProperty("path", "path", _nullable_string, _nullable_string),
    SerializableProperty("secure", "secure", _flag, _flag),
    SerializableProperty("httpOnly", "http_only", _flag, _flag),
    SerializableProperty(
        "extensions", "extensions", _encode_extensions, _decode_extensions
    ),
    SerializableProperty("hostOnly", "host_only", _nullable_flag, _nullable_flag),
    SerializableProperty(
        "pathIsDefault", "path_is_default", _nullable_flag, _nullable_flag
    ),
    SerializableProperty("creation", "creation", _encode_date, _decode_date),
    SerializableProperty("lastAccessed", "last_accessed", _encode_date, _decode_date),
    SerializableProperty("sameSite", "same_site", _string, _decode_same_site),
]


def to_json(cookie: Cookie) -> Dict[str, Any]:
    """
    Returns a dictionary that can be serialized to JSON. Properties having their
    default value are omitted; dates are represented in ISO-8601 format.
    """
    data: Dict[str, Any] = {}

    for prop in SERIALIZABLE_PROPERTIES:
        value = getattr(cookie, prop.attribute)

        if value == COOKIE_DEFAULTS[prop.attribute]:
            continue

        encoded = prop.encode(value)
        if encoded is not DROP:
            data[prop.name] = encoded

    return data


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, bytes)):
        return not value.strip()
    return False


def from_json(value: Any) -> Optional[Cookie]:
    """
    Restores a cookie from JSON text or from an already decoded dictionary,
    returning None if the value is empty or not valid JSON.
    """
    if _is_empty(value):
        return None

    if isinstance(value, (str, bytes)):
        try:
            data = json_settings.loads(value)
        except ValueError as decode_error:
            logger.debug(f"Cannot restore a cookie from invalid JSON: {decode_error}")
            return None
    else:
        data = value

    if not isinstance(data, Mapping):
        logger.debug(
            f"Cannot restore a cookie from a value of type {type(data).__name__}"
        )
        return None

    return from_mapping(data)


def from_mapping(data: Mapping[str, Any]) -> Cookie:
    """
    Restores a cookie from a decoded JSON object. Unknown keys, and values that
    do not fit their property, are ignored.
    """
    cookie = Cookie()

    for prop in SERIALIZABLE_PROPERTIES:
        if prop.name not in data:
            continue

        decoded = prop.decode(data[prop.name])
        if decoded is DROP or decoded == COOKIE_DEFAULTS[prop.attribute]:
            continue

        setattr(cookie, prop.attribute, decoded)

    return cookie


def dumps(cookie: Cookie, pretty: bool = False) -> str:
    """Returns the JSON text of a cookie."""
    if pretty:
        return json_settings.pretty_dumps(to_json(cookie))
    return json_settings.dumps(to_json(cookie))


def loads(value: AnyStr) -> Optional[Cookie]:
    return from_json(value)

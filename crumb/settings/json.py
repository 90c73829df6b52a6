import json
from typing import Any, AnyStr, Callable

from essentials.json import dumps

from ..utils import ensure_str


def default_json_dumps(obj):
    return dumps(obj, separators=(",", ":"))


def default_pretty_json_dumps(obj):
    return dumps(obj, indent=4)


class JSONSettings:
    """
    Configures the functions used to read and write the JSON text of serialized
    cookies. Loaders always receive text: bytes are decoded as UTF-8 first.
    """

    def __init__(self):
        self._loads: Callable[[str], Any] = json.loads
        self._dumps: Callable[[Any], str] = default_json_dumps
        self._pretty_dumps: Callable[[Any], str] = default_pretty_json_dumps

    def use(
        self,
        loads: Callable[[str], Any] = json.loads,
        dumps: Callable[[Any], str] = default_json_dumps,
        pretty_dumps: Callable[[Any], str] = default_pretty_json_dumps,
    ):
        self._loads = loads
        self._dumps = dumps
        self._pretty_dumps = pretty_dumps

    def loads(self, text: AnyStr) -> Any:
        return self._loads(ensure_str(text))

    def dumps(self, obj: Any) -> str:
        return self._dumps(obj)

    def pretty_dumps(self, obj: Any) -> str:
        return self._pretty_dumps(obj)


json_settings = JSONSettings()

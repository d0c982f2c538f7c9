"""
Dynamic JSON values returned by the API.

A decoded response is one of three variants: ``JsonMap`` (an ordered JSON
object), ``JsonList`` (a JSON array) or ``JsonScalar`` (string, number,
boolean or null at the top level). Callers ask for a ``Shape`` and get a
``DecodeError`` when the payload is something else.
"""
import json
from enum import Enum
from typing import Any, List, Tuple, Union

from .exceptions import DecodeError


class Shape(str, Enum):
    MAP = "map"
    LIST = "list"
    SCALAR = "scalar"
    ANY = "any"


class JsonMap(dict):
    """JSON object; keeps the key order of the payload."""

    def get_path(self, path: str, default: Any = None) -> Any:
        """Look up a nested value with a slash separated path, e.g. ``user/screen_name``.

        Numeric segments index into lists.
        """
        node: Any = self
        for part in path.strip("/").split("/"):
            if isinstance(node, dict) and part in node:
                node = node[part]
            elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
                node = node[int(part)]
            else:
                return default
        return node


class JsonList(list):
    """JSON array."""


class JsonScalar:
    """A top-level JSON string, number, boolean or null."""

    __slots__ = ("value",)

    def __init__(self, value: Union[str, int, float, bool, None]):
        self.value = value

    def __eq__(self, other):
        if isinstance(other, JsonScalar):
            return self.value == other.value
        return NotImplemented

    def __hash__(self):
        return hash(self.value)

    def __repr__(self):
        return f"JsonScalar({self.value!r})"


JsonValue = Union[JsonMap, JsonList, JsonScalar]


def _object_hook(pairs: List[Tuple[str, Any]]) -> JsonMap:
    return JsonMap((key, _wrap_lists(value)) for key, value in pairs)


def _wrap_lists(value: Any) -> Any:
    if isinstance(value, list) and not isinstance(value, JsonList):
        return JsonList(_wrap_lists(item) for item in value)
    return value


def _variant(value: Any) -> JsonValue:
    if isinstance(value, JsonMap):
        return value
    if isinstance(value, list):
        return _wrap_lists(value)
    return JsonScalar(value)


_SHAPE_TYPES = {
    Shape.MAP: JsonMap,
    Shape.LIST: JsonList,
    Shape.SCALAR: JsonScalar,
}


def decode(payload: Union[str, bytes], shape: Shape = Shape.ANY) -> JsonValue:
    """
    Decode a JSON document into a dynamic value of the requested shape.

    Args:
        payload: Raw response body
        shape: Expected top-level variant; Shape.ANY accepts all three

    Returns:
        JsonMap, JsonList or JsonScalar

    Raises:
        DecodeError: If the payload is not JSON or has another shape
    """
    try:
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        raw = json.loads(payload, object_pairs_hook=_object_hook)
    except (UnicodeDecodeError, ValueError) as exc:
        raise DecodeError(f"Response is not valid JSON: {exc}") from exc

    value = _variant(raw)
    shape = Shape(shape)
    if shape is not Shape.ANY and not isinstance(value, _SHAPE_TYPES[shape]):
        raise DecodeError(
            f"Expected a JSON {shape.value} but got {type(value).__name__}"
        )
    return value

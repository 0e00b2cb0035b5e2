"""Per-element encoding rules for Tree branches and FeedTree feeds.

The two containers differ only in how they treat elements:

- A Tree writes each element in the shape of the target form (keyed for
  ``json``, positional for ``jsonc``/``msg``) and can only read back the
  closed set of built-in tags.
- A FeedTree always writes the keyed shape, whatever the form, so every
  registered Serializable can be rebuilt with ``from_json_value``.
"""

from typing import Any, Mapping, Optional, Type

from constants import (
    FORMAT_JSON, FORMAT_JSONC, FORMAT_MSG, SCALAR_TAGS, TAG_BIN, TAG_POINT, TAG_POINT_BIN,
    TREE_DECODABLE_TAGS,
)
from errors import MalformedPayloadError, UnsupportedReadTypeError
from values.bins import Bin, PointBin
from values.contract import Serializable, decode_scalar, lookup_type
from values.point import Point

TypeMap = Optional[Mapping[str, Type[Serializable]]]

# Closed set of composite classes a Tree rebuilds; the registry is not consulted
_TREE_CLASSES = {TAG_BIN: Bin, TAG_POINT_BIN: PointBin, TAG_POINT: Point}

# Errors a user-defined from_json_value may raise on a bad shape
_SHAPE_ERRORS = (KeyError, IndexError, TypeError, ValueError, AttributeError)


def _encode_shaped(value: Any, fmt: str) -> Any:
    if fmt == FORMAT_JSON:
        return value.to_json_value()
    if fmt == FORMAT_JSONC:
        return value.to_jsonc_value()
    if fmt == FORMAT_MSG:
        return value.to_msg_value()
    raise ValueError(f"Unknown format: {fmt}")


def _rebuild(cls: Type[Serializable], obj: Any, series: str, compact: bool) -> Serializable:
    try:
        if compact:
            return cls.from_jsonc_value(obj)
        return cls.from_json_value(obj)
    except MalformedPayloadError:
        raise
    except _SHAPE_ERRORS as e:
        raise MalformedPayloadError(
            f"Could not rebuild {cls.__name__} in '{series}' from {obj!r}: {e}"
        ) from e


class TreeElements:
    """Element rules for Tree branches."""

    container = "Tree"

    def encode(self, value: Any, type_tag: str, fmt: str) -> Any:
        if type_tag in SCALAR_TAGS:
            return value
        return _encode_shaped(value, fmt)

    def check(self, type_tag: str, series: str, types: TypeMap = None) -> None:
        """Reject tags outside the closed, tree-decodable set."""
        if type_tag not in TREE_DECODABLE_TAGS:
            raise UnsupportedReadTypeError(type_tag, series, self.container)

    def decode(self, obj: Any, type_tag: str, fmt: str, series: str, types: TypeMap = None) -> Any:
        if type_tag in SCALAR_TAGS:
            return decode_scalar(obj, type_tag)
        return _rebuild(_TREE_CLASSES[type_tag], obj, series, compact=fmt != FORMAT_JSON)


class FeedElements:
    """Element rules for FeedTree feeds."""

    container = "FeedTree"

    def encode(self, value: Any, type_tag: str, fmt: str) -> Any:
        if type_tag in SCALAR_TAGS:
            return value
        return value.to_json_value()

    def check(self, type_tag: str, series: str, types: TypeMap = None) -> None:
        """Reject tags with no registered class to rebuild them."""
        if type_tag not in SCALAR_TAGS and lookup_type(type_tag, types) is None:
            raise UnsupportedReadTypeError(type_tag, series, self.container)

    def decode(self, obj: Any, type_tag: str, fmt: str, series: str, types: TypeMap = None) -> Any:
        if type_tag in SCALAR_TAGS:
            return decode_scalar(obj, type_tag)
        return _rebuild(lookup_type(type_tag, types), obj, series, compact=False)


TREE_ELEMENTS = TreeElements()
FEED_ELEMENTS = FeedElements()

"""Logical layout shared by the three payload encodings.

Every payload holds the same tree: a name, a list of fields and a list of
named, type-tagged series (Tree branches or FeedTree feeds). This module
converts that tree to and from the two plain-Python shapes the encoders
serialize:

Verbose (keyed):
    {"name": N, "fields": {k: v}, "branches"|"feeds": {s: {"type_tag": T, "data": [...]}}}

Compact (positional), also the binary layout:
    [N, [[k, v], ...], [[s, T, [...]], ...]]

Nothing here touches text or bytes; see verbose.py, compact.py and binary.py.
"""

from dataclasses import dataclass, field
from typing import Any, List, Tuple, Union

from constants import KEY_DATA, KEY_FEEDS, KEY_BRANCHES, KEY_FIELDS, KEY_NAME, KEY_TYPE_TAG
from errors import MalformedPayloadError
from codec.elements import FEED_ELEMENTS, TREE_ELEMENTS, FeedElements, TreeElements, TypeMap

FIELD_VALUE_TYPES = (str, int, float, bool)


@dataclass
class SeriesLayout:
    """One named, type-tagged series of elements.

    Attributes:
        name: Branch or feed name
        type_tag: Logical element type name
        items: Decoded elements (on read) or stored elements (on write)
    """

    name: str
    type_tag: str
    items: List[Any] = field(default_factory=list)


@dataclass
class ContainerLayout:
    """The logical content of a Tree or FeedTree payload."""

    name: str
    fields: List[Tuple[str, Any]] = field(default_factory=list)
    series: List[SeriesLayout] = field(default_factory=list)


@dataclass(frozen=True)
class ContainerKind:
    """How one container kind lays out its series.

    Attributes:
        label: Human-readable container name used in errors
        section_key: Verbose-form key holding the series
        elements: Element encoding rules
    """

    label: str
    section_key: str
    elements: Union[TreeElements, FeedElements]


TREE = ContainerKind("Tree", KEY_BRANCHES, TREE_ELEMENTS)
FEEDTREE = ContainerKind("FeedTree", KEY_FEEDS, FEED_ELEMENTS)


def _malformed(kind: ContainerKind, detail: str) -> MalformedPayloadError:
    return MalformedPayloadError(f"Malformed {kind.label} payload: {detail}")


def _check_name(kind: ContainerKind, value: Any, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise _malformed(kind, f"{what} must be a non-empty string, got {value!r}")
    return value


def _check_field_value(kind: ContainerKind, key: str, value: Any) -> Any:
    if not isinstance(value, FIELD_VALUE_TYPES):
        raise _malformed(kind, f"field '{key}' has unsupported value {value!r}")
    return value


# =============================================================================
# Verbose (keyed) layout
# =============================================================================

def to_verbose(layout: ContainerLayout, kind: ContainerKind, fmt: str) -> dict:
    """Build the keyed structure of a container."""
    return {
        KEY_NAME: layout.name,
        KEY_FIELDS: {key: value for key, value in layout.fields},
        kind.section_key: {
            series.name: {
                KEY_TYPE_TAG: series.type_tag,
                KEY_DATA: [
                    kind.elements.encode(item, series.type_tag, fmt) for item in series.items
                ],
            }
            for series in layout.series
        },
    }


def from_verbose(obj: Any, kind: ContainerKind, fmt: str, types: TypeMap = None) -> ContainerLayout:
    """Parse the keyed structure of a container.

    Raises:
        MalformedPayloadError: If the structure does not match the layout
        UnsupportedReadTypeError: If a series holds a type the kind cannot rebuild
    """
    if not isinstance(obj, dict):
        raise _malformed(kind, f"expected an object at top level, got {type(obj).__name__}")
    expected = {KEY_NAME, KEY_FIELDS, kind.section_key}
    if set(obj) != expected:
        raise _malformed(kind, f"expected keys {sorted(expected)}, got {sorted(obj)}")

    name = _check_name(kind, obj[KEY_NAME], "name")
    fields_obj, series_obj = obj[KEY_FIELDS], obj[kind.section_key]
    if not isinstance(fields_obj, dict):
        raise _malformed(kind, f"'{KEY_FIELDS}' must be an object")
    if not isinstance(series_obj, dict):
        raise _malformed(kind, f"'{kind.section_key}' must be an object")

    fields = [(key, _check_field_value(kind, key, value)) for key, value in fields_obj.items()]

    series = []
    for series_name, entry in series_obj.items():
        if not isinstance(entry, dict) or set(entry) != {KEY_TYPE_TAG, KEY_DATA}:
            raise _malformed(kind, f"'{series_name}' must be an object with "
                                   f"'{KEY_TYPE_TAG}' and '{KEY_DATA}'")
        series.append(_parse_series(kind, series_name, entry[KEY_TYPE_TAG], entry[KEY_DATA], fmt, types))

    return ContainerLayout(name=name, fields=fields, series=series)


# =============================================================================
# Compact (positional) layout
# =============================================================================

def to_compact(layout: ContainerLayout, kind: ContainerKind, fmt: str) -> list:
    """Build the positional structure of a container."""
    return [
        layout.name,
        [[key, value] for key, value in layout.fields],
        [
            [
                series.name,
                series.type_tag,
                [kind.elements.encode(item, series.type_tag, fmt) for item in series.items],
            ]
            for series in layout.series
        ],
    ]


def from_compact(obj: Any, kind: ContainerKind, fmt: str, types: TypeMap = None) -> ContainerLayout:
    """Parse the positional structure of a container.

    Raises:
        MalformedPayloadError: If the structure does not match the layout
        UnsupportedReadTypeError: If a series holds a type the kind cannot rebuild
    """
    if not isinstance(obj, list) or len(obj) != 3:
        raise _malformed(kind, "expected a [name, fields, series] array at top level")
    name_obj, fields_obj, series_obj = obj
    name = _check_name(kind, name_obj, "name")
    if not isinstance(fields_obj, list) or not isinstance(series_obj, list):
        raise _malformed(kind, "fields and series must be arrays")

    fields = []
    for entry in fields_obj:
        if not isinstance(entry, list) or len(entry) != 2:
            raise _malformed(kind, f"field entry must be [name, value], got {entry!r}")
        key = _check_name(kind, entry[0], "field name")
        fields.append((key, _check_field_value(kind, key, entry[1])))

    series = []
    for entry in series_obj:
        if not isinstance(entry, list) or len(entry) != 3:
            raise _malformed(kind, f"series entry must be [name, type_tag, data], got {entry!r}")
        series.append(_parse_series(kind, entry[0], entry[1], entry[2], fmt, types))

    return ContainerLayout(name=name, fields=fields, series=series)


def _parse_series(
    kind: ContainerKind,
    name: Any,
    type_tag: Any,
    data: Any,
    fmt: str,
    types: TypeMap,
) -> SeriesLayout:
    name = _check_name(kind, name, "series name")
    type_tag = _check_name(kind, type_tag, f"type tag of '{name}'")
    kind.elements.check(type_tag, name, types)
    if not isinstance(data, list):
        raise _malformed(kind, f"data of '{name}' must be an array")
    items = [kind.elements.decode(obj, type_tag, fmt, name, types) for obj in data]
    return SeriesLayout(name=name, type_tag=type_tag, items=items)

"""Shared machinery for Tree and FeedTree.

Both containers hold an ordered set of Fields and an ordered set of named,
type-tagged series (Branches or Feeds). Names are unique per set; the two
sets are separate namespaces. Encoding goes through a ContainerLayout so the
three codecs see one logical shape.
"""

import logging
from pathlib import Path
from typing import Any, ClassVar, Dict, Generic, Iterable, Iterator, List, Optional, Type, TypeVar, Union

from config import CodecConfig, Config
from constants import TAG_OBJECT
from errors import (
    DuplicateNameError, MalformedPayloadError, TypeTagMismatchError, UnknownNameError,
)
from codec import binary, compact, verbose
from codec.elements import TypeMap
from codec.layout import ContainerKind, ContainerLayout, SeriesLayout
from containers.field import Field, FieldValue, check_name
from values.collection import Collection
from values.contract import coerce_elements, common_tag

logger = logging.getLogger(__name__)

T = TypeVar("T")


def check_type_tag(type_tag: Any) -> str:
    if not isinstance(type_tag, str) or not type_tag:
        raise TypeTagMismatchError(f"type_tag must be a non-empty string, got {type_tag!r}")
    return type_tag


class Series(Generic[T]):
    """A named Collection whose elements all match one type tag.

    Elements are checked (and scalars normalised) on the way in, so a series
    never holds a value that disagrees with its tag.
    """

    def __init__(self, name: str, type_tag: str, data: Iterable[T] = (), types: TypeMap = None) -> None:
        self._name = check_name(name, type(self).__name__)
        self._type_tag = check_type_tag(type_tag)
        # tag -> class overrides the series was decoded with
        self._types = types
        self._data: Collection[T] = Collection(coerce_elements(data, self._type_tag, types))

    @property
    def name(self) -> str:
        return self._name

    @property
    def type_tag(self) -> str:
        return self._type_tag

    def extract(self) -> Collection[T]:
        """Return a copy of the stored elements."""
        return Collection(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[T]:
        return iter(self._data)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (
            self._name == other._name
            and self._type_tag == other._type_tag
            and self._data == other._data
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r}, {self._type_tag!r}, {len(self._data)} items)"


S = TypeVar("S", bound=Series)
C = TypeVar("C", bound="SeriesContainer")


class SeriesContainer(Generic[S]):
    """Base for Tree and FeedTree.

    Subclasses set ``kind`` (codec layout rules), ``series_kind`` (label used
    in errors) and implement ``_new_series``.
    """

    kind: ClassVar[ContainerKind]
    series_kind: ClassVar[str] = "Series"

    def __init__(self, name: str) -> None:
        self._name = check_name(name, type(self).__name__)
        self._fields: Dict[str, Field] = {}
        self._series: Dict[str, S] = {}

    @property
    def name(self) -> str:
        return self._name

    # -------------------------------------------------------------------------
    # Fields
    # -------------------------------------------------------------------------

    def add_field(self, name: str, value: FieldValue) -> Field:
        """Attach a metadata entry.

        Raises:
            DuplicateNameError: If a field with this name already exists
        """
        if name in self._fields:
            raise DuplicateNameError("Field", name, self._name)
        field = Field(name, value)
        self._fields[name] = field
        return field

    def get_field(self, name: str) -> FieldValue:
        """Return the value of a field.

        Raises:
            UnknownNameError: If no field has this name
        """
        try:
            return self._fields[name].value
        except KeyError:
            raise UnknownNameError("Field", name, self._name) from None

    def field_names(self) -> List[str]:
        return list(self._fields)

    @property
    def fields(self) -> Dict[str, FieldValue]:
        """Field values by name, in insertion order (a copy)."""
        return {name: field.value for name, field in self._fields.items()}

    # -------------------------------------------------------------------------
    # Series
    # -------------------------------------------------------------------------

    def _new_series(self, name: str, type_tag: str, items: List[Any], types: TypeMap = None) -> S:
        raise NotImplementedError

    def _resolve_tag(self, items: List[Any], type_tag: Optional[str]) -> str:
        if type_tag is not None:
            return check_type_tag(type_tag)
        inferred = common_tag(items)
        if inferred is None:
            raise TypeTagMismatchError(
                f"Cannot infer the type tag of an empty {self.series_kind}; pass type_tag"
            )
        return inferred

    def _add_series(
        self, name: str, items: Iterable[Any], type_tag: Optional[str], types: TypeMap = None
    ) -> S:
        if name in self._series:
            raise DuplicateNameError(self.series_kind, name, self._name)
        items = list(items)
        series = self._new_series(name, self._resolve_tag(items, type_tag), items, types)
        self._series[name] = series
        logger.debug(
            f"{type(self).__name__} '{self._name}': added {self.series_kind} '{name}' "
            f"({series.type_tag}, {len(series)} items)"
        )
        return series

    def _get_series(self, name: str) -> S:
        try:
            return self._series[name]
        except KeyError:
            raise UnknownNameError(self.series_kind, name, self._name) from None

    def _series_names(self) -> List[str]:
        return list(self._series)

    # -------------------------------------------------------------------------
    # Encoding
    # -------------------------------------------------------------------------

    def to_layout(self) -> ContainerLayout:
        """Return the logical content shared by every encoding."""
        return ContainerLayout(
            name=self._name,
            fields=[(field.name, field.value) for field in self._fields.values()],
            series=[
                SeriesLayout(name=s.name, type_tag=s.type_tag, items=list(s))
                for s in self._series.values()
            ],
        )

    def to_json(self, config: Optional[CodecConfig] = None) -> str:
        """Encode as verbose, object-keyed JSON text."""
        return verbose.dumps(self.to_layout(), self.kind, config)

    def to_jsonc(self, config: Optional[CodecConfig] = None) -> str:
        """Encode as compact, array-positional JSON text."""
        return compact.dumps(self.to_layout(), self.kind, config)

    def to_msg(self, config: Optional[CodecConfig] = None) -> bytes:
        """Encode as MessagePack bytes with the compact layout."""
        return binary.dumps(self.to_layout(), self.kind, config)

    def write(
        self,
        path: Union[str, Path],
        fmt: Optional[str] = None,
        config: Optional[Config] = None,
    ) -> Path:
        """Write to a file, picking the format from the extension unless given."""
        # codec.files imports the containers package
        from codec.files import write
        return write(self, path, fmt=fmt, config=config)

    # -------------------------------------------------------------------------
    # Decoding
    # -------------------------------------------------------------------------

    @classmethod
    def from_layout(cls: Type[C], layout: ContainerLayout, types: TypeMap = None) -> C:
        """Build a container from a decoded layout, all-or-nothing.

        ``types`` is the tag -> class mapping the elements were rebuilt with;
        they are checked against it rather than the registry.

        Raises:
            MalformedPayloadError: If the layout breaks a container invariant
                (duplicate names, elements that disagree with their tag)
        """
        try:
            container = cls(layout.name)
            for key, value in layout.fields:
                container.add_field(key, value)
            for series in layout.series:
                container._add_series(series.name, series.items, series.type_tag, types)
        except (DuplicateNameError, TypeTagMismatchError, TypeError, ValueError) as e:
            raise MalformedPayloadError(f"Invalid {cls.kind.label} payload: {e}") from e

        logger.debug(
            f"Decoded {cls.kind.label} '{layout.name}' "
            f"({len(layout.fields)} fields, {len(layout.series)} series)"
        )
        return container

    @classmethod
    def _decode(
        cls: Type[C],
        codec_module: Any,
        payload: Union[str, bytes],
        types: TypeMap = None,
        config: Optional[CodecConfig] = None,
    ) -> C:
        return cls.from_layout(codec_module.loads(payload, cls.kind, types, config), types)

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (
            self._name == other._name
            and list(self._fields.values()) == list(other._fields.values())
            and list(self._series.values()) == list(other._series.values())
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self._name!r}, fields={self.field_names()}, "
            f"{self.kind.section_key}={self._series_names()})"
        )


def reject_opaque_tag(type_tag: str, series_kind: str) -> None:
    """Refuse the catch-all tag for containers that must read their data back."""
    if type_tag == TAG_OBJECT:
        raise TypeTagMismatchError(
            f"A {series_kind} needs a concrete, registered type tag, not '{TAG_OBJECT}'"
        )

"""The value contract every storable element type satisfies.

A storable type converts itself to the verbose keyed form, the compact
positional form and the binary form (which mirrors the compact one), and can
be rebuilt from the verbose form. Built-in types additionally rebuild from
the compact form; that is what lets a Tree read them back.

Subclasses of ``Serializable`` that declare their own ``type_tag`` are
registered automatically so decoders can find the class from the tag stored
in a payload.

Plain ``float``, ``int`` and ``str`` values are storable through the scalar
helpers at the bottom of this module; they are selected by type tag, never by
inheritance.
"""

import json
import logging
from abc import ABC, abstractmethod
from numbers import Integral, Real
from typing import Any, ClassVar, Dict, Iterable, List, Mapping, Optional, Type

import msgpack

from constants import SCALAR_TAGS, TAG_F64, TAG_OBJECT, TAG_STRING, TAG_U64, TREE_DECODABLE_TAGS
from errors import MalformedPayloadError, TypeTagMismatchError

logger = logging.getLogger(__name__)

U64_MAX = 2 ** 64 - 1

_REGISTRY: Dict[str, Type["Serializable"]] = {}


class Serializable(ABC):
    """Base class for element types that can be stored in a Branch or Feed.

    Subclasses set ``type_tag`` to a unique name and implement the three
    ``to_*_value`` conversions plus ``from_json_value``. The ``*_value``
    methods work on plain Python structures (dicts, lists, scalars); the
    codec layer turns those into text or bytes.
    """

    type_tag: ClassVar[str] = TAG_OBJECT

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Only classes that name themselves are registered; intermediate
        # bases inheriting "Object" stay anonymous.
        if "type_tag" in cls.__dict__:
            register_type(cls)

    @abstractmethod
    def to_json_value(self) -> Any:
        """Return the verbose, object-keyed structure of this value."""

    @abstractmethod
    def to_jsonc_value(self) -> Any:
        """Return the compact, array-positional structure of this value."""

    def to_msg_value(self) -> Any:
        """Return the structure packed into the binary form.

        The binary form mirrors the compact text form.
        """
        return self.to_jsonc_value()

    @classmethod
    @abstractmethod
    def from_json_value(cls, obj: Any) -> "Serializable":
        """Rebuild a value from its verbose structure."""

    # Convenience wrappers for single values

    def to_json(self) -> str:
        return json.dumps(self.to_json_value(), ensure_ascii=False)

    def to_jsonc(self) -> str:
        return json.dumps(self.to_jsonc_value(), ensure_ascii=False, separators=(",", ":"))

    def to_msg(self) -> bytes:
        return msgpack.packb(self.to_msg_value(), use_bin_type=True)

    @classmethod
    def from_json(cls, text: str) -> "Serializable":
        return cls.from_json_value(json.loads(text))


def register_type(cls: Type[Serializable], type_tag: Optional[str] = None) -> Type[Serializable]:
    """Register a Serializable class under its type tag.

    Args:
        cls: The class to register
        type_tag: Tag to register under; defaults to ``cls.type_tag``

    Returns:
        The class, so this can be used as a decorator

    Raises:
        ValueError: If the tag is reserved for scalars, opaque objects or a
            built-in class
    """
    tag = type_tag or cls.type_tag
    if tag in SCALAR_TAGS or tag == TAG_OBJECT:
        raise ValueError(f"Type tag '{tag}' is reserved and cannot be registered")

    previous = _REGISTRY.get(tag)
    if previous is not None and previous is not cls and tag in TREE_DECODABLE_TAGS:
        raise ValueError(f"Type tag '{tag}' belongs to the built-in {previous.__qualname__}")
    if previous is not None and previous is not cls:
        logger.debug(f"Type tag '{tag}' re-registered: {previous.__qualname__} -> {cls.__qualname__}")
    _REGISTRY[tag] = cls
    return cls


def lookup_type(
    type_tag: str,
    types: Optional[Mapping[str, Type[Serializable]]] = None,
) -> Optional[Type[Serializable]]:
    """Find the class registered for a type tag.

    Args:
        type_tag: Tag to look up
        types: Optional caller-supplied mapping checked before the registry

    Returns:
        The registered class, or None if the tag is unknown
    """
    if types is not None and type_tag in types:
        return types[type_tag]
    return _REGISTRY.get(type_tag)


def registered_tags() -> List[str]:
    """Return all registered (non-scalar) type tags, sorted."""
    return sorted(_REGISTRY)


# =============================================================================
# Type tags of values
# =============================================================================

def tag_of(value: Any) -> str:
    """Return the type tag that describes a single value.

    Raises:
        TypeTagMismatchError: If the value does not satisfy the value contract
    """
    if isinstance(value, Serializable):
        return value.type_tag
    if isinstance(value, bool):
        raise TypeTagMismatchError("bool values are not storable; use 'u64' (0/1) or a String")
    if isinstance(value, str):
        return TAG_STRING
    if isinstance(value, Integral):
        # negative ints have no u64 spelling
        return TAG_U64 if value >= 0 else TAG_F64
    if isinstance(value, Real):
        return TAG_F64
    raise TypeTagMismatchError(
        f"{type(value).__name__} does not implement the Serializable contract"
    )


def coerce_element(value: Any, type_tag: str, types: Optional[Mapping[str, Type[Serializable]]] = None) -> Any:
    """Check a value against a type tag and normalise scalars.

    Ints stored under ``f64`` become floats and numpy scalars become plain
    Python numbers, so that a decoded payload compares equal to what was
    added. A composite value must be an instance of the class ``types`` (or,
    failing that, the registry) maps the tag to.

    Raises:
        TypeTagMismatchError: If the value does not belong to the tag
    """
    if type_tag == TAG_F64:
        if isinstance(value, Real) and not isinstance(value, bool):
            return float(value)
    elif type_tag == TAG_U64:
        if isinstance(value, Integral) and not isinstance(value, bool) and 0 <= value <= U64_MAX:
            return int(value)
    elif type_tag == TAG_STRING:
        if isinstance(value, str):
            return value
    elif type_tag == TAG_OBJECT:
        if isinstance(value, Serializable):
            return value
    else:
        cls = lookup_type(type_tag, types)
        if cls is not None and isinstance(value, cls):
            return value
        if cls is None and isinstance(value, Serializable) and value.type_tag == type_tag:
            return value
    raise TypeTagMismatchError(
        f"Value {value!r} ({type(value).__name__}) does not match type tag '{type_tag}'"
    )


def coerce_elements(
    values: Iterable[Any], type_tag: str, types: Optional[Mapping[str, Type[Serializable]]] = None
) -> List[Any]:
    """Apply ``coerce_element`` to every value, all-or-nothing."""
    return [coerce_element(value, type_tag, types) for value in values]


def common_tag(values: Iterable[Any]) -> Optional[str]:
    """Infer one type tag for a batch of values.

    Mixed ``u64``/``f64`` batches widen to ``f64``. Returns None for an empty
    batch.

    Raises:
        TypeTagMismatchError: If the values do not share a tag
    """
    tags = {tag_of(value) for value in values}
    if not tags:
        return None
    if tags == {TAG_U64, TAG_F64}:
        return TAG_F64
    if len(tags) > 1:
        raise TypeTagMismatchError(f"Values do not share one type tag: {sorted(tags)}")
    return tags.pop()


# =============================================================================
# Scalar decoding
# =============================================================================

def decode_scalar(obj: Any, type_tag: str) -> Any:
    """Rebuild a scalar element from a decoded payload value.

    Scalars look the same in every form, so one function serves all three.

    Raises:
        MalformedPayloadError: If the payload value has the wrong shape
    """
    if type_tag == TAG_F64:
        if isinstance(obj, (int, float)) and not isinstance(obj, bool):
            return float(obj)
    elif type_tag == TAG_U64:
        if isinstance(obj, int) and not isinstance(obj, bool) and 0 <= obj <= U64_MAX:
            return obj
    elif type_tag == TAG_STRING:
        if isinstance(obj, str):
            return obj
    raise MalformedPayloadError(f"Expected a '{type_tag}' value, got {obj!r}")

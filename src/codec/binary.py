"""Compact binary encoding (``.msg``).

MessagePack encoding of exactly the compact layout: scalars use msgpack's
native int/float/str types and arrays and strings carry explicit length
prefixes.
"""

import logging
from typing import Optional

import msgpack

from config import CodecConfig
from constants import FORMAT_MSG
from errors import EncodeFailureError, MalformedPayloadError
from codec.elements import TypeMap
from codec.layout import ContainerKind, ContainerLayout, from_compact, to_compact

logger = logging.getLogger(__name__)


def dumps(layout: ContainerLayout, kind: ContainerKind, config: Optional[CodecConfig] = None) -> bytes:
    """Encode a container layout as MessagePack bytes.

    Raises:
        EncodeFailureError: If a value cannot be packed (unknown type, int overflow)
    """
    config = config or CodecConfig()
    structure = to_compact(layout, kind, FORMAT_MSG)
    try:
        payload = msgpack.packb(structure, use_bin_type=config.msg_use_bin_type)
    except (TypeError, ValueError, OverflowError) as e:
        raise EncodeFailureError(f"Cannot encode {kind.label} '{layout.name}' as msg: {e}") from e

    logger.debug(f"Encoded {kind.label} '{layout.name}' as msg ({len(payload)} bytes)")
    return payload


def loads(
    payload: bytes,
    kind: ContainerKind,
    types: TypeMap = None,
    config: Optional[CodecConfig] = None,
) -> ContainerLayout:
    """Decode MessagePack bytes into a container layout.

    msgpack stores non-finite floats natively, so ``config`` changes nothing here.

    Raises:
        MalformedPayloadError: If the bytes are not valid msgpack or not a valid layout
        UnsupportedReadTypeError: If a series holds a type the kind cannot rebuild
    """
    try:
        obj = msgpack.unpackb(payload, raw=False)
    except (msgpack.UnpackException, TypeError, ValueError) as e:
        raise MalformedPayloadError(f"Invalid msg payload: {e}") from e
    return from_compact(obj, kind, FORMAT_MSG, types)

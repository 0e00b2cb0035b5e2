"""Compact, array-positional JSON encoding (``.jsonc``).

Each series is a flat sequence of positional values, so repeated keys are
never written. Smaller than the verbose form, still human-readable.
"""

import json
import logging
from typing import Optional, Union

from config import CodecConfig
from constants import FORMAT_JSONC
from errors import EncodeFailureError, MalformedPayloadError
from codec.elements import TypeMap
from codec.layout import ContainerKind, ContainerLayout, from_compact, to_compact
from codec.verbose import parse_options

logger = logging.getLogger(__name__)

_SEPARATORS = (",", ":")


def dumps(layout: ContainerLayout, kind: ContainerKind, config: Optional[CodecConfig] = None) -> str:
    """Encode a container layout as compact JSON text.

    The indent setting does not apply; compact text is always one line.

    Raises:
        EncodeFailureError: If a value has no JSON representation
    """
    config = config or CodecConfig()
    structure = to_compact(layout, kind, FORMAT_JSONC)
    try:
        text = json.dumps(
            structure,
            separators=_SEPARATORS,
            ensure_ascii=config.ensure_ascii,
            allow_nan=config.allow_non_finite,
        )
    except (TypeError, ValueError) as e:
        raise EncodeFailureError(f"Cannot encode {kind.label} '{layout.name}' as jsonc: {e}") from e

    logger.debug(f"Encoded {kind.label} '{layout.name}' as jsonc ({len(text)} chars)")
    return text


def loads(
    text: Union[str, bytes],
    kind: ContainerKind,
    types: TypeMap = None,
    config: Optional[CodecConfig] = None,
) -> ContainerLayout:
    """Decode compact JSON text into a container layout.

    ``NaN`` and ``Infinity`` literals are refused unless ``config.allow_non_finite``
    is set, matching what the encoder would have written.

    Raises:
        MalformedPayloadError: If the text is not valid JSON or not a valid layout
        UnsupportedReadTypeError: If a series holds a type the kind cannot rebuild
    """
    try:
        obj = json.loads(text, **parse_options(config))
    except (TypeError, ValueError) as e:
        raise MalformedPayloadError(f"Invalid jsonc payload: {e}") from e
    return from_compact(obj, kind, FORMAT_JSONC, types)

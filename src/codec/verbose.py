"""Verbose, object-keyed JSON encoding (``.json``).

The most self-describing and the largest of the three forms.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from config import CodecConfig
from constants import FORMAT_JSON
from errors import EncodeFailureError, MalformedPayloadError
from codec.elements import TypeMap
from codec.layout import ContainerKind, ContainerLayout, from_verbose, to_verbose

logger = logging.getLogger(__name__)


def unique_keys(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    """``object_pairs_hook`` that refuses repeated object keys."""
    # json.loads would otherwise keep the last of repeated keys
    obj = {}
    for key, value in pairs:
        if key in obj:
            raise MalformedPayloadError(f"Duplicate key '{key}' in json payload")
        obj[key] = value
    return obj


def reject_constant(literal: str) -> float:
    """``parse_constant`` hook for payloads that must be strict JSON."""
    raise MalformedPayloadError(f"Non-finite literal '{literal}' in json payload")


def parse_options(config: Optional[CodecConfig]) -> Dict[str, Any]:
    """Keyword arguments for ``json.loads`` matching an encoder config.

    NaN and Infinity are only read back when the config allows writing them.
    """
    options: Dict[str, Any] = {"object_pairs_hook": unique_keys}
    if not (config or CodecConfig()).allow_non_finite:
        options["parse_constant"] = reject_constant
    return options


def dumps(layout: ContainerLayout, kind: ContainerKind, config: Optional[CodecConfig] = None) -> str:
    """Encode a container layout as verbose JSON text.

    Raises:
        EncodeFailureError: If a value has no JSON representation
    """
    config = config or CodecConfig()
    structure = to_verbose(layout, kind, FORMAT_JSON)
    try:
        text = json.dumps(
            structure,
            indent=config.json_indent,
            ensure_ascii=config.ensure_ascii,
            allow_nan=config.allow_non_finite,
        )
    except (TypeError, ValueError) as e:
        raise EncodeFailureError(f"Cannot encode {kind.label} '{layout.name}' as json: {e}") from e

    logger.debug(f"Encoded {kind.label} '{layout.name}' as json ({len(text)} chars)")
    return text


def loads(
    text: Union[str, bytes],
    kind: ContainerKind,
    types: TypeMap = None,
    config: Optional[CodecConfig] = None,
) -> ContainerLayout:
    """Decode verbose JSON text into a container layout.

    ``NaN`` and ``Infinity`` literals are refused unless ``config.allow_non_finite``
    is set, matching what the encoder would have written.

    Raises:
        MalformedPayloadError: If the text is not valid JSON or not a valid layout
        UnsupportedReadTypeError: If a series holds a type the kind cannot rebuild
    """
    try:
        obj = json.loads(text, **parse_options(config))
    except (TypeError, ValueError) as e:
        raise MalformedPayloadError(f"Invalid json payload: {e}") from e
    return from_verbose(obj, kind, FORMAT_JSON, types)

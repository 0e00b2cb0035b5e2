"""Reading and writing payload files by extension.

``.json`` is verbose text, ``.jsonc`` compact text and ``.msg`` binary. A
path with no extension is written in the configured default format and gets
the matching extension appended.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from config import Config, DEFAULT_CONFIG
from constants import EXTENSION_FORMATS, FORMAT_EXTENSIONS, FORMAT_JSON, FORMAT_JSONC, FORMATS
from codec.elements import TypeMap
from containers.base import SeriesContainer
from containers.feedtree import FeedTree
from containers.tree import Tree

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def format_for(path: PathLike, fmt: Optional[str] = None) -> str:
    """Return the payload format for a path.

    Args:
        path: File path whose extension names the format
        fmt: Explicit format, overriding the extension

    Raises:
        ValueError: If fmt is unknown, or fmt is None and the extension is not
            one of .json, .jsonc or .msg
    """
    if fmt is not None:
        if fmt not in FORMATS:
            raise ValueError(f"Unknown format: {fmt}. Use one of {FORMATS}")
        return fmt
    suffix = Path(path).suffix.lower()
    if suffix not in EXTENSION_FORMATS:
        raise ValueError(
            f"Cannot tell the payload format of '{path}'; "
            f"use one of {sorted(EXTENSION_FORMATS)} or pass fmt"
        )
    return EXTENSION_FORMATS[suffix]


def encode(container: SeriesContainer, fmt: str, config: Optional[Config] = None) -> bytes:
    """Encode a Tree or FeedTree to the bytes stored on disk."""
    codec_config = (config or DEFAULT_CONFIG).codec
    if fmt == FORMAT_JSON:
        return container.to_json(codec_config).encode("utf-8")
    if fmt == FORMAT_JSONC:
        return container.to_jsonc(codec_config).encode("utf-8")
    return container.to_msg(codec_config)


def write(
    container: SeriesContainer,
    path: PathLike,
    fmt: Optional[str] = None,
    config: Optional[Config] = None,
) -> Path:
    """Write a Tree or FeedTree to a file.

    The payload is encoded in full before the file is opened, so an
    EncodeFailureError never leaves a file behind. With ``atomic_write`` the
    bytes go to a sibling temp file that is renamed into place.

    Args:
        container: Tree or FeedTree to write
        path: Destination; its extension picks the format unless fmt is given
        fmt: Explicit format ("json", "jsonc" or "msg")
        config: Codec and output options

    Returns:
        The path written (with an extension appended if it had none)
    """
    config = config or DEFAULT_CONFIG
    path = Path(path)
    if fmt is None and not path.suffix:
        fmt = config.output.default_format
        path = path.with_name(path.name + FORMAT_EXTENSIONS[fmt])
    fmt = format_for(path, fmt)

    payload = encode(container, fmt, config)
    path.parent.mkdir(parents=True, exist_ok=True)

    if config.output.atomic_write:
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            with open(tmp_path, "wb") as f:
                f.write(payload)
            os.replace(tmp_path, path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
    else:
        with open(path, "wb") as f:
            f.write(payload)

    logger.info(f"Wrote {type(container).__name__} '{container.name}' to {path} ({len(payload)} bytes)")
    return path


def _read_payload(path: PathLike, fmt: Optional[str]):
    fmt = format_for(path, fmt)
    with open(path, "rb") as f:
        payload = f.read()
    return fmt, payload


def read_tree(path: PathLike, fmt: Optional[str] = None, config: Optional[Config] = None) -> Tree:
    """Read a Tree file.

    Text payloads are parsed with the codec options of ``config``, so NaN and
    Infinity are only accepted when it allows non-finite values.

    Raises:
        UnsupportedReadTypeError: If a branch holds a non built-in tag
        MalformedPayloadError: If the file is not a valid Tree payload
    """
    fmt, payload = _read_payload(path, fmt)
    codec_config = (config or DEFAULT_CONFIG).codec
    if fmt == FORMAT_JSON:
        tree = Tree.from_json(payload, codec_config)
    elif fmt == FORMAT_JSONC:
        tree = Tree.from_jsonc(payload, codec_config)
    else:
        tree = Tree.from_msg(payload)
    logger.info(f"Read Tree '{tree.name}' from {path}")
    return tree


def read_feedtree(
    path: PathLike,
    fmt: Optional[str] = None,
    types: TypeMap = None,
    config: Optional[Config] = None,
) -> FeedTree:
    """Read a FeedTree file.

    Args:
        path: Source file
        fmt: Explicit format, overriding the extension
        types: Optional tag -> class mapping consulted before the registry
        config: Codec options for text payloads

    Raises:
        UnsupportedReadTypeError: If a feed's tag has no known class
        MalformedPayloadError: If the file is not a valid FeedTree payload
    """
    fmt, payload = _read_payload(path, fmt)
    codec_config = (config or DEFAULT_CONFIG).codec
    if fmt == FORMAT_JSON:
        feedtree = FeedTree.from_json(payload, types, codec_config)
    elif fmt == FORMAT_JSONC:
        feedtree = FeedTree.from_jsonc(payload, types, codec_config)
    else:
        feedtree = FeedTree.from_msg(payload, types)
    logger.info(f"Read FeedTree '{feedtree.name}' from {path}")
    return feedtree

"""Payload codecs for Trees and FeedTrees.

This package provides:
- The logical layout shared by all three encodings
- Verbose keyed JSON (.json)
- Compact positional JSON (.jsonc)
- Compact MessagePack binary (.msg)

File I/O by extension lives in codec.files, which depends on the
containers package and is therefore imported on its own.
"""

from codec.layout import (
    ContainerKind,
    ContainerLayout,
    SeriesLayout,
    TREE,
    FEEDTREE,
)
from codec import verbose, compact, binary

__all__ = [
    # Layout
    "ContainerKind",
    "ContainerLayout",
    "SeriesLayout",
    "TREE",
    "FEEDTREE",
    # Encodings
    "verbose",
    "compact",
    "binary",
]

"""Shared constants for the calcify serialization layer.

This module consolidates type tags, payload format names and file extension
conventions used across values/, containers/ and codec/.
"""

from typing import Dict, FrozenSet, Tuple

# =============================================================================
# Type Tags
# =============================================================================

TAG_F64 = "f64"
TAG_U64 = "u64"
TAG_STRING = "String"
TAG_BIN = "Bin"
TAG_POINT_BIN = "PointBin"
TAG_POINT = "Point"

# Tag for caller-supplied types the Tree knows nothing about
TAG_OBJECT = "Object"

SCALAR_TAGS: FrozenSet[str] = frozenset({TAG_F64, TAG_U64, TAG_STRING})

# Closed set of tags a Tree can rebuild from any of its payloads.
# Everything else is write-only from the Tree's point of view.
TREE_DECODABLE_TAGS: FrozenSet[str] = frozenset({
    TAG_F64, TAG_U64, TAG_STRING, TAG_BIN, TAG_POINT_BIN, TAG_POINT,
})

# =============================================================================
# Payload Formats
# =============================================================================

FORMAT_JSON = "json"
FORMAT_JSONC = "jsonc"
FORMAT_MSG = "msg"

FORMATS: Tuple[str, ...] = (FORMAT_JSON, FORMAT_JSONC, FORMAT_MSG)

FORMAT_EXTENSIONS: Dict[str, str] = {
    FORMAT_JSON: ".json",
    FORMAT_JSONC: ".jsonc",
    FORMAT_MSG: ".msg",
}

EXTENSION_FORMATS: Dict[str, str] = {ext: fmt for fmt, ext in FORMAT_EXTENSIONS.items()}

# =============================================================================
# Payload Keys (verbose form)
# =============================================================================

KEY_NAME = "name"
KEY_FIELDS = "fields"
KEY_BRANCHES = "branches"
KEY_FEEDS = "feeds"
KEY_TYPE_TAG = "type_tag"
KEY_DATA = "data"

"""Storable value types and the Collection analytics container.

This package provides:
- The Serializable value contract and its type registry
- Bin / PointBin histogram buckets and the Point sample pair
- Collection with map, cut, hist, hist2d and plot
"""

from values.contract import (
    Serializable,
    register_type,
    lookup_type,
    registered_tags,
    tag_of,
)
from values.bins import Bin, PointBin
from values.point import Point
from values.collection import Collection

__all__ = [
    # Contract
    "Serializable",
    "register_type",
    "lookup_type",
    "registered_tags",
    "tag_of",
    # Values
    "Bin",
    "PointBin",
    "Point",
    # Containers
    "Collection",
]

"""Histogram buckets produced by Collection analytics.

A histogram is a Collection of Bins; a 2-D histogram is a Collection of
PointBins.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, List

from constants import TAG_BIN, TAG_POINT_BIN
from errors import MalformedPayloadError
from values.contract import Serializable


def _range_and_count(obj: Any, width: int, keyed: bool) -> tuple:
    """Split a bucket payload into (count, edges), validating its shape."""
    try:
        if keyed:
            count, edges = obj["count"], obj["range"]
        else:
            count, edges = obj
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedPayloadError(f"Invalid bucket payload: {obj!r}") from e

    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise MalformedPayloadError(f"Bucket count must be a non-negative integer, got {count!r}")
    if not isinstance(edges, list) or len(edges) != width:
        raise MalformedPayloadError(f"Bucket range must be a list of {width} numbers, got {edges!r}")
    if any(isinstance(e, bool) or not isinstance(e, (int, float)) for e in edges):
        raise MalformedPayloadError(f"Bucket range must be numeric, got {edges!r}")
    return count, [float(e) for e in edges]


@dataclass
class Bin(Serializable):
    """One histogram bucket.

    Attributes:
        in_edge: Inclusive lower edge
        ex_edge: Exclusive upper edge (inclusive for the last bucket)
        count: Number of values that fell in the bucket
    """

    type_tag: ClassVar[str] = TAG_BIN

    in_edge: float
    ex_edge: float
    count: int = 0

    def __iadd__(self, other: int) -> "Bin":
        self.count += other
        return self

    @property
    def width(self) -> float:
        return self.ex_edge - self.in_edge

    @property
    def center(self) -> float:
        return 0.5 * (self.in_edge + self.ex_edge)

    def to_json_value(self) -> dict:
        return {"count": self.count, "range": [self.in_edge, self.ex_edge]}

    def to_jsonc_value(self) -> list:
        return [self.count, [self.in_edge, self.ex_edge]]

    @classmethod
    def from_json_value(cls, obj: Any) -> "Bin":
        count, (in_edge, ex_edge) = _range_and_count(obj, 2, keyed=True)
        return cls(in_edge, ex_edge, count)

    @classmethod
    def from_jsonc_value(cls, obj: Any) -> "Bin":
        count, (in_edge, ex_edge) = _range_and_count(obj, 2, keyed=False)
        return cls(in_edge, ex_edge, count)


@dataclass
class PointBin(Serializable):
    """One cell of a 2-D histogram over Points.

    Attributes:
        in_edge_x: Inclusive lower edge along x
        ex_edge_x: Exclusive upper edge along x
        in_edge_y: Inclusive lower edge along y
        ex_edge_y: Exclusive upper edge along y
        count: Number of points in the cell
    """

    type_tag: ClassVar[str] = TAG_POINT_BIN

    in_edge_x: float
    ex_edge_x: float
    in_edge_y: float
    ex_edge_y: float
    count: int = 0

    def __iadd__(self, other: int) -> "PointBin":
        self.count += other
        return self

    def _edges(self) -> List[float]:
        return [self.in_edge_x, self.ex_edge_x, self.in_edge_y, self.ex_edge_y]

    def to_json_value(self) -> dict:
        return {"count": self.count, "range": self._edges()}

    def to_jsonc_value(self) -> list:
        return [self.count, self._edges()]

    @classmethod
    def from_json_value(cls, obj: Any) -> "PointBin":
        count, edges = _range_and_count(obj, 4, keyed=True)
        return cls(*edges, count)

    @classmethod
    def from_jsonc_value(cls, obj: Any) -> "PointBin":
        count, edges = _range_and_count(obj, 4, keyed=False)
        return cls(*edges, count)

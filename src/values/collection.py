"""Ordered, homogeneous sequences with analytics helpers.

Collection wraps a plain list. It does not try to replace lists; wrap one in
a Collection when you need map/cut/hist/plot or want to store it in a Tree
or FeedTree. Every transform returns a new Collection and leaves the source
untouched, so pipelines such as ``states.map(radius).cut(inside).hist(50)``
never alias each other.
"""

from typing import (
    Any, Callable, Generic, Iterable, Iterator, List, Optional, Sequence, Tuple, TypeVar, Union,
    overload,
)

import numpy as np

from errors import LengthMismatchError
from values.bins import Bin, PointBin
from values.contract import tag_of
from values.point import Point

T = TypeVar("T")
U = TypeVar("U")


def _bucket_edges(values: np.ndarray, num_bins: int) -> Optional[np.ndarray]:
    """Return ``num_bins + 1`` equal-width edges over [min, max] of the data.

    Returns None when every value is equal (zero width); callers then put all
    data in one synthetic bucket.
    """
    low, high = float(values.min()), float(values.max())
    if low == high:
        return None
    return np.linspace(low, high, num_bins + 1)


def _bucket_index(values: np.ndarray, edges: Optional[np.ndarray]) -> np.ndarray:
    """Map each value to its bucket.

    Buckets are half-open [lower, upper) except the last, which is closed so
    that the maximum is counted.
    """
    if edges is None:
        return np.zeros(len(values), dtype=np.intp)
    index = np.searchsorted(edges, values, side="right") - 1
    return np.clip(index, 0, len(edges) - 2)


def _finite_array(values: Iterable[Any], what: str) -> np.ndarray:
    try:
        array = np.asarray(list(values), dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{what} requires real numbers") from e
    if not np.all(np.isfinite(array)):
        raise ValueError(f"{what} requires finite values")
    return array


class Collection(Generic[T]):
    """A wrapper around a list of values of one element type.

    Usage:
        col = Collection([1.0, 2.5, 3.0])
        col.push(4.0)
        radii = points.map(Point.r)
        hist = radii.hist(50)
    """

    __slots__ = ("_items",)

    def __init__(self, items: Optional[Iterable[T]] = None) -> None:
        """Create a Collection owning a copy of ``items``."""
        self._items: List[T] = list(items) if items is not None else []

    @classmethod
    def empty(cls) -> "Collection[T]":
        return cls()

    @classmethod
    def from_iter(cls, iterable: Iterable[T]) -> "Collection[T]":
        return cls(iterable)

    # -------------------------------------------------------------------------
    # Container behaviour
    # -------------------------------------------------------------------------

    def push(self, item: T) -> None:
        """Append one element."""
        self._items.append(item)

    def extend(self, items: Iterable[T]) -> None:
        """Append every element of ``items``."""
        self._items.extend(items)

    def at(self, i: int) -> T:
        """Return the element at index ``i``."""
        return self._items[i]

    def to_list(self) -> List[T]:
        """Return a shallow copy of the elements as a list."""
        return list(self._items)

    def element_tag(self) -> Optional[str]:
        """Return the type tag of the elements, or None if empty."""
        if not self._items:
            return None
        return tag_of(self._items[0])

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> "Collection[T]": ...

    def __getitem__(self, index: Union[int, slice]) -> Union[T, "Collection[T]"]:
        if isinstance(index, slice):
            return Collection(self._items[index])
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Collection):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"Collection({self._items!r})"

    # -------------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------------

    def map(self, func: Callable[[T], U]) -> "Collection[U]":
        """Apply ``func`` to every element and collect the results."""
        return Collection(func(item) for item in self._items)

    def cut(self, predicate: Callable[[T], bool]) -> "Collection[T]":
        """Return the elements that *pass* ``predicate``, in order.

        Note: this keeps what passes the test, it does not cut it away.
        """
        return Collection(item for item in self._items if predicate(item))

    def hist(self, num_bins: int) -> "Collection[Bin]":
        """Histogram a Collection of real numbers.

        Args:
            num_bins: Number of equal-width buckets over [min, max] (>= 1)

        Returns:
            Collection of Bins whose counts sum to ``len(self)``. An empty
            Collection gives an empty histogram; if all values are equal the
            result is one bucket ``Bin(v, v, len(self))``.

        Raises:
            ValueError: If num_bins < 1 or the data is not finite and real
        """
        if num_bins < 1:
            raise ValueError(f"num_bins must be 1 or greater, got {num_bins}")
        if not self._items:
            return Collection()

        values = _finite_array(self._items, "hist")
        edges = _bucket_edges(values, num_bins)
        if edges is None:
            return Collection([Bin(float(values[0]), float(values[0]), len(values))])

        counts = np.bincount(_bucket_index(values, edges), minlength=num_bins)
        return Collection(
            Bin(float(edges[i]), float(edges[i + 1]), int(counts[i]))
            for i in range(num_bins)
        )

    def hist2d(self, x_bins: int, y_bins: int) -> "Collection[PointBin]":
        """Histogram a Collection of Points on an x_bins by y_bins grid.

        Each axis follows the ``hist`` bucket rules, including the single
        synthetic bucket for an axis with zero spread. Cells are emitted
        row-major, x outer and y inner, empty cells included.

        Raises:
            ValueError: If a bin count is < 1 or an element is not a Point
        """
        if x_bins < 1 or y_bins < 1:
            raise ValueError(f"bin counts must be 1 or greater, got {x_bins}x{y_bins}")
        if not self._items:
            return Collection()
        if not all(isinstance(p, Point) for p in self._items):
            raise ValueError("hist2d requires a Collection of Points")

        xs = _finite_array((p.x for p in self._items), "hist2d")
        ys = _finite_array((p.y for p in self._items), "hist2d")
        x_edges, y_edges = _bucket_edges(xs, x_bins), _bucket_edges(ys, y_bins)
        nx = x_bins if x_edges is not None else 1
        ny = y_bins if y_edges is not None else 1

        cell = _bucket_index(xs, x_edges) * ny + _bucket_index(ys, y_edges)
        counts = np.bincount(cell, minlength=nx * ny)

        def edges_of(edges: Optional[np.ndarray], data: np.ndarray, i: int) -> Tuple[float, float]:
            if edges is None:
                return float(data[0]), float(data[0])
            return float(edges[i]), float(edges[i + 1])

        out: Collection[PointBin] = Collection()
        for i in range(nx):
            lx, hx = edges_of(x_edges, xs, i)
            for j in range(ny):
                ly, hy = edges_of(y_edges, ys, j)
                out.push(PointBin(lx, hx, ly, hy, int(counts[i * ny + j])))
        return out

    @classmethod
    def plot(
        cls,
        xs: Union["Collection[float]", Sequence[float]],
        ys: Union["Collection[float]", Sequence[float]],
    ) -> "Collection[Point]":
        """Zip independent and dependent values into a Collection of Points.

        Raises:
            LengthMismatchError: If xs and ys differ in length
        """
        xs, ys = list(xs), list(ys)
        if len(xs) != len(ys):
            raise LengthMismatchError(len(xs), len(ys))
        return Collection(Point(float(x), float(y)) for x, y in zip(xs, ys))

"""Two-dimensional sample pairs.

A plot is a Collection of Points.
"""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, ClassVar, Optional, Union

import numpy as np

from constants import TAG_POINT
from errors import MalformedPayloadError
from values.contract import Serializable


def _number(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedPayloadError(f"Point {what} must be numeric, got {value!r}")
    return float(value)


@dataclass(frozen=True)
class Point(Serializable):
    """Point, or two-vector, depending on your perspective.

    Attributes:
        x: Independent variable
        y: Dependent variable
    """

    type_tag: ClassVar[str] = TAG_POINT

    x: float
    y: float

    @classmethod
    def random(cls, max_value: float, rng: Optional[np.random.Generator] = None) -> "Point":
        """Return a Point with both coordinates uniform in [-max_value, max_value].

        Args:
            max_value: Absolute maximum of each coordinate
            rng: Optional numpy Generator for reproducible draws
        """
        rng = rng if rng is not None else np.random.default_rng()
        x, y = rng.uniform(-1.0, 1.0, size=2) * max_value
        return cls(float(x), float(y))

    def r(self) -> float:
        """Return the length of the two-vector."""
        return math.hypot(self.x, self.y)

    def __add__(self, other: "Point") -> "Point":
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x + other.x, self.y + other.y)

    def __radd__(self, other: Any) -> "Point":
        # Lets sum() start from its integer 0
        if other == 0:
            return self
        return NotImplemented

    def __sub__(self, other: "Point") -> "Point":
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y)

    def __mul__(self, other: Union["Point", float]) -> Union["Point", float]:
        """Scale by a number, or take the dot product with another Point."""
        if isinstance(other, Point):
            return self.x * other.x + self.y * other.y
        if isinstance(other, Real) and not isinstance(other, bool):
            return Point(self.x * float(other), self.y * float(other))
        return NotImplemented

    def __rmul__(self, other: float) -> "Point":
        return self.__mul__(other)

    def __str__(self) -> str:
        return f"[{self.x:.5f}, {self.y:.5f}]"

    def to_json_value(self) -> dict:
        return {"x": self.x, "y": self.y}

    def to_jsonc_value(self) -> list:
        return [self.x, self.y]

    @classmethod
    def from_json_value(cls, obj: Any) -> "Point":
        if not isinstance(obj, dict) or set(obj) != {"x", "y"}:
            raise MalformedPayloadError(f"Invalid Point payload: {obj!r}")
        return cls(_number(obj["x"], "x"), _number(obj["y"], "y"))

    @classmethod
    def from_jsonc_value(cls, obj: Any) -> "Point":
        if not isinstance(obj, list) or len(obj) != 2:
            raise MalformedPayloadError(f"Invalid Point payload: {obj!r}")
        return cls(_number(obj[0], "x"), _number(obj[1], "y"))

"""
Small geometry value types: points, sizes and rectangles.
"""

from __future__ import annotations

import numbers
from typing import Any, NamedTuple, Tuple

from .error import TypeMismatchError


def _as_int(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeMismatchError(
            f"no implicit conversion of {type(value).__name__} into Integer ({what})"
        )
    return int(value)


class Point(NamedTuple):
    """2-D integer point (x is the column, y the row)."""
    x: int
    y: int

    @classmethod
    def coerce(cls, value: Any) -> "Point":
        if isinstance(value, cls):
            return value
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return cls(_as_int(value[0], "x"), _as_int(value[1], "y"))
        raise TypeMismatchError(
            f"no implicit conversion of {type(value).__name__} into Point"
        )


class Size(NamedTuple):
    """2-D extent in OpenCV order: width first."""
    width: int
    height: int

    @classmethod
    def coerce(cls, value: Any) -> "Size":
        if isinstance(value, cls):
            return value
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return cls(_as_int(value[0], "width"), _as_int(value[1], "height"))
        raise TypeMismatchError(
            f"no implicit conversion of {type(value).__name__} into Size"
        )

    @property
    def area(self) -> int:
        return self.width * self.height


class Rect(NamedTuple):
    """Axis-aligned rectangle: top-left corner plus size."""
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def coerce(cls, value: Any) -> "Rect":
        if isinstance(value, cls):
            return value
        if isinstance(value, (tuple, list)) and len(value) == 4:
            return cls(*(_as_int(v, name) for v, name in zip(value, cls._fields)))
        raise TypeMismatchError(
            f"no implicit conversion of {type(value).__name__} into Rect"
        )

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def br(self) -> Point:
        """Bottom-right corner (exclusive)."""
        return Point(self.x + self.width, self.y + self.height)

    def fits_within(self, rows: int, cols: int) -> bool:
        """Whether the rectangle lies inside a ``rows`` x ``cols`` matrix."""
        return (
            self.x >= 0 and self.y >= 0
            and self.width >= 0 and self.height >= 0
            and self.x + self.width <= cols
            and self.y + self.height <= rows
        )


def as_cv_point(value: Any) -> Tuple[int, int]:
    return tuple(Point.coerce(value))


def as_cv_size(value: Any) -> Tuple[int, int]:
    return tuple(Size.coerce(value))


__all__ = ["Point", "Size", "Rect", "as_cv_point", "as_cv_size"]

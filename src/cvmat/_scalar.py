"""
Per-channel constant values.
"""

from __future__ import annotations

import numbers
from typing import Any, Sequence, Tuple

from .error import ShapeMismatchError, TypeMismatchError


SCALAR_MAX_CHANNELS = 4


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


class Scalar(tuple):
    """
    Fixed-length (1..4) tuple of doubles used as a per-channel constant.

    Components are stored as Python floats; narrowing to a matrix depth
    happens only when the value is written. ``Scalar`` is a tuple, so it
    compares equal to plain tuples: ``Scalar(5) == (5,)``.

    Example:
        >>> Scalar(1, 2, 3)
        Scalar(1.0, 2.0, 3.0)
        >>> Scalar.all(7.5).padded(3)
        (7.5, 7.5, 7.5)
    """

    def __new__(cls, *values: float) -> "Scalar":
        if len(values) == 1 and isinstance(values[0], (tuple, list)):
            values = tuple(values[0])
        if not 1 <= len(values) <= SCALAR_MAX_CHANNELS:
            raise ShapeMismatchError(
                f"Scalar takes 1 to {SCALAR_MAX_CHANNELS} components, got {len(values)}"
            )
        for v in values:
            if not _is_number(v):
                raise TypeMismatchError(
                    f"no implicit conversion of {type(v).__name__} into Float"
                )
        return super().__new__(cls, (float(v) for v in values))

    @classmethod
    def all(cls, value: float) -> "Scalar":
        """Scalar with every one of the four components set to ``value``."""
        return cls(value, value, value, value)

    @classmethod
    def coerce(cls, value: Any) -> "Scalar":
        """Convert a Scalar, tuple/list of numbers, or number to a Scalar."""
        if isinstance(value, cls):
            return value
        if isinstance(value, (tuple, list)):
            return cls(*value)
        if _is_number(value):
            return cls.all(value)
        raise TypeMismatchError(
            f"no implicit conversion of {type(value).__name__} into Scalar"
        )

    def padded(self, channels: int) -> Tuple[float, ...]:
        """Components for ``channels`` channels; missing ones are 0."""
        values = tuple(self[:channels])
        return values + (0.0,) * (channels - len(values))

    def __repr__(self) -> str:
        return f"Scalar({', '.join(repr(v) for v in self)})"


def channel_values(value: Any, channels: int) -> Tuple[float, ...]:
    """
    Expand a write value to exactly ``channels`` doubles.

    A plain number fills every channel; a tuple/list/Scalar fills its
    components in order and leaves the rest at 0.

    Raises:
        TypeMismatchError: If value is not a number or a sequence of numbers
    """
    if _is_number(value):
        return (float(value),) * channels
    if isinstance(value, (tuple, list)):
        for v in value:
            if not _is_number(v):
                raise TypeMismatchError(
                    f"no implicit conversion of {type(v).__name__} into Float"
                )
        values = tuple(float(v) for v in value[:channels])
        return values + (0.0,) * (channels - len(values))
    raise TypeMismatchError(
        f"no implicit conversion of {type(value).__name__} into Scalar"
    )


def as_scalar_tuple(values: Sequence[float]) -> Tuple[float, ...]:
    """Build the value returned by element reads: a Scalar when it fits."""
    if 1 <= len(values) <= SCALAR_MAX_CHANNELS:
        return Scalar(*values)
    return tuple(values)


__all__ = ["Scalar", "channel_values", "as_scalar_tuple", "SCALAR_MAX_CHANNELS"]

"""
Generic element accessor.

Reads and writes single elements of any matrix through its depth's
``NumericKind``. Both directions share ``element_offset`` so that reads and
writes always agree on where an element lives.
"""

from __future__ import annotations

import numbers
from typing import TYPE_CHECKING, Any, Sequence, Tuple

from ._dtypes import kind_of
from ._scalar import as_scalar_tuple, channel_values
from .error import OutOfRangeError, TypeMismatchError

if TYPE_CHECKING:
    from ._mat import Mat


def _as_index(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeMismatchError(
            f"no implicit conversion of {type(value).__name__} into Integer"
        )
    return int(value)


def normalize_index(mat: "Mat", index: Sequence[int]) -> Tuple[int, ...]:
    """
    Turn a user index into one in-range component per dimension.

    A single index on a 2-D matrix is a row-major linear index.

    Raises:
        OutOfRangeError: Wrong number of components or any component outside [0, size)
    """
    idx = tuple(_as_index(i) for i in index)
    shape = mat.shape

    if len(idx) == 1 and len(shape) == 2:
        linear = idx[0]
        total = shape[0] * shape[1]
        if not 0 <= linear < total:
            raise OutOfRangeError(f"Index {linear} out of range for {total} elements")
        return divmod(linear, shape[1])

    if len(idx) != len(shape):
        raise OutOfRangeError(
            f"Expected {len(shape)} indices for a {len(shape)}-D matrix, got {len(idx)}"
        )
    for axis, (i, size) in enumerate(zip(idx, shape)):
        if not 0 <= i < size:
            raise OutOfRangeError(f"Index {i} out of range [0, {size}) on axis {axis}")
    return idx


def element_offset(mat: "Mat", index: Tuple[int, ...]) -> int:
    """Byte offset of an in-range element: ``offset + sum(i_k * step_k)``."""
    return mat.offset + sum(i * step for i, step in zip(index, mat.steps))


def get_element(mat: "Mat", index: Sequence[int]) -> Tuple[float, ...]:
    """
    Read one element as a tuple of ``channels`` floats.

    Raises:
        OutOfRangeError: If the index is out of range
        UnsupportedDepthError: If the matrix depth has no numeric kind
    """
    kind = kind_of(mat.depth)
    offset = element_offset(mat, normalize_index(mat, index))
    return as_scalar_tuple(kind.read(mat.buffer.data, offset, mat.channels))


def set_element(mat: "Mat", index: Sequence[int], value: Any) -> None:
    """
    Write one element, narrowing each channel value with C cast rules.

    ``value`` may be a number (written to every channel) or a sequence of
    numbers (missing channels are written as 0).

    Raises:
        OutOfRangeError: If the index is out of range
        UnsupportedDepthError: If the matrix depth has no numeric kind
        TypeMismatchError: If value is not numeric
    """
    kind = kind_of(mat.depth)
    offset = element_offset(mat, normalize_index(mat, index))
    kind.write(mat.buffer.data, offset, channel_values(value, mat.channels))


__all__ = ["normalize_index", "element_offset", "get_element", "set_element"]

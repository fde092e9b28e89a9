"""
Structural and factory operations: constant matrices, identity, diagonal
views, dot/cross products, channel split/merge and concatenation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Type

import cv2
import numpy as np

from ._buffer import Ownership
from ._dtypes import CV_CN_MAX, MatType, as_mat_type, kind_of
from ._kernel import as_array, kernel_call, wrap_array
from ._ops import as_int, check_same_type, require_2d, require_mat
from ._scalar import Scalar, channel_values
from .error import BoundsError, ShapeMismatchError, TypeMismatchError

if TYPE_CHECKING:
    from ._mat import Mat


# =============================================================================
# Factories
# =============================================================================

@kernel_call("zeros")
def zeros(cls: Type["Mat"], rows: int, cols: int, mtype: Any) -> "Mat":
    """Zero-filled matrix, whatever config.memory.zero_fill says."""
    return cls._allocate((rows, cols), as_mat_type(mtype), zero=True)


@kernel_call("ones")
def ones(cls: Type["Mat"], rows: int, cols: int, mtype: Any) -> "Mat":
    """Matrix with the first channel of every element set to 1."""
    mat = cls._allocate((rows, cols), as_mat_type(mtype), zero=True)
    if not mat.is_empty:
        target = as_array(mat)
        if mat.channels == 1:
            target[...] = 1
        else:
            target[..., 0] = 1
    return mat


@kernel_call("eye")
def eye(cls: Type["Mat"], rows: int, cols: int, mtype: Any) -> "Mat":
    """Zero matrix with 1 in the first channel of the main diagonal."""
    mat = cls._allocate((rows, cols), as_mat_type(mtype), zero=True)
    _fill_diagonal(mat, Scalar(1))
    return mat


def _fill_diagonal(mat: "Mat", value: Any) -> None:
    fill = kind_of(mat.depth).saturate(channel_values(value, mat.channels))
    if mat.is_empty:
        return
    n = min(mat.rows, mat.cols)
    idx = np.arange(n)
    target = as_array(mat)
    target[idx, idx] = fill if mat.channels > 1 else fill[0]


@kernel_call("set_identity")
def set_identity(mat: "Mat", value: Any = None) -> "Mat":
    """
    Write ``value`` (default ``Scalar(1)``) onto the main diagonal in place.

    Off-diagonal elements are left as they are. Returns the same handle.
    """
    require_2d(mat)
    _fill_diagonal(mat, Scalar(1) if value is None else value)
    return mat


# =============================================================================
# Diagonal, Dot and Cross
# =============================================================================

@kernel_call("diag")
def diag(mat: "Mat", d: int = 0) -> "Mat":
    """
    View of one diagonal as an ``n x 1`` matrix sharing mat's buffer.

    ``d == 0`` is the main diagonal, ``d > 0`` starts ``d`` rows down,
    ``d < 0`` starts ``-d`` columns right.

    Raises:
        BoundsError: If the diagonal has no elements
    """
    require_2d(mat)
    d = as_int(d, "d")
    if d >= 0:
        row0, col0 = d, 0
        length = min(mat.rows - d, mat.cols)
    else:
        row0, col0 = 0, -d
        length = min(mat.rows, mat.cols + d)
    if length <= 0 or mat.is_empty:
        raise BoundsError(f"Diagonal {d} is outside a {mat.rows}x{mat.cols} matrix")

    elem = mat.mat_type.elem_size
    offset = mat.offset + row0 * mat.step + col0 * elem
    return type(mat)._from_header(
        mat.buffer, offset, (length, 1), (mat.step + elem, elem),
        mat.mat_type, Ownership.VIEW,
    )


@kernel_call("dot")
def dot(mat: "Mat", other: Any) -> float:
    """Sum of element-wise products over all elements and channels, in double."""
    require_mat(other)
    check_same_type(mat, other)
    a = as_array(mat).astype(np.float64).ravel()
    b = as_array(other).astype(np.float64).ravel()
    return float(np.dot(a, b))


@kernel_call("cross")
def cross(mat: "Mat", other: Any) -> "Mat":
    """Cross product of two 3-component vectors, shaped and typed like mat."""
    require_mat(other)
    for m in (mat, other):
        if m.total * m.channels != 3:
            raise ShapeMismatchError(
                f"Cross product needs 3-component vectors, got {m.total * m.channels} components"
            )
    check_same_type(mat, other)
    a = as_array(mat).astype(np.float64).reshape(3)
    b = as_array(other).astype(np.float64).reshape(3)
    out = kind_of(mat.depth).saturate(np.cross(a, b))
    return wrap_array(out.reshape(as_array(mat).shape), type(mat))


# =============================================================================
# Channels
# =============================================================================

@kernel_call("split")
def split(mat: "Mat") -> List["Mat"]:
    """One single-channel matrix per channel, in channel order."""
    require_2d(mat)
    single = MatType(mat.depth, 1)
    if mat.is_empty:
        return [mat._empty_like(single) for _ in range(mat.channels)]
    if mat.channels == 1:
        return [mat.clone()]
    planes = cv2.split(as_array(mat))
    return [wrap_array(p, type(mat)) for p in planes]


def _validate_sequence(mats: Any, what: str) -> List["Mat"]:
    if isinstance(mats, (str, bytes)) or not isinstance(mats, Sequence):
        raise TypeMismatchError(
            f"no implicit conversion of {type(mats).__name__} into Array ({what})"
        )
    mats = list(mats)
    if not mats:
        raise ShapeMismatchError(f"Nothing to {what}")
    for m in mats:
        require_mat(m, what)
        require_2d(m)
    return mats


@kernel_call("merge")
def merge(cls: Type["Mat"], mats: Sequence["Mat"]) -> "Mat":
    """
    Interleave matrices into one multi-channel matrix.

    Inputs must share rows, cols and depth; the result has the sum of their
    channel counts.
    """
    mats = _validate_sequence(mats, "merge")
    first = mats[0]
    for m in mats[1:]:
        if m.shape != first.shape:
            raise ShapeMismatchError(
                f"Cannot merge {m.rows}x{m.cols} with {first.rows}x{first.cols}"
            )
        if m.depth != first.depth:
            raise TypeMismatchError(
                f"Cannot merge {m.mat_type.name} with {first.mat_type.name}"
            )
    channels = sum(m.channels for m in mats)
    if channels > CV_CN_MAX:
        raise ShapeMismatchError(f"Merged matrix would have {channels} channels")
    if first.is_empty:
        return cls._from_header(None, 0, first.shape, (0, 0),
                                MatType(first.depth, channels), Ownership.OWNED)
    out = cv2.merge([as_array(m) for m in mats])
    if channels == 1:
        out = out.reshape(first.shape)
    return wrap_array(out, cls)


def _concat(cls: Type["Mat"], mats: Sequence["Mat"], axis: int, what: str) -> "Mat":
    mats = _validate_sequence(mats, what)
    first = mats[0]
    keep = 0 if axis == 1 else 1
    label = "rows" if keep == 0 else "cols"
    for m in mats[1:]:
        if m.shape[keep] != first.shape[keep] or m.channels != first.channels:
            raise ShapeMismatchError(
                f"{what} needs equal {label} and channels: "
                f"{m.rows}x{m.cols}x{m.channels} vs {first.rows}x{first.cols}x{first.channels}"
            )
        if m.depth != first.depth:
            raise TypeMismatchError(
                f"Cannot {what} {m.mat_type.name} with {first.mat_type.name}"
            )
    parts = [as_array(m) for m in mats if not m.is_empty]
    if not parts:
        shape = [first.rows, first.cols]
        shape[axis] = sum(m.shape[axis] for m in mats)
        return cls._from_header(None, 0, tuple(shape), (0, 0), first.mat_type,
                                Ownership.OWNED)
    kernel = cv2.hconcat if axis == 1 else cv2.vconcat
    out = kernel(parts)
    if first.channels == 1:
        out = out.reshape(out.shape[:2])
    return wrap_array(out, cls)


@kernel_call("hconcat")
def hconcat(cls: Type["Mat"], mats: Sequence["Mat"]) -> "Mat":
    """Side-by-side concatenation; all inputs need the same rows and type."""
    return _concat(cls, mats, axis=1, what="hconcat")


@kernel_call("vconcat")
def vconcat(cls: Type["Mat"], mats: Sequence["Mat"]) -> "Mat":
    """Stacked concatenation; all inputs need the same cols and type."""
    return _concat(cls, mats, axis=0, what="vconcat")


__all__ = [
    "zeros",
    "ones",
    "eye",
    "set_identity",
    "diag",
    "dot",
    "cross",
    "split",
    "merge",
    "hconcat",
    "vconcat",
]

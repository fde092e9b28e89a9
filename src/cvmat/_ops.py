"""
Arithmetic and logical operations on matrices.

Each function validates its operands, lets cv2 (or numpy, where cv2 has no
Python entry point) do the element work, and wraps the output in a fresh
handle of the left operand's class. Every function returns a ``Result``;
``Mat`` turns failures into exceptions.
"""

from __future__ import annotations

import numbers
from typing import TYPE_CHECKING, Any, Callable, Optional, Tuple, Union

import cv2
import numpy as np

from ._dtypes import CV_MAT_DEPTH_MASK, Depth, MatType, kind_of
from ._kernel import as_array, kernel_call, store_into, wrap_array
from ._scalar import Scalar, channel_values
from .error import ShapeMismatchError, TypeMismatchError

if TYPE_CHECKING:
    from ._mat import Mat


# =============================================================================
# Operand Validation
# =============================================================================

def _is_mat(value: Any) -> bool:
    from ._mat import Mat
    return isinstance(value, Mat)


def require_mat(value: Any, what: str = "operand") -> "Mat":
    if not _is_mat(value):
        raise TypeMismatchError(
            f"no implicit conversion of {type(value).__name__} into Mat ({what})"
        )
    return value


def require_2d(mat: "Mat") -> None:
    if mat.dims != 2:
        raise ShapeMismatchError(f"Operation needs a 2-D matrix, got {mat.dims}-D")


def as_int(value: Any, what: str) -> int:
    """Integer argument, else TypeMismatchError (bools and floats rejected)."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeMismatchError(
            f"no implicit conversion of {type(value).__name__} into Integer ({what})"
        )
    return int(value)


def as_real(value: Any, what: str) -> float:
    """Real-valued argument as a float, else TypeMismatchError."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeMismatchError(
            f"no implicit conversion of {type(value).__name__} into Float ({what})"
        )
    return float(value)


def check_same_size(src: "Mat", other: "Mat") -> None:
    """Same rows, cols and channels, else ShapeMismatchError."""
    if src.shape != other.shape or src.channels != other.channels:
        raise ShapeMismatchError(
            f"Operand sizes differ: {_describe(src)} vs {_describe(other)}"
        )


def check_same_type(src: "Mat", other: "Mat") -> None:
    """Same size and same depth."""
    check_same_size(src, other)
    if src.depth != other.depth:
        raise TypeMismatchError(
            f"Operand depths differ: {src.mat_type.name} vs {other.mat_type.name}"
        )


def _describe(mat: "Mat") -> str:
    return "x".join(str(s) for s in mat.shape) + f"x{mat.channels}"


def classify_operand(src: "Mat", other: Any, allow_number: bool = True
                     ) -> Tuple[bool, Any]:
    """
    Resolve the right-hand operand of a binary operation.

    Returns:
        ``(True, array)`` for a matrix operand, ``(False, values)`` with one
        double per channel for a Scalar, tuple, list or (when allowed) number

    Raises:
        TypeMismatchError: For any other operand
    """
    if _is_mat(other):
        require_2d(other)
        check_same_type(src, other)
        return True, as_array(other)
    if isinstance(other, (Scalar, tuple, list)):
        return False, Scalar.coerce(other).padded(src.channels)
    if allow_number and isinstance(other, numbers.Real) and not isinstance(other, bool):
        return False, (float(other),) * src.channels
    accepted = "Mat or Scalar" if not allow_number else "Mat, Scalar or Numeric"
    raise TypeMismatchError(
        f"no implicit conversion of {type(other).__name__} into {accepted}"
    )


def scalar_plane(like: np.ndarray, values: Tuple[float, ...]) -> np.ndarray:
    """
    Broadcast per-channel doubles to an array shaped like ``like``.

    cv2 decides between "array op scalar" and "array op array" from operand
    shapes, which is ambiguous for 1x1 and Nx1 inputs; a full float64 plane
    combined with an explicit output depth is always "array op array".
    """
    plane = np.empty(like.shape, dtype=np.float64)
    plane[...] = values if like.ndim == 3 else values[0]
    return plane


def mask_array(src: "Mat", mask: "Mat") -> np.ndarray:
    """Validate an operation mask: 8-bit, one channel, same size as src."""
    require_mat(mask, "mask")
    if mask.shape != src.shape or mask.channels != 1:
        raise ShapeMismatchError(
            f"Mask must be {src.rows}x{src.cols} with one channel, got {_describe(mask)}"
        )
    if mask.depth not in (Depth.CV_8U, Depth.CV_8S):
        raise TypeMismatchError(f"Mask must be 8-bit, got {mask.mat_type.name}")
    return as_array(mask)


# =============================================================================
# Element-wise Arithmetic
# =============================================================================

def _binary(kernel: Callable, src: "Mat", other: Any, *, reverse: bool = False) -> "Mat":
    require_2d(src)
    is_mat, operand = classify_operand(src, other)
    if src.is_empty:
        return src._empty_like()
    a = as_array(src)
    if not is_mat:
        operand = scalar_plane(a, operand)
    first, second = (operand, a) if reverse else (a, operand)
    out = kernel(first, second, dtype=int(src.depth))
    return wrap_array(out, type(src))


@kernel_call("add")
def add(src: "Mat", other: Any) -> "Mat":
    """Saturating ``src + other``."""
    return _binary(cv2.add, src, other)


@kernel_call("subtract")
def subtract(src: "Mat", other: Any, reverse: bool = False) -> "Mat":
    """Saturating ``src - other`` (``other - src`` when reverse)."""
    return _binary(cv2.subtract, src, other, reverse=reverse)


@kernel_call("multiply")
def multiply(src: "Mat", other: Any) -> "Mat":
    """Saturating element-wise ``src * other``."""
    return _binary(cv2.multiply, src, other)


@kernel_call("divide")
def divide(src: "Mat", other: Any, reverse: bool = False) -> "Mat":
    """
    Element-wise ``src / other`` (``other / src`` when reverse), rounded and
    saturated to src's depth.
    """
    return _binary(cv2.divide, src, other, reverse=reverse)


@kernel_call("absdiff")
def absdiff(src: "Mat", other: Any) -> "Mat":
    """Element-wise ``|src - other|`` against a matrix or Scalar/tuple."""
    require_2d(src)
    is_mat, operand = classify_operand(src, other, allow_number=False)
    if src.is_empty:
        return src._empty_like()
    a = as_array(src)
    if is_mat:
        return wrap_array(cv2.absdiff(a, operand), type(src))
    diff = np.abs(a.astype(np.float64) - scalar_plane(a, operand))
    return wrap_array(kind_of(src.depth).saturate(diff), type(src))


@kernel_call("matmul")
def matmul(src: "Mat", other: Any) -> "Mat":
    """Matrix product of two floating-point matrices."""
    require_mat(other)
    require_2d(src)
    require_2d(other)
    for m in (src, other):
        if not m.depth.is_float or m.depth == Depth.CV_16F or m.channels != 1:
            raise TypeMismatchError(
                f"Matrix product needs CV_32FC1 or CV_64FC1 operands, got {m.mat_type.name}"
            )
    if src.depth != other.depth:
        raise TypeMismatchError(
            f"Operand depths differ: {src.mat_type.name} vs {other.mat_type.name}"
        )
    if src.cols != other.rows:
        raise ShapeMismatchError(
            f"Cannot multiply {src.rows}x{src.cols} by {other.rows}x{other.cols}"
        )
    out = np.matmul(as_array(src), as_array(other))
    return wrap_array(out.astype(src.depth.np_dtype, copy=False), type(src))


# =============================================================================
# Bitwise Operations
# =============================================================================

def _masked(kernel: Callable, src: "Mat", operands: Tuple[Any, ...],
            mask: Optional["Mat"]) -> "Mat":
    if mask is None:
        return wrap_array(kernel(*operands), type(src))

    m = mask_array(src, mask)
    # Unmasked elements keep src's value, so start from a copy of src
    dst = src.clone()
    try:
        target = as_array(dst)
        out = kernel(*operands, dst=target, mask=m)
        if out is not target:
            store_into(dst, out)
    except BaseException:
        dst.release()
        raise
    return dst


def _bitwise(kernel: Callable, src: "Mat", other: Any, mask: Optional["Mat"]) -> "Mat":
    require_2d(src)
    is_mat, operand = classify_operand(src, other)
    if src.is_empty:
        return src._empty_like()
    a = as_array(src)
    if not is_mat:
        # Scalars are converted to src's depth before the bits are combined
        operand = kind_of(src.depth).saturate(scalar_plane(a, operand))
    return _masked(kernel, src, (a, operand), mask)


@kernel_call("bitwise_and")
def bitwise_and(src: "Mat", other: Any, mask: Optional["Mat"] = None) -> "Mat":
    return _bitwise(cv2.bitwise_and, src, other, mask)


@kernel_call("bitwise_or")
def bitwise_or(src: "Mat", other: Any, mask: Optional["Mat"] = None) -> "Mat":
    return _bitwise(cv2.bitwise_or, src, other, mask)


@kernel_call("bitwise_xor")
def bitwise_xor(src: "Mat", other: Any, mask: Optional["Mat"] = None) -> "Mat":
    return _bitwise(cv2.bitwise_xor, src, other, mask)


@kernel_call("bitwise_not")
def bitwise_not(src: "Mat", mask: Optional["Mat"] = None) -> "Mat":
    require_2d(src)
    if src.is_empty:
        return src._empty_like()
    return _masked(cv2.bitwise_not, src, (as_array(src),), mask)


# =============================================================================
# Weighted Sums and Conversions
# =============================================================================

@kernel_call("add_weighted")
def add_weighted(src1: "Mat", alpha: float, src2: "Mat", beta: float,
                 gamma: float, dtype: int = -1, cls: Optional[type] = None) -> "Mat":
    """``src1*alpha + src2*beta + gamma``, saturated to ``dtype`` (or src1's depth)."""
    require_mat(src1, "src1")
    require_mat(src2, "src2")
    alpha, beta = as_real(alpha, "alpha"), as_real(beta, "beta")
    gamma, dtype = as_real(gamma, "gamma"), as_int(dtype, "dtype")
    require_2d(src1)
    require_2d(src2)
    check_same_size(src1, src2)
    if src1.depth != src2.depth and dtype < 0:
        raise TypeMismatchError(
            "Operands of different depth need an explicit output depth"
        )
    out = cv2.addWeighted(as_array(src1), alpha, as_array(src2), beta, gamma, dtype=dtype)
    return wrap_array(out, cls or type(src1))


@kernel_call("convert_scale_abs")
def convert_scale_abs(src: "Mat", alpha: float = 1.0, beta: float = 0.0) -> "Mat":
    """``saturate_u8(|src*alpha + beta|)``; the result is always 8-bit unsigned."""
    alpha, beta = as_real(alpha, "alpha"), as_real(beta, "beta")
    require_2d(src)
    if src.is_empty:
        return src._empty_like(MatType(Depth.CV_8U, src.channels))
    out = cv2.convertScaleAbs(as_array(src), alpha=alpha, beta=beta)
    return wrap_array(out, type(src))


def _target_depth(src: "Mat", rtype: Union[MatType, Depth, int]) -> Depth:
    if isinstance(rtype, MatType):
        return rtype.depth
    if isinstance(rtype, bool) or not isinstance(rtype, (int, np.integer)):
        raise TypeMismatchError(
            f"no implicit conversion of {type(rtype).__name__} into Integer"
        )
    if rtype < 0:
        return src.depth
    return Depth(int(rtype) & CV_MAT_DEPTH_MASK)


@kernel_call("convert_to")
def convert_to(src: "Mat", rtype: Union[MatType, Depth, int],
               alpha: float = 1.0, beta: float = 0.0) -> "Mat":
    """
    Convert to another depth, computing ``src*alpha + beta`` in double
    precision and saturating (round half to even) into the target depth.
    A negative ``rtype`` keeps src's depth; channels never change.
    """
    depth = _target_depth(src, rtype)
    kind = kind_of(depth)
    alpha, beta = as_real(alpha, "alpha"), as_real(beta, "beta")
    if src.is_empty:
        return src._empty_like(MatType(depth, src.channels))
    values = as_array(src).astype(np.float64)
    if alpha != 1 or beta != 0:
        values = values * alpha + beta
    return wrap_array(kind.saturate(values), type(src))


@kernel_call("set_to")
def set_to(src: "Mat", value: Any, mask: Optional["Mat"] = None) -> "Mat":
    """Set every (masked) element of src in place; returns src."""
    values = channel_values(value, src.channels)
    fill = kind_of(src.depth).saturate(values)
    selected = None if mask is None else mask_array(src, mask) != 0
    if src.is_empty:
        return src
    target = as_array(src)
    if src.channels == 1:
        fill = fill[0]
    if selected is None:
        target[...] = fill
    else:
        target[selected] = fill
    return src


__all__ = [
    "as_int",
    "as_real",
    "add",
    "subtract",
    "multiply",
    "divide",
    "absdiff",
    "matmul",
    "bitwise_and",
    "bitwise_or",
    "bitwise_xor",
    "bitwise_not",
    "add_weighted",
    "convert_scale_abs",
    "convert_to",
    "set_to",
]

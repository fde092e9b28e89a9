"""
Kernel bridge between matrix handles and OpenCV.

Handles are passed to ``cv2`` as zero-copy numpy views of their buffers;
kernel outputs come back as numpy arrays and are adopted into fresh, owned
handles. ``kernel_call`` turns any core function into one that returns a
``Result`` instead of raising, translating ``cv2.error`` by status code.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any, Callable, Optional, Type

import cv2
import numpy as np

from ._buffer import Ownership, SharedBuffer
from ._dtypes import CV_CN_MAX, Depth, MatType
from .error import (
    CVMAT_ERROR_KERNEL,
    AllocationError,
    BoundsError,
    CvMatError,
    Result,
    ShapeMismatchError,
    TypeMismatchError,
    UnsupportedDepthError,
)

if TYPE_CHECKING:
    from ._mat import Mat


logger = logging.getLogger("cvmat.kernel")


# =============================================================================
# Error Translation
# =============================================================================

# OpenCV status codes (cv::Error::Code)
_CV_STATUS_TO_ERROR = {
    -4: AllocationError,          # StsNoMem
    -201: ShapeMismatchError,     # StsBadSize
    -205: TypeMismatchError,      # StsUnmatchedFormats
    -206: TypeMismatchError,      # StsBadFlag
    -209: ShapeMismatchError,     # StsUnmatchedSizes
    -210: UnsupportedDepthError,  # StsUnsupportedFormat
    -211: BoundsError,            # StsOutOfRange
    -215: ShapeMismatchError,     # StsAssert
}


def translate_cv_error(error: Exception, context: str,
                       kind: Optional[Type[CvMatError]] = None) -> CvMatError:
    """
    Convert a ``cv2.error`` into the matching cvmat error.

    Args:
        error: Exception raised by cv2
        context: Operation name prepended to the message
        kind: Force this error class (codec call sites) instead of mapping
              by status code
    """
    status = getattr(error, "code", None)
    detail = getattr(error, "err", None) or str(error).strip()
    message = f"{context}: {detail}" if context else detail
    if kind is not None:
        return kind(message)
    mapped = _CV_STATUS_TO_ERROR.get(status)
    if mapped is None:
        return CvMatError(message, CVMAT_ERROR_KERNEL)
    return mapped(message)


def kernel_call(context: str, error_kind: Optional[Type[CvMatError]] = None
                ) -> Callable[[Callable[..., Any]], Callable[..., Result]]:
    """
    Decorate a core operation so that it returns a ``Result``.

    cvmat errors raised by validation and ``cv2.error`` raised by the kernel
    become failed results; any other exception propagates unchanged.

    Args:
        context: Operation name used in error messages
        error_kind: Error class for every kernel failure (codec call sites)
    """
    def decorator(fn: Callable[..., Any]) -> Callable[..., Result]:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs) -> Result:
            try:
                return Result.success(fn(*args, **kwargs))
            except CvMatError as e:
                return Result.failure(e)
            except cv2.error as e:
                translated = translate_cv_error(e, context, error_kind)
                logger.debug("%s failed in kernel: %s", context, translated)
                return Result.failure(translated)
        return wrapper
    return decorator


# =============================================================================
# Marshalling
# =============================================================================

def as_array(mat: "Mat") -> np.ndarray:
    """
    Zero-copy numpy view of a handle's elements.

    Single-channel matrices map to ``(rows, cols)`` arrays, multi-channel ones
    to ``(rows, cols, channels)``, which is the layout cv2 expects.
    Empty handles map to a fresh empty array.
    """
    mtype = mat.mat_type
    dtype = mtype.depth.np_dtype
    cn_shape = (mtype.channels,) if mtype.channels > 1 else ()
    if mat.buffer is None:
        return np.zeros(tuple(mat.shape) + cn_shape, dtype=dtype)
    cn_steps = (mtype.elem_size1,) if mtype.channels > 1 else ()
    return np.ndarray(
        shape=tuple(mat.shape) + cn_shape,
        dtype=dtype,
        buffer=mat.buffer.data,
        offset=mat.offset,
        strides=tuple(mat.steps) + cn_steps,
    )


def wrap_array(array: Any, cls: Optional[Type["Mat"]] = None, *,
               copy: bool = False,
               ownership: Ownership = Ownership.OWNED) -> "Mat":
    """
    Adopt a numpy array (usually a kernel output) as a new handle.

    1-D arrays become single-column matrices, 3-D arrays interleaved
    multi-channel matrices. Boolean arrays become ``CV_8U``.

    Args:
        array: Source array
        cls: Handle class of the result (default: Mat)
        copy: Always copy instead of adopting contiguous writable arrays
        ownership: Ownership tag of the new handle

    Raises:
        UnsupportedDepthError: If the dtype has no matrix depth
        ShapeMismatchError: If the array has more than 3 dimensions
    """
    from ._mat import Mat

    cls = cls or Mat
    source = array = np.asarray(array)
    if array.dtype == np.bool_:
        array = array.astype(np.uint8)
    depth = Depth.from_numpy(array.dtype)
    if not array.dtype.isnative:
        array = array.astype(array.dtype.newbyteorder("="))

    if array.ndim == 0:
        array = array.reshape(1, 1)
    elif array.ndim == 1:
        array = array.reshape(-1, 1)
    if array.ndim == 2:
        channels = 1
    elif array.ndim == 3:
        channels = array.shape[2]
        if not 1 <= channels <= CV_CN_MAX:
            raise ShapeMismatchError(f"Unsupported channel count {channels}")
    else:
        raise ShapeMismatchError(f"Cannot wrap a {array.ndim}-D array as a matrix")

    rows, cols = array.shape[:2]
    mtype = MatType(depth, channels)
    if rows == 0 or cols == 0:
        return cls._from_header(None, 0, (rows, cols), (0, 0), mtype, Ownership.OWNED)

    if copy or not (array.flags.c_contiguous and array.flags.writeable):
        array = np.array(array, copy=True, order="C")
    if not np.may_share_memory(array, source):
        ownership = Ownership.OWNED
    buffer = SharedBuffer.adopt(array)
    steps = (cols * mtype.elem_size, mtype.elem_size)
    return cls._from_header(buffer, 0, (rows, cols), steps, mtype, ownership)


@kernel_call("from_numpy")
def adopt_array(cls: Type["Mat"], array: Any, copy: bool,
                ownership: Ownership) -> "Mat":
    """Result-returning ``wrap_array`` for caller-supplied arrays."""
    return wrap_array(array, cls, copy=copy, ownership=ownership)


def store_into(mat: "Mat", array: np.ndarray) -> None:
    """Copy a kernel result into a handle's existing elements."""
    target = as_array(mat)
    np.copyto(target, array.reshape(target.shape))


__all__ = [
    "translate_cv_error",
    "kernel_call",
    "as_array",
    "wrap_array",
    "adopt_array",
    "store_into",
]

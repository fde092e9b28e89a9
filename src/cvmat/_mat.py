"""
Matrix handle.

A ``Mat`` is a header (shape, per-dimension steps, element type, byte
offset) over a counted reference to a ``SharedBuffer``. Region views,
diagonals and header copies share their parent's buffer, so writes through
any of them are visible through all of them; ``clone`` and every operation
result get a buffer of their own.

This module is the public boundary: the operation modules return
``Result`` objects and ``Mat`` raises their errors through ``check_result``.
"""

from __future__ import annotations

import numbers
import os
from functools import reduce
from operator import mul
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from . import _codec, _drawing, _imgproc, _ops, _structural
from ._accessor import get_element, set_element
from ._buffer import Ownership, SharedBuffer, release_buffer
from ._config import config
from ._dtypes import Depth, MatType, as_mat_type
from ._geometry import Point, Rect, Size
from ._kernel import adopt_array, as_array, store_into
from .error import (
    AllocationError,
    BoundsError,
    OutOfRangeError,
    Result,
    ShapeMismatchError,
    TypeMismatchError,
    check_result,
)


def _compact_steps(shape: Tuple[int, ...], mtype: MatType) -> Tuple[int, ...]:
    """Row-major steps of a densely packed array."""
    steps = []
    stride = mtype.elem_size
    for size in reversed(shape):
        steps.append(stride)
        stride *= max(size, 1)
    return tuple(reversed(steps))


def _as_size(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeMismatchError(
            f"no implicit conversion of {type(value).__name__} into Integer ({what})"
        )
    value = int(value)
    if value < 0:
        raise ShapeMismatchError(f"Matrix {what} must be non-negative, got {value}")
    return value


class Mat:
    """
    Dense, dynamically typed, possibly shared N-dimensional matrix.

    Construction:
        - ``Mat()``: empty matrix
        - ``Mat(rows, cols, type=CV_8UC1)``: new (zero-filled by default) buffer
        - ``Mat(parent, rect)``: view of a rectangular region of ``parent``

    Ownership:
        - OWNED: allocated by this handle (construction, factories, results)
        - BORROWED: wraps a caller's numpy array (``from_numpy(copy=False)``)
        - VIEW: shares another handle's buffer (regions, ``diag``, ``copy.copy``)

    Attributes:
        rows, cols: Size of a 2-D matrix
        depth: Per-channel numeric depth (``Depth``)
        channels: Interleaved channels per element
        type: OpenCV type code (``CV_8UC3 == 16``)

    Example:
        >>> m = Mat(2, 2, CV_8UC1)
        >>> m[0, 0] = 5
        >>> (m + 3)[0, 0]
        Scalar(8.0)
        >>> roi = Mat(m, Rect(0, 0, 1, 1))
        >>> roi[0, 0] = 300          # wraps to 44
        >>> m[0, 0]
        Scalar(44.0)
    """

    __slots__ = ("_buffer", "_offset", "_shape", "_steps", "_type", "_ownership")

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(self, *args):
        """Initialize a matrix.

        Args:
            *args: ``()``, ``(rows, cols)``, ``(rows, cols, type)`` or
                ``(parent, rect)``

        Raises:
            AllocationError: If the buffer cannot be allocated
            BoundsError: If ``rect`` is not inside ``parent``
            ShapeMismatchError: For negative sizes
            TypeMismatchError: For arguments of the wrong type or count
        """
        self._buffer = None
        if len(args) == 2 and isinstance(args[0], Mat):
            self._init_view(args[0], args[1])
        elif len(args) in (2, 3):
            rows = _as_size(args[0], "rows")
            cols = _as_size(args[1], "cols")
            mtype = as_mat_type(args[2] if len(args) == 3 else None,
                                default=config.defaults.mat_type)
            self._init_header(*self._layout((rows, cols), mtype), Ownership.OWNED)
        elif not args:
            mtype = config.defaults.mat_type
            self._init_header(None, 0, (0, 0), _compact_steps((0, 0), mtype),
                              mtype, Ownership.OWNED)
        else:
            raise TypeMismatchError(
                f"wrong number of arguments (given {len(args)}, expected 0, 2 or 3)"
            )

    @staticmethod
    def _layout(shape: Tuple[int, ...], mtype: MatType, zero: Optional[bool] = None
                ) -> Tuple[Optional[SharedBuffer], int, Tuple[int, ...], Tuple[int, ...], MatType]:
        """Allocate storage for a compact matrix; no buffer when it is empty."""
        steps = _compact_steps(shape, mtype)
        total = reduce(mul, shape, 1)
        if total == 0:
            return None, 0, shape, steps, mtype
        nbytes = total * mtype.elem_size
        if nbytes > config.memory.max_buffer_bytes:
            raise AllocationError(
                f"Cannot allocate {'x'.join(map(str, shape))} {mtype.name} matrix "
                f"({nbytes} bytes)"
            )
        return SharedBuffer(nbytes, zero=zero), 0, shape, steps, mtype

    def _init_header(self, buffer: Optional[SharedBuffer], offset: int,
                     shape: Tuple[int, ...], steps: Tuple[int, ...],
                     mtype: MatType, ownership: Ownership) -> None:
        if buffer is not None:
            buffer.acquire()
        self._buffer = buffer
        self._offset = offset
        self._shape = tuple(shape)
        self._steps = tuple(steps)
        self._type = mtype
        self._ownership = ownership

    def _init_view(self, parent: "Mat", rect: Any) -> None:
        rect = Rect.coerce(rect)
        if parent.dims != 2:
            raise ShapeMismatchError("Region views need a 2-D parent")
        if not rect.fits_within(parent.rows, parent.cols):
            raise BoundsError(
                f"Region {tuple(rect)} is outside a {parent.rows}x{parent.cols} matrix"
            )
        if rect.width == 0 or rect.height == 0:
            self._init_header(None, 0, (rect.height, rect.width), parent._steps,
                              parent._type, Ownership.OWNED)
            return
        offset = parent._offset + rect.y * parent._steps[0] + rect.x * parent._steps[1]
        self._init_header(parent._buffer, offset, (rect.height, rect.width),
                          parent._steps, parent._type, Ownership.VIEW)

    @classmethod
    def _from_header(cls, buffer: Optional[SharedBuffer], offset: int,
                     shape: Tuple[int, ...], steps: Tuple[int, ...],
                     mtype: MatType, ownership: Ownership) -> "Mat":
        """Create a handle over an existing (or no) buffer without allocating."""
        self = cls.__new__(cls)
        self._buffer = None
        self._init_header(buffer, offset, shape, steps, mtype, ownership)
        return self

    @classmethod
    def _allocate(cls, shape: Tuple[int, ...], mtype: MatType,
                  zero: Optional[bool] = None) -> "Mat":
        shape = tuple(_as_size(s, "size") for s in shape)
        return cls._from_header(*cls._layout(shape, mtype, zero), Ownership.OWNED)

    def _empty_like(self, mtype: Optional[MatType] = None) -> "Mat":
        mtype = mtype or self._type
        return type(self)._from_header(None, 0, self._shape,
                                       _compact_steps(self._shape, mtype),
                                       mtype, Ownership.OWNED)

    @classmethod
    def nd(cls, sizes: Sequence[int], mtype: Any = None) -> "Mat":
        """N-dimensional matrix (element access only; kernels need 2-D)."""
        if len(sizes) < 2:
            raise ShapeMismatchError("A matrix needs at least 2 dimensions")
        return cls._allocate(tuple(sizes), as_mat_type(mtype, config.defaults.mat_type))

    # =========================================================================
    # Release
    # =========================================================================

    def release(self) -> None:
        """Drop this handle's buffer reference; the handle becomes empty.

        Safe to call more than once.
        """
        buffer, self._buffer = self._buffer, None
        release_buffer(buffer)
        self._offset = 0
        self._shape = (0, 0)
        self._steps = _compact_steps(self._shape, self._type)

    def __del__(self):
        buffer = getattr(self, "_buffer", None)
        if buffer is not None:
            self._buffer = None
            buffer.release()

    def __enter__(self) -> "Mat":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False

    def _assign(self, result: "Mat") -> "Mat":
        """Make self hold ``result``'s elements (in-place operation variants).

        When shape and type match, the elements are copied into self's
        existing bytes so aliasing handles observe them; otherwise self is
        rebound to result's buffer.
        """
        if result is self:
            return self
        if (not self.is_empty and result._shape == self._shape
                and result._type == self._type):
            store_into(self, as_array(result))
        else:
            old = self._buffer
            self._init_header(result._buffer, result._offset, result._shape,
                              result._steps, result._type, result._ownership)
            release_buffer(old)
        result.release()
        return self

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def rows(self) -> int:
        return self._shape[0]

    @property
    def cols(self) -> int:
        return self._shape[1]

    height = rows
    width = cols

    @property
    def shape(self) -> Tuple[int, ...]:
        """Sizes of every dimension (channels excluded)."""
        return self._shape

    @property
    def size(self) -> Size:
        """``Size(width=cols, height=rows)``."""
        return Size(self.cols, self.rows)

    @property
    def dims(self) -> int:
        return len(self._shape)

    @property
    def depth(self) -> Depth:
        return self._type.depth

    @property
    def channels(self) -> int:
        return self._type.channels

    @property
    def type(self) -> int:
        """OpenCV type code."""
        return self._type.code

    @property
    def mat_type(self) -> MatType:
        return self._type

    @property
    def step(self) -> int:
        """Row pitch in bytes."""
        return self._steps[0]

    @property
    def steps(self) -> Tuple[int, ...]:
        return self._steps

    @property
    def offset(self) -> int:
        """Byte offset of the first element inside the buffer."""
        return self._offset

    @property
    def elem_size(self) -> int:
        return self._type.elem_size

    @property
    def elem_size1(self) -> int:
        return self._type.elem_size1

    @property
    def total(self) -> int:
        """Number of elements."""
        return reduce(mul, self._shape, 1)

    @property
    def nbytes(self) -> int:
        return self.total * self.elem_size

    @property
    def is_empty(self) -> bool:
        return self.rows == 0 or self.cols == 0

    @property
    def is_continuous(self) -> bool:
        return self._steps == _compact_steps(self._shape, self._type)

    @property
    def buffer(self) -> Optional[SharedBuffer]:
        return self._buffer

    @property
    def ownership(self) -> Ownership:
        return self._ownership

    @property
    def is_view(self) -> bool:
        return self._ownership == Ownership.VIEW

    def __len__(self) -> int:
        return self.rows

    # =========================================================================
    # Copies and numpy Interop
    # =========================================================================

    def clone(self) -> "Mat":
        """Deep copy with its own buffer."""
        dst = type(self)._allocate(self._shape, self._type, zero=False)
        if dst._buffer is not None:
            np.copyto(as_array(dst), as_array(self))
        return dst

    def __copy__(self) -> "Mat":
        """Header copy sharing this handle's buffer."""
        return type(self)._from_header(self._buffer, self._offset, self._shape,
                                       self._steps, self._type, Ownership.VIEW)

    def __deepcopy__(self, memo) -> "Mat":
        return self.clone()

    def to_numpy(self, copy: bool = False) -> np.ndarray:
        """numpy view of the elements (aliasing unless ``copy``)."""
        array = as_array(self)
        return array.copy() if copy else array

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        array = self.to_numpy(copy=bool(copy))
        return array if dtype is None else array.astype(dtype, copy=False)

    # Let numpy scalars and arrays defer to Mat's reflected operators
    __array_ufunc__ = None

    @classmethod
    def from_numpy(cls, array: Any, copy: bool = True) -> "Mat":
        """
        Matrix from a numpy array (2-D, or 3-D with channels last).

        With ``copy=False`` a contiguous writable array is borrowed: the
        handle and the array share memory.
        """
        ownership = Ownership.OWNED if copy else Ownership.BORROWED
        return check_result(adopt_array(cls, array, copy, ownership))

    # =========================================================================
    # Element Access
    # =========================================================================

    def get(self, index: Sequence[int]) -> Tuple[float, ...]:
        """Read one element as a tuple of ``channels`` floats."""
        return get_element(self, index)

    def at(self, *index: int) -> Tuple[float, ...]:
        return get_element(self, index)

    def set(self, row: int, col: int, value: Any) -> "Mat":
        """Write one element with C-style narrowing; returns self."""
        set_element(self, (row, col), value)
        return self

    def __getitem__(self, key: Any) -> Union[Tuple[float, ...], "Mat"]:
        if _is_region_key(key):
            return self._region(key)
        return get_element(self, key if isinstance(key, tuple) else (key,))

    def __setitem__(self, key: Any, value: Any) -> None:
        if _is_region_key(key):
            with self._region(key) as region:
                region.set_to(value)
            return
        set_element(self, key if isinstance(key, tuple) else (key,), value)

    def _region(self, key: Any) -> "Mat":
        if self.dims != 2:
            raise ShapeMismatchError("Slicing needs a 2-D matrix")
        if not isinstance(key, tuple):
            key = (key, slice(None))
        if len(key) != 2:
            raise OutOfRangeError(f"Expected 2 indices, got {len(key)}")
        (r0, r1), (c0, c1) = (_slice_bounds(k, n) for k, n in zip(key, self._shape))
        return type(self)(self, Rect(c0, r0, c1 - c0, r1 - r0))

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def add(self, other: Any) -> "Mat":
        return check_result(_ops.add(self, other), "add")

    def subtract(self, other: Any) -> "Mat":
        return check_result(_ops.subtract(self, other), "subtract")

    def multiply(self, other: Any) -> "Mat":
        """Element-wise product (use ``@`` for the matrix product)."""
        return check_result(_ops.multiply(self, other), "multiply")

    def divide(self, other: Any) -> "Mat":
        return check_result(_ops.divide(self, other), "divide")

    __add__ = add
    __sub__ = subtract
    __mul__ = multiply
    __truediv__ = divide
    __radd__ = add
    __rmul__ = multiply

    def __rsub__(self, other: Any) -> "Mat":
        return check_result(_ops.subtract(self, other, reverse=True), "subtract")

    def __rtruediv__(self, other: Any) -> "Mat":
        return check_result(_ops.divide(self, other, reverse=True), "divide")

    def __matmul__(self, other: Any) -> "Mat":
        return check_result(_ops.matmul(self, other), "matmul")

    def __iadd__(self, other: Any) -> "Mat":
        return self._assign(self.add(other))

    def __isub__(self, other: Any) -> "Mat":
        return self._assign(self.subtract(other))

    def __imul__(self, other: Any) -> "Mat":
        return self._assign(self.multiply(other))

    def __itruediv__(self, other: Any) -> "Mat":
        return self._assign(self.divide(other))

    def absdiff(self, other: Any) -> "Mat":
        """``|self - other|`` for a matrix or Scalar/tuple operand."""
        return check_result(_ops.absdiff(self, other), "absdiff")

    @classmethod
    def add_weighted(cls, src1: "Mat", alpha: float, src2: "Mat", beta: float,
                     gamma: float, dtype: int = -1) -> "Mat":
        """``src1*alpha + src2*beta + gamma``."""
        return check_result(
            _ops.add_weighted(src1, alpha, src2, beta, gamma, dtype, cls), "add_weighted"
        )

    def convert_scale_abs(self, alpha: float = 1.0, beta: float = 0.0) -> "Mat":
        return check_result(_ops.convert_scale_abs(self, alpha, beta), "convert_scale_abs")

    def convert_to(self, rtype: Union[MatType, Depth, int], alpha: float = 1.0,
                   beta: float = 0.0) -> "Mat":
        return check_result(_ops.convert_to(self, rtype, alpha, beta), "convert_to")

    # =========================================================================
    # Bitwise Operations
    # =========================================================================

    def bitwise_and(self, value: Any, mask: Optional["Mat"] = None) -> "Mat":
        return check_result(_ops.bitwise_and(self, value, mask), "bitwise_and")

    def bitwise_or(self, value: Any, mask: Optional["Mat"] = None) -> "Mat":
        return check_result(_ops.bitwise_or(self, value, mask), "bitwise_or")

    def bitwise_xor(self, value: Any, mask: Optional["Mat"] = None) -> "Mat":
        return check_result(_ops.bitwise_xor(self, value, mask), "bitwise_xor")

    def bitwise_not(self, mask: Optional["Mat"] = None) -> "Mat":
        return check_result(_ops.bitwise_not(self, mask), "bitwise_not")

    def __and__(self, other: Any) -> "Mat":
        return self.bitwise_and(other)

    def __or__(self, other: Any) -> "Mat":
        return self.bitwise_or(other)

    def __xor__(self, other: Any) -> "Mat":
        return self.bitwise_xor(other)

    __rand__ = __and__
    __ror__ = __or__
    __rxor__ = __xor__

    def __invert__(self) -> "Mat":
        return self.bitwise_not()

    def __iand__(self, other: Any) -> "Mat":
        return self._assign(self.bitwise_and(other))

    def __ior__(self, other: Any) -> "Mat":
        return self._assign(self.bitwise_or(other))

    def __ixor__(self, other: Any) -> "Mat":
        return self._assign(self.bitwise_xor(other))

    # =========================================================================
    # Structural Operations
    # =========================================================================

    @classmethod
    def zeros(cls, rows: int, cols: int, mtype: Any = None) -> "Mat":
        mtype = as_mat_type(mtype, config.defaults.mat_type)
        return check_result(_structural.zeros(cls, rows, cols, mtype), "zeros")

    @classmethod
    def ones(cls, rows: int, cols: int, mtype: Any = None) -> "Mat":
        """Matrix whose elements are ``Scalar(1)`` (first channel 1, others 0)."""
        mtype = as_mat_type(mtype, config.defaults.mat_type)
        return check_result(_structural.ones(cls, rows, cols, mtype), "ones")

    @classmethod
    def eye(cls, rows: int, cols: int, mtype: Any = None) -> "Mat":
        """Identity matrix: ``Scalar(1)`` on the main diagonal, zeros elsewhere."""
        mtype = as_mat_type(mtype, config.defaults.mat_type)
        return check_result(_structural.eye(cls, rows, cols, mtype), "eye")

    def set_identity(self, value: Any = None) -> "Mat":
        """Write ``value`` (default ``Scalar(1)``) on the main diagonal; returns self."""
        return check_result(_structural.set_identity(self, value), "set_identity")

    def set_to(self, value: Any, mask: Optional["Mat"] = None) -> "Mat":
        """Set all (or masked) elements to ``value`` in place; returns self."""
        return check_result(_ops.set_to(self, value, mask), "set_to")

    def diag(self, d: int = 0) -> "Mat":
        """View of diagonal ``d`` as a column (0 main, >0 below, <0 above)."""
        return check_result(_structural.diag(self, d), "diag")

    def dot(self, other: "Mat") -> float:
        return check_result(_structural.dot(self, other), "dot")

    def cross(self, other: "Mat") -> "Mat":
        return check_result(_structural.cross(self, other), "cross")

    def split(self) -> List["Mat"]:
        """One single-channel matrix per channel."""
        return check_result(_structural.split(self), "split")

    @classmethod
    def merge(cls, mats: Sequence["Mat"]) -> "Mat":
        return check_result(_structural.merge(cls, mats), "merge")

    @classmethod
    def hconcat(cls, mats: Sequence["Mat"]) -> "Mat":
        return check_result(_structural.hconcat(cls, mats), "hconcat")

    @classmethod
    def vconcat(cls, mats: Sequence["Mat"]) -> "Mat":
        return check_result(_structural.vconcat(cls, mats), "vconcat")

    # =========================================================================
    # Codecs
    # =========================================================================

    @classmethod
    def imread(cls, filename: Union[str, os.PathLike], flags: Optional[int] = None) -> "Mat":
        """Load an image file as an instance of ``cls``."""
        if flags is None:
            flags = config.defaults.imread_flags
        return check_result(_codec.imread(cls, filename, flags))

    @classmethod
    def imdecode(cls, buf: Any, flags: Optional[int] = None) -> "Mat":
        """Decode an in-memory image as an instance of ``cls``."""
        if flags is None:
            flags = config.defaults.imread_flags
        return check_result(_codec.imdecode(cls, buf, flags))

    def imencode(self, ext: str, params: Optional[Sequence[int]] = None) -> bytes:
        return check_result(_codec.imencode(self, ext, params))

    def save(self, filename: Union[str, os.PathLike],
             params: Optional[Sequence[int]] = None) -> bool:
        """Write to ``filename``; the extension selects the codec."""
        return check_result(_codec.imwrite(filename, self, params))

    # =========================================================================
    # Image Processing
    # =========================================================================

    def sobel(self, ddepth: int, dx: int, dy: int, ksize: int = 3, scale: float = 1.0,
              delta: float = 0.0, border_type: int = _imgproc.BORDER_DEFAULT) -> "Mat":
        return check_result(
            _imgproc.sobel(self, ddepth, dx, dy, ksize, scale, delta, border_type)
        )

    def sobel_(self, ddepth: int, dx: int, dy: int, ksize: int = 3, scale: float = 1.0,
               delta: float = 0.0, border_type: int = _imgproc.BORDER_DEFAULT) -> "Mat":
        """In-place ``sobel``; self takes the result's depth."""
        return self._assign(self.sobel(ddepth, dx, dy, ksize, scale, delta, border_type))

    def canny(self, threshold1: float, threshold2: float, aperture_size: int = 3,
              l2gradient: bool = False) -> "Mat":
        return check_result(
            _imgproc.canny(self, threshold1, threshold2, aperture_size, l2gradient)
        )

    def canny_(self, threshold1: float, threshold2: float, aperture_size: int = 3,
               l2gradient: bool = False) -> "Mat":
        return self._assign(self.canny(threshold1, threshold2, aperture_size, l2gradient))

    def laplacian(self, ddepth: int, ksize: int = 3, scale: float = 1.0,
                  delta: float = 0.0, border_type: int = _imgproc.BORDER_DEFAULT) -> "Mat":
        return check_result(
            _imgproc.laplacian(self, ddepth, ksize, scale, delta, border_type)
        )

    def cvt_color(self, code: int, dcn: int = 0) -> "Mat":
        return check_result(_imgproc.cvt_color(self, code, dcn))

    def resize(self, size: Any, fx: float = 0.0, fy: float = 0.0,
               interpolation: int = _imgproc.INTER_LINEAR) -> "Mat":
        return check_result(_imgproc.resize(self, size, fx, fy, interpolation))

    def blur(self, ksize: Any, anchor: Any = Point(-1, -1),
             border_type: int = _imgproc.BORDER_DEFAULT) -> "Mat":
        return check_result(_imgproc.blur(self, ksize, anchor, border_type))

    def gaussian_blur(self, ksize: Any, sigma_x: float, sigma_y: float = 0.0,
                      border_type: int = _imgproc.BORDER_DEFAULT) -> "Mat":
        return check_result(
            _imgproc.gaussian_blur(self, ksize, sigma_x, sigma_y, border_type)
        )

    def median_blur(self, ksize: int) -> "Mat":
        return check_result(_imgproc.median_blur(self, ksize))

    def threshold(self, thresh: float, max_value: float, threshold_type: int
                  ) -> Union["Mat", Tuple["Mat", float]]:
        """Thresholded matrix, plus the computed level for Otsu/triangle modes."""
        return check_result(_imgproc.threshold(self, thresh, max_value, threshold_type))

    def adaptive_threshold(self, max_value: float, adaptive_method: int,
                           threshold_type: int, block_size: int, delta: float) -> "Mat":
        return check_result(_imgproc.adaptive_threshold(
            self, max_value, adaptive_method, threshold_type, block_size, delta
        ))

    # =========================================================================
    # Drawing
    # =========================================================================

    def _draw_on_clone(self, draw: Callable[..., Result], *args, **kwargs) -> "Mat":
        dst = self.clone()
        result = draw(dst, *args, **kwargs)
        if not result.ok:
            dst.release()
        return check_result(result)

    def line(self, p1: Any, p2: Any, color: Any, thickness: int = 1,
             line_type: int = _drawing.LINE_8, shift: int = 0) -> "Mat":
        return self._draw_on_clone(_drawing.line, p1, p2, color, thickness, line_type, shift)

    def line_(self, p1: Any, p2: Any, color: Any, thickness: int = 1,
              line_type: int = _drawing.LINE_8, shift: int = 0) -> "Mat":
        return check_result(_drawing.line(self, p1, p2, color, thickness, line_type, shift))

    def circle(self, center: Any, radius: int, color: Any, thickness: int = 1,
               line_type: int = _drawing.LINE_8, shift: int = 0) -> "Mat":
        return self._draw_on_clone(_drawing.circle, center, radius, color, thickness,
                                   line_type, shift)

    def circle_(self, center: Any, radius: int, color: Any, thickness: int = 1,
                line_type: int = _drawing.LINE_8, shift: int = 0) -> "Mat":
        return check_result(
            _drawing.circle(self, center, radius, color, thickness, line_type, shift)
        )

    def rectangle(self, p1: Any, p2: Any, color: Any, thickness: int = 1,
                  line_type: int = _drawing.LINE_8, shift: int = 0) -> "Mat":
        return self._draw_on_clone(_drawing.rectangle, p1, p2, color, thickness,
                                   line_type, shift)

    def rectangle_(self, p1: Any, p2: Any, color: Any, thickness: int = 1,
                   line_type: int = _drawing.LINE_8, shift: int = 0) -> "Mat":
        return check_result(
            _drawing.rectangle(self, p1, p2, color, thickness, line_type, shift)
        )

    # =========================================================================
    # Representation
    # =========================================================================

    def to_s(self) -> str:
        """``<Mat:RxC,depth=D,channels=C,\\n[...]>`` with the element values."""
        return (
            f"<{type(self).__name__}:{self.rows}x{self.cols},depth={int(self.depth)},"
            f"channels={self.channels},\n{self._format_elements()}>"
        )

    __str__ = to_s

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(shape={self._shape}, type={self._type.name}, "
            f"ownership={self._ownership.value})"
        )

    def _format_elements(self) -> str:
        if self.is_empty or self.dims != 2:
            return "[]"
        array = as_array(self).reshape(self.rows, self.cols * self.channels)
        integral = not self.depth.is_float

        def fmt(v) -> str:
            return str(int(v)) if integral else f"{float(v):g}"

        def row(r: int) -> str:
            return ", ".join(fmt(v) for v in array[r])

        display = config.display
        rows = list(range(self.rows))
        if self.total > display.max_elements and self.rows > 2 * display.edge_rows:
            edge = display.edge_rows
            lines = [row(r) for r in rows[:edge]] + ["..."] + [row(r) for r in rows[-edge:]]
        else:
            lines = [row(r) for r in rows]
        return "[" + ";\n ".join(lines) + "]"

    def info(self) -> str:
        """Get detailed information string."""
        lines = [
            f"{type(self).__name__}:",
            f"  shape: {self._shape}",
            f"  type: {self._type.name}",
            f"  steps: {self._steps}",
            f"  offset: {self._offset}",
            f"  ownership: {self._ownership.value}",
            f"  continuous: {self.is_continuous}",
        ]
        if self._buffer is not None:
            lines.append(f"  buffer: {self._buffer.nbytes} bytes, "
                         f"{self._buffer.refcount} refs")
        return "\n".join(lines)


# =============================================================================
# Helpers
# =============================================================================

def _is_region_key(key: Any) -> bool:
    if isinstance(key, slice):
        return True
    return isinstance(key, tuple) and any(isinstance(k, slice) for k in key)


def _slice_bounds(key: Any, size: int) -> Tuple[int, int]:
    """Half-open ``[start, stop)`` covered by a unit-step slice or single index."""
    if isinstance(key, slice):
        start, stop, step = key.indices(size)
        if step != 1:
            raise ShapeMismatchError("Only unit-step slices can form a view")
        return start, max(start, stop)
    if isinstance(key, bool) or not isinstance(key, numbers.Integral):
        raise TypeMismatchError(
            f"no implicit conversion of {type(key).__name__} into Integer"
        )
    if not 0 <= key < size:
        raise OutOfRangeError(f"Index {key} out of range [0, {size})")
    return int(key), int(key) + 1



__all__ = ["Mat"]

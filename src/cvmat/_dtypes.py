"""
cvmat DTypes - Element Type Definitions

Defines matrix depths, element type tags (depth x channel count) and the
numeric kinds that perform typed element reads and writes. Every per-element
code path dispatches on depth exactly once, through ``kind_of``.
"""

from __future__ import annotations

import ctypes
import math
from ctypes import c_double, c_float, c_int8, c_int16, c_int32, c_uint8, c_uint16
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional, Sequence, Tuple, Type, Union

import numpy as np

from .error import ShapeMismatchError, TypeMismatchError, UnsupportedDepthError


# =============================================================================
# Depth Enumeration
# =============================================================================

class Depth(IntEnum):
    """
    Element depth codes, numerically identical to OpenCV's.

    ``CV_16F`` is recognised (so half-float images can be carried around)
    but is not one of the supported numeric kinds for element access.
    """
    CV_8U = 0      # 8-bit unsigned
    CV_8S = 1      # 8-bit signed
    CV_16U = 2     # 16-bit unsigned
    CV_16S = 3     # 16-bit signed
    CV_32S = 4     # 32-bit signed
    CV_32F = 5     # 32-bit float
    CV_64F = 6     # 64-bit float
    CV_16F = 7     # 16-bit float (carried, not accessed)

    @property
    def itemsize(self) -> int:
        """Size in bytes of one channel value."""
        return _DEPTH_INFO[self]["size"]

    @property
    def np_dtype(self) -> np.dtype:
        """Corresponding numpy dtype."""
        return np.dtype(_DEPTH_INFO[self]["numpy"])

    @property
    def is_float(self) -> bool:
        return self in (Depth.CV_32F, Depth.CV_64F, Depth.CV_16F)

    @property
    def is_supported(self) -> bool:
        """Whether elements of this depth can be read and written."""
        return self in _KINDS

    @classmethod
    def from_numpy(cls, dtype: Any) -> "Depth":
        """Get Depth from a numpy dtype (native or byte-swapped)."""
        dtype = np.dtype(dtype)
        for depth, info in _DEPTH_INFO.items():
            if np.dtype(info["numpy"]) == dtype.newbyteorder("="):
                return depth
        raise UnsupportedDepthError(f"No matrix depth for numpy dtype {dtype}")


# Depth information table
_DEPTH_INFO: Dict[Depth, Dict[str, Any]] = {
    Depth.CV_8U: {"size": 1, "numpy": np.uint8, "char": "8U"},
    Depth.CV_8S: {"size": 1, "numpy": np.int8, "char": "8S"},
    Depth.CV_16U: {"size": 2, "numpy": np.uint16, "char": "16U"},
    Depth.CV_16S: {"size": 2, "numpy": np.int16, "char": "16S"},
    Depth.CV_32S: {"size": 4, "numpy": np.int32, "char": "32S"},
    Depth.CV_32F: {"size": 4, "numpy": np.float32, "char": "32F"},
    Depth.CV_64F: {"size": 8, "numpy": np.float64, "char": "64F"},
    Depth.CV_16F: {"size": 2, "numpy": np.float16, "char": "16F"},
}

CV_8U = Depth.CV_8U
CV_8S = Depth.CV_8S
CV_16U = Depth.CV_16U
CV_16S = Depth.CV_16S
CV_32S = Depth.CV_32S
CV_32F = Depth.CV_32F
CV_64F = Depth.CV_64F
CV_16F = Depth.CV_16F


# =============================================================================
# Numeric Kinds
# =============================================================================

class NumericKind:
    """
    Typed access to one depth's values inside a raw byte buffer.

    Subclasses fix the C storage type; callers never branch on depth
    themselves.
    """

    def __init__(self, depth: Depth, ctype: Type):
        self.depth = depth
        self.ctype = ctype
        self.np_dtype = depth.np_dtype
        self.itemsize = ctypes.sizeof(ctype)

    def narrow(self, value: float) -> Any:
        """Convert a double to this kind's storage value (C cast rules)."""
        raise NotImplementedError

    def saturate(self, values: Any) -> np.ndarray:
        """Convert an array of doubles to this kind, clamping to range."""
        raise NotImplementedError

    def read(self, buf: np.ndarray, offset: int, count: int) -> Tuple[float, ...]:
        """Read ``count`` consecutive values starting at byte ``offset``."""
        values = (self.ctype * count).from_buffer(buf, offset)
        return tuple(float(v) for v in values)

    def write(self, buf: np.ndarray, offset: int, values: Sequence[float]) -> None:
        """Write ``values`` consecutively starting at byte ``offset``."""
        target = (self.ctype * len(values)).from_buffer(buf, offset)
        for i, value in enumerate(values):
            target[i] = self.narrow(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.depth.name})"


class IntegerKind(NumericKind):
    """Fixed-width integer storage: truncate toward zero, then wrap."""

    def __init__(self, depth: Depth, ctype: Type, signed: bool):
        super().__init__(depth, ctype)
        self.signed = signed
        self.bits = self.itemsize * 8
        info = np.iinfo(self.np_dtype)
        self.min = int(info.min)
        self.max = int(info.max)

    def narrow(self, value: float) -> int:
        value = float(value)
        if not math.isfinite(value):
            return 0
        wrapped = int(math.trunc(value)) & ((1 << self.bits) - 1)
        if self.signed and wrapped >= 1 << (self.bits - 1):
            wrapped -= 1 << self.bits
        return wrapped

    def saturate(self, values: Any) -> np.ndarray:
        values = np.nan_to_num(np.asarray(values, dtype=np.float64), nan=0.0)
        return np.clip(np.rint(values), self.min, self.max).astype(self.np_dtype)


class FloatKind(NumericKind):
    """IEEE floating point storage."""

    def narrow(self, value: float) -> float:
        return float(value)

    def saturate(self, values: Any) -> np.ndarray:
        return np.asarray(values, dtype=np.float64).astype(self.np_dtype)


_KINDS: Dict[Depth, NumericKind] = {
    Depth.CV_8U: IntegerKind(Depth.CV_8U, c_uint8, signed=False),
    Depth.CV_8S: IntegerKind(Depth.CV_8S, c_int8, signed=True),
    Depth.CV_16U: IntegerKind(Depth.CV_16U, c_uint16, signed=False),
    Depth.CV_16S: IntegerKind(Depth.CV_16S, c_int16, signed=True),
    Depth.CV_32S: IntegerKind(Depth.CV_32S, c_int32, signed=True),
    Depth.CV_32F: FloatKind(Depth.CV_32F, c_float),
    Depth.CV_64F: FloatKind(Depth.CV_64F, c_double),
}


def kind_of(depth: Union[Depth, int]) -> NumericKind:
    """
    Get the numeric kind for a depth.

    Raises:
        UnsupportedDepthError: If depth is not one of the seven supported kinds
    """
    try:
        return _KINDS[Depth(depth)]
    except (KeyError, ValueError):
        raise UnsupportedDepthError(f"Unsupported depth: {depth}") from None


# =============================================================================
# Element Type Tags
# =============================================================================

CV_CN_MAX = 512
CV_CN_SHIFT = 3
CV_DEPTH_MAX = 1 << CV_CN_SHIFT
CV_MAT_DEPTH_MASK = CV_DEPTH_MAX - 1


def CV_MAKETYPE(depth: int, cn: int) -> int:
    """Combine depth and channel count into an OpenCV type code."""
    return (int(depth) & CV_MAT_DEPTH_MASK) + ((int(cn) - 1) << CV_CN_SHIFT)


@dataclass(frozen=True)
class MatType:
    """
    Element type of a matrix: depth plus channel count.

    Attributes:
        depth: Per-channel numeric depth
        channels: Number of interleaved channels (1..512)
    """
    depth: Depth
    channels: int = 1

    def __post_init__(self):
        object.__setattr__(self, "depth", Depth(self.depth))
        if not 1 <= self.channels <= CV_CN_MAX:
            raise ShapeMismatchError(
                f"Channel count must be in [1, {CV_CN_MAX}], got {self.channels}"
            )

    @property
    def code(self) -> int:
        """OpenCV type code (e.g. 16 for CV_8UC3)."""
        return CV_MAKETYPE(self.depth, self.channels)

    @property
    def elem_size1(self) -> int:
        """Size in bytes of one channel value."""
        return self.depth.itemsize

    @property
    def elem_size(self) -> int:
        """Size in bytes of one element (all channels)."""
        return self.depth.itemsize * self.channels

    @property
    def name(self) -> str:
        return f"CV_{_DEPTH_INFO[self.depth]['char']}C{self.channels}"

    @classmethod
    def from_code(cls, code: int) -> "MatType":
        """Decode an OpenCV type code."""
        if isinstance(code, bool) or not isinstance(code, (int, np.integer)) or code < 0:
            raise TypeMismatchError(f"Invalid matrix type: {code!r}")
        code = int(code)
        return cls(Depth(code & CV_MAT_DEPTH_MASK), (code >> CV_CN_SHIFT) + 1)

    def __int__(self) -> int:
        return self.code

    def __index__(self) -> int:
        return self.code

    def __str__(self) -> str:
        return self.name


def as_mat_type(value: Union[MatType, Depth, int, None],
                default: Optional[MatType] = None) -> MatType:
    """
    Validate and normalize a matrix type argument.

    Args:
        value: ``MatType``, ``Depth`` (one channel), integer type code, or None
        default: Type returned when value is None

    Returns:
        Validated MatType
    """
    if value is None:
        if default is None:
            raise TypeMismatchError("A matrix type is required")
        return default
    if isinstance(value, MatType):
        return value
    if isinstance(value, Depth):
        return MatType(value, 1)
    return MatType.from_code(value)


def CV_8UC(n: int) -> MatType:
    return MatType(Depth.CV_8U, n)


def CV_8SC(n: int) -> MatType:
    return MatType(Depth.CV_8S, n)


def CV_16UC(n: int) -> MatType:
    return MatType(Depth.CV_16U, n)


def CV_16SC(n: int) -> MatType:
    return MatType(Depth.CV_16S, n)


def CV_32SC(n: int) -> MatType:
    return MatType(Depth.CV_32S, n)


def CV_32FC(n: int) -> MatType:
    return MatType(Depth.CV_32F, n)


def CV_64FC(n: int) -> MatType:
    return MatType(Depth.CV_64F, n)


CV_8UC1, CV_8UC2, CV_8UC3, CV_8UC4 = (CV_8UC(n) for n in range(1, 5))
CV_8SC1, CV_8SC2, CV_8SC3, CV_8SC4 = (CV_8SC(n) for n in range(1, 5))
CV_16UC1, CV_16UC2, CV_16UC3, CV_16UC4 = (CV_16UC(n) for n in range(1, 5))
CV_16SC1, CV_16SC2, CV_16SC3, CV_16SC4 = (CV_16SC(n) for n in range(1, 5))
CV_32SC1, CV_32SC2, CV_32SC3, CV_32SC4 = (CV_32SC(n) for n in range(1, 5))
CV_32FC1, CV_32FC2, CV_32FC3, CV_32FC4 = (CV_32FC(n) for n in range(1, 5))
CV_64FC1, CV_64FC2, CV_64FC3, CV_64FC4 = (CV_64FC(n) for n in range(1, 5))
CV_16FC1, CV_16FC2, CV_16FC3, CV_16FC4 = (MatType(Depth.CV_16F, n) for n in range(1, 5))

TYPE_CONSTANTS: Dict[str, MatType] = {
    t.name: t for t in (
        CV_8UC1, CV_8UC2, CV_8UC3, CV_8UC4,
        CV_8SC1, CV_8SC2, CV_8SC3, CV_8SC4,
        CV_16UC1, CV_16UC2, CV_16UC3, CV_16UC4,
        CV_16SC1, CV_16SC2, CV_16SC3, CV_16SC4,
        CV_32SC1, CV_32SC2, CV_32SC3, CV_32SC4,
        CV_32FC1, CV_32FC2, CV_32FC3, CV_32FC4,
        CV_64FC1, CV_64FC2, CV_64FC3, CV_64FC4,
        CV_16FC1, CV_16FC2, CV_16FC3, CV_16FC4,
    )
}


__all__ = [
    "Depth",
    "NumericKind",
    "IntegerKind",
    "FloatKind",
    "kind_of",
    "MatType",
    "as_mat_type",
    "CV_MAKETYPE",
    "CV_CN_MAX",
    "CV_8U", "CV_8S", "CV_16U", "CV_16S", "CV_32S", "CV_32F", "CV_64F", "CV_16F",
    "CV_8UC", "CV_8SC", "CV_16UC", "CV_16SC", "CV_32SC", "CV_32FC", "CV_64FC",
    "TYPE_CONSTANTS",
    "CV_8UC1", "CV_8UC2", "CV_8UC3", "CV_8UC4",
    "CV_8SC1", "CV_8SC2", "CV_8SC3", "CV_8SC4",
    "CV_16UC1", "CV_16UC2", "CV_16UC3", "CV_16UC4",
    "CV_16SC1", "CV_16SC2", "CV_16SC3", "CV_16SC4",
    "CV_32SC1", "CV_32SC2", "CV_32SC3", "CV_32SC4",
    "CV_32FC1", "CV_32FC2", "CV_32FC3", "CV_32FC4",
    "CV_64FC1", "CV_64FC2", "CV_64FC3", "CV_64FC4",
    "CV_16FC1", "CV_16FC2", "CV_16FC3", "CV_16FC4",
]

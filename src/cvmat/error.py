"""
Error handling for cvmat.

Core operations never raise on their own failure paths: they produce a
``Result`` holding either a value or a typed error. The public surface
(``Mat`` methods and module-level functions) turns failed results into
exceptions with ``check_result``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, Type, TypeVar


# =============================================================================
# Error Codes
# =============================================================================

# Success
CVMAT_OK = 0

# General errors (1-9)
CVMAT_ERROR_UNKNOWN = 1
CVMAT_ERROR_OUT_OF_MEMORY = 3

# Argument errors (10-19)
CVMAT_ERROR_SHAPE_MISMATCH = 11
CVMAT_ERROR_OUT_OF_BOUNDS = 13
CVMAT_ERROR_INDEX_OUT_OF_RANGE = 14

# Type errors (20-29)
CVMAT_ERROR_UNSUPPORTED_DEPTH = 20
CVMAT_ERROR_TYPE_MISMATCH = 21

# I/O errors (30-39)
CVMAT_ERROR_IO_ERROR = 30
CVMAT_ERROR_DECODE_ERROR = 33
CVMAT_ERROR_ENCODE_ERROR = 34

# Kernel errors (40-49)
CVMAT_ERROR_KERNEL = 40


# Error code to message mapping
_ERROR_MESSAGES = {
    CVMAT_OK: "Success",
    CVMAT_ERROR_UNKNOWN: "Unknown error",
    CVMAT_ERROR_OUT_OF_MEMORY: "Out of memory",
    CVMAT_ERROR_SHAPE_MISMATCH: "Shape mismatch",
    CVMAT_ERROR_OUT_OF_BOUNDS: "Region out of bounds",
    CVMAT_ERROR_INDEX_OUT_OF_RANGE: "Index out of range",
    CVMAT_ERROR_UNSUPPORTED_DEPTH: "Unsupported depth",
    CVMAT_ERROR_TYPE_MISMATCH: "Type mismatch",
    CVMAT_ERROR_IO_ERROR: "I/O error",
    CVMAT_ERROR_DECODE_ERROR: "Failed to decode image",
    CVMAT_ERROR_ENCODE_ERROR: "Failed to encode image",
    CVMAT_ERROR_KERNEL: "Kernel error",
}


# =============================================================================
# Exception Classes
# =============================================================================

class CvMatError(Exception):
    """
    Base exception for all cvmat errors.

    Every subclass carries a default code from the table above, so
    ``except CvMatError`` catches anything this package raises while the
    builtin base of each subclass (``IndexError``, ``TypeError``, ...)
    keeps ordinary Python handlers working.
    """

    default_code = CVMAT_ERROR_UNKNOWN

    # Re-export error codes as class attributes for convenience
    OK = CVMAT_OK
    ERROR_UNKNOWN = CVMAT_ERROR_UNKNOWN
    ERROR_OUT_OF_MEMORY = CVMAT_ERROR_OUT_OF_MEMORY
    ERROR_SHAPE_MISMATCH = CVMAT_ERROR_SHAPE_MISMATCH
    ERROR_OUT_OF_BOUNDS = CVMAT_ERROR_OUT_OF_BOUNDS
    ERROR_INDEX_OUT_OF_RANGE = CVMAT_ERROR_INDEX_OUT_OF_RANGE
    ERROR_UNSUPPORTED_DEPTH = CVMAT_ERROR_UNSUPPORTED_DEPTH
    ERROR_TYPE_MISMATCH = CVMAT_ERROR_TYPE_MISMATCH
    ERROR_IO_ERROR = CVMAT_ERROR_IO_ERROR
    ERROR_DECODE_ERROR = CVMAT_ERROR_DECODE_ERROR
    ERROR_ENCODE_ERROR = CVMAT_ERROR_ENCODE_ERROR
    ERROR_KERNEL = CVMAT_ERROR_KERNEL

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        """
        Create cvmat exception.

        Args:
            message: Optional detailed message (taken from the code table if not provided)
            code: Error code, defaults to the class's ``default_code``
        """
        if code is None:
            code = self.default_code
        self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "CvMatError":
        """Create the exception matching ``code`` with optional context."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        kind = _CODE_TO_CLASS.get(code, cls)
        return kind(msg, code)


class AllocationError(CvMatError, MemoryError):
    """Buffer allocation failed or the requested size is too large."""
    default_code = CVMAT_ERROR_OUT_OF_MEMORY


class BoundsError(CvMatError, IndexError):
    """A view region or diagonal lies outside its parent matrix."""
    default_code = CVMAT_ERROR_OUT_OF_BOUNDS


class OutOfRangeError(BoundsError):
    """An element index is outside ``[0, size)`` in some dimension."""
    default_code = CVMAT_ERROR_INDEX_OUT_OF_RANGE


class UnsupportedDepthError(CvMatError, TypeError):
    """The matrix depth is not one of the seven supported numeric kinds."""
    default_code = CVMAT_ERROR_UNSUPPORTED_DEPTH


class TypeMismatchError(CvMatError, TypeError):
    """An operand has the wrong Python type or element type."""
    default_code = CVMAT_ERROR_TYPE_MISMATCH


class ShapeMismatchError(CvMatError, ValueError):
    """Operand dimensions or channel counts are incompatible."""
    default_code = CVMAT_ERROR_SHAPE_MISMATCH


class DecodeError(CvMatError, ValueError):
    """An encoded byte stream could not be decoded."""
    default_code = CVMAT_ERROR_DECODE_ERROR


class EncodeError(CvMatError, ValueError):
    """A matrix could not be encoded with the requested format or parameters."""
    default_code = CVMAT_ERROR_ENCODE_ERROR


class ImageIOError(CvMatError, OSError):
    """An image file could not be read."""
    default_code = CVMAT_ERROR_IO_ERROR


_CODE_TO_CLASS: Dict[int, Type[CvMatError]] = {
    CVMAT_ERROR_OUT_OF_MEMORY: AllocationError,
    CVMAT_ERROR_SHAPE_MISMATCH: ShapeMismatchError,
    CVMAT_ERROR_OUT_OF_BOUNDS: BoundsError,
    CVMAT_ERROR_INDEX_OUT_OF_RANGE: OutOfRangeError,
    CVMAT_ERROR_UNSUPPORTED_DEPTH: UnsupportedDepthError,
    CVMAT_ERROR_TYPE_MISMATCH: TypeMismatchError,
    CVMAT_ERROR_IO_ERROR: ImageIOError,
    CVMAT_ERROR_DECODE_ERROR: DecodeError,
    CVMAT_ERROR_ENCODE_ERROR: EncodeError,
}


# =============================================================================
# Result Type
# =============================================================================

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a core operation: either a value or a typed error.

    Attributes:
        value: The produced value (``None`` on failure)
        error: The error describing the failure (``None`` on success)
    """
    value: Optional[T] = None
    error: Optional[CvMatError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: CvMatError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def code(self) -> int:
        return CVMAT_OK if self.error is None else self.error.code

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value


# =============================================================================
# Error Checking Functions
# =============================================================================

def check_result(result: Result[Any], context: str = "") -> Any:
    """
    Check a core result and raise its error if it failed.

    Args:
        result: Result produced by a core operation
        context: Optional context prepended to the error message

    Returns:
        The result's value on success

    Raises:
        CvMatError: The stored error (subclass preserved) on failure
    """
    if result.ok:
        return result.value

    error = result.error
    if context and not error.message.startswith(f"{context}:"):
        error.message = f"{context}: {error.message}"
        error.args = (error.message,)
    raise error


__all__ = [
    # Codes
    "CVMAT_OK",
    "CVMAT_ERROR_UNKNOWN",
    "CVMAT_ERROR_OUT_OF_MEMORY",
    "CVMAT_ERROR_SHAPE_MISMATCH",
    "CVMAT_ERROR_OUT_OF_BOUNDS",
    "CVMAT_ERROR_INDEX_OUT_OF_RANGE",
    "CVMAT_ERROR_UNSUPPORTED_DEPTH",
    "CVMAT_ERROR_TYPE_MISMATCH",
    "CVMAT_ERROR_IO_ERROR",
    "CVMAT_ERROR_DECODE_ERROR",
    "CVMAT_ERROR_ENCODE_ERROR",
    "CVMAT_ERROR_KERNEL",
    # Exceptions
    "CvMatError",
    "AllocationError",
    "BoundsError",
    "OutOfRangeError",
    "UnsupportedDepthError",
    "TypeMismatchError",
    "ShapeMismatchError",
    "DecodeError",
    "EncodeError",
    "ImageIOError",
    # Results
    "Result",
    "check_result",
]

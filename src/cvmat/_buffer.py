"""
Shared Buffer - Reference-Counted Byte Storage

A ``SharedBuffer`` is the only thing that owns matrix bytes. Matrix handles
hold counted references to it; views and header copies share one buffer,
so a write through any of them is visible through all of them. The bytes
are dropped when the last reference is released.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Optional

import numpy as np

from ._config import config
from .error import AllocationError


logger = logging.getLogger("cvmat.buffer")


# =============================================================================
# Ownership
# =============================================================================

class Ownership(Enum):
    """How a matrix handle came by its buffer.

    Attributes:
        OWNED: The handle allocated the buffer (construction, factories,
               operation results, ``clone``).
        BORROWED: The buffer wraps a caller's numpy array
                  (``Mat.from_numpy(arr, copy=False)``); writes reach it.
        VIEW: The handle shares a buffer allocated for another handle
              (region views, ``diag``, header copies).
    """
    OWNED = "owned"
    BORROWED = "borrowed"
    VIEW = "view"


# =============================================================================
# Shared Buffer
# =============================================================================

class SharedBuffer:
    """
    Aligned byte arena with a live-reference count.

    The count starts at zero; every handle that stores the buffer calls
    ``acquire`` once and ``release`` once. Increments and decrements are
    guarded by a lock so handles may be dropped from any thread.

    Attributes:
        nbytes (int): Usable size in bytes
        refcount (int): Number of live handle references
        data (np.ndarray): 1-D uint8 view of the bytes (raises once freed)

    Example:
        >>> buf = SharedBuffer(64)
        >>> buf.acquire().refcount
        1
        >>> buf.release()
        >>> buf.is_released
        True
    """

    __slots__ = ("_nbytes", "_data", "_owner", "_refcount", "_lock")

    def __init__(self, nbytes: int, align: Optional[int] = None,
                 zero: Optional[bool] = None):
        """
        Allocate a buffer.

        Args:
            nbytes: Number of bytes
            align: Byte alignment of the first byte (default: config.memory.alignment)
            zero: Zero-fill the bytes (default: config.memory.zero_fill)

        Raises:
            AllocationError: If nbytes exceeds config.memory.max_buffer_bytes
                or the allocation itself fails
        """
        memory = config.memory
        if align is None:
            align = memory.alignment
        if zero is None:
            zero = memory.zero_fill
        if nbytes < 0:
            raise AllocationError(f"Buffer size must be non-negative, got {nbytes}")
        if nbytes > memory.max_buffer_bytes:
            raise AllocationError(
                f"Requested {nbytes} bytes exceeds limit of {memory.max_buffer_bytes}"
            )

        # Allocate extra space for alignment
        extra = nbytes + max(align, 1)
        try:
            raw = np.zeros(extra, dtype=np.uint8) if zero else np.empty(extra, dtype=np.uint8)
        except (MemoryError, ValueError, OverflowError) as e:
            raise AllocationError(f"Failed to allocate {nbytes} bytes: {e}") from e

        addr = raw.ctypes.data
        offset = (-addr) % align if align > 1 else 0

        self._nbytes = nbytes
        self._data = raw[offset:offset + nbytes]
        self._owner = raw  # Keep reference to prevent GC
        self._refcount = 0
        self._lock = threading.Lock()
        logger.debug("allocated %d bytes (align=%d, zero=%s)", nbytes, align, zero)

    @classmethod
    def adopt(cls, array: np.ndarray) -> "SharedBuffer":
        """
        Wrap the bytes of a C-contiguous, writable numpy array without copying.

        Used to take ownership of kernel outputs and borrowed caller arrays.
        """
        if not (array.flags.c_contiguous and array.flags.writeable):
            raise AllocationError("Only C-contiguous writable arrays can be adopted")
        self = cls.__new__(cls)
        self._nbytes = array.nbytes
        self._data = array.reshape(-1).view(np.uint8)
        self._owner = array
        self._refcount = 0
        self._lock = threading.Lock()
        return self

    # -------------------------------------------------------------------------
    # Reference Counting
    # -------------------------------------------------------------------------

    def acquire(self) -> "SharedBuffer":
        """Register one more live reference; returns self."""
        with self._lock:
            if self._data is None:
                raise AllocationError("Cannot reference a released buffer")
            self._refcount += 1
        return self

    def release(self) -> None:
        """
        Drop one reference, freeing the bytes when none remain.

        Calling it on an already-freed buffer is a no-op.
        """
        with self._lock:
            if self._data is None:
                return
            self._refcount -= 1
            if self._refcount > 0:
                return
            nbytes = self._nbytes
            self._refcount = 0
            self._data = None
            self._owner = None
        logger.debug("freed %d bytes", nbytes)

    @property
    def refcount(self) -> int:
        return self._refcount

    @property
    def is_released(self) -> bool:
        return self._data is None

    # -------------------------------------------------------------------------
    # Data Access
    # -------------------------------------------------------------------------

    @property
    def nbytes(self) -> int:
        return self._nbytes

    @property
    def data(self) -> np.ndarray:
        if self._data is None:
            raise AllocationError("Buffer has been released")
        return self._data

    @property
    def address(self) -> int:
        """Address of the first byte."""
        return self.data.ctypes.data

    def __repr__(self) -> str:
        state = "released" if self._data is None else f"refcount={self._refcount}"
        return f"SharedBuffer(nbytes={self._nbytes}, {state})"


def release_buffer(buffer: Optional[SharedBuffer]) -> None:
    """Release one reference to ``buffer``; ``None`` is accepted and ignored."""
    if buffer is not None:
        buffer.release()


__all__ = ["Ownership", "SharedBuffer", "release_buffer"]

"""
Image codec wrappers around cv2's encoders and decoders.

Every failure reported by the codec collaborator is surfaced as the
matching codec error (``DecodeError``, ``EncodeError``, ``ImageIOError``)
rather than by OpenCV status code.
"""

from __future__ import annotations

import numbers
import os
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Type, Union

import cv2
import numpy as np

from ._kernel import as_array, kernel_call, wrap_array
from ._ops import as_int, require_2d, require_mat
from .error import DecodeError, EncodeError, ImageIOError, TypeMismatchError

if TYPE_CHECKING:
    from ._mat import Mat


# imread / imdecode flags
IMREAD_UNCHANGED = cv2.IMREAD_UNCHANGED
IMREAD_GRAYSCALE = cv2.IMREAD_GRAYSCALE
IMREAD_COLOR = cv2.IMREAD_COLOR
IMREAD_ANYDEPTH = cv2.IMREAD_ANYDEPTH
IMREAD_ANYCOLOR = cv2.IMREAD_ANYCOLOR

# imwrite / imencode parameters
IMWRITE_JPEG_QUALITY = cv2.IMWRITE_JPEG_QUALITY
IMWRITE_PNG_COMPRESSION = cv2.IMWRITE_PNG_COMPRESSION
IMWRITE_WEBP_QUALITY = cv2.IMWRITE_WEBP_QUALITY


def _as_bytes(buf: Any) -> np.ndarray:
    """Encoded stream as a 1-D uint8 array (sequences of ints are masked to bytes)."""
    if isinstance(buf, (bytes, bytearray, memoryview)):
        return np.frombuffer(bytes(buf), dtype=np.uint8)
    if isinstance(buf, np.ndarray):
        return np.ascontiguousarray(buf, dtype=np.uint8).reshape(-1)
    if isinstance(buf, (list, tuple)):
        values = []
        for b in buf:
            if isinstance(b, bool) or not isinstance(b, numbers.Integral):
                raise TypeMismatchError(
                    f"no implicit conversion of {type(b).__name__} into Integer"
                )
            values.append(int(b) & 0xFF)
        return np.array(values, dtype=np.uint8)
    raise TypeMismatchError(
        f"no implicit conversion of {type(buf).__name__} into Array"
    )


def _as_params(params: Optional[Sequence[int]]) -> List[int]:
    """Validate an encoder parameter list of ``(key, value)`` integer pairs."""
    if params is None:
        return []
    if isinstance(params, (str, bytes)) or not isinstance(params, (list, tuple)):
        raise EncodeError(f"Invalid parameter list: {params!r}")
    for p in params:
        if isinstance(p, bool) or not isinstance(p, numbers.Integral):
            raise EncodeError(f"Invalid parameter list: {params!r}")
    if len(params) % 2:
        raise EncodeError("Encoder parameters must be key/value pairs")
    return [int(p) for p in params]


def _as_path(filename: Any) -> str:
    if not isinstance(filename, (str, os.PathLike)):
        raise TypeMismatchError(
            f"no implicit conversion of {type(filename).__name__} into String"
        )
    return os.fspath(filename)


def _as_extension(ext: str) -> str:
    if not isinstance(ext, str) or not ext.strip("."):
        raise EncodeError(f"Invalid file extension: {ext!r}")
    return ext if ext.startswith(".") else f".{ext}"


# =============================================================================
# Decoding
# =============================================================================

@kernel_call("imdecode", error_kind=DecodeError)
def imdecode(cls: Type["Mat"], buf: Any, flags: int = IMREAD_COLOR) -> "Mat":
    """
    Decode an in-memory image.

    Raises:
        DecodeError: If the stream is empty or not a recognised image
    """
    flags = as_int(flags, "flags")
    data = _as_bytes(buf)
    if data.size == 0:
        raise DecodeError("Failed to decode image: empty buffer")
    image = cv2.imdecode(data, flags)
    if image is None or image.size == 0:
        raise DecodeError("Failed to decode image")
    return wrap_array(image, cls)


@kernel_call("imread", error_kind=ImageIOError)
def imread(cls: Type["Mat"], filename: Union[str, os.PathLike],
           flags: int = IMREAD_COLOR) -> "Mat":
    """
    Load an image file.

    Raises:
        ImageIOError: If the file is missing, unreadable or not an image
    """
    flags = as_int(flags, "flags")
    path = _as_path(filename)
    image = cv2.imread(path, flags)
    if image is None or image.size == 0:
        raise ImageIOError(f"Failed to load image: {path}")
    return wrap_array(image, cls)


# =============================================================================
# Encoding
# =============================================================================

@kernel_call("imencode", error_kind=EncodeError)
def imencode(mat: "Mat", ext: str, params: Optional[Sequence[int]] = None) -> bytes:
    """
    Encode a matrix with the codec selected by ``ext`` (".png", ".jpg", ...).

    Raises:
        EncodeError: On unknown extension, invalid parameters or an
            unencodable matrix
    """
    require_mat(mat)
    require_2d(mat)
    ext = _as_extension(ext)
    params = _as_params(params)
    if mat.is_empty:
        raise EncodeError("Cannot encode an empty matrix")
    ok, buf = cv2.imencode(ext, as_array(mat), params)
    if not ok:
        raise EncodeError(f"Failed to encode image as {ext}")
    return buf.tobytes()


@kernel_call("imwrite", error_kind=EncodeError)
def imwrite(filename: Union[str, os.PathLike], mat: "Mat",
            params: Optional[Sequence[int]] = None) -> bool:
    """
    Write a matrix to a file; returns whether the codec reported success.

    Raises:
        EncodeError: On unknown extension, invalid parameters or an empty matrix
    """
    require_mat(mat)
    require_2d(mat)
    params = _as_params(params)
    if mat.is_empty:
        raise EncodeError("Cannot write an empty matrix")
    return bool(cv2.imwrite(_as_path(filename), as_array(mat), params))


__all__ = [
    "imdecode",
    "imread",
    "imencode",
    "imwrite",
    "IMREAD_UNCHANGED",
    "IMREAD_GRAYSCALE",
    "IMREAD_COLOR",
    "IMREAD_ANYDEPTH",
    "IMREAD_ANYCOLOR",
    "IMWRITE_JPEG_QUALITY",
    "IMWRITE_PNG_COMPRESSION",
    "IMWRITE_WEBP_QUALITY",
]

"""
cvmat - Matrix Handles over OpenCV

Dense, dynamically typed matrices with OpenCV's sharing semantics:
- Reference-counted buffers shared by views and header copies
- Seven numeric depths x 1..512 channels, dispatched at runtime
- Element access with C-style narrowing (300 in CV_8U reads back 44)
- Saturating arithmetic, bitwise ops, image processing and drawing
  delegated to cv2
- Typed errors (``ShapeMismatchError``, ``DecodeError``, ...)

Architecture:
    ┌──────────────────────────────────────────────┐
    │   Mat (header: shape, steps, type, offset)   │
    ├──────────────────────────────────────────────┤
    │  SharedBuffer: aligned bytes + refcount      │
    │  Ownership: OWNED | BORROWED | VIEW          │
    └──────────────────────────────────────────────┘

Example:
    >>> import cvmat
    >>> m = cvmat.Mat(2, 2, cvmat.CV_8UC1)
    >>> m.set(0, 0, (5,))
    >>> m2 = m + 3
    >>> m2[0, 0], m2[1, 1], m[1, 1]
    (Scalar(8.0), Scalar(3.0), Scalar(0.0))
    >>>
    >>> roi = cvmat.Mat(m, cvmat.Rect(1, 1, 1, 1))   # shares m's buffer
    >>> roi[0, 0] = 9
    >>> m[1, 1]
    Scalar(9.0)
"""

__version__ = '0.1.0'

from typing import Any, Optional, Sequence

from ._buffer import Ownership, SharedBuffer, release_buffer
from ._codec import (
    IMREAD_ANYCOLOR,
    IMREAD_ANYDEPTH,
    IMREAD_COLOR,
    IMREAD_GRAYSCALE,
    IMREAD_UNCHANGED,
    IMWRITE_JPEG_QUALITY,
    IMWRITE_PNG_COMPRESSION,
    IMWRITE_WEBP_QUALITY,
)
from ._config import (
    CvMatConfig,
    DefaultsConfig,
    DisplayConfig,
    MemoryConfig,
    config,
    get_config,
    set_memory,
)
from ._drawing import FILLED, LINE_4, LINE_8, LINE_AA
from ._dtypes import (
    CV_8S, CV_8U, CV_16F, CV_16S, CV_16U, CV_32F, CV_32S, CV_64F,
    CV_8SC1, CV_8SC2, CV_8SC3, CV_8SC4,
    CV_8UC1, CV_8UC2, CV_8UC3, CV_8UC4,
    CV_16SC1, CV_16SC2, CV_16SC3, CV_16SC4,
    CV_16UC1, CV_16UC2, CV_16UC3, CV_16UC4,
    CV_32FC1, CV_32FC2, CV_32FC3, CV_32FC4,
    CV_32SC1, CV_32SC2, CV_32SC3, CV_32SC4,
    CV_64FC1, CV_64FC2, CV_64FC3, CV_64FC4,
    CV_CN_MAX,
    CV_MAKETYPE,
    CV_8SC, CV_8UC, CV_16SC, CV_16UC, CV_32FC, CV_32SC, CV_64FC,
    Depth,
    MatType,
    kind_of,
)
from ._geometry import Point, Rect, Size
from ._imgproc import (
    ADAPTIVE_THRESH_GAUSSIAN_C,
    ADAPTIVE_THRESH_MEAN_C,
    BORDER_CONSTANT,
    BORDER_DEFAULT,
    BORDER_REFLECT,
    BORDER_REFLECT_101,
    BORDER_REPLICATE,
    COLOR_BGR2BGRA,
    COLOR_BGR2GRAY,
    COLOR_BGR2HSV,
    COLOR_BGR2RGB,
    COLOR_BGRA2BGR,
    COLOR_GRAY2BGR,
    COLOR_HSV2BGR,
    COLOR_RGB2BGR,
    INTER_AREA,
    INTER_CUBIC,
    INTER_LANCZOS4,
    INTER_LINEAR,
    INTER_NEAREST,
    THRESH_BINARY,
    THRESH_BINARY_INV,
    THRESH_OTSU,
    THRESH_TOZERO,
    THRESH_TOZERO_INV,
    THRESH_TRIANGLE,
    THRESH_TRUNC,
)
from ._mat import Mat
from ._scalar import Scalar
from .error import (
    AllocationError,
    BoundsError,
    CvMatError,
    DecodeError,
    EncodeError,
    ImageIOError,
    OutOfRangeError,
    Result,
    ShapeMismatchError,
    TypeMismatchError,
    UnsupportedDepthError,
    check_result,
)


# =============================================================================
# Module-level Functions
# =============================================================================

def zeros(rows: int, cols: int, mtype: Any = None) -> Mat:
    """Zero-filled matrix."""
    return Mat.zeros(rows, cols, mtype)


def ones(rows: int, cols: int, mtype: Any = None) -> Mat:
    """Matrix of ``Scalar(1)`` elements."""
    return Mat.ones(rows, cols, mtype)


def eye(rows: int, cols: int, mtype: Any = None) -> Mat:
    """Identity matrix."""
    return Mat.eye(rows, cols, mtype)


def merge(mats: Sequence[Mat]) -> Mat:
    """Interleave same-size, same-depth matrices into one multi-channel matrix."""
    return Mat.merge(mats)


def hconcat(mats: Sequence[Mat]) -> Mat:
    return Mat.hconcat(mats)


def vconcat(mats: Sequence[Mat]) -> Mat:
    return Mat.vconcat(mats)


def add_weighted(src1: Mat, alpha: float, src2: Mat, beta: float, gamma: float,
                 dtype: int = -1) -> Mat:
    """``src1*alpha + src2*beta + gamma``."""
    return Mat.add_weighted(src1, alpha, src2, beta, gamma, dtype)


def imread(filename, flags: Optional[int] = None) -> Mat:
    """Load an image file."""
    return Mat.imread(filename, flags)


def imdecode(buf: Any, flags: Optional[int] = None) -> Mat:
    """Decode an in-memory image."""
    return Mat.imdecode(buf, flags)


def imencode(ext: str, mat: Mat, params: Optional[Sequence[int]] = None) -> bytes:
    """Encode ``mat`` with the codec for ``ext``."""
    return mat.imencode(ext, params)


def imwrite(filename, mat: Mat, params: Optional[Sequence[int]] = None) -> bool:
    """Write ``mat`` to ``filename``."""
    return mat.save(filename, params)


__all__ = [
    "__version__",
    # Core classes
    "Mat",
    "Scalar",
    "Point",
    "Size",
    "Rect",
    "SharedBuffer",
    "Ownership",
    "release_buffer",
    # Types
    "Depth",
    "MatType",
    "kind_of",
    "CV_MAKETYPE",
    "CV_CN_MAX",
    "CV_8U", "CV_8S", "CV_16U", "CV_16S", "CV_32S", "CV_32F", "CV_64F", "CV_16F",
    "CV_8UC", "CV_8SC", "CV_16UC", "CV_16SC", "CV_32SC", "CV_32FC", "CV_64FC",
    "CV_8UC1", "CV_8UC2", "CV_8UC3", "CV_8UC4",
    "CV_8SC1", "CV_8SC2", "CV_8SC3", "CV_8SC4",
    "CV_16UC1", "CV_16UC2", "CV_16UC3", "CV_16UC4",
    "CV_16SC1", "CV_16SC2", "CV_16SC3", "CV_16SC4",
    "CV_32SC1", "CV_32SC2", "CV_32SC3", "CV_32SC4",
    "CV_32FC1", "CV_32FC2", "CV_32FC3", "CV_32FC4",
    "CV_64FC1", "CV_64FC2", "CV_64FC3", "CV_64FC4",
    # Functions
    "zeros",
    "ones",
    "eye",
    "merge",
    "hconcat",
    "vconcat",
    "add_weighted",
    "imread",
    "imdecode",
    "imencode",
    "imwrite",
    # Errors
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
    "Result",
    "check_result",
    # Config
    "config",
    "get_config",
    "set_memory",
    "CvMatConfig",
    "MemoryConfig",
    "DefaultsConfig",
    "DisplayConfig",
    # Constants
    "IMREAD_UNCHANGED", "IMREAD_GRAYSCALE", "IMREAD_COLOR", "IMREAD_ANYDEPTH",
    "IMREAD_ANYCOLOR",
    "IMWRITE_JPEG_QUALITY", "IMWRITE_PNG_COMPRESSION", "IMWRITE_WEBP_QUALITY",
    "BORDER_CONSTANT", "BORDER_REPLICATE", "BORDER_REFLECT", "BORDER_REFLECT_101",
    "BORDER_DEFAULT",
    "INTER_NEAREST", "INTER_LINEAR", "INTER_CUBIC", "INTER_AREA", "INTER_LANCZOS4",
    "THRESH_BINARY", "THRESH_BINARY_INV", "THRESH_TRUNC", "THRESH_TOZERO",
    "THRESH_TOZERO_INV", "THRESH_OTSU", "THRESH_TRIANGLE",
    "ADAPTIVE_THRESH_MEAN_C", "ADAPTIVE_THRESH_GAUSSIAN_C",
    "COLOR_BGR2GRAY", "COLOR_GRAY2BGR", "COLOR_BGR2RGB", "COLOR_RGB2BGR",
    "COLOR_BGR2HSV", "COLOR_HSV2BGR", "COLOR_BGR2BGRA", "COLOR_BGRA2BGR",
    "LINE_4", "LINE_8", "LINE_AA", "FILLED",
]

"""
Image-processing wrappers.

The kernels are OpenCV's; these functions only coerce arguments, hand the
matrix to cv2 as a numpy view and adopt the output as a new handle of the
source's class.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Tuple, Union

import cv2

from ._geometry import Point, as_cv_point, as_cv_size
from ._kernel import as_array, kernel_call, wrap_array
from ._ops import as_int, as_real, require_2d

if TYPE_CHECKING:
    from ._mat import Mat


BORDER_CONSTANT = cv2.BORDER_CONSTANT
BORDER_REPLICATE = cv2.BORDER_REPLICATE
BORDER_REFLECT = cv2.BORDER_REFLECT
BORDER_REFLECT_101 = cv2.BORDER_REFLECT_101
BORDER_DEFAULT = cv2.BORDER_DEFAULT

INTER_NEAREST = cv2.INTER_NEAREST
INTER_LINEAR = cv2.INTER_LINEAR
INTER_CUBIC = cv2.INTER_CUBIC
INTER_AREA = cv2.INTER_AREA
INTER_LANCZOS4 = cv2.INTER_LANCZOS4

THRESH_BINARY = cv2.THRESH_BINARY
THRESH_BINARY_INV = cv2.THRESH_BINARY_INV
THRESH_TRUNC = cv2.THRESH_TRUNC
THRESH_TOZERO = cv2.THRESH_TOZERO
THRESH_TOZERO_INV = cv2.THRESH_TOZERO_INV
THRESH_OTSU = cv2.THRESH_OTSU
THRESH_TRIANGLE = cv2.THRESH_TRIANGLE

ADAPTIVE_THRESH_MEAN_C = cv2.ADAPTIVE_THRESH_MEAN_C
ADAPTIVE_THRESH_GAUSSIAN_C = cv2.ADAPTIVE_THRESH_GAUSSIAN_C

COLOR_BGR2GRAY = cv2.COLOR_BGR2GRAY
COLOR_GRAY2BGR = cv2.COLOR_GRAY2BGR
COLOR_BGR2RGB = cv2.COLOR_BGR2RGB
COLOR_RGB2BGR = cv2.COLOR_RGB2BGR
COLOR_BGR2HSV = cv2.COLOR_BGR2HSV
COLOR_HSV2BGR = cv2.COLOR_HSV2BGR
COLOR_BGR2BGRA = cv2.COLOR_BGR2BGRA
COLOR_BGRA2BGR = cv2.COLOR_BGRA2BGR


# =============================================================================
# Derivatives and Edges
# =============================================================================

@kernel_call("sobel")
def sobel(src: "Mat", ddepth: int, dx: int, dy: int, ksize: int = 3,
          scale: float = 1.0, delta: float = 0.0,
          border_type: int = BORDER_DEFAULT) -> "Mat":
    """Sobel derivative of order (dx, dy); ``ddepth == -1`` keeps src's depth."""
    require_2d(src)
    out = cv2.Sobel(as_array(src), as_int(ddepth, "ddepth"), as_int(dx, "dx"),
                    as_int(dy, "dy"), ksize=as_int(ksize, "ksize"),
                    scale=as_real(scale, "scale"), delta=as_real(delta, "delta"),
                    borderType=as_int(border_type, "border_type"))
    return wrap_array(out, type(src))


@kernel_call("laplacian")
def laplacian(src: "Mat", ddepth: int, ksize: int = 3, scale: float = 1.0,
              delta: float = 0.0, border_type: int = BORDER_DEFAULT) -> "Mat":
    require_2d(src)
    out = cv2.Laplacian(as_array(src), as_int(ddepth, "ddepth"),
                        ksize=as_int(ksize, "ksize"), scale=as_real(scale, "scale"),
                        delta=as_real(delta, "delta"),
                        borderType=as_int(border_type, "border_type"))
    return wrap_array(out, type(src))


@kernel_call("canny")
def canny(src: "Mat", threshold1: float, threshold2: float,
          aperture_size: int = 3, l2gradient: bool = False) -> "Mat":
    """Canny edge map (8-bit, 0 or 255)."""
    require_2d(src)
    out = cv2.Canny(as_array(src), as_real(threshold1, "threshold1"),
                    as_real(threshold2, "threshold2"),
                    apertureSize=as_int(aperture_size, "aperture_size"),
                    L2gradient=bool(l2gradient))
    return wrap_array(out, type(src))


# =============================================================================
# Color and Geometry
# =============================================================================

@kernel_call("cvt_color")
def cvt_color(src: "Mat", code: int, dcn: int = 0) -> "Mat":
    require_2d(src)
    out = cv2.cvtColor(as_array(src), as_int(code, "code"), dstCn=as_int(dcn, "dcn"))
    return wrap_array(out, type(src))


@kernel_call("resize")
def resize(src: "Mat", size: Any, fx: float = 0.0, fy: float = 0.0,
           interpolation: int = INTER_LINEAR) -> "Mat":
    """
    Resize to ``size`` (width, height); a zero size means "scale by fx, fy".
    """
    require_2d(src)
    out = cv2.resize(as_array(src), as_cv_size(size), fx=as_real(fx, "fx"),
                     fy=as_real(fy, "fy"),
                     interpolation=as_int(interpolation, "interpolation"))
    return wrap_array(out, type(src))


# =============================================================================
# Smoothing
# =============================================================================

@kernel_call("blur")
def blur(src: "Mat", ksize: Any, anchor: Any = Point(-1, -1),
         border_type: int = BORDER_DEFAULT) -> "Mat":
    require_2d(src)
    out = cv2.blur(as_array(src), as_cv_size(ksize), anchor=as_cv_point(anchor),
                   borderType=as_int(border_type, "border_type"))
    return wrap_array(out, type(src))


@kernel_call("gaussian_blur")
def gaussian_blur(src: "Mat", ksize: Any, sigma_x: float, sigma_y: float = 0.0,
                  border_type: int = BORDER_DEFAULT) -> "Mat":
    require_2d(src)
    out = cv2.GaussianBlur(as_array(src), as_cv_size(ksize), as_real(sigma_x, "sigma_x"),
                           sigmaY=as_real(sigma_y, "sigma_y"),
                           borderType=as_int(border_type, "border_type"))
    return wrap_array(out, type(src))


@kernel_call("median_blur")
def median_blur(src: "Mat", ksize: int) -> "Mat":
    require_2d(src)
    out = cv2.medianBlur(as_array(src), as_int(ksize, "ksize"))
    return wrap_array(out, type(src))


# =============================================================================
# Thresholding
# =============================================================================

@kernel_call("threshold")
def threshold(src: "Mat", thresh: float, max_value: float,
              threshold_type: int) -> Union["Mat", Tuple["Mat", float]]:
    """
    Fixed-level threshold.

    Returns:
        The thresholded matrix, or ``(matrix, computed_threshold)`` when
        ``threshold_type`` includes ``THRESH_OTSU`` or ``THRESH_TRIANGLE``
    """
    require_2d(src)
    threshold_type = as_int(threshold_type, "threshold_type")
    computed, out = cv2.threshold(as_array(src), as_real(thresh, "thresh"),
                                  as_real(max_value, "max_value"), threshold_type)
    result = wrap_array(out, type(src))
    if threshold_type & (THRESH_OTSU | THRESH_TRIANGLE):
        return result, float(computed)
    return result


@kernel_call("adaptive_threshold")
def adaptive_threshold(src: "Mat", max_value: float, adaptive_method: int,
                       threshold_type: int, block_size: int, delta: float) -> "Mat":
    require_2d(src)
    out = cv2.adaptiveThreshold(as_array(src), as_real(max_value, "max_value"),
                                as_int(adaptive_method, "adaptive_method"),
                                as_int(threshold_type, "threshold_type"),
                                as_int(block_size, "block_size"),
                                as_real(delta, "delta"))
    return wrap_array(out, type(src))


__all__ = [
    "sobel",
    "laplacian",
    "canny",
    "cvt_color",
    "resize",
    "blur",
    "gaussian_blur",
    "median_blur",
    "threshold",
    "adaptive_threshold",
    "BORDER_CONSTANT", "BORDER_REPLICATE", "BORDER_REFLECT", "BORDER_REFLECT_101",
    "BORDER_DEFAULT",
    "INTER_NEAREST", "INTER_LINEAR", "INTER_CUBIC", "INTER_AREA", "INTER_LANCZOS4",
    "THRESH_BINARY", "THRESH_BINARY_INV", "THRESH_TRUNC", "THRESH_TOZERO",
    "THRESH_TOZERO_INV", "THRESH_OTSU", "THRESH_TRIANGLE",
    "ADAPTIVE_THRESH_MEAN_C", "ADAPTIVE_THRESH_GAUSSIAN_C",
    "COLOR_BGR2GRAY", "COLOR_GRAY2BGR", "COLOR_BGR2RGB", "COLOR_RGB2BGR",
    "COLOR_BGR2HSV", "COLOR_HSV2BGR", "COLOR_BGR2BGRA", "COLOR_BGRA2BGR",
]

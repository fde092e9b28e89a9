"""
Drawing wrappers: lines, circles and rectangles.

cv2 draws into its argument, so every wrapper renders onto a private
contiguous copy and writes the pixels back into the destination handle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Tuple

import cv2
import numpy as np

from ._geometry import as_cv_point
from ._kernel import as_array, kernel_call
from ._ops import as_int, as_real, require_2d
from ._scalar import Scalar, channel_values

if TYPE_CHECKING:
    from ._mat import Mat


LINE_4 = cv2.LINE_4
LINE_8 = cv2.LINE_8
LINE_AA = cv2.LINE_AA
FILLED = cv2.FILLED


def _color(value: Any) -> Tuple[float, ...]:
    """Drawing color as the 4-tuple cv2 expects."""
    if isinstance(value, (Scalar, tuple, list)):
        return Scalar.coerce(value).padded(4)
    return channel_values(value, 4)


def _draw_into(dst: "Mat", draw: Callable[[np.ndarray], Any]) -> "Mat":
    require_2d(dst)
    if dst.is_empty:
        return dst
    target = as_array(dst)
    canvas = np.array(target, copy=True, order="C")
    draw(canvas)
    np.copyto(target, canvas)
    return dst


def _style(thickness: Any, line_type: Any, shift: Any) -> dict:
    return dict(thickness=as_int(thickness, "thickness"),
                lineType=as_int(line_type, "line_type"),
                shift=as_int(shift, "shift"))


@kernel_call("line")
def line(dst: "Mat", p1: Any, p2: Any, color: Any, thickness: int = 1,
         line_type: int = LINE_8, shift: int = 0) -> "Mat":
    """Draw a segment from p1 to p2 into dst; returns dst."""
    pt1, pt2, rgba = as_cv_point(p1), as_cv_point(p2), _color(color)
    style = _style(thickness, line_type, shift)
    return _draw_into(dst, lambda img: cv2.line(img, pt1, pt2, rgba, **style))


@kernel_call("circle")
def circle(dst: "Mat", center: Any, radius: int, color: Any, thickness: int = 1,
           line_type: int = LINE_8, shift: int = 0) -> "Mat":
    """Draw a circle into dst (negative thickness fills it); returns dst."""
    c, r, rgba = as_cv_point(center), as_int(radius, "radius"), _color(color)
    style = _style(thickness, line_type, shift)
    return _draw_into(dst, lambda img: cv2.circle(img, c, r, rgba, **style))


@kernel_call("rectangle")
def rectangle(dst: "Mat", p1: Any, p2: Any, color: Any, thickness: int = 1,
              line_type: int = LINE_8, shift: int = 0) -> "Mat":
    """Draw a rectangle with opposite corners p1 and p2 into dst; returns dst."""
    pt1, pt2, rgba = as_cv_point(p1), as_cv_point(p2), _color(color)
    style = _style(thickness, line_type, shift)
    return _draw_into(dst, lambda img: cv2.rectangle(img, pt1, pt2, rgba, **style))


__all__ = ["line", "circle", "rectangle", "LINE_4", "LINE_8", "LINE_AA", "FILLED"]

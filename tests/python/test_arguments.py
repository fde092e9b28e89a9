"""
Tests that numeric parameters of public operations are type-checked.

Every operation must reject a non-numeric (or, for integer parameters, a
fractional) argument with TypeMismatchError instead of coercing it.
"""

import numpy as np
import pytest

import cvmat
from cvmat import CV_8UC1, CV_32FC1, Mat
from cvmat.error import CvMatError, TypeMismatchError


@pytest.fixture
def m():
    """4x4 CV_8UC1 with a ramp, valid input for every operation below."""
    return Mat.from_numpy(np.arange(16, dtype=np.uint8).reshape(4, 4))


BAD_CALLS = {
    "convert_scale_abs alpha": lambda m: m.convert_scale_abs("x"),
    "convert_scale_abs beta": lambda m: m.convert_scale_abs(1, None),
    "convert_to alpha": lambda m: m.convert_to(CV_32FC1, "a"),
    "add_weighted alpha": lambda m: Mat.add_weighted(m, "x", m, 1, 0),
    "add_weighted gamma": lambda m: Mat.add_weighted(m, 1, m, 1, None),
    "add_weighted dtype": lambda m: cvmat.add_weighted(m, 1, m, 1, 0, dtype=1.5),
    "diag none": lambda m: m.diag(None),
    "diag fraction": lambda m: m.diag(1.9),
    "sobel ddepth": lambda m: m.sobel("a", 1, 0),
    "sobel dx": lambda m: m.sobel(-1, 1.0, 0),
    "sobel border": lambda m: m.sobel(-1, 1, 0, border_type="x"),
    "laplacian ksize": lambda m: m.laplacian(-1, ksize=2.5),
    "canny threshold": lambda m: m.canny("lo", 10),
    "cvt_color code": lambda m: m.cvt_color(None),
    "resize fx": lambda m: m.resize((4, 4), fx="q"),
    "resize interpolation": lambda m: m.resize((4, 4), interpolation=1.0),
    "blur border": lambda m: m.blur((3, 3), border_type="x"),
    "gaussian_blur sigma": lambda m: m.gaussian_blur((3, 3), "s"),
    "median_blur none": lambda m: m.median_blur(None),
    "median_blur fraction": lambda m: m.median_blur(2.5),
    "threshold thresh": lambda m: m.threshold("x", 255, 0),
    "threshold type": lambda m: m.threshold(1, 255, True),
    "adaptive_threshold block": lambda m: m.adaptive_threshold(255, 0, 0, 3.0, 0),
    "line thickness": lambda m: m.line((0, 0), (1, 1), 255, thickness=1.5),
    "line type": lambda m: m.line_((0, 0), (1, 1), 255, line_type="x"),
    "circle radius": lambda m: m.circle((1, 1), "r", 255),
    "rectangle shift": lambda m: m.rectangle((0, 0), (1, 1), 255, shift=None),
    "imdecode flags": lambda m: Mat.imdecode(m.imencode(".png"), flags="x"),
    "imread flags": lambda m: Mat.imread("missing.png", flags=1.0),
    "imread path": lambda m: Mat.imread(123),
}


class TestArgumentTypes:
    """Test that bad parameter types raise TypeMismatchError."""

    @pytest.mark.parametrize("call", list(BAD_CALLS.values()), ids=list(BAD_CALLS))
    def test_rejected(self, m, call):
        with pytest.raises(TypeMismatchError):
            call(m)

    def test_is_cvmat_error(self, m):
        with pytest.raises(CvMatError):
            m.median_blur("3")

    def test_source_untouched(self, m):
        before = m.to_numpy().copy()
        with pytest.raises(TypeMismatchError):
            m.rectangle_((0, 0), (3, 3), 255, thickness="thick")
        np.testing.assert_array_equal(m.to_numpy(), before)

    def test_empty_canvas_checks_style(self):
        with pytest.raises(TypeMismatchError):
            Mat().circle_((0, 0), 1, 255, thickness=None)

    @pytest.mark.parametrize("value", [np.int32(3), np.int64(3)])
    def test_numpy_integers_accepted(self, m, value):
        assert m.median_blur(value).mat_type == CV_8UC1

    def test_numpy_floats_accepted(self, m):
        r = m.convert_scale_abs(np.float32(2.0), np.float64(1.0))
        assert r[0, 1] == (3,)

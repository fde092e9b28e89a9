"""
Tests for Scalar and the Point/Size/Rect value types.
"""

import pytest

from cvmat import Point, Rect, Scalar, Size
from cvmat._scalar import as_scalar_tuple, channel_values
from cvmat.error import ShapeMismatchError, TypeMismatchError


class TestScalar:
    """Test Scalar construction and coercion."""

    def test_components_are_floats(self):
        s = Scalar(1, 2, 3)
        assert s == (1.0, 2.0, 3.0)
        assert all(isinstance(v, float) for v in s)
        assert repr(s) == "Scalar(1.0, 2.0, 3.0)"

    def test_from_sequence(self):
        assert Scalar([4, 5]) == (4.0, 5.0)

    def test_all(self):
        assert Scalar.all(2) == (2.0, 2.0, 2.0, 2.0)

    def test_padded(self):
        assert Scalar(1, 2).padded(4) == (1.0, 2.0, 0.0, 0.0)
        assert Scalar(1, 2, 3).padded(1) == (1.0,)

    def test_coerce(self):
        s = Scalar(1)
        assert Scalar.coerce(s) is s
        assert Scalar.coerce((1, 2)) == (1.0, 2.0)
        assert Scalar.coerce(3) == (3.0,) * 4

    @pytest.mark.parametrize("values", [(), (1, 2, 3, 4, 5)])
    def test_component_count(self, values):
        with pytest.raises(ShapeMismatchError):
            Scalar(*values)

    def test_rejects_non_numbers(self):
        with pytest.raises(TypeMismatchError):
            Scalar("a")
        with pytest.raises(TypeMismatchError):
            Scalar(True)
        with pytest.raises(TypeMismatchError):
            Scalar.coerce(None)


class TestChannelValues:
    """Test expansion of write values."""

    def test_number_fills_all(self):
        assert channel_values(7, 3) == (7.0, 7.0, 7.0)

    def test_sequence_pads_and_truncates(self):
        assert channel_values([1, 2], 3) == (1.0, 2.0, 0.0)
        assert channel_values((1, 2, 3), 2) == (1.0, 2.0)

    def test_invalid(self):
        with pytest.raises(TypeMismatchError):
            channel_values("x", 1)
        with pytest.raises(TypeMismatchError):
            channel_values([1, "x"], 2)

    def test_read_value_type(self):
        assert isinstance(as_scalar_tuple([1.0, 2.0]), Scalar)
        wide = as_scalar_tuple([1.0] * 5)
        assert type(wide) is tuple and len(wide) == 5


class TestGeometry:
    """Test Point, Size and Rect."""

    def test_point_coerce(self):
        assert Point.coerce((3, 4)) == Point(3, 4)
        assert Point.coerce([1, 2]).y == 2
        with pytest.raises(TypeMismatchError):
            Point.coerce((1.5, 2))

    def test_size(self):
        s = Size.coerce((640, 480))
        assert s.width == 640 and s.height == 480
        assert s.area == 640 * 480
        with pytest.raises(TypeMismatchError):
            Size.coerce(5)

    def test_rect_parts(self):
        r = Rect.coerce((1, 2, 3, 4))
        assert r.origin == Point(1, 2)
        assert r.size == Size(3, 4)
        assert r.br == Point(4, 6)

    @pytest.mark.parametrize(
        "rect, expected",
        [
            (Rect(0, 0, 4, 3), True),
            (Rect(1, 1, 3, 2), True),
            (Rect(1, 0, 4, 3), False),
            (Rect(-1, 0, 1, 1), False),
            (Rect(0, 0, 1, -1), False),
        ],
    )
    def test_fits_within(self, rect, expected):
        assert rect.fits_within(3, 4) is expected

    def test_rect_wrong_arity(self):
        with pytest.raises(TypeMismatchError):
            Rect.coerce((1, 2, 3))

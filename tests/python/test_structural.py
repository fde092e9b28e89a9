"""
Tests for factories, diagonals, products, channel split/merge and
concatenation.
"""

import numpy as np
import pytest

import cvmat
from cvmat import (
    CV_8UC1,
    CV_8UC2,
    CV_8UC3,
    CV_32FC1,
    CV_32SC1,
    CV_64FC1,
    CV_64FC3,
    Depth,
    Mat,
    Ownership,
)
from cvmat.error import BoundsError, ShapeMismatchError, TypeMismatchError


class SubMat(Mat):
    pass


class TestFactories:
    """Test zeros, ones and eye."""

    def test_zeros(self):
        m = Mat.zeros(3, 2, CV_32SC1)
        assert m.shape == (3, 2)
        assert not m.to_numpy().any()

    def test_ones_single_channel(self):
        np.testing.assert_array_equal(Mat.ones(2, 3, CV_64FC1).to_numpy(), np.ones((2, 3)))

    def test_ones_first_channel_only(self):
        m = Mat.ones(2, 2, CV_8UC3)
        assert m[1, 1] == (1, 0, 0)

    def test_eye(self):
        m = Mat.eye(3, 3, CV_64FC1)
        assert m.get((1, 1)) == (1.0,)
        assert m.get((0, 1)) == (0.0,)
        np.testing.assert_array_equal(m.to_numpy(), np.eye(3))

    def test_eye_rectangular(self):
        np.testing.assert_array_equal(Mat.eye(2, 4, CV_8UC1).to_numpy(), np.eye(2, 4))

    def test_eye_multichannel(self):
        m = Mat.eye(2, 2, CV_64FC3)
        assert m[0, 0] == (1.0, 0.0, 0.0)
        assert m[0, 1] == (0.0, 0.0, 0.0)

    def test_module_functions(self):
        assert cvmat.zeros(2, 2).mat_type == CV_8UC1
        assert cvmat.ones(2, 2, CV_32FC1)[0, 0] == (1.0,)
        assert cvmat.eye(2, 2, CV_32FC1)[0, 1] == (0.0,)

    def test_factories_preserve_class(self):
        assert type(SubMat.zeros(1, 1)) is SubMat
        assert type(SubMat.eye(2, 2)) is SubMat

    def test_negative_size(self):
        with pytest.raises(ShapeMismatchError):
            Mat.zeros(-2, 2)

    def test_empty(self):
        assert Mat.eye(0, 3, CV_8UC1).is_empty


class TestSetIdentity:
    """Test set_identity."""

    def test_default_value(self):
        m = Mat(3, 3, CV_8UC1).set_to(7)
        assert m.set_identity() is m
        assert m.to_numpy().tolist() == [[1, 7, 7], [7, 1, 7], [7, 7, 1]]

    def test_custom_value(self):
        m = Mat(2, 3, CV_32FC1).set_identity(2.5)
        assert m.to_numpy().tolist() == [[2.5, 0, 0], [0, 2.5, 0]]

    def test_scalar_value(self):
        m = Mat(2, 2, CV_8UC3).set_identity((1, 2, 3))
        assert m[1, 1] == (1, 2, 3)
        assert m[0, 1] == (0, 0, 0)


class TestDiag:
    """Test diagonal views."""

    def test_main_diagonal(self, f64_3x3):
        d = f64_3x3.diag()
        assert d.shape == (3, 1)
        assert d.to_numpy().ravel().tolist() == [1.0, 5.0, 9.0]
        assert d.ownership == Ownership.VIEW

    def test_below_and_above(self, f64_3x3):
        assert f64_3x3.diag(1).to_numpy().ravel().tolist() == [4.0, 8.0]
        assert f64_3x3.diag(-1).to_numpy().ravel().tolist() == [2.0, 6.0]
        assert f64_3x3.diag(-2).to_numpy().ravel().tolist() == [3.0]

    def test_diag_writes_visible(self, f64_3x3):
        d = f64_3x3.diag()
        d[2, 0] = -1
        assert f64_3x3[2, 2] == (-1.0,)

    def test_diag_of_view(self, u8_4x4):
        d = u8_4x4[1:, 1:].diag()
        assert d.to_numpy().ravel().tolist() == [5, 10, 15]

    def test_diag_out_of_range(self, f64_3x3):
        with pytest.raises(BoundsError):
            f64_3x3.diag(3)
        with pytest.raises(BoundsError):
            f64_3x3.diag(-3)


class TestProducts:
    """Test dot and cross products."""

    def test_dot(self, f64_column):
        assert f64_column(1, 2, 3).dot(f64_column(4, 5, 6)) == 32.0

    def test_dot_over_channels(self):
        a = Mat(1, 2, CV_8UC2).set_to((1, 2))
        b = Mat(1, 2, CV_8UC2).set_to((3, 4))
        assert a.dot(b) == 22.0

    def test_dot_no_overflow(self):
        a = Mat(1, 2, CV_8UC1).set_to(255)
        assert a.dot(a) == 2 * 255.0 * 255.0

    def test_dot_mismatch(self, f64_column):
        with pytest.raises(ShapeMismatchError):
            f64_column(1, 2, 3).dot(f64_column(1, 2))

    def test_cross(self, f64_column):
        r = f64_column(1, 0, 0).cross(f64_column(0, 1, 0))
        assert r.shape == (3, 1)
        assert r.to_numpy().ravel().tolist() == [0.0, 0.0, 1.0]

    def test_cross_row_vector(self):
        a = Mat.from_numpy(np.array([[0, 0, 1]], dtype=np.float32))
        b = Mat.from_numpy(np.array([[1, 0, 0]], dtype=np.float32))
        assert a.cross(b).to_numpy().tolist() == [[0.0, 1.0, 0.0]]

    def test_cross_three_channels(self):
        a = Mat(1, 1, CV_64FC3).set_to((1, 0, 0))
        b = Mat(1, 1, CV_64FC3).set_to((0, 1, 0))
        assert a.cross(b)[0, 0] == (0.0, 0.0, 1.0)

    def test_cross_needs_three_components(self, f64_column):
        with pytest.raises(ShapeMismatchError):
            f64_column(1, 2).cross(f64_column(3, 4))


class TestSplitMerge:
    """Test channel split and merge."""

    def test_split(self, bgr_image):
        b, g, r = bgr_image.split()
        assert b.mat_type == CV_8UC1
        assert b[0, 0] == (255,) and b[0, 7] == (0,)
        assert r[0, 7] == (255,)
        assert not g.to_numpy().any()

    def test_split_single_channel_is_copy(self, u8_2x2):
        (only,) = u8_2x2.split()
        only[0, 0] = 0
        assert u8_2x2[0, 0] == (5,)

    def test_split_merge_round_trip(self):
        a = Mat.from_numpy(np.arange(6, dtype=np.uint8).reshape(2, 3))
        b = Mat.from_numpy(np.arange(6, 12, dtype=np.uint8).reshape(2, 3))
        merged = Mat.merge([a, b])
        assert merged.channels == 2
        assert merged[1, 2] == (5, 11)
        a2, b2 = merged.split()
        np.testing.assert_array_equal(a2.to_numpy(), a.to_numpy())
        np.testing.assert_array_equal(b2.to_numpy(), b.to_numpy())

    def test_merge_sums_channels(self, bgr_image):
        alpha = Mat.ones(8, 8, CV_8UC1)
        merged = cvmat.merge([bgr_image, alpha])
        assert merged.channels == 4
        assert merged[0, 0] == (255, 0, 0, 1)

    def test_merge_single(self, u8_2x2):
        merged = Mat.merge([u8_2x2])
        assert merged.mat_type == CV_8UC1
        assert merged[0, 0] == (5,)

    def test_merge_size_mismatch(self):
        with pytest.raises(ShapeMismatchError):
            Mat.merge([Mat(2, 2), Mat(2, 3)])

    def test_merge_depth_mismatch(self):
        with pytest.raises(TypeMismatchError):
            Mat.merge([Mat(2, 2, CV_8UC1), Mat(2, 2, CV_32FC1)])

    def test_merge_invalid_input(self):
        with pytest.raises(ShapeMismatchError):
            Mat.merge([])
        with pytest.raises(TypeMismatchError):
            Mat.merge([Mat(2, 2), "x"])
        with pytest.raises(TypeMismatchError):
            Mat.merge(Mat(2, 2))

    def test_split_empty(self):
        parts = Mat(0, 2, CV_8UC3).split()
        assert len(parts) == 3
        assert all(p.is_empty and p.channels == 1 for p in parts)


class TestConcat:
    """Test horizontal and vertical concatenation."""

    def test_hconcat(self):
        a = Mat.ones(2, 1, CV_8UC1)
        b = Mat.zeros(2, 2, CV_8UC1)
        r = Mat.hconcat([a, b])
        assert r.rows == a.rows
        assert r.to_numpy().tolist() == [[1, 0, 0], [1, 0, 0]]

    def test_vconcat(self):
        a = Mat.ones(1, 2, CV_8UC1)
        b = Mat.zeros(2, 2, CV_8UC1)
        r = cvmat.vconcat([a, b])
        assert r.shape == (3, 2)
        assert r.to_numpy().tolist() == [[1, 1], [0, 0], [0, 0]]

    def test_hconcat_multichannel(self, bgr_image):
        r = cvmat.hconcat([bgr_image, bgr_image])
        assert r.shape == (8, 16)
        assert r.channels == 3
        assert r[0, 12] == (0, 0, 255)

    def test_hconcat_rows_mismatch(self):
        with pytest.raises(ShapeMismatchError):
            Mat.hconcat([Mat(2, 2), Mat(3, 2)])

    def test_vconcat_cols_mismatch(self):
        with pytest.raises(ShapeMismatchError):
            Mat.vconcat([Mat(2, 2), Mat(2, 3)])

    def test_concat_channel_mismatch(self):
        with pytest.raises(ShapeMismatchError):
            Mat.hconcat([Mat(2, 2, CV_8UC1), Mat(2, 2, CV_8UC3)])

    def test_concat_depth_mismatch(self):
        with pytest.raises(TypeMismatchError):
            Mat.hconcat([Mat(2, 2, CV_8UC1), Mat(2, 2, CV_32FC1)])

    def test_concat_skips_empty(self):
        r = Mat.hconcat([Mat(2, 0, CV_8UC1), Mat.ones(2, 2, CV_8UC1)])
        assert r.shape == (2, 2)

    def test_concat_views(self, u8_4x4):
        r = Mat.hconcat([u8_4x4[:, 0:1], u8_4x4[:, 3:4]])
        assert r.to_numpy().tolist() == [[0, 3], [4, 7], [8, 11], [12, 15]]

    def test_concat_preserves_class(self):
        assert type(SubMat.vconcat([Mat(1, 1), Mat(1, 1)])) is SubMat

    def test_depth_of_result(self):
        assert Mat.hconcat([Mat(1, 1, CV_64FC1)] * 2).depth == Depth.CV_64F

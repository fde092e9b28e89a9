"""
Tests for image encoding, decoding and file I/O.
"""

import numpy as np
import pytest

import cvmat
from cvmat import (
    CV_8UC1,
    CV_8UC3,
    IMREAD_GRAYSCALE,
    IMREAD_UNCHANGED,
    IMWRITE_PNG_COMPRESSION,
    Mat,
)
from cvmat.error import DecodeError, EncodeError, ImageIOError


class SubMat(Mat):
    pass


class TestEncodeDecode:
    """Test in-memory codecs."""

    def test_png_round_trip_gray(self, gradient_u8):
        data = gradient_u8.imencode(".png")
        assert isinstance(data, bytes)
        assert data[:8] == b"\x89PNG\r\n\x1a\n"
        back = Mat.imdecode(data, IMREAD_GRAYSCALE)
        assert back.mat_type == CV_8UC1
        np.testing.assert_array_equal(back.to_numpy(), gradient_u8.to_numpy())

    def test_png_round_trip_color(self, bgr_image):
        back = cvmat.imdecode(cvmat.imencode(".png", bgr_image))
        assert back.mat_type == CV_8UC3
        np.testing.assert_array_equal(back.to_numpy(), bgr_image.to_numpy())

    def test_extension_without_dot(self, gradient_u8):
        assert gradient_u8.imencode("png")[:4] == b"\x89PNG"

    def test_encode_params(self, gradient_u8):
        fast = gradient_u8.imencode(".png", [IMWRITE_PNG_COMPRESSION, 0])
        small = gradient_u8.imencode(".png", [IMWRITE_PNG_COMPRESSION, 9])
        assert len(small) <= len(fast)

    def test_decode_int_sequence(self, gradient_u8):
        data = list(gradient_u8.imencode(".png"))
        back = Mat.imdecode(data, IMREAD_UNCHANGED)
        assert back.shape == (16, 16)

    def test_decode_masks_ints(self, gradient_u8):
        """Sequence items are reduced to their low byte."""
        data = [b + 256 for b in gradient_u8.imencode(".png")]
        assert Mat.imdecode(data, IMREAD_UNCHANGED).shape == (16, 16)

    def test_decode_view(self, bgr_image):
        view = bgr_image[2:6, 3:7]
        back = Mat.imdecode(view.imencode(".png"))
        np.testing.assert_array_equal(back.to_numpy(), view.to_numpy())

    def test_decode_preserves_class(self, gradient_u8):
        assert type(SubMat.imdecode(gradient_u8.imencode(".png"))) is SubMat

    def test_decode_garbage(self):
        with pytest.raises(DecodeError):
            Mat.imdecode(b"not an image")

    def test_decode_empty(self):
        with pytest.raises(DecodeError):
            Mat.imdecode(b"")

    def test_decode_wrong_input_type(self):
        with pytest.raises(TypeError):
            Mat.imdecode(12345)

    def test_encode_unknown_extension(self, gradient_u8):
        with pytest.raises(EncodeError):
            gradient_u8.imencode(".nosuchformat")

    @pytest.mark.parametrize("params", [[IMWRITE_PNG_COMPRESSION], ["a", 1], "x"])
    def test_encode_invalid_params(self, gradient_u8, params):
        with pytest.raises(EncodeError):
            gradient_u8.imencode(".png", params)

    def test_encode_empty(self):
        with pytest.raises(EncodeError):
            Mat().imencode(".png")


class TestFiles:
    """Test imread and imwrite."""

    def test_write_read(self, tmp_path, bgr_image):
        path = tmp_path / "image.png"
        assert bgr_image.save(path) is True
        back = Mat.imread(path)
        np.testing.assert_array_equal(back.to_numpy(), bgr_image.to_numpy())

    def test_module_functions(self, tmp_path, gradient_u8):
        path = str(tmp_path / "gray.png")
        assert cvmat.imwrite(path, gradient_u8)
        back = cvmat.imread(path, IMREAD_GRAYSCALE)
        assert back.mat_type == CV_8UC1
        np.testing.assert_array_equal(back.to_numpy(), gradient_u8.to_numpy())

    def test_read_preserves_class(self, tmp_path, gradient_u8):
        path = tmp_path / "sub.png"
        gradient_u8.save(path)
        assert type(SubMat.imread(path)) is SubMat

    def test_read_missing(self, tmp_path):
        with pytest.raises(ImageIOError):
            Mat.imread(tmp_path / "missing.png")

    def test_read_missing_is_os_error(self, tmp_path):
        with pytest.raises(OSError):
            Mat.imread(tmp_path / "missing.png")

    def test_read_not_an_image(self, tmp_path):
        path = tmp_path / "text.png"
        path.write_bytes(b"plain text")
        with pytest.raises(ImageIOError):
            Mat.imread(path)

    def test_write_unknown_extension(self, tmp_path, gradient_u8):
        with pytest.raises(EncodeError):
            gradient_u8.save(tmp_path / "image.nosuchformat")

    def test_write_invalid_params(self, tmp_path, gradient_u8):
        with pytest.raises(EncodeError):
            gradient_u8.save(tmp_path / "image.png", [1, 2, 3])

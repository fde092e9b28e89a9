"""
Tests for error codes, exception classes, results and kernel error translation.
"""

import cv2
import pytest

from cvmat import Mat
from cvmat._kernel import kernel_call, translate_cv_error
from cvmat.error import (
    CVMAT_ERROR_DECODE_ERROR,
    CVMAT_ERROR_INDEX_OUT_OF_RANGE,
    CVMAT_ERROR_KERNEL,
    CVMAT_ERROR_SHAPE_MISMATCH,
    CVMAT_OK,
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


def _cv_error(code, message="assertion failed"):
    error = cv2.error(message)
    error.code = code
    error.err = message
    return error


class TestExceptionClasses:
    """Test the exception hierarchy."""

    def test_builtin_bases(self):
        """Each error is also the matching builtin exception."""
        assert issubclass(AllocationError, MemoryError)
        assert issubclass(BoundsError, IndexError)
        assert issubclass(OutOfRangeError, BoundsError)
        assert issubclass(UnsupportedDepthError, TypeError)
        assert issubclass(TypeMismatchError, TypeError)
        assert issubclass(ShapeMismatchError, ValueError)
        assert issubclass(DecodeError, ValueError)
        assert issubclass(EncodeError, ValueError)
        assert issubclass(ImageIOError, OSError)

    def test_all_derive_from_base(self):
        for cls in (AllocationError, BoundsError, OutOfRangeError, UnsupportedDepthError,
                    TypeMismatchError, ShapeMismatchError, DecodeError, EncodeError,
                    ImageIOError):
            assert issubclass(cls, CvMatError)

    def test_default_code_and_message(self):
        e = OutOfRangeError()
        assert e.code == CVMAT_ERROR_INDEX_OUT_OF_RANGE
        assert str(e) == "Index out of range"

    def test_custom_message(self):
        e = DecodeError("bad stream")
        assert e.code == CVMAT_ERROR_DECODE_ERROR
        assert str(e) == "bad stream"

    def test_from_code(self):
        e = CvMatError.from_code(CVMAT_ERROR_SHAPE_MISMATCH, "hconcat")
        assert isinstance(e, ShapeMismatchError)
        assert str(e) == "hconcat: Shape mismatch"

    def test_from_unknown_code(self):
        e = CvMatError.from_code(999)
        assert type(e) is CvMatError
        assert e.code == 999

    def test_code_attributes(self):
        assert CvMatError.ERROR_KERNEL == CVMAT_ERROR_KERNEL
        assert CvMatError.OK == CVMAT_OK


class TestResult:
    """Test the Result type and check_result."""

    def test_success(self):
        r = Result.success(3)
        assert r.ok
        assert r.code == CVMAT_OK
        assert r.unwrap() == 3
        assert check_result(r) == 3

    def test_failure(self):
        r = Result.failure(ShapeMismatchError("sizes differ"))
        assert not r.ok
        assert r.code == CVMAT_ERROR_SHAPE_MISMATCH
        with pytest.raises(ShapeMismatchError):
            r.unwrap()

    def test_check_result_prefixes_context(self):
        r = Result.failure(TypeMismatchError("bad operand"))
        with pytest.raises(TypeMismatchError, match="^add: bad operand$"):
            check_result(r, "add")

    def test_check_result_does_not_repeat_context(self):
        r = Result.failure(TypeMismatchError("add: bad operand"))
        with pytest.raises(TypeMismatchError, match="^add: bad operand$"):
            check_result(r, "add")


class TestKernelErrors:
    """Test translation of cv2.error by OpenCV status code."""

    @pytest.mark.parametrize("status,expected", [
        (-4, AllocationError),
        (-201, ShapeMismatchError),
        (-209, ShapeMismatchError),
        (-215, ShapeMismatchError),
        (-205, TypeMismatchError),
        (-210, UnsupportedDepthError),
        (-211, BoundsError),
    ])
    def test_status_mapping(self, status, expected):
        e = translate_cv_error(_cv_error(status), "op")
        assert type(e) is expected
        assert str(e) == "op: assertion failed"

    def test_unknown_status(self):
        e = translate_cv_error(_cv_error(-2), "op")
        assert type(e) is CvMatError
        assert e.code == CVMAT_ERROR_KERNEL

    def test_forced_kind(self):
        e = translate_cv_error(_cv_error(-215), "imencode", EncodeError)
        assert isinstance(e, EncodeError)

    def test_kernel_call_returns_result(self):
        @kernel_call("failing")
        def failing():
            raise _cv_error(-209)

        @kernel_call("working")
        def working():
            return 7

        r = failing()
        assert not r.ok
        assert isinstance(r.error, ShapeMismatchError)
        assert working().unwrap() == 7

    def test_kernel_call_propagates_other_errors(self):
        @kernel_call("broken")
        def broken():
            raise RuntimeError("not a cvmat error")

        with pytest.raises(RuntimeError):
            broken()

    def test_translated_failure_is_logged(self, caplog):
        @kernel_call("failing")
        def failing():
            raise _cv_error(-215)

        with caplog.at_level("DEBUG", logger="cvmat.kernel"):
            failing()
        assert any("failing failed in kernel" in r.getMessage() for r in caplog.records)

    def test_public_surface_raises(self):
        """Mat methods raise the stored error instead of returning results."""
        with pytest.raises(ShapeMismatchError):
            Mat(2, 2) + Mat(3, 3)

"""
Pytest configuration and shared fixtures for cvmat tests.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

from cvmat import CV_8UC1, CV_8UC3, CV_64FC1, Mat, config  # noqa: E402


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Restore global configuration after every test."""
    yield
    config.reset()


@pytest.fixture
def u8_2x2():
    """2x2 CV_8UC1 zeros with (0, 0) == 5.

    Matrix:
    [[5, 0],
     [0, 0]]
    """
    m = Mat(2, 2, CV_8UC1)
    m.set(0, 0, (5,))
    return m


@pytest.fixture
def u8_4x4():
    """4x4 CV_8UC1 with values 0..15 in row-major order."""
    return Mat.from_numpy(np.arange(16, dtype=np.uint8).reshape(4, 4))


@pytest.fixture
def f64_3x3():
    """3x3 CV_64FC1 with values 1..9 in row-major order."""
    return Mat.from_numpy(np.arange(1, 10, dtype=np.float64).reshape(3, 3))


@pytest.fixture
def bgr_image():
    """8x8 CV_8UC3 image: left half blue, right half red."""
    img = np.zeros((8, 8, 3), dtype=np.uint8)
    img[:, :4] = (255, 0, 0)
    img[:, 4:] = (0, 0, 255)
    m = Mat.from_numpy(img)
    assert m.mat_type == CV_8UC3
    return m


@pytest.fixture
def gradient_u8():
    """16x16 CV_8UC1 horizontal gradient (0, 16, ..., 240)."""
    row = (np.arange(16, dtype=np.uint8) * 16)
    return Mat.from_numpy(np.tile(row, (16, 1)))


@pytest.fixture
def f64_column():
    """Factory for CV_64FC1 column vectors."""
    def make(*values):
        m = Mat(len(values), 1, CV_64FC1)
        for i, v in enumerate(values):
            m[i, 0] = v
        return m
    return make

"""
Tests for runtime configuration.
"""

import threading

import pytest

from cvmat import (
    CV_8UC1,
    CV_32FC1,
    CvMatConfig,
    DefaultsConfig,
    DisplayConfig,
    Mat,
    MemoryConfig,
    config,
    get_config,
    set_memory,
)
from cvmat.error import AllocationError


class TestDefaults:
    """Test default configuration values."""

    def test_memory_defaults(self):
        memory = MemoryConfig()
        assert memory.alignment == 64
        assert memory.zero_fill is True

    def test_defaults(self):
        assert DefaultsConfig().mat_type == CV_8UC1
        assert config.default_type == CV_8UC1

    def test_get_config(self):
        assert get_config() is config

    def test_to_dict(self):
        d = config.to_dict()
        assert set(d) == {"memory", "defaults", "display"}
        assert d["defaults"]["mat_type"] == "CV_8UC1"


class TestLocalConfig:
    """Test thread-local overrides."""

    def test_local_default_type(self):
        with config.local(defaults=DefaultsConfig(mat_type=CV_32FC1)):
            assert Mat(2, 2).mat_type == CV_32FC1
        assert Mat(2, 2).mat_type == CV_8UC1

    def test_local_size_limit(self):
        with config.local(memory=MemoryConfig(max_buffer_bytes=64)):
            Mat(8, 8, CV_8UC1)
            with pytest.raises(AllocationError):
                Mat(9, 9, CV_8UC1)
        Mat(9, 9, CV_8UC1)

    def test_nested_local_restores_outer(self):
        outer = MemoryConfig(max_buffer_bytes=1000)
        inner = MemoryConfig(max_buffer_bytes=10)
        with config.local(memory=outer):
            with config.local(memory=inner):
                assert config.memory is inner
            assert config.memory is outer

    def test_local_is_thread_local(self):
        seen = []
        with config.local(defaults=DefaultsConfig(mat_type=CV_32FC1)):
            worker = threading.Thread(target=lambda: seen.append(config.default_type))
            worker.start()
            worker.join()
        assert seen == [CV_8UC1]

    def test_unknown_section(self):
        with pytest.raises(TypeError):
            config.local(colors=None)


class TestGlobalConfig:
    """Test global setters and reset."""

    def test_set_memory(self):
        set_memory(max_buffer_bytes=16)
        with pytest.raises(AllocationError):
            Mat(5, 5, CV_8UC1)
        config.reset()
        Mat(5, 5, CV_8UC1)

    def test_zero_fill_off_keeps_zeros_factory(self):
        set_memory(zero_fill=False)
        assert not Mat.zeros(16, 16, CV_8UC1).to_numpy().any()

    def test_display_truncation(self):
        config.display = DisplayConfig(max_elements=10, edge_rows=1)
        text = str(Mat.zeros(6, 6, CV_8UC1))
        assert "..." in text
        assert text.count(";") == 2


class TestEnvironment:
    """Test environment overrides read by a fresh config manager."""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("CVMAT_MAX_BUFFER_BYTES", "4096")
        monkeypatch.setenv("CVMAT_ZERO_FILL", "0")
        monkeypatch.setenv("CVMAT_ALIGNMENT", "32")
        memory = CvMatConfig().memory
        assert memory.max_buffer_bytes == 4096
        assert memory.zero_fill is False
        assert memory.alignment == 32

    def test_invalid_env_warns(self, monkeypatch):
        monkeypatch.setenv("CVMAT_ALIGNMENT", "wide")
        with pytest.warns(UserWarning, match="CVMAT_ALIGNMENT"):
            memory = CvMatConfig().memory
        assert memory.alignment == 64

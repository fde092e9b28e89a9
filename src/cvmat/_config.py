"""
cvmat Config - Runtime Configuration

Provides property-based configuration for buffer allocation, default
element types and display. Settings can be changed globally or overridden
per thread inside a ``config.local(...)`` block.
"""

from __future__ import annotations

import os
import sys
import threading
import warnings
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, List, Optional

from ._dtypes import CV_8UC1, MatType


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class MemoryConfig:
    """Configuration for buffer allocation."""
    alignment: int = 64                  # Byte alignment of buffer starts
    zero_fill: bool = True               # Zero new buffers (else uninitialized)
    max_buffer_bytes: int = sys.maxsize  # Larger requests raise AllocationError


@dataclass
class DefaultsConfig:
    """Defaults used when an argument is omitted."""
    mat_type: MatType = CV_8UC1
    imread_flags: int = 1                # IMREAD_COLOR


@dataclass
class DisplayConfig:
    """Configuration for ``Mat.to_s``."""
    max_elements: int = 1000             # Larger matrices print head/tail rows
    edge_rows: int = 3                   # Rows kept at each end when truncating


# =============================================================================
# Environment Overrides
# =============================================================================

def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.lower() not in ("0", "false", "no", "off")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        warnings.warn(f"Ignoring invalid {name}={raw!r}; using {default}")
        return default


def _memory_from_env() -> MemoryConfig:
    defaults = MemoryConfig()
    return MemoryConfig(
        alignment=_env_int("CVMAT_ALIGNMENT", defaults.alignment),
        zero_fill=_env_bool("CVMAT_ZERO_FILL", defaults.zero_fill),
        max_buffer_bytes=_env_int("CVMAT_MAX_BUFFER_BYTES", defaults.max_buffer_bytes),
    )


# =============================================================================
# Global Configuration Manager
# =============================================================================

class CvMatConfig:
    """
    Global configuration manager for cvmat.

    Provides thread-local configuration with context manager support.

    Example:
        # Global configuration
        cvmat.config.memory.zero_fill = False

        # Local configuration (context manager)
        with cvmat.config.local(memory=MemoryConfig(max_buffer_bytes=1 << 20)):
            big = Mat(4096, 4096, CV_8UC1)   # raises AllocationError
        # Back to global config
    """

    _SECTIONS = ("memory", "defaults", "display")

    def __init__(self):
        self._global_memory = _memory_from_env()
        self._global_defaults = DefaultsConfig()
        self._global_display = DisplayConfig()

        # Thread-local storage for context overrides
        self._local = threading.local()

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    @property
    def memory(self) -> MemoryConfig:
        """Get memory configuration."""
        if getattr(self._local, "memory", None) is not None:
            return self._local.memory
        return self._global_memory

    @memory.setter
    def memory(self, value: MemoryConfig):
        """Set global memory configuration."""
        self._global_memory = value

    @property
    def defaults(self) -> DefaultsConfig:
        """Get default-argument configuration."""
        if getattr(self._local, "defaults", None) is not None:
            return self._local.defaults
        return self._global_defaults

    @defaults.setter
    def defaults(self, value: DefaultsConfig):
        """Set global default-argument configuration."""
        self._global_defaults = value

    @property
    def display(self) -> DisplayConfig:
        """Get display configuration."""
        if getattr(self._local, "display", None) is not None:
            return self._local.display
        return self._global_display

    @display.setter
    def display(self, value: DisplayConfig):
        """Set global display configuration."""
        self._global_display = value

    # -------------------------------------------------------------------------
    # Convenience Properties
    # -------------------------------------------------------------------------

    @property
    def default_type(self) -> MatType:
        """Element type used by ``Mat(rows, cols)``."""
        return self.defaults.mat_type

    @default_type.setter
    def default_type(self, value: MatType):
        self._global_defaults.mat_type = value

    @property
    def alignment(self) -> int:
        """Buffer alignment in bytes."""
        return self.memory.alignment

    @alignment.setter
    def alignment(self, value: int):
        self._global_memory.alignment = value

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (memory, defaults, display)

        Returns:
            Context manager
        """
        unknown = set(kwargs) - set(self._SECTIONS)
        if unknown:
            raise TypeError(f"Unknown config sections: {sorted(unknown)}")
        return _LocalConfigContext(self, **kwargs)

    def _get_local(self, keys: List[str]) -> Dict[str, Any]:
        return {key: getattr(self._local, key, None) for key in keys}

    def _set_local(self, **kwargs):
        """Set thread-local configuration."""
        for key, value in kwargs.items():
            setattr(self._local, key, value)

    # -------------------------------------------------------------------------
    # Reset
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults (environment included)."""
        self._global_memory = _memory_from_env()
        self._global_defaults = DefaultsConfig()
        self._global_display = DisplayConfig()

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        defaults = asdict(self.defaults)
        defaults["mat_type"] = self.defaults.mat_type.name
        return {
            "memory": asdict(self.memory),
            "defaults": defaults,
            "display": asdict(self.display),
        }

    def __repr__(self) -> str:
        return f"CvMatConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration overrides."""

    def __init__(self, config: CvMatConfig, **kwargs):
        self._config = config
        self._overrides = kwargs
        self._saved: Dict[str, Any] = {}

    def __enter__(self) -> CvMatConfig:
        self._saved = self._config._get_local(list(self._overrides))
        self._config._set_local(**self._overrides)
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._set_local(**self._saved)
        return False


# Global configuration instance
config = CvMatConfig()


def get_config() -> CvMatConfig:
    """Get the global configuration instance."""
    return config


def set_memory(alignment: Optional[int] = None,
               zero_fill: Optional[bool] = None,
               max_buffer_bytes: Optional[int] = None) -> None:
    """Update selected global memory settings."""
    changes = {
        key: value for key, value in (
            ("alignment", alignment),
            ("zero_fill", zero_fill),
            ("max_buffer_bytes", max_buffer_bytes),
        ) if value is not None
    }
    config.memory = replace(config._global_memory, **changes)


__all__ = [
    "MemoryConfig",
    "DefaultsConfig",
    "DisplayConfig",
    "CvMatConfig",
    "config",
    "get_config",
    "set_memory",
]

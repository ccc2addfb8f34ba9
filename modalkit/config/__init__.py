"""
Configuration management.

This module provides configuration classes and utilities for:
- Library settings (YAML-based)
- Dataset batching options
- Platform-specific settings and detection
"""

from .data import DataConfig
from .library import (
    LibraryConfig,
    get_config,
    reload_config,
    get_config_path,
)
from .platform import (
    PlatformConfig,
    get_platform_config,
    get_data_loader_config,
    log_platform_info,
    platform_config,
)

__all__ = [
    # Data configs
    "DataConfig",
    # Library config
    "LibraryConfig",
    "get_config",
    "reload_config",
    "get_config_path",
    # Platform utilities
    "PlatformConfig",
    "get_platform_config",
    "get_data_loader_config",
    "log_platform_info",
    "platform_config",
]

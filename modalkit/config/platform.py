"""
Platform detection and configuration utilities.

This module handles platform-specific data loader defaults, providing a clean
interface for dataset code that should not care which OS it runs on.
"""

import os
import platform
import sys
from typing import Dict, Any


class PlatformConfig:
    """Platform-specific configuration and workarounds."""

    def __init__(self):
        self.system = platform.system()
        self.machine = platform.machine()
        self.is_macos = self.system == "Darwin"
        self.is_linux = self.system == "Linux"
        self.is_windows = self.system == "Windows"
        self.is_m1_mac = self.is_macos and self.machine == "arm64"

        self._apply_platform_workarounds()

    def _apply_platform_workarounds(self) -> None:
        """Apply platform-specific workarounds."""
        if self.is_m1_mac:
            # Multiple libomp.dylib copies abort torch on Apple silicon
            os.environ.setdefault("KMP_DUPLICATE_LIB_OK", "TRUE")

    def get_data_loader_config(self) -> Dict[str, Any]:
        """Get platform-appropriate data loader configuration."""
        if self.is_linux:
            return {
                "num_workers": min(4, os.cpu_count() or 1),
                "pin_memory": True,
                "reason": "Linux multiprocessing support",
            }
        elif self.is_windows:
            return {
                "num_workers": 2,
                "pin_memory": False,
                "reason": "Windows multiprocessing compatibility",
            }
        # macOS and unknown platforms: spawn-based workers are slow and fragile
        return {
            "num_workers": 0,
            "pin_memory": False,
            "reason": "single-process loading",
        }

    def get_environment_info(self) -> Dict[str, Any]:
        """Get a summary of the running environment."""
        return {
            "system": self.system,
            "machine": self.machine,
            "python_version": sys.version,
            "platform": platform.platform(),
            "is_m1_mac": self.is_m1_mac,
        }

    def log_platform_info(self, logger) -> None:
        """Log platform information for debugging."""
        env_info = self.get_environment_info()
        logger.info(f"Platform: {env_info['system']} ({env_info['machine']})")
        data_config = self.get_data_loader_config()
        logger.info(f"Data loader config: {data_config['num_workers']} workers ({data_config['reason']})")


# Global platform configuration instance
platform_config = PlatformConfig()


def get_platform_config() -> PlatformConfig:
    """Get the global platform configuration instance."""
    return platform_config


def get_data_loader_config() -> Dict[str, Any]:
    """Get platform-appropriate data loader configuration."""
    return platform_config.get_data_loader_config()


def log_platform_info(logger) -> None:
    """Log platform information for debugging."""
    platform_config.log_platform_info(logger)

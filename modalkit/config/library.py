"""
Centralized library configuration.

This module loads configuration from a YAML file and provides a clean interface
for the settings shared across modalkit: seeding, logging, audio backend
selection, the model repository and visualization defaults.
"""

import os
import yaml
from pathlib import Path
from typing import List, Dict, Any, Optional


CONFIG_ENV_VAR = "MODALKIT_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "default.yaml"


class LibraryConfig:
    """Configuration loader for modalkit.

    This class loads configuration from a YAML file and provides convenient
    access methods for the different configuration sections.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration from YAML file.

        Args:
            config_path: Path to YAML config file. If None, uses the file named by
                the ``MODALKIT_CONFIG`` environment variable, then the packaged
                ``default.yaml``.
        """
        if config_path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_path, 'r') as f:
                return yaml.safe_load(f) or {}
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML configuration: {e}")

    def reload(self) -> None:
        """Reload configuration from file."""
        self._config = self._load_config()

    def _section(self, name: str) -> Dict[str, Any]:
        return self._config.get(name) or {}

    # === Environment & Setup ===
    @property
    def random_seed(self) -> int:
        return self._section("environment").get("random_seed", 42)

    @property
    def log_level(self) -> str:
        return self._section("logging").get("level", "INFO")

    # === Audio ===
    @property
    def audio_factories(self) -> Optional[List[str]]:
        """Dotted class paths tried in order by the audio factory selector."""
        return self._section("audio").get("factories")

    @property
    def audio_target_sample_rate(self) -> Optional[int]:
        return self._section("audio").get("target_sample_rate")

    # === Model repository ===
    @property
    def repository_base_uri(self) -> str:
        return self._section("repository").get("base_uri", "~/.modalkit/models")

    @property
    def repository_cache_dir(self) -> str:
        return self._section("repository").get("cache_dir", "~/.modalkit/cache")

    # === Data ===
    @property
    def batch_size(self) -> int:
        return self._section("data").get("batch_size", 32)

    # === Visualization ===
    @property
    def mask_transparency(self) -> float:
        return self._section("visualization").get("transparency", 0.5)

    # === Configuration Section Accessors ===
    def get_audio_config(self) -> Dict[str, Any]:
        """Get configuration for the audio factories."""
        return self._section("audio").copy()

    def get_repository_config(self) -> Dict[str, Any]:
        """Get configuration for the model repository."""
        repo_config = self._section("repository").copy()
        repo_config.update({
            "base_uri": self.repository_base_uri,
            "cache_dir": self.repository_cache_dir,
        })
        return repo_config


# Global configuration instance, created on first access
config: Optional[LibraryConfig] = None


def get_config(config_path: Optional[Path] = None) -> LibraryConfig:
    """Get the global configuration instance.

    Args:
        config_path: Optional path to custom config file

    Returns:
        LibraryConfig instance
    """
    global config
    if config_path is not None or config is None:
        config = LibraryConfig(config_path)
    return config


def reload_config() -> None:
    """Reload configuration from file."""
    get_config().reload()


def get_config_path() -> Path:
    """Get the path to the current configuration file."""
    return get_config().config_path

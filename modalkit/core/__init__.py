"""
Core components - modality-agnostic, reusable helpers.

This module provides general-purpose pieces shared by the audio and vision
helpers, the datasets and the model zoo: device and seed handling, logging
setup, URL access and JSON serialization.
"""

from .io import (
    is_absolute_uri,
    read_url_bytes,
    download_file,
)
from .serialization import JsonSerializable
from .utils import (
    get_device,
    set_seed,
    make_worker_init_fn,
    setup_logging,
)

__all__ = [
    # IO
    "is_absolute_uri",
    "read_url_bytes",
    "download_file",
    # Serialization
    "JsonSerializable",
    # Utils
    "get_device",
    "set_seed",
    "make_worker_init_fn",
    "setup_logging",
]

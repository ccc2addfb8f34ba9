"""Utility functions for device selection, seeding, and logging setup.

This module centralizes small helpers used across the library, including
device detection, reproducibility setup and root logger configuration.
"""

import logging
import random
from typing import Union

import numpy as np
import torch


def get_device() -> torch.device:
    """Choose an available compute device with a sensible priority.

    Prefers Apple Metal Performance Shaders (MPS) when available, then CUDA,
    otherwise falls back to CPU.

    Returns:
        A ``torch.device`` instance.
    """
    return torch.device("mps" if torch.backends.mps.is_available() else "cuda" if torch.cuda.is_available() else "cpu")


def set_seed(seed: int) -> None:
    """Seed Python, NumPy, and PyTorch RNGs for reproducibility.

    Mask palettes are drawn from NumPy's global RNG, so seeding here also
    makes ``CategoryMask`` colors repeatable.

    Args:
        seed: Integer seed value.
    """
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(seed)


def make_worker_init_fn(base_seed: int):
    """Return a worker_init_fn that seeds Python and NumPy per worker deterministically.

    Args:
        base_seed: Base integer seed. Each worker will derive a unique seed.

    Returns:
        A callable suitable for DataLoader(worker_init_fn=...).
    """
    def _init_fn(worker_id: int):
        seed = (base_seed + worker_id * 9973) % (2**32 - 1)
        random.seed(seed)
        np.random.seed(seed)
    return _init_fn


def setup_logging(level: Union[int, str, None] = None) -> None:
    """Configure the root logger once for scripts and notebooks.

    Args:
        level: Logging level name or number. ``None`` reads ``logging.level``
            from the library configuration.
    """
    if level is None:
        from ..config.library import get_config
        level = get_config().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

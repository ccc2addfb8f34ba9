"""Configuration dataclasses for dataset loading.

These dataclasses centralize the batching options shared by the dataset
implementations, providing sensible defaults while remaining explicit and
overrideable via code or CLI adapters.
"""

from dataclasses import dataclass, field
from typing import Optional

from .library import get_config


def _default_batch_size() -> int:
    return get_config().batch_size


@dataclass
class DataConfig:
    """Batching configuration for ``Dataset.get_data``.

    Attributes:
        batch_size: Number of samples per batch; defaults to ``data.batch_size``
            from the library configuration.
        shuffle: If ``True``, reshuffle samples every time the data is iterated.
        drop_last: If ``True``, drop the trailing incomplete batch.
        seed: Seed for the shuffling generator; ``None`` leaves randomness unmanaged.
        num_workers: Loader worker processes; ``None`` uses the platform default.
        pin_memory: Pin host memory; ``None`` uses the platform default.
    """
    batch_size: int = field(default_factory=_default_batch_size)
    shuffle: bool = False
    drop_last: bool = False
    seed: Optional[int] = None
    num_workers: Optional[int] = None
    pin_memory: Optional[bool] = None

    def __post_init__(self):
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

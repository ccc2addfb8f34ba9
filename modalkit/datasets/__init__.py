"""
Dataset abstractions.

Every dataset implements ``Dataset.get_data()``, returning re-iterable
``Batch`` collections for one ``Usage`` split.
"""

from .base import (
    Usage,
    Batch,
    BatchIterable,
    Dataset,
)
from .loaders import ArrayDataset, ImageFolderDataset
from .transforms import (
    IMAGENET_MEAN,
    IMAGENET_STD,
    make_transforms,
    load_stats,
)

__all__ = [
    # Contract
    "Usage",
    "Batch",
    "BatchIterable",
    "Dataset",
    # Implementations
    "ArrayDataset",
    "ImageFolderDataset",
    # Transforms
    "IMAGENET_MEAN",
    "IMAGENET_STD",
    "make_transforms",
    "load_stats",
]

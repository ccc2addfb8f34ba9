"""Dataset implementations backed by torch ``DataLoader``.

Provides:
- ``ArrayDataset`` for tensors already held in memory
- ``ImageFolderDataset`` for an ImageFolder layout:
  <root>/{train,val,test}/<class>/image.jpg
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import torch
from torch.utils.data import DataLoader, TensorDataset
from torchvision import datasets

from ..config.data import DataConfig
from ..config.platform import get_data_loader_config
from ..core.utils import make_worker_init_fn
from .base import BatchIterable, Dataset, Usage
from .transforms import IMAGENET_MEAN, IMAGENET_STD, load_stats, make_transforms

logger = logging.getLogger(__name__)


def _loader_kwargs(config: DataConfig) -> Dict[str, Any]:
    """Translate a ``DataConfig`` into ``DataLoader`` keyword arguments."""
    platform_defaults = get_data_loader_config()
    num_workers = config.num_workers if config.num_workers is not None else platform_defaults["num_workers"]
    pin_memory = config.pin_memory
    if pin_memory is None:
        pin_memory = bool(platform_defaults["pin_memory"] and torch.cuda.is_available())

    kwargs = {
        "batch_size": config.batch_size,
        "shuffle": config.shuffle,
        "drop_last": config.drop_last,
        "num_workers": num_workers,
        "pin_memory": pin_memory,
    }
    if config.seed is not None:
        generator = torch.Generator()
        generator.manual_seed(config.seed)
        kwargs["generator"] = generator
        if num_workers > 0:
            kwargs["worker_init_fn"] = make_worker_init_fn(config.seed)
    return kwargs


class ArrayDataset(Dataset):
    """Batches in-memory tensors.

    Args:
        data: Tensor of samples, first dimension is the sample index.
        labels: Tensor of labels aligned with ``data``.
        config: Batching options; defaults to ``DataConfig()``.
    """

    def __init__(self, data, labels, config: Optional[DataConfig] = None):
        data = torch.as_tensor(data)
        labels = torch.as_tensor(labels)
        if data.shape[0] != labels.shape[0]:
            raise ValueError(f"Got {data.shape[0]} samples but {labels.shape[0]} labels")
        self.data = data
        self.labels = labels
        self.config = config or DataConfig()

    def __len__(self) -> int:
        return int(self.data.shape[0])

    def get_data(self) -> BatchIterable:
        loader = DataLoader(TensorDataset(self.data, self.labels), **_loader_kwargs(self.config))
        return BatchIterable(loader)


class ImageFolderDataset(Dataset):
    """Reads one split of a ``<root>/<split>/<class_name>/*.jpg`` tree.

    Args:
        root: Dataset root holding ``train``, ``val`` and ``test`` directories.
        usage: Split to read.
        config: Batching options; defaults to ``DataConfig()``.
        transform: Image transform; defaults to ``make_transforms()`` normalized with
            ``stats_path`` when given, ImageNet statistics otherwise.
        stats_path: JSON file with per-channel ``mean``/``std`` (see ``load_stats``).
    """

    def __init__(
        self,
        root,
        usage: Usage = Usage.TRAIN,
        config: Optional[DataConfig] = None,
        transform=None,
        stats_path=None,
    ):
        self.root = Path(root)
        self.usage = usage
        self.config = config or DataConfig()
        if transform is None:
            mean, std = load_stats(stats_path) if stats_path is not None else (IMAGENET_MEAN, IMAGENET_STD)
            transform = make_transforms(mean, std)
        self.transform = transform
        self._folder: Optional[datasets.ImageFolder] = None

    @property
    def split_dir(self) -> Path:
        return self.root / self.usage.dir_name

    def _load_folder(self) -> datasets.ImageFolder:
        if self._folder is None:
            if not self.split_dir.is_dir():
                raise FileNotFoundError(f"Split directory not found: {self.split_dir}")
            self._folder = datasets.ImageFolder(str(self.split_dir), transform=self.transform)
            logger.info(
                f"Loaded {len(self._folder)} images in {len(self._folder.classes)} classes from {self.split_dir}"
            )
        return self._folder

    @property
    def classes(self) -> List[str]:
        return list(self._load_folder().classes)

    def __len__(self) -> int:
        return len(self._load_folder())

    def get_data(self) -> BatchIterable:
        loader = DataLoader(self._load_folder(), **_loader_kwargs(self.config))
        return BatchIterable(loader)

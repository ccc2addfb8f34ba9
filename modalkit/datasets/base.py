"""The dataset contract shared by every dataset implementation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

import torch
from torch.utils.data import DataLoader


class Usage(Enum):
    """Which split of a dataset to read."""
    TRAIN = "train"
    TEST = "test"
    VALIDATION = "validation"

    @property
    def dir_name(self) -> str:
        """Directory holding the split in an ``<root>/{train,val,test}`` layout."""
        return "val" if self is Usage.VALIDATION else self.value


@dataclass
class Batch:
    """A group of samples and their labels, stacked along the first dimension."""
    data: torch.Tensor
    labels: torch.Tensor

    @property
    def size(self) -> int:
        return int(self.data.shape[0])


class BatchIterable:
    """Re-iterable view over a ``DataLoader`` that yields :class:`Batch` objects.

    Every ``iter()`` starts a fresh pass over the loader.
    """

    def __init__(self, loader: DataLoader):
        self.loader = loader

    def __iter__(self) -> Iterator[Batch]:
        for data, labels in self.loader:
            yield Batch(data=data, labels=labels)

    def __len__(self) -> int:
        return len(self.loader)


class Dataset(ABC):
    """Base class for all datasets.

    Subclasses only have to build the batches; failures reading the
    underlying storage surface as ``OSError`` (``FileNotFoundError`` for
    missing files or directories).
    """

    @abstractmethod
    def get_data(self) -> Iterable[Batch]:
        """Return a finite, re-iterable collection of batches.

        Raises:
            OSError: The data cannot be read.
        """

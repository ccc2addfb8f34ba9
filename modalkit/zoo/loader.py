"""
Base model loader for the model zoo.

A loader knows one artifact (id and version) in a repository, how to build
its architecture, and how to restore its weights.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import torch
import torch.nn as nn

from ..core.utils import get_device
from .repository import Repository

logger = logging.getLogger(__name__)


class ModelLoader(ABC):
    """Builds a model and restores its weights from a repository artifact."""

    GROUP_ID = "cv"
    NUM_CLASSES = 1000

    def __init__(self, repository: Repository, artifact_id: str, version: str):
        """
        Initialize model loader.

        Args:
            repository: Repository holding the artifact
            artifact_id: Artifact name, also the stem of the weight file
            version: Artifact version
        """
        self.repository = repository
        self.artifact_id = artifact_id
        self.version = version

    @property
    def group_id(self) -> str:
        return self.GROUP_ID

    @property
    def weight_file(self) -> str:
        return f"{self.artifact_id}.pth"

    @abstractmethod
    def build_model(self, num_classes: int) -> nn.Module:
        """Create the untrained architecture."""

    def load_model(self, num_classes: Optional[int] = None, device: Optional[torch.device] = None) -> nn.Module:
        """
        Load the model with the artifact's weights.

        A missing weight file is logged and leaves the model randomly
        initialized; a weight file that does not fit the architecture raises.

        Args:
            num_classes: Number of output classes; defaults to ``NUM_CLASSES``
            device: Target device; defaults to ``get_device()``

        Returns:
            Model in eval mode on ``device``
        """
        num_classes = num_classes or self.NUM_CLASSES
        model = self.build_model(num_classes)

        try:
            weight_path = self.repository.open_file(self.group_id, self.artifact_id, self.version, self.weight_file)
        except FileNotFoundError:
            logger.warning(f"Weight file not found for {self.artifact_id} {self.version} in {self.repository}")
        else:
            checkpoint = torch.load(weight_path, map_location="cpu", weights_only=True)
            # Run checkpoints wrap the weights next to their config
            if isinstance(checkpoint, dict) and "model_state_dict" in checkpoint:
                checkpoint = checkpoint["model_state_dict"]
            model.load_state_dict(checkpoint)
            logger.info(f"Loaded weights for {self.artifact_id} from {weight_path}")

        model.to(device or get_device())
        model.eval()
        return model

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.group_id}:{self.artifact_id}:{self.version})"

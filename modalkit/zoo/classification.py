"""Image classification model loaders.

Each loader pins an artifact id and version and maps it to a torchvision
architecture; weights come from the repository, never from torchvision's own
download cache.
"""

from typing import List, Optional

import torch
import torch.nn as nn
import torchvision.models as torchvision_models
from PIL import Image

from ..datasets.transforms import make_transforms
from ..modality.cv.output import Classifications
from .loader import ModelLoader
from .repository import Repository


class ImageClassificationModelLoader(ModelLoader):
    """Loader for classifiers taking normalized RGB images."""

    GROUP_ID = "cv.classification"
    INPUT_SIZE = (224, 224)
    SYNSET_FILE = "synset.txt"

    def __init__(self, repository: Repository, artifact_id: str, version: str):
        super().__init__(repository, artifact_id, version)
        self._synset: Optional[List[str]] = None

    def get_transform(self):
        """Resize to ``INPUT_SIZE`` and apply ImageNet normalization."""
        return make_transforms(size=self.INPUT_SIZE)

    def load_synset(self, num_classes: int) -> List[str]:
        """Read class names from the artifact's synset file, one per line.

        Falls back to stringified indices when the artifact ships no synset.
        """
        try:
            path = self.repository.open_file(self.group_id, self.artifact_id, self.version, self.SYNSET_FILE)
        except FileNotFoundError:
            return [str(i) for i in range(num_classes)]
        names = [line.strip() for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]
        if len(names) != num_classes:
            raise ValueError(f"{path} lists {len(names)} classes, model has {num_classes} outputs")
        return names

    def predict(self, model: nn.Module, image: Image.Image, top_k: int = 5) -> Classifications:
        """Classify one image with a model returned by ``load_model``.

        Args:
            model: Classifier in eval mode.
            image: Input image, converted to RGB.
            top_k: Number of most probable classes kept in the result.

        Returns:
            ``Classifications`` holding the ``top_k`` best classes, most
            probable first.
        """
        if top_k < 1:
            raise ValueError(f"top_k must be positive, got {top_k}")
        device = next(model.parameters()).device
        batch = self.get_transform()(image.convert("RGB")).unsqueeze(0).to(device)
        with torch.no_grad():
            logits = model(batch)
        probabilities = torch.softmax(logits, dim=1)[0]

        num_classes = probabilities.shape[0]
        # The synset is read once per loader
        if self._synset is None or len(self._synset) != num_classes:
            self._synset = self.load_synset(num_classes)
        best = Classifications(self._synset, probabilities).top_k(top_k)
        return Classifications([name for name, _ in best], [prob for _, prob in best])


class Squeezenet(ImageClassificationModelLoader):
    """
    Model loader for SqueezeNet 1.1.

    See `SqueezeNet <https://arxiv.org/pdf/1602.07360.pdf>`_.
    """

    ARTIFACT_ID = "squeezenet"
    VERSION = "0.0.1"

    def __init__(self, repository: Repository):
        super().__init__(repository, self.ARTIFACT_ID, self.VERSION)

    def build_model(self, num_classes: int) -> nn.Module:
        return torchvision_models.squeezenet1_1(weights=None, num_classes=num_classes)


class Resnet(ImageClassificationModelLoader):
    """Model loader for ResNet-50."""

    ARTIFACT_ID = "resnet"
    VERSION = "0.0.1"

    def __init__(self, repository: Repository):
        super().__init__(repository, self.ARTIFACT_ID, self.VERSION)

    def build_model(self, num_classes: int) -> nn.Module:
        return torchvision_models.resnet50(weights=None, num_classes=num_classes)


class MobileNetV2(ImageClassificationModelLoader):
    """Model loader for MobileNetV2."""

    ARTIFACT_ID = "mobilenet_v2"
    VERSION = "0.0.1"

    def __init__(self, repository: Repository):
        super().__init__(repository, self.ARTIFACT_ID, self.VERSION)

    def build_model(self, num_classes: int) -> nn.Module:
        return torchvision_models.mobilenet_v2(weights=None, num_classes=num_classes)


class AlexNet(ImageClassificationModelLoader):
    """Model loader for AlexNet."""

    ARTIFACT_ID = "alexnet"
    VERSION = "0.0.1"

    def __init__(self, repository: Repository):
        super().__init__(repository, self.ARTIFACT_ID, self.VERSION)

    def build_model(self, num_classes: int) -> nn.Module:
        return torchvision_models.alexnet(weights=None, num_classes=num_classes)

"""Registry of the model loaders shipped with modalkit."""

from typing import Dict, List, Optional, Type

from .classification import AlexNet, MobileNetV2, Resnet, Squeezenet
from .loader import ModelLoader
from .repository import Repository


class ModelZoo:
    """Looks up model loaders by artifact id against one repository."""

    MODEL_LOADERS: Dict[str, Type[ModelLoader]] = {
        loader.ARTIFACT_ID: loader for loader in (Squeezenet, Resnet, MobileNetV2, AlexNet)
    }

    def __init__(self, repository: Optional[Repository] = None):
        self.repository = repository or Repository.from_config()

    def list_models(self) -> List[str]:
        return sorted(self.MODEL_LOADERS)

    def get_model_loader(self, artifact_id: str, repository: Optional[Repository] = None) -> ModelLoader:
        """Create the loader for ``artifact_id``, bound to ``repository`` or the zoo's own."""
        if artifact_id not in self.MODEL_LOADERS:
            raise ValueError(f"Unsupported model: {artifact_id}. Supported models: {self.list_models()}")
        return self.MODEL_LOADERS[artifact_id](repository or self.repository)

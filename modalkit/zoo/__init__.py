"""
Model zoo of pretrained vision networks.
"""

from .classification import (
    ImageClassificationModelLoader,
    Squeezenet,
    Resnet,
    MobileNetV2,
    AlexNet,
)
from .loader import ModelLoader
from .repository import Repository
from .zoo import ModelZoo

__all__ = [
    "ModelLoader",
    "ImageClassificationModelLoader",
    "Squeezenet",
    "Resnet",
    "MobileNetV2",
    "AlexNet",
    "Repository",
    "ModelZoo",
]

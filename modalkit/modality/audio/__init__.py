"""
Audio modality helpers.

Backends are loaded on demand: ``AudioFactory.get_instance()`` picks the first
decoding library that is importable on this machine.
"""

from .audio import Audio
from .factory import (
    FACTORIES,
    AudioFactory,
    AudioFactoryError,
    new_instance,
)

__all__ = [
    "Audio",
    "FACTORIES",
    "AudioFactory",
    "AudioFactoryError",
    "new_instance",
]

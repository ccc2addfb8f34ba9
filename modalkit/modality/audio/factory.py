"""Audio creation on top of whichever decoding backend is installed.

``AudioFactory`` fixes the API; concrete factories wrap a decoding library.
The process-wide factory is chosen by walking a priority list of dotted class
paths and keeping the first one that imports and constructs.
"""

from __future__ import annotations

import importlib
import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np
import torch

from ...core.io import is_absolute_uri, read_url_bytes
from .audio import Audio

logger = logging.getLogger(__name__)

FACTORIES = (
    "modalkit.modality.audio.librosa_factory.LibrosaAudioFactory",
    "modalkit.modality.audio.soundfile_factory.SoundFileAudioFactory",
)

# Failures that mean "this backend is not usable here". OSError covers a
# missing native libsndfile.
_LOAD_ERRORS = (ImportError, AttributeError, TypeError, ValueError, OSError)


class AudioFactoryError(RuntimeError):
    """No audio backend could be constructed."""


class AudioFactory(ABC):
    """Creates :class:`Audio` objects from files, URLs, streams and arrays."""

    _instance: Optional["AudioFactory"] = None

    @classmethod
    def get_instance(cls) -> "AudioFactory":
        """Return the process-wide factory, selecting a backend on first use."""
        if AudioFactory._instance is None:
            AudioFactory._instance = new_instance()
        return AudioFactory._instance

    @staticmethod
    def set_instance(factory: Optional["AudioFactory"]) -> None:
        """Replace the process-wide factory; ``None`` re-runs selection on next use."""
        AudioFactory._instance = factory

    @abstractmethod
    def from_file(self, path: Union[str, Path]) -> Audio:
        """Decode an audio file.

        Raises:
            FileNotFoundError: The file does not exist.
            OSError: The file cannot be decoded.
        """

    def from_url(self, url: str) -> Audio:
        """Decode audio from an absolute URI, or from a local path otherwise.

        Raises:
            OSError: The URL cannot be fetched or its content decoded.
        """
        if is_absolute_uri(url):
            return self.from_input_stream(io.BytesIO(read_url_bytes(url)))
        return self.from_file(Path(url))

    @abstractmethod
    def from_input_stream(self, stream) -> Audio:
        """Decode audio from a binary file-like object.

        Raises:
            OSError: The content cannot be decoded.
        """

    def from_data(self, data: Sequence[float], sample_rate: float = 0, channels: int = 0) -> Audio:
        """Wrap raw float samples."""
        return Audio(data, sample_rate=sample_rate, channels=channels)

    def from_ndarray(self, array, sample_rate: float = 0) -> Audio:
        """Build audio from a tensor or array.

        A 1-D array is taken as mono samples. A 2-D array is channel-first
        ``(channels, samples)`` and is averaged down to mono.
        """
        if isinstance(array, torch.Tensor):
            array = array.detach().cpu().numpy()
        array = np.asarray(array, dtype=np.float32)
        if array.ndim == 1:
            return Audio(array, sample_rate=sample_rate, channels=1)
        if array.ndim == 2:
            return Audio(array.mean(axis=0), sample_rate=sample_rate, channels=array.shape[0])
        raise ValueError(f"Expected a 1-D or (channels, samples) array, got shape {array.shape}")


def new_instance(candidates: Optional[Sequence[str]] = None) -> AudioFactory:
    """Construct the first usable factory among ``candidates``.

    Args:
        candidates: Dotted class paths in priority order. ``None`` uses
            ``audio.factories`` from the configuration, then ``FACTORIES``.

    Raises:
        AudioFactoryError: None of the candidates could be constructed.
    """
    if candidates is None:
        from ...config.library import get_config
        candidates = get_config().audio_factories or FACTORIES

    for name in candidates:
        try:
            module_name, _, class_name = name.rpartition(".")
            clazz = getattr(importlib.import_module(module_name), class_name)
            if not (isinstance(clazz, type) and issubclass(clazz, AudioFactory)):
                raise TypeError(f"{name} is not an AudioFactory")
            factory = clazz()
        except _LOAD_ERRORS:
            logger.debug(f"Audio factory {name} unavailable", exc_info=True)
            continue
        logger.debug(f"Using audio factory {name}")
        return factory
    raise AudioFactoryError("Failed to create AudioFactory!")

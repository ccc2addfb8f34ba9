"""librosa-backed audio decoding with optional resampling.

Importing this module fails when librosa is not installed, which makes the
factory selector fall through to the next backend.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import librosa
import numpy as np

from .audio import Audio
from .factory import AudioFactory

logger = logging.getLogger(__name__)


class LibrosaAudioFactory(AudioFactory):
    """Decodes audio with librosa, resampling when a target rate is set.

    Args:
        target_sample_rate: Resample every clip to this rate. ``None`` reads
            ``audio.target_sample_rate`` from the configuration; a missing
            value keeps the native rate.
    """

    def __init__(self, target_sample_rate: Optional[int] = None):
        if target_sample_rate is None:
            from ...config.library import get_config
            target_sample_rate = get_config().audio_target_sample_rate
        self.target_sample_rate = target_sample_rate

    def from_file(self, path: Union[str, Path]) -> Audio:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Audio file not found: {path}")
        return self._decode(str(path), source=path)

    def from_input_stream(self, stream) -> Audio:
        return self._decode(stream, source="stream")

    def _decode(self, file, source) -> Audio:
        try:
            y, sample_rate = librosa.load(file, sr=None, mono=False)
        except Exception as e:
            raise OSError(f"Cannot decode audio from {source}: {e}") from e

        channels = 1 if y.ndim == 1 else y.shape[0]
        y = librosa.to_mono(y)
        if self.target_sample_rate and self.target_sample_rate != sample_rate:
            logger.debug(f"Resampling {source} from {sample_rate} Hz to {self.target_sample_rate} Hz")
            y = librosa.resample(y, orig_sr=sample_rate, target_sr=self.target_sample_rate)
            sample_rate = self.target_sample_rate
        return Audio(np.asarray(y, dtype=np.float32), sample_rate=sample_rate, channels=channels)

"""libsndfile-backed audio decoding through ``soundfile``."""

from pathlib import Path
from typing import Union

import soundfile as sf

from .audio import Audio
from .factory import AudioFactory


class SoundFileAudioFactory(AudioFactory):
    """Decodes WAV, FLAC, OGG and the other formats libsndfile supports.

    Samples are read as float32 and down-mixed to mono; the source sample rate
    is kept as is.
    """

    def from_file(self, path: Union[str, Path]) -> Audio:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Audio file not found: {path}")
        return self._decode(str(path), source=path)

    def from_input_stream(self, stream) -> Audio:
        return self._decode(stream, source="stream")

    def _decode(self, file, source) -> Audio:
        try:
            data, sample_rate = sf.read(file, dtype="float32", always_2d=True)
        except (sf.SoundFileError, RuntimeError) as e:
            raise OSError(f"Cannot decode audio from {source}: {e}") from e
        # always_2d gives (frames, channels)
        return Audio(data.mean(axis=1), sample_rate=sample_rate, channels=data.shape[1])

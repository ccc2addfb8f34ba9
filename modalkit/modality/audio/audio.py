"""Decoded audio clip."""

import numpy as np


class Audio:
    """Mono float32 samples together with their sample rate and source channel count.

    Args:
        data: 1-D sequence of samples, converted to ``float32``.
        sample_rate: Sample rate in Hz; 0 when unknown.
        channels: Channel count of the source; 0 when unknown.
    """

    def __init__(self, data, sample_rate: float = 0, channels: int = 0):
        samples = np.asarray(data, dtype=np.float32)
        if samples.ndim != 1:
            raise ValueError(f"Audio data must be one-dimensional, got shape {samples.shape}")
        samples.setflags(write=False)
        self._data = samples
        self._sample_rate = float(sample_rate)
        self._channels = int(channels)

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def sample_rate(self) -> float:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def duration(self) -> float:
        """Length in seconds, 0 when the sample rate is unknown."""
        if self._sample_rate <= 0:
            return 0.0
        return len(self._data) / self._sample_rate

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return (
            f"Audio(samples={len(self._data)}, sample_rate={self._sample_rate:g}, "
            f"channels={self._channels})"
        )

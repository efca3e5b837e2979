"""In-memory sample buffer shared by every audio engine component.

Samples are stored channel-major as a read-only float32 array of shape
``(num_channels, frame_count)``. Transformations never mutate a buffer; they
build a new one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from src.core.errors import InvalidParameter

__all__ = ["SampleBuffer"]


@dataclass(frozen=True, eq=False)
class SampleBuffer:
    channels: np.ndarray
    sample_rate: int

    def __post_init__(self) -> None:
        data = np.array(self.channels, dtype=np.float32, copy=True)
        if data.ndim == 1:
            data = data.reshape(1, -1)
        if data.ndim != 2 or data.shape[0] < 1:
            raise InvalidParameter(
                f"Sample data must be shaped (channels, frames), got {data.shape}"
            )
        try:
            rate = int(self.sample_rate)
        except (TypeError, ValueError):
            raise InvalidParameter(f"Invalid sample_rate: {self.sample_rate!r}")
        if rate <= 0:
            raise InvalidParameter(f"sample_rate must be positive, got {rate}")

        data.setflags(write=False)
        object.__setattr__(self, "channels", data)
        object.__setattr__(self, "sample_rate", rate)

    @classmethod
    def from_channels(cls, channels: Sequence[Sequence[float]], sample_rate: int) -> "SampleBuffer":
        """Build a buffer from per-channel sample sequences of equal length."""
        if not channels:
            raise InvalidParameter("At least one channel is required")
        lengths = {len(ch) for ch in channels}
        if len(lengths) != 1:
            raise InvalidParameter(f"All channels must have the same frame count, got {sorted(lengths)}")
        return cls(np.asarray(channels, dtype=np.float32), sample_rate)

    @classmethod
    def silence(cls, num_channels: int, frame_count: int, sample_rate: int) -> "SampleBuffer":
        if num_channels < 1 or frame_count < 0:
            raise InvalidParameter(
                f"Invalid silence shape: channels={num_channels}, frames={frame_count}"
            )
        return cls(np.zeros((num_channels, frame_count), dtype=np.float32), sample_rate)

    @property
    def num_channels(self) -> int:
        return int(self.channels.shape[0])

    @property
    def frame_count(self) -> int:
        return int(self.channels.shape[1])

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return self.frame_count / float(self.sample_rate)

    def channel(self, index: int) -> np.ndarray:
        return self.channels[index]

    def __len__(self) -> int:
        return self.frame_count

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SampleBuffer):
            return NotImplemented
        return self.sample_rate == other.sample_rate and np.array_equal(self.channels, other.channels)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"SampleBuffer(channels={self.num_channels}, frames={self.frame_count}, "
            f"sample_rate={self.sample_rate})"
        )

"""Linear-interpolation resampling.

Two operations share one interpolation kernel:

- `resample`: variable-rate playback. Duration is divided by `speed` and pitch
  moves with it (speed > 1 sounds younger, speed < 1 older).
- `convert_rate`: sample-rate normalization. Duration is preserved, only the
  rate changes.

Both return the input object unchanged when there is nothing to do.
"""

from __future__ import annotations

import math

import numpy as np

from src.core.audio.buffer import SampleBuffer
from src.core.errors import InvalidParameter

__all__ = ["resample", "convert_rate"]

# Absorbs float error in frame_count / speed (e.g. 24000 / 1.2).
_FLOOR_EPS = 1e-9


def _interpolate(channels: np.ndarray, positions: np.ndarray) -> np.ndarray:
    """Read every channel at fractional `positions` by linear interpolation.

    Positions past the last source sample hold the last sample value.
    """
    frames = channels.shape[1]
    out = np.zeros((channels.shape[0], positions.size), dtype=np.float32)
    if frames == 0 or positions.size == 0:
        return out

    src_index = np.arange(frames, dtype=np.float64)
    for ch in range(channels.shape[0]):
        out[ch] = np.interp(positions, src_index, channels[ch].astype(np.float64))
    return out


def resample(buffer: SampleBuffer, speed: float) -> SampleBuffer:
    """Change playback speed: new_frames = floor(frames / speed), rate unchanged."""
    try:
        speed = float(speed)
    except (TypeError, ValueError):
        raise InvalidParameter(f"Invalid speed: {speed!r}")
    if not math.isfinite(speed) or speed <= 0:
        raise InvalidParameter(f"speed must be a positive number, got {speed}")
    if speed == 1.0:
        return buffer

    new_frames = int(math.floor(buffer.frame_count / speed + _FLOOR_EPS))
    positions = np.arange(new_frames, dtype=np.float64) * speed
    return SampleBuffer(_interpolate(buffer.channels, positions), buffer.sample_rate)


def convert_rate(buffer: SampleBuffer, target_rate: int) -> SampleBuffer:
    """Resample to `target_rate` while keeping wall-clock duration."""
    try:
        target_rate = int(target_rate)
    except (TypeError, ValueError):
        raise InvalidParameter(f"Invalid target_rate: {target_rate!r}")
    if target_rate <= 0:
        raise InvalidParameter(f"target_rate must be positive, got {target_rate}")
    if buffer.sample_rate == target_rate:
        return buffer

    ratio = buffer.sample_rate / float(target_rate)
    # round half up; Python's round() would use banker's rounding
    new_frames = int(math.floor(buffer.frame_count * target_rate / buffer.sample_rate + 0.5))
    positions = np.arange(new_frames, dtype=np.float64) * ratio
    return SampleBuffer(_interpolate(buffer.channels, positions), target_rate)

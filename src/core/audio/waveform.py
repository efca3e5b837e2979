"""Waveform envelope for trim editors.

Channel 0 is split into `width` buckets of ceil(frames / width) samples; each
bucket reports its (min, max). Flat buckets, including empty ones past the end
of the audio, are widened to +/-0.01 so the drawn bar stays visible.
"""

from __future__ import annotations

import math

import numpy as np

from src.core.audio.buffer import SampleBuffer
from src.core.errors import InvalidParameter

__all__ = ["FLAT_PEAK", "waveform_peaks"]

FLAT_PEAK = 0.01


def waveform_peaks(buffer: SampleBuffer, width: int) -> np.ndarray:
    """Return a float32 array of shape (width, 2) holding per-bucket (min, max)."""
    if width <= 0:
        raise InvalidParameter(f"width must be positive, got {width}")

    data = buffer.channels[0]
    peaks = np.empty((width, 2), dtype=np.float32)
    peaks[:, 0] = -FLAT_PEAK
    peaks[:, 1] = FLAT_PEAK
    if data.size == 0:
        return peaks

    step = int(math.ceil(data.size / width))
    for i in range(width):
        bucket = data[i * step:(i + 1) * step]
        if bucket.size == 0:
            break
        lo = float(bucket.min())
        hi = float(bucket.max())
        if lo != hi:
            peaks[i] = (lo, hi)

    return peaks

"""Non-destructive trimming of a sample buffer to a time range."""

from __future__ import annotations

import math

from src.core.audio.buffer import SampleBuffer
from src.core.errors import InvalidParameter

__all__ = ["trim"]

# Absorbs float error in time * rate (e.g. (1009 / 8000) * 8000).
_FLOOR_EPS = 1e-9


def trim(buffer: SampleBuffer, start_time: float, end_time: float) -> SampleBuffer:
    """Copy frames [floor(start * rate), floor(end * rate)) of every channel.

    The range is clamped to [0, duration]. A range that is empty after
    clamping (or shorter than one frame) yields a single zero frame per
    channel instead of an error, so players never receive zero-length audio.
    """
    start = float(start_time)
    end = float(end_time)
    if math.isnan(start) or math.isnan(end):
        raise InvalidParameter(f"Trim bounds must be numbers, got start={start_time!r}, end={end_time!r}")

    start = max(start, 0.0)
    end = min(end, buffer.duration)
    if start >= end:
        return SampleBuffer.silence(buffer.num_channels, 1, buffer.sample_rate)

    start_frame = int(math.floor(start * buffer.sample_rate + _FLOOR_EPS))
    if end >= buffer.duration:
        end_frame = buffer.frame_count
    else:
        end_frame = min(int(math.floor(end * buffer.sample_rate + _FLOOR_EPS)), buffer.frame_count)
    if start_frame >= end_frame:
        return SampleBuffer.silence(buffer.num_channels, 1, buffer.sample_rate)

    return SampleBuffer(buffer.channels[:, start_frame:end_frame], buffer.sample_rate)

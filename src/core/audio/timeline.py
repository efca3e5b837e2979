"""Timeline assembly: concatenate fragments into one mono track.

Each item contributes its samples followed by `delay` seconds of silence.
Boundaries are hard cuts; there is no cross-fade and no resampling here, so
callers must bring every buffer to the target rate first (see
`resample.convert_rate`).
"""

from __future__ import annotations

import math
from typing import Iterable, List, NamedTuple, Sequence, Tuple, Union

import numpy as np

from src.core.audio.buffer import SampleBuffer
from src.core.audio.pcm import WORKING_SAMPLE_RATE
from src.core.errors import InvalidParameter

__all__ = ["MIX_MODES", "TimelineItem", "assemble", "delay_frames", "timeline_length"]

MIX_MODES = ("first", "average")


class TimelineItem(NamedTuple):
    buffer: SampleBuffer
    delay: float = 0.0


ItemLike = Union[TimelineItem, Tuple[SampleBuffer, float]]


def delay_frames(delay: float, sample_rate: int) -> int:
    return int(math.floor(delay * sample_rate))


def _normalize_items(items: Iterable[ItemLike]) -> List[TimelineItem]:
    normalized: List[TimelineItem] = []
    for index, item in enumerate(items):
        buffer, delay = item
        if not isinstance(buffer, SampleBuffer):
            raise InvalidParameter(f"Timeline item {index} has no SampleBuffer: {type(buffer)!r}")
        delay = float(delay)
        if not math.isfinite(delay) or delay < 0:
            raise InvalidParameter(f"Timeline item {index} has invalid delay {delay}, expected a finite number >= 0")
        normalized.append(TimelineItem(buffer, delay))
    return normalized


def timeline_length(items: Sequence[ItemLike], sample_rate: int = WORKING_SAMPLE_RATE) -> int:
    """Total output frames: sum of frame counts plus floored delay frames."""
    return sum(
        item.buffer.frame_count + delay_frames(item.delay, sample_rate)
        for item in _normalize_items(items)
    )


def _mono(buffer: SampleBuffer, mix: str) -> np.ndarray:
    if mix == "average" and buffer.num_channels > 1:
        return buffer.channels.mean(axis=0, dtype=np.float32)
    # Only channel 0 is kept for multi-channel input.
    return buffer.channels[0]


def assemble(
    items: Iterable[ItemLike],
    sample_rate: int = WORKING_SAMPLE_RATE,
    mix: str = "first",
) -> SampleBuffer:
    """Merge `(buffer, delay)` items, in order, into a single-channel buffer.

    Args:
        items: ordered `(SampleBuffer, delay_seconds)` pairs.
        sample_rate: rate of the output and of every item's buffer.
        mix: "first" keeps channel 0 of each item; "average" averages all
            channels.

    Returns:
        Mono buffer of `timeline_length(items)` frames, or a single zero frame
        when there is nothing to assemble.
    """
    if sample_rate <= 0:
        raise InvalidParameter(f"sample_rate must be positive, got {sample_rate}")
    if mix not in MIX_MODES:
        raise InvalidParameter(f"Unknown mix mode {mix!r}, expected one of {MIX_MODES}")

    timeline = _normalize_items(items)
    total = sum(item.buffer.frame_count + delay_frames(item.delay, sample_rate) for item in timeline)
    if total == 0:
        return SampleBuffer.silence(1, 1, sample_rate)

    out = np.zeros((1, total), dtype=np.float32)
    offset = 0
    for item in timeline:
        samples = _mono(item.buffer, mix)
        out[0, offset:offset + samples.size] = samples
        offset += samples.size + delay_frames(item.delay, sample_rate)

    return SampleBuffer(out, sample_rate)

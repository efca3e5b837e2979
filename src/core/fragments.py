"""Fragment descriptors consumed by the assembly engine.

A fragment is caller-owned state: the engine reads it and never mutates it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from src.core.audio import pcm
from src.core.audio.buffer import SampleBuffer
from src.core.errors import InvalidParameter
from src.core.presets import get_preset

__all__ = ["DEFAULT_DELAY", "Fragment", "GeneratedFragment", "UploadedFragment", "resolve_speed"]

DEFAULT_DELAY = 1.0


def _check_delay(delay: float) -> None:
    if delay is None or not math.isfinite(delay) or delay < 0:
        raise InvalidParameter(f"delay must be a finite number >= 0 seconds, got {delay}")


def resolve_speed(speed: Optional[float], preset: Optional[str], default_speed: float = 1.0) -> float:
    if speed is not None:
        return speed
    if preset:
        return get_preset(preset).speed
    return default_speed


@dataclass(frozen=True)
class GeneratedFragment:
    """Synthesized speech: raw PCM16LE mono at the working rate."""

    pcm: bytes
    speed: float = 1.0
    delay: float = DEFAULT_DELAY

    def __post_init__(self) -> None:
        if self.speed is None or not math.isfinite(self.speed) or self.speed <= 0:
            raise InvalidParameter(f"speed must be a positive number, got {self.speed}")
        _check_delay(self.delay)

    @classmethod
    def from_base64(
        cls,
        payload: str,
        *,
        speed: Optional[float] = None,
        preset: Optional[str] = None,
        delay: float = DEFAULT_DELAY,
        default_speed: float = 1.0,
    ) -> "GeneratedFragment":
        """Build from the speech service's base64 payload.

        An explicit `speed` wins over the preset's speed, which wins over
        `default_speed`.
        """
        return cls(
            pcm=pcm.decode_base64(payload),
            speed=resolve_speed(speed, preset, default_speed),
            delay=delay,
        )


@dataclass(frozen=True)
class UploadedFragment:
    """A decoded user upload with an optional trim range in seconds."""

    buffer: SampleBuffer
    trim_start: Optional[float] = None
    trim_end: Optional[float] = None
    delay: float = DEFAULT_DELAY

    def __post_init__(self) -> None:
        _check_delay(self.delay)

    @property
    def trim_range(self) -> Optional[Tuple[float, float]]:
        """(start, end) when any bound is set, else None."""
        if self.trim_start is None and self.trim_end is None:
            return None
        start = 0.0 if self.trim_start is None else float(self.trim_start)
        end = self.buffer.duration if self.trim_end is None else float(self.trim_end)
        return start, end


Fragment = Union[GeneratedFragment, UploadedFragment]

"""PCM16LE codec.

The speech service returns headerless, signed 16-bit little-endian PCM (mono,
24kHz) wrapped in base64. These helpers convert between that byte layout and
`SampleBuffer` without FFmpeg.
"""

from __future__ import annotations

import base64
import binascii

import numpy as np

from src.core.audio.buffer import SampleBuffer
from src.core.errors import InvalidParameter, MalformedAudio

__all__ = [
    "WORKING_SAMPLE_RATE",
    "decode",
    "decode_base64",
    "encode",
    "float_to_int16",
]

WORKING_SAMPLE_RATE = 24000

_PCM16LE = np.dtype("<i2")


def _deinterleave(samples: np.ndarray, channels: int) -> np.ndarray:
    return samples.reshape(-1, channels).T


def decode(data: bytes, sample_rate: int = WORKING_SAMPLE_RATE, channels: int = 1) -> SampleBuffer:
    """Decode raw PCM16LE bytes into a buffer, normalizing each value by 32768."""
    if sample_rate <= 0:
        raise InvalidParameter(f"sample_rate must be positive, got {sample_rate}")
    if channels <= 0:
        raise InvalidParameter(f"channels must be positive, got {channels}")
    if len(data) % 2 != 0:
        raise MalformedAudio(f"PCM16 byte stream has odd length {len(data)}")
    if len(data) % (2 * channels) != 0:
        raise MalformedAudio(
            f"PCM16 byte stream of {len(data)} bytes is not a whole number of {channels}-channel frames"
        )

    ints = np.frombuffer(data, dtype=_PCM16LE)
    audio = ints.astype(np.float32) / 32768.0
    return SampleBuffer(_deinterleave(audio, channels), sample_rate)


def float_to_int16(samples: np.ndarray) -> np.ndarray:
    """Clamp to [-1, 1] and scale asymmetrically so +1.0 maps to 32767, not 32768."""
    a = np.clip(np.asarray(samples, dtype=np.float32), -1.0, 1.0)
    scaled = np.where(a < 0, a * 32768.0, a * 32767.0)
    # astype truncates toward zero
    return scaled.astype(np.int16)


def encode(buffer: SampleBuffer) -> bytes:
    """Encode a buffer as interleaved PCM16LE bytes (frame by frame, channel order)."""
    if buffer.frame_count == 0:
        return b""
    interleaved = float_to_int16(buffer.channels).T.reshape(-1)
    return interleaved.astype(_PCM16LE, copy=False).tobytes()


def decode_base64(payload: str) -> bytes:
    """Decode the base64 transport form of a PCM payload."""
    if payload is None:
        raise MalformedAudio("PCM payload is missing")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedAudio(f"Invalid base64 PCM payload: {e}") from e

"""Canonical 44-byte WAV (RIFF/WAVE, PCM16) reader and writer."""

from __future__ import annotations

import struct

import numpy as np

from src.core.audio import pcm
from src.core.audio.buffer import SampleBuffer
from src.core.errors import MalformedAudio

__all__ = ["WAV_HEADER_SIZE", "is_wav_bytes", "read_wav", "write_wav", "wrap_pcm"]

WAV_HEADER_SIZE = 44

_WAVE_FORMAT_PCM = 1
_BITS_PER_SAMPLE = 16
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


def is_wav_bytes(data: bytes) -> bool:
    """Best-effort check for a RIFF/WAVE header."""
    return len(data) >= 12 and data[0:4] == b"RIFF" and data[8:12] == b"WAVE"


def _header(data_size: int, sample_rate: int, channels: int) -> bytes:
    return _HEADER.pack(
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        16,
        _WAVE_FORMAT_PCM,
        channels,
        sample_rate,
        sample_rate * channels * 2,
        channels * 2,
        _BITS_PER_SAMPLE,
        b"data",
        data_size,
    )


def wrap_pcm(data: bytes, sample_rate: int = pcm.WORKING_SAMPLE_RATE, channels: int = 1) -> bytes:
    """Prefix raw PCM16LE bytes with a WAV header, without decoding them."""
    return _header(len(data), sample_rate, channels) + data


def write_wav(buffer: SampleBuffer) -> bytes:
    payload = pcm.encode(buffer)
    return _header(len(payload), buffer.sample_rate, buffer.num_channels) + payload


def read_wav(data: bytes) -> SampleBuffer:
    """Parse a PCM16 WAV file.

    Markers are checked in order (RIFF, WAVE, fmt , data). The fmt chunk size
    is honored when locating the data chunk, so headers with a fmt extension
    still parse; any other chunk between fmt and data is rejected.
    """
    if len(data) < WAV_HEADER_SIZE:
        raise MalformedAudio(f"WAV data too short: {len(data)} bytes")
    if data[0:4] != b"RIFF":
        raise MalformedAudio("Missing RIFF marker")
    if data[8:12] != b"WAVE":
        raise MalformedAudio("Missing WAVE marker")
    if data[12:16] != b"fmt ":
        raise MalformedAudio("Missing 'fmt ' chunk")

    (fmt_size,) = struct.unpack_from("<I", data, 16)
    if fmt_size < 16:
        raise MalformedAudio(f"fmt chunk too small: {fmt_size} bytes")
    audio_format, channels, sample_rate, _byte_rate, block_align, bits = struct.unpack_from(
        "<HHIIHH", data, 20
    )
    if bits != _BITS_PER_SAMPLE:
        raise MalformedAudio(f"Only 16-bit WAV is supported, got {bits}-bit")
    if audio_format != _WAVE_FORMAT_PCM:
        raise MalformedAudio(f"Only PCM WAV (format 1) is supported, got format {audio_format}")
    if channels == 0 or sample_rate == 0:
        raise MalformedAudio(f"Invalid WAV format: channels={channels}, sample_rate={sample_rate}")

    data_offset = 20 + fmt_size
    if len(data) < data_offset + 8 or data[data_offset:data_offset + 4] != b"data":
        raise MalformedAudio("Missing 'data' chunk")
    (data_size,) = struct.unpack_from("<I", data, data_offset + 4)
    start = data_offset + 8
    if data_size > len(data) - start:
        raise MalformedAudio(
            f"data chunk declares {data_size} bytes but only {len(data) - start} remain"
        )
    if data_size % (channels * 2) != 0:
        raise MalformedAudio(
            f"data chunk of {data_size} bytes is not a whole number of {channels}-channel frames"
        )

    payload = data[start:start + data_size]
    ints = np.frombuffer(payload, dtype="<i2").astype(np.float32)
    samples = np.where(ints < 0, ints / 32768.0, ints / 32767.0).astype(np.float32)
    return SampleBuffer(samples.reshape(-1, channels).T, int(sample_rate))

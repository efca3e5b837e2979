"""Decode user-uploaded audio files into a `SampleBuffer`.

16-bit PCM WAV is parsed natively. Anything else (mp3, m4a, ogg, 24-bit WAV,
WAV with extra chunks, ...) goes through FFmpeg, decoded to PCM16LE at the
file's own sample rate and channel count so rate normalization stays an
explicit, separate step.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple, Union

import ffmpeg

from src.core.audio import pcm
from src.core.audio.buffer import SampleBuffer
from src.core.audio.wav import is_wav_bytes, read_wav
from src.core.errors import MalformedAudio

logger = logging.getLogger(__name__)

__all__ = ["decode_audio_file", "probe_audio_format"]


def _ffmpeg_message(e: "ffmpeg.Error") -> str:
    return e.stderr.decode(errors="replace") if e.stderr else str(e)


def probe_audio_format(path: Union[str, Path]) -> Tuple[int, int]:
    """Return (sample_rate, channels) of the first audio stream in `path`."""
    try:
        info = ffmpeg.probe(str(path))
    except ffmpeg.Error as e:
        raise MalformedAudio(f"Unable to probe audio file: {_ffmpeg_message(e)}") from e

    for stream in info.get("streams", []):
        if stream.get("codec_type") != "audio":
            continue
        try:
            sample_rate = int(stream.get("sample_rate") or 0)
            channels = int(stream.get("channels") or 0)
        except (TypeError, ValueError):
            break
        if sample_rate > 0 and channels > 0:
            return sample_rate, channels
        break

    raise MalformedAudio(f"No decodable audio stream found in {Path(path).name}")


def _decode_with_ffmpeg(path: Union[str, Path], threads: int = 0) -> SampleBuffer:
    sample_rate, channels = probe_audio_format(path)
    try:
        audio_bytes, _ = (
            ffmpeg
            .input(str(path), threads=threads)
            .output("-", format="s16le", acodec="pcm_s16le", ac=channels, ar=sample_rate)
            .run(cmd=["ffmpeg", "-nostdin"], capture_stdout=True, capture_stderr=True)
        )
    except ffmpeg.Error as e:
        message = _ffmpeg_message(e)
        logger.error(f"FFmpeg decode failed for {path}: {message}")
        raise MalformedAudio(f"Unable to decode audio file: {message}") from e

    return pcm.decode(audio_bytes, sample_rate=sample_rate, channels=channels)


def decode_audio_file(path: Union[str, Path], threads: int = 0) -> SampleBuffer:
    """Decode an audio file on disk."""
    path = Path(path)
    data = path.read_bytes()
    if not data:
        raise MalformedAudio(f"Audio file is empty: {path.name}")

    if is_wav_bytes(data):
        try:
            return read_wav(data)
        except MalformedAudio as e:
            logger.debug(f"Native WAV parse failed for {path.name} ({e}), falling back to FFmpeg")

    return _decode_with_ffmpeg(path, threads=threads)


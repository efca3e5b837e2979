"""Audio engine error types.

Both kinds derive from ValueError so API handlers that turn ValueError into a
400 response cover them without special cases.
"""

__all__ = ["AudioEngineError", "MalformedAudio", "InvalidParameter"]


class AudioEngineError(ValueError):
    """Base class for audio engine failures."""


class MalformedAudio(AudioEngineError):
    """Byte payload cannot be decoded (odd PCM length, bad WAV header, truncated data)."""


class InvalidParameter(AudioEngineError):
    """Non-positive speed/rate, negative delay or an otherwise unusable argument."""

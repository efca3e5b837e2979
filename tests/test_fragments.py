import base64

import numpy as np
import pytest

from src.core.audio.buffer import SampleBuffer
from src.core.errors import InvalidParameter, MalformedAudio
from src.core.fragments import DEFAULT_DELAY, GeneratedFragment, UploadedFragment


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


def test_generated_fragment_defaults():
    frag = GeneratedFragment(pcm=b"\x00\x00")
    assert frag.speed == 1.0
    assert frag.delay == DEFAULT_DELAY == 1.0


@pytest.mark.parametrize("kwargs", [{"speed": 0}, {"speed": -1.0}, {"delay": -0.5}, {"delay": float("nan")}, {"delay": float("inf")}])
def test_generated_fragment_validation(kwargs):
    with pytest.raises(InvalidParameter):
        GeneratedFragment(pcm=b"", **kwargs)


def test_from_base64_speed_resolution():
    payload = _b64(b"\x00\x00" * 4)

    assert GeneratedFragment.from_base64(payload).speed == 1.0
    assert GeneratedFragment.from_base64(payload, preset="old_man_2").speed == 0.85
    assert GeneratedFragment.from_base64(payload, speed=1.1, preset="old_man_2").speed == 1.1
    assert GeneratedFragment.from_base64(payload, delay=2.5).delay == 2.5
    assert GeneratedFragment.from_base64(payload).pcm == b"\x00\x00" * 4


def test_from_base64_default_speed_applies_without_speed_or_preset():
    payload = _b64(b"\x00\x00" * 4)

    assert GeneratedFragment.from_base64(payload, default_speed=1.5).speed == 1.5
    assert GeneratedFragment.from_base64(payload, preset="girl_1", default_speed=1.5).speed == 1.25
    assert GeneratedFragment.from_base64(payload, speed=0.9, default_speed=1.5).speed == 0.9


def test_from_base64_rejects_bad_payload_and_preset():
    with pytest.raises(MalformedAudio):
        GeneratedFragment.from_base64("%%%")
    with pytest.raises(InvalidParameter):
        GeneratedFragment.from_base64(_b64(b"\x00\x00"), preset="nope")


def test_uploaded_fragment_trim_range():
    buf = SampleBuffer(np.zeros((1, 300), dtype=np.float32), 100)

    assert UploadedFragment(buf).trim_range is None
    assert UploadedFragment(buf, trim_start=0.5).trim_range == (0.5, 3.0)
    assert UploadedFragment(buf, trim_end=2.0).trim_range == (0.0, 2.0)
    assert UploadedFragment(buf, trim_start=1, trim_end=2).trim_range == (1.0, 2.0)


def test_uploaded_fragment_rejects_negative_delay():
    with pytest.raises(InvalidParameter):
        UploadedFragment(SampleBuffer.silence(1, 1, 8000), delay=-1)


def test_uploaded_fragment_rejects_infinite_delay():
    with pytest.raises(InvalidParameter):
        UploadedFragment(SampleBuffer.silence(1, 1, 8000), delay=float("inf"))

import base64
import struct

import numpy as np
import pytest

from src.core.audio import pcm
from src.core.audio.buffer import SampleBuffer
from src.core.audio.wav import write_wav
from src.core.errors import InvalidParameter, MalformedAudio


def test_decode_one_second_of_silence_matches_working_rate():
    buf = pcm.decode(b"\x00" * 48000)

    assert buf.sample_rate == 24000
    assert buf.num_channels == 1
    assert buf.frame_count == 24000
    assert np.all(buf.channels == 0.0)
    assert len(write_wav(buf)) == 44 + 48000


def test_decode_normalizes_by_32768():
    data = struct.pack("<hhh", -32768, 0, 16384)
    buf = pcm.decode(data)

    assert buf.channel(0).tolist() == [-1.0, 0.0, 0.5]


def test_decode_rejects_odd_length():
    with pytest.raises(MalformedAudio):
        pcm.decode(b"\x00\x00\x00")


def test_decode_deinterleaves_channels():
    data = struct.pack("<hhhh", 1000, -1000, 2000, -2000)
    buf = pcm.decode(data, sample_rate=8000, channels=2)

    assert buf.num_channels == 2
    assert buf.frame_count == 2
    np.testing.assert_allclose(buf.channel(0), [1000 / 32768.0, 2000 / 32768.0])
    np.testing.assert_allclose(buf.channel(1), [-1000 / 32768.0, -2000 / 32768.0])

    # 3 samples cannot form whole stereo frames
    with pytest.raises(MalformedAudio):
        pcm.decode(struct.pack("<hhh", 1, 2, 3), channels=2)


@pytest.mark.parametrize("kwargs", [{"sample_rate": 0}, {"channels": 0}])
def test_decode_rejects_bad_format(kwargs):
    with pytest.raises(InvalidParameter):
        pcm.decode(b"\x00\x00", **kwargs)


def test_encode_clamps_and_scales_asymmetrically():
    buf = SampleBuffer.from_channels([[1.0, -1.0, 0.5, 2.0, -3.0]], 24000)
    ints = struct.unpack("<5h", pcm.encode(buf))

    assert ints == (32767, -32768, 16383, 32767, -32768)


def test_encode_interleaves_frames_in_channel_order():
    buf = SampleBuffer.from_channels([[0.5, 0.25], [-0.5, -0.25]], 24000)
    ints = struct.unpack("<4h", pcm.encode(buf))

    assert ints == (16383, -16384, 8191, -8192)


def test_encode_empty_buffer():
    assert pcm.encode(SampleBuffer.silence(1, 0, 24000)) == b""


def test_decode_base64_payload():
    raw = struct.pack("<hh", 123, -456)
    assert pcm.decode_base64(base64.b64encode(raw).decode()) == raw

    with pytest.raises(MalformedAudio):
        pcm.decode_base64("not base64!!")

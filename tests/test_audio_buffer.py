import numpy as np
import pytest

from src.core.audio.buffer import SampleBuffer
from src.core.errors import InvalidParameter


def test_sample_buffer_shape_and_duration():
    buf = SampleBuffer(np.zeros((2, 48000), dtype=np.float32), 24000)

    assert buf.num_channels == 2
    assert buf.frame_count == 48000
    assert len(buf) == 48000
    assert buf.duration == pytest.approx(2.0)


def test_sample_buffer_accepts_mono_1d_input():
    buf = SampleBuffer(np.array([0.1, 0.2, 0.3]), 16000)

    assert buf.num_channels == 1
    assert buf.frame_count == 3
    assert buf.channels.dtype == np.float32


def test_sample_buffer_is_read_only_and_copies_input():
    source = np.zeros((1, 4), dtype=np.float32)
    buf = SampleBuffer(source, 8000)

    source[0, 0] = 0.9
    assert buf.channel(0)[0] == 0.0

    with pytest.raises(ValueError):
        buf.channels[0, 0] = 1.0


def test_from_channels_requires_equal_lengths():
    with pytest.raises(InvalidParameter):
        SampleBuffer.from_channels([[0.0, 0.1], [0.0]], 24000)

    with pytest.raises(InvalidParameter):
        SampleBuffer.from_channels([], 24000)


@pytest.mark.parametrize("rate", [0, -1])
def test_non_positive_sample_rate_is_rejected(rate):
    with pytest.raises(InvalidParameter):
        SampleBuffer(np.zeros((1, 10), dtype=np.float32), rate)


def test_silence_and_equality():
    a = SampleBuffer.silence(2, 5, 24000)
    b = SampleBuffer.from_channels([[0.0] * 5, [0.0] * 5], 24000)

    assert a.frame_count == 5
    assert np.all(a.channels == 0.0)
    assert a == b
    assert a != SampleBuffer.silence(2, 5, 16000)


def test_zero_frame_buffer_is_allowed():
    buf = SampleBuffer.silence(1, 0, 24000)
    assert buf.frame_count == 0
    assert buf.duration == 0.0

import numpy as np
import pytest

from src.core.audio.buffer import SampleBuffer
from src.core.audio.waveform import FLAT_PEAK, waveform_peaks
from src.core.errors import InvalidParameter


def test_waveform_peaks_min_max_per_bucket():
    buf = SampleBuffer.from_channels([[-0.5, 0.5, -0.25, 0.25, 0.0, 0.0, 0.125, 0.375]], 8000)

    peaks = waveform_peaks(buf, 4)

    assert peaks.shape == (4, 2)
    np.testing.assert_allclose(
        peaks,
        [[-0.5, 0.5], [-0.25, 0.25], [-FLAT_PEAK, FLAT_PEAK], [0.125, 0.375]],
        rtol=1e-6,
    )


def test_waveform_peaks_wider_than_audio_pads_flat_buckets():
    buf = SampleBuffer.from_channels([[0.1, 0.2, 0.3]], 8000)

    peaks = waveform_peaks(buf, 5)

    assert peaks.shape == (5, 2)
    np.testing.assert_allclose(peaks[:, 0], -FLAT_PEAK, rtol=1e-6)
    np.testing.assert_allclose(peaks[:, 1], FLAT_PEAK, rtol=1e-6)


def test_waveform_peaks_reads_channel_zero():
    buf = SampleBuffer.from_channels([[0.0, 0.5], [-0.9, 0.9]], 8000)

    peaks = waveform_peaks(buf, 1)
    np.testing.assert_allclose(peaks[0], [0.0, 0.5])


def test_waveform_peaks_empty_buffer():
    peaks = waveform_peaks(SampleBuffer.silence(1, 0, 8000), 3)
    assert peaks.shape == (3, 2)


@pytest.mark.parametrize("width", [0, -5])
def test_waveform_peaks_rejects_bad_width(width):
    with pytest.raises(InvalidParameter):
        waveform_peaks(SampleBuffer.silence(1, 10, 8000), width)

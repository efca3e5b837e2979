"""Audio engine: sample buffers, PCM/WAV codecs, resampling, trimming and timeline assembly."""
from src.core.audio.buffer import SampleBuffer
from src.core.audio.pcm import WORKING_SAMPLE_RATE
from src.core.audio.resample import convert_rate, resample
from src.core.audio.timeline import TimelineItem, assemble
from src.core.audio.trim import trim
from src.core.audio.wav import read_wav, write_wav
from src.core.audio.waveform import waveform_peaks

__all__ = [
    'SampleBuffer',
    'WORKING_SAMPLE_RATE',
    'TimelineItem',
    'assemble',
    'convert_rate',
    'read_wav',
    'resample',
    'trim',
    'waveform_peaks',
    'write_wav',
]

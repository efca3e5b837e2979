"""音频拼接引擎 - 片段渲染 (解码 + 变速 + 重采样 + 裁剪) 与时间线合成"""
import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Sequence

from src.config import settings
from src.core.audio import pcm
from src.core.audio.buffer import SampleBuffer
from src.core.audio.resample import convert_rate, resample
from src.core.audio.timeline import MIX_MODES, TimelineItem, assemble
from src.core.audio.trim import trim
from src.core.audio.wav import write_wav
from src.core.errors import InvalidParameter
from src.core.fragments import Fragment, GeneratedFragment, UploadedFragment

logger = logging.getLogger(__name__)


class AssemblyEngine:
    """拼接引擎 - 把生成语音与上传音频渲染成一条连续的单声道音轨

    用法:
        engine = AssemblyEngine(working_sample_rate=24000)
        wav_bytes = engine.assemble_wav([GeneratedFragment(pcm_bytes, speed=1.2, delay=1.0)])
    """

    def __init__(
        self,
        working_sample_rate: int = pcm.WORKING_SAMPLE_RATE,
        max_workers: int = 4,
        mix: str = "first",
    ):
        if working_sample_rate <= 0:
            raise InvalidParameter(f"working_sample_rate must be positive, got {working_sample_rate}")
        if mix not in MIX_MODES:
            raise InvalidParameter(f"Unknown mix mode {mix!r}, expected one of {MIX_MODES}")
        self.working_sample_rate = working_sample_rate
        self.max_workers = max(1, int(max_workers))
        self.mix = mix

    @classmethod
    def from_settings(cls) -> "AssemblyEngine":
        return cls(
            working_sample_rate=settings.working_sample_rate,
            max_workers=settings.render_max_workers,
            mix=settings.assemble_mix_mode,
        )

    def render_fragment(self, fragment: Fragment) -> SampleBuffer:
        """渲染单个片段到工作采样率

        - 生成片段: PCM 解码 -> 按 speed 变速
        - 上传片段: 重采样到工作采样率 -> 按 trim 范围裁剪
        """
        if isinstance(fragment, GeneratedFragment):
            buffer = pcm.decode(fragment.pcm, sample_rate=self.working_sample_rate)
            return resample(buffer, fragment.speed)

        if isinstance(fragment, UploadedFragment):
            buffer = convert_rate(fragment.buffer, self.working_sample_rate)
            trim_range = fragment.trim_range
            if trim_range is not None:
                buffer = trim(buffer, *trim_range)
            return buffer

        raise InvalidParameter(f"Unsupported fragment type: {type(fragment).__name__}")

    def render_fragment_wav(self, fragment: Fragment) -> bytes:
        """渲染单个片段为 WAV (单片段下载/试听)"""
        start_time = time.time()
        wav = write_wav(self.render_fragment(fragment))
        logger.info(
            f"Rendered {type(fragment).__name__} to {len(wav)} WAV bytes "
            f"in {time.time() - start_time:.3f}s"
        )
        return wav

    def build_timeline(self, fragments: Sequence[Fragment]) -> List[TimelineItem]:
        """并行渲染所有片段，按输入顺序返回时间线"""
        if not fragments:
            return []

        workers = min(self.max_workers, len(fragments))
        if workers == 1:
            buffers = [self.render_fragment(f) for f in fragments]
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                buffers = list(executor.map(self.render_fragment, fragments))

        return [TimelineItem(buffer, fragment.delay) for buffer, fragment in zip(buffers, fragments)]

    def assemble(self, fragments: Sequence[Fragment]) -> SampleBuffer:
        """渲染并合成完整时间线

        空列表返回单帧静音; 调用方需在外部判断 "没有可合成的内容"。
        """
        start_time = time.time()
        timeline = self.build_timeline(fragments)
        merged = assemble(timeline, sample_rate=self.working_sample_rate, mix=self.mix)
        logger.info(
            f"Assembled {len(timeline)} fragments into {merged.duration:.2f}s "
            f"in {time.time() - start_time:.3f}s"
        )
        return merged

    def assemble_wav(self, fragments: Sequence[Fragment]) -> bytes:
        return write_wav(self.assemble(fragments))

    async def assemble_wav_async(self, fragments: Sequence[Fragment]) -> bytes:
        """在线程中合成, 避免阻塞事件循环"""
        return await asyncio.to_thread(self.assemble_wav, fragments)

    async def render_fragment_wav_async(self, fragment: Fragment) -> bytes:
        return await asyncio.to_thread(self.render_fragment_wav, fragment)

    def get_info(self) -> Dict[str, Any]:
        return {
            "working_sample_rate": self.working_sample_rate,
            "max_workers": self.max_workers,
            "mix": self.mix,
        }


assembly_engine = AssemblyEngine.from_settings()

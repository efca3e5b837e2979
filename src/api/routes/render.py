"""音频渲染 API 路由 (单片段下载 / 时间线合成 / 波形)"""
import asyncio
import logging
import time
from typing import List, Optional
from fastapi import APIRouter, File, UploadFile, Form, HTTPException
from fastapi.responses import Response

from src.api.dependencies import load_upload_buffer
from src.api.schemas import GeneratedFragmentRequest, WaveformResponse
from src.api.timeline_manifest import build_fragments, parse_timeline_manifest
from src.config import settings
from src.core.audio.buffer import SampleBuffer
from src.core.audio.wav import write_wav
from src.core.audio.waveform import waveform_peaks
from src.core.engine import assembly_engine
from src.core.fragments import Fragment, GeneratedFragment, UploadedFragment
from src.utils.service_metrics import metrics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["render"])


def _wav_response(wav: bytes, filename: str) -> Response:
    return Response(
        content=wav,
        media_type="audio/wav",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def _render_one(fragment: Fragment) -> SampleBuffer:
    start_time = time.time()
    buffer = await asyncio.to_thread(assembly_engine.render_fragment, fragment)
    metrics.add_render(1, buffer.duration, time.time() - start_time)
    return buffer


@router.post("/fragments/generated")
async def render_generated_fragment(request: GeneratedFragmentRequest):
    """
    渲染单个生成语音片段为 WAV

    按 speed (或预设速度) 变速，用于单片段试听/下载。
    """
    metrics.increment_requests()
    try:
        fragment = GeneratedFragment.from_base64(
            request.pcm_base64,
            speed=request.speed,
            preset=request.preset,
            delay=0.0,
            default_speed=settings.default_speed,
        )
        buffer = await _render_one(fragment)
        metrics.increment_success()
        suffix = f"_{request.preset}" if request.preset else ""
        return _wav_response(write_wav(buffer), f"segment{suffix}.wav")
    except ValueError as e:
        metrics.increment_failure()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        metrics.increment_failure()
        logger.error(f"Fragment render failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"渲染失败: {str(e)}")


@router.post("/fragments/uploaded")
async def render_uploaded_fragment(
    file: UploadFile = File(..., description="音频文件"),
    trim_start: Optional[float] = Form(default=None, description="裁剪起点 (秒)"),
    trim_end: Optional[float] = Form(default=None, description="裁剪终点 (秒)"),
):
    """
    渲染单个上传音频片段为 WAV

    重采样到工作采样率并按 [trim_start, trim_end] 裁剪。
    支持的音频格式: wav, mp3, m4a, flac, ogg 等
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="请上传音频文件")

    metrics.increment_requests()
    try:
        buffer = await load_upload_buffer(file)
        fragment = UploadedFragment(buffer=buffer, trim_start=trim_start, trim_end=trim_end, delay=0.0)
        rendered = await _render_one(fragment)
        metrics.increment_success()
        prefix = "trimmed_" if fragment.trim_range is not None else ""
        stem = file.filename.rsplit(".", 1)[0]
        return _wav_response(write_wav(rendered), f"{prefix}{stem}.wav")
    except HTTPException:
        metrics.increment_failure()
        raise
    except ValueError as e:
        metrics.increment_failure()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        metrics.increment_failure()
        logger.error(f"Upload render failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"渲染失败: {str(e)}")


@router.post("/timeline")
async def render_timeline(
    manifest: str = Form(..., description="时间线 JSON (片段列表)"),
    files: Optional[List[UploadFile]] = File(default=None, description="上传音频文件 (按 file_index 引用)"),
):
    """
    合成完整时间线为单声道 WAV

    片段按 manifest 顺序拼接，每个片段后插入 delay 秒静音。
    """
    metrics.increment_requests()
    try:
        entries = parse_timeline_manifest(manifest)
        if not entries:
            raise HTTPException(status_code=400, detail="没有可合成的音频片段")

        uploads = [await load_upload_buffer(f) for f in (files or [])]
        fragments = build_fragments(
            entries,
            uploads=uploads,
            default_delay=settings.default_delay_s,
            default_speed=settings.default_speed,
        )

        start_time = time.time()
        merged = await asyncio.to_thread(assembly_engine.assemble, fragments)
        metrics.add_render(len(fragments), merged.duration, time.time() - start_time)
        metrics.increment_success()

        return _wav_response(write_wav(merged), f"timeline-full-{int(time.time() * 1000)}.wav")
    except HTTPException:
        metrics.increment_failure()
        raise
    except ValueError as e:
        metrics.increment_failure()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        metrics.increment_failure()
        logger.error(f"Timeline render failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"合成失败: {str(e)}")


@router.post("/waveform", response_model=WaveformResponse)
async def get_waveform(
    file: UploadFile = File(..., description="音频文件"),
    width: Optional[int] = Form(default=None, description="波形柱数"),
):
    """计算上传音频的波形包络 (用于裁剪界面绘制)"""
    if width is None:
        width = settings.waveform_default_width
    if width <= 0 or width > settings.waveform_max_width:
        raise HTTPException(
            status_code=400,
            detail=f"width 必须在 1 到 {settings.waveform_max_width} 之间",
        )

    try:
        buffer = await load_upload_buffer(file)
        peaks = await asyncio.to_thread(waveform_peaks, buffer, width)
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Waveform failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"波形计算失败: {str(e)}")

    return WaveformResponse(
        code=0,
        duration=buffer.duration,
        sample_rate=buffer.sample_rate,
        frame_count=buffer.frame_count,
        channels=buffer.num_channels,
        peaks=peaks.tolist(),
    )

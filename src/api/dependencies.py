"""API 依赖注入"""
import asyncio
import os

from pathlib import Path
import aiofiles
from fastapi import UploadFile, HTTPException

from src.config import settings
from src.core.audio.buffer import SampleBuffer
from src.core.audio.decode import decode_audio_file


async def load_upload_buffer(file: UploadFile) -> SampleBuffer:
    """保存上传文件到临时目录并解码为 SampleBuffer (保留原始采样率与声道)"""
    suffix = Path(file.filename).suffix if file.filename else ".wav"
    temp_path = settings.uploads_dir / f"temp_{os.urandom(8).hex()}{suffix}"

    try:
        content = await file.read()
        if not content:
            raise HTTPException(status_code=400, detail=f"上传文件为空: {file.filename or 'file'}")
        if len(content) > settings.upload_max_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"上传文件过大 (最大 {settings.upload_max_bytes} 字节)",
            )

        async with aiofiles.open(temp_path, 'wb') as f:
            await f.write(content)

        # 解码可能调用 FFmpeg，放到线程中执行
        return await asyncio.to_thread(
            decode_audio_file, temp_path, threads=settings.ffmpeg_threads
        )
    finally:
        if temp_path.exists():
            temp_path.unlink()

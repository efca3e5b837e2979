from pathlib import Path
from pydantic_settings import BaseSettings
from typing import Literal

class Settings(BaseSettings):
    """应用配置"""
    # 服务配置
    app_name: str = "VoiceReel Audio Assembly Service"
    version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # 路径配置
    base_dir: Path = Path(__file__).parent.parent
    data_dir: Path = base_dir / "data"
    uploads_dir: Path = data_dir / "uploads"
    outputs_dir: Path = data_dir / "outputs"

    # 音频引擎配置
    working_sample_rate: int = 24000             # 工作采样率 (语音合成 PCM 固定 24kHz)
    default_delay_s: float = 1.0                 # 片段后默认静音时长 (秒)
    default_speed: float = 1.0                   # 默认播放速度 (1.0 = 原速)
    assemble_mix_mode: Literal["first", "average"] = "first"  # 多声道合并: 取第一声道 | 平均
    render_max_workers: int = 4                  # 片段并行渲染线程数

    # 波形配置
    waveform_default_width: int = 800            # 默认波形柱数
    waveform_max_width: int = 4000               # 最大波形柱数

    # 上传配置
    upload_max_bytes: int = 50 * 1024 * 1024     # 单个上传文件大小上限
    ffmpeg_threads: int = 0                      # FFmpeg 解码线程数 (0=自动)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()

# 确保目录存在
for dir_path in [settings.data_dir, settings.uploads_dir, settings.outputs_dir]:
    dir_path.mkdir(parents=True, exist_ok=True)

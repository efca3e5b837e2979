"""API 请求/响应模式"""
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field


class PresetInfo(BaseModel):
    """音色预设"""
    id: str = Field(..., description="预设 ID")
    label: str = Field(..., description="显示名称")
    voice: str = Field(..., description="基础音色")
    speed: float = Field(..., description="播放速度 (>1 更年轻, <1 更年长)")
    group: str = Field(..., description="年龄分组 (child/adult/elderly)")


class PresetListResponse(BaseModel):
    """音色预设列表响应"""
    code: int = Field(default=0, description="状态码 (0=成功)")
    presets: List[PresetInfo] = Field(default=[], description="预设列表")


class GeneratedFragmentRequest(BaseModel):
    """生成语音片段渲染请求"""
    pcm_base64: str = Field(..., description="Base64 编码的 PCM16LE 单声道 24kHz 音频")
    speed: Optional[float] = Field(default=None, gt=0, description="播放速度 (优先于 preset)")
    preset: Optional[str] = Field(default=None, description="音色预设 ID")


class WaveformResponse(BaseModel):
    """波形响应"""
    code: int = Field(default=0, description="状态码 (0=成功)")
    duration: float = Field(..., description="音频时长 (秒)")
    sample_rate: int = Field(..., description="采样率")
    frame_count: int = Field(..., description="每声道采样数")
    channels: int = Field(..., description="声道数")
    peaks: List[List[float]] = Field(default=[], description="每列 [min, max]")


class HealthResponse(BaseModel):
    """健康检查响应"""
    status: str = Field(..., description="服务状态")
    version: str = Field(..., description="服务版本")


class MetricsResponse(BaseModel):
    """指标响应"""
    uptime_seconds: float = Field(..., description="服务运行时间")
    total_requests: int = Field(..., description="总请求数")
    successful_requests: int = Field(..., description="成功请求数")
    failed_requests: int = Field(..., description="失败请求数")
    total_fragments: int = Field(..., description="渲染片段总数")
    total_output_seconds: float = Field(..., description="输出音频总时长")
    avg_rtf: float = Field(..., description="平均实时因子")
    engine: Dict[str, Any] = Field(default={}, description="引擎配置")

"""VoiceReel Audio Assembly Service 主入口"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from src.config import settings
from src.api import api_router
from src.api.schemas import HealthResponse, MetricsResponse
from src.core.engine import assembly_engine
from src.utils.service_metrics import metrics

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info(f"Starting {settings.app_name} v{settings.version}")
    logger.info(f"Assembly engine: {assembly_engine.get_info()}")
    logger.info("Service ready!")

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="语音片段拼接服务: PCM/WAV 编解码、变速、裁剪与时间线合成",
    lifespan=lifespan,
)

# CORS 中间件
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册路由
app.include_router(api_router)


@app.get("/health", response_model=HealthResponse, tags=["system"])
async def health_check():
    """健康检查"""
    return HealthResponse(status="healthy", version=settings.version)


@app.get("/", tags=["system"])
async def root():
    """服务信息"""
    return {
        "name": settings.app_name,
        "version": settings.version,
        "docs": "/docs",
    }


@app.get("/metrics", tags=["system"])
async def get_metrics():
    """获取服务指标 (JSON 格式)"""
    stats = metrics.get_stats()
    return MetricsResponse(
        uptime_seconds=stats["uptime_seconds"],
        total_requests=stats["total_requests"],
        successful_requests=stats["successful_requests"],
        failed_requests=stats["failed_requests"],
        total_fragments=stats["total_fragments"],
        total_output_seconds=stats["total_output_seconds"],
        avg_rtf=stats["avg_rtf"],
        engine=assembly_engine.get_info(),
    )


@app.get("/metrics/prometheus", tags=["system"], response_class=PlainTextResponse)
async def get_metrics_prometheus():
    """获取服务指标 (Prometheus 格式)"""
    return metrics.to_prometheus()

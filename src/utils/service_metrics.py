"""服务指标收集模块

提供简单的内存指标收集，支持 Prometheus 格式导出。
"""
import time
import threading
from typing import Dict, Any
from dataclasses import dataclass, field


@dataclass
class ServiceMetrics:
    """服务指标收集器"""

    # 启动时间
    start_time: float = field(default_factory=time.time)

    # 请求计数
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0

    # 渲染统计
    total_fragments: int = 0
    total_output_seconds: float = 0.0
    total_processing_seconds: float = 0.0

    # 线程锁
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def increment_requests(self) -> None:
        """增加请求计数"""
        with self._lock:
            self.total_requests += 1

    def increment_success(self) -> None:
        """增加成功计数"""
        with self._lock:
            self.successful_requests += 1

    def increment_failure(self) -> None:
        """增加失败计数"""
        with self._lock:
            self.failed_requests += 1

    def add_render(self, fragments: int, output_seconds: float, processing_seconds: float) -> None:
        """记录一次渲染 (片段数 / 输出时长 / 耗时)"""
        with self._lock:
            self.total_fragments += fragments
            self.total_output_seconds += output_seconds
            self.total_processing_seconds += processing_seconds

    @property
    def uptime_seconds(self) -> float:
        """服务运行时间"""
        return time.time() - self.start_time

    @property
    def avg_rtf(self) -> float:
        """平均实时因子 (处理耗时 / 输出音频时长)"""
        if self.total_output_seconds == 0:
            return 0.0
        return self.total_processing_seconds / self.total_output_seconds

    def get_stats(self) -> Dict[str, Any]:
        """获取所有指标"""
        with self._lock:
            return {
                "uptime_seconds": self.uptime_seconds,
                "total_requests": self.total_requests,
                "successful_requests": self.successful_requests,
                "failed_requests": self.failed_requests,
                "total_fragments": self.total_fragments,
                "total_output_seconds": self.total_output_seconds,
                "total_processing_seconds": self.total_processing_seconds,
                "avg_rtf": self.avg_rtf,
            }

    def to_prometheus(self) -> str:
        """导出为 Prometheus 格式"""
        stats = self.get_stats()
        lines = [
            "# HELP voicereel_uptime_seconds Service uptime in seconds",
            "# TYPE voicereel_uptime_seconds gauge",
            f"voicereel_uptime_seconds {stats['uptime_seconds']:.2f}",
            "",
            "# HELP voicereel_requests_total Total number of requests",
            "# TYPE voicereel_requests_total counter",
            f"voicereel_requests_total {stats['total_requests']}",
            "",
            "# HELP voicereel_requests_successful_total Successful requests",
            "# TYPE voicereel_requests_successful_total counter",
            f"voicereel_requests_successful_total {stats['successful_requests']}",
            "",
            "# HELP voicereel_requests_failed_total Failed requests",
            "# TYPE voicereel_requests_failed_total counter",
            f"voicereel_requests_failed_total {stats['failed_requests']}",
            "",
            "# HELP voicereel_fragments_total Fragments rendered",
            "# TYPE voicereel_fragments_total counter",
            f"voicereel_fragments_total {stats['total_fragments']}",
            "",
            "# HELP voicereel_output_seconds_total Total rendered audio in seconds",
            "# TYPE voicereel_output_seconds_total counter",
            f"voicereel_output_seconds_total {stats['total_output_seconds']:.2f}",
            "",
            "# HELP voicereel_processing_seconds_total Total processing time in seconds",
            "# TYPE voicereel_processing_seconds_total counter",
            f"voicereel_processing_seconds_total {stats['total_processing_seconds']:.2f}",
            "",
            "# HELP voicereel_rtf_avg Average Real-Time Factor",
            "# TYPE voicereel_rtf_avg gauge",
            f"voicereel_rtf_avg {stats['avg_rtf']:.4f}",
        ]
        return "\n".join(lines)

    def reset(self) -> None:
        """重置指标 (保留启动时间)"""
        with self._lock:
            self.total_requests = 0
            self.successful_requests = 0
            self.failed_requests = 0
            self.total_fragments = 0
            self.total_output_seconds = 0.0
            self.total_processing_seconds = 0.0


# 全局指标实例
metrics = ServiceMetrics()

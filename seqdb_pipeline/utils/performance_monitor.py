#!/usr/bin/env python3

"""
Performance monitoring for the sequence database pipeline.

Tracks elapsed time, resident memory and record counts per stage.
"""

import time
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional, Dict, Any

import psutil

from ..core.exceptions import MemoryLimitError


@dataclass
class StageMetrics:
    """Container for the metrics of one pipeline stage."""
    stage_name: str
    start_time: float
    end_time: Optional[float] = None
    peak_memory_mb: float = 0.0
    records_processed: int = 0

    @property
    def elapsed_time(self) -> float:
        """Get elapsed time in seconds."""
        if self.end_time is None:
            return time.time() - self.start_time
        return self.end_time - self.start_time


class PerformanceMonitor:
    """Per-stage timing and memory tracking."""

    def __init__(self, memory_limit_mb: int = 4096, enabled: bool = True):
        self.memory_limit_mb = memory_limit_mb
        self.enabled = enabled
        self.start_time = time.time()
        self.stage_metrics: Dict[str, StageMetrics] = {}
        self.current_stage: Optional[str] = None
        self.process = psutil.Process() if enabled else None

    def get_memory_usage(self) -> float:
        """Get current memory usage in MB."""
        if not self.process:
            return 0.0

        memory_mb = self.process.memory_info().rss / 1024 / 1024
        if self.current_stage in self.stage_metrics:
            metrics = self.stage_metrics[self.current_stage]
            metrics.peak_memory_mb = max(metrics.peak_memory_mb, memory_mb)
        return memory_mb

    def check_memory_limit(self) -> bool:
        """Check if memory usage exceeds limit."""
        current_memory = self.get_memory_usage()

        if current_memory > self.memory_limit_mb:
            logging.warning(f"Memory usage exceeded limit: {current_memory:.1f}MB > {self.memory_limit_mb}MB")
            raise MemoryLimitError("Memory usage exceeded limit", current_memory, self.memory_limit_mb)

        return True

    @contextmanager
    def stage_context(self, stage_name: str):
        """Context manager for monitoring a stage."""
        self.current_stage = stage_name
        metrics = StageMetrics(stage_name=stage_name, start_time=time.time())
        self.stage_metrics[stage_name] = metrics
        self.get_memory_usage()
        logging.info(f"Started stage: {stage_name}")
        try:
            yield metrics
            self.check_memory_limit()
        finally:
            metrics.end_time = time.time()
            self.current_stage = None
            logging.info(f"Completed stage {stage_name} in {metrics.elapsed_time:.2f}s "
                         f"({metrics.records_processed} records, peak memory: {metrics.peak_memory_mb:.1f}MB)")

    def get_total_elapsed_time(self) -> float:
        """Get total elapsed time since monitor creation."""
        return time.time() - self.start_time

    def get_performance_summary(self) -> Dict[str, Any]:
        """Get performance summary for all stages."""
        peak = max((m.peak_memory_mb for m in self.stage_metrics.values()), default=0.0)
        return {
            "total_elapsed_time": self.get_total_elapsed_time(),
            "peak_memory_mb": peak,
            "memory_limit_mb": self.memory_limit_mb,
            "stages": {
                name: {
                    "elapsed_time": m.elapsed_time,
                    "records_processed": m.records_processed,
                    "peak_memory_mb": m.peak_memory_mb
                }
                for name, m in self.stage_metrics.items()
            }
        }

    def log_performance_report(self) -> None:
        """Log the performance summary."""
        summary = self.get_performance_summary()

        logging.info("=" * 50)
        logging.info("PERFORMANCE REPORT")
        logging.info("=" * 50)
        logging.info(f"Total time: {summary['total_elapsed_time']:.2f} seconds")
        logging.info(f"Peak memory: {summary['peak_memory_mb']:.1f} MB")
        for stage_name, stage in summary['stages'].items():
            logging.info(f"  {stage_name}: {stage['elapsed_time']:.2f}s "
                         f"({stage['records_processed']} records, {stage['peak_memory_mb']:.1f}MB)")

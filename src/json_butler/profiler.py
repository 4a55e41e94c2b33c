"""Performance profiler for JSON Butler operations."""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

import psutil


@dataclass
class PerformanceMetrics:
    """Performance metrics for one forward or reverse operation."""
    operation_name: str
    duration: float
    input_size: int
    output_size: int = 0
    memory_start_mb: float = 0.0
    memory_end_mb: float = 0.0

    @property
    def memory_delta_mb(self) -> float:
        return self.memory_end_mb - self.memory_start_mb


class PerformanceProfiler:
    """
    Measures wall time and resident memory of an operation.

    Every profiled operation gets its own PerformanceMetrics; nothing is
    kept between operations.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, enabled: bool = True):
        """
        Initialize the performance profiler.

        Args:
            logger: Optional logger instance
            enabled: Sample process memory with psutil
        """
        self.logger = logger or logging.getLogger(__name__)
        self.enabled = enabled

    @contextmanager
    def profile_operation(self, operation_name: str, input_size: int = 0) -> Iterator[PerformanceMetrics]:
        """
        Context manager for profiling operations.

        The yielded metrics object may be updated with ``output_size``
        before the block ends.

        Args:
            operation_name: Name of the operation being profiled
            input_size: Size of input data in bytes
        """
        metrics = PerformanceMetrics(operation_name=operation_name, duration=0.0, input_size=input_size)
        metrics.memory_start_mb = self._memory_mb()
        start_time = time.perf_counter()
        try:
            yield metrics
        finally:
            metrics.duration = time.perf_counter() - start_time
            metrics.memory_end_mb = self._memory_mb()
            self.logger.debug(f"Performance Summary - {operation_name}: "
                              f"{metrics.duration * 1000:.1f}ms, "
                              f"in={metrics.input_size}B, out={metrics.output_size}B, "
                              f"memory delta={metrics.memory_delta_mb:.1f}MB")

    def _memory_mb(self) -> float:
        if not self.enabled:
            return 0.0
        try:
            return psutil.Process().memory_info().rss / 1024 / 1024
        except psutil.Error as e:
            self.logger.warning(f"Performance sampling failed: {e}")
            return 0.0

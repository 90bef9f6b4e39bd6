#!/usr/bin/env python3
"""
Metrics collection for search pipeline performance tracking.

Collects timing data and operational counters for one search run. Metrics
stay in memory; they are logged and exposed to callers but never stored with
search results.
"""

import time
import threading
import logging
from datetime import datetime, timezone
from typing import Dict, List, Any, Optional
from contextlib import contextmanager
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class TimingMetrics:
    """Performance timing metrics for a single operation."""
    operation: str
    start_time: float
    end_time: float
    duration: float
    success: bool
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "operation": self.operation,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration": self.duration,
            "success": self.success,
            "error_message": self.error_message
        }


@dataclass
class RunMetrics:
    """Complete metrics for a single search run."""
    run_id: str
    timestamp: datetime
    total_duration: float
    operations: List[TimingMetrics] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)
    success: bool = True

    def operation_durations(self, prefix: str) -> List[float]:
        return [op.duration for op in self.operations if op.operation.startswith(prefix)]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "run_id": self.run_id,
            "timestamp": self.timestamp.isoformat(),
            "total_duration": self.total_duration,
            "operations": [op.to_dict() for op in self.operations],
            "stats": dict(self.stats),
            "success": self.success
        }


class MetricsCollector:
    """
    Collects timing and counters for the current run.

    Safe to use from the pipeline's worker threads.
    """

    def __init__(self):
        """Initialize metrics collector."""
        self._lock = threading.Lock()
        self._current_run_id: Optional[str] = None
        self._run_start_time: Optional[float] = None
        self._current_operations: List[TimingMetrics] = []
        self._run_stats: Dict[str, Any] = {}

        logger.debug("MetricsCollector initialized")

    def start_run(self, run_id: str) -> None:
        """Start tracking a new run."""
        with self._lock:
            self._current_run_id = run_id
            self._run_start_time = time.time()
            self._current_operations = []
            self._run_stats = {}

        logger.debug(f"Started tracking run {run_id}")

    def end_run(self, success: bool = True) -> Optional[RunMetrics]:
        """End tracking the current run and return metrics."""
        with self._lock:
            if not self._current_run_id or self._run_start_time is None:
                logger.warning("No active run to end")
                return None

            run_metrics = RunMetrics(
                run_id=self._current_run_id,
                timestamp=datetime.now(timezone.utc),
                total_duration=time.time() - self._run_start_time,
                operations=list(self._current_operations),
                stats=dict(self._run_stats),
                success=success,
            )

            self._current_run_id = None
            self._run_start_time = None
            self._current_operations = []
            self._run_stats = {}

        logger.info(
            f"Completed run {run_metrics.run_id} in {run_metrics.total_duration:.2f}s "
            f"(success: {success}, stats: {run_metrics.stats})"
        )
        return run_metrics

    @contextmanager
    def time_operation(self, operation_name: str):
        """Context manager for timing operations."""
        start_time = time.time()
        success = True
        error_message = None

        try:
            yield
        except Exception as e:
            success = False
            error_message = str(e)
            raise
        finally:
            end_time = time.time()
            duration = end_time - start_time

            timing = TimingMetrics(
                operation=operation_name,
                start_time=start_time,
                end_time=end_time,
                duration=duration,
                success=success,
                error_message=error_message
            )

            with self._lock:
                self._current_operations.append(timing)
            logger.debug(f"Operation '{operation_name}' took {duration:.2f}s (success: {success})")

    def record_stat(self, key: str, value: Any) -> None:
        """Record a statistic for the current run."""
        with self._lock:
            self._run_stats[key] = value
        logger.debug(f"Recorded stat {key} = {value}")

    def increment_stat(self, key: str, amount: int = 1) -> None:
        """Increment a counter statistic."""
        with self._lock:
            self._run_stats[key] = self._run_stats.get(key, 0) + amount

"""
PantryGuard - Performance Metrics
=================================

Lightweight timing and counter collection for engine operations.

DESIGN:
    Tracks timing metrics for storage calls without significant overhead.
    Uses a rolling window per metric to prevent unbounded memory growth.
    Counters track moderation outcomes (violations recorded, suspensions
    created, notifications deduplicated).
"""

import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Deque, Dict, Generator, List, Optional

from pantryguard.core.logger import logger


# =============================================================================
# Constants
# =============================================================================

DEFAULT_WINDOW_SIZE = 100
"""Number of samples to keep per metric."""

SLOW_THRESHOLD_MS = 1000
"""Operations taking longer than this (ms) are logged as slow."""


# =============================================================================
# Metric Data Classes
# =============================================================================

@dataclass
class MetricSample:
    """Single metric sample."""
    value: float  # milliseconds
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class MetricStats:
    """Aggregated statistics for a metric."""
    name: str
    count: int
    avg_ms: float
    min_ms: float
    max_ms: float
    p95_ms: float
    slow_count: int


# =============================================================================
# Metrics Collector
# =============================================================================

class MetricsCollector:
    """
    Collects and aggregates performance metrics and counters.

    Attributes:
        metrics: Dictionary of metric name to sample deque.
        window_size: Maximum samples per metric.
    """

    def __init__(self, window_size: int = DEFAULT_WINDOW_SIZE) -> None:
        self.metrics: Dict[str, Deque[MetricSample]] = {}
        self.window_size = window_size
        self._counters: Dict[str, int] = {}

    def record(self, name: str, duration_ms: float) -> None:
        """
        Record a metric sample.

        Args:
            name: Metric name (e.g., "db.append_violation").
            duration_ms: Duration in milliseconds.
        """
        if name not in self.metrics:
            self.metrics[name] = deque(maxlen=self.window_size)
        self.metrics[name].append(MetricSample(value=duration_ms))

        if duration_ms > SLOW_THRESHOLD_MS:
            logger.warning("Slow Operation Detected", [
                ("Metric", name),
                ("Duration", f"{duration_ms:.0f}ms"),
                ("Threshold", f"{SLOW_THRESHOLD_MS}ms"),
            ])

    def increment(self, name: str, amount: int = 1) -> None:
        """Increment a counter."""
        self._counters[name] = self._counters.get(name, 0) + amount

    def get_counter(self, name: str) -> int:
        """Get counter value."""
        return self._counters.get(name, 0)

    def get_stats(self, name: str) -> Optional[MetricStats]:
        """
        Calculate statistics for a metric.

        Returns:
            MetricStats or None if no samples exist.
        """
        samples = self.metrics.get(name)
        if not samples:
            return None

        values: List[float] = sorted(s.value for s in samples)
        count = len(values)
        p95_index = min(int(count * 0.95), count - 1)

        return MetricStats(
            name=name,
            count=count,
            avg_ms=sum(values) / count,
            min_ms=values[0],
            max_ms=values[-1],
            p95_ms=values[p95_index],
            slow_count=sum(1 for v in values if v > SLOW_THRESHOLD_MS),
        )

    def get_summary(self) -> Dict[str, Any]:
        """Summary of all counters and metric stats."""
        summary: Dict[str, Any] = {"counters": dict(self._counters), "metrics": {}}
        for name in self.metrics:
            stats = self.get_stats(name)
            if stats is None:
                continue
            summary["metrics"][name] = {
                "count": stats.count,
                "avg_ms": round(stats.avg_ms, 2),
                "p95_ms": round(stats.p95_ms, 2),
                "max_ms": round(stats.max_ms, 2),
                "slow_count": stats.slow_count,
            }
        return summary

    def clear(self) -> None:
        """Clear all metrics and counters."""
        self.metrics.clear()
        self._counters.clear()

    @contextmanager
    def timer(self, name: str) -> Generator[None, None, None]:
        """
        Context manager for timing operations.

        Example:
            with metrics.timer("db.query_violations"):
                rows = db.fetchall(query, params)
        """
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record(name, (time.perf_counter() - start) * 1000)


# =============================================================================
# Global Instance
# =============================================================================

metrics = MetricsCollector()
"""Global metrics collector instance."""


__all__ = [
    "MetricsCollector",
    "MetricSample",
    "MetricStats",
    "metrics",
    "SLOW_THRESHOLD_MS",
]

"""
PantryGuard - Utils Package
===========================

Stateless helpers shared by the core and the services: duration parsing,
UTC/ISO-week time helpers and the metrics collector.
"""

from .duration import format_duration, is_permanent, parse_duration
from .metrics import MetricsCollector, metrics
from .time_utils import current_week_key, parse_iso, record_week_key, to_iso, utc_now, week_key_for


__all__ = [
    # Duration
    "format_duration",
    "is_permanent",
    "parse_duration",
    # Metrics
    "MetricsCollector",
    "metrics",
    # Time
    "current_week_key",
    "record_week_key",
    "parse_iso",
    "to_iso",
    "utc_now",
    "week_key_for",
]

"""
PantryGuard - Metrics Tests
===========================

Timers, counters and the summary view.
"""

from pantryguard.utils.metrics import MetricsCollector


class TestMetricsCollector:
    """Tests for MetricsCollector."""

    def test_counters(self):
        collector = MetricsCollector()
        collector.increment("violations.recorded")
        collector.increment("violations.recorded", 2)

        assert collector.get_counter("violations.recorded") == 3
        assert collector.get_counter("never.touched") == 0

    def test_timer_records_sample(self):
        collector = MetricsCollector()
        with collector.timer("db.append_violation"):
            pass

        stats = collector.get_stats("db.append_violation")
        assert stats.count == 1
        assert stats.slow_count == 0
        assert collector.get_stats("db.other") is None

    def test_window_is_bounded(self):
        collector = MetricsCollector(window_size=3)
        for value in (1.0, 2.0, 3.0, 4.0):
            collector.record("db.query", value)

        stats = collector.get_stats("db.query")
        assert stats.count == 3
        assert stats.min_ms == 2.0
        assert stats.max_ms == 4.0

    def test_summary(self):
        collector = MetricsCollector()
        collector.increment("suspensions.created")
        collector.record("db.activate_suspension", 10.0)
        collector.record("db.activate_suspension", 20.0)

        summary = collector.get_summary()
        assert summary["counters"] == {"suspensions.created": 1}
        assert summary["metrics"]["db.activate_suspension"]["count"] == 2
        assert summary["metrics"]["db.activate_suspension"]["avg_ms"] == 15.0

    def test_clear(self):
        collector = MetricsCollector()
        collector.increment("x")
        collector.record("y", 1.0)
        collector.clear()

        assert collector.get_counter("x") == 0
        assert collector.get_summary() == {"counters": {}, "metrics": {}}

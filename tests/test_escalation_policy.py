"""
PantryGuard - Escalation Policy Tests
=====================================

Pure threshold and tier rules; no database involved.
"""

import pytest

from pantryguard.core.config import Config
from pantryguard.services.abuse import EscalationPolicy, WeeklyStats


def _stats(count: int) -> WeeklyStats:
    return WeeklyStats(user_id="user-1", week_key="2026-42", this_week_violations=count)


class TestDecide:
    """Tests for notify / suspend decisions."""

    @pytest.mark.parametrize("count,notify,suspend", [
        (0, False, False),
        (4, False, False),
        (5, True, False),
        (9, True, False),
        (10, True, True),
        (11, True, True),
        (40, True, True),
    ])
    def test_default_thresholds(self, count, notify, suspend):
        decision = EscalationPolicy().decide(_stats(count))
        assert decision.notify is notify
        assert decision.suspend is suspend
        assert decision.any is (notify or suspend)

    def test_only_this_week_counts(self):
        stats = WeeklyStats(
            user_id="user-1",
            week_key="2026-42",
            total_violations=100,
            this_week_violations=2,
        )
        assert EscalationPolicy().decide(stats).any is False

    def test_injected_thresholds(self):
        policy = EscalationPolicy(notify_threshold=2, suspend_threshold=3)
        assert policy.decide_count(2).notify is True
        assert policy.decide_count(2).suspend is False
        assert policy.decide_count(3).suspend is True

    def test_notify_above_suspend_rejected(self):
        with pytest.raises(ValueError):
            EscalationPolicy(notify_threshold=11, suspend_threshold=10)

    def test_from_config(self):
        config = Config(notify_threshold=3, suspend_threshold=7, suspension_tier_durations=[60, 120, None])
        policy = EscalationPolicy.from_config(config)
        assert policy.notify_threshold == 3
        assert policy.suspend_threshold == 7
        assert policy.suspension_duration(1) == 60
        assert policy.suspension_duration(3) is None


class TestPenaltyLevel:
    """Tests for penalty_level labels."""

    @pytest.mark.parametrize("count,level", [
        (0, "none"),
        (2, "none"),
        (3, "warning"),
        (4, "warning"),
        (5, "restricted"),
        (9, "restricted"),
        (10, "suspended"),
    ])
    def test_levels(self, count, level):
        assert EscalationPolicy().penalty_level(count) == level


class TestSuspensionTiers:
    """Tests for tier selection, durations and appeal eligibility."""

    @pytest.mark.parametrize("count,tier", [
        (4, 0),
        (5, 1),
        (10, 1),
        (14, 1),
        (15, 2),
        (29, 2),
        (30, 3),
        (100, 3),
    ])
    def test_tier_boundaries(self, count, tier):
        assert EscalationPolicy().suspension_tier(count) == tier

    def test_default_durations(self):
        policy = EscalationPolicy()
        assert policy.suspension_duration(1) == 3600
        assert policy.suspension_duration(2) == 86400
        assert policy.suspension_duration(3) == 30 * 86400

    def test_tier_zero_uses_tier_one_duration(self):
        assert EscalationPolicy().suspension_duration(0) == 3600

    def test_only_top_tier_cannot_appeal(self):
        assert EscalationPolicy.can_appeal(1) is True
        assert EscalationPolicy.can_appeal(2) is True
        assert EscalationPolicy.can_appeal(3) is False

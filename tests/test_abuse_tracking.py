"""
PantryGuard - Abuse Tracking Tests
==================================

Violation recording, weekly stats, notifications, suspensions and the
admin dashboard reads.
"""

import asyncio
import sqlite3
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from pantryguard.core.config import Config
from pantryguard.services.abuse import AbuseTrackingService
from pantryguard.utils.metrics import metrics
from pantryguard.utils.time_utils import to_iso


# Wednesday of ISO week 2026-42
NOW = datetime(2026, 10, 14, 12, 0, 0, tzinfo=timezone.utc)
NOW_WEEK = "2026-42"
USER = "user-1"


async def _record_many(service, count, user_id=USER, severity="low", start=NOW):
    """Record count violations one minute apart; returns the last stats."""
    stats = None
    for i in range(count):
        stats = await service.record_violation(
            user_id, "spam_input", severity, {"n": i}, now=start + timedelta(minutes=i)
        )
    return stats


# =============================================================================
# Recording
# =============================================================================

class TestRecordViolation:
    """Tests for record_violation and the stats it returns."""

    @pytest.mark.asyncio
    async def test_first_violation(self, abuse_service):
        """A single violation is counted and triggers nothing."""
        stats = await abuse_service.record_violation(USER, "spam_input", "medium", {"text": "buy now"}, now=NOW)

        assert stats.user_id == USER
        assert stats.week_key == NOW_WEEK
        assert stats.total_violations == 1
        assert stats.this_week_violations == 1
        assert stats.severity_breakdown == {"low": 0, "medium": 1, "high": 0, "critical": 0}
        assert stats.should_notify_admin is False
        assert stats.should_auto_suspend is False
        assert stats.penalty_level == "none"
        assert stats.last_violation == to_iso(NOW)
        assert metrics.get_counter("violations.recorded") == 1

    @pytest.mark.asyncio
    async def test_unrecognized_type_and_severity_accepted(self, abuse_service):
        """Unknown values are stored and counted as given."""
        stats = await abuse_service.record_violation(USER, "made_up_type", "apocalyptic", None, now=NOW)

        assert stats.this_week_violations == 1
        assert stats.severity_breakdown["apocalyptic"] == 1

        history = await abuse_service.get_user_violation_history(USER)
        assert history[0].violation_type == "made_up_type"
        assert history[0].severity == "apocalyptic"

    @pytest.mark.asyncio
    async def test_evidence_with_mixed_key_types(self, abuse_service):
        """Maps keyed by both ints and strings are stored, keys as JSON strings."""
        stats = await abuse_service.record_violation(USER, "spam_input", "low", {1: "a", "b": 2}, now=NOW)

        assert stats.this_week_violations == 1
        history = await abuse_service.get_user_violation_history(USER)
        assert history[0].evidence == {"1": "a", "b": 2}

    @pytest.mark.asyncio
    async def test_evidence_stored_untouched(self, abuse_service):
        evidence = {"input": "<script>", "meta": {"ip": "10.0.0.1", "hits": [1, 2, 3]}}
        await abuse_service.record_violation(USER, "xss_attempt", "high", evidence, now=NOW)

        history = await abuse_service.get_user_violation_history(USER)
        assert history[0].evidence == evidence

    @pytest.mark.asyncio
    async def test_fourth_violation_does_not_notify(self, abuse_service, test_db):
        stats = await _record_many(abuse_service, 4)

        assert stats.this_week_violations == 4
        assert stats.should_notify_admin is False
        assert stats.penalty_level == "warning"
        assert await test_db.get_admin_notification(USER, NOW_WEEK) is None

    @pytest.mark.asyncio
    async def test_fifth_violation_notifies(self, abuse_service, test_db):
        stats = await _record_many(abuse_service, 5)

        assert stats.should_notify_admin is True
        assert stats.should_auto_suspend is False
        assert stats.penalty_level == "restricted"

        notification = await test_db.get_admin_notification(USER, NOW_WEEK)
        assert notification["violation_count"] == 5
        assert notification["priority"] == "high"
        assert notification["status"] == "pending"
        assert len(notification["violations"]) == 5
        assert notification["severity_breakdown"]["low"] == 5

    @pytest.mark.asyncio
    async def test_notification_created_once_per_week(self, abuse_service, test_db):
        await _record_many(abuse_service, 7)

        rows = test_db.fetchall("SELECT * FROM admin_notifications WHERE user_id = ?", (USER,))
        assert len(rows) == 1
        assert metrics.get_counter("notifications.created") == 1
        assert metrics.get_counter("notifications.deduplicated") == 2

    @pytest.mark.asyncio
    async def test_new_week_gets_new_notification(self, abuse_service, test_db):
        await _record_many(abuse_service, 5, start=NOW - timedelta(days=7))
        await _record_many(abuse_service, 5)

        rows = test_db.fetchall("SELECT week_key FROM admin_notifications WHERE user_id = ?", (USER,))
        assert sorted(r["week_key"] for r in rows) == ["2026-41", NOW_WEEK]

    @pytest.mark.asyncio
    async def test_previous_weeks_count_toward_total_only(self, abuse_service):
        await _record_many(abuse_service, 6, start=NOW - timedelta(days=7))
        stats = await abuse_service.record_violation(USER, "spam_input", "low", None, now=NOW)

        assert stats.total_violations == 7
        assert stats.this_week_violations == 1
        assert stats.should_notify_admin is False


# =============================================================================
# Auto-Suspension
# =============================================================================

class TestAutoSuspension:
    """Tests for the suspension workflow triggered at the suspend threshold."""

    @pytest.mark.asyncio
    async def test_ninth_violation_does_not_suspend(self, abuse_service):
        stats = await _record_many(abuse_service, 9)

        assert stats.should_auto_suspend is False
        assert await abuse_service.get_active_suspension(USER) is None

    @pytest.mark.asyncio
    async def test_tenth_violation_suspends(self, abuse_service, test_db):
        """The 10th violation creates one active suspension and one history entry."""
        stats = await _record_many(abuse_service, 10)
        last_violation = (await abuse_service.get_user_violation_history(USER, limit=1))[0]

        assert stats.should_auto_suspend is True
        assert stats.penalty_level == "suspended"

        suspension = await abuse_service.get_active_suspension(USER)
        assert suspension is not None
        assert suspension.tier == 1
        assert suspension.reason == f"Tier 1: 10 violations in week {NOW_WEEK}"
        assert suspension.triggered_by_violation_id == last_violation.violation_id
        assert test_db.fetchone("SELECT COUNT(*) AS n FROM suspensions")["n"] == 1

        history = await abuse_service.get_suspension_history(USER)
        assert len(history) == 1
        assert history[0].event == "suspended"
        assert history[0].can_appeal is True
        assert history[0].duration_hours == 1
        assert history[0].triggered_by_violation_id == last_violation.violation_id
        assert history[0].stats["this_week_violations"] == 10

    @pytest.mark.asyncio
    async def test_profile_marked_suspended(self, abuse_service, test_db):
        await test_db.put_user_profile(USER, {"username": "chef"})
        await _record_many(abuse_service, 10)
        suspended_at = NOW + timedelta(minutes=9)

        profile = await test_db.get_user_profile(USER)
        assert profile["username"] == "chef"
        assert profile["account_status"] == "suspended"
        assert profile["is_suspended"] is True
        assert profile["suspended_at"] == to_iso(suspended_at)
        assert profile["suspended_until"] == to_iso(suspended_at + timedelta(hours=1))
        assert profile["suspended_by"] == "system"
        assert await abuse_service.is_user_suspended(USER) is True

    @pytest.mark.asyncio
    async def test_suspension_always_escalates(self, abuse_service):
        await _record_many(abuse_service, 10)

        escalations = await abuse_service.get_urgent_escalations()
        assert len(escalations) == 1
        assert escalations[0].escalation_type == "auto_suspension"
        assert escalations[0].user_id == USER
        assert escalations[0].stats["this_week_violations"] == 10

    @pytest.mark.asyncio
    async def test_notification_priority_critical_when_first_at_suspend_level(self, test_db, temp_db_path):
        """When notify and suspend thresholds coincide the notification is critical."""
        service = AbuseTrackingService(test_db, Config(db_path=temp_db_path, notify_threshold=10))
        await _record_many(service, 10)

        notification = await test_db.get_admin_notification(USER, NOW_WEEK)
        assert notification["priority"] == "critical"

    @pytest.mark.asyncio
    async def test_later_violation_suspends_again(self, abuse_service, test_db):
        """An already-suspended user is suspended again; the old record is superseded."""
        await _record_many(abuse_service, 10)
        first = await abuse_service.get_active_suspension(USER)

        await abuse_service.record_violation(USER, "spam_input", "low", None, now=NOW + timedelta(minutes=30))
        second = await abuse_service.get_active_suspension(USER)

        assert second.suspension_id != first.suspension_id
        active = test_db.fetchall("SELECT * FROM suspensions WHERE user_id = ? AND is_active = 1", (USER,))
        assert len(active) == 1

        history = await abuse_service.get_suspension_history(USER)
        assert [h.event for h in history] == ["suspended", "superseded", "suspended"]
        assert history[1].suspension_id == first.suspension_id
        assert len(await abuse_service.get_urgent_escalations()) == 2

    @pytest.mark.asyncio
    async def test_tier_two_at_fifteen(self, abuse_service):
        await _record_many(abuse_service, 15)

        suspension = await abuse_service.get_active_suspension(USER)
        assert suspension.tier == 2
        history = await abuse_service.get_suspension_history(USER)
        assert history[-1].duration_hours == 24


# =============================================================================
# Stats
# =============================================================================

class TestAbuseStats:
    """Tests for get_abuse_stats."""

    @pytest.mark.asyncio
    async def test_user_without_violations(self, abuse_service):
        stats = await abuse_service.get_abuse_stats("nobody", now=NOW)

        assert stats.total_violations == 0
        assert stats.this_week_violations == 0
        assert stats.severity_breakdown == {"low": 0, "medium": 0, "high": 0, "critical": 0}
        assert stats.last_violation == ""
        assert stats.should_notify_admin is False

    @pytest.mark.asyncio
    async def test_repeated_reads_are_identical(self, abuse_service):
        await _record_many(abuse_service, 3, severity="high")

        first = await abuse_service.get_abuse_stats(USER, now=NOW)
        second = await abuse_service.get_abuse_stats(USER, now=NOW)
        assert first.to_dict() == second.to_dict()

    @pytest.mark.asyncio
    async def test_week_count_ignores_type_and_severity(self, abuse_service):
        values = [("spam_input", "low"), ("sql_injection", "critical"), ("???", ""), ("bot_behavior", "weird")]
        for i, (violation_type, severity) in enumerate(values):
            await abuse_service.record_violation(USER, violation_type, severity, None, now=NOW + timedelta(minutes=i))

        stats = await abuse_service.get_abuse_stats(USER, now=NOW)
        assert stats.this_week_violations == len(values)
        assert stats.severity_breakdown["weird"] == 1
        assert "" not in stats.severity_breakdown

    @pytest.mark.asyncio
    async def test_malformed_rows_never_raise(self, abuse_service, test_db):
        """Rows missing fields count toward the total but not where they can't be placed."""
        await test_db.append_violation({"violation_id": "m-1", "user_id": USER})
        await test_db.append_violation({"violation_id": "m-2", "user_id": USER, "created_at": to_iso(NOW)})
        await test_db.append_violation({"violation_id": "m-3", "user_id": USER, "week_key": NOW_WEEK})
        await test_db.append_violation({
            "violation_id": "m-4",
            "user_id": USER,
            "created_at": "not a timestamp",
            "severity": "high",
        })

        stats = await abuse_service.get_abuse_stats(USER, now=NOW)

        assert stats.total_violations == 4
        assert stats.this_week_violations == 2
        assert stats.severity_breakdown == {"low": 0, "medium": 0, "high": 0, "critical": 0}
        assert stats.last_violation == to_iso(NOW)

    @pytest.mark.asyncio
    async def test_stats_read_has_no_side_effects(self, abuse_service, test_db):
        await _record_many(abuse_service, 4)
        await test_db.append_violation({
            "violation_id": "extra",
            "user_id": USER,
            "week_key": NOW_WEEK,
            "created_at": to_iso(NOW),
        })

        stats = await abuse_service.get_abuse_stats(USER, now=NOW)
        assert stats.should_notify_admin is True
        assert await test_db.get_admin_notification(USER, NOW_WEEK) is None


# =============================================================================
# Storage Failures
# =============================================================================

class TestStorageErrors:
    """Storage errors propagate; nothing reports success after a failed step."""

    @pytest.mark.asyncio
    async def test_append_failure_propagates(self):
        db = MagicMock()
        db.append_violation = AsyncMock(side_effect=sqlite3.OperationalError("disk I/O error"))
        db.query_violations_by_user = AsyncMock(return_value=[])
        service = AbuseTrackingService(db, Config())

        with pytest.raises(sqlite3.OperationalError):
            await service.record_violation(USER, "spam_input", "low", None, now=NOW)
        db.query_violations_by_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_stats_failure_propagates(self):
        db = MagicMock()
        db.query_violations_by_user = AsyncMock(side_effect=sqlite3.OperationalError("database is locked"))
        service = AbuseTrackingService(db, Config())

        with pytest.raises(sqlite3.OperationalError):
            await service.get_abuse_stats(USER, now=NOW)

    @pytest.mark.asyncio
    async def test_suspension_step_failure_stops_workflow(self, abuse_service, test_db):
        await _record_many(abuse_service, 9)
        test_db.activate_suspension = AsyncMock(side_effect=sqlite3.OperationalError("disk full"))

        with pytest.raises(sqlite3.OperationalError):
            await abuse_service.record_violation(USER, "spam_input", "low", None, now=NOW + timedelta(minutes=9))

        assert len(await test_db.query_violations_by_user(USER)) == 10
        assert await test_db.get_suspension_history(USER) == []
        assert await test_db.get_escalations_by_status("urgent") == []

    @pytest.mark.asyncio
    async def test_notification_failure_propagates(self, abuse_service, test_db):
        await _record_many(abuse_service, 4)
        test_db.insert_admin_notification = AsyncMock(side_effect=sqlite3.OperationalError("readonly"))

        with pytest.raises(sqlite3.OperationalError):
            await abuse_service.record_violation(USER, "spam_input", "low", None, now=NOW + timedelta(minutes=4))


# =============================================================================
# Concurrency
# =============================================================================

class TestConcurrentRecording:
    """Concurrent record_violation calls for the same user."""

    @pytest.mark.asyncio
    async def test_threshold_crossing_is_acted_on(self, abuse_service, test_db):
        """At least one call sees the final count and escalates."""
        await asyncio.gather(*[
            abuse_service.record_violation(USER, "bot_behavior", "medium", {"n": i}, now=NOW)
            for i in range(10)
        ])

        assert len(await test_db.query_violations_by_user(USER)) == 10
        assert await abuse_service.get_active_suspension(USER) is not None
        notifications = test_db.fetchall("SELECT * FROM admin_notifications WHERE user_id = ?", (USER,))
        assert len(notifications) == 1
        active = test_db.fetchall("SELECT * FROM suspensions WHERE user_id = ? AND is_active = 1", (USER,))
        assert len(active) == 1


# =============================================================================
# Suspension Lifecycle
# =============================================================================

class TestSuspensionLifecycle:
    """Tests for lifting and expiring suspensions."""

    @pytest.mark.asyncio
    async def test_lift(self, abuse_service, test_db):
        await _record_many(abuse_service, 10)

        lifted = await abuse_service.lift_suspension(USER, "mod-1", "Appeal accepted")

        assert lifted.is_active is False
        assert lifted.ended_by == "mod-1"
        assert await abuse_service.get_active_suspension(USER) is None
        assert await abuse_service.is_user_suspended(USER) is False
        assert (await test_db.get_user_profile(USER))["account_status"] == "active"

        history = await abuse_service.get_suspension_history(USER)
        assert history[-1].event == "lifted"
        assert history[-1].actor == "mod-1"
        assert history[-1].reason == "Appeal accepted"
        assert metrics.get_counter("suspensions.lifted") == 1

    @pytest.mark.asyncio
    async def test_failed_lift_can_be_retried(self, abuse_service, test_db, monkeypatch):
        """A profile write failure keeps the suspension active until a retry succeeds."""
        await _record_many(abuse_service, 10)
        monkeypatch.setattr(
            test_db,
            "update_user_profile",
            AsyncMock(side_effect=sqlite3.OperationalError("disk I/O error")),
        )

        with pytest.raises(sqlite3.OperationalError):
            await abuse_service.lift_suspension(USER, "mod-1", "Appeal accepted")

        assert await abuse_service.get_active_suspension(USER) is not None
        assert [h.event for h in await abuse_service.get_suspension_history(USER)] == ["suspended"]

        monkeypatch.undo()
        lifted = await abuse_service.lift_suspension(USER, "mod-1", "Appeal accepted")

        assert lifted is not None
        assert await abuse_service.get_active_suspension(USER) is None
        assert await abuse_service.is_user_suspended(USER) is False
        assert [h.event for h in await abuse_service.get_suspension_history(USER)] == ["suspended", "lifted"]

    @pytest.mark.asyncio
    async def test_lift_without_suspension(self, abuse_service):
        assert await abuse_service.lift_suspension(USER, "mod-1") is None

    @pytest.mark.asyncio
    async def test_release_expired(self, abuse_service):
        await _record_many(abuse_service, 10)

        early = await abuse_service.release_expired_suspensions(now=NOW + timedelta(minutes=30))
        assert early == []
        assert await abuse_service.is_user_suspended(USER) is True

        released = await abuse_service.release_expired_suspensions(now=NOW + timedelta(hours=2))
        assert [s.user_id for s in released] == [USER]
        assert released[0].ended_by == "system"
        assert await abuse_service.is_user_suspended(USER) is False

    @pytest.mark.asyncio
    async def test_permanent_tier_never_expires(self, test_db, temp_db_path):
        config = Config(db_path=temp_db_path, suspension_tier_durations=[None, None, None])
        service = AbuseTrackingService(test_db, config)
        await _record_many(service, 10)

        active = await service.get_active_suspension(USER)
        assert active.is_indefinite is True
        assert active.suspended_until is None

        released = await service.release_expired_suspensions(now=NOW + timedelta(days=365))
        assert released == []
        assert await service.is_user_suspended(USER) is True

    @pytest.mark.asyncio
    async def test_unknown_user_not_suspended(self, abuse_service):
        assert await abuse_service.is_user_suspended("nobody") is False


# =============================================================================
# Admin Dashboard
# =============================================================================

class TestAdminDashboard:
    """Tests for admin reads and notification workflow."""

    @pytest.mark.asyncio
    async def test_pending_notifications_and_status(self, abuse_service):
        await _record_many(abuse_service, 5)

        pending = await abuse_service.get_pending_admin_notifications()
        assert len(pending) == 1
        assert pending[0].user_id == USER

        assert await abuse_service.update_notification_status(pending[0].notification_id, "resolved") is True
        assert await abuse_service.get_pending_admin_notifications() == []

    @pytest.mark.asyncio
    async def test_invalid_notification_status(self, abuse_service):
        with pytest.raises(ValueError):
            await abuse_service.update_notification_status("n-1", "archived")

    @pytest.mark.asyncio
    async def test_violation_history_newest_first(self, abuse_service):
        await _record_many(abuse_service, 3)

        history = await abuse_service.get_user_violation_history(USER, limit=2)
        assert [v.evidence["n"] for v in history] == [2, 1]

    @pytest.mark.asyncio
    async def test_weekly_violations_and_report(self, abuse_service):
        await _record_many(abuse_service, 10, user_id="heavy")
        await _record_many(abuse_service, 2, user_id="light", severity="critical")
        await _record_many(abuse_service, 1, user_id="old", start=NOW - timedelta(days=7))

        weekly = await abuse_service.get_weekly_violations(NOW_WEEK)
        assert len(weekly) == 12

        report = await abuse_service.weekly_report(NOW_WEEK)
        assert report["week"] == NOW_WEEK
        assert report["total_violations"] == 12
        assert report["unique_users"] == 2
        assert report["users_over_suspend_threshold"] == 1
        assert report["severity_breakdown"]["low"] == 10
        assert report["severity_breakdown"]["critical"] == 2

    @pytest.mark.asyncio
    async def test_purge_expired_violations(self, abuse_service):
        await _record_many(abuse_service, 3)

        assert await abuse_service.purge_expired_violations(now=NOW + timedelta(days=29)) == 0
        assert await abuse_service.purge_expired_violations(now=NOW + timedelta(days=31)) == 3
        assert await abuse_service.get_user_violation_history(USER) == []

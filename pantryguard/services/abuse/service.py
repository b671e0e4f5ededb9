"""
PantryGuard - Abuse Tracking Service
====================================

Orchestrates the violation pipeline:
record -> aggregate -> decide -> notify / suspend -> return stats.

DESIGN:
    Escalation runs synchronously inside the call that recorded the
    triggering violation; there is no background worker.

    Stats are computed with a plain read after the write, with no lock or
    transaction around the read-then-decide step. Two concurrent calls
    for the same user may both see the count below a threshold, or both
    see it at or above. Escalation is at-least-once, not exactly-once:
    notifications are bounded to one per week by the issuer, suspensions
    are not deduplicated.

    Storage errors are never caught here. record_violation either
    finishes every triggered step or raises.
"""

from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, List, Optional

from pantryguard.core.config import Config, get_config
from pantryguard.core.database.gateway import PersistenceGateway
from pantryguard.core.logger import logger
from pantryguard.utils.time_utils import current_week_key

from .aggregator import WeeklyStatsAggregator
from .constants import (
    ACCOUNT_STATUS_SUSPENDED,
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_SEVERITIES,
    SYSTEM_ACTOR,
)
from .log import ViolationLog
from .models import (
    AdminEscalation,
    AdminNotification,
    Suspension,
    SuspensionHistoryEntry,
    Violation,
    WeeklyStats,
)
from .notifier import NotificationIssuer
from .policy import EscalationPolicy
from .suspension import SuspensionWorkflow


class AbuseTrackingService:
    """
    Entry point for violation recording and moderation reads.

    Attributes:
        policy: Threshold rules.
        violation_log: Append-only violation storage.
        aggregator: WeeklyStats computation.
        notifier: Admin notifications and escalations.
        suspensions: Suspend / lift workflow.
    """

    def __init__(
        self,
        db: PersistenceGateway,
        config: Optional[Config] = None,
        policy: Optional[EscalationPolicy] = None,
    ) -> None:
        self.db = db
        self.config = config or get_config()
        self.policy = policy or EscalationPolicy.from_config(self.config)

        self.violation_log = ViolationLog(db, self.config.violation_retention_days)
        self.aggregator = WeeklyStatsAggregator(db, self.policy)
        self.notifier = NotificationIssuer(db, self.violation_log, self.policy)
        self.suspensions = SuspensionWorkflow(db, self.policy, self.notifier)

    # =========================================================================
    # Recording
    # =========================================================================

    async def record_violation(
        self,
        user_id: str,
        violation_type: Any,
        severity: Any,
        evidence: Any = None,
        now: Optional[datetime] = None,
    ) -> WeeklyStats:
        """
        Record a violation and run any escalation it triggers.

        Args:
            user_id: Subject of the violation.
            violation_type: Free-form tag, stored as given.
            severity: Conventionally low/medium/high/critical, stored as given.
            evidence: Opaque JSON-like payload, stored untouched.
            now: Override for the current time.

        Returns:
            Stats as computed right after the write.

        Raises:
            Any storage error from the write, the stats read, or a
            triggered notification / suspension step.
        """
        violation = await self.violation_log.record(
            user_id, violation_type, severity, evidence, now=now
        )

        # Read-then-decide without a lock: at-least-once escalation
        stats = await self.aggregator.compute(user_id, now=now)
        decision = self.policy.decide(stats)

        if decision.notify:
            await self.notifier.issue(stats, now=now)

        if decision.suspend:
            await self.suspensions.suspend(stats, violation.violation_id, now=now)

        return stats

    async def get_abuse_stats(self, user_id: str, now: Optional[datetime] = None) -> WeeklyStats:
        """Current stats for a user. Pure read."""
        return await self.aggregator.compute(user_id, now=now)

    async def purge_expired_violations(self, now: Optional[datetime] = None) -> int:
        return await self.violation_log.purge_expired(now)

    # =========================================================================
    # Suspensions
    # =========================================================================

    async def is_user_suspended(self, user_id: str) -> bool:
        """Suspended per the profile flag or account status; no profile means False."""
        profile = await self.db.get_user_profile(user_id)
        if not profile:
            return False
        return profile.get("account_status") == ACCOUNT_STATUS_SUSPENDED or bool(profile.get("is_suspended"))

    async def get_active_suspension(self, user_id: str) -> Optional[Suspension]:
        row = await self.db.get_active_suspension(user_id)
        return Suspension.from_row(row) if row else None

    async def get_suspension_history(self, user_id: str) -> List[SuspensionHistoryEntry]:
        """Every suspension transition for a user, oldest first."""
        rows = await self.db.get_suspension_history(user_id)
        return [SuspensionHistoryEntry.from_row(row) for row in rows]

    async def lift_suspension(
        self,
        user_id: str,
        lifted_by: str = SYSTEM_ACTOR,
        reason: Optional[str] = None,
    ) -> Optional[Suspension]:
        return await self.suspensions.lift(user_id, lifted_by, reason)

    async def release_expired_suspensions(self, now: Optional[datetime] = None) -> List[Suspension]:
        return await self.suspensions.release_expired(now)

    # =========================================================================
    # Admin Dashboard
    # =========================================================================

    async def get_user_violation_history(
        self,
        user_id: str,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> List[Violation]:
        """A user's most recent violations, newest first."""
        return await self.violation_log.history(user_id, limit)

    async def get_weekly_violations(self, week_key: Optional[str] = None) -> List[Violation]:
        """All users' violations for a week (current week by default), newest first."""
        return await self.violation_log.for_week(week_key or current_week_key())

    async def get_pending_admin_notifications(self, limit: Optional[int] = None) -> List[AdminNotification]:
        return await self.notifier.pending(limit or self.config.pending_notification_limit)

    async def update_notification_status(self, notification_id: str, status: str) -> bool:
        return await self.notifier.update_status(notification_id, status)

    async def get_urgent_escalations(self, limit: int = 50) -> List[AdminEscalation]:
        return await self.notifier.urgent_escalations(limit)

    async def weekly_report(self, week_key: Optional[str] = None) -> Dict[str, Any]:
        """
        Summary of a week's violations across all users.

        Returns:
            Dict with week, total_violations, unique_users,
            severity_breakdown and users_over_suspend_threshold.
        """
        week = week_key or current_week_key()
        violations = await self.violation_log.for_week(week)

        per_user: Dict[str, int] = defaultdict(int)
        breakdown: Dict[str, int] = {severity: 0 for severity in DEFAULT_SEVERITIES}
        for violation in violations:
            per_user[violation.user_id] += 1
            if violation.severity is not None and violation.severity != "":
                key = str(violation.severity)
                breakdown[key] = breakdown.get(key, 0) + 1

        report = {
            "week": week,
            "total_violations": len(violations),
            "unique_users": len(per_user),
            "severity_breakdown": breakdown,
            "users_over_suspend_threshold": sum(
                1 for count in per_user.values() if count >= self.policy.suspend_threshold
            ),
        }

        logger.tree("Weekly Abuse Report", [
            ("Week", week),
            ("Violations", str(report["total_violations"])),
            ("Users", str(report["unique_users"])),
            ("Over Suspend Threshold", str(report["users_over_suspend_threshold"])),
            ("Critical", str(breakdown["critical"])),
        ], emoji="📊")
        return report


__all__ = ["AbuseTrackingService"]

"""
PantryGuard - Notification Issuer
=================================

Creates admin dashboard records: one threshold notification per user per
week, and urgent escalations.

DESIGN:
    The issuer only decides that a record exists; delivery (email, push,
    dashboard polling) belongs to other systems.
    Deduplication is a read-then-insert. The existence check handles the
    common case; the unique (user_id, week_key) index turns a concurrent
    second insert into a no-op instead of a duplicate.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pantryguard.core.database.gateway import PersistenceGateway
from pantryguard.core.logger import logger
from pantryguard.utils.metrics import metrics
from pantryguard.utils.time_utils import record_week_key, to_iso, utc_now

from .constants import (
    ESCALATION_STATUS_URGENT,
    ESCALATION_TYPES,
    NOTIFICATION_STATUS_PENDING,
    NOTIFICATION_STATUSES,
    NOTIFICATION_TYPE_USER_ABUSE,
    PRIORITY_CRITICAL,
    PRIORITY_HIGH,
)
from .log import ViolationLog
from .models import AdminEscalation, AdminNotification, WeeklyStats
from .policy import EscalationPolicy


class NotificationIssuer:
    """Writes admin notifications and escalations."""

    def __init__(
        self,
        db: PersistenceGateway,
        violation_log: ViolationLog,
        policy: EscalationPolicy,
    ) -> None:
        self.db = db
        self.violation_log = violation_log
        self.policy = policy

    # =========================================================================
    # Threshold Notifications
    # =========================================================================

    async def issue(
        self,
        stats: WeeklyStats,
        now: Optional[datetime] = None,
    ) -> Optional[AdminNotification]:
        """
        Create the week's threshold notification unless one already exists.

        Returns:
            The new AdminNotification, or None when the user was already
            notified for stats.week_key.
        """
        user_id = stats.user_id
        week_key = stats.week_key

        existing = await self.db.get_admin_notification(user_id, week_key)
        if existing is not None:
            metrics.increment("notifications.deduplicated")
            logger.info("Admin Already Notified This Week", [
                ("User", user_id),
                ("Week", week_key),
                ("Notification", str(existing.get("notification_id", ""))[:8]),
            ])
            return None

        violations = await self.violation_log.for_user(user_id)
        this_week = [v for v in violations if record_week_key(v.to_record()) == week_key]

        notification = AdminNotification(
            notification_id=str(uuid.uuid4()),
            notification_type=NOTIFICATION_TYPE_USER_ABUSE,
            user_id=user_id,
            week_key=week_key,
            violation_count=stats.this_week_violations,
            violations=[v.summary() for v in this_week],
            severity_breakdown=dict(stats.severity_breakdown),
            priority=self._priority(stats.this_week_violations),
            status=NOTIFICATION_STATUS_PENDING,
            created_at=to_iso(now or utc_now()),
        )

        created = await self.db.insert_admin_notification(notification.to_record())
        if not created:
            # A concurrent call inserted first
            metrics.increment("notifications.deduplicated")
            logger.info("Admin Already Notified This Week", [
                ("User", user_id),
                ("Week", week_key),
            ])
            return None

        metrics.increment("notifications.created")
        logger.warning("Admin Notified: Violation Threshold Exceeded", [
            ("User", user_id),
            ("Week", week_key),
            ("Violations", str(stats.this_week_violations)),
            ("Priority", notification.priority),
            ("Notification", notification.notification_id[:8]),
        ])
        return notification

    def _priority(self, this_week_violations: int) -> str:
        if this_week_violations >= self.policy.suspend_threshold:
            return PRIORITY_CRITICAL
        return PRIORITY_HIGH

    async def pending(self, limit: int = 50) -> List[AdminNotification]:
        """Pending notifications, newest first."""
        rows = await self.db.get_notifications_by_status(NOTIFICATION_STATUS_PENDING, limit=limit)
        return [AdminNotification.from_row(row) for row in rows]

    async def update_status(
        self,
        notification_id: str,
        status: str,
        now: Optional[datetime] = None,
    ) -> bool:
        """
        Move a notification to pending / reviewed / resolved.

        Returns:
            True if the notification exists.

        Raises:
            ValueError: If status is not a known notification status.
        """
        if status not in NOTIFICATION_STATUSES:
            raise ValueError(
                f"Invalid notification status '{status}', expected one of {', '.join(NOTIFICATION_STATUSES)}"
            )
        found = await self.db.update_notification_status(
            notification_id, status, to_iso(now or utc_now())
        )
        if found:
            logger.info("Admin Notification Updated", [
                ("Notification", notification_id[:8]),
                ("Status", status),
            ])
        return found

    # =========================================================================
    # Escalations
    # =========================================================================

    async def escalate(
        self,
        stats: WeeklyStats,
        escalation_type: str,
        now: Optional[datetime] = None,
    ) -> AdminEscalation:
        """
        Record an urgent escalation for a user.

        Raises:
            ValueError: If escalation_type is unknown.
            Any storage error, unchanged.
        """
        if escalation_type not in ESCALATION_TYPES:
            raise ValueError(f"Invalid escalation type '{escalation_type}'")

        escalation = AdminEscalation(
            escalation_id=str(uuid.uuid4()),
            escalation_type=escalation_type,
            user_id=stats.user_id,
            status=ESCALATION_STATUS_URGENT,
            created_at=to_iso(now or utc_now()),
            stats=stats.to_dict(),
        )
        await self.db.insert_admin_escalation(escalation.to_record())
        metrics.increment("escalations.created")

        logger.error("Critical Escalation To Admin", [
            ("User", stats.user_id),
            ("Type", escalation_type),
            ("Violations", str(stats.this_week_violations)),
            ("Week", stats.week_key),
        ])
        return escalation

    async def urgent_escalations(
        self,
        limit: int = 50,
        user_id: Optional[str] = None,
    ) -> List[AdminEscalation]:
        """Urgent escalations (optionally for one user), newest first."""
        rows = await self.db.get_escalations_by_status(
            ESCALATION_STATUS_URGENT, limit=limit, user_id=user_id
        )
        return [AdminEscalation.from_row(row) for row in rows]


__all__ = ["NotificationIssuer"]

"""
PantryGuard - Suspension Workflow
=================================

Executes auto-suspensions and lifts them again.

DESIGN:
    suspend() runs four steps in order: profile mutation, active
    suspension record, history entry, admin escalation. A failing step
    raises and the remaining steps do not run.

    A user who is already suspended is suspended again when a later
    violation still crosses the threshold. The previous active record is
    marked superseded in the same transaction that creates the new one,
    and both transitions get a history entry.
"""

import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from pantryguard.core.database.gateway import PersistenceGateway
from pantryguard.core.logger import logger
from pantryguard.utils.duration import format_duration
from pantryguard.utils.metrics import metrics
from pantryguard.utils.time_utils import to_iso, utc_now

from .constants import (
    ACCOUNT_STATUS_ACTIVE,
    ACCOUNT_STATUS_SUSPENDED,
    ESCALATION_AUTO_SUSPENSION,
    HISTORY_EVENT_LIFTED,
    HISTORY_EVENT_SUPERSEDED,
    HISTORY_EVENT_SUSPENDED,
    SYSTEM_ACTOR,
)
from .models import Suspension, SuspensionHistoryEntry, WeeklyStats
from .notifier import NotificationIssuer
from .policy import EscalationPolicy


class SuspensionWorkflow:
    """Creates, supersedes and lifts account suspensions."""

    def __init__(
        self,
        db: PersistenceGateway,
        policy: EscalationPolicy,
        notifier: NotificationIssuer,
    ) -> None:
        self.db = db
        self.policy = policy
        self.notifier = notifier

    # =========================================================================
    # Suspend
    # =========================================================================

    async def suspend(
        self,
        stats: WeeklyStats,
        triggered_by_violation_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Suspension:
        """
        Auto-suspend the user described by stats.

        Returns:
            The new active Suspension.

        Raises:
            Any storage error from the step that failed.
        """
        moment = now or utc_now()
        suspended_at = to_iso(moment)
        tier = self.policy.suspension_tier(stats.this_week_violations)
        duration = self.policy.suspension_duration(tier)
        suspended_until = to_iso(moment + timedelta(seconds=duration)) if duration is not None else None
        reason = f"Tier {tier}: {stats.this_week_violations} violations in week {stats.week_key}"

        # 1. Profile
        await self.db.update_user_profile(stats.user_id, {
            "account_status": ACCOUNT_STATUS_SUSPENDED,
            "is_suspended": True,
            "suspended_at": suspended_at,
            "suspended_until": suspended_until,
            "suspension_reason": reason,
            "suspended_by": SYSTEM_ACTOR,
        })

        # 2. Active suspension record
        suspension = Suspension(
            suspension_id=str(uuid.uuid4()),
            user_id=stats.user_id,
            reason=reason,
            tier=tier,
            suspended_at=suspended_at,
            suspended_until=suspended_until,
            suspended_by=SYSTEM_ACTOR,
            triggered_by_violation_id=triggered_by_violation_id,
        )
        previous_row = await self.db.activate_suspension(suspension.to_record())

        if previous_row is not None:
            previous = Suspension.from_row(previous_row)
            await self.db.append_suspension_history(SuspensionHistoryEntry(
                suspension_id=previous.suspension_id,
                user_id=previous.user_id,
                event=HISTORY_EVENT_SUPERSEDED,
                created_at=suspended_at,
                reason=f"Superseded by {suspension.suspension_id}",
                tier=previous.tier,
                suspended_at=previous.suspended_at,
                suspended_until=previous.suspended_until,
                actor=SYSTEM_ACTOR,
                week_key=stats.week_key,
                triggered_by_violation_id=triggered_by_violation_id,
            ).to_record())
            logger.info("Active Suspension Superseded", [
                ("User", stats.user_id),
                ("Previous", previous.suspension_id[:8]),
                ("New", suspension.suspension_id[:8]),
            ])

        # 3. History
        await self.db.append_suspension_history(SuspensionHistoryEntry(
            suspension_id=suspension.suspension_id,
            user_id=stats.user_id,
            event=HISTORY_EVENT_SUSPENDED,
            created_at=suspended_at,
            reason=reason,
            tier=tier,
            suspended_at=suspended_at,
            suspended_until=suspended_until,
            duration_hours=duration / 3600 if duration is not None else None,
            can_appeal=self.policy.can_appeal(tier),
            actor=SYSTEM_ACTOR,
            week_key=stats.week_key,
            triggered_by_violation_id=triggered_by_violation_id,
            stats=stats.to_dict(),
        ).to_record())

        metrics.increment("suspensions.created")
        logger.error("Auto-Suspend: User Account Suspended", [
            ("User", stats.user_id),
            ("Week", stats.week_key),
            ("Tier", str(tier)),
            ("Violations", str(stats.this_week_violations)),
            ("Duration", format_duration(duration)),
            ("Until", "Indefinite" if suspension.is_indefinite else suspended_until),
        ])

        # 4. Escalation
        await self.notifier.escalate(stats, ESCALATION_AUTO_SUSPENSION, now=moment)

        return suspension

    # =========================================================================
    # Lift
    # =========================================================================

    async def lift(
        self,
        user_id: str,
        lifted_by: str,
        reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Optional[Suspension]:
        """
        End the user's active suspension and clear the profile flag.

        The suspension row is deactivated last, after the profile and the
        history entry; a lift that fails earlier leaves it active. The row
        is kept with is_active=False.

        Returns:
            The lifted Suspension, or None if none was active.
        """
        moment = now or utc_now()
        ended_at = to_iso(moment)

        row = await self.db.get_active_suspension(user_id)
        if row is None:
            return None

        suspension = Suspension.from_row(row)

        await self.db.update_user_profile(user_id, {
            "account_status": ACCOUNT_STATUS_ACTIVE,
            "is_suspended": False,
            "suspended_at": None,
            "suspended_until": None,
            "suspension_reason": None,
            "suspended_by": None,
        })

        await self.db.append_suspension_history(SuspensionHistoryEntry(
            suspension_id=suspension.suspension_id,
            user_id=user_id,
            event=HISTORY_EVENT_LIFTED,
            created_at=ended_at,
            reason=reason,
            tier=suspension.tier,
            suspended_at=suspension.suspended_at,
            suspended_until=suspension.suspended_until,
            actor=lifted_by,
        ).to_record())

        await self.db.end_active_suspension(user_id, ended_at, lifted_by)
        suspension.is_active = False
        suspension.ended_at = ended_at
        suspension.ended_by = lifted_by

        metrics.increment("suspensions.lifted")
        logger.success(f"Suspension Lifted for {user_id} by {lifted_by}")
        return suspension

    async def release_expired(self, now: Optional[datetime] = None) -> List[Suspension]:
        """
        Lift every active suspension whose end time has passed.

        Returns:
            The suspensions that were lifted.
        """
        moment = now or utc_now()
        expired = await self.db.get_expired_suspensions(to_iso(moment))

        released: List[Suspension] = []
        for row in expired:
            lifted = await self.lift(row["user_id"], SYSTEM_ACTOR, "Suspension expired", now=moment)
            if lifted is not None:
                released.append(lifted)

        if released:
            logger.tree("Expired Suspensions Released", [
                ("Count", str(len(released))),
                ("Users", ", ".join(s.user_id for s in released)[:100]),
            ], emoji="🔓")
        return released


__all__ = ["SuspensionWorkflow"]

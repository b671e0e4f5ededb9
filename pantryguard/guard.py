"""
PantryGuard - Engine Facade
===========================

Single object that request handlers call into.

DESIGN:
    Composes the abuse and privacy services over one persistence
    gateway. The sqlite DatabaseManager is used unless another gateway
    is passed in.
"""

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from pantryguard.core.config import Config, validate_and_log_config
from pantryguard.core.database import PersistenceGateway, get_db
from pantryguard.core.logger import logger
from pantryguard.services.abuse import (
    AbuseTrackingService,
    AdminNotification,
    Suspension,
    WeeklyStats,
)
from pantryguard.services.privacy import PrivacyService


class PantryGuard:
    """
    Abuse tracking and privacy access control for the recipe app.

    Attributes:
        abuse: Violation recording, stats, suspensions, admin reads.
        privacy: Filtered profile reads and settings.
    """

    def __init__(
        self,
        db: Optional[PersistenceGateway] = None,
        config: Optional[Config] = None,
    ) -> None:
        if config is None:
            config = validate_and_log_config()
        else:
            logger.set_webhook(config.error_webhook_url)
            logger.set_timezone(config.timezone)
        self.config = config
        self.db = db if db is not None else get_db(self.config.db_path)

        self.abuse = AbuseTrackingService(self.db, self.config)
        self.privacy = PrivacyService(self.db)

        logger.tree("PantryGuard Ready", [
            ("Storage", type(self.db).__name__),
            ("Notify At", str(self.abuse.policy.notify_threshold)),
            ("Suspend At", str(self.abuse.policy.suspend_threshold)),
        ], emoji="🛡️")

    # =========================================================================
    # Core Operations
    # =========================================================================

    async def record_violation(
        self,
        user_id: str,
        violation_type: Any,
        severity: Any,
        evidence: Any = None,
        now: Optional[datetime] = None,
    ) -> WeeklyStats:
        """Record a violation; returns stats after any triggered escalation ran."""
        return await self.abuse.record_violation(user_id, violation_type, severity, evidence, now=now)

    async def get_abuse_stats(self, user_id: str) -> WeeklyStats:
        return await self.abuse.get_abuse_stats(user_id)

    async def get_filtered_profile(self, viewer_id: str, target_user_id: str) -> Optional[Dict[str, Any]]:
        return await self.privacy.get_filtered_profile(viewer_id, target_user_id)

    async def can_access_field(self, viewer_id: str, target_user_id: str, field_name: str) -> bool:
        return await self.privacy.can_access_field(viewer_id, target_user_id, field_name)

    # =========================================================================
    # Moderation & Dashboard
    # =========================================================================

    async def is_user_suspended(self, user_id: str) -> bool:
        return await self.abuse.is_user_suspended(user_id)

    async def lift_suspension(
        self,
        user_id: str,
        lifted_by: str,
        reason: Optional[str] = None,
    ) -> Optional[Suspension]:
        return await self.abuse.lift_suspension(user_id, lifted_by, reason)

    async def release_expired_suspensions(self) -> List[Suspension]:
        return await self.abuse.release_expired_suspensions()

    async def purge_expired_violations(self) -> int:
        return await self.abuse.purge_expired_violations()

    async def get_pending_admin_notifications(self, limit: Optional[int] = None) -> List[AdminNotification]:
        return await self.abuse.get_pending_admin_notifications(limit)

    async def weekly_report(self, week_key: Optional[str] = None) -> Dict[str, Any]:
        return await self.abuse.weekly_report(week_key)

    async def get_filtered_preferences(
        self,
        viewer_id: str,
        target_user_id: str,
    ) -> Optional[Mapping[str, Any]]:
        return await self.privacy.get_filtered_preferences(viewer_id, target_user_id)


__all__ = ["PantryGuard"]

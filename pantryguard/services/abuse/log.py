"""
PantryGuard - Violation Log
===========================

Append-only record of abuse events per user.

DESIGN:
    violation_type and severity are stored exactly as given. The log does
    not validate them against a closed set; callers own validation.
    Each record is a single insert, so a violation is either fully
    persisted or not at all.
"""

import uuid
from datetime import datetime, timedelta
from typing import Any, List, Optional

from pantryguard.core.constants import LOG_TRUNCATE_LENGTH
from pantryguard.core.database.gateway import PersistenceGateway
from pantryguard.core.logger import logger
from pantryguard.utils.metrics import metrics
from pantryguard.utils.time_utils import to_iso, utc_now, week_key_for

from .constants import DEFAULT_HISTORY_LIMIT, VIOLATION_RETENTION_DAYS
from .models import Violation


class ViolationLog:
    """Writes and reads violation records through the persistence gateway."""

    def __init__(
        self,
        db: PersistenceGateway,
        retention_days: int = VIOLATION_RETENTION_DAYS,
    ) -> None:
        self.db = db
        self.retention_days = retention_days

    # =========================================================================
    # Writes
    # =========================================================================

    async def record(
        self,
        user_id: str,
        violation_type: Any,
        severity: Any,
        evidence: Any = None,
        now: Optional[datetime] = None,
    ) -> Violation:
        """
        Append a violation bucketed into the ISO week of ``now``.

        Returns:
            The stored Violation.

        Raises:
            Any storage error, unchanged.
        """
        moment = now or utc_now()
        violation = Violation(
            violation_id=str(uuid.uuid4()),
            user_id=user_id,
            violation_type=violation_type,
            severity=severity,
            evidence=evidence,
            week_key=week_key_for(moment),
            created_at=to_iso(moment),
            expires_at=to_iso(moment + timedelta(days=self.retention_days)),
        )

        await self.db.append_violation(violation.to_record())
        metrics.increment("violations.recorded")

        logger.warning("Violation Recorded", [
            ("User", user_id),
            ("Type", str(violation_type)[:LOG_TRUNCATE_LENGTH]),
            ("Severity", str(severity)),
            ("Week", violation.week_key),
            ("ID", violation.violation_id[:8]),
        ])
        return violation

    async def purge_expired(self, now: Optional[datetime] = None) -> int:
        """
        Remove violations past their retention window.

        Returns:
            Number of violations removed.
        """
        removed = await self.db.delete_expired_violations(to_iso(now or utc_now()))
        if removed:
            logger.info("Expired Violations Purged", [
                ("Removed", str(removed)),
                ("Retention", f"{self.retention_days}d"),
            ])
        return removed

    # =========================================================================
    # Reads
    # =========================================================================

    async def for_user(self, user_id: str) -> List[Violation]:
        """Every retained violation for a user, oldest first."""
        rows = await self.db.query_violations_by_user(user_id)
        return [Violation.from_record(row) for row in rows]

    async def history(self, user_id: str, limit: int = DEFAULT_HISTORY_LIMIT) -> List[Violation]:
        """A user's most recent violations, newest first."""
        rows = await self.db.query_violations_by_user(user_id, limit=limit, newest_first=True)
        return [Violation.from_record(row) for row in rows]

    async def for_week(self, week_key: str, limit: Optional[int] = None) -> List[Violation]:
        """All users' violations in a week, newest first."""
        rows = await self.db.query_violations_by_week(week_key, limit=limit)
        return [Violation.from_record(row) for row in rows]


__all__ = ["ViolationLog"]

"""
PantryGuard - Weekly Stats Aggregator
=====================================

Folds a user's violation log into WeeklyStats on demand.

DESIGN:
    Nothing is cached or persisted; every call re-reads the log, so two
    calls without writes in between return identical counts.
    Malformed historical rows never raise. A row always counts toward
    total_violations; it counts toward this week only when its week can
    be read from week_key or derived from created_at, and toward the
    severity breakdown only when it has a severity.
"""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from pantryguard.core.database.gateway import PersistenceGateway
from pantryguard.core.logger import logger
from pantryguard.utils.time_utils import current_week_key, parse_iso, record_week_key

from .constants import DEFAULT_SEVERITIES
from .models import WeeklyStats
from .policy import EscalationPolicy


def _row_severity(row: Mapping[str, Any]) -> Optional[str]:
    severity = row.get("severity")
    if severity is None or severity == "":
        return None
    return str(severity)


class WeeklyStatsAggregator:
    """Computes WeeklyStats from the violation log."""

    def __init__(self, db: PersistenceGateway, policy: EscalationPolicy) -> None:
        self.db = db
        self.policy = policy

    async def compute(self, user_id: str, now: Optional[datetime] = None) -> WeeklyStats:
        """
        Aggregate all of a user's violations against the current ISO week.

        Raises:
            Any storage error, unchanged.
        """
        week_key = current_week_key(now)
        rows = await self.db.query_violations_by_user(user_id)

        breakdown: Dict[str, int] = {severity: 0 for severity in DEFAULT_SEVERITIES}
        total = 0
        this_week = 0
        latest: Optional[datetime] = None
        latest_raw = ""

        for row in rows:
            total += 1
            if not isinstance(row, Mapping):
                continue

            if record_week_key(row) == week_key:
                this_week += 1
                severity = _row_severity(row)
                if severity is not None:
                    breakdown[severity] = breakdown.get(severity, 0) + 1

            moment = parse_iso(row.get("created_at"))
            if moment is not None and (latest is None or moment >= latest):
                latest = moment
                latest_raw = row["created_at"]

        decision = self.policy.decide_count(this_week)
        stats = WeeklyStats(
            user_id=user_id,
            week_key=week_key,
            total_violations=total,
            this_week_violations=this_week,
            severity_breakdown=breakdown,
            should_notify_admin=decision.notify,
            should_auto_suspend=decision.suspend,
            penalty_level=self.policy.penalty_level(this_week),
            last_violation=latest_raw,
        )

        logger.debug(
            f"Abuse stats for {user_id}: {this_week} this week ({week_key}), "
            f"{total} total, penalty {stats.penalty_level}"
        )
        return stats


__all__ = ["WeeklyStatsAggregator"]

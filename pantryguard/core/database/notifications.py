"""
PantryGuard - Database Admin Notification Operations Module
===========================================================

Admin dashboard records: threshold notifications and urgent escalations.
"""

import asyncio
import sqlite3
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pantryguard.core.database.base import _json_dumps, _safe_json_loads
from pantryguard.core.database.models import AdminEscalationRow, AdminNotificationRow
from pantryguard.utils.metrics import metrics

if TYPE_CHECKING:
    from pantryguard.core.database.manager import DatabaseManager


_NOTIFICATION_COLUMNS = (
    "notification_id, notification_type, user_id, week_key, violation_count, "
    "violations_json, severity_breakdown_json, priority, status, created_at, updated_at"
)


def _notification_from_row(row: Optional[sqlite3.Row]) -> Optional[AdminNotificationRow]:
    if row is None:
        return None
    data = dict(row)
    data["violations"] = _safe_json_loads(data.pop("violations_json", None), [])
    data["severity_breakdown"] = _safe_json_loads(data.pop("severity_breakdown_json", None), {})
    return data  # type: ignore[return-value]


def _escalation_from_row(row: sqlite3.Row) -> AdminEscalationRow:
    data = dict(row)
    data["stats"] = _safe_json_loads(data.pop("stats_json", None))
    return data  # type: ignore[return-value]


class NotificationsMixin:
    """Mixin for admin notification and escalation operations."""

    # =========================================================================
    # Notifications
    # =========================================================================

    async def get_admin_notification(
        self: "DatabaseManager",
        user_id: str,
        week_key: str,
    ) -> Optional[AdminNotificationRow]:
        """Existing threshold notification for (user, week), or None."""
        def _get():
            with metrics.timer("db.get_admin_notification"):
                row = self.fetchone(
                    f"SELECT {_NOTIFICATION_COLUMNS} FROM admin_notifications WHERE user_id = ? AND week_key = ?",
                    (user_id, week_key),
                )
            return _notification_from_row(row)

        return await asyncio.to_thread(_get)

    async def insert_admin_notification(self: "DatabaseManager", record: Dict[str, Any]) -> bool:
        """
        Insert a threshold notification if none exists for (user, week).

        Returns:
            True if the row was created, False if one already existed.
        """
        def _insert():
            with metrics.timer("db.insert_admin_notification"):
                cursor = self.execute(
                    f"""INSERT OR IGNORE INTO admin_notifications ({_NOTIFICATION_COLUMNS})
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, NULL)""",
                    (
                        record["notification_id"],
                        record["notification_type"],
                        record["user_id"],
                        record["week_key"],
                        record["violation_count"],
                        _json_dumps(record.get("violations", [])),
                        _json_dumps(record.get("severity_breakdown", {})),
                        record["priority"],
                        record["status"],
                        record["created_at"],
                    ),
                )
            return cursor.rowcount == 1

        return await asyncio.to_thread(_insert)

    async def get_notifications_by_status(
        self: "DatabaseManager",
        status: str,
        limit: int = 50,
    ) -> List[AdminNotificationRow]:
        """Notifications in a status, newest first."""
        def _get():
            rows = self.fetchall(
                f"""SELECT {_NOTIFICATION_COLUMNS} FROM admin_notifications
                    WHERE status = ? ORDER BY created_at DESC LIMIT ?""",
                (status, limit),
            )
            return [_notification_from_row(row) for row in rows]

        return await asyncio.to_thread(_get)

    async def update_notification_status(
        self: "DatabaseManager",
        notification_id: str,
        status: str,
        updated_at: str,
    ) -> bool:
        """
        Move a notification to a new status.

        Returns:
            True if the notification exists.
        """
        def _update():
            cursor = self.execute(
                "UPDATE admin_notifications SET status = ?, updated_at = ? WHERE notification_id = ?",
                (status, updated_at, notification_id),
            )
            return cursor.rowcount > 0

        return await asyncio.to_thread(_update)

    # =========================================================================
    # Escalations
    # =========================================================================

    async def insert_admin_escalation(self: "DatabaseManager", record: Dict[str, Any]) -> None:
        """Append an urgent escalation record."""
        def _insert():
            with metrics.timer("db.insert_admin_escalation"):
                self.execute(
                    """INSERT INTO admin_escalations
                       (escalation_id, escalation_type, user_id, stats_json, status, created_at)
                       VALUES (?, ?, ?, ?, ?, ?)""",
                    (
                        record["escalation_id"],
                        record["escalation_type"],
                        record["user_id"],
                        _json_dumps(record.get("stats")),
                        record["status"],
                        record["created_at"],
                    ),
                )

        await asyncio.to_thread(_insert)

    async def get_escalations_by_status(
        self: "DatabaseManager",
        status: str,
        limit: int = 50,
        user_id: Optional[str] = None,
    ) -> List[AdminEscalationRow]:
        """Escalations in a status (optionally for one user), newest first."""
        def _get():
            query = (
                "SELECT escalation_id, escalation_type, user_id, stats_json, status, created_at "
                "FROM admin_escalations WHERE status = ?"
            )
            params: list = [status]
            if user_id is not None:
                query += " AND user_id = ?"
                params.append(user_id)
            query += " ORDER BY created_at DESC, rowid DESC LIMIT ?"
            params.append(limit)
            rows = self.fetchall(query, tuple(params))
            return [_escalation_from_row(row) for row in rows]

        return await asyncio.to_thread(_get)


__all__ = ["NotificationsMixin"]

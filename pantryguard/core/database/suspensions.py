"""
PantryGuard - Database Suspension Operations Module
===================================================

Active suspensions and the suspension history audit trail.
"""

import asyncio
import sqlite3
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pantryguard.core.database.base import _json_dumps, _safe_json_loads
from pantryguard.core.database.models import SuspensionHistoryRow, SuspensionRow
from pantryguard.utils.metrics import metrics

if TYPE_CHECKING:
    from pantryguard.core.database.manager import DatabaseManager


_SUSPENSION_COLUMNS = (
    "suspension_id, user_id, reason, tier, suspended_at, suspended_until, "
    "suspended_by, triggered_by_violation_id, is_active, ended_at, ended_by, superseded_by"
)


def _suspension_from_row(row: Optional[sqlite3.Row]) -> Optional[SuspensionRow]:
    if row is None:
        return None
    data: SuspensionRow = dict(row)  # type: ignore[assignment]
    data["is_active"] = bool(data.get("is_active"))
    return data


def _history_from_row(row: sqlite3.Row) -> SuspensionHistoryRow:
    data = dict(row)
    data["stats"] = _safe_json_loads(data.pop("stats_json", None))
    if data.get("can_appeal") is not None:
        data["can_appeal"] = bool(data["can_appeal"])
    return data  # type: ignore[return-value]


class SuspensionsMixin:
    """Mixin for suspension operations."""

    async def get_active_suspension(self: "DatabaseManager", user_id: str) -> Optional[SuspensionRow]:
        """Point read of a user's active suspension; None when not suspended."""
        def _get():
            with metrics.timer("db.get_active_suspension"):
                row = self.fetchone(
                    f"SELECT {_SUSPENSION_COLUMNS} FROM suspensions WHERE user_id = ? AND is_active = 1",
                    (user_id,),
                )
            return _suspension_from_row(row)

        return await asyncio.to_thread(_get)

    async def activate_suspension(
        self: "DatabaseManager",
        record: Dict[str, Any],
    ) -> Optional[SuspensionRow]:
        """
        Create the active suspension for a user.

        DESIGN: Deactivates the previous active suspension (marking it
        superseded by the new one) and inserts the new row in a single
        transaction, so only one active suspension exists per user.

        Returns:
            The suspension that was superseded, or None.
        """
        def _activate():
            with metrics.timer("db.activate_suspension"), self.transaction() as tx:
                tx.execute(
                    f"SELECT {_SUSPENSION_COLUMNS} FROM suspensions WHERE user_id = ? AND is_active = 1",
                    (record["user_id"],),
                )
                previous = _suspension_from_row(tx.fetchone())

                if previous is not None:
                    tx.execute(
                        """UPDATE suspensions
                           SET is_active = 0, ended_at = ?, ended_by = ?, superseded_by = ?
                           WHERE suspension_id = ?""",
                        (
                            record["suspended_at"],
                            record["suspended_by"],
                            record["suspension_id"],
                            previous["suspension_id"],
                        ),
                    )

                tx.execute(
                    f"""INSERT INTO suspensions ({_SUSPENSION_COLUMNS})
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?, 1, NULL, NULL, NULL)""",
                    (
                        record["suspension_id"],
                        record["user_id"],
                        record["reason"],
                        record.get("tier", 0),
                        record["suspended_at"],
                        record.get("suspended_until"),
                        record["suspended_by"],
                        record.get("triggered_by_violation_id"),
                    ),
                )
            return previous

        return await asyncio.to_thread(_activate)

    async def end_active_suspension(
        self: "DatabaseManager",
        user_id: str,
        ended_at: str,
        ended_by: str,
    ) -> Optional[SuspensionRow]:
        """
        Deactivate a user's active suspension (the row is kept).

        Returns:
            The suspension as it was before ending, or None if none was active.
        """
        def _end():
            with metrics.timer("db.end_active_suspension"), self.transaction() as tx:
                tx.execute(
                    f"SELECT {_SUSPENSION_COLUMNS} FROM suspensions WHERE user_id = ? AND is_active = 1",
                    (user_id,),
                )
                active = _suspension_from_row(tx.fetchone())
                if active is None:
                    return None
                tx.execute(
                    "UPDATE suspensions SET is_active = 0, ended_at = ?, ended_by = ? WHERE suspension_id = ?",
                    (ended_at, ended_by, active["suspension_id"]),
                )
            return active

        return await asyncio.to_thread(_end)

    async def get_expired_suspensions(self: "DatabaseManager", now: str) -> List[SuspensionRow]:
        """Active suspensions with a suspended_until at or before now."""
        def _get():
            with metrics.timer("db.get_expired_suspensions"):
                rows = self.fetchall(
                    f"""SELECT {_SUSPENSION_COLUMNS} FROM suspensions
                        WHERE is_active = 1 AND suspended_until IS NOT NULL AND suspended_until <= ?
                        ORDER BY suspended_until ASC""",
                    (now,),
                )
            return [_suspension_from_row(row) for row in rows]

        return await asyncio.to_thread(_get)

    async def append_suspension_history(self: "DatabaseManager", entry: Dict[str, Any]) -> int:
        """
        Append a suspension history entry.

        Returns:
            Row ID of the history entry.
        """
        def _append():
            can_appeal = entry.get("can_appeal")
            with metrics.timer("db.append_suspension_history"):
                cursor = self.execute(
                    """INSERT INTO suspension_history
                       (suspension_id, user_id, event, reason, tier, suspended_at,
                        suspended_until, duration_hours, can_appeal, actor, week_key,
                        triggered_by_violation_id, stats_json, created_at)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        entry["suspension_id"],
                        entry["user_id"],
                        entry["event"],
                        entry.get("reason"),
                        entry.get("tier"),
                        entry.get("suspended_at"),
                        entry.get("suspended_until"),
                        entry.get("duration_hours"),
                        None if can_appeal is None else int(bool(can_appeal)),
                        entry.get("actor"),
                        entry.get("week_key"),
                        entry.get("triggered_by_violation_id"),
                        _json_dumps(entry.get("stats")),
                        entry["created_at"],
                    ),
                )
            return cursor.lastrowid

        return await asyncio.to_thread(_append)

    async def get_suspension_history(self: "DatabaseManager", user_id: str) -> List[SuspensionHistoryRow]:
        """A user's suspension history, oldest first."""
        def _get():
            rows = self.fetchall(
                """SELECT id, suspension_id, user_id, event, reason, tier, suspended_at,
                          suspended_until, duration_hours, can_appeal, actor, week_key,
                          triggered_by_violation_id, stats_json, created_at
                   FROM suspension_history WHERE user_id = ?
                   ORDER BY id ASC""",
                (user_id,),
            )
            return [_history_from_row(row) for row in rows]

        return await asyncio.to_thread(_get)


__all__ = ["SuspensionsMixin"]

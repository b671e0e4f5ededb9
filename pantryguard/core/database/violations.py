"""
PantryGuard - Database Violation Operations Module
==================================================

Append-only violation log storage.
"""

import asyncio
import sqlite3
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pantryguard.core.database.base import _json_dumps, _safe_json_loads
from pantryguard.core.database.models import ViolationRow
from pantryguard.utils.metrics import metrics

if TYPE_CHECKING:
    from pantryguard.core.database.manager import DatabaseManager


_VIOLATION_COLUMNS = (
    "violation_id, user_id, violation_type, severity, evidence_json, "
    "week_key, created_at, expires_at"
)


def _violation_from_row(row: sqlite3.Row) -> ViolationRow:
    """Convert a sqlite row into a ViolationRow, dropping NULL columns."""
    data: ViolationRow = {}
    for key in row.keys():
        value = row[key]
        if value is None:
            continue
        if key == "evidence_json":
            data["evidence"] = _safe_json_loads(value)
        else:
            data[key] = value
    return data


class ViolationsMixin:
    """Mixin for violation log operations."""

    async def append_violation(self: "DatabaseManager", record: Dict[str, Any]) -> None:
        """
        Write a new immutable violation record.

        DESIGN: Plain INSERT. There is no update path for violations;
        a correction is a new record.

        Args:
            record: Mapping with violation_id, user_id, violation_type,
                severity, evidence, week_key, created_at, expires_at.
        """
        def _append():
            with metrics.timer("db.append_violation"):
                self.execute(
                    f"""INSERT INTO violations ({_VIOLATION_COLUMNS})
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        record["violation_id"],
                        record["user_id"],
                        record.get("violation_type"),
                        record.get("severity"),
                        _json_dumps(record.get("evidence")),
                        record.get("week_key"),
                        record.get("created_at"),
                        record.get("expires_at"),
                    ),
                )

        await asyncio.to_thread(_append)

    async def query_violations_by_user(
        self: "DatabaseManager",
        user_id: str,
        limit: Optional[int] = None,
        newest_first: bool = False,
    ) -> List[ViolationRow]:
        """
        Range query over one user's violations ordered by time.

        Returns:
            List of rows; empty when the user has none.
        """
        def _query():
            order = "DESC" if newest_first else "ASC"
            query = (
                f"SELECT {_VIOLATION_COLUMNS} FROM violations WHERE user_id = ? "
                f"ORDER BY created_at {order}, rowid {order}"
            )
            params: tuple = (user_id,)
            if limit is not None:
                query += " LIMIT ?"
                params = (user_id, limit)
            with metrics.timer("db.query_violations_by_user"):
                rows = self.fetchall(query, params)
            return [_violation_from_row(row) for row in rows]

        return await asyncio.to_thread(_query)

    async def query_violations_by_week(
        self: "DatabaseManager",
        week_key: str,
        limit: Optional[int] = None,
    ) -> List[ViolationRow]:
        """All users' violations bucketed into a week, newest first."""
        def _query():
            query = (
                f"SELECT {_VIOLATION_COLUMNS} FROM violations WHERE week_key = ? "
                "ORDER BY created_at DESC, rowid DESC"
            )
            params: tuple = (week_key,)
            if limit is not None:
                query += " LIMIT ?"
                params = (week_key, limit)
            with metrics.timer("db.query_violations_by_week"):
                rows = self.fetchall(query, params)
            return [_violation_from_row(row) for row in rows]

        return await asyncio.to_thread(_query)

    async def delete_expired_violations(self: "DatabaseManager", cutoff: str) -> int:
        """
        Remove violations whose retention window ended before cutoff.

        Rows without expires_at are kept.

        Returns:
            Number of rows removed.
        """
        def _delete():
            with metrics.timer("db.delete_expired_violations"):
                cursor = self.execute(
                    "DELETE FROM violations WHERE expires_at IS NOT NULL AND expires_at < ?",
                    (cutoff,),
                )
            return cursor.rowcount

        return await asyncio.to_thread(_delete)


__all__ = ["ViolationsMixin"]

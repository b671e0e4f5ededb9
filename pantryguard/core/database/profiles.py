"""
PantryGuard - Database Profile Operations Module
================================================

User profiles, privacy settings and friendship records.
"""

import asyncio
from typing import TYPE_CHECKING, Any, Dict, Optional

from pantryguard.core.database.base import _json_dumps, _safe_json_loads
from pantryguard.core.database.models import FriendshipRow
from pantryguard.utils.metrics import metrics
from pantryguard.utils.time_utils import to_iso, utc_now

if TYPE_CHECKING:
    from pantryguard.core.database.manager import DatabaseManager


class ProfilesMixin:
    """Mixin for profile, privacy and friendship operations."""

    # =========================================================================
    # Profiles
    # =========================================================================

    async def get_user_profile(self: "DatabaseManager", user_id: str) -> Optional[Dict[str, Any]]:
        """Point read of a profile document; None when not found."""
        def _get():
            with metrics.timer("db.get_user_profile"):
                row = self.fetchone(
                    "SELECT profile_json FROM user_profiles WHERE user_id = ?",
                    (user_id,),
                )
            if row is None:
                return None
            return _safe_json_loads(row["profile_json"], {})

        return await asyncio.to_thread(_get)

    async def put_user_profile(self: "DatabaseManager", user_id: str, profile: Dict[str, Any]) -> None:
        """Create or replace a profile document."""
        def _put():
            document = dict(profile)
            document.setdefault("user_id", user_id)
            self.execute(
                """INSERT INTO user_profiles (user_id, profile_json, updated_at)
                   VALUES (?, ?, ?)
                   ON CONFLICT(user_id) DO UPDATE SET
                       profile_json = excluded.profile_json,
                       updated_at = excluded.updated_at""",
                (user_id, _json_dumps(document), to_iso(utc_now())),
            )

        await asyncio.to_thread(_put)

    async def update_user_profile(
        self: "DatabaseManager",
        user_id: str,
        fields: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Partial update of a profile document.

        DESIGN: Read-merge-write inside one transaction. A missing profile
        is created from the given fields, like an upsert.

        Returns:
            The merged profile document.
        """
        def _update():
            with metrics.timer("db.update_user_profile"), self.transaction() as tx:
                tx.execute("SELECT profile_json FROM user_profiles WHERE user_id = ?", (user_id,))
                row = tx.fetchone()
                document = _safe_json_loads(row["profile_json"], {}) if row else {}
                document.setdefault("user_id", user_id)
                document.update(fields)
                tx.execute(
                    """INSERT INTO user_profiles (user_id, profile_json, updated_at)
                       VALUES (?, ?, ?)
                       ON CONFLICT(user_id) DO UPDATE SET
                           profile_json = excluded.profile_json,
                           updated_at = excluded.updated_at""",
                    (user_id, _json_dumps(document), to_iso(utc_now())),
                )
            return document

        return await asyncio.to_thread(_update)

    # =========================================================================
    # Privacy Settings
    # =========================================================================

    async def get_privacy_settings(self: "DatabaseManager", user_id: str) -> Optional[Dict[str, Any]]:
        """Stored privacy settings document; None when the user never saved any."""
        def _get():
            with metrics.timer("db.get_privacy_settings"):
                row = self.fetchone(
                    "SELECT settings_json FROM privacy_settings WHERE user_id = ?",
                    (user_id,),
                )
            if row is None:
                return None
            return _safe_json_loads(row["settings_json"], {})

        return await asyncio.to_thread(_get)

    async def put_privacy_settings(
        self: "DatabaseManager",
        user_id: str,
        settings: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Merge settings into the user's stored privacy settings.

        Returns:
            The stored settings document after the merge.
        """
        def _put():
            now = to_iso(utc_now())
            with self.transaction() as tx:
                tx.execute("SELECT settings_json FROM privacy_settings WHERE user_id = ?", (user_id,))
                row = tx.fetchone()
                document = _safe_json_loads(row["settings_json"], {}) if row else {}
                document.update(settings)
                document["updated_at"] = now
                tx.execute(
                    """INSERT INTO privacy_settings (user_id, settings_json, updated_at)
                       VALUES (?, ?, ?)
                       ON CONFLICT(user_id) DO UPDATE SET
                           settings_json = excluded.settings_json,
                           updated_at = excluded.updated_at""",
                    (user_id, _json_dumps(document), now),
                )
            return document

        return await asyncio.to_thread(_put)

    # =========================================================================
    # Friendships
    # =========================================================================

    async def get_friendship(
        self: "DatabaseManager",
        user_id: str,
        friend_id: str,
    ) -> Optional[FriendshipRow]:
        """Friendship row as recorded from user_id's side; None when absent."""
        def _get():
            with metrics.timer("db.get_friendship"):
                row = self.fetchone(
                    """SELECT user_id, friend_id, status, created_at
                       FROM friendships WHERE user_id = ? AND friend_id = ?""",
                    (user_id, friend_id),
                )
            return dict(row) if row else None

        return await asyncio.to_thread(_get)

    async def put_friendship(
        self: "DatabaseManager",
        user_id: str,
        friend_id: str,
        status: str,
    ) -> None:
        """Create or update a directed friendship row."""
        def _put():
            self.execute(
                """INSERT INTO friendships (user_id, friend_id, status, created_at)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(user_id, friend_id) DO UPDATE SET status = excluded.status""",
                (user_id, friend_id, status, to_iso(utc_now())),
            )

        await asyncio.to_thread(_put)


__all__ = ["ProfilesMixin"]

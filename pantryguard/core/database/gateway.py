"""
PantryGuard - Persistence Gateway Contract
==========================================

The storage operations the engine consumes, expressed as a Protocol so
services can run against DatabaseManager or any object with the same
async methods (tests pass AsyncMock-backed fakes).

DESIGN:
    No method here promises atomic increments or insert-if-absent across
    separate calls. Services must assume read-then-write races between
    concurrent callers.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from pantryguard.core.database.models import (
    AdminEscalationRow,
    AdminNotificationRow,
    FriendshipRow,
    SuspensionHistoryRow,
    SuspensionRow,
    ViolationRow,
)


@runtime_checkable
class PersistenceGateway(Protocol):
    """Async storage contract used by the abuse and privacy services."""

    # Violations
    async def append_violation(self, record: Dict[str, Any]) -> None: ...

    async def query_violations_by_user(
        self,
        user_id: str,
        limit: Optional[int] = None,
        newest_first: bool = False,
    ) -> List[ViolationRow]: ...

    async def query_violations_by_week(
        self,
        week_key: str,
        limit: Optional[int] = None,
    ) -> List[ViolationRow]: ...

    async def delete_expired_violations(self, cutoff: str) -> int: ...

    # Suspensions
    async def get_active_suspension(self, user_id: str) -> Optional[SuspensionRow]: ...

    async def activate_suspension(self, record: Dict[str, Any]) -> Optional[SuspensionRow]: ...

    async def end_active_suspension(
        self,
        user_id: str,
        ended_at: str,
        ended_by: str,
    ) -> Optional[SuspensionRow]: ...

    async def get_expired_suspensions(self, now: str) -> List[SuspensionRow]: ...

    async def append_suspension_history(self, entry: Dict[str, Any]) -> int: ...

    async def get_suspension_history(self, user_id: str) -> List[SuspensionHistoryRow]: ...

    # Admin notifications / escalations
    async def get_admin_notification(
        self,
        user_id: str,
        week_key: str,
    ) -> Optional[AdminNotificationRow]: ...

    async def insert_admin_notification(self, record: Dict[str, Any]) -> bool: ...

    async def get_notifications_by_status(
        self,
        status: str,
        limit: int = 50,
    ) -> List[AdminNotificationRow]: ...

    async def update_notification_status(
        self,
        notification_id: str,
        status: str,
        updated_at: str,
    ) -> bool: ...

    async def insert_admin_escalation(self, record: Dict[str, Any]) -> None: ...

    async def get_escalations_by_status(
        self,
        status: str,
        limit: int = 50,
        user_id: Optional[str] = None,
    ) -> List[AdminEscalationRow]: ...

    # Profiles / privacy
    async def get_user_profile(self, user_id: str) -> Optional[Dict[str, Any]]: ...

    async def update_user_profile(self, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]: ...

    async def get_privacy_settings(self, user_id: str) -> Optional[Dict[str, Any]]: ...

    async def put_privacy_settings(self, user_id: str, settings: Dict[str, Any]) -> Dict[str, Any]: ...

    async def get_friendship(self, user_id: str, friend_id: str) -> Optional[FriendshipRow]: ...


__all__ = ["PersistenceGateway"]

"""
PantryGuard - Database Module
=============================

SQLite persistence for violations, suspensions, admin records,
profiles and privacy settings.
"""

from pantryguard.core.database.manager import DatabaseManager, get_db
from pantryguard.core.database.base import _safe_json_loads
from pantryguard.core.database.gateway import PersistenceGateway

from pantryguard.core.database.models import (
    ViolationRow,
    SuspensionRow,
    SuspensionHistoryRow,
    AdminNotificationRow,
    AdminEscalationRow,
    FriendshipRow,
)

__all__ = [
    # Main interface
    "DatabaseManager",
    "PersistenceGateway",
    "get_db",

    # Helpers
    "_safe_json_loads",

    # Type definitions
    "ViolationRow",
    "SuspensionRow",
    "SuspensionHistoryRow",
    "AdminNotificationRow",
    "AdminEscalationRow",
    "FriendshipRow",
]

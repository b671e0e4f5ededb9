"""
PantryGuard - Database Type Definitions
=======================================

TypedDict definitions for rows returned from the database.
JSON columns are already decoded (``evidence``, ``violations``, ``stats``).
"""

from typing import Any, Dict, List, Optional, TypedDict


class ViolationRow(TypedDict, total=False):
    """Violation row. Any field except user_id may be missing on old data."""
    violation_id: str
    user_id: str
    violation_type: Optional[str]
    severity: Optional[str]
    evidence: Any
    week_key: Optional[str]
    created_at: Optional[str]
    expires_at: Optional[str]


class SuspensionRow(TypedDict, total=False):
    """Suspension row (active or ended)."""
    suspension_id: str
    user_id: str
    reason: str
    tier: int
    suspended_at: str
    suspended_until: Optional[str]
    suspended_by: str
    triggered_by_violation_id: Optional[str]
    is_active: bool
    ended_at: Optional[str]
    ended_by: Optional[str]
    superseded_by: Optional[str]


class SuspensionHistoryRow(TypedDict, total=False):
    """Suspension history row."""
    id: int
    suspension_id: str
    user_id: str
    event: str
    reason: Optional[str]
    tier: Optional[int]
    suspended_at: Optional[str]
    suspended_until: Optional[str]
    duration_hours: Optional[float]
    can_appeal: Optional[bool]
    actor: Optional[str]
    week_key: Optional[str]
    triggered_by_violation_id: Optional[str]
    stats: Optional[Dict[str, Any]]
    created_at: str


class AdminNotificationRow(TypedDict, total=False):
    """Admin notification row."""
    notification_id: str
    notification_type: str
    user_id: str
    week_key: str
    violation_count: int
    violations: List[Dict[str, Any]]
    severity_breakdown: Dict[str, int]
    priority: str
    status: str
    created_at: str
    updated_at: Optional[str]


class AdminEscalationRow(TypedDict, total=False):
    """Admin escalation row."""
    escalation_id: str
    escalation_type: str
    user_id: str
    stats: Optional[Dict[str, Any]]
    status: str
    created_at: str


class FriendshipRow(TypedDict, total=False):
    """Directed friendship row."""
    user_id: str
    friend_id: str
    status: str
    created_at: str


__all__ = [
    "ViolationRow",
    "SuspensionRow",
    "SuspensionHistoryRow",
    "AdminNotificationRow",
    "AdminEscalationRow",
    "FriendshipRow",
]

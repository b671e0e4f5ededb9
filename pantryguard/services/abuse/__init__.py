"""
PantryGuard - Abuse Tracking Package
====================================

Violation log, weekly aggregation, escalation policy, suspensions and
admin notifications.
"""

from .service import AbuseTrackingService
from .log import ViolationLog
from .aggregator import WeeklyStatsAggregator
from .policy import EscalationPolicy
from .suspension import SuspensionWorkflow
from .notifier import NotificationIssuer
from .models import (
    AdminEscalation,
    AdminNotification,
    EscalationDecision,
    Suspension,
    SuspensionHistoryEntry,
    Violation,
    WeeklyStats,
)
from .constants import (
    NOTIFY_THRESHOLD,
    SUSPEND_THRESHOLD,
    WARNING_THRESHOLD,
)

__all__ = [
    "AbuseTrackingService",
    "ViolationLog",
    "WeeklyStatsAggregator",
    "EscalationPolicy",
    "SuspensionWorkflow",
    "NotificationIssuer",
    "AdminEscalation",
    "AdminNotification",
    "EscalationDecision",
    "Suspension",
    "SuspensionHistoryEntry",
    "Violation",
    "WeeklyStats",
    "NOTIFY_THRESHOLD",
    "SUSPEND_THRESHOLD",
    "WARNING_THRESHOLD",
]

"""
PantryGuard - Abuse Tracking Constants
======================================

Default thresholds, suspension tiers and record status values.
The thresholds here are defaults; the running values come from Config.
"""

# =============================================================================
# Escalation Thresholds (violations per ISO week)
# =============================================================================

NOTIFY_THRESHOLD = 5
SUSPEND_THRESHOLD = 10
WARNING_THRESHOLD = 3

# =============================================================================
# Suspension Tiers
# =============================================================================

# (minimum weekly violations, tier), checked highest first
SUSPENSION_TIER_BOUNDARIES = (
    (30, 3),
    (15, 2),
    (5, 1),
)

SUSPENSION_TIER_DURATIONS = {
    1: 60 * 60,               # 1 hour
    2: 24 * 60 * 60,          # 1 day
    3: 30 * 24 * 60 * 60,     # 30 days
}

# Tiers at or above this cannot be appealed
NON_APPEALABLE_TIER = 3

SYSTEM_ACTOR = "system"

# =============================================================================
# Retention
# =============================================================================

VIOLATION_RETENTION_DAYS = 30

# =============================================================================
# Severities & Penalty Levels
# =============================================================================

DEFAULT_SEVERITIES = ("low", "medium", "high", "critical")

PENALTY_NONE = "none"
PENALTY_WARNING = "warning"
PENALTY_RESTRICTED = "restricted"
PENALTY_SUSPENDED = "suspended"

# =============================================================================
# Record Types & Statuses
# =============================================================================

NOTIFICATION_TYPE_USER_ABUSE = "user_abuse"

NOTIFICATION_STATUS_PENDING = "pending"
NOTIFICATION_STATUS_REVIEWED = "reviewed"
NOTIFICATION_STATUS_RESOLVED = "resolved"
NOTIFICATION_STATUSES = (
    NOTIFICATION_STATUS_PENDING,
    NOTIFICATION_STATUS_REVIEWED,
    NOTIFICATION_STATUS_RESOLVED,
)

PRIORITY_CRITICAL = "critical"
PRIORITY_HIGH = "high"

ESCALATION_AUTO_SUSPENSION = "auto_suspension"
ESCALATION_CRITICAL_VIOLATION = "critical_violation"
ESCALATION_TYPES = (ESCALATION_AUTO_SUSPENSION, ESCALATION_CRITICAL_VIOLATION)
ESCALATION_STATUS_URGENT = "urgent"

HISTORY_EVENT_SUSPENDED = "suspended"
HISTORY_EVENT_SUPERSEDED = "superseded"
HISTORY_EVENT_LIFTED = "lifted"

ACCOUNT_STATUS_ACTIVE = "active"
ACCOUNT_STATUS_SUSPENDED = "suspended"

# Violations included in a dashboard history listing
DEFAULT_HISTORY_LIMIT = 50


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "NOTIFY_THRESHOLD",
    "SUSPEND_THRESHOLD",
    "WARNING_THRESHOLD",
    "SUSPENSION_TIER_BOUNDARIES",
    "SUSPENSION_TIER_DURATIONS",
    "NON_APPEALABLE_TIER",
    "SYSTEM_ACTOR",
    "VIOLATION_RETENTION_DAYS",
    "DEFAULT_SEVERITIES",
    "PENALTY_NONE",
    "PENALTY_WARNING",
    "PENALTY_RESTRICTED",
    "PENALTY_SUSPENDED",
    "NOTIFICATION_TYPE_USER_ABUSE",
    "NOTIFICATION_STATUS_PENDING",
    "NOTIFICATION_STATUS_REVIEWED",
    "NOTIFICATION_STATUS_RESOLVED",
    "NOTIFICATION_STATUSES",
    "PRIORITY_CRITICAL",
    "PRIORITY_HIGH",
    "ESCALATION_AUTO_SUSPENSION",
    "ESCALATION_CRITICAL_VIOLATION",
    "ESCALATION_TYPES",
    "ESCALATION_STATUS_URGENT",
    "HISTORY_EVENT_SUSPENDED",
    "HISTORY_EVENT_SUPERSEDED",
    "HISTORY_EVENT_LIFTED",
    "ACCOUNT_STATUS_ACTIVE",
    "ACCOUNT_STATUS_SUSPENDED",
    "DEFAULT_HISTORY_LIMIT",
]

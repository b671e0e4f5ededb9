"""
PantryGuard - Abuse Tracking Data Models
========================================

Dataclasses for violations, derived weekly stats, escalation decisions,
suspensions and admin dashboard records.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Violation:
    """
    A single recorded abuse event. Immutable once written.

    Only ``violation_id`` and ``user_id`` are guaranteed; historical rows
    may be missing any other field.
    """
    violation_id: str
    user_id: str
    violation_type: Optional[str] = None
    severity: Optional[str] = None
    evidence: Any = None
    week_key: Optional[str] = None
    created_at: Optional[str] = None
    expires_at: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Violation":
        """Build from a storage row, tolerating missing keys."""
        return cls(
            violation_id=str(record.get("violation_id", "")),
            user_id=str(record.get("user_id", "")),
            violation_type=record.get("violation_type"),
            severity=record.get("severity"),
            evidence=record.get("evidence"),
            week_key=record.get("week_key"),
            created_at=record.get("created_at"),
            expires_at=record.get("expires_at"),
        )

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)

    def summary(self) -> Dict[str, Any]:
        """Compact form used inside admin notifications."""
        return {
            "violation_id": self.violation_id,
            "type": self.violation_type,
            "severity": self.severity,
            "created_at": self.created_at,
        }


@dataclass
class WeeklyStats:
    """
    Aggregated abuse stats for one user. Derived on demand, never stored.

    Attributes:
        total_violations: Count across all retained violations.
        this_week_violations: Count whose week_key is the current week.
        severity_breakdown: Count per severity in the current week.
        should_notify_admin: this_week_violations reached the notify threshold.
        should_auto_suspend: this_week_violations reached the suspend threshold.
        penalty_level: none / warning / restricted / suspended.
        last_violation: Timestamp of the most recent violation ("" if none).
    """
    user_id: str
    week_key: str
    total_violations: int = 0
    this_week_violations: int = 0
    severity_breakdown: Dict[str, int] = field(default_factory=dict)
    should_notify_admin: bool = False
    should_auto_suspend: bool = False
    penalty_level: str = "none"
    last_violation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready mapping returned to request handlers."""
        data = asdict(self)
        data["severity_breakdown"] = dict(self.severity_breakdown)
        return data


@dataclass(frozen=True)
class EscalationDecision:
    """Actions the escalation policy selected for a stats snapshot."""
    notify: bool = False
    suspend: bool = False

    @property
    def any(self) -> bool:
        return self.notify or self.suspend


@dataclass
class Suspension:
    """An account suspension. Ended suspensions are kept with is_active=False."""
    suspension_id: str
    user_id: str
    reason: str
    suspended_at: str
    suspended_until: Optional[str] = None
    tier: int = 0
    suspended_by: str = "system"
    triggered_by_violation_id: Optional[str] = None
    is_active: bool = True
    ended_at: Optional[str] = None
    ended_by: Optional[str] = None
    superseded_by: Optional[str] = None

    @property
    def is_indefinite(self) -> bool:
        return self.suspended_until is None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Suspension":
        return cls(
            suspension_id=row["suspension_id"],
            user_id=row["user_id"],
            reason=row.get("reason") or "",
            suspended_at=row["suspended_at"],
            suspended_until=row.get("suspended_until"),
            tier=row.get("tier") or 0,
            suspended_by=row.get("suspended_by") or "system",
            triggered_by_violation_id=row.get("triggered_by_violation_id"),
            is_active=bool(row.get("is_active", True)),
            ended_at=row.get("ended_at"),
            ended_by=row.get("ended_by"),
            superseded_by=row.get("superseded_by"),
        )

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SuspensionHistoryEntry:
    """Append-only audit record for one suspension transition."""
    suspension_id: str
    user_id: str
    event: str
    created_at: str
    reason: Optional[str] = None
    tier: Optional[int] = None
    suspended_at: Optional[str] = None
    suspended_until: Optional[str] = None
    duration_hours: Optional[float] = None
    can_appeal: Optional[bool] = None
    actor: Optional[str] = None
    week_key: Optional[str] = None
    triggered_by_violation_id: Optional[str] = None
    stats: Optional[Dict[str, Any]] = None
    id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SuspensionHistoryEntry":
        known = set(cls.__dataclass_fields__)
        return cls(**{k: v for k, v in row.items() if k in known})

    def to_record(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("id", None)
        return data


@dataclass
class AdminNotification:
    """Threshold-crossed notification, at most one per (user, week)."""
    notification_id: str
    user_id: str
    week_key: str
    violation_count: int
    priority: str
    status: str
    created_at: str
    notification_type: str = "user_abuse"
    violations: List[Dict[str, Any]] = field(default_factory=list)
    severity_breakdown: Dict[str, int] = field(default_factory=dict)
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "AdminNotification":
        known = set(cls.__dataclass_fields__)
        return cls(**{k: v for k, v in row.items() if k in known})

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AdminEscalation:
    """Urgent escalation raised for auto-suspensions and critical cases."""
    escalation_id: str
    escalation_type: str
    user_id: str
    status: str
    created_at: str
    stats: Optional[Dict[str, Any]] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "AdminEscalation":
        known = set(cls.__dataclass_fields__)
        return cls(**{k: v for k, v in row.items() if k in known})

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = [
    "Violation",
    "WeeklyStats",
    "EscalationDecision",
    "Suspension",
    "SuspensionHistoryEntry",
    "AdminNotification",
    "AdminEscalation",
]

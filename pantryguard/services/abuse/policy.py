"""
PantryGuard - Escalation Policy
===============================

Pure decision rules mapping weekly violation counts to actions.

DESIGN:
    No I/O and no clock. Thresholds are injected (from Config in
    production, from constructor args in tests), so the same counts
    always give the same decision. Notify and suspend are evaluated
    independently on every call; idempotency is the executors' job.
"""

from typing import TYPE_CHECKING, Dict, Optional, Sequence

from .constants import (
    NON_APPEALABLE_TIER,
    NOTIFY_THRESHOLD,
    PENALTY_NONE,
    PENALTY_RESTRICTED,
    PENALTY_SUSPENDED,
    PENALTY_WARNING,
    SUSPEND_THRESHOLD,
    SUSPENSION_TIER_BOUNDARIES,
    SUSPENSION_TIER_DURATIONS,
    WARNING_THRESHOLD,
)
from .models import EscalationDecision, WeeklyStats

if TYPE_CHECKING:
    from pantryguard.core.config import Config


class EscalationPolicy:
    """
    Threshold rules for notify / suspend decisions and suspension tiers.

    Attributes:
        notify_threshold: Weekly count at which admins are notified.
        suspend_threshold: Weekly count at which the user is auto-suspended.
        warning_threshold: Weekly count at which the penalty level is "warning".
        tier_durations: Seconds per tier (None means indefinite).
    """

    def __init__(
        self,
        notify_threshold: int = NOTIFY_THRESHOLD,
        suspend_threshold: int = SUSPEND_THRESHOLD,
        warning_threshold: int = WARNING_THRESHOLD,
        tier_durations: Optional[Dict[int, Optional[int]]] = None,
    ) -> None:
        if notify_threshold > suspend_threshold:
            raise ValueError(
                f"notify_threshold ({notify_threshold}) must not exceed "
                f"suspend_threshold ({suspend_threshold})"
            )
        self.notify_threshold = notify_threshold
        self.suspend_threshold = suspend_threshold
        self.warning_threshold = warning_threshold
        self.tier_durations: Dict[int, Optional[int]] = dict(
            tier_durations if tier_durations is not None else SUSPENSION_TIER_DURATIONS
        )

    @classmethod
    def from_config(cls, config: "Config") -> "EscalationPolicy":
        durations: Sequence[Optional[int]] = config.suspension_tier_durations
        return cls(
            notify_threshold=config.notify_threshold,
            suspend_threshold=config.suspend_threshold,
            warning_threshold=config.warning_threshold,
            tier_durations={tier: durations[tier - 1] for tier in (1, 2, 3)},
        )

    # =========================================================================
    # Decisions
    # =========================================================================

    def decide(self, stats: WeeklyStats) -> EscalationDecision:
        """Actions for a stats snapshot, based on this week's count only."""
        return self.decide_count(stats.this_week_violations)

    def decide_count(self, this_week_violations: int) -> EscalationDecision:
        return EscalationDecision(
            notify=this_week_violations >= self.notify_threshold,
            suspend=this_week_violations >= self.suspend_threshold,
        )

    def penalty_level(self, this_week_violations: int) -> str:
        """Label for the user's standing this week."""
        if this_week_violations >= self.suspend_threshold:
            return PENALTY_SUSPENDED
        if this_week_violations >= self.notify_threshold:
            return PENALTY_RESTRICTED
        if this_week_violations >= self.warning_threshold:
            return PENALTY_WARNING
        return PENALTY_NONE

    # =========================================================================
    # Suspension Tiers
    # =========================================================================

    def suspension_tier(self, this_week_violations: int) -> int:
        """Tier 1..3 by weekly count, 0 below the lowest boundary."""
        for minimum, tier in SUSPENSION_TIER_BOUNDARIES:
            if this_week_violations >= minimum:
                return tier
        return 0

    def suspension_duration(self, tier: int) -> Optional[int]:
        """Suspension length in seconds; tier 0 uses the tier 1 length."""
        return self.tier_durations.get(tier, self.tier_durations.get(1))

    @staticmethod
    def can_appeal(tier: int) -> bool:
        return tier < NON_APPEALABLE_TIER


__all__ = ["EscalationPolicy"]

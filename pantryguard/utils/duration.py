"""
PantryGuard - Duration Utilities
================================

Parsing and formatting of compact duration strings ("1h", "1d12h", "30d").
Used for configurable suspension lengths and for human-readable reasons
and log lines.

Usage:
    from pantryguard.utils.duration import parse_duration, format_duration

    seconds = parse_duration("1d12h")  # 129600
    display = format_duration(129600)  # "1d 12h"
    parse_duration("permanent")        # None
"""

import re
from typing import Optional


# =============================================================================
# Time Constants
# =============================================================================

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400
SECONDS_PER_WEEK = 604800

PERMANENT_KEYWORDS = frozenset({"permanent", "perm", "forever", "indefinite"})

_UNIT_SECONDS = (
    ("w", SECONDS_PER_WEEK),
    ("d", SECONDS_PER_DAY),
    ("h", SECONDS_PER_HOUR),
    ("m", SECONDS_PER_MINUTE),
    ("s", 1),
)

_COMPOUND_PATTERN = re.compile(r"(?:(\d+)w)?(?:(\d+)d)?(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?")


# =============================================================================
# Parsing
# =============================================================================

def is_permanent(duration_str: Optional[str]) -> bool:
    """Check whether a duration string means "no expiry"."""
    return bool(duration_str) and duration_str.lower().strip() in PERMANENT_KEYWORDS


def parse_duration(duration_str: Optional[str]) -> Optional[int]:
    """
    Parse a duration string into seconds.

    Supports single units ("30m", "1h", "1d", "2w"), combined units
    ("1d12h30m") and a bare number, which is read as minutes.

    Args:
        duration_str: Duration string to parse.

    Returns:
        Duration in seconds, or None for permanent/invalid input.
        Use is_permanent() to tell the two apart.
    """
    if not duration_str:
        return None

    normalized = duration_str.lower().replace(" ", "")
    if normalized in PERMANENT_KEYWORDS:
        return None

    if normalized.isdigit():
        value = int(normalized) * SECONDS_PER_MINUTE
        return value if value > 0 else None

    match = _COMPOUND_PATTERN.fullmatch(normalized)
    if not match or not any(match.groups()):
        return None

    total = sum(
        int(group or 0) * unit_seconds
        for group, (_, unit_seconds) in zip(match.groups(), _UNIT_SECONDS)
    )
    return total if total > 0 else None


# =============================================================================
# Formatting
# =============================================================================

def format_duration(seconds: Optional[int], max_units: int = 2) -> str:
    """
    Format seconds into a human-readable duration string.

    Args:
        seconds: Duration in seconds, or None for permanent.
        max_units: Maximum number of time units to show.

    Returns:
        Formatted string like "1d 12h" or "Permanent".
    """
    if seconds is None:
        return "Permanent"
    if seconds <= 0:
        return "0m"
    if seconds < SECONDS_PER_MINUTE:
        return "< 1m"

    parts = []
    remaining = int(seconds)
    for unit, unit_seconds in _UNIT_SECONDS[:-1]:
        if remaining >= unit_seconds and len(parts) < max_units:
            amount, remaining = divmod(remaining, unit_seconds)
            parts.append(f"{amount}{unit}")

    return " ".join(parts)


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "SECONDS_PER_MINUTE",
    "SECONDS_PER_HOUR",
    "SECONDS_PER_DAY",
    "SECONDS_PER_WEEK",
    "PERMANENT_KEYWORDS",
    "is_permanent",
    "parse_duration",
    "format_duration",
]

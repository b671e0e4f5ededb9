"""
PantryGuard - Time Utilities
============================

UTC timestamp helpers and the ISO-week bucketing used for weekly
violation thresholds.

DESIGN:
    All stored timestamps are ISO-8601 strings in UTC, so lexical order
    equals chronological order and range queries stay simple.
    Week keys use the ISO calendar ("YYYY-WW"), which means the last days
    of December can belong to week 01 of the following ISO year.
"""

from datetime import datetime, timezone
from typing import Any, Mapping, Optional


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    """Render a datetime as a UTC ISO-8601 string."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat()


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp, returning None when it cannot be read.

    Naive timestamps are assumed to be UTC. A trailing "Z" is accepted.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def week_key_for(moment: datetime) -> str:
    """
    Bucket a moment into its ISO week.

    Returns:
        Week key such as "2026-42".
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    iso_year, iso_week, _ = moment.astimezone(timezone.utc).isocalendar()
    return f"{iso_year}-{iso_week:02d}"


def current_week_key(now: Optional[datetime] = None) -> str:
    """Week key for now (or for the given moment)."""
    return week_key_for(now or utc_now())


def record_week_key(record: Mapping[str, Any]) -> Optional[str]:
    """
    Week a stored record belongs to.

    Returns:
        The stored week_key, else the ISO week of created_at or
        timestamp, else None when neither can be read.
    """
    week_key = record.get("week_key")
    if isinstance(week_key, str) and week_key:
        return week_key
    moment = parse_iso(record.get("created_at")) or parse_iso(record.get("timestamp"))
    if moment is None:
        return None
    return week_key_for(moment)


__all__ = [
    "utc_now",
    "to_iso",
    "parse_iso",
    "week_key_for",
    "current_week_key",
    "record_week_key",
]

"""
PantryGuard - Configuration Module
==================================

Centralized configuration management with environment variable validation.

DESIGN:
    This module provides a single source of truth for engine configuration,
    loaded from environment variables (and a local .env file) at first use.

    Key patterns:
    - Singleton pattern via get_config() ensures one Config instance
    - Validation happens once at load time, not on every access
    - Escalation thresholds live here so the policy can be tested with
      injected values instead of module constants
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from pantryguard.utils.duration import format_duration, is_permanent, parse_duration


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_DB_PATH = Path("data") / "pantryguard.db"
DEFAULT_TIER_DURATIONS = "1h,1d,30d"


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class Config:
    """
    Engine configuration loaded from environment variables.

    DESIGN:
        Every field is optional with production defaults, so the engine can
        be embedded in a request handler without any environment setup.

    Attributes:
        db_path: SQLite database file.
        notify_threshold: Weekly violations that trigger an admin notification.
        suspend_threshold: Weekly violations that trigger an auto-suspension.
        warning_threshold: Weekly violations that mark the user as "warning".
        violation_retention_days: Days a violation is kept before purge.
        suspension_tier_durations: Seconds per tier 1..3 (None = indefinite).
    """

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    db_path: Path = DEFAULT_DB_PATH

    # -------------------------------------------------------------------------
    # Escalation Thresholds
    # -------------------------------------------------------------------------

    notify_threshold: int = 5
    suspend_threshold: int = 10
    warning_threshold: int = 3

    # -------------------------------------------------------------------------
    # Retention & Suspensions
    # -------------------------------------------------------------------------

    violation_retention_days: int = 30
    suspension_tier_durations: List[Optional[int]] = field(
        default_factory=lambda: [3600, 86400, 30 * 86400]
    )

    # -------------------------------------------------------------------------
    # Admin Dashboard
    # -------------------------------------------------------------------------

    pending_notification_limit: int = 50

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------

    timezone: str = "UTC"
    error_webhook_url: Optional[str] = None


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """
    Raised when configuration is invalid.

    DESIGN:
        Custom exception type allows callers to distinguish config
        errors from storage or runtime failures.
    """

    pass


def _parse_int_with_default(
    value: Optional[str],
    default: int,
    name: str,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
) -> int:
    """
    Parse optional integer with default and range validation.

    Args:
        value: String value from environment variable.
        default: Default value if not set or invalid.
        name: Variable name for warning messages.
        min_val: Minimum allowed value (inclusive).
        max_val: Maximum allowed value (inclusive).

    Returns:
        Parsed integer clamped into range, or default.
    """
    from pantryguard.core.logger import logger

    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Config {name}='{value}' invalid, using default {default}")
        return default
    if min_val is not None and parsed < min_val:
        logger.warning(f"Config {name}={parsed} below min {min_val}, using {min_val}")
        return min_val
    if max_val is not None and parsed > max_val:
        logger.warning(f"Config {name}={parsed} above max {max_val}, using {max_val}")
        return max_val
    return parsed


def _parse_tier_durations(value: Optional[str]) -> List[Optional[int]]:
    """
    Parse comma-separated suspension durations for tiers 1..3.

    Raises:
        ConfigValidationError: If there are not exactly three valid entries.
    """
    parts = [p.strip() for p in (value or DEFAULT_TIER_DURATIONS).split(",") if p.strip()]
    if len(parts) != 3:
        raise ConfigValidationError(
            f"SUSPENSION_TIER_DURATIONS needs 3 entries, got {len(parts)}: {value}"
        )

    durations: List[Optional[int]] = []
    for part in parts:
        if is_permanent(part):
            durations.append(None)
            continue
        seconds = parse_duration(part)
        if seconds is None:
            raise ConfigValidationError(f"Invalid suspension duration: {part}")
        durations.append(seconds)
    return durations


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """Return the URL if it looks like http(s), otherwise None with a warning."""
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        from pantryguard.core.logger import logger
        logger.warning(f"Config {name} invalid URL format, ignoring")
        return None
    return value


def _validate_timezone(value: Optional[str], name: str) -> str:
    """Return the IANA timezone name if it resolves, otherwise UTC with a warning."""
    if not value:
        return "UTC"
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        from pantryguard.core.logger import logger
        logger.warning(f"Config {name}='{value}' unknown timezone, using UTC")
        return "UTC"
    return value


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    Returns:
        Validated Config object.

    Raises:
        ConfigValidationError: If thresholds or durations are inconsistent.
    """
    load_dotenv()

    notify_threshold = _parse_int_with_default(
        os.getenv("NOTIFY_THRESHOLD"), 5, "NOTIFY_THRESHOLD", min_val=1, max_val=1000
    )
    suspend_threshold = _parse_int_with_default(
        os.getenv("SUSPEND_THRESHOLD"), 10, "SUSPEND_THRESHOLD", min_val=1, max_val=1000
    )
    if notify_threshold > suspend_threshold:
        raise ConfigValidationError(
            f"NOTIFY_THRESHOLD ({notify_threshold}) must not exceed "
            f"SUSPEND_THRESHOLD ({suspend_threshold})"
        )

    db_path = os.getenv("PANTRYGUARD_DB_PATH")

    return Config(
        db_path=Path(db_path) if db_path else DEFAULT_DB_PATH,
        notify_threshold=notify_threshold,
        suspend_threshold=suspend_threshold,
        warning_threshold=_parse_int_with_default(
            os.getenv("WARNING_THRESHOLD"), 3, "WARNING_THRESHOLD", min_val=1, max_val=1000
        ),
        violation_retention_days=_parse_int_with_default(
            os.getenv("VIOLATION_RETENTION_DAYS"), 30, "VIOLATION_RETENTION_DAYS", min_val=1, max_val=3650
        ),
        suspension_tier_durations=_parse_tier_durations(os.getenv("SUSPENSION_TIER_DURATIONS")),
        pending_notification_limit=_parse_int_with_default(
            os.getenv("PENDING_NOTIFICATION_LIMIT"), 50, "PENDING_NOTIFICATION_LIMIT", min_val=1, max_val=500
        ),
        timezone=_validate_timezone(os.getenv("PANTRYGUARD_TIMEZONE"), "PANTRYGUARD_TIMEZONE"),
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
    )


# =============================================================================
# Global Config Instance
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance, loading if needed.

    Raises:
        ConfigValidationError: On first call if config is invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() reloads it."""
    global _config
    _config = None


def validate_and_log_config() -> Config:
    """
    Validate configuration and log a summary at startup.

    Also points the logger's webhook at ERROR_WEBHOOK_URL when set.
    """
    from pantryguard.core.logger import logger

    config = get_config()
    logger.set_webhook(config.error_webhook_url)
    logger.set_timezone(config.timezone)

    logger.tree("Configuration Validated", [
        ("Database", str(config.db_path)),
        ("Notify Threshold", str(config.notify_threshold)),
        ("Suspend Threshold", str(config.suspend_threshold)),
        ("Tier Durations", ", ".join(format_duration(d) for d in config.suspension_tier_durations)),
        ("Retention", f"{config.violation_retention_days}d"),
        ("Timezone", config.timezone),
        ("Error Webhook", "Enabled" if config.error_webhook_url else "Disabled"),
    ], emoji="⚙️")
    return config


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "Config",
    "ConfigValidationError",
    "get_config",
    "load_config",
    "reset_config",
    "validate_and_log_config",
]

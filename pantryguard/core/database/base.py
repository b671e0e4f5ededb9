"""
PantryGuard - Database Base Module
==================================

JSON helpers for the document-shaped columns (profiles, settings,
evidence, stats snapshots).
"""

import json
from typing import Any, Optional

from pantryguard.core.logger import logger


# =============================================================================
# Helper Functions
# =============================================================================

def _safe_json_loads(value: Optional[str], default: Any = None) -> Any:
    """
    Safely parse JSON, returning default on error.

    DESIGN:
        Historical rows can be corrupt; a bad document must never break an
        aggregation, so the error is logged and the default returned.
    """
    if value is None or value == "":
        return default
    try:
        return json.loads(value)
    except (json.JSONDecodeError, TypeError, ValueError):
        preview = value[:50] if isinstance(value, str) else repr(value)[:50]
        logger.warning(f"Corrupted JSON in database: {preview}")
        return default


def _json_dumps(value: Any) -> Optional[str]:
    """Serialize a value for a JSON column; None stays NULL."""
    if value is None:
        return None
    return json.dumps(value, default=str)


__all__ = ["_safe_json_loads", "_json_dumps"]

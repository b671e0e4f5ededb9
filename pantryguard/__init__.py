"""
PantryGuard - Package
=====================

Abuse-tracking and privacy-access-control engine for a recipe-sharing
app. It decides from reported violations when to notify moderators and
when to auto-suspend a user, and what part of a profile each viewer may
see.

Package Structure:
- guard.py: PantryGuard facade called by request handlers
- core/: Configuration, logging and sqlite persistence
- services/abuse/: Violation log, weekly stats, escalation, suspensions
- services/privacy/: Viewer context and field visibility
- utils/: Duration, time and metrics helpers
"""

from pantryguard.core import get_config, logger
from pantryguard.guard import PantryGuard

__version__ = "1.0.0"

__all__ = [
    "PantryGuard",
    "get_config",
    "logger",
    "__version__",
]

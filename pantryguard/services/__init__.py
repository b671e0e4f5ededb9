"""
PantryGuard - Services Package
==============================

The two engine services built on the core layer.

DESIGN:
    Services take a PersistenceGateway in their constructor instead of
    reaching for get_db(), so tests can hand them a fake store.

Available Services:
    AbuseTrackingService: Violation recording, weekly stats, escalation
    PrivacyService: Viewer-aware profile reads and privacy settings
"""

# =============================================================================
# Service Imports
# =============================================================================

from .abuse import AbuseTrackingService
from .privacy import PrivacyService


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "AbuseTrackingService",
    "PrivacyService",
]

"""
PantryGuard - Privacy Package
=============================

Viewer context resolution and field-level profile disclosure.
"""

from .service import PrivacyService
from .context import PrivacyContextResolver
from .filters import FieldVisibilityFilter
from .models import PrivacyContext, PrivacySettings
from .constants import (
    PRIVACY_FRIENDS,
    PRIVACY_LEVELS,
    PRIVACY_PRIVATE,
    PRIVACY_PUBLIC,
)

__all__ = [
    "PrivacyService",
    "PrivacyContextResolver",
    "FieldVisibilityFilter",
    "PrivacyContext",
    "PrivacySettings",
    "PRIVACY_FRIENDS",
    "PRIVACY_LEVELS",
    "PRIVACY_PRIVATE",
    "PRIVACY_PUBLIC",
]

"""
PantryGuard - Privacy Constants
===============================

Privacy levels, field groups and default settings.
"""

# =============================================================================
# Privacy Levels
# =============================================================================

PRIVACY_PUBLIC = "public"
PRIVACY_FRIENDS = "friends"
PRIVACY_PRIVATE = "private"
PRIVACY_LEVELS = (PRIVACY_PUBLIC, PRIVACY_FRIENDS, PRIVACY_PRIVATE)

FRIENDSHIP_ACCEPTED = "accepted"

# =============================================================================
# Field Groups
# =============================================================================

# Always disclosed so a reference to the user can render
IDENTITY_FIELDS = ("user_id", "username")

# Moderation status, disclosed to every viewer when present
SUSPENSION_FIELDS = (
    "is_suspended",
    "suspended_at",
    "suspended_until",
    "suspension_reason",
    "suspended_by",
)

PROFILE_VISIBILITY = "profile_visibility"
EMAIL_VISIBILITY = "email_visibility"
DATE_OF_BIRTH_VISIBILITY = "date_of_birth_visibility"

# Fields with their own setting; every other field falls under profile_visibility
FIELD_SETTINGS = {
    "email": EMAIL_VISIBILITY,
    "date_of_birth": DATE_OF_BIRTH_VISIBILITY,
}

VISIBILITY_SUFFIX = "_visibility"

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_PRIVACY_SETTINGS = {
    PROFILE_VISIBILITY: PRIVACY_PUBLIC,
    EMAIL_VISIBILITY: PRIVACY_PRIVATE,
    DATE_OF_BIRTH_VISIBILITY: PRIVACY_PRIVATE,
}

# Returned when settings cannot be read
RESTRICTIVE_PRIVACY_SETTINGS = {
    PROFILE_VISIBILITY: PRIVACY_PRIVATE,
    EMAIL_VISIBILITY: PRIVACY_PRIVATE,
    DATE_OF_BIRTH_VISIBILITY: PRIVACY_PRIVATE,
}


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "PRIVACY_PUBLIC",
    "PRIVACY_FRIENDS",
    "PRIVACY_PRIVATE",
    "PRIVACY_LEVELS",
    "FRIENDSHIP_ACCEPTED",
    "IDENTITY_FIELDS",
    "SUSPENSION_FIELDS",
    "PROFILE_VISIBILITY",
    "EMAIL_VISIBILITY",
    "DATE_OF_BIRTH_VISIBILITY",
    "FIELD_SETTINGS",
    "VISIBILITY_SUFFIX",
    "DEFAULT_PRIVACY_SETTINGS",
    "RESTRICTIVE_PRIVACY_SETTINGS",
]

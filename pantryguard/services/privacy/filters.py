"""
PantryGuard - Field Visibility Filter
=====================================

Applies per-field disclosure rules to a profile for one viewer.

DESIGN:
    Rules, in order:
    - The owner sees the profile object unchanged.
    - user_id and username are always disclosed.
    - Suspension fields are always disclosed when present; moderation
      status overrides every visibility setting.
    - email and date_of_birth follow their own settings; every other
      field follows profile_visibility.
    - public: everyone. friends: accepted friends. private or any
      unknown value: nobody but the owner.
"""

from typing import Any, Dict, Mapping, Optional

from .constants import (
    FIELD_SETTINGS,
    IDENTITY_FIELDS,
    PRIVACY_FRIENDS,
    PRIVACY_PUBLIC,
    PROFILE_VISIBILITY,
    SUSPENSION_FIELDS,
    VISIBILITY_SUFFIX,
)
from .models import PrivacyContext, PrivacySettings


class FieldVisibilityFilter:
    """Stateless visibility rules."""

    @staticmethod
    def has_access(level: Optional[str], context: PrivacyContext) -> bool:
        """Whether a viewer in this context may see data at this privacy level."""
        if context.is_self:
            return True
        if level == PRIVACY_PUBLIC:
            return True
        if level == PRIVACY_FRIENDS:
            return context.is_friend
        return False

    @staticmethod
    def setting_for_field(field_name: str) -> Optional[str]:
        """
        Setting that governs a profile field.

        Returns None for identity and suspension fields, which are not
        governed by any setting.
        """
        if field_name in IDENTITY_FIELDS or field_name in SUSPENSION_FIELDS:
            return None
        return FIELD_SETTINGS.get(field_name, PROFILE_VISIBILITY)

    def filter_profile(
        self,
        profile: Dict[str, Any],
        settings: PrivacySettings,
        context: PrivacyContext,
    ) -> Dict[str, Any]:
        """Portion of profile the viewer may see."""
        if context.is_self:
            return profile

        filtered: Dict[str, Any] = {}
        for field_name in IDENTITY_FIELDS:
            if field_name in profile:
                filtered[field_name] = profile[field_name]

        for field_name, value in profile.items():
            setting = self.setting_for_field(field_name)
            if setting is None:
                continue
            if self.has_access(settings.level_for(setting), context):
                filtered[field_name] = value

        filtered["is_suspended"] = profile.get("is_suspended", False)
        for field_name in SUSPENSION_FIELDS:
            if field_name in profile:
                filtered[field_name] = profile[field_name]

        return filtered

    def filter_preferences(
        self,
        preferences: Mapping[str, Any],
        context: PrivacyContext,
    ) -> Mapping[str, Any]:
        """
        Preferences visible to the viewer.

        No per-preference policy exists yet; every viewer gets the
        preferences unchanged.
        """
        return preferences

    def can_access_field(
        self,
        field_name: str,
        settings: PrivacySettings,
        context: PrivacyContext,
    ) -> bool:
        """
        Single-field check.

        Accepts a setting name ("email_visibility") or a profile field
        name ("email").
        """
        if context.is_self:
            return True
        if field_name.endswith(VISIBILITY_SUFFIX):
            setting: Optional[str] = field_name
        else:
            setting = self.setting_for_field(field_name)
            if setting is None:
                return True
        return self.has_access(settings.level_for(setting), context)


__all__ = ["FieldVisibilityFilter"]

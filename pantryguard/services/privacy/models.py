"""
PantryGuard - Privacy Data Models
=================================

Per-request privacy context and per-user visibility settings.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .constants import (
    DATE_OF_BIRTH_VISIBILITY,
    DEFAULT_PRIVACY_SETTINGS,
    EMAIL_VISIBILITY,
    PRIVACY_PRIVATE,
    PROFILE_VISIBILITY,
    RESTRICTIVE_PRIVACY_SETTINGS,
    VISIBILITY_SUFFIX,
)


@dataclass(frozen=True)
class PrivacyContext:
    """Resolved relationship between a viewer and a profile owner. Never stored."""
    viewer_id: str
    target_user_id: str
    is_self: bool = False
    is_friend: bool = False


@dataclass
class PrivacySettings:
    """
    A user's declared visibility per field group.

    Values are kept as read from storage; an unknown value is not
    rejected here and is treated as private when access is checked.
    Additional ``*_visibility`` keys are kept in ``extra``.
    """
    profile_visibility: str = DEFAULT_PRIVACY_SETTINGS[PROFILE_VISIBILITY]
    email_visibility: str = DEFAULT_PRIVACY_SETTINGS[EMAIL_VISIBILITY]
    date_of_birth_visibility: str = DEFAULT_PRIVACY_SETTINGS[DATE_OF_BIRTH_VISIBILITY]
    extra: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "PrivacySettings":
        """Stored settings over the defaults; non-visibility keys are ignored."""
        merged: Dict[str, Any] = dict(DEFAULT_PRIVACY_SETTINGS)
        extra: Dict[str, str] = {}
        for key, value in (data or {}).items():
            if not key.endswith(VISIBILITY_SUFFIX):
                continue
            if key in merged:
                merged[key] = value
            else:
                extra[key] = value
        return cls(
            profile_visibility=merged[PROFILE_VISIBILITY],
            email_visibility=merged[EMAIL_VISIBILITY],
            date_of_birth_visibility=merged[DATE_OF_BIRTH_VISIBILITY],
            extra=extra,
        )

    @classmethod
    def restrictive(cls) -> "PrivacySettings":
        """Everything private."""
        return cls(**RESTRICTIVE_PRIVACY_SETTINGS)

    def level_for(self, setting: str) -> str:
        """Level for a setting name such as "email_visibility"; unknown names are private."""
        if setting == PROFILE_VISIBILITY:
            return self.profile_visibility
        if setting == EMAIL_VISIBILITY:
            return self.email_visibility
        if setting == DATE_OF_BIRTH_VISIBILITY:
            return self.date_of_birth_visibility
        return self.extra.get(setting, PRIVACY_PRIVATE)

    def to_dict(self) -> Dict[str, str]:
        data = dict(self.extra)
        data[PROFILE_VISIBILITY] = self.profile_visibility
        data[EMAIL_VISIBILITY] = self.email_visibility
        data[DATE_OF_BIRTH_VISIBILITY] = self.date_of_birth_visibility
        return data


__all__ = ["PrivacyContext", "PrivacySettings"]

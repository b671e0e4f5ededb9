"""
PantryGuard - Privacy Service
=============================

Per-viewer profile reads and privacy settings management.

DESIGN:
    Reading a target's settings fails closed: a storage error yields
    all-private settings instead of an exception, so a broken settings
    read can only hide data, never leak it. Profile reads themselves
    are not caught; a failing profile read propagates to the caller.
"""

from typing import Any, Dict, Mapping, Optional

from pantryguard.core.database.gateway import PersistenceGateway
from pantryguard.core.logger import logger

from .constants import PRIVACY_LEVELS, VISIBILITY_SUFFIX
from .context import PrivacyContextResolver
from .filters import FieldVisibilityFilter
from .models import PrivacyContext, PrivacySettings


class PrivacyService:
    """
    Entry point for privacy-aware reads.

    Attributes:
        resolver: Self / friend / stranger resolution.
        visibility: Field-level disclosure rules.
    """

    def __init__(
        self,
        db: PersistenceGateway,
        resolver: Optional[PrivacyContextResolver] = None,
        visibility: Optional[FieldVisibilityFilter] = None,
    ) -> None:
        self.db = db
        self.resolver = resolver or PrivacyContextResolver(db)
        self.visibility = visibility or FieldVisibilityFilter()

    # =========================================================================
    # Settings
    # =========================================================================

    async def get_privacy_settings(self, user_id: str) -> PrivacySettings:
        """Stored settings over the defaults; all-private if the read fails."""
        try:
            stored = await self.db.get_privacy_settings(user_id)
        except Exception as e:
            logger.warning("Privacy Settings Read Failed", [
                ("User", user_id),
                ("Error", str(e)[:100]),
                ("Fallback", "All private"),
            ])
            return PrivacySettings.restrictive()
        return PrivacySettings.from_dict(stored)

    async def update_privacy_settings(self, user_id: str, **levels: str) -> PrivacySettings:
        """
        Change one or more ``<field>_visibility`` settings.

        Raises:
            ValueError: For a key that is not a visibility setting or a
                level outside public / friends / private.
        """
        for key, level in levels.items():
            if not key.endswith(VISIBILITY_SUFFIX):
                raise ValueError(f"'{key}' is not a visibility setting")
            if level not in PRIVACY_LEVELS:
                raise ValueError(
                    f"Invalid privacy level '{level}' for {key}, expected one of {', '.join(PRIVACY_LEVELS)}"
                )

        stored = await self.db.put_privacy_settings(user_id, dict(levels))
        logger.info("Privacy Settings Updated", [
            ("User", user_id),
            ("Changed", ", ".join(f"{k}={v}" for k, v in sorted(levels.items()))),
        ])
        return PrivacySettings.from_dict(stored)

    # =========================================================================
    # Filtered Reads
    # =========================================================================

    async def resolve_context(self, viewer_id: str, target_user_id: str) -> PrivacyContext:
        return await self.resolver.resolve(viewer_id, target_user_id)

    async def get_filtered_profile(
        self,
        viewer_id: str,
        target_user_id: str,
    ) -> Optional[Dict[str, Any]]:
        """
        The target's profile as this viewer may see it.

        Returns:
            Filtered profile, the unmodified profile for the owner, or
            None when the target has no profile.
        """
        profile = await self.db.get_user_profile(target_user_id)
        if profile is None:
            return None

        context = await self.resolver.resolve(viewer_id, target_user_id)
        if context.is_self:
            return profile

        settings = await self.get_privacy_settings(target_user_id)
        return self.visibility.filter_profile(profile, settings, context)

    async def get_filtered_preferences(
        self,
        viewer_id: str,
        target_user_id: str,
    ) -> Optional[Mapping[str, Any]]:
        """Target's preferences for this viewer; None when there is no profile."""
        profile = await self.db.get_user_profile(target_user_id)
        if profile is None:
            return None

        context = await self.resolver.resolve(viewer_id, target_user_id)
        return self.visibility.filter_preferences(profile.get("preferences") or {}, context)

    async def can_access_field(self, viewer_id: str, target_user_id: str, field_name: str) -> bool:
        """Whether the viewer may see one field of the target's profile."""
        context = await self.resolver.resolve(viewer_id, target_user_id)
        if context.is_self:
            return True

        settings = await self.get_privacy_settings(target_user_id)
        return self.visibility.can_access_field(field_name, settings, context)


__all__ = ["PrivacyService"]

"""
PantryGuard - Privacy Context Resolver
======================================

Decides whether a viewer is the profile owner, a friend, or a stranger.

DESIGN:
    A friendship can be recorded from either side, so both directions
    are checked. Only an "accepted" row counts; pending requests do not.
    Lookup failures resolve to "not friends" and are logged, never raised.
"""

from pantryguard.core.database.gateway import PersistenceGateway
from pantryguard.core.logger import logger
from pantryguard.utils.metrics import metrics

from .constants import FRIENDSHIP_ACCEPTED
from .models import PrivacyContext


class PrivacyContextResolver:
    """Builds PrivacyContext for (viewer, target) pairs."""

    def __init__(self, db: PersistenceGateway) -> None:
        self.db = db

    async def resolve(self, viewer_id: str, target_user_id: str) -> PrivacyContext:
        """Context for a viewer looking at a target; self-views skip the friendship lookup."""
        if viewer_id == target_user_id:
            return PrivacyContext(
                viewer_id=viewer_id,
                target_user_id=target_user_id,
                is_self=True,
                is_friend=False,
            )

        return PrivacyContext(
            viewer_id=viewer_id,
            target_user_id=target_user_id,
            is_self=False,
            is_friend=await self.check_friendship(viewer_id, target_user_id),
        )

    async def check_friendship(self, user_id: str, other_user_id: str) -> bool:
        """
        True when either direction holds an accepted friendship.

        Returns False for the same user and on any lookup error.
        """
        if user_id == other_user_id:
            return False

        try:
            forward = await self.db.get_friendship(user_id, other_user_id)
            if forward and forward.get("status") == FRIENDSHIP_ACCEPTED:
                return True

            reverse = await self.db.get_friendship(other_user_id, user_id)
            return bool(reverse and reverse.get("status") == FRIENDSHIP_ACCEPTED)

        except Exception as e:
            metrics.increment("privacy.friendship_lookup_failed")
            logger.warning("Friendship Lookup Failed", [
                ("User", user_id),
                ("Other", other_user_id),
                ("Error", str(e)[:100]),
            ])
            return False


__all__ = ["PrivacyContextResolver"]

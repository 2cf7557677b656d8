"""CRUD operations for Follow."""

import logging

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from app.core.exceptions import SelfFollowDeniedException
from app.crud.base import CRUDToggle, ToggleState
from app.models.follow import Follow

logger = logging.getLogger(__name__)


class CRUDFollow(CRUDToggle[Follow]):
    """CRUD operations for Follow."""

    def toggle(self, db: Session, *, follower_id: int, following_id: int) -> ToggleState:
        """Follow the target user, or unfollow if already following.

        Raises:
            SelfFollowDeniedException: If follower and target are the same user
        """
        if follower_id == following_id:
            raise SelfFollowDeniedException()

        state = self.toggle_pair(db, follower_id=follower_id, following_id=following_id)
        logger.info(f"Follow {state.value}: follower={follower_id} following={following_id}")
        return state

    def is_following(self, db: Session, *, follower_id: int, following_id: int) -> bool:
        return self.get_pair(db, follower_id=follower_id, following_id=following_id) is not None

    def count_followers(self, db: Session, *, user_id: int) -> int:
        stmt = select(func.count(Follow.id)).where(Follow.following_id == user_id)
        return db.scalar(stmt) or 0

    def count_following(self, db: Session, *, user_id: int) -> int:
        stmt = select(func.count(Follow.id)).where(Follow.follower_id == user_id)
        return db.scalar(stmt) or 0


# Singleton instance
crud_follow = CRUDFollow(Follow)

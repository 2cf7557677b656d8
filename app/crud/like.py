"""CRUD operations for Like."""

import logging
from typing import Iterable, Set

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from app.crud.base import CRUDToggle, ToggleState
from app.models.like import Like

logger = logging.getLogger(__name__)


class CRUDLike(CRUDToggle[Like]):
    """CRUD operations for Like."""

    def toggle(self, db: Session, *, user_id: int, post_id: int) -> ToggleState:
        """Like the post if the user has not liked it yet, otherwise unlike it.

        Liking one's own post is allowed.
        """
        state = self.toggle_pair(db, user_id=user_id, post_id=post_id)
        logger.info(f"Like {state.value}: user={user_id} post={post_id}")
        return state

    def count_for_post(self, db: Session, *, post_id: int) -> int:
        stmt = select(func.count(Like.id)).where(Like.post_id == post_id)
        return db.scalar(stmt) or 0

    def liked_post_ids(self, db: Session, *, user_id: int, post_ids: Iterable[int]) -> Set[int]:
        """Return the subset of ``post_ids`` the user has liked."""
        post_ids = list(post_ids)
        if not post_ids:
            return set()
        stmt = select(Like.post_id).where(
            Like.user_id == user_id,
            Like.post_id.in_(post_ids),
        )
        return set(db.scalars(stmt).all())


# Singleton instance
crud_like = CRUDLike(Like)

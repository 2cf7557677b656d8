"""CRUD operations for Post."""

from typing import Iterable, List, Optional, Tuple

from sqlalchemy import select, func, desc, or_
from sqlalchemy.orm import Session, selectinload

from app.crud.base import CRUDBase
from app.models.like import Like
from app.models.post import Post
from app.models.user import User
from app.schemas.post import PostCreate


def _like_count_subquery():
    return (
        select(func.count(Like.id))
        .where(Like.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )


class CRUDPost(CRUDBase[Post, PostCreate, PostCreate]):
    """CRUD operations for Post."""

    def create_post(
        self,
        db: Session,
        *,
        user_id: int,
        post_in: PostCreate,
    ) -> Post:
        """Create a new post owned by ``user_id``."""
        post = Post(user_id=user_id, **post_in.model_dump())
        try:
            db.add(post)
            db.commit()
            db.refresh(post)
        except Exception:
            db.rollback()
            raise
        return post

    def get_all_with_like_counts(
        self,
        db: Session,
        *,
        user_id: Optional[int] = None,
        place_id: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Tuple[Post, int]]:
        """Get posts newest first, each paired with its like count.

        Args:
            user_id: Only posts owned by this user
            place_id: Only posts tagged with this place
        """
        stmt = (
            select(Post, _like_count_subquery().label("like_count"))
            .options(selectinload(Post.user))
            .order_by(desc(Post.created_at), desc(Post.id))
        )
        if user_id is not None:
            stmt = stmt.where(Post.user_id == user_id)
        if place_id is not None:
            stmt = stmt.where(Post.place_id == place_id)
        if skip:
            stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        return [(post, like_count) for post, like_count in db.execute(stmt).all()]

    def image_in_use(self, db: Session, *, image_urls: Iterable[str]) -> bool:
        """True if any post image or profile picture still points at one of ``image_urls``."""
        image_urls = list(image_urls)
        post_ref = select(Post.id).where(Post.image_url.in_(image_urls))
        profile_ref = select(User.id).where(User.profile_image.in_(image_urls))
        stmt = select(or_(post_ref.exists(), profile_ref.exists()))
        return bool(db.scalar(stmt))


# Singleton instance
crud_post = CRUDPost(Post)

"""CRUD operations for `User` model."""

from __future__ import annotations

from typing import Any, List, Optional

from sqlalchemy import desc, func, or_, select
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from app.core.security import get_password_hash, verify_password
from app.crud.base import CRUDBase
from app.models.follow import Follow
from app.models.like import Like
from app.models.post import Post
from app.models.user import User
from app.schemas.user import ProfileUpdate, UserCreate


def _count_of(column: Any, owner_column: Any):
    """Correlated ``COUNT(column) WHERE owner_column = users.id`` subquery."""
    return (
        select(func.count(column))
        .where(owner_column == User.id)
        .correlate(User)
        .scalar_subquery()
    )


def _with_counts(*extra_columns: Any):
    """Select users together with their post, follower and following counts."""
    return select(
        User,
        _count_of(Post.id, Post.user_id).label("post_count"),
        _count_of(Follow.id, Follow.following_id).label("follower_count"),
        _count_of(Follow.id, Follow.follower_id).label("following_count"),
        *extra_columns,
    )


class CRUDUser(CRUDBase[User, UserCreate, ProfileUpdate]):
    def get_by_email(self, db: Session, email: Optional[str]) -> Optional[User]:
        if not email:
            return None
        stmt = select(User).where(User.email == email).limit(1)
        return db.scalars(stmt).first()

    def get_by_username(self, db: Session, username: Optional[str]) -> Optional[User]:
        if not username:
            return None
        stmt = select(User).where(User.username == username).limit(1)
        return db.scalars(stmt).first()

    def get_admin(self, db: Session) -> Optional[User]:
        stmt = select(User).where(User.is_admin.is_(True)).limit(1)
        return db.scalars(stmt).first()

    def create_user(self, db: Session, *, user_in: UserCreate, is_admin: bool = False) -> User:
        user_data = user_in.model_dump(exclude_unset=True)
        raw_password = user_data.pop("password")
        user_data["password_hash"] = get_password_hash(raw_password)
        user_data["is_admin"] = is_admin

        db_obj = User(**user_data)
        try:
            db.add(db_obj)
            db.commit()
            db.refresh(db_obj)
        except Exception:
            db.rollback()
            raise
        return db_obj

    def authenticate(self, db: Session, *, email: str, password: str) -> Optional[User]:
        """Return the user if email and password match, else None.

        An unknown email still costs one hash verification.
        """
        user = self.get_by_email(db, email)
        if not user:
            verify_password(password, None)
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    def update_profile(self, db: Session, *, db_obj: User, profile_in: ProfileUpdate) -> User:
        """Apply the fields the client sent. ``name`` and ``username`` cannot be cleared."""
        update_data = profile_in.model_dump(exclude_unset=True)
        for required in ("name", "username"):
            if update_data.get(required) is None:
                update_data.pop(required, None)
        return self.update(db, db_obj=db_obj, obj_in=update_data)

    def get_with_counts(self, db: Session, *, user_id: int) -> Optional[Row]:
        """Get one user as ``(User, post_count, follower_count, following_count)``."""
        stmt = _with_counts().where(User.id == user_id)
        return db.execute(stmt).first()

    def get_by_username_with_counts(self, db: Session, *, username: str) -> Optional[Row]:
        stmt = _with_counts().where(User.username == username)
        return db.execute(stmt).first()

    def list_others(self, db: Session, *, exclude_user_id: int) -> List[Row]:
        """All users except the caller, newest first."""
        stmt = (
            _with_counts()
            .where(User.id != exclude_user_id)
            .order_by(desc(User.created_at), desc(User.id))
        )
        return list(db.execute(stmt).all())

    def search(
        self,
        db: Session,
        *,
        query: str,
        exclude_user_id: int,
        limit: int = 20,
    ) -> List[Row]:
        """Case-insensitive substring match on name or username.

        Excludes the caller, ordered by name ascending, at most ``limit`` rows.
        """
        escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        stmt = (
            _with_counts()
            .where(
                or_(
                    User.name.ilike(pattern, escape="\\"),
                    User.username.ilike(pattern, escape="\\"),
                ),
                User.id != exclude_user_id,
            )
            .order_by(User.name.asc(), User.id.asc())
            .limit(limit)
        )
        return list(db.execute(stmt).all())

    def list_for_admin(self, db: Session) -> List[Row]:
        """All users newest first as ``(User, post_count, ..., like_count)``."""
        stmt = _with_counts(
            _count_of(Like.id, Like.user_id).label("like_count"),
        ).order_by(desc(User.created_at), desc(User.id))
        return list(db.execute(stmt).all())


# Singleton instance
crud_user = CRUDUser(User)

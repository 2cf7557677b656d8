"""User directory and follow endpoints."""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from app.api.deps import get_current_claims, get_db
from app.core.exceptions import NotFoundException
from app.core.security import TokenClaims
from app.crud import ToggleState, crud_follow, crud_user
from app.schemas.post import FollowToggleResponse
from app.schemas.user import UserListItem

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["Users"],
)


def build_user_item(row: Row) -> UserListItem:
    """Build a user card from a ``(User, post_count, follower_count, following_count)`` row."""
    item = UserListItem.model_validate(row.User)
    item.post_count = row.post_count
    item.follower_count = row.follower_count
    item.following_count = row.following_count
    return item


@router.get(
    "",
    response_model=List[UserListItem],
    status_code=status.HTTP_200_OK,
    summary="List other users",
)
def list_users(
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
) -> List[UserListItem]:
    """List every user except the caller, newest first (explore page)."""
    rows = crud_user.list_others(db, exclude_user_id=claims.user_id)
    return [build_user_item(row) for row in rows]


@router.get(
    "/{user_id}",
    response_model=UserListItem,
    status_code=status.HTTP_200_OK,
    summary="Get user by ID",
)
def get_user(
    user_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
) -> UserListItem:
    """
    Get a user's public card by ID.

    Raises:
        NotFoundException: 404 if user not found
    """
    row = crud_user.get_with_counts(db, user_id=user_id)
    if row is None:
        raise NotFoundException(detail="User not found")
    return build_user_item(row)


@router.post(
    "/{user_id}/follow",
    response_model=FollowToggleResponse,
    status_code=status.HTTP_200_OK,
    summary="Follow or unfollow a user",
)
def toggle_follow(
    user_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
) -> FollowToggleResponse:
    """
    Follow the user, or unfollow if the caller already follows them.

    Raises:
        SelfFollowDeniedException: 400 if the caller targets themselves
        NotFoundException: 404 if either account does not exist
    """
    if user_id != claims.user_id:
        if not crud_user.get(db, user_id):
            raise NotFoundException(detail="User not found")
        if not crud_user.get(db, claims.user_id):
            raise NotFoundException(detail="User not found")

    state = crud_follow.toggle(db, follower_id=claims.user_id, following_id=user_id)

    return FollowToggleResponse(
        user_id=user_id,
        state=state.value,
        follower_count=crud_follow.count_followers(db, user_id=user_id),
        message="Now following" if state is ToggleState.ADDED else "Unfollowed",
    )


__all__ = ["router", "build_user_item"]

"""Profile endpoints."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_claims, get_db
from app.api.v1.endpoints.posts import build_post_responses, release_images
from app.core.exceptions import DuplicateFieldException, NotFoundException
from app.core.security import TokenClaims, create_access_token
from app.crud import crud_follow, crud_post, crud_user
from app.schemas.user import (
    AuthResponse,
    ProfileResponse,
    ProfileUpdate,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/profile",
    tags=["Profile"],
)


@router.put(
    "/update",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Update own profile",
)
def update_profile(
    profile_in: ProfileUpdate,
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
) -> AuthResponse:
    """
    Update name, username, bio and profile image of the caller.

    A new token is issued because name and username are token claims.

    Raises:
        DuplicateFieldException: 400 if the username belongs to another user
        NotFoundException: 404 if the caller's account no longer exists
    """
    user = crud_user.get(db, claims.user_id)
    if not user:
        raise NotFoundException(detail="User not found")

    if profile_in.username:
        existing = crud_user.get_by_username(db, profile_in.username)
        if existing and existing.id != user.id:
            raise DuplicateFieldException("username")

    old_profile_image = user.profile_image
    try:
        user = crud_user.update_profile(db, db_obj=user, profile_in=profile_in)
    except IntegrityError:
        raise DuplicateFieldException("username")
    logger.info(f"Profile updated: id={user.id}")

    if old_profile_image and old_profile_image != user.profile_image:
        release_images(db, [old_profile_image])

    token = create_access_token(TokenClaims.from_user(user))
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.get(
    "/{username}",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Get profile by username",
)
def get_profile(
    username: str,
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
) -> ProfileResponse:
    """
    Get a user's profile with their posts (newest first) and follow counts.

    Raises:
        NotFoundException: 404 if no user has this username
    """
    row = crud_user.get_by_username_with_counts(db, username=username)
    if row is None:
        raise NotFoundException(detail="Profile not found")

    user = row.User
    post_rows = crud_post.get_all_with_like_counts(db, user_id=user.id)

    return ProfileResponse(
        id=user.id,
        name=user.name,
        username=user.username,
        profile_image=user.profile_image,
        bio=user.bio,
        created_at=user.created_at,
        post_count=row.post_count,
        follower_count=row.follower_count,
        following_count=row.following_count,
        is_following=crud_follow.is_following(
            db, follower_id=claims.user_id, following_id=user.id
        ),
        posts=build_post_responses(db, post_rows, claims.user_id),
    )


__all__ = ["router"]

"""Admin panel endpoints for user and post moderation."""

import logging
import secrets
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_admin
from app.api.v1.endpoints.posts import build_post_responses, release_images
from app.config import settings
from app.core.exceptions import (
    AdminProtectedException,
    BadRequestException,
    NotFoundException,
)
from app.core.security import TokenClaims
from app.crud import crud_post, crud_user
from app.schemas.common import MessageResponse, SuccessResponse
from app.schemas.post import PostResponse
from app.schemas.user import AdminSetupResponse, AdminUserItem, UserCreate, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
)


@router.get(
    "/users",
    response_model=List[AdminUserItem],
    status_code=status.HTTP_200_OK,
    summary="List all users",
)
def list_users(
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
) -> List[AdminUserItem]:
    """List every account, newest first, with post and like counts."""
    items = []
    for row in crud_user.list_for_admin(db):
        item = AdminUserItem.model_validate(row.User)
        item.post_count = row.post_count
        item.like_count = row.like_count
        items.append(item)
    return items


@router.delete(
    "/users/{user_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete a user",
)
def delete_user(
    user_id: int,
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """
    Hard delete a user together with their posts, likes and follow edges.

    Raises:
        NotFoundException: 404 if user not found
        AdminProtectedException: 403 if the target is an admin
    """
    user = crud_user.get(db, user_id)
    if not user:
        raise NotFoundException(detail="User not found")

    if user.is_admin:
        raise AdminProtectedException()

    post_count = len(user.posts)
    image_urls = [post.image_url for post in user.posts] + [user.profile_image]
    crud_user.delete(db, id=user_id)
    release_images(db, image_urls)

    logger.info(f"Admin {admin.user_id} deleted user {user_id} ({post_count} posts)")
    return MessageResponse(message="User deleted successfully")


@router.get(
    "/posts",
    response_model=List[PostResponse],
    status_code=status.HTTP_200_OK,
    summary="List all posts",
)
def list_posts(
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
) -> List[PostResponse]:
    """List every post, newest first."""
    rows = crud_post.get_all_with_like_counts(db)
    return build_post_responses(db, rows, admin.user_id)


@router.delete(
    "/posts/{post_id}",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete any post",
)
def delete_post(
    post_id: int,
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
) -> SuccessResponse:
    """Delete any post regardless of owner; its likes go with it."""
    post = crud_post.get(db, post_id)
    if not post:
        raise NotFoundException(detail="Post not found")

    image_url = post.image_url
    crud_post.delete(db, id=post_id)
    release_images(db, [image_url])

    logger.info(f"Admin {admin.user_id} deleted post {post_id}")
    return SuccessResponse()


@router.post(
    "/setup",
    response_model=AdminSetupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create the first admin account",
)
def setup_admin(
    db: Session = Depends(get_db),
) -> AdminSetupResponse:
    """
    Bootstrap the admin account from ``ADMIN_*`` settings.

    When ``ADMIN_PASSWORD`` is not configured a random password is generated
    and returned once in the response.

    Raises:
        BadRequestException: 400 if an admin already exists
    """
    if crud_user.get_admin(db) is not None:
        raise BadRequestException(detail="Admin user already exists")

    if crud_user.get_by_email(db, settings.ADMIN_EMAIL) or crud_user.get_by_username(db, settings.ADMIN_USERNAME):
        raise BadRequestException(detail="Admin email or username is already taken")

    generated_password = None
    password = settings.ADMIN_PASSWORD
    if not password:
        generated_password = password = secrets.token_urlsafe(12)
        logger.warning("ADMIN_PASSWORD is not set; generated a one-time admin password")

    # Built with model_construct: the bootstrap account skips the registration format rules
    admin_in = UserCreate.model_construct(
        email=settings.ADMIN_EMAIL,
        password=password,
        name=settings.ADMIN_NAME,
        username=settings.ADMIN_USERNAME,
    )
    admin = crud_user.create_user(db, user_in=admin_in, is_admin=True)
    logger.info(f"Admin account created: id={admin.id}")

    return AdminSetupResponse(
        message="Admin user created successfully",
        admin=UserResponse.model_validate(admin),
        generated_password=generated_password,
    )


__all__ = ["router"]

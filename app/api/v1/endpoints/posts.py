"""Photo post endpoints."""

import logging
from typing import Iterable, List, Optional, Set, Tuple

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_claims, get_db
from app.core.exceptions import ForbiddenException, NotFoundException
from app.core.security import TokenClaims
from app.crud import ToggleState, crud_like, crud_post, crud_user
from app.models.post import Post
from app.schemas.common import SuccessResponse
from app.schemas.post import (
    LikeToggleResponse,
    PostCreate,
    PostResponse,
)
from app.utils.file_handler import delete_local_image, image_url_variants

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/posts",
    tags=["Posts"],
)


def build_post_responses(
    db: Session,
    rows: Iterable[Tuple[Post, int]],
    current_user_id: Optional[int] = None,
) -> List[PostResponse]:
    """Turn ``(post, like_count)`` rows into responses with the caller's like status."""
    rows = list(rows)
    liked: Set[int] = set()
    if current_user_id is not None:
        liked = crud_like.liked_post_ids(
            db, user_id=current_user_id, post_ids=[post.id for post, _ in rows]
        )

    responses = []
    for post, like_count in rows:
        response = PostResponse.model_validate(post)
        response.like_count = like_count
        response.is_liked = post.id in liked
        responses.append(response)
    return responses


def release_images(db: Session, image_urls: Iterable[Optional[str]]) -> None:
    """Delete stored files that no post or profile picture references any more.

    Must run after the owning rows are committed as deleted or changed.
    """
    for image_url in {url for url in image_urls if url}:
        if crud_post.image_in_use(db, image_urls=image_url_variants(image_url)):
            logger.info(f"Image still referenced, keeping file: {image_url}")
            continue
        delete_local_image(image_url)


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new post",
)
def create_post(
    post_in: PostCreate,
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
) -> PostResponse:
    """
    Share a photo.

    ``imageUrl`` is required (usually the URL returned by ``POST /upload``);
    caption, location, place id and coordinates are optional.
    """
    # The token may outlive an account deleted by an admin
    if not crud_user.get(db, claims.user_id):
        raise NotFoundException(detail="User not found")

    post = crud_post.create_post(db, user_id=claims.user_id, post_in=post_in)
    logger.info(f"Post created: id={post.id} user={claims.user_id}")

    return build_post_responses(db, [(post, 0)], claims.user_id)[0]


@router.get(
    "",
    response_model=List[PostResponse],
    status_code=status.HTTP_200_OK,
    summary="List all posts",
)
def list_posts(
    place_id: Optional[str] = Query(None, alias="placeId", description="Only posts tagged with this place"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
) -> List[PostResponse]:
    """List posts newest first, with owner info and like counts."""
    rows = crud_post.get_all_with_like_counts(db, place_id=place_id)
    return build_post_responses(db, rows, claims.user_id)


@router.delete(
    "/{post_id}",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete own post",
)
def delete_post(
    post_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
) -> SuccessResponse:
    """Delete a post. Only the owner can delete it here; admins use ``/admin/posts``."""
    post = crud_post.get(db, post_id)
    if not post:
        raise NotFoundException(detail="Post not found")

    if post.user_id != claims.user_id:
        raise ForbiddenException(detail="You can only delete your own posts")

    image_url = post.image_url
    crud_post.delete(db, id=post_id)
    release_images(db, [image_url])
    logger.info(f"Post deleted by owner: id={post_id} user={claims.user_id}")
    return SuccessResponse()


@router.post(
    "/{post_id}/like",
    response_model=LikeToggleResponse,
    status_code=status.HTTP_200_OK,
    summary="Like or unlike a post",
)
def toggle_like(
    post_id: int,
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
) -> LikeToggleResponse:
    """Like the post, or remove the like if the caller already liked it."""
    if not crud_post.get(db, post_id):
        raise NotFoundException(detail="Post not found")

    if not crud_user.get(db, claims.user_id):
        raise NotFoundException(detail="User not found")

    state = crud_like.toggle(db, user_id=claims.user_id, post_id=post_id)

    return LikeToggleResponse(
        post_id=post_id,
        state=state.value,
        like_count=crud_like.count_for_post(db, post_id=post_id),
        message="Post liked" if state is ToggleState.ADDED else "Like removed",
    )


__all__ = ["router", "build_post_responses", "release_images"]

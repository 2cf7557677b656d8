"""User search endpoint."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_claims, get_db
from app.api.v1.endpoints.users import build_user_item
from app.config import settings
from app.core.exceptions import BadRequestException
from app.core.security import TokenClaims
from app.crud import crud_user
from app.schemas.user import UserListItem

router = APIRouter(
    prefix="/search",
    tags=["Search"],
)


@router.get(
    "",
    response_model=List[UserListItem],
    status_code=status.HTTP_200_OK,
    summary="Search users",
)
def search_users(
    q: Optional[str] = Query(None, description="Substring of a name or username"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
) -> List[UserListItem]:
    """
    Case-insensitive search on name and username.

    The caller is never part of the results; at most 20 users, ordered by name.

    Raises:
        BadRequestException: 400 if the query is missing or blank
    """
    query = (q or "").strip()
    if not query:
        raise BadRequestException(detail="Search term is required")

    rows = crud_user.search(
        db,
        query=query,
        exclude_user_id=claims.user_id,
        limit=settings.SEARCH_RESULT_LIMIT,
    )
    return [build_user_item(row) for row in rows]


__all__ = ["router"]

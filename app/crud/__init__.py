"""CRUD operations package - exports singleton instances for all models."""

from .base import CRUDBase, CRUDToggle, ToggleState
from .user import crud_user
from .post import crud_post
from .like import crud_like
from .follow import crud_follow


__all__ = [
    # Base
    "CRUDBase",
    "CRUDToggle",
    "ToggleState",
    # CRUD instances
    "crud_user",
    "crud_post",
    "crud_like",
    "crud_follow",
]

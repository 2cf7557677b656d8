"""
SQLAlchemy Models for Webnode
"""

from ..database import Base
from .user import User
from .post import Post
from .like import Like
from .follow import Follow

# Export all models
__all__ = [
    "Base",
    "User",
    "Post",
    "Like",
    "Follow",
]

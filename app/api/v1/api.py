"""API v1 router aggregator."""

from fastapi import APIRouter

from app.api.v1.endpoints import admin, auth, posts, profile, search, upload, users
from app.config import settings

api_router = APIRouter(prefix=settings.API_PREFIX)

api_router.include_router(auth.router)
api_router.include_router(profile.router)
api_router.include_router(posts.router)
api_router.include_router(users.router)
api_router.include_router(search.router)
api_router.include_router(upload.router)
api_router.include_router(admin.router)

__all__ = ["api_router"]

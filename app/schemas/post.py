"""Pydantic schemas for Post (shared photos) and the like/follow toggles."""

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from .common import APIModel, APIRequest


class PostCreate(APIRequest):
    """Schema for creating a new post."""
    image_url: str = Field(..., max_length=500, description="URL returned by /upload")
    caption: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255, description="Human readable place name")
    place_id: Optional[str] = Field(None, max_length=255, description="Maps provider place identifier")
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @field_validator("image_url")
    @classmethod
    def require_image_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Image URL is required")
        return v

    @field_validator("caption", "location", "place_id")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "imageUrl": "http://localhost:8000/uploads/photos/posts/3f1c.jpg",
            "caption": "Sunset over the Bosphorus",
            "location": "Galata Tower",
            "placeId": "ChIJ7b6xRf25yhQRw7mH9-Sxwm0",
            "latitude": 41.0256,
            "longitude": 28.9742,
        }
    })


class UserSummary(APIModel):
    """Owner info embedded in posts."""

    id: int
    name: str
    username: str
    profile_image: Optional[str] = None


class PostResponse(APIModel):
    """Schema for Post response."""
    id: int
    user_id: int
    image_url: str
    caption: Optional[str] = None
    location: Optional[str] = None
    place_id: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: Optional[datetime] = None
    user: Optional[UserSummary] = None
    like_count: int = 0
    is_liked: bool = False  # Populated for the requesting user


class LikeToggleResponse(APIModel):
    """Response for like action."""
    post_id: int
    state: str
    like_count: int
    message: str


class FollowToggleResponse(APIModel):
    """Response for follow action."""
    user_id: int
    state: str
    follower_count: int
    message: str

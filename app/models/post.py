"""Post model for shared photos."""

from sqlalchemy import Column, Integer, Float, String, Text, TIMESTAMP, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class Post(Base):
    """A photo shared by a user, optionally tagged with a place."""
    
    __tablename__ = "posts"
    
    id = Column(Integer, primary_key=True, index=True)
    
    # Foreign Keys
    user_id = Column(
        Integer, 
        ForeignKey("users.id", ondelete="CASCADE"), 
        nullable=False, 
        index=True
    )
    
    # Post Content
    image_url = Column(String(500), nullable=False)
    caption = Column(Text)
    
    # Location
    location = Column(String(255))
    place_id = Column(String(255), index=True)
    latitude = Column(Float)
    longitude = Column(Float)
    
    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
    
    # Constraints & Indexes
    __table_args__ = (
        # Index for profile pages (posts by owner, newest first)
        Index('idx_post_user_created', 'user_id', 'created_at'),
    )
    
    # Relationships
    user = relationship("User", back_populates="posts")
    likes = relationship(
        "Like", 
        back_populates="post",
        cascade="all, delete-orphan"
    )

from .common import (
	APIModel,
	APIRequest,
	MessageResponse,
	SuccessResponse,
)
from .post import (
	PostCreate,
	PostResponse,
	UserSummary,
	LikeToggleResponse,
	FollowToggleResponse,
)
from .user import (
	UserCreate,
	UserLogin,
	ProfileUpdate,
	UserResponse,
	UserListItem,
	ProfileResponse,
	AdminUserItem,
	RegisterResponse,
	AuthResponse,
	AdminSetupResponse,
)

__all__ = [
	# Common
	"APIModel",
	"APIRequest",
	"MessageResponse",
	"SuccessResponse",
	# Post
	"PostCreate",
	"PostResponse",
	"UserSummary",
	"LikeToggleResponse",
	"FollowToggleResponse",
	# User
	"UserCreate",
	"UserLogin",
	"ProfileUpdate",
	"UserResponse",
	"UserListItem",
	"ProfileResponse",
	"AdminUserItem",
	"RegisterResponse",
	"AuthResponse",
	"AdminSetupResponse",
]

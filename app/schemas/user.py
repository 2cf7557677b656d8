"""Pydantic schemas for `User` domain objects."""

import re
from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field, field_validator

from .common import APIModel, APIRequest
from .post import PostResponse, UserSummary


USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
EMAIL_MAX_LENGTH = 255
NAME_MAX_LENGTH = 255
IMAGE_URL_MAX_LENGTH = 500

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")
TURKISH_CHARS_PATTERN = re.compile(r"[çğıöşüÇĞİÖŞÜ]")
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
PASSWORD_SPECIAL_CHARS = '!@#$%^&*(),.?":{}|<>'

DISPOSABLE_EMAIL_DOMAINS = frozenset({
	"tempmail.com",
	"temp-mail.org",
	"throwawaymail.com",
	"yopmail.com",
	"mailinator.com",
	"10minutemail.com",
	"guerrillamail.com",
	"sharklasers.com",
	"grr.la",
	"fakeinbox.com",
	"safemail.com",
	"tempmail.net",
})


def validate_username(value: str) -> str:
	value = value.strip()
	if TURKISH_CHARS_PATTERN.search(value):
		raise ValueError("Username cannot contain Turkish characters")
	if not USERNAME_PATTERN.match(value):
		raise ValueError("Username may only contain letters, digits and underscores")
	if not USERNAME_MIN_LENGTH <= len(value) <= USERNAME_MAX_LENGTH:
		raise ValueError(
			f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
		)
	return value


def validate_email(value: str) -> str:
	value = value.strip()
	if not EMAIL_PATTERN.match(value):
		raise ValueError("Enter a valid email address")
	domain = value.split("@", 1)[1].lower()
	if domain in DISPOSABLE_EMAIL_DOMAINS:
		raise ValueError("Disposable email addresses are not accepted")
	return value


def validate_password(value: str) -> str:
	if len(value) < PASSWORD_MIN_LENGTH:
		raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
	if not re.search(r"[A-Z]", value):
		raise ValueError("Password must contain at least one uppercase letter")
	if not re.search(r"[a-z]", value):
		raise ValueError("Password must contain at least one lowercase letter")
	if not re.search(r"[0-9]", value):
		raise ValueError("Password must contain at least one digit")
	if not any(c in PASSWORD_SPECIAL_CHARS for c in value):
		raise ValueError("Password must contain at least one special character")
	return value


def validate_name(value: str) -> str:
	value = value.strip()
	if not value:
		raise ValueError("Name is required")
	return value


class UserCreate(APIRequest):
	email: str = Field(..., max_length=EMAIL_MAX_LENGTH)
	password: str = Field(..., max_length=PASSWORD_MAX_LENGTH)
	name: str = Field(..., max_length=NAME_MAX_LENGTH)
	username: str

	@field_validator("email")
	@classmethod
	def check_email(cls, v: str) -> str:
		return validate_email(v)

	@field_validator("password")
	@classmethod
	def check_password(cls, v: str) -> str:
		return validate_password(v)

	@field_validator("name")
	@classmethod
	def check_name(cls, v: str) -> str:
		return validate_name(v)

	@field_validator("username")
	@classmethod
	def check_username(cls, v: str) -> str:
		return validate_username(v)

	model_config = ConfigDict(json_schema_extra={
		"example": {
			"email": "alice@example.com",
			"password": "Str0ng!Pass",
			"name": "Alice Doe",
			"username": "alice",
		}
	})


class UserLogin(APIRequest):
	email: str
	password: str = Field(..., max_length=PASSWORD_MAX_LENGTH)

	@field_validator("email")
	@classmethod
	def strip_email(cls, v: str) -> str:
		v = v.strip()
		if not v:
			raise ValueError("Email is required")
		return v

	@field_validator("password")
	@classmethod
	def require_password(cls, v: str) -> str:
		if not v:
			raise ValueError("Password is required")
		return v

	model_config = ConfigDict(json_schema_extra={
		"example": {
			"email": "alice@example.com",
			"password": "Str0ng!Pass",
		}
	})


class ProfileUpdate(APIRequest):
	name: Optional[str] = Field(None, max_length=NAME_MAX_LENGTH)
	username: Optional[str] = None
	bio: Optional[str] = None
	profile_image: Optional[str] = Field(None, max_length=IMAGE_URL_MAX_LENGTH)

	@field_validator("username")
	@classmethod
	def check_username(cls, v: Optional[str]) -> Optional[str]:
		if v is None:
			return v
		return validate_username(v)

	@field_validator("name")
	@classmethod
	def check_name(cls, v: Optional[str]) -> Optional[str]:
		if v is None:
			return v
		return validate_name(v)

	model_config = ConfigDict(json_schema_extra={
		"example": {
			"name": "Alice D.",
			"username": "alice_d",
			"bio": "Street photography in Istanbul",
			"profileImage": "http://localhost:8000/uploads/photos/posts/3f1c.jpg",
		}
	})


class UserResponse(UserSummary):
	email: str
	bio: Optional[str] = None
	is_admin: bool = False
	created_at: Optional[datetime] = None


class UserListItem(UserSummary):
	"""Public card used by search and the explore list."""

	bio: Optional[str] = None
	post_count: int = 0
	follower_count: int = 0
	following_count: int = 0


class ProfileResponse(UserListItem):
	created_at: Optional[datetime] = None
	is_following: bool = False
	posts: List[PostResponse] = []


class AdminUserItem(UserSummary):
	email: str
	is_admin: bool = False
	created_at: Optional[datetime] = None
	post_count: int = 0
	like_count: int = 0


class RegisterResponse(APIModel):
	user: UserResponse


class AuthResponse(APIModel):
	user: UserResponse
	token: str


class AdminSetupResponse(APIModel):
	message: str
	admin: UserResponse
	generated_password: Optional[str] = None

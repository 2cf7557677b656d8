"""
tests/test_validators.py -- Registration field rules.

Each rule is exercised through the plain validator function; the schema tests
confirm the functions are wired to UserCreate / ProfileUpdate / PostCreate.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.schemas.post import PostCreate
from app.schemas.user import (
    ProfileUpdate,
    UserCreate,
    validate_email,
    validate_name,
    validate_password,
    validate_username,
)


class TestUsername:
    @pytest.mark.parametrize("value", ["abc", "alice_01", "A" * 20])
    def test_accepts(self, value: str) -> None:
        assert validate_username(value) == value

    def test_strips_whitespace(self) -> None:
        assert validate_username("  bob  ") == "bob"

    @pytest.mark.parametrize("value", ["ab", "a" * 21])
    def test_rejects_bad_length(self, value: str) -> None:
        with pytest.raises(ValueError, match="between 3 and 20"):
            validate_username(value)

    @pytest.mark.parametrize("value", ["ali.ce", "ali ce", "ali-ce", "al!"])
    def test_rejects_other_characters(self, value: str) -> None:
        with pytest.raises(ValueError, match="letters, digits and underscores"):
            validate_username(value)

    def test_rejects_turkish_characters(self) -> None:
        with pytest.raises(ValueError, match="Turkish"):
            validate_username("çiçek")


class TestEmail:
    @pytest.mark.parametrize("value", ["a@x.com", "first.last@example.co.uk", "u_1@mail-host.org"])
    def test_accepts(self, value: str) -> None:
        assert validate_email(value) == value

    @pytest.mark.parametrize("value", ["plain", "a@b", "a@b.c", "@x.com", "a b@x.com"])
    def test_rejects_malformed(self, value: str) -> None:
        with pytest.raises(ValueError, match="valid email"):
            validate_email(value)

    @pytest.mark.parametrize("value", ["x@mailinator.com", "x@YOPMAIL.com"])
    def test_rejects_disposable(self, value: str) -> None:
        with pytest.raises(ValueError, match="Disposable"):
            validate_email(value)


class TestPassword:
    def test_accepts_strong(self) -> None:
        assert validate_password("Str0ng!Pass") == "Str0ng!Pass"

    @pytest.mark.parametrize(
        "value, message",
        [
            ("S0!a", "at least 8"),
            ("str0ng!pass", "uppercase"),
            ("STR0NG!PASS", "lowercase"),
            ("Strong!Pass", "digit"),
            ("Str0ngPass", "special"),
        ],
    )
    def test_rejects_weak(self, value: str, message: str) -> None:
        with pytest.raises(ValueError, match=message):
            validate_password(value)


class TestName:
    def test_strips(self) -> None:
        assert validate_name("  Ann Lee ") == "Ann Lee"

    def test_rejects_blank(self) -> None:
        with pytest.raises(ValueError):
            validate_name("   ")


class TestSchemas:
    def test_user_create_runs_every_rule(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            UserCreate(email="bad", password="weak", name=" ", username="x")
        failed = {error["loc"][0] for error in exc_info.value.errors()}
        assert failed == {"email", "password", "name", "username"}

    def test_user_create_rejects_unknown_fields(self) -> None:
        with pytest.raises(ValidationError):
            UserCreate(
                email="a@x.com",
                password="Str0ng!Pass",
                name="Ann",
                username="ann",
                isAdmin=True,
            )

    def test_profile_update_fields_optional(self) -> None:
        update = ProfileUpdate(bio="hello")
        assert update.model_dump(exclude_unset=True) == {"bio": "hello"}

    def test_profile_update_validates_username(self) -> None:
        with pytest.raises(ValidationError):
            ProfileUpdate(username="no spaces")

    def test_post_create_accepts_camel_case(self) -> None:
        post = PostCreate.model_validate({"imageUrl": "http://h/p.jpg", "placeId": " p1 ", "caption": "  "})
        assert post.image_url == "http://h/p.jpg"
        assert post.place_id == "p1"
        assert post.caption is None

    def test_post_create_requires_image_url(self) -> None:
        with pytest.raises(ValidationError):
            PostCreate.model_validate({"imageUrl": "   "})

    @pytest.mark.parametrize("field, value", [("latitude", 91), ("longitude", -181)])
    def test_post_create_rejects_out_of_range_coordinates(self, field: str, value: float) -> None:
        with pytest.raises(ValidationError):
            PostCreate.model_validate({"imageUrl": "http://h/p.jpg", field: value})

    @pytest.mark.parametrize(
        "field, value",
        [
            ("email", "a" * 250 + "@x.com"),
            ("name", "N" * 256),
            ("password", "Str0ng!Pass" + "x" * 120),
        ],
    )
    def test_user_create_length_limits(self, field: str, value: str) -> None:
        data = {"email": "a@x.com", "password": "Str0ng!Pass", "name": "Ann", "username": "ann"}
        data[field] = value
        with pytest.raises(ValidationError) as exc_info:
            UserCreate(**data)
        assert exc_info.value.errors()[0]["type"] == "string_too_long"

    def test_profile_update_image_length_limit(self) -> None:
        with pytest.raises(ValidationError):
            ProfileUpdate(profile_image="http://img/" + "x" * 500)

"""Shared schema configuration and small response envelopes."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
	"""Base for response schemas: camelCase JSON, built from ORM objects."""

	model_config = ConfigDict(
		alias_generator=to_camel,
		populate_by_name=True,
		from_attributes=True,
	)


class APIRequest(BaseModel):
	"""Base for request bodies: camelCase or snake_case keys, unknown keys rejected."""

	model_config = ConfigDict(
		alias_generator=to_camel,
		populate_by_name=True,
		extra="forbid",
	)


class MessageResponse(APIModel):
	message: str


class SuccessResponse(APIModel):
	success: bool = True

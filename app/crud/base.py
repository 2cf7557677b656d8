"""Generic CRUD base classes for SQLAlchemy models."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.database import Base


logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class ToggleState(str, Enum):
	"""Outcome of a toggle operation."""

	ADDED = "added"
	REMOVED = "removed"


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
	"""Reusable CRUD helper for SQLAlchemy models.

	All methods operate on model instances and return database objects, not schemas.
	"""

	def __init__(self, model: Type[ModelType]):
		self.model = model

	# ----- Read -----
	def get(self, db: Session, id: Any) -> Optional[ModelType]:
		"""Get one record by primary key."""
		return db.get(self.model, id)

	# ----- Update -----
	def update(
		self,
		db: Session,
		*,
		db_obj: ModelType,
		obj_in: Union[UpdateSchemaType, Dict[str, Any]],
	) -> ModelType:
		"""Update a record with fields from a Pydantic schema or dict."""
		update_data = obj_in.model_dump(exclude_unset=True) if isinstance(obj_in, BaseModel) else dict(obj_in)

		for field, value in update_data.items():
			if hasattr(db_obj, field):
				setattr(db_obj, field, value)

		try:
			db.add(db_obj)
			db.commit()
			db.refresh(db_obj)
		except Exception:
			db.rollback()
			raise
		return db_obj

	# ----- Delete -----
	def delete(self, db: Session, *, id: Any) -> Optional[ModelType]:
		"""Hard delete a record; ORM cascades remove dependent rows.

		Returns the deleted object (or None if not found).
		"""
		db_obj = self.get(db, id)
		if not db_obj:
			return None

		try:
			db.delete(db_obj)
			db.commit()
		except Exception:
			db.rollback()
			raise
		return db_obj


class CRUDToggle(CRUDBase[ModelType, BaseModel, BaseModel]):
	"""CRUD helper for join tables keyed by a unique pair of foreign keys.

	The only write verb is ``toggle_pair``: remove the row if present,
	create it if absent.
	"""

	def get_pair(self, db: Session, **keys: Any) -> Optional[ModelType]:
		stmt = select(self.model).filter_by(**keys).limit(1)
		return db.scalars(stmt).first()

	def toggle_pair(self, db: Session, **keys: Any) -> ToggleState:
		"""Invert the relationship state for ``keys``.

		Not atomic against a concurrent toggle of the same pair. A racing
		insert trips the unique constraint and a racing delete matches zero
		rows; both are reported as the state the row ended up in.
		"""
		existing = self.get_pair(db, **keys)

		if existing is not None:
			try:
				result = db.execute(delete(self.model).filter_by(**keys))
				db.commit()
			except Exception:
				db.rollback()
				raise
			if result.rowcount == 0:
				logger.warning(f"{self.model.__name__} {keys} already removed by a concurrent request")
			return ToggleState.REMOVED

		db.add(self.model(**keys))
		try:
			db.commit()
		except IntegrityError:
			db.rollback()
			if self.get_pair(db, **keys) is None:
				# Not a duplicate (e.g. a referenced row vanished)
				raise
			logger.warning(f"{self.model.__name__} {keys} already created by a concurrent request")
		return ToggleState.ADDED

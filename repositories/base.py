#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Base repository class with the CRUD operations shared by every table.
"""

from typing import Type, TypeVar, Generic, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select

from models import Base

T = TypeVar('T', bound=Base)


class BaseRepository(Generic[T]):
    """
    Generic base repository.

    Usage:
        class VoteRepository(BaseRepository[Vote]):
            model_class = Vote
    """

    model_class: Type[T] = None

    def __init__(self, session: Session):
        """
        Initialize repository with a database session.

        Args:
            session: SQLAlchemy session instance
        """
        self.session = session

    def get_by_id(self, id: int) -> Optional[T]:
        """
        Get a single record by its primary key.

        Returns:
            Model instance or None if not found
        """
        pk_column = self._get_primary_key_column()
        stmt = select(self.model_class).where(pk_column == id)
        return self.session.execute(stmt).scalar_one_or_none()

    def add(self, entity: T) -> T:
        """
        Add a new record and flush so the generated ID is available.
        """
        self.session.add(entity)
        self.session.flush()
        return entity

    def delete(self, entity: T) -> bool:
        """Delete a record."""
        self.session.delete(entity)
        self.session.flush()
        return True

    def _get_primary_key_column(self):
        """Get the primary key column for this model."""
        pk_columns = self.model_class.__table__.primary_key.columns
        return list(pk_columns)[0]

"""Base repository class with common CRUD operations.

This module provides a generic base repository that handles common
database operations over an explicit session factory. SQLAlchemy errors
are converted to PersistenceError so callers never depend on the driver.
"""

from abc import ABC
from contextlib import contextmanager
from typing import Any, Generic, Iterator, List, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.exceptions import PersistenceError
from database.connection import session_scope

# Type variable for model classes
T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository with common CRUD operations.

    Usage:
        class SettingsRepository(BaseRepository[Setting]):
            model_class = Setting
            primary_key = "key"

    Type Parameters:
        T: The SQLAlchemy model class this repository manages
    """

    # Subclasses must define this
    model_class: Type[T]

    # Override this if primary key isn't 'id'
    primary_key: str = "id"

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        """Transactional session that wraps driver errors."""
        try:
            with session_scope(self.session_factory) as session:
                yield session
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to {operation} {self.model_class.__tablename__}: {e}",
                details={"operation": operation},
            ) from e

    def _pk_filter(self, entity_id: Any):
        return getattr(self.model_class, self.primary_key) == entity_id

    def get(self, entity_id: Any) -> Optional[T]:
        """
        Get an entity by its primary key.

        Args:
            entity_id: The primary key value

        Returns:
            The detached entity or None if not found
        """
        with self._session("read") as session:
            entity = session.query(self.model_class).filter(self._pk_filter(entity_id)).first()
            if entity:
                session.expunge(entity)
            return entity

    def list_all(self) -> List[T]:
        """Get every entity ordered by primary key."""
        with self._session("list") as session:
            order_column = getattr(self.model_class, self.primary_key)
            entities = session.query(self.model_class).order_by(order_column).all()
            for entity in entities:
                session.expunge(entity)
            return entities

    def count(self) -> int:
        """Count all entities."""
        with self._session("count") as session:
            return session.query(self.model_class).count()

    def exists(self, entity_id: Any) -> bool:
        """Check if an entity exists."""
        return self.get(entity_id) is not None

    def delete(self, entity_id: Any) -> bool:
        """
        Delete an entity by its primary key.

        Returns:
            True if entity was deleted, False if not found
        """
        with self._session("delete") as session:
            deleted = session.query(self.model_class).filter(
                self._pk_filter(entity_id)
            ).delete(synchronize_session=False)
            return deleted > 0

    def delete_all(self) -> int:
        """Delete every entity and return how many were removed."""
        with self._session("delete all") as session:
            return session.query(self.model_class).delete(synchronize_session=False)

"""Base repository pattern with common operations.

Provides the foundation for all repository implementations with
standardized CRUD operations and the unit-of-work ``save``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..errors import PersistenceError


EntityT = TypeVar("EntityT")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[EntityT], ABC):
    """Base repository with common operations.

    Mutating helpers stage changes on the session; nothing is durable until
    ``save`` commits.
    """

    def __init__(self, session: Session):
        self.session = session

    @abstractmethod
    def get_entity_class(self) -> type[EntityT]:
        """Return the SQLModel entity class."""
        pass

    def insert(self, entity: EntityT) -> EntityT:
        """Stage a new entity for insertion."""
        self.session.add(entity)
        return entity

    def delete(self, entity: EntityT) -> None:
        """Stage an entity for deletion."""
        self.session.delete(entity)

    def get_by_id(self, entity_id: Any) -> EntityT | None:
        """Get entity by primary key."""
        return self.session.get(self.get_entity_class(), entity_id)

    def count(self) -> int:
        """Count total entities."""
        statement = select(func.count()).select_from(self.get_entity_class())
        return self.session.exec(statement).one()

    def save(self, operation: str = "save changes") -> None:
        """Commit staged changes.

        Raises:
            PersistenceError: If the commit fails. The session is rolled back
                first, so staged inserts are discarded and modified entities
                reload their stored values.

        """
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to {operation}: {e}")
            raise PersistenceError(operation, e) from e

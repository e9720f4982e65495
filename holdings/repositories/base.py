"""Base repository with shared get-by-ID, insert and delete patterns.

Subclasses set ``model_class`` (or assign it per instance) and override
``_not_found`` to raise their own error type; the base provides the common
implementations. Repositories flush but never commit: services own the
transaction boundary.
"""

from typing import Any, Dict, TypeVar, Generic, Optional, Type
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session, Query

from ..database import Base
from ..exceptions import HoldingsException

ModelT = TypeVar("ModelT", bound=Base)


def record_to_dict(record: Base) -> Dict[str, Any]:
    """Column attributes of an ORM row as a plain dict (attribute names, not column names)."""
    mapper = sa_inspect(record).mapper
    return {attr.key: getattr(record, attr.key) for attr in mapper.column_attrs}


class BaseRepository(Generic[ModelT]):
    """Shared repository logic for SQLAlchemy models.

    Class variables to set in subclasses:
        model_class: The SQLAlchemy model (e.g., Folder)
        id_column:   Name of the primary-key column (default "id")
    """

    model_class: Type[ModelT]
    id_column: str = "id"

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self) -> Query:
        return self.db.query(self.model_class)

    def _id_col(self):
        return getattr(self.model_class, self.id_column)

    def _not_found(self, entity_id: str) -> HoldingsException:
        raise NotImplementedError

    def get_by_id(self, entity_id: str) -> ModelT:
        """Get entity by primary key. Raises the subclass's not-found error if missing."""
        entity = self.get_by_id_optional(entity_id)
        if entity is None:
            raise self._not_found(entity_id)
        return entity

    def get_by_id_optional(self, entity_id: str) -> Optional[ModelT]:
        """Get entity by primary key, or None if not found."""
        return self._base_query().filter(self._id_col() == entity_id).first()

    def add(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        self.db.flush()
        self.db.refresh(entity)
        return entity

    def delete_by_id(self, entity_id: str) -> bool:
        """Delete exactly one row. Returns whether a row was removed."""
        removed = (
            self._base_query()
            .filter(self._id_col() == entity_id)
            .delete(synchronize_session="fetch")
        )
        return removed > 0

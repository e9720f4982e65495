"""Repository for hierarchy records of one level."""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..exceptions import EntityNotFoundError
from ..levels import LevelSpec
from .base import BaseRepository


class EntityRepository(BaseRepository):
    """Data access for the table behind one ``LevelSpec``."""

    def __init__(self, db: Session, spec: LevelSpec):
        super().__init__(db)
        self.spec = spec
        self.model_class = spec.model

    def _not_found(self, entity_id: str) -> EntityNotFoundError:
        return EntityNotFoundError(self.spec.level.value, entity_id)

    def list_scoped(self, owner_id: Optional[str] = None) -> List:
        """Records under one parent, ordered by sort_order.

        Root-level records are never filtered. For scoped levels a missing
        *owner_id* selects records whose parent reference is NULL.
        """
        query = self._base_query()
        if self.spec.scoped:
            parent_col = getattr(self.model_class, self.spec.parent_field)
            if owner_id:
                query = query.filter(parent_col == owner_id)
            else:
                query = query.filter(parent_col.is_(None))
        return query.order_by(self.model_class.sort_order).all()

    def count(self) -> int:
        return self._base_query().count()

    def clear_folder(self, folder_id: str, new_folder_id: Optional[str]) -> int:
        """Re-home every record filed in *folder_id*."""
        return (
            self._base_query()
            .filter(self.model_class.folder_id == folder_id)
            .update({self.model_class.folder_id: new_folder_id}, synchronize_session="fetch")
        )

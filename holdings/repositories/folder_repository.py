"""Repository for folder database operations."""

from typing import List, Optional

from ..exceptions import FolderNotFoundError
from ..levels import FolderType
from ..models.folder import Folder
from .base import BaseRepository


class FolderRepository(BaseRepository[Folder]):
    """Data access layer for folders."""

    model_class = Folder

    def _not_found(self, folder_id: str) -> FolderNotFoundError:
        return FolderNotFoundError(folder_id)

    def list_by_type(self, folder_type: FolderType, owner_id: Optional[str] = None) -> List[Folder]:
        """Folders of one type, optionally restricted to one owner."""
        query = self.db.query(Folder).filter(Folder.folder_type == folder_type.value)
        if owner_id:
            query = query.filter(Folder.owner_id == owner_id)
        return query.order_by(Folder.sort_order).all()

    def list_in_scope(self, folder_type: FolderType, owner_id: Optional[str]) -> List[Folder]:
        """Folders of one type in exactly one owner scope (NULL owner when *owner_id* is None)."""
        query = self.db.query(Folder).filter(Folder.folder_type == folder_type.value)
        if owner_id:
            query = query.filter(Folder.owner_id == owner_id)
        else:
            query = query.filter(Folder.owner_id.is_(None))
        return query.order_by(Folder.sort_order).all()

    def get_children(self, folder_id: str) -> List[Folder]:
        return (
            self.db.query(Folder)
            .filter(Folder.parent_id == folder_id)
            .order_by(Folder.sort_order)
            .all()
        )

    def reparent_children(self, folder_id: str, new_parent_id: Optional[str]) -> int:
        """Move every direct subfolder of *folder_id* under *new_parent_id*."""
        return (
            self.db.query(Folder)
            .filter(Folder.parent_id == folder_id)
            .update({Folder.parent_id: new_parent_id}, synchronize_session="fetch")
        )

"""Folder operations: CRUD, move, reorder and move-up deletion.

Folders are stored flat with a ``parent_id`` reference; trees are only
assembled on read (see ``tree_builder``). Every folder has a folder type
binding it to one level (or to the selected-view collection) and, for
scoped levels, an owner: the parent record whose children it groups.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..exceptions import ValidationError
from ..levels import FolderType, UNSCOPED_FOLDER_TYPES, level_for_folder_type, LEVELS
from ..models.folder import Folder
from ..repositories import (
    EntityRepository,
    FolderRepository,
    SelectedViewRepository,
    record_to_dict,
)
from ..schemas.folder import FolderCreate, FolderUpdate
from ..schemas.tree import ReorderItem
from .code_allocator import allocate_code, new_record_id, next_sort_key

DEFAULT_FOLDER_NAME = "New folder"
FOLDER_ID_PREFIX = "fd"

logger = logging.getLogger(__name__)


def folder_node(folder: Folder) -> Dict[str, Any]:
    """Folder row as tree-builder input. The folder type travels as ``folder_type``."""
    return record_to_dict(folder)


def folder_record(folder: Folder) -> Dict[str, Any]:
    """Folder row for flat list responses, folder type under ``type``."""
    data = record_to_dict(folder)
    data["type"] = data.pop("folder_type")
    return data


def check_member_folder(
    folder_repo: FolderRepository,
    folder_id: str,
    folder_type: FolderType,
    owner_id: Optional[str],
) -> Folder:
    """Ensure a record may be filed in *folder_id*.

    The folder must exist, group the record's level and belong to the
    record's parent (``owner_id``).
    """
    folder = folder_repo.get_by_id_optional(folder_id)
    if folder is None:
        raise ValidationError(f"Folder not found: {folder_id}", field="folder_id")
    if folder.folder_type != folder_type.value:
        raise ValidationError(
            f"Folder {folder_id} is a {folder.folder_type}, expected {folder_type.value}",
            field="folder_id",
        )
    if (folder.owner_id or None) != (owner_id or None):
        raise ValidationError("Folder belongs to a different parent", field="folder_id")
    return folder


class FolderService:
    """Folder CRUD behind a narrow interface.

    Public methods:
        list_folders   -- flat, ordered by sort_order, optional owner filter
        get_folder     -- lookup by id
        create_folder  -- new folder, expanded, at the end of its siblings
        update_folder  -- name / expanded / parent_id / sort_order
        delete_folder  -- contents move up to the deleted folder's parent
        move_folder    -- change parent (None = root)
        reorder        -- batch sort_order (and parent_id) update
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = FolderRepository(db)

    def list_folders(self, folder_type: FolderType, owner_id: Optional[str] = None) -> List[Folder]:
        return self.repo.list_by_type(folder_type, owner_id)

    def get_folder(self, folder_id: str) -> Optional[Folder]:
        return self.repo.get_by_id_optional(folder_id)

    def create_folder(self, data: FolderCreate) -> Folder:
        owner_id = None if data.type in UNSCOPED_FOLDER_TYPES else data.owner_id
        if data.parent_id:
            self._check_parent(None, data.parent_id, data.type.value, owner_id)

        folder = Folder(
            id=new_record_id(FOLDER_ID_PREFIX),
            code=allocate_code(self.db),
            name=data.name or DEFAULT_FOLDER_NAME,
            folder_type=data.type.value,
            parent_id=data.parent_id,
            owner_id=owner_id,
            expanded=True,
            sort_order=next_sort_key(),
        )
        self.repo.add(folder)
        self.db.commit()
        logger.info(
            "Folder created",
            extra={"folder_id": folder.id, "folder_type": folder.folder_type, "owner_id": owner_id},
        )
        return folder

    def update_folder(self, folder_id: str, data: FolderUpdate) -> Optional[Folder]:
        folder = self.repo.get_by_id_optional(folder_id)
        if folder is None:
            return None

        patch = data.model_dump(exclude_unset=True)
        if "parent_id" in patch:
            self._set_parent(folder, patch.pop("parent_id"))
        for key, value in patch.items():
            # name, expanded and sort_order are NOT NULL; an explicit null is a no-op
            if value is not None:
                setattr(folder, key, value)

        self.db.commit()
        self.db.refresh(folder)
        return folder

    def delete_folder(self, folder_id: str) -> bool:
        """Delete one folder. Subfolders and member records move up one level."""
        folder = self.repo.get_by_id_optional(folder_id)
        if folder is None:
            return False

        new_parent = folder.parent_id
        moved_folders = self.repo.reparent_children(folder_id, new_parent)
        moved_items = self._member_repo(folder.folder_type).clear_folder(folder_id, new_parent)
        self.repo.delete_by_id(folder_id)
        self.db.commit()

        logger.info(
            "Folder deleted",
            extra={
                "folder_id": folder_id,
                "moved_folders": moved_folders,
                "moved_items": moved_items,
            },
        )
        return True

    def move_folder(self, folder_id: str, parent_id: Optional[str]) -> bool:
        folder = self.repo.get_by_id_optional(folder_id)
        if folder is None:
            return False
        self._set_parent(folder, parent_id)
        self.db.commit()
        return True

    def reorder(self, items: List[ReorderItem]) -> bool:
        for item in items:
            folder = self.repo.get_by_id_optional(item.id)
            if folder is None:
                logger.warning("Reorder skipped unknown folder", extra={"folder_id": item.id})
                continue
            folder.sort_order = item.sort_order
            if "parent_id" in item.model_fields_set:
                self._set_parent(folder, item.parent_id)
        self.db.commit()
        return True

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _set_parent(self, folder: Folder, parent_id: Optional[str]) -> None:
        if parent_id:
            self._check_parent(folder.id, parent_id, folder.folder_type, folder.owner_id)
        folder.parent_id = parent_id or None

    def _check_parent(
        self,
        folder_id: Optional[str],
        parent_id: str,
        folder_type: str,
        owner_id: Optional[str],
    ) -> None:
        parent = self.repo.get_by_id_optional(parent_id)
        if parent is None:
            raise ValidationError(f"Parent folder not found: {parent_id}", field="parent_id")
        if parent.folder_type != folder_type:
            raise ValidationError("Parent folder has a different folder type", field="parent_id")
        if (parent.owner_id or None) != (owner_id or None):
            raise ValidationError("Parent folder belongs to a different owner", field="parent_id")
        if folder_id and self._is_descendant(folder_id, parent_id):
            raise ValidationError("Cannot move folder into its own descendant", field="parent_id")

    def _is_descendant(self, ancestor_id: str, candidate_id: str) -> bool:
        """Check if candidate_id is ancestor_id or one of its descendants."""
        if ancestor_id == candidate_id:
            return True
        for child in self.repo.get_children(ancestor_id):
            if self._is_descendant(child.id, candidate_id):
                return True
        return False

    def _member_repo(self, folder_type: str):
        """Repository of the records a folder of *folder_type* can hold."""
        level = level_for_folder_type(FolderType(folder_type))
        if level is None:
            return SelectedViewRepository(self.db)
        return EntityRepository(self.db, LEVELS[level])

"""The cross-cutting "selected views" collection and view ancestry lookups."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import ViewAlreadySelectedError
from ..levels import LEVELS, FolderType, Level
from ..models import SelectedView
from ..repositories import (
    EntityRepository,
    FolderRepository,
    SelectedViewRepository,
    record_to_dict,
)
from ..schemas.selected import SelectedViewCreate
from ..schemas.tree import ReorderItem
from .code_allocator import allocate_code, new_record_id, next_sort_key
from .folder_service import check_member_folder, folder_node
from .tree_builder import build_tree

SELECTED_ID_PREFIX = "sv"

logger = logging.getLogger(__name__)


class SelectedViewService:
    """A view can be selected at most once; selections are filed in selected_folder folders."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SelectedViewRepository(db)
        self.folder_repo = FolderRepository(db)
        self.view_repo = EntityRepository(db, LEVELS[Level.VIEW])

    def get_all(self) -> List[Dict[str, Any]]:
        """Selected-view tree. Selections whose view or table is gone are omitted."""
        folders = self.folder_repo.list_in_scope(FolderType.SELECTED, None)
        return build_tree(
            [folder_node(f) for f in folders],
            self.repo.list_denormalized(),
        )

    def create(self, data: SelectedViewCreate) -> Dict[str, Any]:
        self.view_repo.get_by_id(data.view_id)

        existing = self.repo.find_by_view_id(data.view_id)
        if existing is not None:
            raise ViewAlreadySelectedError(data.view_id, existing.id)

        if data.folder_id:
            check_member_folder(self.folder_repo, data.folder_id, FolderType.SELECTED, None)

        record = SelectedView(
            id=new_record_id(SELECTED_ID_PREFIX),
            code=allocate_code(self.db),
            view_id=data.view_id,
            folder_id=data.folder_id,
            sort_order=next_sort_key(),
        )
        try:
            self.repo.add(record)
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent selection of the same view
            self.db.rollback()
            raise ViewAlreadySelectedError(data.view_id)

        logger.info("View selected", extra={"view_id": data.view_id, "selected_id": record.id})
        node = self.repo.get_denormalized(record.id)
        if node is None:
            node = record_to_dict(record)
            node["type"] = "selected"
        return node

    def delete(self, selected_id: str) -> bool:
        removed = self.repo.delete_by_id(selected_id)
        self.db.commit()
        return removed

    def move(self, selected_id: str, folder_id: Optional[str]) -> bool:
        record = self.repo.get_by_id_optional(selected_id)
        if record is None:
            return False
        if folder_id:
            check_member_folder(self.folder_repo, folder_id, FolderType.SELECTED, None)
        record.folder_id = folder_id
        self.db.commit()
        return True

    def reorder(self, items: List[ReorderItem]) -> bool:
        for item in items:
            record = self.repo.get_by_id_optional(item.id)
            if record is None:
                logger.warning("Reorder skipped unknown selection", extra={"selected_id": item.id})
                continue
            record.sort_order = item.sort_order
            if "folder_id" in item.model_fields_set:
                if item.folder_id:
                    check_member_folder(self.folder_repo, item.folder_id, FolderType.SELECTED, None)
                record.folder_id = item.folder_id
        self.db.commit()
        return True

    def check_selected(self, view_id: str) -> Dict[str, Any]:
        record = self.repo.find_by_view_id(view_id)
        if record is None:
            return {"selected": False, "id": None}
        return {"selected": True, "id": record.id}

    def get_view_location(self, view_id: str) -> Optional[Dict[str, Dict[str, str]]]:
        """Ancestry of a view, or None if the view or any link above it is missing."""
        row = self.repo.get_location_row(view_id)
        if row is None:
            return None
        return {
            level: {"id": getattr(row, f"{level}_id"), "name": getattr(row, f"{level}_name")}
            for level in ("shareholder", "company", "project", "table", "view")
        }

"""Tree node, move and reorder schemas shared by every level."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator

from ..levels import ItemKind


class TreeNode(BaseModel):
    """A folder (with children) or a leaf record.

    Routes returning nodes use ``response_model_exclude_unset`` so each
    node only carries the fields of its own kind.
    """
    id: str
    code: str
    type: str  # 'folder', a level name, or 'selected'
    name: Optional[str] = None
    sort_order: int = 0
    created_at: Optional[datetime] = None

    # Leaf fields
    folder_id: Optional[str] = None
    shareholder_id: Optional[str] = None
    company_id: Optional[str] = None
    project_id: Optional[str] = None
    table_id: Optional[str] = None
    color: Optional[str] = None
    view_type: Optional[str] = None

    # Selected-view fields
    view_id: Optional[str] = None
    view_name: Optional[str] = None
    table_name: Optional[str] = None
    table_color: Optional[str] = None

    # Folder fields
    folder_type: Optional[str] = None
    parent_id: Optional[str] = None
    owner_id: Optional[str] = None
    expanded: Optional[bool] = None
    children: Optional[List['TreeNode']] = None


class MoveRequest(BaseModel):
    """Relocate an item; for folders ``folder_id`` is the new parent folder."""
    folder_id: Optional[str] = None

    @field_validator('folder_id')
    @classmethod
    def blank_is_root(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class ReorderItem(BaseModel):
    """New position for one item.

    ``folder_id`` (records) or ``parent_id`` (folders) are applied only
    when present in the request body.
    """
    id: str
    sort_order: int
    folder_id: Optional[str] = None
    parent_id: Optional[str] = None

    @field_validator('folder_id', 'parent_id')
    @classmethod
    def blank_is_root(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class ReorderRequest(BaseModel):
    type: ItemKind
    items: List[ReorderItem]


class SuccessResponse(BaseModel):
    success: bool

"""Pydantic schemas for API validation."""

from .tree import TreeNode, MoveRequest, ReorderItem, ReorderRequest, SuccessResponse
from .entity import EntityCreate, EntityUpdate
from .folder import FolderCreate, FolderUpdate, FolderResponse
from .selected import SelectedViewCreate, SelectionStatus, LocationRef, ViewLocation

__all__ = [
    "TreeNode",
    "MoveRequest",
    "ReorderItem",
    "ReorderRequest",
    "SuccessResponse",
    "EntityCreate",
    "EntityUpdate",
    "FolderCreate",
    "FolderUpdate",
    "FolderResponse",
    "SelectedViewCreate",
    "SelectionStatus",
    "LocationRef",
    "ViewLocation",
]

"""Folder schemas."""

from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Optional

from ..levels import FolderType


class FolderCreate(BaseModel):
    """Schema for creating a folder."""
    type: FolderType
    name: Optional[str] = None
    parent_id: Optional[str] = None
    owner_id: Optional[str] = None

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None

    @field_validator('parent_id', 'owner_id')
    @classmethod
    def blank_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class FolderUpdate(BaseModel):
    """Partial folder update. Only fields present in the request are applied."""
    name: Optional[str] = None
    expanded: Optional[bool] = None
    parent_id: Optional[str] = None
    sort_order: Optional[int] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Folder name cannot be empty")
        return v

    @field_validator('parent_id')
    @classmethod
    def blank_is_root(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class FolderResponse(BaseModel):
    """Folder in flat list responses; ``type`` is the folder type."""
    id: str
    code: str
    name: str
    type: FolderType
    parent_id: Optional[str] = None
    owner_id: Optional[str] = None
    expanded: bool = True
    sort_order: int = 0
    created_at: Optional[datetime] = None

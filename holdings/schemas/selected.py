"""Schemas for the selected-view collection and view location lookups."""

from typing import Optional

from pydantic import BaseModel, field_validator


class SelectedViewCreate(BaseModel):
    view_id: str
    folder_id: Optional[str] = None

    @field_validator('view_id')
    @classmethod
    def validate_view_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("view_id cannot be empty")
        return v

    @field_validator('folder_id')
    @classmethod
    def blank_is_root(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class SelectionStatus(BaseModel):
    selected: bool
    id: Optional[str] = None


class LocationRef(BaseModel):
    id: str
    name: str


class ViewLocation(BaseModel):
    """Full ancestry of a view, root first."""
    shareholder: LocationRef
    company: LocationRef
    project: LocationRef
    table: LocationRef
    view: LocationRef

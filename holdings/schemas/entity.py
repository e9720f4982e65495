"""Create/update payloads for hierarchy records."""

from typing import Optional

from pydantic import BaseModel, field_validator


class EntityCreate(BaseModel):
    """Create payload accepted by every level.

    Fields irrelevant to a level (e.g. ``color`` on a company) are ignored.
    """
    name: Optional[str] = None
    folder_id: Optional[str] = None
    cascade: bool = True

    shareholder_id: Optional[str] = None
    company_id: Optional[str] = None
    project_id: Optional[str] = None
    table_id: Optional[str] = None

    color: Optional[str] = None
    view_type: Optional[str] = None

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None

    @field_validator('folder_id', 'shareholder_id', 'company_id', 'project_id', 'table_id')
    @classmethod
    def blank_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class EntityUpdate(BaseModel):
    """Partial update. Only fields present in the request are applied."""
    name: Optional[str] = None
    folder_id: Optional[str] = None
    sort_order: Optional[int] = None
    color: Optional[str] = None
    view_type: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v

    @field_validator('folder_id')
    @classmethod
    def blank_is_root(cls, v: Optional[str]) -> Optional[str]:
        return v or None

"""The fixed five-level hierarchy and its per-level configuration.

Every behavior that differs by level (table, parent reference, folder
type, extra columns, cascade child) is looked up here, so services never
switch on level names themselves.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Type

from .database import Base
from .models.hierarchy import (
    Shareholder,
    Company,
    Project,
    DataTable,
    View,
    DEFAULT_TABLE_COLOR,
    DEFAULT_VIEW_TYPE,
)


class Level(str, Enum):
    """Hierarchy positions, root first."""
    SHAREHOLDER = "shareholder"
    COMPANY = "company"
    PROJECT = "project"
    TABLE = "table"
    VIEW = "view"


class FolderType(str, Enum):
    """Binds a folder to exactly one level (or to the selected-view collection)."""
    SHAREHOLDER = "shareholder_folder"
    COMPANY = "company_folder"
    PROJECT = "project_folder"
    TABLE = "table_folder"
    VIEW = "view_folder"
    SELECTED = "selected_folder"


class ItemKind(str, Enum):
    """Everything that can be moved or reordered."""
    SHAREHOLDER = "shareholder"
    COMPANY = "company"
    PROJECT = "project"
    TABLE = "table"
    VIEW = "view"
    SELECTED = "selected"
    FOLDER = "folder"


@dataclass(frozen=True)
class LevelSpec:
    level: Level
    model: Type[Base]
    route: str
    folder_type: FolderType
    id_prefix: str
    placeholder_name: str
    parent_field: Optional[str] = None
    child: Optional[Level] = None
    # (column, default) pairs copied from create payloads and patchable by update
    extras: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    @property
    def scoped(self) -> bool:
        """True when records and folders of this level belong to a parent record."""
        return self.parent_field is not None


LEVELS: Dict[Level, LevelSpec] = {
    Level.SHAREHOLDER: LevelSpec(
        level=Level.SHAREHOLDER,
        model=Shareholder,
        route="shareholders",
        folder_type=FolderType.SHAREHOLDER,
        id_prefix="sh",
        placeholder_name="New shareholder",
        child=Level.COMPANY,
    ),
    Level.COMPANY: LevelSpec(
        level=Level.COMPANY,
        model=Company,
        route="companies",
        folder_type=FolderType.COMPANY,
        id_prefix="co",
        placeholder_name="New company",
        parent_field="shareholder_id",
        child=Level.PROJECT,
    ),
    Level.PROJECT: LevelSpec(
        level=Level.PROJECT,
        model=Project,
        route="projects",
        folder_type=FolderType.PROJECT,
        id_prefix="pj",
        placeholder_name="New project",
        parent_field="company_id",
        child=Level.TABLE,
    ),
    Level.TABLE: LevelSpec(
        level=Level.TABLE,
        model=DataTable,
        route="tables",
        folder_type=FolderType.TABLE,
        id_prefix="tb",
        placeholder_name="New table",
        parent_field="project_id",
        child=Level.VIEW,
        extras=(("color", DEFAULT_TABLE_COLOR),),
    ),
    Level.VIEW: LevelSpec(
        level=Level.VIEW,
        model=View,
        route="views",
        folder_type=FolderType.VIEW,
        id_prefix="vw",
        placeholder_name="New view",
        parent_field="table_id",
        extras=(("view_type", DEFAULT_VIEW_TYPE),),
    ),
}

# Folder types whose folders are never owned by a parent record.
UNSCOPED_FOLDER_TYPES = frozenset({FolderType.SHAREHOLDER, FolderType.SELECTED})


def level_for_folder_type(folder_type: FolderType) -> Optional[Level]:
    """Level a folder type groups, or None for the selected-view collection."""
    for spec in LEVELS.values():
        if spec.folder_type == folder_type:
            return spec.level
    return None

"""Move and reorder dispatch over the closed set of item kinds.

Each ``ItemKind`` maps to exactly one service; an unknown kind cannot reach
this module because request parsing rejects it.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..exceptions import (
    EntityNotFoundError,
    FolderNotFoundError,
    HoldingsException,
    SelectedViewNotFoundError,
)
from ..levels import ItemKind, Level
from ..schemas.tree import ReorderItem
from .entity_service import EntityService
from .folder_service import FolderService
from .selected_view_service import SelectedViewService


def _not_found(kind: ItemKind, item_id: str) -> HoldingsException:
    if kind is ItemKind.FOLDER:
        return FolderNotFoundError(item_id)
    if kind is ItemKind.SELECTED:
        return SelectedViewNotFoundError(item_id)
    return EntityNotFoundError(kind.value, item_id)


def move_item(db: Session, kind: ItemKind, item_id: str, folder_id: Optional[str]) -> None:
    """File an item into *folder_id* (for folders: make it the new parent).

    Raises the kind's not-found error when *item_id* does not exist.
    """
    if kind is ItemKind.FOLDER:
        moved = FolderService(db).move_folder(item_id, folder_id)
    elif kind is ItemKind.SELECTED:
        moved = SelectedViewService(db).move(item_id, folder_id)
    else:
        moved = EntityService(db, Level(kind.value)).move(item_id, folder_id)
    if not moved:
        raise _not_found(kind, item_id)


def reorder_items(db: Session, kind: ItemKind, items: List[ReorderItem]) -> bool:
    if kind is ItemKind.FOLDER:
        return FolderService(db).reorder(items)
    if kind is ItemKind.SELECTED:
        return SelectedViewService(db).reorder(items)
    return EntityService(db, Level(kind.value)).reorder(items)

"""Data access repositories."""

from .base import BaseRepository, record_to_dict
from .entity_repository import EntityRepository
from .folder_repository import FolderRepository
from .selected_view_repository import SelectedViewRepository

__all__ = [
    "BaseRepository",
    "record_to_dict",
    "EntityRepository",
    "FolderRepository",
    "SelectedViewRepository",
]

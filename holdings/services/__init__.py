"""Business logic services."""

from .entity_service import EntityService
from .folder_service import FolderService
from .selected_view_service import SelectedViewService
from .settings_service import SettingsService

__all__ = ["EntityService", "FolderService", "SelectedViewService", "SettingsService"]

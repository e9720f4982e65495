"""Async client side: REST client, cascading panel controller and settings store."""

from .api_client import HoldingsClient, ApiError, ViewAlreadySelected
from .panels import PanelCascadeController, PanelKey, PanelSlot, first_leaf, find_item_by_id
from .settings_store import SettingsStore

__all__ = [
    "HoldingsClient",
    "ApiError",
    "ViewAlreadySelected",
    "PanelCascadeController",
    "PanelKey",
    "PanelSlot",
    "first_leaf",
    "find_item_by_id",
    "SettingsStore",
]

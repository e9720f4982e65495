"""Cascading panel selection for the five-level drill-down UI.

Panels are chained: selecting a shareholder loads its companies, selecting
a company loads its projects, and so on down to views. The selected-view
panel sits outside the chain. Every step is awaited to completion, so a
caller that awaits ``select_item`` or ``locate_to_view`` observes the
whole chain settled.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .api_client import ViewAlreadySelected

logger = logging.getLogger(__name__)

Item = Dict[str, Any]


class PanelKey(str, Enum):
    SHAREHOLDER = "shareholder"
    COMPANY = "company"
    PROJECT = "project"
    TABLE = "table"
    VIEW = "view"
    SELECTED = "selected"


@dataclass(frozen=True)
class PanelConfig:
    key: PanelKey
    parent: Optional[PanelKey] = None


PANEL_CONFIGS = (
    PanelConfig(PanelKey.SHAREHOLDER),
    PanelConfig(PanelKey.COMPANY, parent=PanelKey.SHAREHOLDER),
    PanelConfig(PanelKey.PROJECT, parent=PanelKey.COMPANY),
    PanelConfig(PanelKey.TABLE, parent=PanelKey.PROJECT),
    PanelConfig(PanelKey.VIEW, parent=PanelKey.TABLE),
    PanelConfig(PanelKey.SELECTED),
)
_CONFIG_BY_KEY = {config.key: config for config in PANEL_CONFIGS}

# Chain walked by locate_to_view before the view itself is selected.
_LOCATE_CHAIN = (PanelKey.SHAREHOLDER, PanelKey.COMPANY, PanelKey.PROJECT, PanelKey.TABLE)


@dataclass
class PanelSlot:
    data: List[Item] = field(default_factory=list)
    selected_item: Optional[Item] = None
    is_loading: bool = False


def first_leaf(items: Iterable[Mapping[str, Any]]) -> Optional[Item]:
    """First non-folder item in depth-first order."""
    for item in items:
        if item.get("type") != "folder":
            return item
        found = first_leaf(item.get("children") or [])
        if found is not None:
            return found
    return None


def find_item_by_id(items: Iterable[Mapping[str, Any]], item_id: str) -> Optional[Item]:
    for item in items:
        if item.get("id") == item_id:
            return item
        found = find_item_by_id(item.get("children") or [], item_id)
        if found is not None:
            return found
    return None


def _chained_child(panel: PanelKey) -> Optional[PanelKey]:
    for config in PANEL_CONFIGS:
        if config.parent == panel:
            return config.key
    return None


class PanelCascadeController:
    """Panel state plus the sequential load/select cascade.

    ``api`` is a ``HoldingsClient`` (or anything with the same coroutine
    methods: list_items, list_selected, get_view_location, select_view,
    unselect_view).
    """

    def __init__(self, api):
        self.api = api
        self.slots: Dict[PanelKey, PanelSlot] = {config.key: PanelSlot() for config in PANEL_CONFIGS}
        self.selected_map: Dict[str, str] = {}  # view_id -> selected id
        self.current_edit_view: Optional[Item] = None
        self._load_tokens: Dict[PanelKey, int] = {config.key: 0 for config in PANEL_CONFIGS}

    async def init(self) -> None:
        await self.load_and_select(PanelKey.SHAREHOLDER, auto_select=True)
        await self.load_and_select(PanelKey.SELECTED, auto_select=True)

    async def load_and_select(self, panel: PanelKey, auto_select: bool = True) -> None:
        """Reload one panel and cascade into the panels chained below it.

        With ``auto_select`` the first leaf becomes the selection; without
        it the previous selection survives only if still present. A load
        overtaken by a newer load of the same panel drops its result.
        """
        config = _CONFIG_BY_KEY[panel]
        slot = self.slots[panel]
        self._load_tokens[panel] += 1
        token = self._load_tokens[panel]
        slot.is_loading = True

        try:
            if config.parent is not None:
                parent_item = self.slots[config.parent].selected_item
                if not parent_item:
                    slot.data = []
                    self._set_selection(panel, None)
                    self._clear_descendants(panel)
                    return
                data = await self.api.list_items(panel.value, parent_item["id"])
            elif panel is PanelKey.SELECTED:
                data = await self.api.list_selected()
            else:
                data = await self.api.list_items(panel.value)

            if token != self._load_tokens[panel]:
                logger.debug("Discarding superseded load", extra={"panel": panel.value})
                return

            slot.data = data
            if panel is PanelKey.SELECTED:
                self._refresh_selected_map(data)

            if auto_select:
                choice = first_leaf(data)
            else:
                previous = slot.selected_item
                choice = find_item_by_id(data, previous["id"]) if previous else None
            self._set_selection(panel, choice)

            child = _chained_child(panel)
            if choice is None:
                self._clear_descendants(panel)
            elif child is not None:
                await self.load_and_select(child, auto_select)
        finally:
            if token == self._load_tokens[panel]:
                slot.is_loading = False

    async def select_item(self, panel: PanelKey, item: Item) -> None:
        """Select *item* and reload the chained panels below it.

        An explicit selection supersedes any load still running on *panel*.
        """
        self._load_tokens[panel] += 1
        self.slots[panel].is_loading = False
        self._set_selection(panel, item)
        child = _chained_child(panel)
        if child is not None:
            await self.load_and_select(child, auto_select=True)

    async def locate_to_view(self, selected_view: Mapping[str, Any]) -> bool:
        """Select the ancestors of a selected view, root first, then the view.

        Returns False (selections untouched) when the location cannot be
        resolved; stops early if an ancestor is missing from its panel.
        """
        location = await self.api.get_view_location(selected_view["view_id"])
        if not location:
            logger.warning("Cannot locate view", extra={"view_id": selected_view.get("view_id")})
            return False

        for panel in _LOCATE_CHAIN:
            ref = location.get(panel.value) or {}
            item = find_item_by_id(self.slots[panel].data, ref.get("id"))
            if item is None:
                logger.warning(
                    "Located item missing from panel",
                    extra={"panel": panel.value, "item_id": ref.get("id")},
                )
                return False
            await self.select_item(panel, item)

        view_ref = location.get(PanelKey.VIEW.value) or {}
        view_item = find_item_by_id(self.slots[PanelKey.VIEW].data, view_ref.get("id"))
        if view_item is None:
            return False
        self.slots[PanelKey.VIEW].selected_item = view_item
        return True

    # -- Selected-view collection --------------------------------------

    def is_view_selected(self, view_id: str) -> bool:
        return view_id in self.selected_map

    def selected_id_for(self, view_id: str) -> Optional[str]:
        return self.selected_map.get(view_id)

    async def toggle_view_selection(self, view_id: str) -> None:
        selected_id = self.selected_id_for(view_id)
        if selected_id:
            await self.api.unselect_view(selected_id)
            self.selected_map.pop(view_id, None)
        else:
            try:
                created = await self.api.select_view(view_id)
                self.selected_map[created["view_id"]] = created["id"]
            except ViewAlreadySelected:
                # Map was stale; the reload below picks up the existing row.
                logger.info("View already selected", extra={"view_id": view_id})
        await self.load_and_select(PanelKey.SELECTED, auto_select=False)

    async def remove_selected_view(self, selected_id: str, view_id: str) -> None:
        await self.api.unselect_view(selected_id)
        self.selected_map.pop(view_id, None)
        await self.load_and_select(PanelKey.SELECTED, auto_select=False)
        if self.current_edit_view and self.current_edit_view.get("id") == selected_id:
            self.current_edit_view = None

    # -- Internals -----------------------------------------------------

    def _set_selection(self, panel: PanelKey, item: Optional[Item]) -> None:
        self.slots[panel].selected_item = item
        if panel is PanelKey.SELECTED:
            self.current_edit_view = item

    def _clear_descendants(self, panel: PanelKey) -> None:
        child = _chained_child(panel)
        while child is not None:
            self.slots[child].data = []
            self.slots[child].selected_item = None
            child = _chained_child(child)

    def _refresh_selected_map(self, items: Iterable[Mapping[str, Any]]) -> None:
        self.selected_map = {}
        stack = list(items)
        while stack:
            item = stack.pop()
            if item.get("type") == "selected":
                self.selected_map[item["view_id"]] = item["id"]
            stack.extend(item.get("children") or [])

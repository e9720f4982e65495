"""UI layout settings with debounced write-back to the server.

Every mutator schedules a save ``save_delay`` seconds later; a mutation
arriving before then cancels the pending save and schedules a new one,
so a burst of changes produces a single write. Mutators must be called
from inside the running event loop.
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Set

import httpx

from .api_client import ApiError
from .panels import PanelKey

logger = logging.getLogger(__name__)

DEFAULT_PANEL_WIDTH = 30
DEFAULT_EDITOR_WIDTH = 70
SAVE_DELAY = 0.5  # seconds

# attribute -> key in the stored settings blob
WIRE_KEYS = {
    "panel_widths": "panelWidths",
    "editor_width": "editorWidth",
    "collapsed_panels": "collapsedPanels",
    "editor_collapsed": "editorCollapsed",
    "display_view_widths": "displayViewWidths",
    "collapsed_display_views": "collapsedDisplayViews",
    "grid_layout": "gridLayout",
    "editor_panels": "editorPanels",
}


class SettingsStore:
    def __init__(self, api, save_delay: float = SAVE_DELAY):
        self.api = api
        self.save_delay = save_delay

        self.panel_widths: Dict[str, float] = {key.value: DEFAULT_PANEL_WIDTH for key in PanelKey}
        self.editor_width: float = DEFAULT_EDITOR_WIDTH
        self.collapsed_panels: Set[str] = set()
        self.editor_collapsed = False
        self.display_view_widths: Dict[str, float] = {}
        self.collapsed_display_views: Set[str] = set()
        self.grid_layout: Optional[Dict[str, Any]] = None
        self.editor_panels: List[Any] = []

        self._pending: Optional[asyncio.Task] = None  # debounce timer, cancellable
        self._writing: Optional[asyncio.Task] = None  # save already sent

    # -- Panels --------------------------------------------------------

    def get_panel_width(self, key: str) -> float:
        return self.panel_widths.get(key, DEFAULT_PANEL_WIDTH)

    def set_panel_width(self, key: str, width: float) -> None:
        self.panel_widths[key] = width
        self.schedule_save()

    def reset_panel_width(self, key: str) -> None:
        self.panel_widths[key] = DEFAULT_PANEL_WIDTH
        self.schedule_save()

    def toggle_panel(self, key: str) -> None:
        if key in self.collapsed_panels:
            self.collapsed_panels.discard(key)
        else:
            self.collapsed_panels.add(key)
        self.schedule_save()

    def is_panel_collapsed(self, key: str) -> bool:
        return key in self.collapsed_panels

    def expand_all_panels(self) -> None:
        self.collapsed_panels.clear()
        self.schedule_save()

    def collapse_all_panels(self, keys: Iterable[str]) -> None:
        self.collapsed_panels.update(keys)
        self.schedule_save()

    # -- Editor --------------------------------------------------------

    def set_editor_width(self, width: float) -> None:
        self.editor_width = width
        self.schedule_save()

    def reset_editor_width(self) -> None:
        self.editor_width = DEFAULT_EDITOR_WIDTH
        self.schedule_save()

    def set_editor_collapsed(self, collapsed: bool) -> None:
        self.editor_collapsed = collapsed
        self.schedule_save()

    def set_display_view_width(self, selected_id: str, width: float) -> None:
        self.display_view_widths[selected_id] = width
        self.schedule_save()

    def toggle_display_view_collapse(self, selected_id: str) -> None:
        if selected_id in self.collapsed_display_views:
            self.collapsed_display_views.discard(selected_id)
        else:
            self.collapsed_display_views.add(selected_id)
        self.schedule_save()

    def set_grid_layout(self, layout: Dict[str, Any]) -> None:
        self.grid_layout = layout
        self.schedule_save()

    def set_editor_panels(self, panels: List[Any]) -> None:
        self.editor_panels = list(panels)
        self.schedule_save()

    # -- Persistence ---------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        """Current settings in stored (JSON) form."""
        values = {
            "panel_widths": dict(self.panel_widths),
            "editor_width": self.editor_width,
            "collapsed_panels": sorted(self.collapsed_panels),
            "editor_collapsed": self.editor_collapsed,
            "display_view_widths": dict(self.display_view_widths),
            "collapsed_display_views": sorted(self.collapsed_display_views),
            "grid_layout": self.grid_layout,
            "editor_panels": list(self.editor_panels),
        }
        return {WIRE_KEYS[name]: value for name, value in values.items()}

    @property
    def save_pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def schedule_save(self) -> None:
        if self.save_pending:
            self._pending.cancel()
        self._pending = asyncio.get_running_loop().create_task(self._save_later())

    async def flush(self) -> None:
        """Write pending changes now and wait until every write has landed."""
        if self.save_pending:
            self._pending.cancel()
            self._pending = None
            await self._wait_for_write()
            await self._save()
        else:
            await self._wait_for_write()

    async def aclose(self) -> None:
        await self.flush()

    async def load(self) -> bool:
        """Merge the stored blob over the defaults. Returns False (defaults kept) on failure."""
        try:
            stored = await self.api.fetch_settings()
        except (ApiError, httpx.HTTPError) as exc:
            logger.warning("Settings load failed, using defaults: %s", exc)
            return False

        if stored.get("panelWidths") is not None:
            self.panel_widths.update(stored["panelWidths"])
        if stored.get("editorWidth") is not None:
            self.editor_width = stored["editorWidth"]
        if stored.get("collapsedPanels") is not None:
            self.collapsed_panels = set(stored["collapsedPanels"])
        if stored.get("editorCollapsed") is not None:
            self.editor_collapsed = bool(stored["editorCollapsed"])
        if stored.get("displayViewWidths") is not None:
            self.display_view_widths.update(stored["displayViewWidths"])
        if stored.get("collapsedDisplayViews") is not None:
            self.collapsed_display_views = set(stored["collapsedDisplayViews"])
        if stored.get("gridLayout") is not None:
            self.grid_layout = stored["gridLayout"]
        if stored.get("editorPanels") is not None:
            self.editor_panels = list(stored["editorPanels"])
        return True

    async def _save_later(self) -> None:
        await asyncio.sleep(self.save_delay)
        # Past this point a new mutation schedules a fresh save instead of cancelling this one.
        self._pending = None
        previous, self._writing = self._writing, asyncio.current_task()
        if previous is not None and not previous.done():
            await previous
        await self._save()

    async def _wait_for_write(self) -> None:
        if self._writing is not None and not self._writing.done():
            await self._writing

    async def _save(self) -> None:
        try:
            await self.api.save_settings(self.snapshot())
        except (ApiError, httpx.HTTPError) as exc:
            logger.error("Saving settings failed: %s", exc)

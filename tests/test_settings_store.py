"""Tests for the debounced settings store."""

import asyncio

from holdings.client.api_client import ApiError
from holdings.client.settings_store import (
    DEFAULT_EDITOR_WIDTH,
    DEFAULT_PANEL_WIDTH,
    SettingsStore,
)

DELAY = 0.01


class FakeApi:
    def __init__(self, stored=None, fail_fetch=False, fail_save=False):
        self.stored = stored or {}
        self.saves = []
        self.fail_fetch = fail_fetch
        self.fail_save = fail_save

    async def fetch_settings(self):
        if self.fail_fetch:
            raise ApiError(500, "DATABASE_ERROR", "down")
        return self.stored

    async def save_settings(self, values):
        if self.fail_save:
            raise ApiError(500, "DATABASE_ERROR", "down")
        self.saves.append(values)


class SlowApi(FakeApi):
    async def save_settings(self, values):
        await asyncio.sleep(DELAY * 5)
        self.saves.append(values)


class TestDebounce:

    def test_burst_writes_once(self):
        api = FakeApi()

        async def scenario():
            store = SettingsStore(api, save_delay=DELAY)
            store.set_panel_width("company", 40)
            store.set_editor_width(55)
            store.toggle_panel("view")
            assert store.save_pending
            await asyncio.sleep(DELAY * 10)
            return store

        store = asyncio.run(scenario())
        assert len(api.saves) == 1
        saved = api.saves[0]
        assert saved["panelWidths"]["company"] == 40
        assert saved["editorWidth"] == 55
        assert saved["collapsedPanels"] == ["view"]
        assert not store.save_pending

    def test_flush_writes_immediately(self):
        api = FakeApi()

        async def scenario():
            store = SettingsStore(api, save_delay=10)
            store.set_grid_layout({"rows": 2, "cols": 2})
            await store.flush()
            assert len(api.saves) == 1
            await store.flush()

        asyncio.run(scenario())
        assert len(api.saves) == 1
        assert api.saves[0]["gridLayout"] == {"rows": 2, "cols": 2}

    def test_aclose_flushes_pending_save(self):
        api = FakeApi()

        async def scenario():
            store = SettingsStore(api, save_delay=10)
            store.toggle_display_view_collapse("sv1")
            await store.aclose()

        asyncio.run(scenario())
        assert api.saves[0]["collapsedDisplayViews"] == ["sv1"]

    def test_nothing_pending_nothing_written(self):
        api = FakeApi()

        async def scenario():
            await SettingsStore(api, save_delay=DELAY).aclose()

        asyncio.run(scenario())
        assert api.saves == []

    def test_aclose_waits_for_save_in_flight(self):
        api = SlowApi()

        async def scenario():
            store = SettingsStore(api, save_delay=DELAY)
            store.set_editor_width(40)
            await asyncio.sleep(DELAY * 3)
            assert not store.save_pending
            assert api.saves == []
            await store.aclose()
            return list(api.saves)

        saved_at_close = asyncio.run(scenario())
        assert [s["editorWidth"] for s in saved_at_close] == [40]

    def test_flush_keeps_writes_in_order(self):
        api = SlowApi()

        async def scenario():
            store = SettingsStore(api, save_delay=DELAY)
            store.set_editor_width(40)
            await asyncio.sleep(DELAY * 3)
            store.set_editor_width(55)
            await store.flush()

        asyncio.run(scenario())
        assert [s["editorWidth"] for s in api.saves] == [40, 55]

    def test_save_failure_is_not_raised(self):
        api = FakeApi(fail_save=True)

        async def scenario():
            store = SettingsStore(api, save_delay=10)
            store.set_editor_width(10)
            await store.flush()

        asyncio.run(scenario())
        assert api.saves == []


class TestLoad:

    def test_merges_stored_over_defaults(self):
        api = FakeApi(stored={
            "panelWidths": {"company": 45},
            "editorWidth": 60,
            "collapsedPanels": ["project"],
            "editorPanels": [{"id": "sv1"}],
        })
        store = SettingsStore(api)
        assert asyncio.run(store.load()) is True

        assert store.get_panel_width("company") == 45
        assert store.get_panel_width("shareholder") == DEFAULT_PANEL_WIDTH
        assert store.editor_width == 60
        assert store.is_panel_collapsed("project")
        assert store.editor_panels == [{"id": "sv1"}]

    def test_failure_keeps_defaults(self):
        store = SettingsStore(FakeApi(fail_fetch=True))
        assert asyncio.run(store.load()) is False
        assert store.editor_width == DEFAULT_EDITOR_WIDTH
        assert store.collapsed_panels == set()

    def test_zero_and_empty_values_are_kept(self):
        store = SettingsStore(FakeApi(stored={
            "panelWidths": {"company": 0},
            "editorWidth": 0,
            "gridLayout": {},
            "displayViewWidths": {},
        }))
        assert asyncio.run(store.load()) is True

        assert store.editor_width == 0
        assert store.grid_layout == {}
        assert store.get_panel_width("company") == 0

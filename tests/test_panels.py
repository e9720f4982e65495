"""Tests for the cascading panel controller against an in-memory fake API."""

import asyncio
import copy

import pytest

from holdings.client.api_client import ApiError, ViewAlreadySelected
from holdings.client.panels import (
    PanelCascadeController,
    PanelKey,
    find_item_by_id,
    first_leaf,
)


def leaf(id, type):
    return {"id": id, "type": type, "name": id}


DATA = {
    ("shareholder", None): [
        {"id": "sf1", "type": "folder", "children": [leaf("sh1", "shareholder")]},
        leaf("sh2", "shareholder"),
        leaf("sh3", "shareholder"),
    ],
    ("company", "sh1"): [leaf("co1", "company")],
    ("company", "sh2"): [leaf("co2", "company")],
    ("project", "co1"): [leaf("pj1", "project")],
    ("project", "co2"): [leaf("pj2", "project")],
    ("table", "pj1"): [leaf("tb1", "table")],
    ("table", "pj2"): [leaf("tb2", "table")],
    ("view", "tb1"): [leaf("vw1", "view")],
    ("view", "tb2"): [leaf("vw2a", "view"), leaf("vw2b", "view")],
}

LOCATIONS = {
    "vw2b": {
        "shareholder": {"id": "sh2", "name": "sh2"},
        "company": {"id": "co2", "name": "co2"},
        "project": {"id": "pj2", "name": "pj2"},
        "table": {"id": "tb2", "name": "tb2"},
        "view": {"id": "vw2b", "name": "vw2b"},
    },
}


class FakeApi:
    def __init__(self):
        self.calls = []
        self.selected = [
            {"id": "sv1", "type": "selected", "view_id": "vw1"},
        ]
        self.unselected = []
        self.fail_level = None
        self.already_selected = False

    async def list_items(self, level, parent_id=None):
        self.calls.append((level, parent_id))
        if level == self.fail_level:
            raise ApiError(500, "DATABASE_ERROR", "boom")
        return copy.deepcopy(DATA.get((level, parent_id), []))

    async def list_selected(self):
        return copy.deepcopy(self.selected)

    async def get_view_location(self, view_id):
        return LOCATIONS.get(view_id)

    async def select_view(self, view_id, folder_id=None):
        if self.already_selected:
            raise ViewAlreadySelected(409, "VIEW_ALREADY_SELECTED", "View is already selected")
        row = {"id": f"sv-{view_id}", "type": "selected", "view_id": view_id}
        self.selected.append(row)
        return row

    async def unselect_view(self, selected_id):
        self.unselected.append(selected_id)
        self.selected = [s for s in self.selected if s["id"] != selected_id]


def selected_ids(controller):
    return {
        key: (slot.selected_item or {}).get("id")
        for key, slot in controller.slots.items()
    }


@pytest.fixture()
def api():
    return FakeApi()


@pytest.fixture()
def controller(api):
    ctrl = PanelCascadeController(api)
    asyncio.run(ctrl.init())
    return ctrl


class TestTreeHelpers:

    def test_first_leaf_is_depth_first(self):
        assert first_leaf(DATA[("shareholder", None)])["id"] == "sh1"

    def test_first_leaf_of_folders_only(self):
        assert first_leaf([{"id": "f", "type": "folder", "children": []}]) is None

    def test_find_item_in_folder(self):
        assert find_item_by_id(DATA[("shareholder", None)], "sh1")["id"] == "sh1"
        assert find_item_by_id(DATA[("shareholder", None)], "nope") is None


class TestInit:

    def test_selects_first_leaf_down_the_chain(self, controller):
        ids = selected_ids(controller)
        assert ids[PanelKey.SHAREHOLDER] == "sh1"
        assert ids[PanelKey.COMPANY] == "co1"
        assert ids[PanelKey.PROJECT] == "pj1"
        assert ids[PanelKey.TABLE] == "tb1"
        assert ids[PanelKey.VIEW] == "vw1"
        assert ids[PanelKey.SELECTED] == "sv1"

    def test_selected_map_and_edit_view(self, controller):
        assert controller.is_view_selected("vw1")
        assert controller.selected_id_for("vw1") == "sv1"
        assert controller.current_edit_view["id"] == "sv1"

    def test_no_panel_left_loading(self, controller):
        assert not any(slot.is_loading for slot in controller.slots.values())


class TestSelectItem:

    def test_cascades_to_new_branch(self, controller):
        asyncio.run(controller.select_item(PanelKey.SHAREHOLDER, leaf("sh2", "shareholder")))
        ids = selected_ids(controller)
        assert ids[PanelKey.COMPANY] == "co2"
        assert ids[PanelKey.VIEW] == "vw2a"
        assert [v["id"] for v in controller.slots[PanelKey.VIEW].data] == ["vw2a", "vw2b"]

    def test_empty_child_clears_descendants(self, controller):
        asyncio.run(controller.select_item(PanelKey.SHAREHOLDER, leaf("sh3", "shareholder")))
        for key in (PanelKey.COMPANY, PanelKey.PROJECT, PanelKey.TABLE, PanelKey.VIEW):
            assert controller.slots[key].data == []
            assert controller.slots[key].selected_item is None
        assert controller.slots[PanelKey.SELECTED].selected_item["id"] == "sv1"

    def test_selecting_view_does_not_load(self, controller, api):
        before = len(api.calls)
        asyncio.run(controller.select_item(PanelKey.VIEW, leaf("vw1", "view")))
        assert len(api.calls) == before


class TestLoadAndSelect:

    def test_parentless_panel_clears_without_request(self, api):
        ctrl = PanelCascadeController(api)
        asyncio.run(ctrl.load_and_select(PanelKey.COMPANY))
        assert api.calls == []
        assert ctrl.slots[PanelKey.COMPANY].data == []

    def test_reload_without_auto_select_keeps_present_selection(self, controller):
        asyncio.run(controller.select_item(PanelKey.SHAREHOLDER, leaf("sh2", "shareholder")))
        controller.slots[PanelKey.VIEW].selected_item = leaf("vw2b", "view")

        asyncio.run(controller.load_and_select(PanelKey.VIEW, auto_select=False))
        assert controller.slots[PanelKey.VIEW].selected_item["id"] == "vw2b"

    def test_reload_without_auto_select_drops_vanished_selection(self, controller):
        controller.slots[PanelKey.VIEW].selected_item = leaf("vw-gone", "view")
        asyncio.run(controller.load_and_select(PanelKey.VIEW, auto_select=False))
        assert controller.slots[PanelKey.VIEW].selected_item is None

    def test_fetch_failure_propagates_and_resets_loading(self, controller, api):
        api.fail_level = "project"
        with pytest.raises(ApiError):
            asyncio.run(controller.select_item(PanelKey.COMPANY, leaf("co2", "company")))
        assert controller.slots[PanelKey.PROJECT].is_loading is False
        assert controller.slots[PanelKey.COMPANY].selected_item["id"] == "co2"
        assert controller.slots[PanelKey.SHAREHOLDER].selected_item["id"] == "sh1"

    def test_superseded_load_is_discarded(self):
        class GatedApi:
            def __init__(self):
                self.gates = []
                self.responses = [[leaf("old", "shareholder")], [leaf("new", "shareholder")]]

            async def list_items(self, level, parent_id=None):
                index = len(self.gates)
                gate = asyncio.Event()
                self.gates.append(gate)
                await gate.wait()
                return self.responses[index]

        async def scenario():
            api = GatedApi()
            ctrl = PanelCascadeController(api)
            first = asyncio.create_task(ctrl.load_and_select(PanelKey.SHAREHOLDER, auto_select=False))
            await asyncio.sleep(0)
            second = asyncio.create_task(ctrl.load_and_select(PanelKey.SHAREHOLDER, auto_select=False))
            await asyncio.sleep(0)
            api.gates[1].set()
            await second
            api.gates[0].set()
            await first
            return ctrl

        ctrl = asyncio.run(scenario())
        slot = ctrl.slots[PanelKey.SHAREHOLDER]
        assert [item["id"] for item in slot.data] == ["new"]
        assert slot.is_loading is False


    def test_explicit_selection_beats_running_load(self):
        async def scenario():
            api = FakeApi()
            gate = asyncio.Event()
            list_items = api.list_items

            async def slow_root(level, parent_id=None):
                if level == "shareholder":
                    await gate.wait()
                return await list_items(level, parent_id)

            api.list_items = slow_root
            ctrl = PanelCascadeController(api)
            loading = asyncio.create_task(ctrl.load_and_select(PanelKey.SHAREHOLDER))
            await asyncio.sleep(0)
            await ctrl.select_item(PanelKey.SHAREHOLDER, leaf("sh2", "shareholder"))
            gate.set()
            await loading
            return ctrl

        ctrl = asyncio.run(scenario())
        ids = selected_ids(ctrl)
        assert ids[PanelKey.SHAREHOLDER] == "sh2"
        assert ids[PanelKey.COMPANY] == "co2"
        assert ids[PanelKey.VIEW] == "vw2a"
        assert ctrl.slots[PanelKey.SHAREHOLDER].is_loading is False


class TestLocateToView:

    def test_selects_every_ancestor(self, controller):
        assert asyncio.run(controller.locate_to_view({"id": "sv9", "view_id": "vw2b"})) is True
        ids = selected_ids(controller)
        assert ids[PanelKey.SHAREHOLDER] == "sh2"
        assert ids[PanelKey.COMPANY] == "co2"
        assert ids[PanelKey.PROJECT] == "pj2"
        assert ids[PanelKey.TABLE] == "tb2"
        assert ids[PanelKey.VIEW] == "vw2b"

    def test_unresolvable_location_leaves_selection(self, controller):
        before = selected_ids(controller)
        assert asyncio.run(controller.locate_to_view({"id": "sv9", "view_id": "vw-missing"})) is False
        assert selected_ids(controller) == before


class TestSelectedViews:

    def test_toggle_removes_selected_view(self, controller, api):
        asyncio.run(controller.toggle_view_selection("vw1"))
        assert api.unselected == ["sv1"]
        assert not controller.is_view_selected("vw1")
        assert controller.current_edit_view is None

    def test_toggle_adds_view(self, controller):
        asyncio.run(controller.toggle_view_selection("vw2a"))
        assert controller.selected_id_for("vw2a") == "sv-vw2a"
        assert controller.slots[PanelKey.SELECTED].selected_item["id"] == "sv1"

    def test_toggle_tolerates_already_selected(self, controller, api):
        api.already_selected = True
        asyncio.run(controller.toggle_view_selection("vw2a"))
        assert not controller.is_view_selected("vw2a")

    def test_remove_current_edit_view(self, controller, api):
        asyncio.run(controller.remove_selected_view("sv1", "vw1"))
        assert api.unselected == ["sv1"]
        assert controller.current_edit_view is None
        assert controller.slots[PanelKey.SELECTED].data == []

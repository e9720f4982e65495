"""Tests for folders, move/reorder, selected views and settings endpoints."""


def make_holder(client, name="Alice"):
    return client.post("/api/shareholders", json={"name": name, "cascade": False}).json()


def make_folder(client, folder_type="shareholder_folder", **extra):
    resp = client.post("/api/folders", json={"type": folder_type, **extra})
    assert resp.status_code == 201
    return resp.json()


def make_view(client):
    holder = client.post("/api/shareholders", json={"name": "Alice"}).json()
    parent_id = holder["id"]
    for route, param in (("companies", "shareholder_id"), ("projects", "company_id"),
                         ("tables", "project_id"), ("views", "table_id")):
        parent_id = client.get(f"/api/{route}", params={param: parent_id}).json()[0]["id"]
    return parent_id


class TestFoldersApi:

    def test_create_and_list(self, client):
        folder = make_folder(client, name="Top")
        assert folder["type"] == "shareholder_folder"
        assert folder["expanded"] is True

        resp = client.get("/api/folders", params={"type": "shareholder_folder"})
        assert [f["id"] for f in resp.json()] == [folder["id"]]

    def test_list_requires_type(self, client):
        assert client.get("/api/folders").status_code == 422

    def test_create_unknown_type_is_422(self, client):
        assert client.post("/api/folders", json={"type": "bogus_folder"}).status_code == 422

    def test_update(self, client):
        folder = make_folder(client)
        resp = client.put(f"/api/folders/{folder['id']}", json={"expanded": False, "name": "Closed"})
        assert resp.status_code == 200
        assert resp.json()["expanded"] is False
        assert resp.json()["name"] == "Closed"

    def test_delete(self, client):
        folder = make_folder(client)
        assert client.delete(f"/api/folders/{folder['id']}").json() == {"success": True}
        resp = client.delete(f"/api/folders/{folder['id']}")
        assert resp.status_code == 404
        assert resp.json()["error"] == "FOLDER_NOT_FOUND"


class TestMoveApi:

    def test_unknown_kind_is_422(self, client):
        resp = client.put("/api/move/widget/x-1", json={"folder_id": None})
        assert resp.status_code == 422

    def test_missing_item_is_404(self, client):
        resp = client.put("/api/move/shareholder/sh-missing", json={"folder_id": None})
        assert resp.status_code == 404

    def test_move_folder_into_descendant_is_400(self, client):
        outer = make_folder(client)
        inner = make_folder(client, parent_id=outer["id"])
        resp = client.put(f"/api/move/folder/{outer['id']}", json={"folder_id": inner["id"]})
        assert resp.status_code == 400
        assert resp.json()["error"] == "VALIDATION_ERROR"

    def test_blank_folder_id_means_root(self, client):
        folder = make_folder(client)
        holder = make_holder(client)
        client.put(f"/api/move/shareholder/{holder['id']}", json={"folder_id": folder["id"]})
        client.put(f"/api/move/shareholder/{holder['id']}", json={"folder_id": ""})
        assert client.get(f"/api/shareholders/{holder['id']}").json()["folder_id"] is None


class TestReorderApi:

    def test_reorder_records(self, client):
        a = make_holder(client, "A")
        b = make_holder(client, "B")
        resp = client.put("/api/reorder", json={
            "type": "shareholder",
            "items": [{"id": a["id"], "sort_order": 2}, {"id": b["id"], "sort_order": 1}],
        })
        assert resp.json() == {"success": True}
        names = [n["name"] for n in client.get("/api/shareholders").json()]
        assert names == ["B", "A"]

    def test_reorder_folders_with_parent(self, client):
        a = make_folder(client, name="A")
        b = make_folder(client, name="B")
        client.put("/api/reorder", json={
            "type": "folder",
            "items": [{"id": b["id"], "sort_order": 1, "parent_id": a["id"]}],
        })
        tree = client.get("/api/shareholders").json()
        assert [n["id"] for n in tree] == [a["id"]]
        assert [n["id"] for n in tree[0]["children"]] == [b["id"]]

    def test_unknown_type_is_422(self, client):
        resp = client.put("/api/reorder", json={"type": "widget", "items": []})
        assert resp.status_code == 422


class TestSelectedApi:

    def test_select_check_and_unselect(self, client):
        view_id = make_view(client)

        resp = client.post("/api/selected", json={"view_id": view_id})
        assert resp.status_code == 201
        selected = resp.json()
        assert selected["type"] == "selected"
        assert selected["view_name"] == "New view"

        check = client.get(f"/api/selected/check/{view_id}").json()
        assert check == {"selected": True, "id": selected["id"]}

        listing = client.get("/api/selected").json()
        assert [n["id"] for n in listing] == [selected["id"]]

        assert client.delete(f"/api/selected/{selected['id']}").json() == {"success": True}
        assert client.get(f"/api/selected/check/{view_id}").json()["selected"] is False

    def test_duplicate_is_409(self, client):
        view_id = make_view(client)
        client.post("/api/selected", json={"view_id": view_id})
        resp = client.post("/api/selected", json={"view_id": view_id})
        assert resp.status_code == 409
        body = resp.json()
        assert body["error"] == "VIEW_ALREADY_SELECTED"
        assert body["message"] == "View is already selected"

    def test_unknown_view_is_404(self, client):
        resp = client.post("/api/selected", json={"view_id": "vw-missing"})
        assert resp.status_code == 404

    def test_view_location(self, client):
        view_id = make_view(client)
        resp = client.get(f"/api/views/{view_id}/location")
        assert resp.status_code == 200
        body = resp.json()
        assert body["shareholder"]["name"] == "Alice"
        assert body["view"]["id"] == view_id

    def test_view_location_missing_is_404(self, client):
        resp = client.get("/api/views/vw-missing/location")
        assert resp.status_code == 404
        assert resp.json()["error"] == "VIEW_LOCATION_NOT_FOUND"


class TestSettingsApi:

    def test_roundtrip(self, client):
        assert client.get("/api/settings").json() == {}

        resp = client.put("/api/settings", json={"editorWidth": 65, "collapsedPanels": ["view"]})
        assert resp.json() == {"success": True}
        client.put("/api/settings", json={"editorWidth": 50})

        assert client.get("/api/settings").json() == {"editorWidth": 50, "collapsedPanels": ["view"]}


class TestTableFlow:

    def test_cascaded_table_moves_in_and_out_of_folder(self, client):
        holder = client.post("/api/shareholders", json={"name": "Alice"}).json()
        company = client.get("/api/companies", params={"shareholder_id": holder["id"]}).json()[0]
        project = client.get("/api/projects", params={"company_id": company["id"]}).json()[0]

        tables = client.get("/api/tables", params={"project_id": project["id"]}).json()
        assert len(tables) == 1
        table = tables[0]

        folder = make_folder(client, "table_folder", owner_id=project["id"])
        resp = client.put(f"/api/move/table/{table['id']}", json={"folder_id": folder["id"]})
        assert resp.json() == {"success": True}
        tree = client.get("/api/tables", params={"project_id": project["id"]}).json()
        assert [n["id"] for n in tree] == [folder["id"]]
        assert [n["id"] for n in tree[0]["children"]] == [table["id"]]

        resp = client.put(f"/api/move/table/{table['id']}", json={"folder_id": None})
        assert resp.status_code == 200
        tree = client.get("/api/tables", params={"project_id": project["id"]}).json()
        root_ids = {n["id"] for n in tree}
        assert root_ids == {folder["id"], table["id"]}
        assert next(n for n in tree if n["id"] == folder["id"])["children"] == []
        assert client.get(f"/api/tables/{table['id']}").json()["folder_id"] is None

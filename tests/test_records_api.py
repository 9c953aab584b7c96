"""
Tests for the record API routes and the SQLite record store.
"""
from concurrent.futures import ThreadPoolExecutor

import pytest

from dripdesk_api.core.config import settings
from dripdesk_api.storage import sqlite_store
from dripdesk_api.storage.sqlite_store import RecordNotFound, RecordStore


class TestRoot:

    def test_welcome(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert "DripDesk" in r.json()["message"]


class TestCrud:

    def test_create_and_get(self, client):
        r = client.post("/api/contacts", json={"first_name": "Jane", "id": "forged"})
        assert r.status_code == 201
        record = r.json()["record"]
        assert record["id"] != "forged"
        assert record["created_at"] == record["updated_at"]

        r = client.get(f"/api/contacts/{record['id']}")
        assert r.status_code == 200
        assert r.json()["record"]["first_name"] == "Jane"

    def test_list_newest_first(self, client):
        first = client.post("/api/clients", json={"name": "First"}).json()["record"]
        client.post("/api/clients", json={"name": "Second"})
        client.put(f"/api/clients/{first['id']}", json={"name": "First, edited"})

        names = [r["name"] for r in client.get("/api/clients").json()["records"]]
        assert names == ["First, edited", "Second"]

    def test_list_filters_by_field(self, client):
        client.post("/api/contacts", json={"client_id": "a", "email": "one@a.test"})
        client.post("/api/contacts", json={"client_id": "b", "email": "two@b.test"})
        records = client.get("/api/contacts", params={"client_id": "b"}).json()["records"]
        assert [r["email"] for r in records] == ["two@b.test"]

    def test_update_merges_fields(self, client):
        created = client.post("/api/campaigns", json={"name": "Spring", "status": "draft"}).json()["record"]
        r = client.put(f"/api/campaigns/{created['id']}", json={"status": "active"})
        assert r.status_code == 200
        record = r.json()["record"]
        assert record["name"] == "Spring" and record["status"] == "active"
        assert record["created_at"] == created["created_at"]
        assert record["updated_at"] >= created["updated_at"]

    def test_delete(self, client):
        created = client.post("/api/templates", json={"name": "Hello"}).json()["record"]
        assert client.delete(f"/api/templates/{created['id']}").status_code == 200
        assert client.get(f"/api/templates/{created['id']}").status_code == 404

    def test_bulk_delete_by_filter(self, client):
        for list_id in ("l1", "l1", "l2"):
            client.post("/api/contact_list_contacts", json={"contact_id": "c1", "contact_list_id": list_id})
        r = client.delete("/api/contact_list_contacts", params={"contact_list_id": "l1"})
        assert r.json()["deleted"] == 2
        assert len(client.get("/api/contact_list_contacts").json()["records"]) == 1


class TestErrors:

    def test_unknown_collection(self, client):
        r = client.get("/api/subscribers")
        assert r.status_code == 404
        assert "subscribers" in r.json()["detail"]

    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    def test_missing_record(self, client, method):
        kwargs = {"json": {"name": "x"}} if method == "put" else {}
        r = getattr(client, method)("/api/clients/does-not-exist", **kwargs)
        assert r.status_code == 404

    def test_bulk_delete_requires_filter(self, client):
        assert client.delete("/api/contacts").status_code == 422

    def test_body_must_be_an_object(self, client):
        assert client.post("/api/clients", json=["not", "an", "object"]).status_code == 422


class TestStore:

    def test_get_missing_raises(self, store):
        with pytest.raises(RecordNotFound):
            store.get("clients", "nope")

    def test_collections_are_separate(self, store):
        store.create("clients", {"name": "Acme"})
        assert store.list("contacts") == []

    def test_delete_where_requires_filters(self, store):
        with pytest.raises(ValueError):
            store.delete_where("contacts", {})

    def test_filters_compare_as_text(self, store):
        store.create("campaigns", {"max_emails_per_day": 50})
        assert len(store.list("campaigns", {"max_emails_per_day": "50"})) == 1


class TestMemoryStore:

    def test_memory_store_keeps_its_table(self):
        store = RecordStore(":memory:")
        try:
            created = store.create("clients", {"name": "Acme"})
            store.update("clients", created["id"], {"website": "acme.test"})
            assert store.get("clients", created["id"])["website"] == "acme.test"
            assert store.delete_where("clients", {"name": "Acme"}) == 1
            assert store.list("clients") == []
        finally:
            store.close()

    def test_memory_url_resolves_to_memory_path(self, monkeypatch):
        monkeypatch.setattr(settings, "DATABASE_URL", "sqlite:///:memory:")
        assert settings.database_path == ":memory:"


class TestGetStore:

    def test_concurrent_first_calls_share_one_store(self, monkeypatch):
        monkeypatch.setattr(settings, "DATABASE_URL", "sqlite:///:memory:")
        monkeypatch.setattr(sqlite_store, "_store", None)
        with ThreadPoolExecutor(max_workers=8) as pool:
            stores = list(pool.map(lambda _: sqlite_store.get_store(), range(16)))
        assert len({id(s) for s in stores}) == 1
        stores[0].close()

"""
Shared pytest fixtures for the DripDesk test suite.
"""
import pytest
from fastapi.testclient import TestClient

from dripdesk_api.main import app
from dripdesk_api.storage.sqlite_store import RecordStore, get_store
from dripdesk_ui.notifications import RecordingNotifier


@pytest.fixture
def store(tmp_path):
    """A fresh SQLite record store per test."""
    return RecordStore(str(tmp_path / "dripdesk-test.db"))


@pytest.fixture
def client(store):
    """FastAPI test client wired to the per-test store."""
    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


class StoreClient:
    """Stands in for dripdesk_ui.api_client, talking to a RecordStore in-process."""

    def __init__(self, store):
        self.store = store

    def list_records(self, collection, **filters):
        return self.store.list(collection, {k: v for k, v in filters.items() if v is not None})

    def get_record(self, collection, record_id):
        return self.store.get(collection, record_id)

    def create_record(self, collection, payload):
        return self.store.create(collection, payload)

    def update_record(self, collection, record_id, payload):
        return self.store.update(collection, record_id, payload)

    def delete_record(self, collection, record_id):
        self.store.delete(collection, record_id)
        return {"status": "success"}

    def delete_where(self, collection, **filters):
        return {"deleted": self.store.delete_where(collection, filters)}


@pytest.fixture
def store_client(store):
    return StoreClient(store)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def seeded(store):
    """Two clients, three contacts, two lists and some memberships."""
    acme = store.create("clients", {"name": "Acme"})
    globex = store.create("clients", {"name": "Globex"})
    jane = store.create("contacts", {"client_id": acme["id"], "first_name": "Jane", "last_name": "Doe",
                                     "email": "jane@acme.test", "company": "Acme"})
    john = store.create("contacts", {"client_id": acme["id"], "first_name": "John", "last_name": "Roe",
                                     "email": "john@acme.test"})
    hank = store.create("contacts", {"client_id": globex["id"], "first_name": "Hank", "last_name": "Scorpio",
                                     "email": "hank@globex.test"})
    vip = store.create("contact_lists", {"client_id": acme["id"], "name": "VIP", "description": "Top accounts"})
    news = store.create("contact_lists", {"client_id": acme["id"], "name": "Newsletter"})
    store.create("contact_list_contacts", {"contact_id": jane["id"], "contact_list_id": vip["id"]})
    store.create("contact_list_contacts", {"contact_id": jane["id"], "contact_list_id": news["id"]})
    store.create("contact_list_contacts", {"contact_id": john["id"], "contact_list_id": news["id"]})
    return {"acme": acme, "globex": globex, "jane": jane, "john": john, "hank": hank, "vip": vip, "news": news}

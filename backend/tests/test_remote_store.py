import pytest
import requests

from gearpos.services import remote_store
from gearpos.services.remote_store import RemoteStoreError, SupabaseRestStore, build_remote_store

from conftest import build_settings


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


@pytest.fixture
def store():
    return SupabaseRestStore("https://demo.supabase.co/", "anon-key-1234", page_size=2, upsert_chunk_size=2)


def test_select_all_pages_until_short_page(monkeypatch, store):
    pages = [[{"id": "a"}, {"id": "b"}], [{"id": "c"}]]
    seen = []

    def fake_request(method, url, **kwargs):
        seen.append((kwargs["params"]["order"], kwargs["params"]["offset"]))
        return FakeResponse(payload=pages.pop(0))

    monkeypatch.setattr(remote_store.requests, "request", fake_request)

    rows = store.select_all("products")

    assert [r["id"] for r in rows] == ["a", "b", "c"]
    assert seen == [("id.asc", 0), ("id.asc", 2)]


def test_upsert_chunks_and_headers(monkeypatch, store):
    sent = []

    def fake_request(method, url, **kwargs):
        sent.append((method, url, kwargs))
        return FakeResponse(status_code=201)

    monkeypatch.setattr(remote_store.requests, "request", fake_request)

    store.upsert("customers", [{"id": "1"}, {"id": "2"}, {"id": "3"}])

    assert len(sent) == 2
    method, url, kwargs = sent[0]
    assert method == "POST"
    assert url == "https://demo.supabase.co/rest/v1/customers"
    assert kwargs["params"] == {"on_conflict": "id"}
    assert kwargs["headers"]["apikey"] == "anon-key-1234"
    assert kwargs["headers"]["Authorization"] == "Bearer anon-key-1234"
    assert "merge-duplicates" in kwargs["headers"]["Prefer"]
    assert sent[1][2]["json"] == [{"id": "3"}]


def test_http_error_is_wrapped(monkeypatch, store):
    monkeypatch.setattr(
        remote_store.requests, "request",
        lambda method, url, **kwargs: FakeResponse(status_code=404, payload={"message": "relation does not exist"}),
    )

    with pytest.raises(RemoteStoreError) as excinfo:
        store.select_all("sale_items")

    assert excinfo.value.status_code == 404
    assert "relation does not exist" in str(excinfo.value)


def test_network_error_is_wrapped(monkeypatch, store):
    def boom(method, url, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(remote_store.requests, "request", boom)

    with pytest.raises(RemoteStoreError):
        store.upsert("products", [{"id": "1"}])


def test_build_remote_store_requires_both_credentials():
    config = {"SYNC_TIMEOUT_SECONDS": 5}
    assert build_remote_store(build_settings(supabase_url="https://x.supabase.co"), config) is None

    built = build_remote_store(build_settings(supabase_url="https://x.supabase.co", supabase_anon_key="k"), config)
    assert isinstance(built, SupabaseRestStore)
    assert built.timeout == 5

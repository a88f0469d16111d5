"""Tests for record store adapters."""

from unittest.mock import MagicMock

import pytest
from requests.exceptions import ConnectionError as RequestsConnectionError

from officeids.config import Settings
from officeids.errors import RecordStoreError
from officeids.store import FirestoreRestStore, InMemoryRecordStore, decode_fields


def response(status_code, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload or {}
    return resp


@pytest.fixture
def session():
    mock_session = MagicMock()
    mock_session.headers = {}
    return mock_session


def make_store(session, **kwargs):
    return FirestoreRestStore(project_id="demo", session=session, backoff=0, **kwargs)


class TestInMemoryRecordStore:

    def test_add_remove(self):
        store = InMemoryRecordStore()
        store.add("GBLO100", {"name": "Office"})
        assert store.exists("GBLO100")
        assert store.read("GBLO100") == {"name": "Office"}
        assert len(store) == 1
        store.remove("GBLO100")
        assert not store.exists("GBLO100")
        assert store.read("GBLO100") is None

    def test_list_all(self):
        store = InMemoryRecordStore.from_ids(["GBLO100", "USNY200"])
        assert sorted(store.list_all()) == ["GBLO100", "USNY200"]

    def test_read_returns_copy(self):
        store = InMemoryRecordStore({"GBLO100": {"name": "Office"}})
        store.read("GBLO100")["name"] = "Changed"
        assert store.read("GBLO100") == {"name": "Office"}


class TestFirestoreRestStore:

    def test_requires_project(self, session):
        with pytest.raises(ValueError, match="project id"):
            FirestoreRestStore(project_id=None, session=session)

    def test_exists_true(self, session):
        session.get.return_value = response(200, {"name": ".../offices/GBLO100", "fields": {}})
        store = make_store(session)
        assert store.exists("GBLO100")
        url = session.get.call_args.args[0]
        assert url.endswith("/projects/demo/databases/(default)/documents/offices/GBLO100")

    def test_exists_false_on_404(self, session):
        session.get.return_value = response(404)
        assert not make_store(session).exists("GBLO100")

    def test_api_key_sent(self, session):
        session.get.return_value = response(404)
        make_store(session, api_key="secret").exists("GBLO100")
        assert session.get.call_args.kwargs["params"]["key"] == "secret"

    def test_auth_token_header(self, session):
        FirestoreRestStore(project_id="demo", session=session, auth_token="tok")
        assert session.headers["Authorization"] == "Bearer tok"

    def test_read_decodes_fields(self, session):
        session.get.return_value = response(200, {"fields": {
            "name": {"stringValue": "Foster + Partners"},
            "founded": {"integerValue": "1967"},
        }})
        assert make_store(session).read("GBLO100") == {"name": "Foster + Partners", "founded": 1967}

    def test_list_all_follows_pages(self, session):
        session.get.side_effect = [
            response(200, {
                "documents": [{"name": "projects/demo/databases/(default)/documents/offices/GBLO100"}],
                "nextPageToken": "abc",
            }),
            response(200, {
                "documents": [{"name": "projects/demo/databases/(default)/documents/offices/USNY200"}],
            }),
        ]
        assert list(make_store(session).list_all()) == ["GBLO100", "USNY200"]
        second_params = session.get.call_args_list[1].kwargs["params"]
        assert second_params["pageToken"] == "abc"

    def test_list_all_empty_collection(self, session):
        session.get.return_value = response(200, {})
        assert list(make_store(session).list_all()) == []

    def test_retries_transient_status(self, session):
        session.get.side_effect = [response(503), response(429), response(200, {"fields": {}})]
        assert make_store(session).exists("GBLO100")
        assert session.get.call_count == 3

    def test_retries_network_errors(self, session):
        session.get.side_effect = [RequestsConnectionError("reset"), response(404)]
        assert not make_store(session).exists("GBLO100")

    def test_gives_up_after_retries(self, session):
        session.get.return_value = response(503)
        with pytest.raises(RecordStoreError, match="after 2 attempts"):
            make_store(session, retries=2).exists("GBLO100")
        assert session.get.call_count == 2

    def test_client_error_not_retried(self, session):
        session.get.return_value = response(403)
        with pytest.raises(RecordStoreError, match="403"):
            make_store(session).exists("GBLO100")
        assert session.get.call_count == 1

    def test_from_settings(self, session):
        settings = Settings(firestore_project_id="proj", firestore_api_key="k", collection="firms")
        store = FirestoreRestStore.from_settings(settings, session=session)
        assert store.collection_url.endswith("/projects/proj/databases/(default)/documents/firms")
        assert store.api_key == "k"


class TestDecodeFields:

    def test_nested_values(self):
        fields = {
            "location": {"mapValue": {"fields": {
                "headquarters": {"mapValue": {"fields": {
                    "city": {"stringValue": "London"},
                }}},
            }}},
            "tags": {"arrayValue": {"values": [{"stringValue": "a"}, {"booleanValue": True}]}},
            "rating": {"doubleValue": 4.5},
            "closed": {"nullValue": None},
        }
        assert decode_fields(fields) == {
            "location": {"headquarters": {"city": "London"}},
            "tags": ["a", True],
            "rating": 4.5,
            "closed": None,
        }

"""Tests for the event and subscription stores."""

import json
from types import SimpleNamespace

import pytest

from energy_events.errors import ConfigurationError, PersistenceError
from energy_events.indexers import JSONEventStore, SubscriptionStore, get_store
from energy_events.indexers import algolia
from energy_events.indexers.algolia import AlgoliaEventStore


class TestJSONEventStore:
    """Tests for the local JSON store."""

    def test_upsert_is_idempotent(self, event_store, make_event):
        event = make_event()
        event_store.upsert([event])
        event_store.upsert([event])
        assert event_store.stats()["num_records"] == 1

    def test_upsert_keeps_first_created_at(self, event_store, make_event):
        event_store.upsert([make_event(created_at="2025-06-01T09:00:00")])
        event_store.upsert([make_event(created_at="2025-06-02T09:00:00")])
        assert event_store.all_events()[0].created_at == "2025-06-01T09:00:00"

    def test_query_orders_by_date_undated_last(self, event_store, make_event):
        event_store.upsert([
            make_event("Undated Forum", date=None),
            make_event("Late Summit", date="2025-09-01"),
            make_event("Early Summit", date="2025-06-05"),
        ])
        titles = [e.title for e in event_store.query()]
        assert titles == ["Early Summit", "Late Summit", "Undated Forum"]

    def test_query_source_and_limit(self, event_store, make_event):
        event_store.upsert([
            make_event("A1", source="alpha", date="2025-06-05"),
            make_event("A2", source="alpha", date="2025-06-06"),
            make_event("B1", source="bravo", date="2025-06-04"),
        ])
        assert [e.title for e in event_store.query(source="alpha")] == ["A1", "A2"]
        assert [e.title for e in event_store.query(limit=1)] == ["B1"]

    def test_persists_to_disk(self, tmp_path, make_event):
        path = tmp_path / "events.json"
        JSONEventStore(path).upsert([make_event()])
        reloaded = JSONEventStore(path)
        assert [e.title for e in reloaded.all_events()] == ["Grid Modernization Forum"]

        data = json.loads(path.read_text())
        assert "createdAt" in data["events"][0]

    def test_skips_malformed_records(self, tmp_path, make_event):
        path = tmp_path / "events.json"
        good = make_event().to_record()
        bad = {**make_event("Broken").to_record(), "date": "someday"}
        path.write_text(json.dumps({"events": [good, bad]}))
        assert [e.title for e in JSONEventStore(path).all_events()] == ["Grid Modernization Forum"]

    def test_corrupt_file_raises_on_first_use(self, tmp_path, make_event):
        path = tmp_path / "events.json"
        path.write_text("{not json")
        store = JSONEventStore(path)
        with pytest.raises(PersistenceError):
            store.all_events()
        with pytest.raises(PersistenceError):
            store.upsert([make_event()])

    def test_non_object_file_raises(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text("[]")
        with pytest.raises(PersistenceError):
            JSONEventStore(path).query()

    def test_clear_overwrites_corrupt_file(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text("{not json")
        assert JSONEventStore(path).clear() == 0
        assert JSONEventStore(path).all_events() == []

    def test_clear(self, event_store, make_event):
        event_store.upsert([make_event("A"), make_event("B")])
        assert event_store.clear() == 2
        assert event_store.all_events() == []


class TestSubscriptionStore:
    """Tests for email subscriptions."""

    def test_subscribe_normalizes_email(self, subscription_store):
        subscription = subscription_store.subscribe("  Reader@Example.ORG ")
        assert subscription.email == "reader@example.org"

    def test_subscribe_upserts(self, subscription_store):
        subscription_store.subscribe("reader@example.org")
        subscription_store.subscribe("READER@example.org")
        assert len(subscription_store.active()) == 1

    def test_unsubscribe(self, tmp_path):
        path = tmp_path / "subscriptions.json"
        store = SubscriptionStore(path)
        store.subscribe("reader@example.org")
        assert store.unsubscribe("Reader@example.org")
        assert not store.unsubscribe("nobody@example.org")
        assert SubscriptionStore(path).active() == []

    def test_resubscribe_reactivates(self, subscription_store):
        subscription_store.subscribe("reader@example.org")
        subscription_store.unsubscribe("reader@example.org")
        subscription_store.subscribe("reader@example.org")
        assert [s.email for s in subscription_store.active()] == ["reader@example.org"]

    @pytest.mark.parametrize("email", ["", "no-at-sign", "@example.org", "reader@"])
    def test_invalid_email(self, subscription_store, email):
        with pytest.raises(ValueError):
            subscription_store.subscribe(email)


class FakeAlgoliaClient:
    """Records calls made by AlgoliaEventStore."""

    def __init__(self, hits=None):
        self.hits = hits or []
        self.batches = []
        self.searches = []
        self.settings = None
        self.cleared = False

    def batch(self, index_name, body):
        self.batches.append(body["requests"])
        return SimpleNamespace(task_id=len(self.batches))

    def search_single_index(self, index_name, params):
        self.searches.append(params)
        return SimpleNamespace(hits=self.hits, nb_hits=len(self.hits))

    def set_settings(self, index_name, settings):
        self.settings = settings

    def clear_objects(self, index_name):
        self.cleared = True


class TestAlgoliaEventStore:
    """Tests for the Algolia-backed store with a fake client."""

    def test_upsert_batches(self, make_event):
        client = FakeAlgoliaClient()
        store = AlgoliaEventStore(client=client, index_name="test_events")
        events = [make_event(f"Energy Talk {i}") for i in range(250)]
        assert store.upsert(events) == 250
        assert [len(batch) for batch in client.batches] == [100, 100, 50]

    def test_records_use_event_id(self, make_event):
        client = FakeAlgoliaClient()
        event = make_event()
        AlgoliaEventStore(client=client, index_name="test_events").upsert([event])
        body = client.batches[0][0].body
        assert body["objectID"] == event.id
        assert body["dateTimestamp"] == event.date_timestamp

    def test_query_filters_and_sorts(self, make_event):
        hits = [
            make_event("Late", date="2025-09-01", source="alpha").to_algolia_record(),
            make_event("Early", date="2025-06-05", source="alpha").to_algolia_record(),
        ]
        client = FakeAlgoliaClient(hits=hits)
        events = AlgoliaEventStore(client=client, index_name="test_events").query(source="alpha", limit=10)
        assert [e.title for e in events] == ["Early", "Late"]
        assert client.searches[0]["filters"] == 'source:"alpha"'
        assert client.searches[0]["hitsPerPage"] == 10

    def test_configure(self):
        client = FakeAlgoliaClient()
        AlgoliaEventStore(client=client, index_name="test_events").configure()
        assert client.settings["customRanking"] == ["asc(dateTimestamp)"]

    def test_backend_errors_wrapped(self):
        class FailingClient(FakeAlgoliaClient):
            def search_single_index(self, index_name, params):
                raise RuntimeError("unreachable")

        store = AlgoliaEventStore(client=FailingClient(), index_name="test_events")
        with pytest.raises(PersistenceError):
            store.query()

    def test_client_is_built_on_first_use(self, monkeypatch):
        monkeypatch.setattr(algolia, "ALGOLIA_APP_ID", None)
        monkeypatch.setattr(algolia, "ALGOLIA_API_KEY", None)
        store = AlgoliaEventStore(index_name="test_events")
        with pytest.raises(ConfigurationError):
            store.query()

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.setattr(algolia, "ALGOLIA_APP_ID", None)
        monkeypatch.setattr(algolia, "ALGOLIA_API_KEY", None)
        with pytest.raises(ConfigurationError):
            algolia.get_algolia_client()


class TestGetStore:
    """Tests for backend selection."""

    def test_unknown_backend(self):
        with pytest.raises(ConfigurationError):
            get_store("postgres")

    def test_json_backend(self, monkeypatch, tmp_path):
        monkeypatch.setattr("energy_events.indexers.json_store.EVENTS_STORE_PATH", tmp_path / "e.json")
        store = get_store("json")
        assert isinstance(store, JSONEventStore)
        assert store.store_path == tmp_path / "e.json"

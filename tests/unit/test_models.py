"""Tests for event models and identity."""

import pytest

from energy_events.models import CandidateEvent, PersistedEvent, event_id


def candidate(**overrides) -> CandidateEvent:
    fields = {
        "title": "Grid Modernization Forum",
        "date": "2025-06-10",
        "host": "Test Energy Council",
        "link": "https://example.org/events/grid",
        "source": "test-source",
    }
    fields.update(overrides)
    return CandidateEvent(**fields)


class TestEventId:
    """Tests for stable event identity."""

    def test_same_event_same_id(self):
        assert event_id("a", "Grid Forum", "2025-06-10", "Host") == event_id(" A", "grid forum ", "2025-06-10", "HOST")

    def test_date_changes_id(self):
        assert event_id("a", "Grid Forum", "2025-06-10", "Host") != event_id("a", "Grid Forum", "2025-06-11", "Host")

    def test_persist_assigns_id(self):
        event = candidate().persist("2025-06-01T09:00:00")
        assert event.id == event_id("test-source", "Grid Modernization Forum", "2025-06-10", "Test Energy Council")
        assert len(event.id) == 16


class TestCandidateEvent:
    """Tests for candidate validation."""

    @pytest.mark.parametrize("field", ["title", "link"])
    def test_required_text(self, field):
        with pytest.raises(ValueError):
            candidate(**{field: "   "})

    @pytest.mark.parametrize("value", ["March 5", "2025-02-30", "05/03/2025"])
    def test_date_must_be_canonical(self, value):
        with pytest.raises(ValueError):
            candidate(date=value)

    def test_empty_date_is_none(self):
        assert candidate(date="").date is None

    def test_defaults(self):
        event = candidate()
        assert event.location == "Washington DC"
        assert event.description == ""


class TestPersistedEvent:
    """Tests for stored record shapes."""

    def test_record_round_trip(self):
        event = candidate().persist("2025-06-01T09:00:00")
        record = event.to_record()
        assert record["createdAt"] == "2025-06-01T09:00:00"
        assert PersistedEvent.from_record(record) == event

    def test_algolia_record_drops_empty_values(self):
        record = candidate(date=None).persist("2025-06-01T09:00:00").to_algolia_record()
        assert record["objectID"] == record["id"]
        assert "date" not in record
        assert "dateTimestamp" not in record
        assert "description" not in record

"""Shared test fixtures and configuration."""

from datetime import datetime
from typing import Optional

import pytest

from energy_events.indexers import JSONEventStore, SubscriptionStore
from energy_events.models import CandidateEvent, PersistedEvent
from energy_events.sources import SourceConfig


@pytest.fixture
def fixed_now() -> datetime:
    """Reference "now" used across date-sensitive tests."""
    return datetime(2025, 6, 1, 9, 0)


@pytest.fixture
def source_config() -> SourceConfig:
    """A card-grid source with a full selector set."""
    return SourceConfig(
        slug="test-source",
        host="Test Energy Council",
        base_url="https://example.org/events/",
        candidate_selectors=[".event-card"],
        title_selectors=["h3 a", "h3"],
        date_selectors=[".date"],
        location_selectors=[".venue"],
        description_selectors=["p"],
    )


@pytest.fixture
def make_event():
    """Factory for persisted events with sensible defaults."""
    def _make(
        title: str = "Grid Modernization Forum",
        date: Optional[str] = "2025-06-10",
        source: str = "test-source",
        host: str = "Test Energy Council",
        description: str = "",
        category: Optional[str] = None,
        location: str = "Washington DC",
        created_at: str = "2025-06-01T09:00:00",
    ) -> PersistedEvent:
        slug = title.lower().replace(" ", "-")
        return CandidateEvent(
            title=title,
            date=date,
            location=location,
            host=host,
            link=f"https://example.org/events/{slug}",
            source=source,
            description=description,
            category=category,
        ).persist(created_at)

    return _make


@pytest.fixture
def event_store(tmp_path) -> JSONEventStore:
    return JSONEventStore(tmp_path / "events.json")


@pytest.fixture
def subscription_store(tmp_path) -> SubscriptionStore:
    return SubscriptionStore(tmp_path / "subscriptions.json")

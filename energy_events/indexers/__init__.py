"""Event stores: local JSON file (default) or Algolia index."""

from typing import Optional

from energy_events.config import EVENTS_STORE
from energy_events.errors import ConfigurationError
from energy_events.indexers.json_store import JSONEventStore, SubscriptionStore


def get_store(backend: Optional[str] = None, index_name: Optional[str] = None):
    """Build the configured event store ("json" or "algolia")."""
    backend = (backend or EVENTS_STORE).lower()
    if backend == "json":
        return JSONEventStore()
    if backend == "algolia":
        from energy_events.indexers.algolia import AlgoliaEventStore

        return AlgoliaEventStore(index_name=index_name)
    raise ConfigurationError(f"Unknown EVENTS_STORE backend: {backend!r}")


__all__ = ["get_store", "JSONEventStore", "SubscriptionStore"]

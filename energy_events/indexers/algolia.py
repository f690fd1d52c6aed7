"""Algolia-backed event store."""

from typing import Optional

from algoliasearch.search.client import SearchClientSync
from algoliasearch.search.models.action import Action
from algoliasearch.search.models.batch_request import BatchRequest
from algoliasearch.search.models.browse_params_object import BrowseParamsObject
from pydantic import ValidationError
from rich.console import Console

from energy_events.config import ALGOLIA_API_KEY, ALGOLIA_APP_ID, ALGOLIA_INDEX_NAME
from energy_events.errors import ConfigurationError, PersistenceError
from energy_events.indexers.json_store import sort_key
from energy_events.models import PersistedEvent

console = Console()


def get_algolia_client(
    app_id: Optional[str] = None,
    api_key: Optional[str] = None,
) -> SearchClientSync:
    """Get Algolia client from arguments or environment variables."""
    app_id = app_id or ALGOLIA_APP_ID
    api_key = api_key or ALGOLIA_API_KEY

    if not app_id or not api_key:
        raise ConfigurationError(
            "ALGOLIA_APP_ID and ALGOLIA_API_KEY must be set in environment"
        )

    return SearchClientSync(app_id, api_key)


def hit_to_event(hit) -> Optional[PersistedEvent]:
    """Convert a search/browse hit to an event, None if it no longer validates."""
    record = hit.to_dict() if hasattr(hit, "to_dict") else dict(hit)
    try:
        return PersistedEvent.from_record(record)
    except ValidationError:
        return None


class AlgoliaEventStore:
    """Events stored as Algolia records, objectID = event id."""

    def __init__(
        self,
        client: Optional[SearchClientSync] = None,
        index_name: Optional[str] = None,
        batch_size: int = 100,
    ):
        self._client = client
        self.index_name = index_name or ALGOLIA_INDEX_NAME
        self.batch_size = batch_size

    @property
    def client(self) -> SearchClientSync:
        """Client built from environment credentials on first use."""
        if self._client is None:
            self._client = get_algolia_client()
        return self._client

    def configure(self) -> None:
        """Configure index settings for event browsing."""
        console.print(f"[cyan]Configuring index '{self.index_name}'...[/cyan]")

        settings = {
            "searchableAttributes": [
                "title",
                "description",
                "host",
                "location",
            ],
            "attributesForFaceting": [
                "searchable(source)",
                "searchable(category)",
                "searchable(host)",
                "filterOnly(dateTimestamp)",
            ],
            # Soonest events first
            "customRanking": ["asc(dateTimestamp)"],
            "attributesToRetrieve": ["*"],
            "hitsPerPage": 50,
            "paginationLimitedTo": 1000,
        }

        client = self.client
        try:
            client.set_settings(self.index_name, settings)
        except Exception as e:
            raise PersistenceError(f"Failed to configure '{self.index_name}': {e}") from e

        console.print(f"[green]Index '{self.index_name}' configured successfully[/green]")

    def upsert(self, events: list[PersistedEvent]) -> int:
        """Upsert events in batches. Existing objectIDs are updated in place.

        Returns:
            Number of records written.
        """
        console.print(f"[cyan]Indexing {len(events)} events to '{self.index_name}'...[/cyan]")

        client = self.client
        records = [event.to_algolia_record() for event in events]
        total_indexed = 0

        for i in range(0, len(records), self.batch_size):
            batch = records[i : i + self.batch_size]
            # Full replace: createdAt is the latest ingestion, not the first
            requests = [
                BatchRequest(action=Action.UPDATEOBJECT, body=record)
                for record in batch
            ]

            try:
                response = client.batch(self.index_name, {"requests": requests})
            except Exception as e:
                raise PersistenceError(f"Failed to index batch into '{self.index_name}': {e}") from e

            total_indexed += len(batch)
            console.print(
                f"  [dim]Indexed batch {i // self.batch_size + 1}: "
                f"{len(batch)} records (task: {response.task_id})[/dim]"
            )

        console.print(f"[green]Indexed {total_indexed} events successfully[/green]")
        return total_indexed

    def query(self, source: Optional[str] = None, limit: int = 50) -> list[PersistedEvent]:
        """Events ordered by date ascending, optionally filtered by source."""
        params: dict = {"query": "", "hitsPerPage": limit or 1000}
        if source:
            params["filters"] = f'source:"{source}"'

        client = self.client
        try:
            response = client.search_single_index(self.index_name, params)
        except Exception as e:
            raise PersistenceError(f"Failed to query '{self.index_name}': {e}") from e

        events = [event for event in map(hit_to_event, response.hits) if event]
        events.sort(key=sort_key)
        return events

    def all_events(self) -> list[PersistedEvent]:
        """Browse the entire index."""
        events: list[PersistedEvent] = []

        def aggregator(response):
            for hit in response.hits:
                event = hit_to_event(hit)
                if event:
                    events.append(event)

        client = self.client
        try:
            client.browse_objects(
                self.index_name,
                aggregator,
                BrowseParamsObject(hits_per_page=1000),
            )
        except Exception as e:
            raise PersistenceError(f"Failed to browse '{self.index_name}': {e}") from e

        events.sort(key=sort_key)
        return events

    def clear(self) -> int:
        """Clear all records from the index (use with caution)."""
        count = self.stats().get("num_records", 0)
        console.print(f"[yellow]Clearing index '{self.index_name}'...[/yellow]")
        client = self.client
        try:
            client.clear_objects(self.index_name)
        except Exception as e:
            raise PersistenceError(f"Failed to clear '{self.index_name}': {e}") from e
        console.print(f"[green]Index '{self.index_name}' cleared[/green]")
        return count

    def stats(self) -> dict:
        """Get statistics about the index."""
        client = self.client
        try:
            response = client.search_single_index(
                self.index_name,
                {"query": "", "hitsPerPage": 0},
            )
        except Exception as e:
            raise PersistenceError(f"Failed to read stats for '{self.index_name}': {e}") from e
        return {
            "backend": "algolia",
            "location": self.index_name,
            "num_records": response.nb_hits,
        }

"""Local JSON file store for events and email subscriptions."""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from rich.console import Console

from energy_events.config import EVENTS_STORE_PATH, SUBSCRIPTIONS_PATH
from energy_events.errors import PersistenceError
from energy_events.models import PersistedEvent, Subscription

console = Console()


def sort_key(event: PersistedEvent) -> tuple[int, str]:
    # Undated events go last, like NULLS LAST in the hosted store
    return (0, event.date) if event.date else (1, "")


class JSONEventStore:
    """Events keyed by id in a single JSON file."""

    def __init__(self, store_path: Optional[Path] = None):
        self.store_path = Path(store_path or EVENTS_STORE_PATH)
        self._cache: Optional[dict[str, PersistedEvent]] = None

    @property
    def _events(self) -> dict[str, PersistedEvent]:
        """Events by id, read from disk on first access."""
        if self._cache is None:
            self._cache = self._load()
        return self._cache

    def _load(self) -> dict[str, PersistedEvent]:
        """Load store from disk, skipping records that no longer validate."""
        events: dict[str, PersistedEvent] = {}
        if not self.store_path.exists():
            return events
        try:
            with open(self.store_path) as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise PersistenceError(f"Failed to read {self.store_path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"Failed to read {self.store_path}: not an event store")

        skipped = 0
        for record in data.get("events", []):
            try:
                event = PersistedEvent.from_record(record)
            except ValidationError:
                skipped += 1
                continue
            events[event.id] = event

        if skipped:
            console.print(f"[yellow]Skipped {skipped} malformed stored events[/yellow]")
        return events

    def _save(self) -> None:
        """Save store to disk."""
        try:
            self.store_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.store_path, "w") as f:
                json.dump({
                    "updated_at": datetime.now().timestamp(),
                    "events": [event.to_record() for event in self._events.values()],
                }, f, indent=2)
        except OSError as e:
            raise PersistenceError(f"Failed to write {self.store_path}: {e}") from e

    def upsert(self, events: list[PersistedEvent]) -> int:
        """Insert or update events by id. created_at of existing rows is kept.

        Returns:
            Number of events written
        """
        for event in events:
            existing = self._events.get(event.id)
            if existing:
                event = event.model_copy(update={"created_at": existing.created_at})
            self._events[event.id] = event
        self._save()
        return len(events)

    def query(self, source: Optional[str] = None, limit: int = 50) -> list[PersistedEvent]:
        """Stored events ordered by date ascending, optionally for one source."""
        events = [
            event for event in self._events.values()
            if not source or event.source == source
        ]
        events.sort(key=sort_key)
        return events[:limit] if limit else events

    def all_events(self) -> list[PersistedEvent]:
        return self.query(limit=0)

    def clear(self) -> int:
        """Remove every event. An unreadable file is overwritten."""
        try:
            count = len(self._events)
        except PersistenceError as e:
            console.print(f"[yellow]{e}, overwriting[/yellow]")
            count = 0
        self._cache = {}
        self._save()
        return count

    def stats(self) -> dict:
        by_source: dict[str, int] = {}
        for event in self._events.values():
            by_source[event.source] = by_source.get(event.source, 0) + 1
        return {
            "backend": "json",
            "location": str(self.store_path),
            "num_records": len(self._events),
            "by_source": by_source,
        }


class SubscriptionStore:
    """Email subscriptions keyed by address in a JSON file."""

    def __init__(self, store_path: Optional[Path] = None):
        self.store_path = Path(store_path or SUBSCRIPTIONS_PATH)
        self._subscriptions: dict[str, Subscription] = {}
        self._load()

    def _load(self) -> None:
        if not self.store_path.exists():
            return
        try:
            with open(self.store_path) as f:
                data = json.load(f)
            for record in data.get("subscriptions", []):
                subscription = Subscription.model_validate(record)
                self._subscriptions[subscription.email] = subscription
        except (json.JSONDecodeError, OSError, ValidationError) as e:
            raise PersistenceError(f"Failed to read {self.store_path}: {e}") from e

    def _save(self) -> None:
        try:
            self.store_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.store_path, "w") as f:
                json.dump({
                    "updated_at": datetime.now().timestamp(),
                    "subscriptions": [s.model_dump() for s in self._subscriptions.values()],
                }, f, indent=2)
        except OSError as e:
            raise PersistenceError(f"Failed to write {self.store_path}: {e}") from e

    def subscribe(self, email: str) -> Subscription:
        """Add or reactivate a subscription."""
        subscription = Subscription(email=email)
        self._subscriptions[subscription.email] = subscription
        self._save()
        return subscription

    def unsubscribe(self, email: str) -> bool:
        """Deactivate a subscription. Returns False if unknown."""
        key = email.strip().lower()
        if key not in self._subscriptions:
            return False
        self._subscriptions[key].active = False
        self._save()
        return True

    def active(self) -> list[Subscription]:
        return [s for s in self._subscriptions.values() if s.active]

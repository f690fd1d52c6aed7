"""Data models for the events pipeline."""

from energy_events.models.event import (
    CandidateEvent,
    PersistedEvent,
    FeedFilter,
    event_id,
    is_iso_date,
)
from energy_events.models.subscription import Subscription

__all__ = [
    "CandidateEvent",
    "PersistedEvent",
    "FeedFilter",
    "event_id",
    "is_iso_date",
    "Subscription",
]

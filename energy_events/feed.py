"""Feed view: the filtered, deduplicated, sorted events shown to consumers.

Steps, in order:
1. Future filter (date >= today; dateless or malformed dates are dropped)
2. Source and category filters
3. Free-text search over title, description, host, location
4. Inclusive date range
5. Dedupe by (title, date, host), first occurrence wins
6. Stable ascending sort by date
"""

from datetime import date, datetime
from typing import Optional, TypeVar

from energy_events.models import CandidateEvent, FeedFilter

E = TypeVar("E", bound=CandidateEvent)

ALL = "all"


def parse_event_date(event: CandidateEvent) -> Optional[date]:
    """Event date as a date object, None if missing or malformed."""
    if not event.date:
        return None
    try:
        return date.fromisoformat(event.date)
    except (TypeError, ValueError):
        return None


def filter_future(events: list[E], now: Optional[datetime] = None) -> list[E]:
    """Keep events on or after today. Undated events can't be future-checked."""
    today = (now or datetime.now()).date()
    kept = []
    for event in events:
        event_date = parse_event_date(event)
        if event_date is not None and event_date >= today:
            kept.append(event)
    return kept


def matches_attributes(event: CandidateEvent, feed_filter: FeedFilter) -> bool:
    """Source and category filters; "all" disables a filter."""
    if feed_filter.source and feed_filter.source != ALL and event.source != feed_filter.source:
        return False
    if feed_filter.category and feed_filter.category != ALL:
        if (event.category or "").lower() != feed_filter.category.lower():
            return False
    return True


def matches_search(event: CandidateEvent, search_term: str) -> bool:
    """Case-insensitive substring match on any searchable field."""
    term = (search_term or "").strip().lower()
    if not term:
        return True
    fields = (event.title, event.description, event.host, event.location)
    return any(term in (value or "").lower() for value in fields)


def in_date_range(event: CandidateEvent, start_date: Optional[str], end_date: Optional[str]) -> bool:
    """Inclusive range check on YYYY-MM-DD strings."""
    if not start_date and not end_date:
        return True
    event_date = parse_event_date(event)
    if event_date is None:
        return False
    if start_date and event_date < date.fromisoformat(start_date):
        return False
    if end_date and event_date > date.fromisoformat(end_date):
        return False
    return True


def dedupe_events(events: list[E]) -> list[E]:
    """Keep the first event per (title, date, host), across all sources."""
    seen: set[tuple[str, Optional[str], str]] = set()
    unique = []
    for event in events:
        key = (event.title, event.date, event.host)
        if key in seen:
            continue
        seen.add(key)
        unique.append(event)
    return unique


def sort_by_date(events: list[E]) -> list[E]:
    """Earliest first; ties keep their original order."""
    return sorted(events, key=lambda event: parse_event_date(event) or date.max)


def render_feed(
    events: list[E],
    feed_filter: Optional[FeedFilter] = None,
    now: Optional[datetime] = None,
) -> list[E]:
    """Apply the full feed pipeline to a list of events."""
    feed_filter = feed_filter or FeedFilter()

    feed = filter_future(events, now)
    feed = [event for event in feed if matches_attributes(event, feed_filter)]
    feed = [event for event in feed if matches_search(event, feed_filter.search_term)]
    feed = [
        event for event in feed
        if in_date_range(event, feed_filter.start_date, feed_filter.end_date)
    ]
    feed = dedupe_events(feed)
    return sort_by_date(feed)

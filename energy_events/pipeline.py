"""Aggregation run: scrape every source concurrently and merge the results."""

import asyncio
from datetime import datetime, timedelta
from typing import Optional

import httpx
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn
from rich.table import Table

from energy_events.config import SCRAPE_MAX_CONCURRENT
from energy_events.extractors.source import extract_source
from energy_events.models import CandidateEvent, PersistedEvent
from energy_events.sources import SourceConfig, get_sources

console = Console()

PLACEHOLDER_SOURCE = "sample"
PLACEHOLDER_HOST = "DC Energy Events"


def placeholder_events(now: Optional[datetime] = None) -> list[PersistedEvent]:
    """Clearly labeled sample events for when no source returned anything."""
    now = now or datetime.now()
    created_at = now.isoformat(timespec="seconds")
    samples = [
        CandidateEvent(
            title="[Sample] Clean Energy Policy Briefing",
            date=(now + timedelta(days=7)).date().isoformat(),
            time="10:00 AM",
            location="Washington DC",
            host=PLACEHOLDER_HOST,
            link="https://example.com/sample/clean-energy-briefing",
            source=PLACEHOLDER_SOURCE,
            description="Sample listing shown while live sources are unavailable.",
            category="Briefing",
        ),
        CandidateEvent(
            title="[Sample] Grid Modernization Webinar",
            date=(now + timedelta(days=14)).date().isoformat(),
            time="2:00 PM",
            location="Online",
            host=PLACEHOLDER_HOST,
            link="https://example.com/sample/grid-modernization-webinar",
            source=PLACEHOLDER_SOURCE,
            description="Sample listing shown while live sources are unavailable.",
            category="Webinar",
        ),
        CandidateEvent(
            title="[Sample] Climate and Energy Networking Reception",
            date=(now + timedelta(days=21)).date().isoformat(),
            time="6:00 PM",
            location="Washington DC",
            host=PLACEHOLDER_HOST,
            link="https://example.com/sample/networking-reception",
            source=PLACEHOLDER_SOURCE,
            description="Sample listing shown while live sources are unavailable.",
            category="Networking",
        ),
    ]
    return [event.persist(created_at) for event in samples]


def is_placeholder(event: CandidateEvent) -> bool:
    return event.source == PLACEHOLDER_SOURCE


async def run_all(
    sources: Optional[list[SourceConfig]] = None,
    client: Optional[httpx.AsyncClient] = None,
    now: Optional[datetime] = None,
    fallback: bool = True,
    max_concurrent: Optional[int] = None,
    use_cache: bool = False,
    show_progress: bool = False,
) -> list[PersistedEvent]:
    """Run every source extractor concurrently and merge their events.

    Sources are isolated: each extractor swallows its own failures, so a slow
    or broken site contributes nothing instead of failing the run. Results
    are concatenated in source-declaration order.

    Args:
        sources: Source configs (default: every enabled source)
        client: Shared HTTP client (created and closed here if omitted)
        now: Reference time for date parsing and ingestion timestamp
        fallback: Return placeholder events instead of an empty list
        max_concurrent: Cap on in-flight fetches (0/None = all at once)
        use_cache: Use the local HTML cache
        show_progress: Show a rich progress bar

    Returns:
        Events stamped with stable ids and a shared created_at
    """
    sources = get_sources() if sources is None else sources
    now = now or datetime.now()
    created_at = now.isoformat(timespec="seconds")

    if max_concurrent is None:
        max_concurrent = SCRAPE_MAX_CONCURRENT
    semaphore = asyncio.Semaphore(max_concurrent) if max_concurrent > 0 else None

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(follow_redirects=True)

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        console=console,
        disable=not show_progress,
    )

    try:
        with progress:
            task = progress.add_task("Scraping sources...", total=len(sources))

            async def run_one(config: SourceConfig) -> list[CandidateEvent]:
                if semaphore:
                    async with semaphore:
                        events = await extract_source(config, client, now=now, use_cache=use_cache)
                else:
                    events = await extract_source(config, client, now=now, use_cache=use_cache)
                progress.advance(task)
                return events

            results = await asyncio.gather(
                *[run_one(config) for config in sources],
                return_exceptions=True,
            )
    finally:
        if owns_client:
            await client.aclose()

    candidates: list[CandidateEvent] = []
    for config, result in zip(sources, results):
        if isinstance(result, BaseException):
            console.print(f"[red]{config.slug} crashed: {result}[/red]")
            continue
        candidates.extend(result)

    events = [candidate.persist(created_at) for candidate in candidates]
    console.print(f"[green]Scraped {len(events)} events from {len(sources)} sources[/green]")

    if not events and fallback:
        console.print("[yellow]No events found, using sample events[/yellow]")
        return placeholder_events(now)

    return events


def analyze_events(events: list[CandidateEvent]) -> dict:
    """Counts describing one aggregation run."""
    by_source: dict[str, int] = {}
    for event in events:
        by_source[event.source] = by_source.get(event.source, 0) + 1

    with_dates = sum(1 for event in events if event.date)
    unique_titles = len({event.title for event in events})

    return {
        "total": len(events),
        "by_source": by_source,
        "with_dates": with_dates,
        "without_dates": len(events) - with_dates,
        "unique_titles": unique_titles,
        "duplicate_count": len(events) - unique_titles,
    }


def print_event_summary(events: list[CandidateEvent], limit: int = 20) -> None:
    """Print a summary table of events."""
    table = Table(title=f"Events (showing {min(len(events), limit)} of {len(events)})")
    table.add_column("Date", style="red")
    table.add_column("Title", style="cyan", max_width=45)
    table.add_column("Host", style="green", max_width=25)
    table.add_column("Location", style="yellow", max_width=20)
    table.add_column("Category", style="magenta")
    table.add_column("Source", style="blue")

    for event in events[:limit]:
        table.add_row(
            event.date or "TBD",
            event.title[:45],
            event.host[:25],
            event.location[:20],
            event.category or "-",
            event.source,
        )

    console.print(table)


def print_stats(events: list[CandidateEvent]) -> None:
    """Print statistics about an event set."""
    analysis = analyze_events(events)
    console.print("\n[bold]Statistics[/bold]")
    console.print(f"  Total: {analysis['total']}")
    console.print(f"  With dates: {analysis['with_dates']} | Without: {analysis['without_dates']}")
    console.print(f"  Duplicate titles: {analysis['duplicate_count']}")

    top_sources = sorted(analysis["by_source"].items(), key=lambda x: x[1], reverse=True)[:10]
    console.print(f"  Top sources: {dict(top_sources)}")

    categories: dict[str, int] = {}
    for event in events:
        category = event.category or "Uncategorized"
        categories[category] = categories.get(category, 0) + 1
    top_categories = sorted(categories.items(), key=lambda x: x[1], reverse=True)[:5]
    console.print(f"  Top categories: {dict(top_categories)}")

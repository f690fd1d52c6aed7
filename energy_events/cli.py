"""CLI for the DC energy events aggregator."""

import asyncio
from datetime import datetime
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from energy_events.config import ALGOLIA_INDEX_NAME, EVENTS_STORE
from energy_events.errors import ConfigurationError, EmailDeliveryError, PersistenceError
from energy_events.feed import render_feed
from energy_events.indexers import SubscriptionStore, get_store
from energy_events.models import CandidateEvent, FeedFilter
from energy_events.normalizers import matched_keywords
from energy_events.notifiers import build_digest, send_digest
from energy_events.pipeline import (
    placeholder_events,
    print_event_summary,
    print_stats,
    run_all,
)
from energy_events.sources import SOURCES, get_sources

app = typer.Typer(
    name="energy-events",
    help="DC energy events aggregator",
    add_completion=False,
)
console = Console()

BACKEND_HELP = "Store backend: json or algolia (default: EVENTS_STORE env var)"
INDEX_HELP = "Algolia index name (default: ALGOLIA_INDEX_NAME env var)"

# Stores connect lazily, so missing credentials surface on first use
STORE_ERRORS = (ConfigurationError, PersistenceError)


def open_store(backend: Optional[str], index_name: Optional[str]):
    try:
        return get_store(backend or EVENTS_STORE, index_name=index_name)
    except STORE_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print("[dim]Check EVENTS_STORE and ALGOLIA_APP_ID / ALGOLIA_API_KEY in .env[/dim]")
        raise typer.Exit(1)


def print_relevance(events: list[CandidateEvent], limit: int = 20) -> None:
    """Print the relevance keywords each event matched."""
    table = Table(title="Relevance keywords")
    table.add_column("Source", style="blue")
    table.add_column("Title", style="cyan", max_width=45)
    table.add_column("Keywords", style="green")

    for event in events[:limit]:
        keywords = matched_keywords(event.title, event.description)
        table.add_row(event.source, event.title[:45], ", ".join(keywords) or "[dim]none[/dim]")

    console.print(table)


@app.command()
def sources(
    show_disabled: bool = typer.Option(False, "--all", "-a", help="Include disabled sources"),
):
    """List configured event sources."""
    table = Table(title="Event Sources")
    table.add_column("Slug", style="cyan")
    table.add_column("Host", style="green", max_width=40)
    table.add_column("Category", style="magenta")
    table.add_column("Filter", style="yellow")
    table.add_column("Dates", style="red")

    shown = SOURCES if show_disabled else [s for s in SOURCES if s.enabled]
    for config in shown:
        table.add_row(
            config.slug if config.enabled else f"[dim]{config.slug}[/dim]",
            config.host,
            config.category or "auto",
            "relevance" if config.requires_relevance_filter else "-",
            "strict" if config.strict_dates else "lenient",
        )

    console.print(table)
    console.print(f"[dim]{len(shown)} sources[/dim]")


@app.command()
def scrape(
    source: Optional[list[str]] = typer.Option(
        None, "--source", "-s", help="Only scrape these source slugs (repeatable)"
    ),
    save: bool = typer.Option(True, "--save/--no-save", help="Upsert results into the store"),
    use_cache: bool = typer.Option(False, "--cache", help="Use cached listing pages (6h TTL)"),
    fallback: bool = typer.Option(False, "--fallback", help="Return sample events when nothing is found"),
    max_concurrent: int = typer.Option(0, "--max-concurrent", "-c", help="Concurrent fetches (0 = all)"),
    limit: int = typer.Option(20, "--limit", "-l", help="Rows in the summary table"),
    explain: bool = typer.Option(False, "--explain", help="Show which relevance keywords each event matched"),
    backend: str = typer.Option(None, "--backend", "-b", help=BACKEND_HELP),
    index_name: str = typer.Option(None, "--index", "-i", help=INDEX_HELP),
):
    """Scrape sources, show a summary and store the events."""
    try:
        configs = get_sources(source or None)
    except KeyError as e:
        console.print(f"[red]{e.args[0]}[/red]")
        raise typer.Exit(1)

    events = asyncio.run(run_all(
        configs,
        fallback=fallback,
        max_concurrent=max_concurrent,
        use_cache=use_cache,
        show_progress=True,
    ))

    if not events:
        console.print("[yellow]No events found[/yellow]")
        raise typer.Exit(0)

    print_event_summary(events, limit=limit)
    print_stats(events)
    if explain:
        print_relevance(events, limit=limit)

    if not save:
        return

    store = open_store(backend, index_name)
    try:
        count = store.upsert(events)
    except STORE_ERRORS as e:
        console.print(f"[red]Failed to store events: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold green]Stored {count} events[/bold green]")


@app.command()
def events(
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Filter by source slug"),
    limit: int = typer.Option(50, "--limit", "-l", help="Maximum events (0 = all)"),
    backend: str = typer.Option(None, "--backend", "-b", help=BACKEND_HELP),
    index_name: str = typer.Option(None, "--index", "-i", help=INDEX_HELP),
):
    """Show stored events, earliest first."""
    store = open_store(backend, index_name)
    try:
        stored = store.query(source=source, limit=limit)
    except STORE_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    print_event_summary(stored, limit=limit or len(stored))


@app.command()
def feed(
    source: str = typer.Option("all", "--source", "-s", help="Source slug or 'all'"),
    category: str = typer.Option("all", "--category", "-k", help="Category or 'all'"),
    search: str = typer.Option("", "--search", "-q", help="Search title, description, host, location"),
    start_date: Optional[str] = typer.Option(None, "--from", help="Earliest date (YYYY-MM-DD)"),
    end_date: Optional[str] = typer.Option(None, "--to", help="Latest date (YYYY-MM-DD)"),
    limit: int = typer.Option(50, "--limit", "-l", help="Rows to show"),
    backend: str = typer.Option(None, "--backend", "-b", help=BACKEND_HELP),
    index_name: str = typer.Option(None, "--index", "-i", help=INDEX_HELP),
):
    """Show upcoming events the way subscribers see them."""
    try:
        feed_filter = FeedFilter(
            source=source,
            category=category,
            search_term=search,
            start_date=start_date,
            end_date=end_date,
        )
    except ValueError as e:
        console.print(f"[red]Invalid filter: {e}[/red]")
        raise typer.Exit(1)

    store = open_store(backend, index_name)
    try:
        stored = store.all_events()
    except STORE_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    now = datetime.now()
    if not stored:
        console.print("[yellow]Store is empty, showing sample events[/yellow]")
        stored = placeholder_events(now)

    print_event_summary(render_feed(stored, feed_filter, now=now), limit=limit)


@app.command()
def stats(
    backend: str = typer.Option(None, "--backend", "-b", help=BACKEND_HELP),
    index_name: str = typer.Option(None, "--index", "-i", help=INDEX_HELP),
):
    """Show store statistics."""
    store = open_store(backend, index_name)
    try:
        store_stats = store.stats()
    except STORE_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold]Store Statistics[/bold]")
    console.print(f"  Backend: {store_stats['backend']}")
    console.print(f"  Location: {store_stats['location']}")
    console.print(f"  Records: {store_stats['num_records']}")
    if store_stats.get("by_source"):
        top = sorted(store_stats["by_source"].items(), key=lambda x: x[1], reverse=True)[:10]
        console.print(f"  Top sources: {dict(top)}")


@app.command()
def configure(
    index_name: str = typer.Option(None, "--index", "-i", help=INDEX_HELP),
):
    """Configure Algolia index settings (searchable attributes, facets, ranking)."""
    store = open_store("algolia", index_name or ALGOLIA_INDEX_NAME)
    try:
        store.configure()
    except STORE_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def clear(
    backend: str = typer.Option(None, "--backend", "-b", help=BACKEND_HELP),
    index_name: str = typer.Option(None, "--index", "-i", help=INDEX_HELP),
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete every stored event."""
    if not confirm:
        typer.confirm("Are you sure you want to delete all stored events?", abort=True)

    store = open_store(backend, index_name)
    try:
        removed = store.clear()
    except STORE_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Removed {removed} events[/green]")


@app.command()
def subscribe(
    email: str = typer.Argument(..., help="Email address"),
    remove: bool = typer.Option(False, "--remove", help="Unsubscribe instead"),
):
    """Add or remove a digest subscriber."""
    store = SubscriptionStore()
    try:
        if remove:
            if not store.unsubscribe(email):
                console.print(f"[yellow]{email} is not subscribed[/yellow]")
                raise typer.Exit(1)
            console.print(f"[green]Unsubscribed {email}[/green]")
            return
        subscription = store.subscribe(email)
    except ValueError as e:
        console.print(f"[red]Invalid email: {e}[/red]")
        raise typer.Exit(1)
    except PersistenceError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Subscribed {subscription.email}[/green]")


@app.command()
def digest(
    to: Optional[str] = typer.Option(None, "--to", help="Send only to this address"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the digest instead of sending"),
    backend: str = typer.Option(None, "--backend", "-b", help=BACKEND_HELP),
    index_name: str = typer.Option(None, "--index", "-i", help=INDEX_HELP),
):
    """Email the upcoming-events digest to subscribers."""
    store = open_store(backend, index_name)
    try:
        upcoming = render_feed(store.all_events())
        recipients = [to] if to else [s.email for s in SubscriptionStore().active()]
    except STORE_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if dry_run:
        subject, body = build_digest(upcoming)
        console.print(f"[bold]{subject}[/bold]\n")
        console.print(body, markup=False)
        console.print(f"[dim]Would send to {len(recipients)} recipients[/dim]")
        return

    if not recipients:
        console.print("[yellow]No active subscribers[/yellow]")
        raise typer.Exit(0)

    try:
        result = asyncio.run(send_digest(upcoming, recipients))
    except (ConfigurationError, EmailDeliveryError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold green]Digest sent to {result['sent']} recipients[/bold green]")
    if result["failed"]:
        console.print(f"[red]{result['failed']} failed[/red]")
        raise typer.Exit(1)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("energy_events.api:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()

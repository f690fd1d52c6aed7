"""HTTP API: trigger scrapes, read stored events, browse the feed, manage email digests."""

from datetime import datetime
from typing import Annotated, Awaitable, Callable, Optional

from fastapi import Depends, FastAPI, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from rich.console import Console

from energy_events import __version__
from energy_events.config import DEFAULT_EVENTS_LIMIT
from energy_events.errors import ConfigurationError, EmailDeliveryError, PersistenceError
from energy_events.feed import render_feed
from energy_events.indexers import SubscriptionStore, get_store
from energy_events.models import FeedFilter, PersistedEvent
from energy_events.notifiers import send_digest
from energy_events.pipeline import analyze_events, placeholder_events, run_all

console = Console()

Runner = Callable[[], Awaitable[list[PersistedEvent]]]

app = FastAPI(
    title="DC Energy Events",
    description="Aggregated energy and climate events in the Washington DC area",
    version=__version__,
)


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request, exc: PersistenceError):
    return JSONResponse(status_code=500, content={"error": "Storage unavailable", "details": str(exc)})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request, exc: ConfigurationError):
    return JSONResponse(status_code=500, content={"error": "Server misconfigured", "details": str(exc)})


class SubscribeRequest(BaseModel):
    email: Optional[str] = None


class DigestRequest(BaseModel):
    to: Optional[str] = None
    source: str = "all"
    category: str = "all"
    search: str = ""


def get_event_store():
    return get_store()


def get_subscription_store() -> SubscriptionStore:
    return SubscriptionStore()


def get_runner() -> Runner:
    """Scrape every enabled source once; an empty run stays empty."""

    async def runner() -> list[PersistedEvent]:
        return await run_all(fallback=False)

    return runner


EventStore = Annotated[object, Depends(get_event_store)]
Subscriptions = Annotated[SubscriptionStore, Depends(get_subscription_store)]
ScrapeRunner = Annotated[Runner, Depends(get_runner)]


def records(events: list[PersistedEvent]) -> list[dict]:
    return [event.to_record() for event in events]


@app.get("/events/scrape")
async def scrape_usage():
    return {
        "message": "Send a POST request to this endpoint to scrape energy events "
                   "from every configured source and store them.",
    }


@app.post("/events/scrape")
async def scrape_events(runner: ScrapeRunner, store: EventStore):
    """Run one aggregation pass and upsert the results."""
    events = await runner()
    analysis = analyze_events(events)

    if not events:
        return JSONResponse(
            status_code=404,
            content={"error": "No events found from any source", "analysis": analysis},
        )

    try:
        store.upsert(events)
    except (PersistenceError, ConfigurationError) as e:
        console.print(f"[red]Failed to store events: {e}[/red]")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to store events",
                "details": str(e),
                "analysis": analysis,
                "events": records(events),
            },
        )

    return {
        "success": True,
        "events": records(events),
        "count": len(events),
        "analysis": analysis,
    }


@app.get("/events")
async def list_events(
    store: EventStore,
    source: Optional[str] = None,
    limit: int = Query(DEFAULT_EVENTS_LIMIT, ge=0),
):
    """Stored events, earliest first."""
    try:
        events = store.query(source=source or None, limit=limit)
    except PersistenceError as e:
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to fetch events", "details": str(e)},
        )
    return {"success": True, "events": records(events), "count": len(events)}


@app.get("/feed")
async def feed(
    store: EventStore,
    source: str = "all",
    category: str = "all",
    search: str = "",
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
):
    """Filtered, deduplicated upcoming events, with sample events when nothing is stored."""
    try:
        feed_filter = FeedFilter(
            source=source,
            category=category,
            search_term=search,
            start_date=start_date,
            end_date=end_date,
        )
    except ValidationError as e:
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid feed filter", "details": str(e)},
        )

    try:
        stored = store.all_events()
    except PersistenceError as e:
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to fetch events", "details": str(e)},
        )

    now = datetime.now()
    fallback = not stored
    events = render_feed(placeholder_events(now) if fallback else stored, feed_filter, now=now)
    return {
        "success": True,
        "events": records(events),
        "count": len(events),
        "fallback": fallback,
    }


@app.post("/email/subscribe")
async def subscribe(body: SubscribeRequest, subscriptions: Subscriptions):
    if not body.email or not body.email.strip():
        return JSONResponse(status_code=400, content={"error": "Email is required"})

    try:
        subscription = subscriptions.subscribe(body.email)
    except ValidationError:
        return JSONResponse(status_code=400, content={"error": "Invalid email address"})
    except PersistenceError as e:
        console.print(f"[red]Error storing email subscription: {e}[/red]")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to subscribe email", "details": str(e)},
        )

    console.print(f"[green]Email subscription successful: {subscription.email}[/green]")
    return {
        "success": True,
        "message": "Successfully subscribed to email updates",
        "email": subscription.email,
    }


@app.post("/email/digest")
async def digest(body: DigestRequest, store: EventStore, subscriptions: Subscriptions):
    """Email the current feed to one address or to every active subscriber."""
    try:
        stored = store.all_events()
        recipients = [body.to] if body.to else [s.email for s in subscriptions.active()]
    except PersistenceError as e:
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to load digest data", "details": str(e)},
        )

    if not recipients:
        return {"success": True, "sent": 0, "failed": 0, "count": 0}

    feed_filter = FeedFilter(source=body.source, category=body.category, search_term=body.search)
    events = render_feed(stored, feed_filter)

    try:
        result = await send_digest(events, recipients)
    except (ConfigurationError, EmailDeliveryError) as e:
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to send digest", "details": str(e)},
        )

    return {
        "success": result["failed"] == 0,
        "sent": result["sent"],
        "failed": result["failed"],
        "count": len(events),
    }

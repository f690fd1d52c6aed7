"""Generic per-source extractor driven by a SourceConfig."""

from datetime import datetime
from typing import Optional
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup, Tag
from pydantic import ValidationError
from rich.console import Console

from energy_events.extractors.fetch import fetch_html
from energy_events.extractors.heuristics import (
    find_date_text,
    find_link,
    find_title,
    first_text,
    node_text,
    truncate,
)
from energy_events.extractors.structured import extract_event_blocks
from energy_events.models import CandidateEvent
from energy_events.normalizers.categories import classify_category
from energy_events.normalizers.dates import extract_time, normalize_date
from energy_events.normalizers.relevance import is_relevant
from energy_events.sources.config import GENERIC_SELECTORS, SourceConfig

console = Console()

NOISE_TAGS = ["script", "style", "noscript", "nav"]


def select_candidates(soup: BeautifulSoup, selectors: list[str]) -> tuple[list[Tag], Optional[str]]:
    """Nodes from the first selector that matches anything, with that selector."""
    for selector in selectors:
        nodes = soup.select(selector)
        if nodes:
            return nodes, selector
    return [], None


def build_candidate(
    config: SourceConfig,
    title: str,
    link: Optional[str],
    date_text: Optional[str],
    now: datetime,
    time_text: Optional[str] = None,
    location: Optional[str] = None,
    description: str = "",
    strict: bool = False,
) -> Optional[CandidateEvent]:
    """Apply the acceptance rules shared by markup and JSON-LD extraction.

    A strict candidate (or any candidate of a strict_dates source) needs a date.
    Returns None when the candidate is rejected.
    """
    if not title or not link:
        return None

    if config.requires_relevance_filter and not is_relevant(title, description):
        return None

    date = normalize_date(date_text, reference_now=now)
    if date is None and (strict or config.strict_dates):
        return None

    try:
        return CandidateEvent(
            title=title,
            date=date,
            time=time_text or extract_time(date_text),
            location=location or config.default_location,
            host=config.host,
            link=link,
            source=config.slug,
            description=truncate(description),
            category=config.category or classify_category(title, description),
        )
    except ValidationError:
        return None


def extract_from_node(
    node: Tag,
    config: SourceConfig,
    now: datetime,
    strict: bool = False,
) -> Optional[CandidateEvent]:
    """Extract one candidate event from a listing node."""
    title, title_element = find_title(node, config.title_selectors)
    link = find_link(node, title_element, config.link_base)
    date_text = find_date_text(node, config.date_selectors)

    time_text, _ = first_text(node, config.time_selectors)
    if not time_text:
        time_text = extract_time(date_text) or extract_time(node_text(node))

    location, _ = first_text(node, config.location_selectors)
    description, _ = first_text(node, config.description_selectors)
    # A description identical to the title adds nothing
    if description == title:
        description = ""

    return build_candidate(
        config,
        title=title,
        link=link,
        date_text=date_text,
        now=now,
        time_text=time_text,
        location=location,
        description=description,
        strict=strict,
    )


def extract_from_json_ld(html: str, config: SourceConfig, now: datetime) -> list[CandidateEvent]:
    """Fallback for pages whose listings only exist as schema.org JSON-LD."""
    events = []
    for block in extract_event_blocks(html)[: config.max_candidates]:
        link = block["link"]
        link = urljoin(config.link_base, link) if isinstance(link, str) and link else None
        start = block["start"] if isinstance(block["start"], str) else None
        event = build_candidate(
            config,
            title=block["title"],
            link=link,
            date_text=start,
            now=now,
            location=block["location"],
            description=block["description"],
        )
        if event:
            events.append(event)
    return events


def dedupe_within_source(events: list[CandidateEvent]) -> list[CandidateEvent]:
    """Keep the first event per (title, link) pair."""
    seen: set[tuple[str, str]] = set()
    unique = []
    for event in events:
        key = (event.title, event.link)
        if key in seen:
            continue
        seen.add(key)
        unique.append(event)
    return unique


def extract_events(
    html: str,
    config: SourceConfig,
    now: Optional[datetime] = None,
) -> list[CandidateEvent]:
    """Extract candidate events from a fetched listing page.

    Deterministic for a given html, config and now.
    """
    now = now or datetime.now()
    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(NOISE_TAGS):
        tag.decompose()

    nodes, selector = select_candidates(soup, config.candidate_selectors)
    if not nodes:
        return dedupe_within_source(extract_from_json_ld(html, config, now))

    strict = selector in GENERIC_SELECTORS
    events = []
    for node in nodes[: config.max_candidates]:
        event = extract_from_node(node, config, now, strict=strict)
        if event:
            events.append(event)

    return dedupe_within_source(events)


async def extract_source(
    config: SourceConfig,
    client: httpx.AsyncClient,
    now: Optional[datetime] = None,
    use_cache: bool = False,
) -> list[CandidateEvent]:
    """Fetch and extract one source. Never raises: failures yield []."""
    try:
        result = await fetch_html(
            client,
            config.base_url,
            headers=config.request_headers,
            timeout=config.timeout,
            use_cache=use_cache,
        )
        if not result.ok:
            console.print(f"[yellow]{config.slug}: fetch failed ({result.error})[/yellow]")
            return []

        events = extract_events(result.html, config, now)
        console.print(f"[dim]{config.slug}: {len(events)} events[/dim]")
        return events

    except Exception as e:
        console.print(f"[red]Error scraping {config.slug}: {type(e).__name__}: {e}[/red]")
        return []

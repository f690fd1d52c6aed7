"""Tests for the aggregation run."""

import asyncio
from datetime import timedelta

import httpx
import pytest

from energy_events.feed import render_feed
from energy_events.pipeline import analyze_events, is_placeholder, placeholder_events, run_all
from energy_events.sources import SourceConfig

ALPHA_HTML = """
<div class="event-card"><h3><a href="/e/1">Solar Finance Summit</a></h3><span class="date">June 10, 2025</span></div>
<div class="event-card"><h3><a href="/e/2">Grid Reliability Webinar</a></h3><span class="date">06/12/2025</span></div>
"""

CHARLIE_HTML = """
<div class="listing"><h2><a href="/cal/10">Storage Roundtable</a></h2><p>Date to be announced.</p></div>
"""


def make_source(slug: str, selectors: list[str] | None = None) -> SourceConfig:
    return SourceConfig(
        slug=slug,
        host=f"{slug.title()} Org",
        base_url=f"https://{slug}.example/events",
        candidate_selectors=selectors or [".event-card"],
        date_selectors=[".date"],
        timeout=1,
    )


@pytest.fixture
def three_sources() -> list[SourceConfig]:
    return [
        make_source("alpha"),
        make_source("bravo"),
        make_source("charlie", selectors=[".listing"]),
    ]


def handler(request: httpx.Request) -> httpx.Response:
    host = request.url.host
    if host == "alpha.example":
        return httpx.Response(200, text=ALPHA_HTML)
    if host == "bravo.example":
        raise httpx.ReadTimeout("timed out", request=request)
    if host == "charlie.example":
        return httpx.Response(200, text=CHARLIE_HTML)
    return httpx.Response(404)


def broken_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("refused", request=request)


def run(sources, now, fallback=False, transport_handler=handler, **kwargs):
    async def main():
        async with httpx.AsyncClient(transport=httpx.MockTransport(transport_handler)) as client:
            return await run_all(sources, client=client, now=now, fallback=fallback, **kwargs)

    return asyncio.run(main())


class TestRunAll:
    """Tests for concurrent aggregation across sources."""

    def test_end_to_end_three_sources(self, three_sources, fixed_now):
        """A timing-out source contributes nothing; the others are merged in order."""
        events = run(three_sources, fixed_now)
        assert [(e.source, e.title, e.date) for e in events] == [
            ("alpha", "Solar Finance Summit", "2025-06-10"),
            ("alpha", "Grid Reliability Webinar", "2025-06-12"),
            ("charlie", "Storage Roundtable", None),
        ]

    def test_feed_shows_dated_events_in_order(self, three_sources, fixed_now):
        events = run(three_sources, fixed_now)
        assert len(events) == 3
        feed = render_feed(events, now=fixed_now)
        assert [(e.title, e.date) for e in feed] == [
            ("Solar Finance Summit", "2025-06-10"),
            ("Grid Reliability Webinar", "2025-06-12"),
        ]

    def test_links_resolved_per_source(self, three_sources, fixed_now):
        events = run(three_sources, fixed_now)
        assert events[0].link == "https://alpha.example/e/1"
        assert events[2].link == "https://charlie.example/cal/10"

    def test_shared_created_at_and_unique_ids(self, three_sources, fixed_now):
        events = run(three_sources, fixed_now)
        assert {e.created_at for e in events} == {"2025-06-01T09:00:00"}
        assert len({e.id for e in events}) == len(events)

    def test_ids_stable_across_runs(self, three_sources, fixed_now):
        first = run(three_sources, fixed_now)
        second = run(three_sources, fixed_now + timedelta(hours=3))
        assert [e.id for e in first] == [e.id for e in second]
        assert first[0].created_at != second[0].created_at

    def test_bounded_concurrency_same_result(self, three_sources, fixed_now):
        unbounded = run(three_sources, fixed_now)
        bounded = run(three_sources, fixed_now, max_concurrent=1)
        assert [e.id for e in bounded] == [e.id for e in unbounded]

    def test_all_failing_without_fallback(self, three_sources, fixed_now):
        assert run(three_sources, fixed_now, transport_handler=broken_handler) == []

    def test_all_failing_with_fallback(self, three_sources, fixed_now):
        events = run(three_sources, fixed_now, fallback=True, transport_handler=broken_handler)
        assert len(events) == 3
        assert all(is_placeholder(e) for e in events)

    def test_no_sources(self, fixed_now):
        assert run([], fixed_now) == []


class TestPlaceholders:
    """Tests for sample events shown when nothing was scraped."""

    def test_labeled_and_upcoming(self, fixed_now):
        events = placeholder_events(fixed_now)
        assert [e.date for e in events] == ["2025-06-08", "2025-06-15", "2025-06-22"]
        assert all(e.title.startswith("[Sample]") for e in events)
        assert all(e.source == "sample" for e in events)

    def test_stable_ids(self, fixed_now):
        assert [e.id for e in placeholder_events(fixed_now)] == [e.id for e in placeholder_events(fixed_now)]


class TestAnalyzeEvents:
    """Tests for run statistics."""

    def test_counts(self, make_event):
        events = [
            make_event("Solar Summit", source="alpha"),
            make_event("Solar Summit", source="bravo"),
            make_event("Wind Forum", date=None, source="alpha"),
        ]
        analysis = analyze_events(events)
        assert analysis == {
            "total": 3,
            "by_source": {"alpha": 2, "bravo": 1},
            "with_dates": 2,
            "without_dates": 1,
            "unique_titles": 2,
            "duplicate_count": 1,
        }

    def test_empty(self):
        assert analyze_events([])["total"] == 0

"""Listing page → candidate events extraction engine.

One generic extractor serves every source:
1. Fetches the listing page with a fixed User-Agent and per-request timeout
2. Selects candidate nodes with the source's selector fallback chain
3. Pulls title, link, date, time, location and description per node,
   falling back to DOM heuristics when configured selectors miss
4. Falls back to schema.org JSON-LD when no candidate node matches
5. Applies relevance and date policies, dedupes within the source
"""

from energy_events.extractors.fetch import fetch_html, FetchResult
from energy_events.extractors.heuristics import find_date_text
from energy_events.extractors.structured import extract_event_blocks
from energy_events.extractors.source import extract_events, extract_source

__all__ = [
    "fetch_html",
    "FetchResult",
    "find_date_text",
    "extract_event_blocks",
    "extract_events",
    "extract_source",
]

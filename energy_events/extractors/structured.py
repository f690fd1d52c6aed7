"""Schema.org Event extraction from JSON-LD blocks.

Used when none of a source's candidate selectors match: many sites that
redesign their listing markup still publish JSON-LD for search engines.
"""

import json
from typing import Any, Optional

from bs4 import BeautifulSoup

from energy_events.extractors.heuristics import clean_text

EVENT_TYPES = {
    "Event",
    "EducationEvent",
    "BusinessEvent",
    "SocialEvent",
    "Festival",
    "ExhibitionEvent",
}


def extract_json_ld(soup: BeautifulSoup) -> list[dict]:
    """Extract all JSON-LD blocks from page, flattening lists and @graph."""
    blocks: list[dict] = []

    for script in soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(script.string or "")
        except (json.JSONDecodeError, TypeError):
            continue

        pending = data if isinstance(data, list) else [data]
        while pending:
            item = pending.pop(0)
            if not isinstance(item, dict):
                continue
            if "@graph" in item and isinstance(item["@graph"], list):
                pending.extend(item["@graph"])
                continue
            # ItemList of events
            for element in item.get("itemListElement", []) or []:
                if isinstance(element, dict):
                    pending.append(element.get("item", element))
            blocks.append(item)

    return blocks


def is_event_block(block: dict) -> bool:
    block_type = block.get("@type", "")
    if isinstance(block_type, list):
        return any(t in EVENT_TYPES for t in block_type)
    return block_type in EVENT_TYPES


def location_name(location: Any) -> Optional[str]:
    """Human-readable location from a schema.org location value."""
    if isinstance(location, list):
        location = location[0] if location else None
    if isinstance(location, str):
        return clean_text(location) or None
    if not isinstance(location, dict):
        return None
    if location.get("@type") == "VirtualLocation":
        return "Online"

    name = location.get("name")
    address = location.get("address")
    if isinstance(address, dict):
        locality = address.get("addressLocality")
        region = address.get("addressRegion")
        address = ", ".join(part for part in (locality, region) if part)
    parts = [part for part in (name, address) if isinstance(part, str) and part]
    return clean_text(", ".join(parts)) or None


def extract_event_blocks(html: str) -> list[dict]:
    """Schema.org Event dicts found in the page, in document order.

    Each dict has title, start, location, link, description keys (raw text,
    not yet normalized).
    """
    soup = BeautifulSoup(html, "lxml")
    events = []

    for block in extract_json_ld(soup):
        if not is_event_block(block):
            continue

        attendance = block.get("eventAttendanceMode", "") or ""
        location = location_name(block.get("location"))
        if not location and "Online" in attendance:
            location = "Online"

        events.append({
            "title": clean_text(block.get("name")),
            "start": block.get("startDate"),
            "location": location,
            "link": block.get("url"),
            "description": clean_text(block.get("description")),
        })

    return events

"""DOM heuristics for pulling event fields out of listing markup.

Listing pages rarely label their fields consistently. Each field is found
with a fallback chain: the source's configured selectors first, then common
patterns seen across event sites.
"""

import re
from typing import Optional
from urllib.parse import urljoin

from bs4 import Tag

from energy_events.normalizers.dates import MONTH_NAME, ORDINAL

# Date/time/schedule markup seen across event sites, most specific first
EXTENDED_DATE_SELECTORS = [
    "time[datetime]",
    "[itemprop='startDate']",
    ".event-date",
    ".event__date",
    ".event-dates",
    ".date-display-single",
    ".date",
    ".dates",
    ".datetime",
    ".date-time",
    ".event-time",
    ".event-meta",
    ".when",
    ".schedule",
    ".start-date",
    "[class*='date']",
    "[class*='Date']",
    "time",
]

# Attributes that commonly hold machine-readable dates
DATE_ATTRIBUTES = [
    "data-date",
    "data-start",
    "data-start-date",
    "data-event-date",
    "datetime",
    "content",
    "title",
]

# Snippets worth handing to the date normalizer
DATE_PATTERNS = [
    # ISO: 2026-01-15
    re.compile(r"\b\d{4}-\d{2}-\d{2}\b"),
    # US: January 15, 2026 / Jan 15 / Sept. 9-10, 2026
    re.compile(
        rf"\b{MONTH_NAME}\s+\d{{1,2}}{ORDINAL}(?:\s*[-–]\s*\d{{1,2}}{ORDINAL})?(?:,?\s+\d{{4}})?",
        re.I,
    ),
    # European: 15 January 2026 / 15 Jan
    re.compile(rf"\b\d{{1,2}}{ORDINAL}\s+{MONTH_NAME}(?:,?\s+\d{{4}})?", re.I),
    # Numeric: 01/15/2026 or 01-15-2026
    re.compile(r"\b\d{1,2}[/-]\d{1,2}[/-]\d{4}\b"),
]

HEADING_TAGS = ["h1", "h2", "h3", "h4"]
SKIP_HREF_PREFIXES = ("#", "javascript:", "mailto:", "tel:")
MAX_DESCRIPTION_LENGTH = 500


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace."""
    if not text or not isinstance(text, str):
        return ""
    return re.sub(r"\s+", " ", text).strip()


def node_text(node: Tag) -> str:
    return clean_text(node.get_text(" ", strip=True))


def first_text(node: Tag, selectors: list[str]) -> tuple[str, Optional[Tag]]:
    """First non-empty text across a selector chain, with its element."""
    for selector in selectors:
        for element in node.select(selector):
            text = node_text(element)
            if text:
                return text, element
    return "", None


def element_date_text(element: Tag) -> str:
    """Date text of an element, preferring machine-readable attributes."""
    for attr in ("datetime", "content"):
        value = element.get(attr)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return node_text(element)


def date_from_selectors(node: Tag, selectors: list[str]) -> Optional[str]:
    for selector in selectors:
        for element in node.select(selector):
            text = element_date_text(element)
            if text:
                return text
    return None


def date_from_text(text: str) -> Optional[str]:
    """Regex scan for the first date-shaped snippet."""
    for pattern in DATE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0)
    return None


def date_from_attributes(node: Tag, levels: int = 2) -> Optional[str]:
    """Scan date-bearing attributes on the node and up to `levels` ancestors."""
    current: Optional[Tag] = node
    for _ in range(levels + 1):
        if not isinstance(current, Tag) or current.name == "[document]":
            break
        for attr in DATE_ATTRIBUTES:
            value = current.get(attr)
            # "title" and "content" carry all sorts of text; require a digit
            if isinstance(value, str) and re.search(r"\d", value):
                return value.strip()
        current = current.parent
    return None


def find_date_text(node: Tag, selectors: Optional[list[str]] = None) -> Optional[str]:
    """Locate raw date text for a candidate node.

    Precedence: configured selectors, extended date selectors, regex scan of
    the node text, then date attributes on the node and two ancestors.
    """
    if selectors:
        text = date_from_selectors(node, selectors)
        if text:
            return text

    text = date_from_selectors(node, EXTENDED_DATE_SELECTORS)
    if text:
        return text

    text = date_from_text(node_text(node))
    if text:
        return text

    return date_from_attributes(node)


def find_title(node: Tag, selectors: list[str]) -> tuple[str, Optional[Tag]]:
    """Title from the configured chain, then headings, then anchor text."""
    title, element = first_text(node, selectors)
    if title:
        return title, element

    title, element = first_text(node, HEADING_TAGS)
    if title:
        return title, element

    if node.name == "a":
        return node_text(node), node
    return first_text(node, ["a"])


def _usable_href(element: Optional[Tag]) -> Optional[str]:
    if element is None:
        return None
    href = element.get("href")
    if not isinstance(href, str):
        return None
    href = href.strip()
    if not href or href.startswith(SKIP_HREF_PREFIXES):
        return None
    return href


def find_link(node: Tag, title_element: Optional[Tag], link_base: str) -> Optional[str]:
    """Absolute event URL: title anchor first, then any anchor in the node."""
    candidates: list[Optional[Tag]] = []
    if title_element is not None:
        if title_element.name == "a":
            candidates.append(title_element)
        candidates.append(title_element.find("a", href=True))
        candidates.append(title_element.find_parent("a"))
    if node.name == "a":
        candidates.append(node)
    candidates.extend(node.find_all("a", href=True))

    for element in candidates:
        href = _usable_href(element)
        if href:
            return urljoin(link_base, href)
    return None


def truncate(text: str, max_length: int = MAX_DESCRIPTION_LENGTH) -> str:
    """Cut long descriptions on a word boundary."""
    if len(text) <= max_length:
        return text
    return text[:max_length].rsplit(" ", 1)[0] + "..."

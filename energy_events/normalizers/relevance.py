"""Keyword relevance filter for energy/climate events.

Broad sources (think tanks, city calendars, Eventbrite searches) list plenty
of unrelated events. A candidate is kept if its title or description
mentions any keyword below. Generic event words count too, since niche
sources rarely repeat "energy" in every listing.
"""

# Domain terms
DOMAIN_KEYWORDS = [
    "energy",
    "climate",
    "solar",
    "wind",
    "grid",
    "carbon",
    "emission",
    "renewable",
    "clean power",
    "clean tech",
    "cleantech",
    "electric",
    "utility",
    "utilities",
    "power plant",
    "power sector",
    "nuclear",
    "hydrogen",
    "battery",
    "batteries",
    "storage",
    "efficiency",
    "decarboniz",
    "decarbonis",
    "net zero",
    "net-zero",
    "sustainab",
    "environment",
    "oil",
    "natural gas",
    "lng",
    "pipeline",
    "transmission",
    "fossil",
    "geothermal",
    "hydropower",
    "methane",
    "ev ",
    "electric vehicle",
    "charging",
    "resilience",
    "ferc",
]

# Generic event-type words
EVENT_KEYWORDS = [
    "conference",
    "summit",
    "workshop",
    "forum",
    "webinar",
    "briefing",
]

RELEVANCE_KEYWORDS = DOMAIN_KEYWORDS + EVENT_KEYWORDS


def _haystack(title: str, description: str) -> str:
    # Trailing space lets "ev " match at the very end of a title
    return f"{title or ''} {description or ''} ".lower()


def is_relevant(title: str, description: str = "") -> bool:
    """True if title + description contain at least one relevance keyword."""
    text = _haystack(title, description)
    return any(keyword in text for keyword in RELEVANCE_KEYWORDS)


def matched_keywords(title: str, description: str = "") -> list[str]:
    """Keywords that made a candidate relevant (for debugging)."""
    text = _haystack(title, description)
    return [keyword for keyword in RELEVANCE_KEYWORDS if keyword in text]

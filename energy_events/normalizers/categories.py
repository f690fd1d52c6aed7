"""Coarse event categories from title/description keywords.

Order matters: a "Climate Summit Workshop Series" is a Summit, an
"Annual Conference Webinar Preview" is a Conference.
"""

from typing import Optional

CATEGORY_KEYWORDS: list[tuple[str, list[str]]] = [
    ("Conference", ["conference", "convention", "expo", "symposium"]),
    ("Summit", ["summit"]),
    ("Workshop", ["workshop", "hackathon", "bootcamp"]),
    ("Webinar", ["webinar", "webcast", "virtual event", "livestream", "online event"]),
    ("Briefing", ["briefing", "hearing", "testimony"]),
    ("Forum", ["forum", "panel", "roundtable", "town hall", "discussion"]),
    ("Training", ["training", "course", "certification", "class"]),
    ("Networking", ["networking", "happy hour", "reception", "mixer", "meetup"]),
    ("Meeting", ["meeting", "commission", "board", "committee"]),
]

CATEGORIES = [name for name, _ in CATEGORY_KEYWORDS]


def classify_category(title: str, description: str = "") -> Optional[str]:
    """Map an event to a coarse category, title first, then description."""
    for text in (title or "", description or ""):
        lowered = text.lower()
        for category, keywords in CATEGORY_KEYWORDS:
            if any(keyword in lowered for keyword in keywords):
                return category
    return None

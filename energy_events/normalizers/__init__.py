"""Text normalizers: dates, relevance, categories."""

from energy_events.normalizers.dates import normalize_date, extract_time
from energy_events.normalizers.relevance import is_relevant, matched_keywords, RELEVANCE_KEYWORDS
from energy_events.normalizers.categories import classify_category, CATEGORIES

__all__ = [
    "normalize_date",
    "extract_time",
    "is_relevant",
    "matched_keywords",
    "RELEVANCE_KEYWORDS",
    "classify_category",
    "CATEGORIES",
]

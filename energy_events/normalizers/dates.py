"""Free-text date normalization.

Event pages format dates every way imaginable ("Tuesday, March 5, 2025",
"03/05/2025", "5 Mar", "Tomorrow at 2pm"). Everything is reduced to a
canonical YYYY-MM-DD string, or None when no date can be recovered.

Attempts, first success wins:
1. Relative keywords (today, tomorrow, next week)
2. Strict ISO-8601
3. dateutil free-form parse
4. Regex patterns scanned over the text
"""

import random
import re
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from dateutil import parser as date_parser

MONTHS = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sept": 9, "sep": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}

# Longest names first so "September" wins over "Sep"
MONTH_NAME = (
    r"(?:January|February|March|April|May|June|July|August|September|October|"
    r"November|December|Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec)\.?"
)
ORDINAL = r"(?:st|nd|rd|th)?"

RELATIVE_KEYWORDS = [
    ("today", 0),
    ("tomorrow", 1),
    ("next week", 7),
]

# Gate for the free-form parser: dateutil happily turns "10" into a date
LOOKS_LIKE_DATE = re.compile(rf"\b{MONTH_NAME}|\b\d{{1,4}}[/.-]\d{{1,2}}", re.I)

# "June 10-12" and "10-12 June" style day ranges
DAY_RANGES = [
    re.compile(rf"\b({MONTH_NAME}\s+\d{{1,2}}){ORDINAL}\s*[-–]\s*\d{{1,2}}{ORDINAL}\b", re.I),
    re.compile(rf"\b(\d{{1,2}}){ORDINAL}\s*[-–]\s*\d{{1,2}}{ORDINAL}(\s+{MONTH_NAME})", re.I),
]


def _month(name: str) -> int:
    return MONTHS[name.lower().rstrip(".")]


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _year(raw: Optional[str], reference: datetime) -> int:
    return int(raw) if raw else reference.year


# (pattern, builder) pairs; builders return None for impossible dates
DATE_REGEXES: list[tuple[re.Pattern, Callable[[re.Match, datetime], Optional[date]]]] = [
    # MM/DD/YYYY
    (
        re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b"),
        lambda m, ref: _safe_date(int(m.group(3)), int(m.group(1)), int(m.group(2))),
    ),
    # YYYY-MM-DD
    (
        re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b"),
        lambda m, ref: _safe_date(int(m.group(1)), int(m.group(2)), int(m.group(3))),
    ),
    # MM-DD-YYYY
    (
        re.compile(r"\b(\d{1,2})-(\d{1,2})-(\d{4})\b"),
        lambda m, ref: _safe_date(int(m.group(3)), int(m.group(1)), int(m.group(2))),
    ),
    # Month DD[, YYYY], also "March 5-7, 2025" and abbreviations ("Sept. 9")
    (
        re.compile(
            rf"\b({MONTH_NAME})\s+(\d{{1,2}}){ORDINAL}"
            rf"(?:\s*[-–]\s*\d{{1,2}}{ORDINAL})?(?:,?\s+(\d{{4}}))?\b",
            re.I,
        ),
        lambda m, ref: _safe_date(_year(m.group(3), ref), _month(m.group(1)), int(m.group(2))),
    ),
    # DD Month [YYYY]
    (
        re.compile(
            rf"\b(\d{{1,2}}){ORDINAL}\s+(?:of\s+)?({MONTH_NAME})(?:,?\s+(\d{{4}}))?\b",
            re.I,
        ),
        lambda m, ref: _safe_date(_year(m.group(3), ref), _month(m.group(2)), int(m.group(1))),
    ),
]

TIME_PATTERNS = [
    # 2:00 - 3:30 pm, 9am-5pm
    re.compile(
        r"\b\d{1,2}(?::\d{2})?\s*(?:[ap]\.?m\.?)?\s*[-–]\s*\d{1,2}(?::\d{2})?\s*[ap]\.?m\.?(?![a-z])",
        re.I,
    ),
    # 2:00 PM, 10am
    re.compile(r"\b\d{1,2}(?::\d{2})?\s*[ap]\.?m\.?(?![a-z])", re.I),
    # 14:30
    re.compile(r"(?<![\d:])(?:[01]?\d|2[0-3]):[0-5]\d(?![\d:])"),
]


def parse_relative(text: str, reference: datetime) -> Optional[str]:
    """Resolve 'today', 'tomorrow' and 'next week' against the reference."""
    lowered = text.lower()
    for keyword, days in RELATIVE_KEYWORDS:
        if keyword in lowered:
            return (reference + timedelta(days=days)).date().isoformat()
    return None


def parse_iso(text: str) -> Optional[str]:
    """Strict ISO-8601 (date or datetime)."""
    candidate = text.strip()
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(candidate).date().isoformat()
    except ValueError:
        return None


def collapse_day_range(text: str) -> str:
    """Keep only the first day of a day range, e.g. June 10-12 becomes June 10."""
    for pattern in DAY_RANGES:
        text = pattern.sub(lambda m: "".join(g for g in m.groups() if g), text)
    return text


def parse_freeform(text: str, reference: datetime) -> Optional[str]:
    """Locale-style free-form parse ("Tuesday, March 5, 2025 2:00 PM")."""
    if not LOOKS_LIKE_DATE.search(text):
        return None
    text = collapse_day_range(text)
    try:
        # Defaults differ only in the day, so differing results mean no day in the text
        parsed = date_parser.parse(text.strip(), default=datetime(reference.year, 1, 1), dayfirst=False)
        check = date_parser.parse(text.strip(), default=datetime(reference.year, 1, 2), dayfirst=False)
    except (ValueError, OverflowError, TypeError):
        return None
    if parsed.date() != check.date():
        return None
    return parsed.date().isoformat()


def parse_patterns(text: str, reference: datetime) -> Optional[str]:
    """Scan the text with each fallback regex in turn."""
    for pattern, build in DATE_REGEXES:
        for match in pattern.finditer(text):
            parsed = build(match, reference)
            if parsed:
                return parsed.isoformat()
    return None


def normalize_date(
    text: Optional[str],
    reference_now: Optional[datetime] = None,
    allow_synthetic: bool = False,
    rng: Optional[random.Random] = None,
) -> Optional[str]:
    """Convert arbitrary date text to YYYY-MM-DD.

    Args:
        text: Raw date text scraped from a page
        reference_now: "Now" for relative keywords and missing years
        allow_synthetic: Legacy backfill only. When nothing parses, return a
            random date 1-30 days after reference_now instead of None.
        rng: Random source for synthetic dates

    Returns:
        Canonical date string, or None if the text holds no recognizable date
    """
    reference = reference_now or datetime.now()

    if text and text.strip():
        for attempt in (
            lambda: parse_relative(text, reference),
            lambda: parse_iso(text),
            lambda: parse_freeform(text, reference),
            lambda: parse_patterns(text, reference),
        ):
            result = attempt()
            if result:
                return result

    if allow_synthetic:
        rng = rng or random.Random()
        return (reference + timedelta(days=rng.randint(1, 30))).date().isoformat()

    return None


def extract_time(text: Optional[str]) -> Optional[str]:
    """Best-effort time of day ("2:00 PM", "9am-5pm", "14:30")."""
    if not text:
        return None
    for pattern in TIME_PATTERNS:
        match = pattern.search(text)
        if match:
            return re.sub(r"\s+", " ", match.group(0)).strip()
    return None

"""Event records: freshly extracted candidates and their persisted form."""

import hashlib
from datetime import date as date_type, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def is_iso_date(value: Optional[str]) -> bool:
    """True if value is a real calendar date in YYYY-MM-DD form."""
    if not value or len(value) != 10:
        return False
    try:
        date_type.fromisoformat(value)
        return True
    except ValueError:
        return False


def event_id(source: str, title: str, date: Optional[str], host: str) -> str:
    """Stable identity for a real-world event.

    Re-scraping the same event produces the same id, so stores upsert it
    instead of adding a duplicate row.
    """
    key = "|".join(
        part.strip().lower() for part in (source, title, date or "", host)
    )
    return hashlib.sha256(key.encode()).hexdigest()[:16]


class CandidateEvent(BaseModel):
    """An event extracted from a source page, before persistence."""

    title: str
    date: Optional[str] = None  # YYYY-MM-DD, None if unparseable
    time: Optional[str] = None  # free-form, best effort
    location: str = "Washington DC"
    host: str
    link: str
    source: str
    description: str = ""
    category: Optional[str] = None

    class Config:
        extra = "ignore"

    @field_validator("title", "link")
    @classmethod
    def _required_text(cls, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _canonical_date(cls, value):
        if value in (None, ""):
            return None
        if not is_iso_date(value):
            raise ValueError(f"date must be YYYY-MM-DD, got {value!r}")
        return value

    def persist(self, created_at: str) -> "PersistedEvent":
        """Stamp this candidate with its stable id and ingestion time."""
        return PersistedEvent(
            **self.model_dump(),
            id=event_id(self.source, self.title, self.date, self.host),
            created_at=created_at,
        )


class PersistedEvent(CandidateEvent):
    """A stored event: candidate fields plus identity and ingestion time."""

    id: str
    created_at: str = Field(
        default_factory=lambda: datetime.now().isoformat(timespec="seconds")
    )

    @property
    def date_timestamp(self) -> Optional[int]:
        """Unix timestamp of the event day, for index ranking."""
        if not self.date:
            return None
        return int(datetime.strptime(self.date, "%Y-%m-%d").timestamp())

    def to_record(self) -> dict:
        """Convert to the camelCase document shape used by stores and the API."""
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date,
            "time": self.time,
            "location": self.location,
            "host": self.host,
            "link": self.link,
            "source": self.source,
            "description": self.description,
            "category": self.category,
            "createdAt": self.created_at,
        }

    def to_algolia_record(self) -> dict:
        """Convert to an Algolia-compatible dict."""
        record = self.to_record()
        record["objectID"] = self.id
        record["dateTimestamp"] = self.date_timestamp
        # Filter out None/empty values
        return {k: v for k, v in record.items() if v is not None and v != ""}

    @classmethod
    def from_record(cls, record: dict) -> "PersistedEvent":
        """Build from a stored document (camelCase or snake_case keys)."""
        data = dict(record)
        if "createdAt" in data:
            data["created_at"] = data.pop("createdAt")
        if "id" not in data and "objectID" in data:
            data["id"] = data["objectID"]
        return cls.model_validate(data)


class FeedFilter(BaseModel):
    """Consumer-side filter for the feed view."""

    source: str = "all"
    category: str = "all"
    search_term: str = ""
    start_date: Optional[str] = None  # inclusive, YYYY-MM-DD
    end_date: Optional[str] = None  # inclusive, YYYY-MM-DD

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _range_bound(cls, value):
        if value in (None, ""):
            return None
        if not is_iso_date(value):
            raise ValueError(f"date bound must be YYYY-MM-DD, got {value!r}")
        return value

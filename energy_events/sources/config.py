"""Declarative per-site scraping configuration.

Adding a source is a data change: describe where its listings live with
selector fallback chains and the generic extractor does the rest.
"""

from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator, model_validator

from energy_events.config import SCRAPE_TIMEOUT

DC = "Washington DC"
ONLINE = "Online"

# Catch-all listing nodes; candidates found through them must carry a date
GENERIC_SELECTORS = frozenset({"article", ".card", "li", ".teaser"})


class SourceConfig(BaseModel):
    """How to find events on one external site."""

    slug: str  # stable filter key, e.g. "dmv-climate"
    host: str  # organization name shown on every event
    base_url: str  # page to fetch
    link_base: Optional[str] = None  # for relative hrefs, defaults to scheme and host of base_url
    request_headers: dict[str, str] = Field(default_factory=dict)

    # Fallback chains: first selector that yields a non-empty result wins
    candidate_selectors: list[str]
    title_selectors: list[str] = Field(default_factory=lambda: ["h3 a", "h2 a", "h3", "h2", ".title"])
    date_selectors: list[str] = Field(default_factory=list)
    time_selectors: list[str] = Field(default_factory=list)
    location_selectors: list[str] = Field(default_factory=list)
    description_selectors: list[str] = Field(default_factory=lambda: ["p"])

    default_location: str = DC
    category: Optional[str] = None  # fixed category, e.g. "Briefing" for EESI
    requires_relevance_filter: bool = False
    strict_dates: bool = False  # drop dateless candidates even from targeted selectors
    max_candidates: int = 12
    timeout: float = SCRAPE_TIMEOUT
    enabled: bool = True

    class Config:
        extra = "forbid"

    @field_validator("max_candidates")
    @classmethod
    def _bounded_scan(cls, value: int) -> int:
        if not 10 <= value <= 15:
            raise ValueError("max_candidates must be between 10 and 15")
        return value

    @field_validator("candidate_selectors")
    @classmethod
    def _has_candidates(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("at least one candidate selector is required")
        return value

    @model_validator(mode="after")
    def _default_link_base(self) -> "SourceConfig":
        if not self.link_base:
            parsed = urlparse(self.base_url)
            self.link_base = f"{parsed.scheme}://{parsed.netloc}"
        return self

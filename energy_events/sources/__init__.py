"""Event source definitions."""

from energy_events.sources.config import SourceConfig, DC, ONLINE
from energy_events.sources.catalog import SOURCES, SOURCES_BY_SLUG, get_sources

__all__ = [
    "SourceConfig",
    "DC",
    "ONLINE",
    "SOURCES",
    "SOURCES_BY_SLUG",
    "get_sources",
]

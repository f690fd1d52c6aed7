"""Centralised configuration.

Environment variables are loaded once from `.env` (if present). CLI options
and API dependencies read these constants as defaults.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(override=True)

CACHE_DIR = Path(os.environ.get("EVENTS_CACHE_DIR", Path(__file__).parent.parent / ".cache"))

# Persistence
EVENTS_STORE = os.environ.get("EVENTS_STORE", "json").lower()  # "json" or "algolia"
EVENTS_STORE_PATH = Path(os.environ.get("EVENTS_STORE_PATH", CACHE_DIR / "events.json"))
SUBSCRIPTIONS_PATH = Path(os.environ.get("SUBSCRIPTIONS_PATH", CACHE_DIR / "subscriptions.json"))

ALGOLIA_APP_ID = os.environ.get("ALGOLIA_APP_ID")
ALGOLIA_API_KEY = os.environ.get("ALGOLIA_API_KEY")
ALGOLIA_INDEX_NAME = os.environ.get("ALGOLIA_INDEX_NAME", "energy_events")

# Scraping
SCRAPE_TIMEOUT = float(os.environ.get("SCRAPE_TIMEOUT", "10"))
SCRAPE_MAX_CONCURRENT = int(os.environ.get("SCRAPE_MAX_CONCURRENT", "0"))  # 0 = unbounded
SCRAPER_USER_AGENT = os.environ.get(
    "SCRAPER_USER_AGENT",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) DCEnergyEvents/0.1",
)

# Email
RESEND_API_KEY = os.environ.get("RESEND_API_KEY")
RESEND_API_URL = os.environ.get("RESEND_API_URL", "https://api.resend.com/emails")
EMAIL_FROM = os.environ.get("EMAIL_FROM", "DC Energy Events <events@example.org>")

# API
DEFAULT_EVENTS_LIMIT = 50

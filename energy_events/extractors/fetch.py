"""HTTP fetcher for source pages.

Every request carries the fixed identifying User-Agent and its own timeout,
so one unreachable site costs at most its timeout. An optional on-disk HTML
cache makes repeated local runs cheap.
"""

import hashlib
import json
from datetime import datetime
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import httpx
from rich.console import Console

from energy_events.config import CACHE_DIR, SCRAPE_TIMEOUT, SCRAPER_USER_AGENT

console = Console()

HTML_CACHE_DIR = CACHE_DIR / "html"
CACHE_TTL_HOURS = 6

DEFAULT_HEADERS = {
    "User-Agent": SCRAPER_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


def get_cache_path(url: str) -> Path:
    """Get cache file path for URL."""
    url_hash = hashlib.sha256(url.encode()).hexdigest()[:16]
    domain = urlparse(url).netloc.replace(".", "_")
    return HTML_CACHE_DIR / f"{domain}_{url_hash}.json"


def load_from_cache(url: str) -> Optional[str]:
    """Return cached HTML if present and fresh."""
    cache_path = get_cache_path(url)
    if not cache_path.exists():
        return None
    try:
        with open(cache_path) as f:
            cache = json.load(f)
    except (json.JSONDecodeError, OSError):
        return None
    age_hours = (datetime.now().timestamp() - cache.get("cached_at", 0)) / 3600
    if age_hours >= CACHE_TTL_HOURS:
        return None
    return cache.get("html")


def save_to_cache(url: str, html: str) -> None:
    """Save HTML to cache."""
    HTML_CACHE_DIR.mkdir(parents=True, exist_ok=True)
    with open(get_cache_path(url), "w") as f:
        json.dump({
            "url": url,
            "cached_at": datetime.now().timestamp(),
            "html": html,
        }, f)


class FetchResult:
    """Result of a page fetch with error details."""
    def __init__(
        self,
        html: Optional[str] = None,
        status: Optional[int] = None,
        error: Optional[str] = None,
        cached: bool = False,
    ):
        self.html = html
        self.status = status
        self.error = error  # "timeout", "connection", "404", ...
        self.cached = cached

    @property
    def ok(self) -> bool:
        return bool(self.html)


async def fetch_html(
    client: httpx.AsyncClient,
    url: str,
    headers: Optional[dict[str, str]] = None,
    timeout: float = SCRAPE_TIMEOUT,
    use_cache: bool = False,
) -> FetchResult:
    """GET a page and return its body, never raising on network failure.

    Args:
        client: Shared async client (connection pooling only)
        url: Page to fetch
        headers: Per-source headers merged over the defaults
        timeout: Per-request timeout in seconds
        use_cache: Read/write the local HTML cache

    Returns:
        FetchResult with html set on success, error set otherwise
    """
    if use_cache:
        html = load_from_cache(url)
        if html:
            return FetchResult(html=html, status=200, cached=True)

    request_headers = {**DEFAULT_HEADERS, **(headers or {})}

    try:
        response = await client.get(url, headers=request_headers, timeout=timeout)
        response.raise_for_status()
    except httpx.TimeoutException:
        return FetchResult(error="timeout")
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        return FetchResult(status=status, error=str(status))
    except httpx.ConnectError:
        return FetchResult(error="connection")
    except httpx.HTTPError as e:
        return FetchResult(error=type(e).__name__.lower())

    html = response.text
    if use_cache and html:
        save_to_cache(url, html)

    return FetchResult(html=html, status=response.status_code)

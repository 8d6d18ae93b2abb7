"""DuckDuckGo HTML endpoint adapter."""

from __future__ import annotations

import asyncio
import re
from urllib.parse import unquote_plus

import httpx
from bs4 import BeautifulSoup
from loguru import logger

from duckweb.config.schema import DEFAULT_USER_AGENT
from duckweb.errors import DecodeFailure, ParseFailure, TransportFailure, UpstreamStatusError
from duckweb.net.ratelimit import RateLimiter
from duckweb.tools.websearch.models import SearchResult

DEFAULT_ENDPOINT = "https://html.duckduckgo.com/html"
REDIRECT_PREFIX = "//duckduckgo.com/l/?uddg="
AD_MARKER = "y.js"

_SAFE_SEARCH_CODES = {
    "strict": "1",
    "off": "-2",
}
_MODERATE_CODE = "-1"
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def safe_search_code(level: str | None) -> str:
    """
    Map a safe-search level to DuckDuckGo's `kp` value.

    Unknown levels fall back to moderate instead of failing.
    """
    return _SAFE_SEARCH_CODES.get((level or "").lower(), _MODERATE_CODE)


def decode_redirect(link: str) -> str:
    """Return the destination embedded in a redirect-wrapper link."""
    _, sep, tail = link.partition("uddg=")
    if not sep:
        raise DecodeFailure(f"no uddg parameter in {link}")
    encoded = tail.split("&", 1)[0]
    if not encoded:
        raise DecodeFailure(f"empty uddg parameter in {link}")
    if _BAD_ESCAPE.search(encoded):
        raise DecodeFailure(f"invalid escape in {encoded!r}")
    try:
        return unquote_plus(encoded, errors="strict")
    except UnicodeDecodeError as e:
        raise DecodeFailure(f"cannot decode {encoded!r}: {e}") from e


def unwrap_redirect(link: str) -> str:
    """Replace a redirect-wrapper link by its destination, keeping it on failure."""
    if not link.startswith(REDIRECT_PREFIX):
        return link
    try:
        return decode_redirect(link)
    except DecodeFailure as e:
        logger.debug("Keeping wrapper link: {}", e)
        return link


def parse_results(html: str, max_results: int) -> list[SearchResult]:
    """Extract up to `max_results` organic results from a result page."""
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as e:
        raise ParseFailure(f"cannot parse search page: {e}") from e

    results: list[SearchResult] = []
    if max_results <= 0:
        return results

    for container in soup.select(".result"):
        title_elem = container.select_one(".result__title")
        if title_elem is None:
            continue
        link_elem = title_elem.find("a")
        if link_elem is None:
            continue
        link = link_elem.get("href")
        if not link:
            continue
        if AD_MARKER in link:
            continue

        snippet_elem = container.select_one(".result__snippet")
        snippet = snippet_elem.get_text().strip() if snippet_elem is not None else ""

        results.append(
            SearchResult(
                title=link_elem.get_text().strip(),
                link=unwrap_redirect(link),
                snippet=snippet,
                position=len(results) + 1,
            )
        )
        if len(results) >= max_results:
            break

    return results


class DuckDuckGoSearcher:
    """Search DuckDuckGo's HTML endpoint through a rate limiter."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        limiter: RateLimiter | None = None,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        user_agent: str = DEFAULT_USER_AGENT,
        request_timeout: float | None = 30.0,
    ):
        self.client = client
        self.limiter = limiter or RateLimiter(interval=1.0, burst=1)
        self.endpoint = endpoint
        self.user_agent = user_agent
        self.request_timeout = request_timeout

    async def search(
        self,
        query: str,
        max_results: int = 10,
        safe_search: str = "moderate",
        *,
        timeout: float | None = None,
    ) -> list[SearchResult]:
        await self.limiter.wait(timeout)

        form = {"q": query, "b": "", "kl": "", "kp": safe_search_code(safe_search)}
        headers = {
            "User-Agent": self.user_agent,
            "Content-Type": "application/x-www-form-urlencoded",
        }
        try:
            response = await asyncio.wait_for(
                self.client.post(self.endpoint, data=form, headers=headers),
                timeout=self.request_timeout,
            )
        except asyncio.TimeoutError as e:
            raise TransportFailure(f"search timed out after {self.request_timeout}s") from e
        except httpx.HTTPError as e:
            raise TransportFailure(str(e) or type(e).__name__) from e

        if response.status_code != 200:
            raise UpstreamStatusError(response.status_code, self.endpoint)

        results = parse_results(response.text, max_results)
        logger.debug("Search {!r} returned {} results", query, len(results))
        return results

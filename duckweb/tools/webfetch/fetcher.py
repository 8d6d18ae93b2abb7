"""Fetch a page and reduce it to a compact block of visible text."""

from __future__ import annotations

import asyncio

import httpx
from bs4 import BeautifulSoup
from loguru import logger

from duckweb.config.schema import DEFAULT_USER_AGENT
from duckweb.errors import ParseFailure, TransportFailure, UpstreamStatusError
from duckweb.net.ratelimit import RateLimiter

DEFAULT_MAX_CHARS = 8000
TRUNCATION_MARKER = "... [truncated]"
NOISE_SELECTOR = "script, style, nav, header, footer"


def extract_text(html: str) -> str:
    """Return the document text with script, style and page chrome removed."""
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as e:
        raise ParseFailure(f"cannot parse page: {e}") from e
    for element in soup.select(NOISE_SELECTOR):
        element.extract()
    return soup.get_text()


def clean_text(text: str, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """Collapse whitespace into a single line and cap it at `max_chars`."""
    lines = (" ".join(line.split()) for line in text.splitlines())
    cleaned = " ".join(line for line in lines if line)
    if len(cleaned) > max_chars:
        cleaned = cleaned[:max_chars] + TRUNCATION_MARKER
    return cleaned


class WebContentFetcher:
    """Fetch web pages through a rate limiter and return cleaned text."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        limiter: RateLimiter | None = None,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        max_chars: int = DEFAULT_MAX_CHARS,
        request_timeout: float | None = 30.0,
    ):
        self.client = client
        self.limiter = limiter or RateLimiter.per_minute(20)
        self.user_agent = user_agent
        self.max_chars = max_chars
        self.request_timeout = request_timeout

    async def fetch_and_parse(self, url: str, *, timeout: float | None = None) -> str:
        await self.limiter.wait(timeout)

        try:
            response = await asyncio.wait_for(
                self.client.get(url, headers={"User-Agent": self.user_agent}),
                timeout=self.request_timeout,
            )
        except asyncio.TimeoutError as e:
            raise TransportFailure(f"fetch timed out after {self.request_timeout}s") from e
        except httpx.HTTPError as e:
            raise TransportFailure(str(e) or type(e).__name__) from e

        if response.status_code != 200:
            raise UpstreamStatusError(response.status_code, url)

        text = clean_text(extract_text(response.text), self.max_chars)
        logger.debug("Fetched {} ({} characters)", url, len(text))
        return f"Successfully fetched and parsed content ({len(text)} characters):\n{text}"

import httpx
import pytest

from duckweb.errors import RateLimitCancelled, TransportFailure, UpstreamStatusError
from duckweb.net.ratelimit import RateLimiter
from duckweb.tools.webfetch.fetcher import (
    TRUNCATION_MARKER,
    WebContentFetcher,
    clean_text,
    extract_text,
)


def test_clean_text_collapses_whitespace_and_drops_blank_lines() -> None:
    text = "  first   line  \n\n   \t  \nsecond\tline\r\n   third    "

    assert clean_text(text) == "first line second line third"


def test_clean_text_truncates_to_max_chars_with_marker() -> None:
    cleaned = clean_text("x" * 9000)

    assert cleaned == "x" * 8000 + TRUNCATION_MARKER
    assert len(cleaned) == 8000 + len(TRUNCATION_MARKER)


def test_clean_text_keeps_text_at_limit() -> None:
    assert clean_text("y" * 8000) == "y" * 8000


def test_extract_text_strips_noise_elements() -> None:
    html = (
        "<html><head><style>body {}</style><script>var a = 1;</script></head>"
        "<body><header>Site header</header><nav>Menu</nav>"
        "<main><p>Article text</p></main>"
        "<footer>Copyright</footer></body></html>"
    )

    text = clean_text(extract_text(html))

    assert text == "Article text"


def _fetcher(handler, limiter: RateLimiter | None = None, **kwargs) -> WebContentFetcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WebContentFetcher(client, limiter or RateLimiter(0.001, burst=1), **kwargs)


@pytest.mark.asyncio
async def test_fetch_returns_cleaned_text_with_count() -> None:
    calls: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["method"] = request.method
        calls["headers"] = request.headers
        return httpx.Response(
            200, text="<html><script>x</script><body>  Hello   World  </body></html>"
        )

    fetcher = _fetcher(handler)
    result = await fetcher.fetch_and_parse("https://example.com/")

    assert result == "Successfully fetched and parsed content (11 characters):\nHello World"
    assert calls["method"] == "GET"
    assert "Chrome/91" in calls["headers"]["user-agent"]


@pytest.mark.asyncio
async def test_fetch_reports_length_of_truncated_text() -> None:
    body = "<html><body><p>" + "a" * 9000 + "</p></body></html>"
    fetcher = _fetcher(lambda request: httpx.Response(200, text=body))

    result = await fetcher.fetch_and_parse("https://example.com/long")

    header, text = result.split("\n", 1)
    assert text == "a" * 8000 + TRUNCATION_MARKER
    assert header == f"Successfully fetched and parsed content ({len(text)} characters):"


@pytest.mark.asyncio
async def test_fetch_honors_configured_max_chars() -> None:
    fetcher = _fetcher(
        lambda request: httpx.Response(200, text="<p>abcdefghij</p>"), max_chars=4
    )

    result = await fetcher.fetch_and_parse("https://example.com/")

    assert result.endswith("\nabcd" + TRUNCATION_MARKER)


@pytest.mark.asyncio
async def test_fetch_non_200_fails() -> None:
    fetcher = _fetcher(lambda request: httpx.Response(404, text="missing"))

    with pytest.raises(UpstreamStatusError, match="status: 404"):
        await fetcher.fetch_and_parse("https://example.com/missing")


@pytest.mark.asyncio
async def test_fetch_wraps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    fetcher = _fetcher(handler)

    with pytest.raises(TransportFailure, match="timed out"):
        await fetcher.fetch_and_parse("https://example.com/slow")


@pytest.mark.asyncio
async def test_fetch_with_expired_deadline_is_rate_limit_cancelled() -> None:
    fetcher = _fetcher(lambda request: httpx.Response(200, text=""), RateLimiter.per_minute(20))

    with pytest.raises(RateLimitCancelled):
        await fetcher.fetch_and_parse("https://example.com/", timeout=0)

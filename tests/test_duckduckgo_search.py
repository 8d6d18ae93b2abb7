from urllib.parse import parse_qs

import httpx
import pytest

from duckweb.errors import DecodeFailure, RateLimitCancelled, TransportFailure, UpstreamStatusError
from duckweb.net.ratelimit import RateLimiter
from duckweb.tools.websearch.duckduckgo import (
    DuckDuckGoSearcher,
    decode_redirect,
    parse_results,
    safe_search_code,
    unwrap_redirect,
)


def _result_block(i: int, href: str | None = None, snippet: str | None = "Snippet") -> str:
    href = href or f"//duckduckgo.com/l/?uddg=https%3A%2F%2Fexample.com%2Fpage{i}%3Fa%3D1&rut=abc"
    snippet_html = (
        f'<a class="result__snippet" href="#">  {snippet} {i}  </a>' if snippet is not None else ""
    )
    return (
        '<div class="result results_links results_links_deep web-result">'
        '<div class="links_main links_deep result__body">'
        f'<h2 class="result__title"><a rel="nofollow" class="result__a" href="{href}">'
        f"  Title {i} </a></h2>"
        f"{snippet_html}"
        "</div></div>"
    )


def _page(*blocks: str) -> str:
    return f'<html><body><div id="links" class="results">{"".join(blocks)}</div></body></html>'


def test_safe_search_mapping() -> None:
    assert safe_search_code("strict") == "1"
    assert safe_search_code("STRICT") == "1"
    assert safe_search_code("off") == "-2"
    assert safe_search_code("Off") == "-2"
    assert safe_search_code("moderate") == "-1"
    assert safe_search_code("whatever") == "-1"
    assert safe_search_code("") == "-1"
    assert safe_search_code(None) == "-1"


def test_decode_redirect() -> None:
    link = "//duckduckgo.com/l/?uddg=https%3A%2F%2Fexample.com%2Fa%20b&rut=xyz"

    assert decode_redirect(link) == "https://example.com/a b"
    assert unwrap_redirect(link) == "https://example.com/a b"


def test_unwrap_keeps_wrapper_link_when_decode_fails() -> None:
    link = "//duckduckgo.com/l/?uddg=https%3A%2F%2Fexample.com%zz&rut=xyz"

    with pytest.raises(DecodeFailure):
        decode_redirect(link)
    assert unwrap_redirect(link) == link


def test_unwrap_leaves_direct_links_alone() -> None:
    assert unwrap_redirect("https://example.com/") == "https://example.com/"


def test_parse_results_positions_are_dense_and_links_unwrapped() -> None:
    html = _page(*(_result_block(i) for i in range(1, 6)))

    results = parse_results(html, 10)

    assert [r.position for r in results] == [1, 2, 3, 4, 5]
    assert results[0].title == "Title 1"
    assert results[0].link == "https://example.com/page1?a=1"
    assert results[0].snippet == "Snippet 1"
    assert all("duckduckgo.com/l/" not in r.link for r in results)


def test_parse_results_stops_at_max_results() -> None:
    html = _page(*(_result_block(i) for i in range(1, 6)))

    results = parse_results(html, 2)

    assert [r.position for r in results] == [1, 2]


def test_parse_results_skips_ads_and_incomplete_blocks() -> None:
    html = _page(
        _result_block(1, href="https://duckduckgo.com/y.js?ad_provider=bing&u3=x"),
        '<div class="result"><a class="result__snippet">no title</a></div>',
        '<div class="result"><h2 class="result__title">no link</h2></div>',
        '<div class="result"><h2 class="result__title"><a>no href</a></h2></div>',
        _result_block(2, href="https://direct.example.org/", snippet=None),
    )

    results = parse_results(html, 10)

    assert len(results) == 1
    assert results[0].position == 1
    assert results[0].link == "https://direct.example.org/"
    assert results[0].snippet == ""


def test_parse_results_empty_page_returns_empty_list() -> None:
    assert parse_results("<html><body>No results.</body></html>", 10) == []


def _searcher(handler, limiter: RateLimiter | None = None) -> DuckDuckGoSearcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return DuckDuckGoSearcher(client, limiter or RateLimiter(0.001, burst=1))


@pytest.mark.asyncio
async def test_search_posts_form_and_returns_requested_count() -> None:
    calls: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["method"] = request.method
        calls["url"] = str(request.url)
        calls["headers"] = request.headers
        calls["form"] = parse_qs(request.content.decode(), keep_blank_values=True)
        return httpx.Response(200, text=_page(*(_result_block(i) for i in range(1, 6))))

    searcher = _searcher(handler)
    results = await searcher.search("test query", max_results=2, safe_search="strict")

    assert [r.position for r in results] == [1, 2]
    assert calls["method"] == "POST"
    assert calls["url"] == "https://html.duckduckgo.com/html"
    assert calls["form"] == {"q": ["test query"], "b": [""], "kl": [""], "kp": ["1"]}
    assert calls["headers"]["content-type"] == "application/x-www-form-urlencoded"
    assert "Chrome/91" in calls["headers"]["user-agent"]


@pytest.mark.asyncio
async def test_search_non_200_fails() -> None:
    searcher = _searcher(lambda request: httpx.Response(403, text="blocked"))

    with pytest.raises(UpstreamStatusError) as exc_info:
        await searcher.search("q")
    assert exc_info.value.status_code == 403
    assert str(exc_info.value) == "status: 403"


@pytest.mark.asyncio
async def test_search_wraps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    searcher = _searcher(handler)

    with pytest.raises(TransportFailure, match="connection refused"):
        await searcher.search("q")


@pytest.mark.asyncio
async def test_search_with_expired_deadline_is_rate_limit_cancelled() -> None:
    called = {"http": False}

    def handler(request: httpx.Request) -> httpx.Response:
        called["http"] = True
        return httpx.Response(200, text="")

    searcher = _searcher(handler, RateLimiter(1.0))

    with pytest.raises(RateLimitCancelled):
        await searcher.search("q", timeout=0)
    assert called["http"] is False

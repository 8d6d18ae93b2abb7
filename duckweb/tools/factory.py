"""Tool registry factory wiring the shared network stack."""

from dataclasses import dataclass

import httpx

from duckweb.config.schema import Config
from duckweb.net.cache import ResolutionCache
from duckweb.net.ratelimit import RateLimiter
from duckweb.net.transport import build_resilient_client
from duckweb.tools.registry import ToolRegistry
from duckweb.tools.web import WebFetchTool, WebSearchTool
from duckweb.tools.webfetch import WebContentFetcher
from duckweb.tools.websearch import DuckDuckGoSearcher


@dataclass
class ToolRuntime:
    """Registry plus the resources it owns."""

    registry: ToolRegistry
    cache: ResolutionCache
    clients: list[httpx.AsyncClient]

    async def aclose(self) -> None:
        for client in self.clients:
            await client.aclose()


def build_tool_runtime(config: Config | None = None) -> ToolRuntime:
    """
    Build the search and fetch tools.

    Both tools get their own client and rate limiter; the resolution cache
    is shared so a DoH answer learned by one is reused by the other.
    """
    config = config or Config()
    network = config.network
    cache = ResolutionCache()

    search_client = build_resilient_client(network, cache=cache)
    fetch_client = build_resilient_client(network, cache=cache)

    searcher = DuckDuckGoSearcher(
        search_client,
        RateLimiter(config.search.rate_limit.interval, config.search.rate_limit.burst),
        endpoint=config.search.endpoint,
        user_agent=network.user_agent,
        request_timeout=network.timeout,
    )
    fetcher = WebContentFetcher(
        fetch_client,
        RateLimiter(config.fetch.rate_limit.interval, config.fetch.rate_limit.burst),
        user_agent=network.user_agent,
        max_chars=config.fetch.max_chars,
        request_timeout=network.timeout,
    )

    registry = ToolRegistry()
    registry.register(
        WebSearchTool(searcher, default_max_results=config.search.default_max_results)
    )
    registry.register(
        WebFetchTool(fetcher, allow_private_network=config.fetch.allow_private_network)
    )
    return ToolRuntime(registry=registry, cache=cache, clients=[search_client, fetch_client])

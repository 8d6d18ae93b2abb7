"""Web tools: DuckDuckGo search and page content fetch."""

from typing import Any

from loguru import logger

from duckweb.errors import DuckWebError
from duckweb.tools.base import Tool
from duckweb.tools.safety import validate_fetch_url
from duckweb.tools.webfetch import WebContentFetcher
from duckweb.tools.websearch import DuckDuckGoSearcher, format_results_for_llm


class WebSearchTool(Tool):
    """Search the web using DuckDuckGo."""

    name = "search"
    description = (
        "Search DuckDuckGo and return formatted results. Ideal for general queries, "
        "news, articles, and online content."
    )

    def __init__(self, searcher: DuckDuckGoSearcher, default_max_results: int = 10):
        self.searcher = searcher
        self.default_max_results = default_max_results

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "minLength": 1,
                    "description": "The search query string",
                },
                "max_results": {
                    "type": "number",
                    "minimum": 1,
                    "description": (
                        f"Maximum number of results to return (default: {self.default_max_results})"
                    ),
                },
                "safe_search": {
                    "type": "string",
                    "description": "SafeSearch level: 'strict', 'moderate', or 'off' (default: 'moderate')",
                },
            },
            "required": ["query"],
        }

    async def execute(
        self,
        query: str,
        max_results: int | float | None = None,
        safe_search: str = "moderate",
        **kwargs: Any,
    ) -> str:
        count = self.default_max_results if max_results is None else int(max_results)
        logger.info("Web search: {!r} (max_results={}, safe_search={})", query, count, safe_search)
        try:
            results = await self.searcher.search(query, count, safe_search)
        except DuckWebError as e:
            logger.warning("Web search failed for {!r}: {}", query, e)
            return f"Error: An error occurred while searching: {e}"
        return format_results_for_llm(query, results)


class WebFetchTool(Tool):
    """Fetch a web page and return its cleaned text."""

    name = "fetch_content"
    description = "Fetch and parse content from a webpage URL"
    parameters = {
        "type": "object",
        "properties": {
            "url": {
                "type": "string",
                "minLength": 1,
                "description": "The webpage URL to fetch content from",
            },
        },
        "required": ["url"],
    }

    def __init__(self, fetcher: WebContentFetcher, allow_private_network: bool = True):
        self.fetcher = fetcher
        self.allow_private_network = allow_private_network

    async def execute(self, url: str, **kwargs: Any) -> str:
        ok, reason = validate_fetch_url(url, allow_private_network=self.allow_private_network)
        if not ok:
            return f"Error: {reason}"

        logger.info("Web fetch: {}", url)
        try:
            return await self.fetcher.fetch_and_parse(url.strip())
        except DuckWebError as e:
            logger.warning("Web fetch failed for {}: {}", url, e)
            return f"Error: An error occurred while fetching content: {e}"

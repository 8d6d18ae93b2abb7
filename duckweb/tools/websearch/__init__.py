"""DuckDuckGo HTML search extraction."""

from duckweb.tools.websearch.duckduckgo import DuckDuckGoSearcher, safe_search_code, unwrap_redirect
from duckweb.tools.websearch.formatter import format_results_for_llm
from duckweb.tools.websearch.models import SearchResult

__all__ = [
    "DuckDuckGoSearcher",
    "SearchResult",
    "format_results_for_llm",
    "safe_search_code",
    "unwrap_redirect",
]

"""Render search results as markdown for the calling model."""

from duckweb.tools.websearch.models import SearchResult

_HEADER = "# DuckDuckGo Search Results"


def format_results_for_llm(query: str, results: list[SearchResult]) -> str:
    if not results:
        return f'{_HEADER}\n\nNo results found for query: "{query}"'

    lines = [f'{_HEADER}\n\nFound {len(results)} results for: "{query}"\n\n---\n\n']
    for result in results:
        lines.append(f"### {result.title}\n")
        lines.append(f"{result.snippet}\n\n")
        lines.append(f"🔗 [Read More]({result.link})\n\n")
    return "".join(lines)

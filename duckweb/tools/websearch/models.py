"""Shared web search models."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SearchResult:
    """One accepted search result; `position` is its 1-based rank."""

    title: str
    link: str
    snippet: str
    position: int

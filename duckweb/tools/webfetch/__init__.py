"""Web page fetching and text cleanup."""

from duckweb.tools.webfetch.fetcher import WebContentFetcher, clean_text, extract_text

__all__ = ["WebContentFetcher", "clean_text", "extract_text"]

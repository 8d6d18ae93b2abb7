"""duckweb - resilient DuckDuckGo search and web fetch tools."""

__version__ = "0.1.0"

"""Error kinds raised by the network and extraction layers."""


class DuckWebError(Exception):
    """Base class for failures surfaced to a tool call."""


class RateLimitCancelled(DuckWebError):
    """Raised when a rate limiter cannot admit a call before its deadline."""


class TransportFailure(DuckWebError):
    """Raised for dial, TLS and connection level failures."""


class UpstreamStatusError(DuckWebError):
    """Raised when the search provider or fetch target answers non-200."""

    def __init__(self, status_code: int, url: str = ""):
        self.status_code = status_code
        self.url = url
        super().__init__(f"status: {status_code}")


class ParseFailure(DuckWebError):
    """Raised when a response body cannot be parsed."""


class DecodeFailure(DuckWebError):
    """Raised when a redirect-wrapper link cannot be decoded."""

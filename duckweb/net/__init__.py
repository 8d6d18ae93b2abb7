"""Resilient HTTP access: DoH bootstrap resolution, dialing and rate limiting."""

from duckweb.net.cache import ResolutionCache
from duckweb.net.doh import DoHResolver
from duckweb.net.ratelimit import RateLimiter
from duckweb.net.transport import ResilientDialer, ResilientTransport, build_resilient_client

__all__ = [
    "DoHResolver",
    "RateLimiter",
    "ResilientDialer",
    "ResilientTransport",
    "ResolutionCache",
    "build_resilient_client",
]

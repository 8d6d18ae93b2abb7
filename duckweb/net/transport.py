"""HTTP client whose connections resolve blocked hosts over DoH."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

import httpcore
import httpx
from loguru import logger

from duckweb.config.schema import NetworkConfig
from duckweb.net.cache import ResolutionCache
from duckweb.net.doh import DoHError, DoHResolver


class ResilientDialer(httpcore.AsyncNetworkBackend):
    """
    Network backend that swaps the dial target for a DoH-resolved address.

    Only the TCP target changes: TLS still runs against the original
    hostname, so certificate verification and SNI are unaffected.
    """

    def __init__(
        self,
        cache: ResolutionCache,
        resolver: DoHResolver | None = None,
        doh_hosts: Sequence[str] = ("duckduckgo.com",),
        backend: httpcore.AsyncNetworkBackend | None = None,
    ):
        self.cache = cache
        self.resolver = resolver
        self.doh_hosts = tuple(doh_hosts)
        self._backend = backend or httpcore.AnyIOBackend()

    def needs_doh(self, host: str) -> bool:
        return any(pattern in host for pattern in self.doh_hosts)

    async def dial_target(self, host: str, timeout: float | None = None) -> str:
        """Return the address to connect to for `host`."""
        ip, found = self.cache.get(host)
        if found:
            return ip
        if self.resolver is None or not self.needs_doh(host):
            return host

        try:
            resolved = await self.resolver.resolve(host, timeout=timeout)
        except DoHError as e:
            logger.warning("DoH lookup failed for {}, dialing hostname directly: {}", host, e)
            return host

        self.cache.set(host, resolved)
        ip, _ = self.cache.get(host)
        return ip

    async def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: float | None = None,
        local_address: str | None = None,
        socket_options: Iterable[Any] | None = None,
    ) -> httpcore.AsyncNetworkStream:
        target = await self.dial_target(host, timeout=timeout)
        if target != host:
            logger.debug("Dialing {}:{} via {}", host, port, target)
        return await self._backend.connect_tcp(
            target,
            port,
            timeout=timeout,
            local_address=local_address,
            socket_options=socket_options,
        )

    async def connect_unix_socket(
        self,
        path: str,
        timeout: float | None = None,
        socket_options: Iterable[Any] | None = None,
    ) -> httpcore.AsyncNetworkStream:
        return await self._backend.connect_unix_socket(
            path, timeout=timeout, socket_options=socket_options
        )

    async def sleep(self, seconds: float) -> None:
        await self._backend.sleep(seconds)


class ResilientTransport(httpx.AsyncHTTPTransport):
    """httpx transport whose connection pool dials through a ResilientDialer."""

    def __init__(self, dialer: ResilientDialer, *, limits: httpx.Limits | None = None):
        limits = limits or httpx.Limits()
        super().__init__(limits=limits)
        self.dialer = dialer
        # httpx takes no network backend option; replacing the pool is the only
        # way to route its dials through an httpcore backend.
        self._pool = httpcore.AsyncConnectionPool(
            ssl_context=httpx.create_ssl_context(),
            max_connections=limits.max_connections,
            max_keepalive_connections=limits.max_keepalive_connections,
            keepalive_expiry=limits.keepalive_expiry,
            network_backend=dialer,
        )


def build_resilient_client(
    config: NetworkConfig | None = None,
    *,
    cache: ResolutionCache | None = None,
    resolver: DoHResolver | None = None,
    backend: httpcore.AsyncNetworkBackend | None = None,
) -> httpx.AsyncClient:
    """
    Build an AsyncClient with DoH-backed dialing and a bounded redirect policy.

    Pass the same `cache` to several clients to share resolutions between them.
    """
    config = config or NetworkConfig()
    cache = cache if cache is not None else ResolutionCache()
    if resolver is None and config.doh.enabled:
        resolver = DoHResolver(config.doh.resolver_url, timeout=config.doh.timeout)

    dialer = ResilientDialer(cache, resolver, config.doh.hosts, backend=backend)
    transport = ResilientTransport(
        dialer,
        limits=httpx.Limits(keepalive_expiry=config.keepalive_expiry),
    )
    return httpx.AsyncClient(
        transport=transport,
        timeout=httpx.Timeout(config.timeout, connect=config.connect_timeout),
        follow_redirects=True,
        max_redirects=config.max_redirects,
        trust_env=False,
    )

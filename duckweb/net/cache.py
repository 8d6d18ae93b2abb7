"""Hostname to IP cache shared by every connection of a client."""

from __future__ import annotations

import threading


class ResolutionCache:
    """
    Write-once mapping from hostname to resolved IP address.

    Entries never expire and are never replaced: the first successful
    resolution for a hostname is kept for the life of the instance. Failed
    resolutions are not recorded. Growth is unbounded; only hosts matching the DoH
    patterns are ever written.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self._write_lock = threading.Lock()

    def get(self, hostname: str) -> tuple[str, bool]:
        # Readers take no lock: values are only ever inserted as whole str objects.
        ip = self._entries.get(hostname)
        if ip is None:
            return "", False
        return ip, True

    def set(self, hostname: str, ip: str) -> bool:
        """Store `ip` for `hostname` unless already cached. Returns True if stored."""
        with self._write_lock:
            if hostname in self._entries:
                return False
            self._entries[hostname] = ip
            return True

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, hostname: str) -> bool:
        return hostname in self._entries

"""DNS-over-HTTPS A record lookup against a fixed resolver address."""

from __future__ import annotations

import json
from dataclasses import dataclass

import httpx
from loguru import logger

from duckweb.errors import TransportFailure

DNS_TYPE_A = 1


class DoHError(TransportFailure):
    """Raised when a DoH lookup yields no usable A record."""


@dataclass(slots=True)
class DoHAnswer:
    """One entry of the `Answer` section of a DNS JSON response."""

    data: str
    type: int


def parse_answers(payload: dict) -> list[DoHAnswer]:
    """Extract answers from a DNS JSON payload, skipping malformed entries."""
    answers: list[DoHAnswer] = []
    for item in payload.get("Answer") or []:
        if not isinstance(item, dict):
            continue
        data = item.get("data")
        rtype = item.get("type")
        if isinstance(data, str) and isinstance(rtype, int):
            answers.append(DoHAnswer(data=data, type=rtype))
    return answers


class DoHResolver:
    """
    Resolve hostnames through a DNS JSON endpoint addressed by IP.

    The resolver URL uses a literal IP so this lookup never depends on the
    system resolver. Certificate verification is disabled for this bootstrap
    request only; the hard-coded address is the trust anchor. Every other
    connection verifies certificates normally.
    """

    def __init__(self, resolver_url: str = "https://1.1.1.1/dns-query", timeout: float = 5.0):
        self.resolver_url = resolver_url
        self.timeout = timeout

    async def resolve(self, hostname: str, timeout: float | None = None) -> str:
        """Return the first A record for `hostname` or raise DoHError."""
        effective_timeout = self.timeout if timeout is None else min(timeout, self.timeout)
        try:
            async with httpx.AsyncClient(verify=False, timeout=effective_timeout) as client:
                response = await client.get(
                    self.resolver_url,
                    params={"name": hostname, "type": "A"},
                    headers={"Accept": "application/dns-json"},
                )
        except httpx.HTTPError as e:
            raise DoHError(f"DoH request failed for {hostname}: {e}") from e

        if response.status_code != 200:
            raise DoHError(f"DoH status: {response.status_code}")

        try:
            payload = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise DoHError(f"DoH response for {hostname} is not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise DoHError(f"DoH response for {hostname} is not a JSON object")

        for answer in parse_answers(payload):
            if answer.type == DNS_TYPE_A:
                logger.debug("DoH resolved {} -> {}", hostname, answer.data)
                return answer.data

        raise DoHError(f"no A record: {hostname}")

"""Configuration schema using Pydantic."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class Base(BaseModel):
    """Base model accepting both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RateLimitConfig(Base):
    """Token bucket settings: one token every `interval` seconds."""

    interval: float = 1.0
    burst: int = 1


class DoHConfig(Base):
    """DNS-over-HTTPS bootstrap resolution for blocked hosts."""

    enabled: bool = True
    resolver_url: str = "https://1.1.1.1/dns-query"
    timeout: float = 5.0
    hosts: list[str] = Field(default_factory=lambda: ["duckduckgo.com"])


class NetworkConfig(Base):
    """Shared HTTP client settings."""

    timeout: float = 30.0
    connect_timeout: float = 30.0
    keepalive_expiry: float = 30.0
    max_redirects: int = 10
    user_agent: str = DEFAULT_USER_AGENT
    doh: DoHConfig = Field(default_factory=DoHConfig)


class SearchConfig(Base):
    """DuckDuckGo search tool configuration."""

    endpoint: str = "https://html.duckduckgo.com/html"
    default_max_results: int = 10
    rate_limit: RateLimitConfig = Field(default_factory=lambda: RateLimitConfig(interval=1.0))


class FetchConfig(Base):
    """Web content fetch tool configuration."""

    max_chars: int = 8000
    allow_private_network: bool = True
    rate_limit: RateLimitConfig = Field(default_factory=lambda: RateLimitConfig(interval=3.0))


class ServerConfig(Base):
    """MCP server transport configuration."""

    transport: Literal["stdio", "sse"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8080


class Config(Base):
    """Root configuration for duckweb."""

    network: NetworkConfig = Field(default_factory=NetworkConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

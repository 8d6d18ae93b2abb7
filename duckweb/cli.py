"""Command-line entry point."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger

from duckweb import __version__
from duckweb.config.loader import load_config
from duckweb.server import run_server


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="duckweb",
        description="DuckDuckGo search and web fetch MCP server.",
    )
    parser.add_argument("--config", type=Path, help="Path to config.json")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        help="MCP transport (overrides server.transport)",
    )
    parser.add_argument("--host", help="SSE listen host (overrides server.host)")
    parser.add_argument("--port", type=int, help="SSE listen port (overrides server.port)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    # stdout carries the stdio protocol, so logs go to stderr only.
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    config = load_config(args.config)
    if args.transport:
        config.server.transport = args.transport
    if args.host:
        config.server.host = args.host
    if args.port is not None:
        config.server.port = args.port

    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()

"""MCP server exposing the tool registry over stdio or SSE."""

from __future__ import annotations

from typing import Any

import mcp.types as types
import uvicorn
from loguru import logger
from mcp.server.lowlevel import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Mount, Route

from duckweb.config.schema import Config
from duckweb.tools.factory import build_tool_runtime
from duckweb.tools.registry import ToolRegistry

SERVER_NAME = "DuckWeb"


def create_server(registry: ToolRegistry) -> Server:
    """Create an MCP server whose tools are the registry's tools."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(name=tool.name, description=tool.description, inputSchema=tool.parameters)
            for tool in registry.tools()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        result = await registry.execute(name, arguments or {})
        return [types.TextContent(type="text", text=result)]

    return server


async def serve_stdio(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def build_sse_app(server: Server) -> Starlette:
    """Starlette app with the event stream on /sse and client posts on /messages/."""
    sse = SseServerTransport("/messages/")

    async def handle_sse(request: Request) -> Response:
        async with sse.connect_sse(request.scope, request.receive, request._send) as streams:
            await server.run(streams[0], streams[1], server.create_initialization_options())
        return Response()

    return Starlette(
        routes=[
            Route("/sse", endpoint=handle_sse, methods=["GET"]),
            Mount("/messages/", app=sse.handle_post_message),
        ]
    )


async def serve_sse(server: Server, host: str, port: int) -> None:
    config = uvicorn.Config(build_sse_app(server), host=host, port=port, log_level="warning")
    await uvicorn.Server(config).serve()


async def run_server(config: Config) -> None:
    """Serve the tools until the transport closes."""
    runtime = build_tool_runtime(config)
    server = create_server(runtime.registry)
    transport = config.server.transport

    if transport == "sse":
        logger.info(
            "{} MCP server listening on http://{}:{}/sse",
            SERVER_NAME,
            config.server.host,
            config.server.port,
        )
    else:
        logger.info("{} MCP server started on stdio", SERVER_NAME)

    try:
        if transport == "sse":
            await serve_sse(server, config.server.host, config.server.port)
        else:
            await serve_stdio(server)
    finally:
        await runtime.aclose()
        logger.info("{} MCP server stopped", SERVER_NAME)

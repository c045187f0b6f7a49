"""MCP server implementation with StreamableHTTP transport.

This module provides the Model Context Protocol server for Algtools with:
- StreamableHTTP transport at /mcp (MCP protocol 2025-03-26)
- REST-style tool endpoints at /tools/{name}, answered as JSON-RPC responses
- A generated OpenAPI document and Scalar API reference page
"""

from __future__ import annotations

import json
import time
from typing import Any

from mcp.server import Server
from mcp.server.streamable_http import StreamableHTTPServerTransport
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, Response
from starlette.routing import Route

from algtools_mcp import __version__
from algtools_mcp.mcp.config import MCPConfig, set_mcp_config
from algtools_mcp.utils import get_logger

from .openapi import SCALAR_HTML, build_openapi_spec
from .tools import TOOL_HANDLERS, TOOL_SPECS, call_tool, register_tools

logger = get_logger(__name__)

SERVER_NAME = "algtools-mcp"
SERVER_INSTRUCTIONS = (
    "This MCP server gives access to Algtools knowledge. Use cursorRules to search "
    "the cursor rules knowledge base, algtoolsUI to search AlgtoolsUI component "
    "stories, and lookupComponent to read the props, import path and stories of a "
    "specific AlgtoolsUI component (or list all components)."
)

JSONRPC_PARSE_ERROR = -32700
JSONRPC_METHOD_NOT_FOUND = -32601
JSONRPC_INVALID_PARAMS = -32602


def jsonrpc_error(
    code: int, message: str, status_code: int = 400, request_id: Any = None
) -> JSONResponse:
    return JSONResponse(
        {
            "jsonrpc": "2.0",
            "id": request_id,
            "error": {"code": code, "message": message},
        },
        status_code=status_code,
    )


def create_mcp_server() -> Server:
    """Create and configure the MCP server instance."""
    server = Server(
        name=SERVER_NAME, version=__version__, instructions=SERVER_INSTRUCTIONS
    )
    register_tools(server)
    return server


def create_asgi_app(
    mcp_server: Server,
    http_transport: StreamableHTTPServerTransport,
    config: MCPConfig,
) -> Starlette:
    """Create the ASGI application exposing MCP, tool proxies and docs."""

    async def handle_mcp_endpoint(request: Request) -> Response:
        """Handle MCP connections via StreamableHTTP transport."""
        await http_transport.handle_request(
            request.scope, request.receive, request._send
        )
        return Response()

    async def handle_docs(request: Request) -> HTMLResponse:
        return HTMLResponse(SCALAR_HTML)

    async def handle_openapi(request: Request) -> Response:
        base_url = f"{request.url.scheme}://{request.url.netloc}"
        spec = build_openapi_spec(TOOL_SPECS, base_url, __version__)
        return Response(json.dumps(spec, indent=2), media_type="application/json")

    async def handle_tool_call(request: Request) -> JSONResponse:
        """Run one tool with the request body as its arguments."""
        tool_name = request.path_params["name"]
        try:
            arguments = await request.json()
        except ValueError as e:
            return jsonrpc_error(JSONRPC_PARSE_ERROR, f"Parse error: {e}")

        if not isinstance(arguments, dict):
            return jsonrpc_error(
                JSONRPC_INVALID_PARAMS,
                "Invalid params: tool arguments must be a JSON object",
            )
        if tool_name not in TOOL_HANDLERS:
            return jsonrpc_error(
                JSONRPC_METHOD_NOT_FOUND, f"Unknown tool: {tool_name}", status_code=404
            )

        content = await call_tool(tool_name, arguments)
        return JSONResponse(
            {
                "jsonrpc": "2.0",
                "id": int(time.time() * 1000),
                "result": {
                    "content": [
                        item.model_dump(by_alias=True, exclude_none=True, mode="json")
                        for item in content
                    ],
                    "isError": False,
                },
            }
        )

    async def handle_health(request: Request) -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse(
            {"status": "healthy", "service": SERVER_NAME, "version": __version__}
        )

    async def handle_metadata(request: Request) -> JSONResponse:
        """Return MCP server metadata for discovery."""
        return JSONResponse(
            {
                "name": SERVER_NAME,
                "version": __version__,
                "instructions": SERVER_INSTRUCTIONS,
                "capabilities": {"tools": True},
                "tools": [spec["name"] for spec in TOOL_SPECS],
                "endpoints": {
                    "mcp": "/mcp",
                    "tools": "/tools/{name}",
                    "openapi": "/openapi.json",
                    "docs": "/docs",
                    "health": "/health",
                },
                "transport": {
                    "type": "streamable-http",
                    "description": "StreamableHTTP transport (MCP protocol 2025-03-26)",
                },
                "components_url": config.components.url,
            }
        )

    routes = [
        Route("/", endpoint=handle_docs, methods=["GET"]),
        Route("/docs", endpoint=handle_docs, methods=["GET"]),
        Route("/openapi.json", endpoint=handle_openapi, methods=["GET"]),
        Route("/health", endpoint=handle_health, methods=["GET"]),
        Route("/metadata", endpoint=handle_metadata, methods=["GET"]),
        Route("/tools/{name}", endpoint=handle_tool_call, methods=["POST"]),
        Route("/mcp", endpoint=handle_mcp_endpoint, methods=["GET", "POST", "DELETE"]),
    ]

    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        ),
    ]

    app = Starlette(routes=routes, middleware=middleware)
    logger.info("ASGI application created")
    return app


def build_server(
    config: MCPConfig | None = None,
) -> tuple[Starlette, StreamableHTTPServerTransport, Server]:
    """Build and configure the complete MCP server.

    Args:
        config: MCP configuration. If None, loads from config.mcp.yml and
            environment variables.

    Returns:
        Tuple of (Starlette ASGI app, StreamableHTTP transport, MCP Server)
    """
    if config is None:
        config = MCPConfig.load()
    set_mcp_config(config)

    logger.info(f"Building MCP server at {config.server.base_url}")
    logger.info(f"Component metadata source: {config.components.url}")
    if not config.search.api_token:
        logger.warning("AI_SEARCH_API_TOKEN is not set; search tools will fail")

    mcp_server = create_mcp_server()
    http_transport = StreamableHTTPServerTransport(
        mcp_session_id=None,
        is_json_response_enabled=False,
        event_store=None,
    )

    app = create_asgi_app(mcp_server, http_transport, config)
    return app, http_transport, mcp_server

"""MCP tools registration and dispatch."""

from __future__ import annotations

import json
from typing import Any, Awaitable, Callable, Dict, List

from mcp.server import Server
from mcp.types import TextContent, Tool

from algtools_mcp.utils import get_logger

from . import algtools_ui, cursor_rules, lookup_component

logger = get_logger(__name__)

ToolHandler = Callable[[Dict[str, Any]], Awaitable[List[TextContent]]]

TOOL_MODULES = [
    cursor_rules,
    algtools_ui,
    lookup_component,
]

TOOL_SPECS: list[dict[str, Any]] = [module.TOOL_SPEC for module in TOOL_MODULES]
TOOL_HANDLERS: dict[str, ToolHandler] = {
    cursor_rules.TOOL_SPEC["name"]: cursor_rules.handle_cursor_rules,
    algtools_ui.TOOL_SPEC["name"]: algtools_ui.handle_algtools_ui,
    lookup_component.TOOL_SPEC["name"]: lookup_component.handle_lookup_component,
}


async def call_tool(name: str, arguments: Any) -> List[TextContent]:
    """Run a tool by name. Failures are reported as JSON text, never raised."""
    logger.debug(f"Tool called: {name}")
    handler = TOOL_HANDLERS.get(name)
    if not handler:
        return [
            TextContent(
                type="text", text=json.dumps({"error": f"Unknown tool: {name}"})
            )
        ]
    try:
        return await handler(arguments or {})
    except Exception as e:
        logger.error(f"Error executing tool {name}: {e}", exc_info=True)
        return [
            TextContent(type="text", text=json.dumps({"error": str(e), "tool": name}))
        ]


def register_tools(server: Server) -> None:
    """Register tool metadata and handlers."""

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return [Tool(**spec) for spec in TOOL_SPECS]

    @server.call_tool()
    async def handle_call_tool(name: str, arguments: Any) -> List[TextContent]:
        return await call_tool(name, arguments)

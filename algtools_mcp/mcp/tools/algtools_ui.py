"""AlgtoolsUI stories search tool."""

from __future__ import annotations

from typing import Any

from mcp.types import TextContent

from ..config import get_mcp_config
from .search import run_search


async def handle_algtools_ui(args: dict[str, Any]) -> list[TextContent]:
    """Search the AlgtoolsUI stories index."""
    search = get_mcp_config().search
    return await run_search(
        search, search.ui_rag, args.get("query", ""), "AlgtoolsUI components"
    )


TOOL_SPEC = {
    "name": "algtoolsUI",
    "description": "AI search over AlgtoolsUI component stories and documentation.",
    "inputSchema": {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": (
                    "The search query to find relevant AlgtoolsUI component information"
                ),
            }
        },
        "required": ["query"],
    },
}

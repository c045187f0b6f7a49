"""Cursor rules search tool."""

from __future__ import annotations

from typing import Any

from mcp.types import TextContent

from ..config import get_mcp_config
from .search import run_search


async def handle_cursor_rules(args: dict[str, Any]) -> list[TextContent]:
    """Search the cursor rules index."""
    search = get_mcp_config().search
    return await run_search(
        search, search.cursor_rules_rag, args.get("query", ""), "cursor rules"
    )


TOOL_SPEC = {
    "name": "cursorRules",
    "description": "AI search over the Algtools cursor rules knowledge base.",
    "inputSchema": {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "The search query to find relevant cursor rules",
            }
        },
        "required": ["query"],
    },
}

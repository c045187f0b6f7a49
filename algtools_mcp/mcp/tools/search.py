"""Shared text rendering for the AI search tools."""

from __future__ import annotations

import json

import httpx
from mcp.types import TextContent

from ..common.ai_search import SearchFailed, SearchNotConfigured, ai_search
from ..config import SearchConfig


async def run_search(
    config: SearchConfig,
    rag_name: str,
    query: str,
    subject: str,
    client: httpx.AsyncClient | None = None,
) -> list[TextContent]:
    """Run one AI search and render the result or the failure as text."""
    try:
        data = await ai_search(config, rag_name, str(query), client=client)
    except SearchNotConfigured:
        text = "Error: Environment not initialized"
    except SearchFailed as e:
        if e.status_code is not None:
            text = (
                f"Error: Failed to search {subject}. "
                f"Status: {e.status_code}, Message: {e.body}"
            )
        else:
            text = f"Error: Failed to search {subject}. {e}"
    else:
        text = json.dumps(data, indent=2, ensure_ascii=False)
    return [TextContent(type="text", text=text)]

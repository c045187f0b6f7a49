"""Component lookup tool."""

from __future__ import annotations

import json
from typing import Any

import httpx
from mcp.types import TextContent

from algtools_mcp.utils import get_logger

from ..common.components import (
    PREVIEW_LIMIT,
    DataSet,
    RemoteUnavailable,
    fetch_dataset,
    find_component,
    summarize,
)
from ..config import ComponentsConfig, get_mcp_config

logger = get_logger(__name__)

LISTING_NOTE = (
    "Use the componentName parameter to get detailed information about a "
    "specific component, including its props, import path and stories."
)


def _text(text: str) -> list[TextContent]:
    return [TextContent(type="text", text=text)]


def not_found_message(name: str, preview: list[str] | tuple[str, ...], total: int) -> str:
    message = (
        f'Component "{name}" not found. '
        f"Available components: {', '.join(preview)}"
    )
    if total > PREVIEW_LIMIT:
        message += f", ... ({total} total)"
    return message


def respond(dataset: DataSet, name: str | None = None) -> list[TextContent]:
    """Render a listing, a single component, or a not-found message."""
    if not name:
        listing = {
            "totalComponents": len(dataset),
            "components": [summary.to_dict() for summary in summarize(dataset)],
            "note": LISTING_NOTE,
        }
        return _text(json.dumps(listing, indent=2, ensure_ascii=False))

    result = find_component(dataset, name)
    if result.record is None:
        logger.info(f"Component {name!r} not found among {result.total} components")
        return _text(not_found_message(name, result.preview, result.total))

    return _text(json.dumps(result.record.to_dict(), indent=2, ensure_ascii=False))


def fetch_error_message(error: RemoteUnavailable, url: str) -> str:
    return (
        f"Error: Failed to fetch component metadata. {error}. "
        f"Make sure the component metadata at {url} is reachable."
    )


async def lookup_component(
    name: str | None = None,
    config: ComponentsConfig | None = None,
    client: httpx.AsyncClient | None = None,
) -> list[TextContent]:
    """Fetch the metadata and answer one lookup. Fetch failures become text."""
    config = config or get_mcp_config().components
    try:
        dataset = await fetch_dataset(config.url, client=client, timeout=config.timeout)
    except RemoteUnavailable as e:
        logger.error(f"Component metadata unavailable: {e}")
        return _text(fetch_error_message(e, config.url))
    return respond(dataset, name)


async def handle_lookup_component(args: dict[str, Any]) -> list[TextContent]:
    """Look up one component, or list all of them when no name is given."""
    name = args.get("componentName")
    return await lookup_component(str(name) if name is not None else None)


TOOL_SPEC = {
    "name": "lookupComponent",
    "description": (
        "Look up AlgtoolsUI component metadata (props, import path, stories). "
        "Without componentName, lists every documented component."
    ),
    "inputSchema": {
        "type": "object",
        "properties": {
            "componentName": {
                "type": "string",
                "description": (
                    "Component title, name without category, or key "
                    '(e.g. "Forms/Button" or "button"). Case-insensitive.'
                ),
            }
        },
    },
}

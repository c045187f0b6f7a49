"""Client for the hosted AI search (AutoRAG) endpoints."""

from __future__ import annotations

import json
from typing import Any

import httpx

from algtools_mcp.utils import get_logger

from ..config import SearchConfig

logger = get_logger(__name__)


class SearchNotConfigured(Exception):
    """No API token is available for the AI search endpoint."""


class SearchFailed(Exception):
    """The AI search request failed or returned a non-2xx status."""

    def __init__(
        self, message: str, status_code: int | None = None, body: str | None = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


async def ai_search(
    config: SearchConfig,
    rag_name: str,
    query: str,
    client: httpx.AsyncClient | None = None,
) -> Any:
    """POST a query to one RAG index and return the decoded JSON response.

    Raises:
        SearchNotConfigured: when ``config.api_token`` is empty.
        SearchFailed: on transport errors, non-2xx statuses or invalid JSON.
    """
    if not config.api_token:
        raise SearchNotConfigured("AI_SEARCH_API_TOKEN is not set")

    url = config.endpoint(rag_name)
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {config.api_token}",
    }
    logger.debug(f"AI search on {rag_name}: {query!r}")

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=config.timeout) as owned:
                response = await owned.post(
                    url, headers=headers, json={"query": query}, follow_redirects=True
                )
        else:
            response = await client.post(
                url, headers=headers, json={"query": query}, follow_redirects=True
            )
    except httpx.HTTPError as e:
        logger.warning(f"AI search request to {rag_name} failed: {e}")
        raise SearchFailed(str(e) or type(e).__name__) from e

    if not response.is_success:
        logger.warning(f"AI search on {rag_name} returned HTTP {response.status_code}")
        raise SearchFailed(
            f"HTTP {response.status_code}",
            status_code=response.status_code,
            body=response.text,
        )

    try:
        return response.json()
    except json.JSONDecodeError as e:
        raise SearchFailed(f"Invalid JSON response: {e}") from e

"""Tests for MCP tools."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from algtools_mcp.mcp.common.components import DataSet, RemoteUnavailable
from algtools_mcp.mcp.config import ComponentsConfig, SearchConfig

pytest_plugins = ("pytest_asyncio",)

BUTTON = {
    "title": "Forms/Button",
    "componentPath": "./src/components/forms/Button.tsx",
    "importPath": "@algtools/ui",
    "description": "A clickable button",
    "props": {"variant": {"control": "select", "options": ["primary", "ghost"]}},
    "storyCount": 3,
    "stories": [
        {"id": "forms-button--primary", "name": "Primary"},
        {"id": "forms-button--ghost", "name": "Ghost"},
        {"id": "forms-button--disabled", "name": "Disabled"},
    ],
    "storybookUrl": "https://ui.example.com/?path=/docs/forms-button--docs",
}


@pytest.fixture
def dataset() -> DataSet:
    return DataSet.from_dict({"components": {"forms-button": BUTTON}})


# ============================================================================
# lookupComponent
# ============================================================================


def test_respond_lists_components_without_name(dataset):
    from algtools_mcp.mcp.tools.lookup_component import LISTING_NOTE, respond

    result = respond(dataset)

    assert len(result) == 1
    assert result[0].type == "text"
    data = json.loads(result[0].text)
    assert data["totalComponents"] == 1
    assert data["components"][0]["title"] == "Forms/Button"
    assert data["components"][0]["hasProps"] is True
    assert data["note"] == LISTING_NOTE


def test_respond_empty_name_lists_components(dataset):
    from algtools_mcp.mcp.tools.lookup_component import respond

    data = json.loads(respond(dataset, "")[0].text)
    assert "totalComponents" in data


def test_respond_returns_record_verbatim(dataset):
    from algtools_mcp.mcp.tools.lookup_component import respond

    result = respond(dataset, "button")

    assert result[0].text == json.dumps(BUTTON, indent=2)


def test_respond_not_found_single(dataset):
    from algtools_mcp.mcp.tools.lookup_component import respond

    result = respond(dataset, "Checkbox")

    assert result[0].text == (
        'Component "Checkbox" not found. Available components: Forms/Button'
    )


def test_respond_not_found_truncates_preview():
    from algtools_mcp.mcp.tools.lookup_component import respond

    many = DataSet.from_dict(
        {"components": {f"c{i}": {"title": f"Group/Item{i}"} for i in range(25)}}
    )
    text = respond(many, "xyz")[0].text

    listed = text.split("Available components: ", 1)[1]
    assert listed.endswith(", ... (25 total)")
    titles = listed[: -len(", ... (25 total)")].split(", ")
    assert len(titles) == 20
    assert titles[-1] == "Group/Item19"


def test_respond_not_found_without_total_when_small():
    from algtools_mcp.mcp.tools.lookup_component import not_found_message

    preview = [f"T{i}" for i in range(20)]
    assert "total" not in not_found_message("x", preview, 20)


@pytest.mark.asyncio(loop_scope="function")
async def test_lookup_component_reports_http_error():
    from algtools_mcp.mcp.tools.lookup_component import lookup_component

    config = ComponentsConfig(url="https://ui.example.com/components.json")
    transport = httpx.MockTransport(lambda request: httpx.Response(500))
    async with httpx.AsyncClient(transport=transport) as client:
        result = await lookup_component("button", config=config, client=client)

    assert len(result) == 1
    assert "500" in result[0].text
    assert "https://ui.example.com/components.json" in result[0].text
    assert "reachable" in result[0].text


@pytest.mark.asyncio(loop_scope="function")
async def test_lookup_component_fetches_and_resolves():
    from algtools_mcp.mcp.tools.lookup_component import lookup_component

    config = ComponentsConfig(url="https://ui.example.com/components.json")
    transport = httpx.MockTransport(
        lambda request: httpx.Response(
            200, json={"components": {"forms-button": BUTTON}, "entries": {}}
        )
    )
    async with httpx.AsyncClient(transport=transport) as client:
        result = await lookup_component("but", config=config, client=client)

    assert json.loads(result[0].text)["title"] == "Forms/Button"


@pytest.mark.asyncio(loop_scope="function")
async def test_handle_lookup_component_passes_name(dataset):
    from algtools_mcp.mcp.tools.lookup_component import handle_lookup_component

    with patch(
        "algtools_mcp.mcp.tools.lookup_component.fetch_dataset",
        AsyncMock(return_value=dataset),
    ):
        result = await handle_lookup_component({"componentName": "Forms/Button"})

    assert json.loads(result[0].text)["importPath"] == "@algtools/ui"


@pytest.mark.asyncio(loop_scope="function")
async def test_handle_lookup_component_remote_unavailable():
    from algtools_mcp.mcp.tools.lookup_component import handle_lookup_component

    with patch(
        "algtools_mcp.mcp.tools.lookup_component.fetch_dataset",
        AsyncMock(side_effect=RemoteUnavailable("HTTP 503", status_code=503)),
    ):
        result = await handle_lookup_component({})

    assert result[0].text.startswith("Error: Failed to fetch component metadata.")
    assert "503" in result[0].text


def test_respond_keeps_non_ascii_text():
    from algtools_mcp.mcp.tools.lookup_component import respond

    boton = {"title": "Forms/Botón", "description": "Un botón ✓"}
    dataset = DataSet.from_dict({"components": {"forms-boton": boton}})

    record_text = respond(dataset, "botón")[0].text
    listing_text = respond(dataset)[0].text

    assert "Un botón ✓" in record_text
    assert "\\u" not in record_text
    assert json.loads(record_text) == boton
    assert "Forms/Botón" in listing_text


@pytest.mark.asyncio(loop_scope="function")
async def test_lookup_component_malformed_document():
    from algtools_mcp.mcp.tools.lookup_component import lookup_component

    config = ComponentsConfig(url="https://ui.example.com/components.json")
    document = {
        "components": {"forms-button": {"title": "Forms/Button", "stories": 5}}
    }
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=document))
    async with httpx.AsyncClient(transport=transport) as client:
        result = await lookup_component("button", config=config, client=client)

    assert len(result) == 1
    assert result[0].text.startswith("Error: Failed to fetch component metadata.")
    assert "Invalid component metadata" in result[0].text


# ============================================================================
# AI search tools
# ============================================================================


def search_config(token: str | None = "secret-token") -> SearchConfig:
    return SearchConfig(
        api_base="https://api.example.com/v4", account_id="acct", api_token=token
    )


@pytest.mark.asyncio(loop_scope="function")
async def test_run_search_success():
    from algtools_mcp.mcp.tools.search import run_search

    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"result": {"response": "Use hooks"}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        result = await run_search(
            search_config(), "rules-rag", "react hooks", "cursor rules", client=client
        )

    assert seen["url"] == (
        "https://api.example.com/v4/accounts/acct/autorag/rags/rules-rag/ai-search"
    )
    assert seen["auth"] == "Bearer secret-token"
    assert seen["body"] == {"query": "react hooks"}
    assert json.loads(result[0].text) == {"result": {"response": "Use hooks"}}


@pytest.mark.asyncio(loop_scope="function")
async def test_run_search_http_error():
    from algtools_mcp.mcp.tools.search import run_search

    transport = httpx.MockTransport(
        lambda request: httpx.Response(401, text="Authentication error")
    )
    async with httpx.AsyncClient(transport=transport) as client:
        result = await run_search(
            search_config(), "rules-rag", "q", "cursor rules", client=client
        )

    assert result[0].text == (
        "Error: Failed to search cursor rules. "
        "Status: 401, Message: Authentication error"
    )


@pytest.mark.asyncio(loop_scope="function")
async def test_run_search_transport_error():
    from algtools_mcp.mcp.tools.search import run_search

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        result = await run_search(
            search_config(), "ui-rag", "q", "AlgtoolsUI components", client=client
        )

    assert result[0].text == "Error: Failed to search AlgtoolsUI components. timed out"


@pytest.mark.asyncio(loop_scope="function")
async def test_run_search_without_token():
    from algtools_mcp.mcp.tools.search import run_search

    result = await run_search(search_config(token=None), "ui-rag", "q", "x")
    assert result[0].text == "Error: Environment not initialized"


@pytest.mark.asyncio(loop_scope="function")
async def test_run_search_keeps_non_ascii_text():
    from algtools_mcp.mcp.tools.search import run_search

    payload = {"result": {"response": "Usa el botón ✓"}}
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=payload))
    async with httpx.AsyncClient(transport=transport) as client:
        result = await run_search(
            search_config(), "ui-rag", "botón", "x", client=client
        )

    assert "Usa el botón ✓" in result[0].text
    assert json.loads(result[0].text) == payload


@pytest.mark.asyncio(loop_scope="function")
async def test_run_search_follows_redirects():
    from algtools_mcp.mcp.tools.search import run_search

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/ai-search"):
            return httpx.Response(307, headers={"Location": "/v2/ai-search-moved"})
        assert json.loads(request.content) == {"query": "q"}
        return httpx.Response(200, json={"result": {"response": "ok"}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        result = await run_search(search_config(), "ui-rag", "q", "x", client=client)

    assert json.loads(result[0].text) == {"result": {"response": "ok"}}


@pytest.mark.asyncio(loop_scope="function")
async def test_cursor_rules_uses_configured_rag():
    from algtools_mcp.mcp.config import MCPConfig
    from algtools_mcp.mcp.tools.cursor_rules import handle_cursor_rules

    config = MCPConfig(search=search_config())
    run_search = AsyncMock(return_value=[])
    with patch(
        "algtools_mcp.mcp.tools.cursor_rules.get_mcp_config", return_value=config
    ), patch("algtools_mcp.mcp.tools.cursor_rules.run_search", run_search):
        await handle_cursor_rules({"query": "naming"})

    run_search.assert_awaited_once_with(
        config.search, "algtools-cursor-rules-rag", "naming", "cursor rules"
    )


@pytest.mark.asyncio(loop_scope="function")
async def test_algtools_ui_uses_configured_rag():
    from algtools_mcp.mcp.config import MCPConfig
    from algtools_mcp.mcp.tools.algtools_ui import handle_algtools_ui

    config = MCPConfig(search=search_config())
    run_search = AsyncMock(return_value=[])
    with patch(
        "algtools_mcp.mcp.tools.algtools_ui.get_mcp_config", return_value=config
    ), patch("algtools_mcp.mcp.tools.algtools_ui.run_search", run_search):
        await handle_algtools_ui({"query": "date picker"})

    run_search.assert_awaited_once_with(
        config.search, "algtools-ui-stories-rag", "date picker", "AlgtoolsUI components"
    )


# ============================================================================
# Dispatch
# ============================================================================


@pytest.mark.asyncio(loop_scope="function")
async def test_call_tool_unknown():
    from algtools_mcp.mcp.tools import call_tool

    result = await call_tool("nope", {})
    assert json.loads(result[0].text) == {"error": "Unknown tool: nope"}


@pytest.mark.asyncio(loop_scope="function")
async def test_call_tool_handler_failure_is_reported():
    from algtools_mcp.mcp.tools import TOOL_HANDLERS, call_tool

    failing = AsyncMock(side_effect=RuntimeError("boom"))
    with patch.dict(TOOL_HANDLERS, {"lookupComponent": failing}):
        result = await call_tool("lookupComponent", None)

    failing.assert_awaited_once_with({})
    assert json.loads(result[0].text) == {"error": "boom", "tool": "lookupComponent"}


def test_tool_specs_structure():
    """Test that all tool specs have required fields."""
    from algtools_mcp.mcp.tools import TOOL_HANDLERS, TOOL_SPECS

    names = [spec["name"] for spec in TOOL_SPECS]
    assert names == ["cursorRules", "algtoolsUI", "lookupComponent"]
    assert set(names) == set(TOOL_HANDLERS)

    for spec in TOOL_SPECS:
        assert isinstance(spec["description"], str)
        assert spec["inputSchema"]["type"] == "object"


def test_lookup_component_name_is_optional():
    from algtools_mcp.mcp.tools.lookup_component import TOOL_SPEC

    assert "required" not in TOOL_SPEC["inputSchema"]

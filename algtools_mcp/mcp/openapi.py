"""OpenAPI document and API reference page for the MCP tools."""

from __future__ import annotations

from typing import Any

EXAMPLE_VALUES: dict[str, Any] = {
    "boolean": True,
    "number": 0,
    "integer": 0,
    "array": [],
}

SCALAR_VERSION = "1.40.0"

SCALAR_HTML = f"""<!DOCTYPE html>
<html lang="en">
<head>
	<meta charset="UTF-8">
	<meta name="viewport" content="width=device-width, initial-scale=1.0">
	<title>MCP Tools API Reference</title>
	<style>
		body {{
			margin: 0;
			padding: 0;
		}}
	</style>
</head>
<body>
	<script
		id="api-reference"
		data-configuration='{{
			"theme": "purple",
			"layout": "modern",
			"spec": {{
				"url": "/openapi.json"
			}},
			"proxy": "/mcp",
			"hideDownloadButton": false,
			"hideModels": false,
			"hideSchema": false
		}}'
	></script>
	<script src="https://cdn.jsdelivr.net/npm/@scalar/api-reference@{SCALAR_VERSION}/dist/browser/standalone.js"></script>
</body>
</html>"""


def _mcp_path() -> dict[str, Any]:
    return {
        "post": {
            "summary": "MCP JSON-RPC Endpoint",
            "description": "Execute MCP tools using JSON-RPC protocol",
            "operationId": "mcpRequest",
            "requestBody": {
                "required": True,
                "content": {
                    "application/json": {
                        "schema": {
                            "type": "object",
                            "properties": {
                                "jsonrpc": {
                                    "type": "string",
                                    "enum": ["2.0"],
                                    "default": "2.0",
                                },
                                "method": {
                                    "type": "string",
                                    "enum": ["tools/list", "tools/call", "initialize"],
                                    "description": "MCP method to call",
                                },
                                "params": {
                                    "type": "object",
                                    "description": "Method parameters",
                                },
                                "id": {"type": "number", "description": "Request ID"},
                            },
                            "required": ["jsonrpc", "method", "id"],
                        }
                    }
                },
            },
            "responses": {
                "200": {
                    "description": "Successful response",
                    "content": {"application/json": {"schema": {"type": "object"}}},
                }
            },
        }
    }


_TOOL_RESULT_SCHEMA = {
    "type": "object",
    "properties": {
        "jsonrpc": {"type": "string", "example": "2.0"},
        "id": {"type": "number", "example": 1},
        "result": {
            "type": "object",
            "properties": {
                "content": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "type": {"type": "string", "example": "text"},
                            "text": {
                                "type": "string",
                                "example": "Tool execution result",
                            },
                        },
                    },
                }
            },
        },
    },
}

_TOOL_ERROR_SCHEMA = {
    "type": "object",
    "properties": {
        "jsonrpc": {"type": "string"},
        "id": {"type": "number"},
        "error": {
            "type": "object",
            "properties": {
                "code": {"type": "number"},
                "message": {"type": "string"},
            },
        },
    },
}


def tool_request_schema(input_schema: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Build the request body schema and example for one tool.

    Returns:
        (schema, example) where the example only holds required parameters.
    """
    properties = input_schema.get("properties") or {}
    required = list(input_schema.get("required") or [])

    schema: dict[str, Any] = {"type": "object", "properties": {}}
    example: dict[str, Any] = {}

    for param_name, param_schema in properties.items():
        schema_type = param_schema.get("type", "string")
        example_value = EXAMPLE_VALUES.get(schema_type, "example-value")
        prop: dict[str, Any] = {
            "type": schema_type,
            "description": param_schema.get("description", ""),
            "example": example_value,
        }
        if schema_type == "array" and "items" in param_schema:
            prop["items"] = param_schema["items"]
        schema["properties"][param_name] = prop

        if param_name in required:
            example[param_name] = example_value

    if required:
        schema["required"] = required

    return schema, example


def _tool_path(tool: dict[str, Any]) -> dict[str, Any]:
    name = tool["name"]
    description = tool.get("description")
    schema, example = tool_request_schema(tool.get("inputSchema") or {})
    return {
        "post": {
            "summary": description or f"Execute {name} tool",
            "description": description or f"Call the {name} MCP tool via JSON-RPC",
            "operationId": f"call_{name}",
            "tags": [name],
            "requestBody": {
                "required": True,
                "content": {
                    "application/json": {"schema": schema, "example": example}
                },
            },
            "responses": {
                "200": {
                    "description": "Tool execution result",
                    "content": {"application/json": {"schema": _TOOL_RESULT_SCHEMA}},
                },
                "400": {
                    "description": "Bad request",
                    "content": {"application/json": {"schema": _TOOL_ERROR_SCHEMA}},
                },
            },
        }
    }


def build_openapi_spec(
    tools: list[dict[str, Any]], base_url: str, version: str
) -> dict[str, Any]:
    """Generate an OpenAPI 3.1 document describing /mcp and /tools/{name}."""
    paths: dict[str, Any] = {"/mcp": _mcp_path()}
    for tool in tools:
        paths[f"/tools/{tool['name']}"] = _tool_path(tool)

    return {
        "openapi": "3.1.0",
        "info": {
            "title": "MCP Tools API",
            "version": version,
            "description": "API documentation for MCP (Model Context Protocol) tools",
        },
        "servers": [{"url": base_url, "description": "MCP Server"}],
        "paths": paths,
    }

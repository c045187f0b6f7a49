"""Command line interface for running the algtools MCP server."""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path

import click
import uvicorn

from algtools_mcp import __version__
from algtools_mcp.mcp.config import MCPConfig
from algtools_mcp.mcp.openapi import build_openapi_spec
from algtools_mcp.mcp.server import build_server
from algtools_mcp.mcp.tools import TOOL_SPECS
from algtools_mcp.utils import setup_logging_from_config


def _setup_logging(mcp_config: MCPConfig, log_level: str | None = None) -> str:
    """Configure logging from the config file, the CLI level taking precedence.

    Returns the effective level name, lower-cased for uvicorn.
    """
    if log_level:
        mcp_config.logging.level = log_level.upper()
    setup_logging_from_config(mcp_config.logging)
    return mcp_config.logging.level.lower()


@click.group()
@click.version_option(__version__, prog_name="algtools-mcp")
def main() -> None:
    """Run the Algtools MCP server."""


@main.command()
@click.option(
    "--host", default=None, help="Bind address (default: from config or 0.0.0.0)"
)
@click.option(
    "--port", default=None, type=int, help="Port to bind (default: from config or 8787)"
)
@click.option(
    "--log-level",
    default=None,
    help="Log level for the app and uvicorn (default: from config or info)",
)
@click.option(
    "--config", default=None, help="Path to config.mcp.yml (default: ./config.mcp.yml)"
)
def serve(
    host: str | None, port: int | None, log_level: str | None, config: str | None
) -> None:
    """Start the MCP server with StreamableHTTP transport.

    Configuration priority: CLI arguments > environment variables > config file > defaults
    """
    config_path = Path(config) if config else None
    mcp_config = MCPConfig.load(config_path)
    log_level = _setup_logging(mcp_config, log_level)

    if host:
        mcp_config.server.host = host
    if port:
        mcp_config.server.port = port

    app, http_transport, mcp_server = build_server(mcp_config)

    @asynccontextmanager
    async def lifespan(_app):
        """Connect the StreamableHTTP transport and run the MCP server on it."""
        async with http_transport.connect() as (read_stream, write_stream):

            async def run_mcp_server():
                try:
                    await mcp_server.run(
                        read_stream,
                        write_stream,
                        mcp_server.create_initialization_options(),
                    )
                except Exception as e:
                    logging.error(f"MCP server error: {e}", exc_info=True)

            task = asyncio.create_task(run_mcp_server())

            yield

            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    app.router.lifespan_context = lifespan

    click.echo(
        f"MCP server: {mcp_config.server.base_url} (StreamableHTTP, MCP 2025-03-26)"
    )
    click.echo("Endpoints: /mcp · /tools/{name} · /openapi.json · /docs · /health")
    click.echo(f"Component metadata: {mcp_config.components.url}")
    click.echo(
        "AI search token: "
        + ("configured" if mcp_config.search.api_token else "missing (search tools disabled)")
    )
    click.echo("")

    uvicorn.run(
        app,
        host=mcp_config.server.host,
        port=mcp_config.server.port,
        log_level=log_level,
        access_log=True,
    )


@main.command()
@click.option(
    "--base-url",
    default=None,
    help="Server URL advertised in the document (default: from config)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to this file instead of stdout",
)
@click.option(
    "--config", default=None, help="Path to config.mcp.yml (default: ./config.mcp.yml)"
)
def openapi(base_url: str | None, output: Path | None, config: str | None) -> None:
    """Print the OpenAPI document for the registered tools."""
    if base_url is None:
        base_url = MCPConfig.load(Path(config) if config else None).server.base_url

    document = json.dumps(
        build_openapi_spec(TOOL_SPECS, base_url.rstrip("/"), __version__), indent=2
    )
    if output is None:
        click.echo(document)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(document + "\n")
    click.echo(f"Wrote OpenAPI document to {output}", err=True)


if __name__ == "__main__":  # pragma: no cover
    main()

"""Top-level package for algtools-mcp.

Configuration lives in ``config.mcp.yml`` and is loaded by
``algtools_mcp.mcp.config.MCPConfig``.
"""

from importlib import metadata

try:
    __version__: str = metadata.version("algtools-mcp")
except metadata.PackageNotFoundError:  # pragma: no cover
    # Package is not installed, default to dev version
    __version__ = "0.0.0.dev0"

__all__ = ["__version__"]

"""MCP server, tools and HTTP surface."""

"""Helpers shared by the MCP tools."""

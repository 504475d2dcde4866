"""Trello MCP gateway: Trello REST operations exposed as MCP tools."""

__version__ = "1.0.0"

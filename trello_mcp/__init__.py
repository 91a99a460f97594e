"""Trello MCP Server - Trello tools over the Model Context Protocol.

Note: Import `run` directly from `trello_mcp.main` to avoid circular imports.
"""

__all__ = ["main", "api", "clients", "core", "models", "tools"]

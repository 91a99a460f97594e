"""API Package - MCP protocol adapter."""

from trello_mcp.api.adapter import ProtocolAdapter, ToolCallError, create_server

__all__ = ["ProtocolAdapter", "ToolCallError", "create_server"]

"""
Protocol Adapter - MCP list_tools / call_tool over the Tool Registry

Translates Model Context Protocol requests into registry operations:
- list_tools: registry definitions -> mcp.types.Tool
- call_tool: registry.execute(); an unknown tool becomes an error envelope

create_server() binds an adapter to an mcp low-level Server. Error
envelopes are raised as ToolCallError inside the call_tool handler so the
server answers with ``isError: true`` and the envelope text.

Pattern: Adapter between the wire protocol and the domain registry
"""

import uuid
from typing import Any, Optional

import structlog
from mcp import types
from mcp.server import Server

from trello_mcp.core.exceptions import ToolNotFoundError
from trello_mcp.models.domain import ToolResult
from trello_mcp.observability.logging import correlation_id_context, get_logger
from trello_mcp.tools.registry import ToolRegistry


class ToolCallError(Exception):
    """Carries the text of an error envelope through the MCP server."""


class ProtocolAdapter:
    """
    MCP-facing view of a ToolRegistry.

    Example:
        >>> adapter = ProtocolAdapter(registry)
        >>> tools = adapter.list_tools()
        >>> result = await adapter.call_tool("list_boards", {})
    """

    def __init__(
        self,
        registry: ToolRegistry,
        logger: Optional[structlog.BoundLogger] = None,
    ) -> None:
        self.registry = registry
        self._logger = logger or get_logger(__name__)

    def list_tools(self) -> list[types.Tool]:
        return [
            types.Tool(
                name=definition.name,
                description=definition.description,
                inputSchema=definition.parameters,
            )
            for definition in self.registry.get_tool_definitions()
        ]

    async def call_tool(self, name: str, arguments: Optional[dict[str, Any]]) -> ToolResult:
        """
        Dispatch one call, returning the envelope verbatim.

        Args:
            name: Tool name
            arguments: Tool arguments (None is treated as empty)

        Returns:
            The registry's envelope, or an error envelope for unknown tools
        """
        with correlation_id_context(uuid.uuid4().hex[:12]):
            try:
                result = await self.registry.execute(name, arguments or {})
            except ToolNotFoundError as e:
                self._logger.warning("unknown_tool", tool=name)
                return ToolResult.error(f"Error: {e.message}")
            self._logger.info("tool_result", tool=name, is_error=result.is_error)
            return result

    @staticmethod
    def to_mcp_content(result: ToolResult) -> list[types.TextContent]:
        return [types.TextContent(type="text", text=block.text) for block in result.content]


def create_server(adapter: ProtocolAdapter, name: str = "trello-mcp") -> Server:
    """
    Build an MCP server whose tools are served by the adapter.

    Args:
        adapter: Adapter over the populated registry
        name: Server name announced during initialization

    Returns:
        Configured mcp.server.Server
    """
    server: Server = Server(name)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return adapter.list_tools()

    # Arguments are checked by the tool's own validation rules
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        result = await adapter.call_tool(name, arguments)
        if result.is_error:
            raise ToolCallError(result.text)
        return adapter.to_mcp_content(result)

    return server

"""
Built-in Tools Package - Trello Tool Catalogue

Each module exposes a TOOLS list of ToolSpec (config, operation, renderer).
register_trello_tools() turns every ToolSpec into a ToolHandler bound to the
shared TrelloClient and registers it by name.
"""

from typing import Optional

import structlog

from trello_mcp.clients.trello import TrelloClient
from trello_mcp.tools.builtin import (
    attachments,
    boards,
    bulk,
    cards,
    checklists,
    dates,
    labels,
    lists,
    members,
)
from trello_mcp.tools.handler import ToolHandler, ToolSpec
from trello_mcp.tools.registry import ToolRegistry


ALL_TOOLS: list[ToolSpec] = [
    *boards.TOOLS,
    *lists.TOOLS,
    *cards.TOOLS,
    *labels.TOOLS,
    *dates.TOOLS,
    *members.TOOLS,
    *checklists.TOOLS,
    *attachments.TOOLS,
    *bulk.TOOLS,
]


def register_trello_tools(
    registry: ToolRegistry,
    client: TrelloClient,
    logger: Optional[structlog.BoundLogger] = None,
) -> None:
    """
    Register every Trello tool with the given registry.

    Args:
        registry: The ToolRegistry to register tools with.
        client: Shared Trello client used by all handlers.
        logger: Logger injected into every handler (default: handler module logger).
    """
    for spec in ALL_TOOLS:
        registry.register(
            spec.config.name,
            ToolHandler(
                config=spec.config,
                client=client,
                operation=spec.operation,
                render=spec.render,
                logger=logger,
            ),
        )


__all__ = [
    "ALL_TOOLS",
    "register_trello_tools",
]

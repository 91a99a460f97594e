"""
Models Package

Domain models for the tool system and Pydantic models for Trello resources.
"""

from trello_mcp.models.domain import (
    BulkItemError,
    BulkResult,
    TextContent,
    ToolCategory,
    ToolDefinition,
    ToolResult,
)
from trello_mcp.models.trello import (
    Attachment,
    Board,
    Card,
    CheckItem,
    Checklist,
    ChecklistProgress,
    Comment,
    Label,
    Member,
    TrelloList,
)

__all__ = [
    "BulkItemError",
    "BulkResult",
    "TextContent",
    "ToolCategory",
    "ToolDefinition",
    "ToolResult",
    "Attachment",
    "Board",
    "Card",
    "CheckItem",
    "Checklist",
    "ChecklistProgress",
    "Comment",
    "Label",
    "Member",
    "TrelloList",
]

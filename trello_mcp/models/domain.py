"""
Domain Models - Tool Definitions, Results and Bulk Outcomes

This module contains the domain models for the tool system: tool categories,
tool definitions advertised to MCP clients, the uniform result envelope, and
the aggregate result of bulk operations.

Pattern: Domain models as value objects (Percival & Gregory pp. 59-65)
Pattern: Pydantic for validation at boundaries (Sinha pp. 193-195)

Note: ToolDefinition.parameters is derived from validation rules by the
registry; handlers never author JSON Schema by hand.
"""

from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


# =============================================================================
# ToolCategory
# =============================================================================


class ToolCategory(str, Enum):
    """Functional grouping of tools, used for discovery filtering."""

    BOARDS = "boards"
    LISTS = "lists"
    CARDS = "cards"
    LABELS = "labels"
    DATES = "dates"
    CHECKLISTS = "checklists"
    MEMBERS = "members"
    ATTACHMENTS = "attachments"
    BULK = "bulk"


# =============================================================================
# ToolDefinition Model
# =============================================================================


class ToolDefinition(BaseModel):
    """
    Tool definition advertised to protocol clients.

    Pattern: Value object (identified by data, not identity)
    Pattern: JSON Schema for parameters (MCP inputSchema compatible)

    Attributes:
        name: Unique tool identifier.
        description: Human-readable description of what the tool does.
        category: Functional category of the tool.
        parameters: JSON Schema defining the tool's input parameters.

    Example:
        >>> tool = ToolDefinition(
        ...     name="close_board",
        ...     description="Close (archive) a board",
        ...     category=ToolCategory.BOARDS,
        ...     parameters={
        ...         "type": "object",
        ...         "properties": {"boardId": {"type": "string"}},
        ...         "required": ["boardId"],
        ...     },
        ... )
    """

    name: str = Field(..., description="Unique tool identifier")
    description: Optional[str] = Field(
        default=None, description="Human-readable description"
    )
    category: ToolCategory = Field(..., description="Functional category")
    parameters: dict[str, Any] = Field(
        ..., description="JSON Schema for input parameters"
    )

    model_config = {"frozen": True}


# =============================================================================
# ToolResult Model
# =============================================================================


class TextContent(BaseModel):
    """A single text block of a tool result."""

    type: Literal["text"] = "text"
    text: str

    model_config = {"frozen": True}


class ToolResult(BaseModel):
    """
    Result of executing a tool.

    The only channel for both success payloads and handler-level failures:
    validation and Trello API errors come back as ``is_error=True`` results,
    never as exceptions.

    Attributes:
        content: Text blocks of the result (in practice exactly one).
        is_error: Whether the result represents an error.

    Example:
        >>> ToolResult.success("Board closed").text
        'Board closed'
        >>> ToolResult.error("Error: boom").is_error
        True
    """

    content: list[TextContent] = Field(default_factory=list)
    is_error: bool = Field(default=False, description="Whether result is an error")

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        """Build a success envelope with a single text block."""
        return cls(content=[TextContent(text=text)])

    @classmethod
    def error(cls, text: str) -> "ToolResult":
        """Build an error envelope with a single text block."""
        return cls(content=[TextContent(text=text)], is_error=True)

    @property
    def text(self) -> str:
        """Concatenated text of all content blocks."""
        return "\n".join(block.text for block in self.content)


# =============================================================================
# Bulk Operation Results
# =============================================================================


class BulkItemError(BaseModel):
    """Failure of one item in a bulk operation."""

    item_id: str = Field(..., description="Identifier of the failed item")
    error: str = Field(..., description="Error message")


class BulkResult(BaseModel):
    """
    Aggregate outcome of a bulk operation.

    A partial failure is not an exception: every item is attempted and each
    failure is recorded with its original identifier.

    Attributes:
        total: Number of items submitted.
        success: Number of items that succeeded.
        failed: Number of items that failed.
        errors: Per-item failures in submission order.
    """

    total: int = 0
    success: int = 0
    failed: int = 0
    errors: list[BulkItemError] = Field(default_factory=list)

    @property
    def failed_ids(self) -> list[str]:
        """Identifiers of the failed items."""
        return [e.item_id for e in self.errors]

"""
Tools Package - Validation, Handlers and the Tool Registry

Pattern: Tool inventory as service registry
"""

from trello_mcp.tools.handler import ToolConfig, ToolHandler, ToolSpec
from trello_mcp.tools.registry import ToolRegistry
from trello_mcp.tools.validation import ValidationRule, validate

__all__ = [
    "ToolConfig",
    "ToolHandler",
    "ToolSpec",
    "ToolRegistry",
    "ValidationRule",
    "validate",
]

"""
Core module for the Trello MCP server.

This module contains configuration and the exception hierarchy.
"""

from trello_mcp.core.config import Settings, get_settings
from trello_mcp.core.exceptions import (
    ConfigurationError,
    ErrorCode,
    ToolNotFoundError,
    ToolValidationError,
    TrelloAPIError,
    TrelloAuthError,
    TrelloMCPException,
    TrelloNetworkError,
    TrelloNotFoundError,
    TrelloRateLimitError,
    TrelloServerError,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Exceptions
    "ErrorCode",
    "TrelloMCPException",
    "ToolValidationError",
    "ToolNotFoundError",
    "ConfigurationError",
    "TrelloAPIError",
    "TrelloAuthError",
    "TrelloNotFoundError",
    "TrelloRateLimitError",
    "TrelloServerError",
    "TrelloNetworkError",
]

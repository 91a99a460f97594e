"""
Custom exceptions for the Trello MCP server.

This module provides the exception hierarchy used across the server. All
exceptions inherit from TrelloMCPException and carry an error code so that
handlers, the registry and the logs classify failures consistently.

Propagation:
- ToolValidationError and TrelloAPIError are caught by the tool handler and
  turned into an error envelope.
- ToolNotFoundError is raised by the registry and converted by the protocol
  adapter.
- ConfigurationError aborts start-up.

Pattern: Specific exceptions, always chained with "raise ... from e"
"""

from enum import Enum
from typing import Any, Optional


# =============================================================================
# Error Codes Enum
# =============================================================================


class ErrorCode(str, Enum):
    """
    Error codes for Trello MCP exceptions.

    These codes provide a consistent way to identify error types
    in tool results and in logging.
    """

    MCP_ERROR = "MCP_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    TOOL_NOT_FOUND = "TOOL_NOT_FOUND"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    TRELLO_API_ERROR = "TRELLO_API_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"


# =============================================================================
# Base Exception
# =============================================================================


class TrelloMCPException(Exception):
    """
    Base exception for all Trello MCP errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code from ErrorCode enum.
    """

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.MCP_ERROR,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            error_code: Machine-readable error code.
            **kwargs: Additional attributes to set on the exception.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code

        for key, value in kwargs.items():
            setattr(self, key, value)


# =============================================================================
# Tool Dispatch Errors
# =============================================================================


class ToolValidationError(TrelloMCPException):
    """
    Raised when tool arguments violate a validation rule.

    Only the first violated rule is reported.

    Attributes:
        param: Name of the offending parameter.
    """

    def __init__(
        self,
        message: str,
        param: str,
        error_code: str = ErrorCode.VALIDATION_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.param = param


class ToolNotFoundError(TrelloMCPException):
    """Raised when a requested tool is not registered."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}", ErrorCode.TOOL_NOT_FOUND)
        self.tool_name = tool_name


class ConfigurationError(TrelloMCPException):
    """Raised when required configuration (credentials) is missing or invalid."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, **kwargs)


# =============================================================================
# Trello API Errors
# =============================================================================


class TrelloAPIError(TrelloMCPException):
    """
    Exception for failures talking to the Trello REST API.

    Raised by TrelloClient for HTTP error statuses and transport failures.
    Never retried per call.

    Attributes:
        status_code: HTTP status code returned by Trello (if any).
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: str = ErrorCode.TRELLO_API_ERROR,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, error_code, **kwargs)
        self.status_code = status_code


class TrelloAuthError(TrelloAPIError):
    """Credentials were rejected (HTTP 401/403)."""

    def __init__(self, status_code: int = 401) -> None:
        super().__init__(
            "Trello authentication failed. "
            "Check TRELLO_API_KEY and TRELLO_API_TOKEN.",
            status_code=status_code,
            error_code=ErrorCode.AUTHENTICATION_ERROR,
        )


class TrelloNotFoundError(TrelloAPIError):
    """The requested resource does not exist (HTTP 404)."""

    def __init__(self, detail: str = "") -> None:
        message = "Trello resource not found"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, status_code=404, error_code=ErrorCode.NOT_FOUND)


class TrelloRateLimitError(TrelloAPIError):
    """
    Trello rejected the request because of its quota (HTTP 429).

    Attributes:
        retry_after: Seconds suggested by the Retry-After header (if any).
    """

    def __init__(self, retry_after: Optional[float] = None) -> None:
        super().__init__(
            "Trello rate limit exceeded. Retry in a few seconds.",
            status_code=429,
            error_code=ErrorCode.RATE_LIMIT_ERROR,
        )
        self.retry_after = retry_after


class TrelloServerError(TrelloAPIError):
    """Any other non-success HTTP status."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        message = f"Trello API error ({status_code})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, status_code=status_code)


class TrelloNetworkError(TrelloAPIError):
    """The Trello API could not be reached (connection failure or timeout)."""

    def __init__(self, detail: str = "") -> None:
        message = "Cannot reach the Trello API. Check your connection."
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message, error_code=ErrorCode.NETWORK_ERROR)

"""Observability package - structured logging."""

from trello_mcp.observability.logging import (
    configure_logging,
    correlation_id_context,
    get_correlation_id,
    get_logger,
    reset_logging,
)

__all__ = [
    "configure_logging",
    "correlation_id_context",
    "get_correlation_id",
    "get_logger",
    "reset_logging",
]

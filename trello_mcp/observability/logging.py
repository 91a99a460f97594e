"""
Structured Logging Module

structlog configuration for the stdio server. Every event is one line on
stderr: stdout carries the MCP message stream and must never receive logs.

Each tool call runs under a correlation ID so that the request, the Trello
calls it makes and the resulting envelope can be grouped. Trello credentials
travel as query parameters, so a redaction processor masks them wherever
they show up in an event before it is rendered.

Pattern: Structured logging for observability
Pattern: Singleton configuration (configure once at startup)
"""

import contextvars
import logging
import re
import sys
from contextlib import contextmanager
from typing import Any, Generator, Optional, TextIO

import structlog
from structlog.types import EventDict, Processor


REDACTED: str = "[redacted]"

_SECRET_FIELDS: frozenset[str] = frozenset({"key", "token", "api_key", "api_token"})
_SECRET_QUERY = re.compile(r"\b(key|token)=[^&\s\"']+")

_configured: bool = False

_correlation_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)


# =============================================================================
# Correlation ID
# =============================================================================


def get_correlation_id() -> Optional[str]:
    """Return the correlation ID of the tool call in progress, if any."""
    return _correlation_id_var.get()


@contextmanager
def correlation_id_context(correlation_id: str) -> Generator[None, None, None]:
    """
    Run a block under a correlation ID.

    The previous value is restored on exit, so nested calls behave.

    Example:
        >>> with correlation_id_context("call-12345"):
        ...     logger.info("dispatching tool")
    """
    token = _correlation_id_var.set(correlation_id)
    try:
        yield
    finally:
        _correlation_id_var.reset(token)


# =============================================================================
# Processors
# =============================================================================


def add_correlation_id(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    correlation_id = get_correlation_id()
    if correlation_id is not None:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def redact_credentials(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mask credential fields and key=/token= query pairs in string values."""
    for name, value in event_dict.items():
        if name in _SECRET_FIELDS:
            event_dict[name] = REDACTED
        elif isinstance(value, str) and ("key=" in value or "token=" in value):
            event_dict[name] = _SECRET_QUERY.sub(rf"\1={REDACTED}", value)
    return event_dict


def _rename_level(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    if "log_level" in event_dict:
        event_dict["level"] = event_dict.pop("log_level")
    return event_dict


def _parse_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


# =============================================================================
# Configuration
# =============================================================================


def configure_logging(
    level: str = "INFO",
    stream: Optional[TextIO] = None,
    force: bool = False,
    json_output: bool = True,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Only the first call takes effect unless force=True.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Output stream (default: sys.stderr)
        force: Reconfigure even if already configured (tests)
        json_output: JSON lines when True, console rendering otherwise
    """
    global _configured

    if _configured and not force:
        return

    output = stream or sys.stderr
    threshold = _parse_level(level)

    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_correlation_id,
        _rename_level,
        redact_credentials,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )

    # httpx and mcp log through the stdlib
    logging.basicConfig(
        stream=output,
        level=threshold,
        format="%(levelname)s %(name)s: %(message)s",
        force=force,
    )

    _configured = True


def reset_logging() -> None:
    """Forget the configured state. Tests only."""
    global _configured
    _configured = False


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger bound to ``name``.

    Configures defaults on first use so components built in tests log
    without an explicit configure_logging() call.

    Example:
        >>> logger = get_logger("trello_mcp.tools.registry")
        >>> logger.warning("tool_overwritten", tool="move_card")
    """
    configure_logging()
    return structlog.get_logger().bind(logger=name)

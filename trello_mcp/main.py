"""
Trello MCP Server - Main Entry Point

Loads settings, configures logging, builds the shared TrelloClient and the
tool registry, and serves the Model Context Protocol over stdio.

stdout carries the protocol stream; every diagnostic goes to stderr.
"""

import asyncio
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from mcp.server.stdio import stdio_server

from trello_mcp.api.adapter import ProtocolAdapter, create_server
from trello_mcp.clients.trello import TrelloClient
from trello_mcp.core.config import Settings, get_settings
from trello_mcp.core.exceptions import ConfigurationError
from trello_mcp.observability.logging import configure_logging, get_logger
from trello_mcp.resilience.rate_limiter import BatchExecutor, RateLimiter
from trello_mcp.tools.builtin import register_trello_tools
from trello_mcp.tools.registry import ToolRegistry

APP_NAME = "trello-mcp"
APP_VERSION = "1.0.0"


# =============================================================================
# Application Assembly
# =============================================================================


def build_client(settings: Settings) -> TrelloClient:
    """
    Create the shared Trello client from settings.

    Raises:
        ConfigurationError: If credentials are missing.
    """
    api_key, api_token = settings.require_credentials()
    logger = get_logger("trello_mcp.clients.trello")
    limiter = RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
        logger=get_logger("trello_mcp.resilience.rate_limiter"),
    )
    return TrelloClient(
        api_key=api_key,
        api_token=api_token,
        base_url=settings.base_url,
        timeout_seconds=settings.timeout_seconds,
        batch_executor=BatchExecutor(
            limiter,
            batch_size=settings.bulk_batch_size,
            batch_delay_seconds=settings.bulk_batch_delay_seconds,
            logger=get_logger("trello_mcp.resilience.rate_limiter"),
        ),
        logger=logger,
    )


def build_registry(client: TrelloClient) -> ToolRegistry:
    """Create a registry populated with every Trello tool."""
    registry = ToolRegistry(logger=get_logger("trello_mcp.tools.registry"))
    register_trello_tools(registry, client, logger=get_logger("trello_mcp.tools.handler"))
    return registry


@asynccontextmanager
async def application(
    settings: Optional[Settings] = None,
) -> AsyncGenerator[ProtocolAdapter, None]:
    """
    Application lifespan: build everything on entry, close the client on exit.

    Yields:
        ProtocolAdapter over the populated registry
    """
    settings = settings or get_settings()
    logger = get_logger(__name__)

    client = build_client(settings)
    registry = build_registry(client)
    logger.info(
        "server_starting",
        name=APP_NAME,
        version=APP_VERSION,
        tools=registry.get_tool_count(),
    )
    try:
        yield ProtocolAdapter(registry, logger=get_logger("trello_mcp.api.adapter"))
    finally:
        await client.close()
        logger.info("server_stopped", name=APP_NAME)


async def serve(settings: Optional[Settings] = None) -> None:
    """Run the MCP server over stdio until the client disconnects."""
    async with application(settings) as adapter:
        server = create_server(adapter, name=APP_NAME)
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )


# =============================================================================
# Console Entry Point
# =============================================================================


def run() -> None:
    """Console script entry point (``trello-mcp``)."""
    try:
        settings = get_settings()
        configure_logging(
            level=settings.log_level,
            json_output=settings.environment == "production",
        )
        asyncio.run(serve(settings))
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()

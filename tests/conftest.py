"""
Pytest configuration for the Trello MCP test suite.

This configuration sets up:
- Test discovery paths
- Shared fixtures (settings, mocked HTTP and Trello clients, registries)
- Test markers for categorization

Pattern: "high and low gear" testing (unit tests on fakes, a few end to end)
"""

import sys
from pathlib import Path
from typing import Any, Callable, Optional
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

# Add project root to Python path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


BOARD_ID = "b" * 24
LIST_ID = "l" * 24
CARD_ID = "c" * 24
LABEL_ID = "a" * 24
MEMBER_ID = "m" * 24
CHECKLIST_ID = "k" * 24


# =============================================================================
# Test Markers
# =============================================================================


def pytest_configure(config):
    """
    Register custom markers for test categorization.

    - unit: Low gear tests for individual components
    - integration: High gear tests wiring the registry to a mocked Trello API
    - slow: Tests that take a long time to run
    """
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for tool dispatch")
    config.addinivalue_line("markers", "slow: Tests that take a long time to run")


# =============================================================================
# Settings Fixture
# =============================================================================


@pytest.fixture
def test_settings():
    """
    Create test settings with fake credentials and small bulk delays.

    Returns:
        Settings: Configured settings for testing
    """
    from trello_mcp.core.config import Settings

    return Settings(
        api_key="test-key",
        api_token="test-token",
        environment="development",
        log_level="DEBUG",
        bulk_batch_delay_seconds=0.0,
    )


# =============================================================================
# HTTP Fixtures
# =============================================================================


@pytest.fixture
def mock_http_client():
    """
    Create a mock HTTP client.

    Returns:
        AsyncMock: A mock httpx.AsyncClient
    """
    return AsyncMock(spec=httpx.AsyncClient)


@pytest.fixture
def make_response() -> Callable[..., httpx.Response]:
    """
    Factory for real httpx.Response objects bound to a request.

    raise_for_status() needs the request, so every response carries one.
    """

    def _make(
        status_code: int = 200,
        json: Optional[Any] = None,
        text: Optional[str] = None,
        method: str = "GET",
        url: str = "https://api.trello.com/1/test",
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        request = httpx.Request(method, url)
        if json is not None:
            return httpx.Response(status_code, json=json, request=request, headers=headers)
        return httpx.Response(
            status_code, content=(text or "").encode(), request=request, headers=headers
        )

    return _make


# =============================================================================
# Trello Client Fixtures
# =============================================================================


@pytest.fixture
def mock_logger():
    """A stand-in for a structlog BoundLogger."""
    return MagicMock()


@pytest.fixture
def mock_trello_client():
    """
    Create a mock TrelloClient.

    Uses spec= so that calls to methods the client does not have fail loudly.
    """
    from trello_mcp.clients.trello import TrelloClient

    return AsyncMock(spec=TrelloClient)


@pytest.fixture
def trello_client(mock_http_client, mock_logger):
    """
    Real TrelloClient over a mocked HTTP client, with a fast batch executor.
    """
    from trello_mcp.clients.trello import TrelloClient
    from trello_mcp.resilience.rate_limiter import BatchExecutor, RateLimiter

    return TrelloClient(
        api_key="test-key",
        api_token="test-token",
        http_client=mock_http_client,
        batch_executor=BatchExecutor(
            RateLimiter(logger=mock_logger),
            batch_delay_seconds=0.0,
            logger=mock_logger,
        ),
        logger=mock_logger,
    )


# =============================================================================
# Registry Fixtures
# =============================================================================


@pytest.fixture
def registry(mock_logger):
    """Create a fresh, empty ToolRegistry for each test."""
    from trello_mcp.tools.registry import ToolRegistry

    return ToolRegistry(logger=mock_logger)


@pytest.fixture
def trello_registry(mock_trello_client, mock_logger):
    """Registry with every Trello tool bound to the mocked client."""
    from trello_mcp.tools.builtin import register_trello_tools
    from trello_mcp.tools.registry import ToolRegistry

    registry = ToolRegistry(logger=mock_logger)
    register_trello_tools(registry, mock_trello_client, logger=mock_logger)
    return registry

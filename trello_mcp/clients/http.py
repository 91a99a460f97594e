"""
HTTP Client Module - Client Factory

Builds the pooled httpx.AsyncClient the Trello client talks through.

Bulk tools fan out a whole batch of requests at once, so the pool is sized
for one batch. Connection setup gets a shorter timeout than the request as
a whole: an unreachable API should fail fast, a slow board export should not.
Retries happen at the transport level only and cover failed connections;
HTTP error statuses come back to the caller untouched.

Pattern: Factory pattern for creating configured HTTP clients
"""

from typing import Optional

import httpx


DEFAULT_TIMEOUT_SECONDS: float = 30.0
"""Read, write and pool timeout per request."""

DEFAULT_CONNECT_TIMEOUT_SECONDS: float = 5.0

DEFAULT_MAX_CONNECTIONS: int = 100
"""Pool size; covers one 80-request bulk batch with headroom."""

DEFAULT_MAX_KEEPALIVE: int = 20

DEFAULT_RETRY_COUNT: int = 2

USER_AGENT: str = "trello-mcp/1.0"


def build_timeout(
    timeout_seconds: float, connect_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
) -> httpx.Timeout:
    """Request timeout with connect capped at ``connect_seconds``."""
    return httpx.Timeout(timeout_seconds, connect=min(connect_seconds, timeout_seconds))


def create_http_client(
    base_url: Optional[str] = None,
    timeout_seconds: Optional[float] = None,
    max_connections: Optional[int] = None,
    max_keepalive: Optional[int] = None,
    retries: Optional[int] = None,
    headers: Optional[dict[str, str]] = None,
) -> httpx.AsyncClient:
    """
    Create the pooled async client.

    Args:
        base_url: Prefix for relative request paths
        timeout_seconds: Read/write/pool timeout (default: 30.0)
        max_connections: Pool size (default: 100)
        max_keepalive: Idle connections kept open (default: 20)
        retries: Connection retries (default: 2)
        headers: Extra headers merged over the defaults

    Example:
        >>> client = create_http_client(base_url="https://api.trello.com/1")
        >>> async with client:
        ...     response = await client.get("/members/me/boards", params=auth)
    """
    transport = httpx.AsyncHTTPTransport(
        retries=DEFAULT_RETRY_COUNT if retries is None else retries,
        limits=httpx.Limits(
            max_connections=max_connections or DEFAULT_MAX_CONNECTIONS,
            max_keepalive_connections=max_keepalive or DEFAULT_MAX_KEEPALIVE,
        ),
    )

    return httpx.AsyncClient(
        base_url=base_url or "",
        timeout=build_timeout(timeout_seconds or DEFAULT_TIMEOUT_SECONDS),
        headers={"User-Agent": USER_AGENT, "Accept": "application/json", **(headers or {})},
        transport=transport,
    )

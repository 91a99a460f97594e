"""
Resilience Package - Rate limiting and batched fan-out for the Trello API.
"""

from trello_mcp.resilience.rate_limiter import (
    BatchExecutor,
    RateLimiter,
    RateLimiterStats,
)

__all__ = [
    "BatchExecutor",
    "RateLimiter",
    "RateLimiterStats",
]

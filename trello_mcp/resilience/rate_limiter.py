"""
Rate Limiter - Fixed Window Throttling for the Trello API

Trello allows 100 requests per 10 seconds per token. This module throttles
outgoing calls so the quota is never exceeded and fans bulk operations out
in bounded, rate-limited batches.

Pattern: Fixed window counter with a single asyncio.Lock
Pattern: Bulkhead - bounded concurrency per batch
Anti-Pattern §3.1 Avoided: No bare except clauses

The lock is held across the wait for a window reset, so callers queue in
order behind the one that hit the cap and every increment or reset is
observed consistently.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Sequence, TypeVar

import structlog

from trello_mcp.models.domain import BulkItemError, BulkResult
from trello_mcp.observability.logging import get_logger

T = TypeVar("T")


# =============================================================================
# Default Configuration Constants
# =============================================================================

DEFAULT_MAX_REQUESTS: int = 100
DEFAULT_WINDOW_SECONDS: float = 10.0
DEFAULT_SAFETY_MARGIN_SECONDS: float = 0.1
DEFAULT_BATCH_SIZE: int = 80
DEFAULT_BATCH_DELAY_SECONDS: float = 2.0


# =============================================================================
# Rate Limiter Stats
# =============================================================================


@dataclass
class RateLimiterStats:
    """
    Snapshot of the current window.

    Attributes:
        requests_in_window: Requests admitted in the current window
        max_requests: Quota per window
        remaining_requests: Requests still admissible in this window
        window_elapsed_seconds: Time since the window started
        window_seconds: Window length
    """

    requests_in_window: int
    max_requests: int
    remaining_requests: int
    window_elapsed_seconds: float
    window_seconds: float


# =============================================================================
# RateLimiter
# =============================================================================


class RateLimiter:
    """
    Fixed-window rate limiter for async operations.

    Invariant: requests_in_window never exceeds max_requests. The window
    resets once window_seconds have elapsed since it started, regardless
    of the counter.

    Example:
        >>> limiter = RateLimiter(max_requests=100, window_seconds=10.0)
        >>> board = await limiter.execute_with_limit(lambda: client.get_board(board_id))
        >>> results = await limiter.execute_batch(operations, batch_size=80)
    """

    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        safety_margin_seconds: float = DEFAULT_SAFETY_MARGIN_SECONDS,
        logger: Optional[structlog.BoundLogger] = None,
    ) -> None:
        """
        Initialize the rate limiter.

        Args:
            max_requests: Maximum requests admitted per window
            window_seconds: Window length in seconds
            safety_margin_seconds: Extra wait added when the quota is exhausted
            logger: Structured logger (default: module logger)

        Raises:
            ValueError: If max_requests or window_seconds is not positive
        """
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.safety_margin_seconds = safety_margin_seconds
        self._logger = logger or get_logger(__name__)

        self._requests_in_window = 0
        self._window_start = time.monotonic()
        self._lock = asyncio.Lock()

    @property
    def requests_in_window(self) -> int:
        return self._requests_in_window

    def _reset_window(self, now: float) -> None:
        self._requests_in_window = 0
        self._window_start = now

    async def acquire(self) -> None:
        """
        Admit one request, waiting for the next window if the quota is spent.
        """
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self._window_start
            if elapsed > self.window_seconds:
                self._reset_window(now)
                elapsed = 0.0

            if self._requests_in_window >= self.max_requests:
                wait_seconds = self.window_seconds - elapsed + self.safety_margin_seconds
                self._logger.info(
                    "rate_limit_wait",
                    wait_seconds=round(wait_seconds, 3),
                    requests_in_window=self._requests_in_window,
                )
                await asyncio.sleep(wait_seconds)
                self._reset_window(time.monotonic())

            self._requests_in_window += 1

    async def execute_with_limit(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Run one async operation once the limiter admits it.

        Args:
            operation: Zero-argument callable returning an awaitable

        Returns:
            The operation's result (exceptions propagate unchanged)
        """
        await self.acquire()
        return await operation()

    async def execute_batch(
        self,
        operations: Sequence[Callable[[], Awaitable[T]]],
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS,
    ) -> list[T]:
        """
        Run operations in concurrent, rate-limited batches.

        Each batch runs concurrently; the limiter pauses between batches
        (not after the last). An exception from any operation propagates;
        use BatchExecutor for per-item failure capture.

        Args:
            operations: Zero-argument callables returning awaitables
            batch_size: Operations per batch
            batch_delay_seconds: Pause between batches

        Returns:
            Results in submission order
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        results: list[T] = []
        total_batches = (len(operations) + batch_size - 1) // batch_size
        for index in range(total_batches):
            batch = operations[index * batch_size:(index + 1) * batch_size]
            self._logger.debug(
                "batch_start",
                batch=index + 1,
                total_batches=total_batches,
                size=len(batch),
            )
            batch_results = await asyncio.gather(
                *(self.execute_with_limit(op) for op in batch)
            )
            results.extend(batch_results)

            if index < total_batches - 1 and batch_delay_seconds > 0:
                await asyncio.sleep(batch_delay_seconds)

        return results

    def get_stats(self) -> RateLimiterStats:
        """Return a snapshot of the current window."""
        elapsed = time.monotonic() - self._window_start
        return RateLimiterStats(
            requests_in_window=self._requests_in_window,
            max_requests=self.max_requests,
            remaining_requests=max(0, self.max_requests - self._requests_in_window),
            window_elapsed_seconds=elapsed,
            window_seconds=self.window_seconds,
        )

    def reset(self) -> None:
        """Start a fresh window (testing utility)."""
        self._reset_window(time.monotonic())


# =============================================================================
# BatchExecutor
# =============================================================================


class BatchExecutor:
    """
    Apply one async operation to many item ids with per-item failure capture.

    A failing item never aborts its siblings or later batches; the outcome is
    reported as a BulkResult with the original item ids of the failures.

    Example:
        >>> executor = BatchExecutor(RateLimiter())
        >>> result = await executor.run(card_ids, client.archive_card)
        >>> result.success, result.failed
        (498, 2)
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS,
        logger: Optional[structlog.BoundLogger] = None,
    ) -> None:
        self.rate_limiter = rate_limiter
        self.batch_size = batch_size
        self.batch_delay_seconds = batch_delay_seconds
        self._logger = logger or get_logger(__name__)

    async def run(
        self,
        item_ids: Sequence[str],
        operation: Callable[[str], Awaitable[Any]],
    ) -> BulkResult:
        def wrap(item_id: str) -> Callable[[], Awaitable[Optional[BulkItemError]]]:
            async def call() -> Optional[BulkItemError]:
                try:
                    await operation(item_id)
                except Exception as e:
                    self._logger.warning("bulk_item_failed", item_id=item_id, error=str(e))
                    return BulkItemError(item_id=str(item_id), error=str(e) or type(e).__name__)
                return None

            return call

        outcomes = await self.rate_limiter.execute_batch(
            [wrap(item_id) for item_id in item_ids],
            batch_size=self.batch_size,
            batch_delay_seconds=self.batch_delay_seconds,
        )
        errors = [outcome for outcome in outcomes if outcome is not None]
        result = BulkResult(
            total=len(item_ids),
            success=len(item_ids) - len(errors),
            failed=len(errors),
            errors=errors,
        )
        self._logger.info(
            "bulk_complete", total=result.total, success=result.success, failed=result.failed
        )
        return result

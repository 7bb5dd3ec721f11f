"""Async helpers for resilient provider calls.

This module provides:
- The package exception hierarchy
- ``call_with_retry``: bounded retries with exponential backoff
- Timeout wrappers for async operations
"""

from __future__ import annotations

import asyncio
import builtins
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

log = structlog.get_logger()

T = TypeVar("T")

NOT_INITIALIZED_MESSAGE = (
    "ai-error-solution: Package not initialized. "
    "Please call init_auto_error_solution() first with your API key."
)


# =============================================================================
# Custom Exceptions
# =============================================================================


class SolutionError(Exception):
    """Base exception for all ai-error-solution errors."""


class NotInitializedError(SolutionError):
    """No configuration has been installed."""

    def __init__(self, message: str = NOT_INITIALIZED_MESSAGE) -> None:
        super().__init__(message)


class ProviderError(SolutionError):
    """The completion provider failed to return a usable completion."""


class ProviderTimeoutError(ProviderError):
    """The completion provider did not answer in time."""


class MalformedResponseError(ProviderError):
    """The provider answered but the payload holds no completion content."""


# =============================================================================
# Retry
# =============================================================================


def _log_retry(retry_state: RetryCallState) -> None:
    """Log retry attempts for debugging."""
    if retry_state.outcome is None:
        return

    exception = retry_state.outcome.exception()
    if exception:
        log.warning(
            "retrying_operation",
            attempt=retry_state.attempt_number,
            exception_type=type(exception).__name__,
            exception_message=str(exception),
            wait_time=retry_state.next_action.sleep if retry_state.next_action else 0,
        )


async def call_with_retry(
    invoke: Callable[[], Awaitable[T]],
    max_retries: int,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Call ``invoke`` until it succeeds or the retries are exhausted.

    The first attempt is made immediately. After the n-th failed attempt
    (counting from zero) and while retries remain, the controller waits
    ``2 ** n`` seconds: 1s, 2s, 4s, ...

    Args:
        invoke: Zero-argument coroutine factory performing one provider call.
        max_retries: Number of retries after the first attempt. Zero means
            exactly one attempt.
        sleep: Awaitable delay used between attempts.

    Returns:
        The first successful result of ``invoke``.

    Raises:
        ValueError: If ``max_retries`` is negative.
        ProviderError: The last attempt's failure. Failures that are not
            already ``ProviderError`` are wrapped, with the original chained.
    """
    if isinstance(max_retries, bool) or not isinstance(max_retries, int) or max_retries < 0:
        raise ValueError(f"max_retries must be a non-negative integer, got {max_retries!r}")

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential(multiplier=1, exp_base=2),
        retry=retry_if_exception_type(Exception),
        before_sleep=_log_retry,
        sleep=sleep,
        reraise=True,
    )

    try:
        return await retrying(invoke)
    except ProviderError:
        raise
    except RetryError as e:
        raise ProviderError("Failed to get response from completion provider") from e
    except Exception as e:
        raise ProviderError(str(e) or type(e).__name__) from e


# =============================================================================
# Timeout Utilities
# =============================================================================


async def with_timeout(
    coro: Awaitable[T],
    timeout: float,
    error_message: str | None = None,
) -> T:
    """Execute an awaitable with a timeout.

    Args:
        coro: The coroutine to execute.
        timeout: Timeout in seconds.
        error_message: Custom error message for timeout.

    Returns:
        The result of the coroutine.

    Raises:
        ProviderTimeoutError: If the operation times out.
    """
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except builtins.TimeoutError as e:
        msg = error_message or f"Operation timed out after {timeout}s"
        log.warning("operation_timeout", timeout=timeout)
        raise ProviderTimeoutError(msg) from e

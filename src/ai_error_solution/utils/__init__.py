"""Utility functions and helpers.

- security: Secret redaction
- async_helpers: Exceptions, retry with backoff, timeouts
- logging: Structured logging with secret sanitization
"""

from ai_error_solution.utils.async_helpers import (
    MalformedResponseError,
    NotInitializedError,
    ProviderError,
    ProviderTimeoutError,
    SolutionError,
    call_with_retry,
    with_timeout,
)
from ai_error_solution.utils.logging import (
    LogFormat,
    LogLevel,
    bind_context,
    configure_logging,
    unbind_context,
)
from ai_error_solution.utils.security import (
    RedactionError,
    SecretRedactor,
    SecurityError,
)

__all__ = [
    # Logging
    "LogFormat",
    "LogLevel",
    # Errors
    "MalformedResponseError",
    "NotInitializedError",
    "ProviderError",
    "ProviderTimeoutError",
    # Security
    "RedactionError",
    "SecretRedactor",
    "SecurityError",
    "SolutionError",
    "bind_context",
    "call_with_retry",
    "configure_logging",
    "unbind_context",
    "with_timeout",
]

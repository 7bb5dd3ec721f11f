"""ai-error-solution: explain runtime errors with a large language model.

Capture an exception, send its message and stack trace to a completion
provider and get back a plain-English explanation, likely causes, suggested
fixes and documentation links.

Example:
    from ai_error_solution import fix_error, init_auto_error_solution

    init_auto_error_solution(api_key="sk-...")

    try:
        risky()
    except Exception as exc:
        result = await fix_error(exc, silent=True)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from ai_error_solution._version import __version__
from ai_error_solution.config.state import (
    default_holder,
    init_auto_error_solution,
    is_initialized,
)
from ai_error_solution.core.solver import ErrorSolver
from ai_error_solution.models.analysis import AnalysisResult, StructuredAnalysis
from ai_error_solution.models.error import ErrorFields, ErrorLike, ErrorRecord

P = ParamSpec("P")
T = TypeVar("T")

name = "ai-error-solution"


async def fix_error(
    error: ErrorLike | object,
    *,
    silent: bool = False,
) -> AnalysisResult | None:
    """Analyse ``error`` with the configuration installed by ``init_auto_error_solution``.

    Never raises. With ``silent=True`` the AnalysisResult is returned;
    otherwise it is written to the log and None is returned.
    """
    return await ErrorSolver(default_holder()).fix_error(error, silent=silent)


def wrap_with_error_handler(
    func: Callable[P, Awaitable[T]],
) -> Callable[P, Awaitable[T]]:
    """Decorate a coroutine function so its failures are analysed.

    The exception is reported through ``fix_error`` and then re-raised
    unchanged.

    Example:
        @wrap_with_error_handler
        async def handler(request):
            ...
    """

    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return await func(*args, **kwargs)
        except Exception as error:
            await fix_error(error)
            raise

    return wrapper


__all__ = [
    "AnalysisResult",
    "ErrorFields",
    "ErrorLike",
    "ErrorRecord",
    "ErrorSolver",
    "StructuredAnalysis",
    "__version__",
    "fix_error",
    "init_auto_error_solution",
    "is_initialized",
    "name",
    "wrap_with_error_handler",
]

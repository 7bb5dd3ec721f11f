"""Normalization of the error inputs accepted by the solver.

``normalize_error`` maps each accepted input shape onto an ``ErrorRecord``:

- Exceptions: class name, ``str(exc)`` and the formatted traceback
- Strings: kind "Error", the string as message, no stack
- ``ErrorFields`` and mappings with ``message``/``name``/``stack`` keys
- Anything else: kind "Error" and ``str(value)``
"""

from __future__ import annotations

import re
import traceback
from collections.abc import Mapping
from typing import Any

from ai_error_solution.models.error import (
    NO_STACK_TRACE,
    UNKNOWN_ERROR_MESSAGE,
    ErrorFields,
    ErrorLike,
    ErrorRecord,
)

DEFAULT_KIND = "Error"

# "ValueError: message" or "pkg.module.CustomError: message"
ERROR_LINE_PATTERN = re.compile(
    r"^([A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*):\s*(.*)$"
)


def _text_or(value: Any, default: str) -> str:
    if value is None:
        return default
    try:
        text = str(value)
    except Exception:
        # Objects with a broken __str__ still produce a record
        return default
    return text if text.strip() else default


def _format_stack(exc: BaseException) -> str:
    if exc.__traceback__ is None:
        return NO_STACK_TRACE
    return "".join(traceback.format_exception(exc)).rstrip()


def normalize_error(error: ErrorLike | object) -> ErrorRecord:
    """Build the ``ErrorRecord`` for any accepted error input.

    The resulting message is never empty; it falls back to "Unknown error".
    """
    if isinstance(error, BaseException):
        return ErrorRecord(
            kind=type(error).__name__,
            message=_text_or(error, UNKNOWN_ERROR_MESSAGE),
            stack_trace=_format_stack(error),
        )

    if isinstance(error, str):
        return ErrorRecord(
            kind=DEFAULT_KIND,
            message=_text_or(error, UNKNOWN_ERROR_MESSAGE),
            stack_trace=NO_STACK_TRACE,
        )

    if isinstance(error, ErrorFields):
        return ErrorRecord(
            kind=_text_or(error.name, DEFAULT_KIND),
            message=_text_or(error.message, UNKNOWN_ERROR_MESSAGE),
            stack_trace=_text_or(error.stack, NO_STACK_TRACE),
        )

    if isinstance(error, Mapping) and error.get("message"):
        return ErrorRecord(
            kind=_text_or(error.get("name"), DEFAULT_KIND),
            message=_text_or(error["message"], UNKNOWN_ERROR_MESSAGE),
            stack_trace=_text_or(error.get("stack"), NO_STACK_TRACE),
        )

    return ErrorRecord(
        kind=DEFAULT_KIND,
        message=_text_or(error, UNKNOWN_ERROR_MESSAGE),
        stack_trace=NO_STACK_TRACE,
    )


def error_from_text(text: str) -> ErrorFields:
    """Describe pasted error output, such as a traceback, as ``ErrorFields``.

    The last ``Name: message`` line provides the kind and message; the
    whole text is kept as the stack. Without such a line the last non-blank
    line becomes the message.
    """
    lines = [line.strip() for line in text.strip().splitlines() if line.strip()]
    if not lines:
        return ErrorFields(message=UNKNOWN_ERROR_MESSAGE)

    stack = text.strip() if len(lines) > 1 else None

    for line in reversed(lines):
        match = ERROR_LINE_PATTERN.match(line)
        if match:
            return ErrorFields(
                message=match.group(2) or match.group(1),
                name=match.group(1),
                stack=stack,
            )

    return ErrorFields(message=lines[-1], stack=stack)

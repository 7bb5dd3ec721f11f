"""Data models for the errors being analysed."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

UNKNOWN_ERROR_MESSAGE = "Unknown error"
NO_STACK_TRACE = "No stack trace available"


@dataclass(frozen=True)
class ErrorFields:
    """An error described by its parts rather than an exception object."""

    message: str
    name: str | None = None  # e.g., "TypeError"
    stack: str | None = None


@dataclass(frozen=True)
class ErrorRecord:
    """Normalized form of the error handed to the provider.

    ``message`` is never empty.
    """

    kind: str  # e.g., "ValueError"
    message: str
    stack_trace: str

    @property
    def signature(self) -> str:
        """Format: 'Kind: message'."""
        return f"{self.kind}: {self.message}"

    def to_dict(self) -> dict[str, str]:
        """Return a JSON-serialisable representation."""
        return {
            "kind": self.kind,
            "message": self.message,
            "stack_trace": self.stack_trace,
        }


# Inputs accepted by the analysis entry points
ErrorLike: TypeAlias = BaseException | str | ErrorFields | Mapping[str, Any]

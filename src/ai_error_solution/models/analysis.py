"""Data models for completions and error analysis."""

from dataclasses import dataclass
from typing import Any

from .error import ErrorRecord


@dataclass(frozen=True)
class Completion:
    """A successful response from a completion provider."""

    content: str  # Raw completion text
    model: str
    usage: dict[str, Any] | None = None  # Token accounting, provider specific


@dataclass(frozen=True)
class StructuredAnalysis:
    """A completion split into explanation, causes, fixes and references."""

    explanation: str
    causes: str
    fixes: str
    references: tuple[str, ...]
    raw: str  # The completion text the sections were extracted from

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable representation."""
        return {
            "explanation": self.explanation,
            "causes": self.causes,
            "fixes": self.fixes,
            "references": list(self.references),
            "raw": self.raw,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of analysing one error.

    Exactly one of ``analysis`` and ``analysis_error`` is set.
    """

    error: ErrorRecord
    analysis: StructuredAnalysis | None
    analysis_error: str | None = None
    model: str | None = None
    usage: dict[str, Any] | None = None

    @property
    def succeeded(self) -> bool:
        """Whether the provider produced an analysis."""
        return self.analysis is not None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable representation."""
        data: dict[str, Any] = {
            "error": self.error.to_dict(),
            "analysis": self.analysis.to_dict() if self.analysis else None,
        }
        if self.analysis_error is not None:
            data["analysis_error"] = self.analysis_error
        else:
            data["model"] = self.model
            data["usage"] = self.usage
        return data

"""Reporting sink that writes analyses to the structured log."""

from __future__ import annotations

from typing import Any

import structlog

from ...models.analysis import StructuredAnalysis
from ...models.error import ErrorRecord

DISCLAIMER = "AI suggestions may not be 100% accurate. Always verify fixes before applying."


class LogReporter:
    """AnalysisReporter that emits one log event per analysed error.

    Successful analyses are logged as ``error_analysis`` and failures as
    ``error_analysis_failed``, both at error level with the error's kind and
    message bound.
    """

    def __init__(self, logger: Any | None = None) -> None:
        self._log = logger or structlog.get_logger("ai_error_solution.report")

    def report_analysis(self, error: ErrorRecord, analysis: StructuredAnalysis) -> None:
        """Log the sections of a successful analysis."""
        self._log.error(
            "error_analysis",
            error_kind=error.kind,
            error_message=error.message,
            explanation=analysis.explanation,
            causes=analysis.causes,
            fixes=analysis.fixes,
            references=list(analysis.references),
            note=DISCLAIMER,
        )

    def report_failure(self, error: ErrorRecord, reason: str) -> None:
        """Log the error together with the reason its analysis failed."""
        self._log.error(
            "error_analysis_failed",
            error_kind=error.kind,
            error_message=error.message,
            reason=reason,
            stack_trace=error.stack_trace,
        )

"""Abstract interface for analysis reporting sinks."""

from typing import Protocol

from ..models.analysis import StructuredAnalysis
from ..models.error import ErrorRecord


class AnalysisReporter(Protocol):
    """Receives results when the solver runs in non-silent mode."""

    def report_analysis(self, error: ErrorRecord, analysis: StructuredAnalysis) -> None:
        """
        Present a successful analysis.

        Args:
            error: The normalized error that was analysed
            analysis: Sections extracted from the completion
        """
        ...

    def report_failure(self, error: ErrorRecord, reason: str) -> None:
        """
        Present an error whose analysis could not be obtained.

        Args:
            error: The normalized error that was analysed
            reason: Message of the failure that stopped the analysis
        """
        ...

"""Data models and transfer objects."""

from .analysis import AnalysisResult, Completion, StructuredAnalysis
from .error import ErrorFields, ErrorLike, ErrorRecord

__all__ = [
    # Error models
    "ErrorFields",
    "ErrorLike",
    "ErrorRecord",
    # Analysis models
    "AnalysisResult",
    "Completion",
    "StructuredAnalysis",
]

"""Protocol definitions for pluggable adapters."""

from .llm import CompletionProvider
from .reporter import AnalysisReporter

__all__ = ["AnalysisReporter", "CompletionProvider"]

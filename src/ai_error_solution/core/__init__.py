"""Core business logic components.

This module exports the main business logic:
- ErrorSolver: Orchestrates one error analysis
- normalize_error: Maps error inputs onto ErrorRecord
- parse_ai_response: Splits a model answer into sections
"""

from ai_error_solution.core.normalize import error_from_text, normalize_error
from ai_error_solution.core.response_parser import (
    extract_references,
    extract_section,
    parse_ai_response,
)
from ai_error_solution.core.solver import ErrorSolver

__all__ = [
    "ErrorSolver",
    "error_from_text",
    "extract_references",
    "extract_section",
    "normalize_error",
    "parse_ai_response",
]

"""Reporting sinks for non-silent analysis."""

from .log import LogReporter

__all__ = ["LogReporter"]

"""Shared test fixtures for ai-error-solution."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from ai_error_solution.config.schema import SolutionConfig
from ai_error_solution.config.state import reset_config
from ai_error_solution.models.analysis import Completion
from ai_error_solution.utils.logging import configure_logging

SAMPLE_COMPLETION = """1. Explanation:
Null pointer when object is undefined.

2. Causes:
- Missing initialization
- Async timing issue

3. Fixes:
- Add a null check
See https://example.com/docs.
"""


class StubProvider:
    """CompletionProvider double that replays scripted outcomes.

    Each item of ``outcomes`` is either a Completion to return or an
    exception to raise. The last outcome repeats once the script runs out.
    """

    def __init__(self, *outcomes: Completion | Exception) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[dict[str, object]] = []

    async def complete(
        self,
        *,
        api_key: str,
        model: str,
        error_message: str,
        stack_trace: str,
        timeout_ms: int,
    ) -> Completion:
        self.calls.append(
            {
                "api_key": api_key,
                "model": model,
                "error_message": error_message,
                "stack_trace": stack_trace,
                "timeout_ms": timeout_ms,
            }
        )
        index = min(len(self.calls), len(self.outcomes)) - 1
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingReporter:
    """AnalysisReporter double that keeps what it was given."""

    def __init__(self) -> None:
        self.analyses: list[tuple[object, object]] = []
        self.failures: list[tuple[object, str]] = []

    def report_analysis(self, error: object, analysis: object) -> None:
        self.analyses.append((error, analysis))

    def report_failure(self, error: object, reason: str) -> None:
        self.failures.append((error, reason))


@pytest.fixture(scope="session", autouse=True)
def structured_logging() -> None:
    """Send log output to stderr through the standard library, never stdout."""
    configure_logging(level="DEBUG", log_format="console")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep host settings and installed configuration out of every test."""
    for key in list(os.environ):
        if key.startswith("AI_ERROR_SOLUTION_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)  # No stray .env file
    reset_config()
    yield
    reset_config()


@pytest.fixture
def sample_completion_text() -> str:
    """Return a well-formed numbered model answer."""
    return SAMPLE_COMPLETION


@pytest.fixture
def sample_completion() -> Completion:
    """Return a Completion wrapping the sample answer."""
    return Completion(
        content=SAMPLE_COMPLETION,
        model="gpt-4o-mini",
        usage={"prompt_tokens": 120, "completion_tokens": 80, "total_tokens": 200},
    )


@pytest.fixture
def solution_config() -> SolutionConfig:
    """Return a configuration without retries."""
    return SolutionConfig(api_key="sk-test-key", max_retries=0, timeout=5000)


@pytest.fixture
def reporter() -> RecordingReporter:
    """Return a reporter that records calls."""
    return RecordingReporter()


@pytest.fixture
def make_provider() -> type[StubProvider]:
    """Return the StubProvider class for building scripted providers."""
    return StubProvider

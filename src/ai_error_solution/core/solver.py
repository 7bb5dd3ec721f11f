"""Error analysis orchestrator.

This module implements the ErrorSolver class that coordinates one analysis:
1. Read the active configuration
2. Normalize the error input
3. Call the completion provider with retries and a per-attempt timeout
4. Parse the completion into sections
5. Return the result (silent) or hand it to the reporter

Any failure along the way is turned into a failure result or a failure
report; ``fix_error`` never raises. The reason is only available as text:
an uninitialized configuration, a network failure and a malformed response
all look the same to the caller apart from the message.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from ai_error_solution.core.normalize import normalize_error
from ai_error_solution.core.response_parser import parse_ai_response
from ai_error_solution.models.analysis import AnalysisResult
from ai_error_solution.utils.async_helpers import call_with_retry, with_timeout
from ai_error_solution.utils.logging import bind_context, unbind_context

if TYPE_CHECKING:
    from ai_error_solution.config.schema import SolutionConfig
    from ai_error_solution.config.state import ConfigSupplier
    from ai_error_solution.interfaces.llm import CompletionProvider
    from ai_error_solution.interfaces.reporter import AnalysisReporter
    from ai_error_solution.models.analysis import Completion
    from ai_error_solution.models.error import ErrorLike, ErrorRecord

log = structlog.get_logger()


class ErrorSolver:
    """Orchestrates the analysis of a single error.

    Responsibilities:
    - Fetch the configuration on every call, so installing it late works
    - Bound each provider attempt by the configured timeout
    - Retry failed attempts with exponential backoff
    - Convert every failure into a uniform result

    Example:
        solver = ErrorSolver(ConfigHolder(SolutionConfig(api_key="sk-...")))
        result = await solver.fix_error(exc, silent=True)
        if result.succeeded:
            print(result.analysis.fixes)
    """

    def __init__(
        self,
        config_supplier: ConfigSupplier,
        provider: CompletionProvider | None = None,
        reporter: AnalysisReporter | None = None,
    ) -> None:
        """Initialize the ErrorSolver.

        Args:
            config_supplier: Source of the active configuration.
            provider: Completion adapter. If None, built from the active
                configuration on each call.
            reporter: Sink for non-silent results. If None, uses LogReporter.
        """
        self._config_supplier = config_supplier
        self._provider = provider
        if reporter is None:
            from ai_error_solution.adapters.reporting.log import LogReporter

            reporter = LogReporter()
        self._reporter = reporter

    def _provider_for(self, config: SolutionConfig) -> CompletionProvider:
        if self._provider is not None:
            return self._provider

        from ai_error_solution.adapters import create_provider

        return create_provider(config)

    async def _request_completion(
        self, config: SolutionConfig, record: ErrorRecord
    ) -> Completion:
        provider = self._provider_for(config)

        async def attempt() -> Completion:
            return await with_timeout(
                provider.complete(
                    api_key=config.api_key,
                    model=config.model,
                    error_message=record.message,
                    stack_trace=record.stack_trace,
                    timeout_ms=config.timeout,
                ),
                config.timeout_seconds,
                f"Completion request timed out after {config.timeout}ms",
            )

        return await call_with_retry(attempt, config.max_retries)

    async def analyze(self, error: ErrorLike | object) -> AnalysisResult:
        """Analyse ``error`` and return the outcome without reporting it.

        ``error_kind`` is bound to the logging context while the analysis
        runs, so provider and retry log entries carry it too.
        """
        record = normalize_error(error)
        bind_context(error_kind=record.kind)
        try:
            return await self._analyze(record)
        finally:
            unbind_context("error_kind")

    async def _analyze(self, record: ErrorRecord) -> AnalysisResult:
        start_time = time.monotonic()

        try:
            config = self._config_supplier.get_active_config()
            log.info(
                "analysis_started",
                provider=config.provider,
                model=config.model,
            )

            completion = await self._request_completion(config, record)
            analysis = parse_ai_response(completion.content)
        except Exception as e:
            log.warning(
                "analysis_failed",
                reason=str(e),
                failure_type=type(e).__name__,
                duration_ms=round((time.monotonic() - start_time) * 1000),
            )
            return AnalysisResult(
                error=record,
                analysis=None,
                analysis_error=str(e) or type(e).__name__,
            )

        log.info(
            "analysis_completed",
            model=completion.model,
            references=len(analysis.references),
            duration_ms=round((time.monotonic() - start_time) * 1000),
        )
        return AnalysisResult(
            error=record,
            analysis=analysis,
            model=completion.model,
            usage=completion.usage,
        )

    async def fix_error(
        self,
        error: ErrorLike | object,
        *,
        silent: bool = False,
    ) -> AnalysisResult | None:
        """Analyse an error and return or report the outcome.

        Args:
            error: Exception, message string, ErrorFields or mapping with
                ``message``/``name``/``stack`` keys.
            silent: Return the result instead of reporting it.

        Returns:
            The AnalysisResult when ``silent`` is True, otherwise None.
        """
        result = await self.analyze(error)

        if silent:
            return result

        self.report(result)
        return None

    def report(self, result: AnalysisResult) -> None:
        """Hand a result to the reporter. Reporter failures are logged, not raised."""
        try:
            if result.analysis is not None:
                self._reporter.report_analysis(result.error, result.analysis)
            else:
                self._reporter.report_failure(result.error, result.analysis_error or "")
        except Exception as e:
            log.exception("reporter_failed", error=str(e))

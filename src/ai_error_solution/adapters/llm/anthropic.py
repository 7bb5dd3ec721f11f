"""Anthropic Claude completion adapter.

This module implements the CompletionProvider protocol for Anthropic's Claude
models using the official SDK.

Security features:
- Secret redaction BEFORE all API calls (fail-closed)
- Output length limits enforced
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import anthropic
import structlog

from ...models.analysis import Completion
from ...utils.async_helpers import MalformedResponseError, ProviderError, ProviderTimeoutError
from ...utils.security import RedactionError, SecretRedactor, SecurityError
from .prompts import SYSTEM_PROMPT, build_user_message

log = structlog.get_logger()

# Maximum response length in characters
MAX_RESPONSE_LENGTH = 50000


class AnthropicAdapter:
    """Anthropic adapter implementing the CompletionProvider protocol.

    A client is created per call from the credential and timeout it is
    given and closed when the call returns, so the adapter holds no secrets
    or connections of its own.

    Example:
        adapter = AnthropicAdapter()
        completion = await adapter.complete(
            api_key="sk-ant-...",
            model="claude-3-5-haiku-20241022",
            error_message="division by zero",
            stack_trace=stack,
            timeout_ms=30000,
        )
    """

    def __init__(
        self,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        base_url: str | None = None,
        redactor: SecretRedactor | None = None,
        client_factory: Callable[..., Any] | None = None,
    ) -> None:
        """Initialize the Anthropic adapter.

        Args:
            temperature: Sampling temperature.
            max_tokens: Maximum tokens in the completion.
            base_url: Optional API root override.
            redactor: Secret redactor. If None, creates default.
            client_factory: Builds the async client. Defaults to
                ``anthropic.AsyncAnthropic``.
        """
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._base_url = base_url
        self._redactor = redactor or SecretRedactor()
        self._client_factory = client_factory or anthropic.AsyncAnthropic

    def _redact_text(self, text: str) -> str:
        """Redact secrets from text, failing closed on error.

        Raises:
            SecurityError: If redaction fails.
        """
        try:
            return self._redactor.redact(text)
        except RedactionError as e:
            log.error("redaction_failed_blocking_llm_call", error=str(e))
            raise SecurityError(f"Cannot send to LLM: redaction failed: {e}") from e

    def _create_client(self, api_key: str, timeout_ms: int) -> Any:
        kwargs: dict[str, Any] = {
            "api_key": api_key,
            "timeout": timeout_ms / 1000,
            "max_retries": 0,  # Retries belong to call_with_retry
        }
        if self._base_url:
            kwargs["base_url"] = self._base_url
        return self._client_factory(**kwargs)

    async def complete(
        self,
        *,
        api_key: str,
        model: str,
        error_message: str,
        stack_trace: str,
        timeout_ms: int,
    ) -> Completion:
        """Request an explanation of the error from the Messages API.

        Raises:
            ProviderTimeoutError: If the request times out.
            MalformedResponseError: If the response holds no text.
            ProviderError: On rate limits and other API failures.
            SecurityError: If redaction fails.
        """
        user_content = build_user_message(
            self._redact_text(error_message), self._redact_text(stack_trace)
        )
        log.debug("llm_request_start", provider="anthropic", model=model)

        try:
            async with self._create_client(api_key, timeout_ms) as client:
                response = await client.messages.create(
                    model=model,
                    max_tokens=self._max_tokens,
                    temperature=self._temperature,
                    system=SYSTEM_PROMPT,
                    messages=[{"role": "user", "content": user_content}],
                )
        except anthropic.APITimeoutError as e:
            log.error("llm_request_error", provider="anthropic", error="timeout")
            raise ProviderTimeoutError(
                f"Anthropic API request timed out after {timeout_ms}ms"
            ) from e
        except anthropic.RateLimitError as e:
            log.warning("anthropic_rate_limit", error=str(e))
            raise ProviderError(f"Anthropic rate limit exceeded: {e}") from e
        except anthropic.APIError as e:
            log.error("llm_request_error", provider="anthropic", error=str(e))
            raise ProviderError(f"Anthropic API error: {e}") from e

        response_text = ""
        for block in getattr(response, "content", None) or []:
            if hasattr(block, "text"):
                response_text += block.text

        if not response_text.strip():
            raise MalformedResponseError("Unexpected API response format")

        if len(response_text) > MAX_RESPONSE_LENGTH:
            response_text = response_text[:MAX_RESPONSE_LENGTH]

        usage = getattr(response, "usage", None)
        log.debug("llm_request_complete", provider="anthropic", model=model)
        return Completion(
            content=response_text,
            model=str(getattr(response, "model", None) or model),
            usage=_usage_to_dict(usage),
        )


def _usage_to_dict(usage: Any) -> dict[str, Any] | None:
    if usage is None:
        return None
    return {
        "input_tokens": getattr(usage, "input_tokens", None),
        "output_tokens": getattr(usage, "output_tokens", None),
    }

"""OpenAI chat completions adapter.

This module implements the CompletionProvider protocol against the OpenAI
chat completions endpoint (or any compatible server) using httpx.

Security features:
- Secret redaction BEFORE the request is built (fail-closed)
- The API key only travels in the Authorization header and is never logged
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import structlog

from ...models.analysis import Completion
from ...utils.async_helpers import MalformedResponseError, ProviderError, ProviderTimeoutError
from ...utils.security import RedactionError, SecretRedactor, SecurityError
from .prompts import SYSTEM_PROMPT, build_user_message

log = structlog.get_logger()

DEFAULT_BASE_URL = "https://api.openai.com/v1"


class OpenAIAdapter:
    """OpenAI adapter implementing the CompletionProvider protocol.

    Example:
        adapter = OpenAIAdapter()
        completion = await adapter.complete(
            api_key="sk-...",
            model="gpt-4o-mini",
            error_message="division by zero",
            stack_trace=stack,
            timeout_ms=30000,
        )
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        redactor: SecretRedactor | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the OpenAI adapter.

        Args:
            base_url: API root, without the trailing ``/chat/completions``.
            temperature: Sampling temperature.
            max_tokens: Maximum tokens in the completion.
            redactor: Secret redactor. If None, creates default.
            client: Shared HTTP client. If None, one is opened per request.
        """
        self._base_url = base_url.rstrip("/")
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._redactor = redactor or SecretRedactor()
        self._client = client

    @property
    def endpoint(self) -> str:
        """Full chat completions URL."""
        return f"{self._base_url}/chat/completions"

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

    def _build_payload(self, model: str, error_message: str, stack_trace: str) -> dict[str, Any]:
        user_message = build_user_message(
            self._redact_text(error_message), self._redact_text(stack_trace)
        )
        return {
            "model": model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": user_message},
            ],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
        }

    async def _post(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        payload: dict[str, Any],
        timeout_ms: int,
    ) -> httpx.Response:
        return await client.post(
            self.endpoint,
            json=payload,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
            timeout=timeout_ms / 1000,
        )

    async def complete(
        self,
        *,
        api_key: str,
        model: str,
        error_message: str,
        stack_trace: str,
        timeout_ms: int,
    ) -> Completion:
        """Request an explanation of the error from the chat completions API.

        Raises:
            ProviderTimeoutError: If the request times out.
            MalformedResponseError: If the body is not JSON or lacks a message.
            ProviderError: On transport failures and API error payloads.
            SecurityError: If redaction fails.
        """
        payload = self._build_payload(model, error_message, stack_trace)
        log.debug("llm_request_start", provider="openai", model=model)

        try:
            if self._client is not None:
                response = await self._post(self._client, api_key, payload, timeout_ms)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, api_key, payload, timeout_ms)
        except httpx.TimeoutException as e:
            log.error("llm_request_error", provider="openai", error="timeout")
            raise ProviderTimeoutError(
                f"OpenAI API request timed out after {timeout_ms}ms"
            ) from e
        except httpx.HTTPError as e:
            log.error("llm_request_error", provider="openai", error=str(e))
            raise ProviderError(f"OpenAI request failed: {e}") from e

        completion = self._parse_response(response)
        log.debug("llm_request_complete", provider="openai", model=completion.model)
        return completion

    def _parse_response(self, response: httpx.Response) -> Completion:
        """Turn an HTTP response into a ``Completion``.

        Raises:
            ProviderError: If the API reported an error.
            MalformedResponseError: If no completion content is present.
        """
        try:
            data = response.json()
        except json.JSONDecodeError as e:
            if response.is_error:
                raise ProviderError(
                    f"OpenAI API error: HTTP {response.status_code}"
                ) from e
            log.error("json_parse_error", error=str(e), response_preview=response.text[:200])
            raise MalformedResponseError(f"Invalid JSON in OpenAI response: {e}") from e

        if not isinstance(data, dict):
            raise MalformedResponseError("Unexpected API response format")

        if data.get("error"):
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else None
            raise ProviderError(f"OpenAI API error: {message or json.dumps(error)}")

        if response.is_error:
            raise ProviderError(f"OpenAI API error: HTTP {response.status_code}")

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError("Unexpected API response format") from e

        if not isinstance(content, str):
            raise MalformedResponseError("Unexpected API response format")

        return Completion(
            content=content,
            model=str(data.get("model") or "unknown"),
            usage=data.get("usage"),
        )


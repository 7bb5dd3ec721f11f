"""Abstract interface for completion providers."""

from typing import Protocol

from ..models.analysis import Completion


class CompletionProvider(Protocol):
    """Abstract interface for LLM integrations.

    This protocol defines the contract that all completion provider adapters
    (OpenAI, Anthropic, ...) must implement. Credentials and limits are passed
    per call so one adapter instance can serve any configuration.
    """

    async def complete(
        self,
        *,
        api_key: str,
        model: str,
        error_message: str,
        stack_trace: str,
        timeout_ms: int,
    ) -> Completion:
        """
        Ask the model to explain an error.

        Security: Implementations MUST redact secrets from the error message
        and stack trace before they leave the process.

        Args:
            api_key: Provider credential
            model: Model identifier, e.g. "gpt-4o-mini"
            error_message: Message of the error being analysed
            stack_trace: Stack trace text, or a placeholder when unavailable
            timeout_ms: Request timeout in milliseconds

        Returns:
            The completion text with model name and usage metadata

        Raises:
            ProviderTimeoutError: If the request times out
            MalformedResponseError: If the response holds no completion content
            ProviderError: For any other transport or API failure
            SecurityError: If redaction fails
        """
        ...

"""Concrete implementations of provider interfaces."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .llm.anthropic import AnthropicAdapter
from .llm.openai import OpenAIAdapter
from .reporting.log import LogReporter

if TYPE_CHECKING:
    from ..config.schema import SolutionConfig
    from ..interfaces.llm import CompletionProvider


def create_provider(config: SolutionConfig) -> CompletionProvider:
    """Build the completion adapter selected by ``config.provider``.

    Raises:
        ValueError: If the provider is not supported.
    """
    if config.provider == "openai":
        return OpenAIAdapter(
            base_url=config.endpoint_base,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )
    if config.provider == "anthropic":
        return AnthropicAdapter(
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            base_url=config.base_url,
        )
    raise ValueError(f"Unsupported provider: {config.provider}")


__all__ = [
    "AnthropicAdapter",
    "LogReporter",
    "OpenAIAdapter",
    "create_provider",
]

"""Completion provider adapters."""

from .anthropic import AnthropicAdapter
from .openai import OpenAIAdapter

__all__ = ["AnthropicAdapter", "OpenAIAdapter"]

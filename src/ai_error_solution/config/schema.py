"""Pydantic models for configuration schema."""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

API_KEY_REQUIRED_MESSAGE = (
    "ai-error-solution: API key is required. Please provide your OpenAI API key."
)

DEFAULT_MODELS: dict[str, str] = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-haiku-20241022",
}

DEFAULT_BASE_URLS: dict[str, str] = {
    "openai": "https://api.openai.com/v1",
    "anthropic": "https://api.anthropic.com",
}


class FileLoggingConfig(BaseModel):
    """File logging configuration."""

    enabled: bool = False
    path: Path = Path("/var/log/ai-error-solution/analysis.log")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "console"
    file: FileLoggingConfig = FileLoggingConfig()


class SolutionConfig(BaseSettings):
    """Active configuration for error analysis.

    Values come from keyword arguments first, then ``AI_ERROR_SOLUTION_*``
    environment variables, then a ``.env`` file. Instances are immutable.
    """

    api_key: str
    provider: Literal["openai", "anthropic"] = "openai"
    model: str
    timeout: int = Field(30000, ge=1, description="Provider timeout in milliseconds")
    max_retries: int = Field(1, ge=0, le=10, description="Retries after the first attempt")
    base_url: str | None = None
    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(1000, ge=1)
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="AI_ERROR_SOLUTION_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    @model_validator(mode="before")
    @classmethod
    def default_model_for_provider(cls, data: Any) -> Any:
        """Pick the provider's default model when none is given."""
        if isinstance(data, dict) and not data.get("model"):
            provider = data.get("provider") or "openai"
            data = {**data, "model": DEFAULT_MODELS.get(provider, DEFAULT_MODELS["openai"])}
        return data

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Reject blank API keys."""
        if not v or not v.strip():
            raise ValueError(API_KEY_REQUIRED_MESSAGE)
        return v

    @property
    def timeout_seconds(self) -> float:
        """Provider timeout in seconds."""
        return self.timeout / 1000

    @property
    def endpoint_base(self) -> str:
        """Base URL for the selected provider."""
        return self.base_url or DEFAULT_BASE_URLS[self.provider]

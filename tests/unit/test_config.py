"""Tests for configuration loading, validation and installation."""

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from ai_error_solution.config.loader import load_config, substitute_env_vars
from ai_error_solution.config.schema import (
    API_KEY_REQUIRED_MESSAGE,
    DEFAULT_BASE_URLS,
    LoggingConfig,
    SolutionConfig,
)
from ai_error_solution.config.state import (
    ConfigHolder,
    default_holder,
    get_config,
    init_auto_error_solution,
    is_initialized,
    reset_config,
)
from ai_error_solution.utils.async_helpers import NOT_INITIALIZED_MESSAGE, NotInitializedError


class TestSubstituteEnvVars:
    """Test environment variable substitution."""

    def test_substitute_single_var(self, monkeypatch):
        """Test substituting a single environment variable."""
        monkeypatch.setenv("TEST_VAR", "test_value")
        result = substitute_env_vars("Value is ${TEST_VAR}")
        assert result == "Value is test_value"

    def test_substitute_multiple_vars(self, monkeypatch):
        """Test substituting multiple environment variables."""
        monkeypatch.setenv("VAR1", "value1")
        monkeypatch.setenv("VAR2", "value2")
        result = substitute_env_vars("${VAR1} and ${VAR2}")
        assert result == "value1 and value2"

    def test_missing_env_var_raises(self):
        """Test that missing environment variables raise ValueError."""
        with pytest.raises(ValueError, match="Environment variable MISSING not found"):
            substitute_env_vars("Value is ${MISSING}")

    def test_no_substitution_needed(self):
        """Test text without environment variables passes through unchanged."""
        result = substitute_env_vars("plain text without vars")
        assert result == "plain text without vars"


class TestSolutionConfig:
    """Test SolutionConfig defaults and validation."""

    def test_defaults(self):
        """Test the defaults applied to a bare API key."""
        config = SolutionConfig(api_key="sk-test")

        assert config.provider == "openai"
        assert config.model == "gpt-4o-mini"
        assert config.timeout == 30000
        assert config.max_retries == 1
        assert config.base_url is None
        assert config.temperature == 0.7
        assert config.max_tokens == 1000
        assert config.logging == LoggingConfig()

    def test_anthropic_default_model(self):
        """Test that the default model follows the provider."""
        config = SolutionConfig(api_key="sk-ant-test", provider="anthropic")
        assert config.model == "claude-3-5-haiku-20241022"

    def test_explicit_model_kept(self):
        """Test that an explicit model overrides the provider default."""
        config = SolutionConfig(api_key="sk-test", model="gpt-4o")
        assert config.model == "gpt-4o"

    def test_missing_api_key_rejected(self):
        """Test that the API key is required."""
        with pytest.raises(ValidationError):
            SolutionConfig()  # type: ignore[call-arg]

    @pytest.mark.parametrize("api_key", ["", "   "])
    def test_blank_api_key_rejected(self, api_key):
        """Test that blank API keys are rejected with the standard message."""
        with pytest.raises(ValidationError, match="API key is required"):
            SolutionConfig(api_key=api_key)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("timeout", 0),
            ("timeout", -5),
            ("max_retries", -1),
            ("max_retries", 11),
            ("temperature", 3.0),
            ("max_tokens", 0),
            ("provider", "ollama"),
        ],
    )
    def test_out_of_range_values_rejected(self, field, value):
        """Test field constraints."""
        with pytest.raises(ValidationError):
            SolutionConfig(api_key="sk-test", **{field: value})

    def test_timeout_seconds(self):
        """Test millisecond to second conversion."""
        config = SolutionConfig(api_key="sk-test", timeout=2500)
        assert config.timeout_seconds == 2.5

    def test_endpoint_base(self):
        """Test the provider's default base URL and an override."""
        assert SolutionConfig(api_key="k").endpoint_base == DEFAULT_BASE_URLS["openai"]
        assert (
            SolutionConfig(api_key="k", base_url="http://localhost:8080/v1").endpoint_base
            == "http://localhost:8080/v1"
        )

    def test_frozen(self):
        """Test that configuration is immutable."""
        config = SolutionConfig(api_key="sk-test")
        with pytest.raises(ValidationError):
            config.timeout = 10  # type: ignore[misc]

    def test_values_from_environment(self, monkeypatch):
        """Test that AI_ERROR_SOLUTION_* variables are read."""
        monkeypatch.setenv("AI_ERROR_SOLUTION_API_KEY", "sk-from-env")
        monkeypatch.setenv("AI_ERROR_SOLUTION_PROVIDER", "anthropic")
        monkeypatch.setenv("AI_ERROR_SOLUTION_MAX_RETRIES", "3")
        monkeypatch.setenv("AI_ERROR_SOLUTION_LOGGING__LEVEL", "DEBUG")

        config = SolutionConfig()  # type: ignore[call-arg]

        assert config.api_key == "sk-from-env"
        assert config.provider == "anthropic"
        assert config.model == "claude-3-5-haiku-20241022"
        assert config.max_retries == 3
        assert config.logging.level == "DEBUG"

    def test_values_from_dotenv(self, tmp_path):
        """Test that a .env file in the working directory is read."""
        (tmp_path / ".env").write_text("AI_ERROR_SOLUTION_API_KEY=sk-dotenv\n")

        config = SolutionConfig()  # type: ignore[call-arg]
        assert config.api_key == "sk-dotenv"

    def test_arguments_override_environment(self, monkeypatch):
        """Test that explicit values win over the environment."""
        monkeypatch.setenv("AI_ERROR_SOLUTION_TIMEOUT", "1000")
        config = SolutionConfig(api_key="sk-test", timeout=2000)
        assert config.timeout == 2000


class TestLoadConfig:
    """Test loading configuration from YAML files."""

    def test_load_valid_config(self, tmp_path, monkeypatch):
        """Test loading a file with environment substitution."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-from-yaml")
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            """
api_key: ${OPENAI_API_KEY}
model: gpt-4o
timeout: 15000
max_retries: 2
logging:
  level: WARNING
  format: json
"""
        )

        config = load_config(config_file)

        assert config.api_key == "sk-from-yaml"
        assert config.model == "gpt-4o"
        assert config.timeout == 15000
        assert config.max_retries == 2
        assert config.logging.level == "WARNING"
        assert config.logging.format == "json"

    def test_environment_fills_missing_fields(self, tmp_path, monkeypatch):
        """Test that fields absent from the file come from the environment."""
        monkeypatch.setenv("AI_ERROR_SOLUTION_API_KEY", "sk-env")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("provider: anthropic\n")

        config = load_config(config_file)

        assert config.api_key == "sk-env"
        assert config.model == "claude-3-5-haiku-20241022"

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_missing_env_var(self, tmp_path):
        """Test that an unset variable in the file raises ValueError."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("api_key: ${NOT_SET_ANYWHERE}\n")

        with pytest.raises(ValueError, match="NOT_SET_ANYWHERE"):
            load_config(config_file)

    def test_non_mapping_rejected(self, tmp_path):
        """Test that a YAML list is rejected."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- api_key\n- model\n")

        with pytest.raises(ValueError, match="must contain a mapping"):
            load_config(config_file)

    def test_empty_file_without_key(self, tmp_path):
        """Test that an empty file still requires an API key."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        with pytest.raises(ValidationError):
            load_config(config_file)

    def test_invalid_values(self, tmp_path):
        """Test that invalid values raise ValidationError."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("api_key: sk-test\ntimeout: -1\n")

        with pytest.raises(ValidationError):
            load_config(config_file)


class TestConfigHolder:
    """Test the configuration holder."""

    def test_uninitialized_raises(self):
        """Test that reading before installing raises the standard error."""
        holder = ConfigHolder()

        assert not holder.is_initialized
        with pytest.raises(NotInitializedError) as exc_info:
            holder.get_active_config()
        assert str(exc_info.value) == NOT_INITIALIZED_MESSAGE

    def test_install_and_reset(self):
        """Test installing and forgetting a configuration."""
        holder = ConfigHolder()
        config = SolutionConfig(api_key="sk-test")

        assert holder.install(config) is config
        assert holder.get_active_config() is config

        holder.reset()
        assert not holder.is_initialized

    def test_constructed_with_config(self):
        """Test that a holder can start initialized."""
        config = SolutionConfig(api_key="sk-test")
        assert ConfigHolder(config).get_active_config() is config


class TestInitAutoErrorSolution:
    """Test the package-level initialization."""

    def test_installs_configuration(self):
        """Test that initialization installs into the default holder."""
        config = init_auto_error_solution("sk-test", model="gpt-4o", timeout=5000, max_retries=2)

        assert is_initialized()
        assert get_config() is config
        assert default_holder().get_active_config() is config
        assert config.model == "gpt-4o"
        assert config.timeout == 5000
        assert config.max_retries == 2

    def test_defaults_when_options_omitted(self):
        """Test that omitted options keep their defaults."""
        config = init_auto_error_solution("sk-test")

        assert config.model == "gpt-4o-mini"
        assert config.timeout == 30000
        assert config.max_retries == 1

    def test_falsy_model_and_timeout_use_defaults(self):
        """Test that an empty model and a zero timeout fall back to the defaults."""
        config = init_auto_error_solution("sk-test", model="", timeout=0, max_retries=0)

        assert config.model == "gpt-4o-mini"
        assert config.timeout == 30000
        assert config.max_retries == 0

    def test_extra_options(self):
        """Test that other fields pass through."""
        config = init_auto_error_solution("sk-ant-test", provider="anthropic", temperature=0.2)

        assert config.provider == "anthropic"
        assert config.model == "claude-3-5-haiku-20241022"
        assert config.temperature == 0.2

    @pytest.mark.parametrize("api_key", [None, ""])
    def test_missing_api_key(self, api_key):
        """Test that a missing API key raises the standard message."""
        with pytest.raises(ValueError) as exc_info:
            init_auto_error_solution(api_key)

        assert str(exc_info.value) == API_KEY_REQUIRED_MESSAGE
        assert not is_initialized()

    def test_invalid_value_keeps_previous_config(self):
        """Test that a failed initialization leaves the old config active."""
        first = init_auto_error_solution("sk-first")

        with pytest.raises(ValidationError):
            init_auto_error_solution("sk-second", timeout=-5)

        assert get_config() is first

    def test_reinitialization_replaces_config(self):
        """Test that the last initialization wins."""
        init_auto_error_solution("sk-first")
        second = init_auto_error_solution("sk-second")

        assert get_config() is second

    def test_reset_config(self):
        """Test forgetting the installed configuration."""
        init_auto_error_solution("sk-test")
        reset_config()

        assert not is_initialized()
        with pytest.raises(NotInitializedError):
            get_config()

    def test_environment_not_required(self):
        """Test that initialization does not read a key from the environment."""
        assert "AI_ERROR_SOLUTION_API_KEY" not in os.environ
        with pytest.raises(ValueError):
            init_auto_error_solution()


def test_config_path_type():
    """Test that the file logging path is a Path."""
    config = SolutionConfig(api_key="sk-test")
    assert isinstance(config.logging.file.path, Path)

"""Configuration loader with YAML parsing and environment variable substitution."""

import os
import re
from pathlib import Path

import yaml

from .schema import SolutionConfig


def substitute_env_vars(text: str) -> str:
    """
    Replace ${VAR_NAME} patterns with environment variable values.

    Args:
        text: Text containing ${VAR_NAME} patterns

    Returns:
        Text with environment variables substituted

    Raises:
        ValueError: If a referenced environment variable is not found
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ValueError(f"Environment variable {var_name} not found")
        return value

    return re.sub(r"\$\{([^}]+)\}", replacer, text)


def load_config(path: Path) -> SolutionConfig:
    """
    Load configuration from a YAML file.

    The file holds the ``SolutionConfig`` fields at the top level, e.g.::

        api_key: ${OPENAI_API_KEY}
        model: gpt-4o-mini
        timeout: 30000
        max_retries: 2

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated SolutionConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If environment variables are missing or config is invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with path.open() as f:
        raw_yaml = f.read()

    config_dict = yaml.safe_load(substitute_env_vars(raw_yaml)) or {}
    if not isinstance(config_dict, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")

    # Keyword arguments take priority; AI_ERROR_SOLUTION_* variables fill the gaps
    return SolutionConfig(**config_dict)

"""Installed configuration and the supplier protocol the solver reads from.

Configuration is an immutable ``SolutionConfig`` built once at startup. A
``ConfigHolder`` hands it to solvers on demand and raises
``NotInitializedError`` until one has been installed. Installing is a plain
assignment: it is meant to happen once before any analysis runs, and
concurrent installs are last-write-wins.
"""

from __future__ import annotations

from typing import Any, Protocol

import structlog

from ..utils.async_helpers import NotInitializedError
from ..utils.security import mask_config_value
from .schema import API_KEY_REQUIRED_MESSAGE, SolutionConfig

log = structlog.get_logger()


class ConfigSupplier(Protocol):
    """Anything able to return the active configuration."""

    def get_active_config(self) -> SolutionConfig:
        """
        Return the active configuration.

        Raises:
            NotInitializedError: If no configuration is available
        """
        ...


class ConfigHolder:
    """Holds the configuration installed at startup.

    Example:
        holder = ConfigHolder()
        holder.install(SolutionConfig(api_key="sk-..."))
        solver = ErrorSolver(holder)
    """

    def __init__(self, config: SolutionConfig | None = None) -> None:
        self._config = config

    @property
    def is_initialized(self) -> bool:
        """Whether a configuration has been installed."""
        return self._config is not None

    def install(self, config: SolutionConfig) -> SolutionConfig:
        """Install ``config`` as the active configuration."""
        self._config = config
        return config

    def get_active_config(self) -> SolutionConfig:
        """Return the installed configuration.

        Raises:
            NotInitializedError: If nothing has been installed yet.
        """
        if self._config is None:
            raise NotInitializedError()
        return self._config

    def reset(self) -> None:
        """Forget the installed configuration."""
        self._config = None
        log.debug("config_reset")


_default_holder = ConfigHolder()


def default_holder() -> ConfigHolder:
    """Return the process-wide holder used by the package-level helpers."""
    return _default_holder


def init_auto_error_solution(
    api_key: str | None = None,
    *,
    model: str | None = None,
    timeout: int | None = None,
    max_retries: int | None = None,
    **options: Any,
) -> SolutionConfig:
    """Build the configuration and install it for ``fix_error``.

    Args:
        api_key: Provider API key (required).
        model: Model identifier. Empty or None selects the provider's
            default model.
        timeout: Provider timeout in milliseconds. 0 or None selects the
            default of 30000.
        max_retries: Retries after the first attempt (default 1). Unlike
            ``timeout``, 0 is kept and disables retries.
        **options: Any other ``SolutionConfig`` field, e.g. ``provider``.

    Returns:
        The installed configuration.

    Raises:
        ValueError: If the API key is missing or a value is invalid.
    """
    if not api_key:
        raise ValueError(API_KEY_REQUIRED_MESSAGE)

    overrides: dict[str, Any] = {}
    if model:
        overrides["model"] = model
    if timeout:
        overrides["timeout"] = timeout
    if max_retries is not None:
        overrides["max_retries"] = max_retries
    config = SolutionConfig(api_key=api_key, **overrides, **options)
    _default_holder.install(config)

    log.info(
        "ai_error_solution_initialized",
        api_key=mask_config_value("api_key", config.api_key),
        provider=config.provider,
        model=config.model,
        timeout=config.timeout,
        max_retries=config.max_retries,
    )
    return config


def get_config() -> SolutionConfig:
    """Return the installed configuration.

    Raises:
        NotInitializedError: If ``init_auto_error_solution`` was never called.
    """
    return _default_holder.get_active_config()


def is_initialized() -> bool:
    """Whether ``init_auto_error_solution`` has been called."""
    return _default_holder.is_initialized


def reset_config() -> None:
    """Forget the installed configuration. Mostly useful in tests."""
    _default_holder.reset()

"""Configuration loading and validation."""

from .loader import load_config
from .schema import FileLoggingConfig, LoggingConfig, SolutionConfig
from .state import (
    ConfigHolder,
    ConfigSupplier,
    default_holder,
    get_config,
    init_auto_error_solution,
    is_initialized,
    reset_config,
)

__all__ = [
    # Loader
    "load_config",
    # Schema
    "FileLoggingConfig",
    "LoggingConfig",
    "SolutionConfig",
    # Installed configuration
    "ConfigHolder",
    "ConfigSupplier",
    "default_holder",
    "get_config",
    "init_auto_error_solution",
    "is_initialized",
    "reset_config",
]

"""Structured logging for ai-error-solution.

Logs are emitted through structlog on top of the standard library handlers.
Every entry passes through a secret sanitizer, because analysed errors and
provider payloads are exactly the kind of text that carries credentials.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

import structlog

from ai_error_solution.utils.security import SecretRedactor

if TYPE_CHECKING:
    from ai_error_solution.config.schema import LoggingConfig

SERVICE_NAME = "ai-error-solution"


class LogFormat(StrEnum):
    """Log output format options."""

    JSON = "json"
    CONSOLE = "console"


class LogLevel(StrEnum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


_redactor: SecretRedactor | None = None


def _get_redactor() -> SecretRedactor:
    """Return the shared redactor, creating it on first use."""
    global _redactor
    if _redactor is None:
        _redactor = SecretRedactor(placeholder="[REDACTED]")
    return _redactor


def sanitize_log_value(value: Any) -> Any:
    """Redact secrets from a log value, descending into dicts, lists and tuples."""
    redactor = _get_redactor()

    if isinstance(value, str):
        return redactor.redact(value)
    if isinstance(value, dict):
        return {k: sanitize_log_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(sanitize_log_value(v) for v in value)
    return value


def secret_sanitizer(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Structlog processor that redacts secrets from every entry."""
    return cast(MutableMapping[str, Any], sanitize_log_value(event_dict))


def add_context_processor(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Stamp every entry with the service name and package version."""
    event_dict["service"] = SERVICE_NAME

    try:
        from ai_error_solution._version import __version__

        event_dict["version"] = __version__
    except ImportError:
        pass

    return event_dict


def _processor_chain(log_format: LogFormat) -> list[Any]:
    """Return the processors shared by every entry plus the final renderer."""
    renderer: Any
    if log_format == LogFormat.JSON:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True, exception_formatter=structlog.dev.plain_traceback
        )

    return [
        structlog.contextvars.merge_contextvars,
        add_context_processor,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        secret_sanitizer,
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def _file_handler(file_path: Path, numeric_level: int) -> logging.Handler | None:
    """Open the analysis log file, or return None if it cannot be created."""
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(file_path)
    except OSError as e:
        logging.getLogger("ai_error_solution.logging").warning(
            f"Could not create log file {file_path}: {e}"
        )
        return None

    handler.setLevel(numeric_level)
    return handler


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    log_format: LogFormat | str = LogFormat.JSON,
    file_path: Path | str | None = None,
    file_enabled: bool = False,
) -> None:
    """Configure structlog and the standard library root logger.

    Entries always go to stderr. With ``file_enabled`` they are also
    appended to ``file_path``; if the file cannot be opened a warning is
    logged and stderr output continues alone.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        file_path: Path to log file (if file logging enabled)
        file_enabled: Whether to enable file logging

    Example:
        configure_logging(level="DEBUG", log_format="console")
    """
    level = LogLevel(level.upper()) if isinstance(level, str) else level
    log_format = LogFormat(log_format.lower()) if isinstance(log_format, str) else log_format
    numeric_level = logging.getLevelNamesMapping()[level.value]

    structlog.configure(
        processors=_processor_chain(log_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(numeric_level)
    handlers: list[logging.Handler] = [stderr_handler]

    if file_enabled and file_path:
        handler = _file_handler(Path(file_path), numeric_level)
        if handler is not None:
            handlers.append(handler)

    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        handlers=handlers,
        force=True,
    )


def configure_from_config(config: LoggingConfig) -> None:
    """Apply the ``logging`` section of a loaded configuration."""
    configure_logging(
        level=config.level,
        log_format=config.format,
        file_path=config.file.path if config.file.enabled else None,
        file_enabled=config.file.enabled,
    )


def bind_context(**kwargs: Any) -> None:
    """Bind contextual variables for all subsequent log calls.

    Example:
        bind_context(error_kind="KeyError")
        log.info("analysis_started")  # Includes error_kind
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove contextual variables."""
    structlog.contextvars.unbind_contextvars(*keys)


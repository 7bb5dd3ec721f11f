"""Command line entry point for ai-error-solution.

Reads pasted error output (a traceback or a single error line) from a file
or stdin, asks the configured provider to explain it and either logs the
analysis or prints it as JSON.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from ai_error_solution._version import __version__

log = structlog.get_logger()


def setup_logging(debug: bool = False, log_format: str = "console") -> None:
    """Configure structured logging with secret sanitization.

    Args:
        debug: Enable debug logging if True
        log_format: Output format ("json" or "console")
    """
    from ai_error_solution.utils.logging import LogFormat, LogLevel, configure_logging

    configure_logging(
        level=LogLevel.DEBUG if debug else LogLevel.INFO,
        log_format=LogFormat(log_format.lower()),
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="ai-error-solution",
        description="Explain a runtime error with a large language model",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to a YAML configuration file (default: AI_ERROR_SOLUTION_* environment)",
    )

    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        default=None,
        help="File holding the error output (default: read stdin)",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the analysis as JSON instead of logging it",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default="console",
        help="Log output format (default: console)",
    )

    return parser.parse_args(argv)


def read_error_text(path: Path | None) -> str:
    """Return the error output from ``path`` or stdin."""
    if path is not None:
        return path.read_text()
    return sys.stdin.read()


async def run(config_path: Path | None, error_text: str, as_json: bool) -> int:
    """Analyse ``error_text`` and return the process exit code.

    Args:
        config_path: YAML configuration, or None to read the environment
        error_text: Pasted error output
        as_json: Print the result as JSON instead of logging it

    Returns:
        0 when an analysis was produced, 1 otherwise
    """
    from ai_error_solution.config.loader import load_config
    from ai_error_solution.config.schema import SolutionConfig
    from ai_error_solution.config.state import ConfigHolder
    from ai_error_solution.core.normalize import error_from_text
    from ai_error_solution.core.solver import ErrorSolver
    from ai_error_solution.utils.logging import configure_from_config

    try:
        config = load_config(config_path) if config_path else SolutionConfig()  # type: ignore[call-arg]
    except FileNotFoundError as e:
        log.error("configuration_file_not_found", path=str(config_path), error=str(e))
        return 1
    except (ValidationError, ValueError) as e:
        log.error("configuration_invalid", error=str(e))
        return 1

    if config_path:
        configure_from_config(config.logging)

    solver = ErrorSolver(ConfigHolder(config))
    result = await solver.analyze(error_from_text(error_text))

    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        solver.report(result)

    return 0 if result.succeeded else 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(debug=args.debug, log_format=args.format)

    try:
        error_text = read_error_text(args.file)
    except OSError as e:
        log.error("error_text_unreadable", path=str(args.file), error=str(e))
        return 1

    if not error_text.strip():
        log.error("no_error_text_provided")
        return 1

    try:
        return asyncio.run(run(args.config, error_text, args.json))
    except KeyboardInterrupt:
        log.info("interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())

"""Secret redaction for error payloads leaving the process.

Error messages and stack traces routinely carry connection strings, tokens
and API keys picked up from local variables or configuration. Everything sent
to a completion provider, and everything written to the logs, passes through
``SecretRedactor`` first. Redaction fails closed: if a pattern cannot be
applied the payload is blocked instead of being sent as is.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Sequence

log = structlog.get_logger()


class SecurityError(Exception):
    """Base exception for security-related errors."""


class RedactionError(SecurityError):
    """Raised when secret redaction fails."""


class SecretRedactor:
    """Detects and redacts secrets from text.

    If any pattern fails to compile or apply, an exception is raised rather
    than letting potentially sensitive text through.

    Usage:
        redactor = SecretRedactor()
        safe_text = redactor.redact(stack_trace)

    Attributes:
        patterns: Compiled regex patterns used to detect secrets.
        placeholder: Replacement string for detected secrets.
    """

    DEFAULT_PATTERNS: tuple[tuple[str, str], ...] = (
        (
            r"(?i)(api[_-]?key|secret|token|password|credential)\s*[=:]\s*[\"']?[\w-]{16,}",
            "Generic secret",
        ),
        # LLM providers
        (r"sk-[a-zA-Z0-9]{48}", "OpenAI legacy API key"),
        (r"sk-proj-[a-zA-Z0-9_-]{20,}", "OpenAI project API key"),
        (r"sk-ant-[\w-]{40,}", "Anthropic API key"),
        # Source hosting and chat tokens
        (r"ghp_[a-zA-Z0-9]{36}", "GitHub PAT"),
        (r"github_pat_[a-zA-Z0-9_]{22,}", "GitHub fine-grained PAT"),
        (r"xox[baprs]-[\w-]+", "Slack token"),
        # Cloud credentials
        (r"AKIA[0-9A-Z]{16}", "AWS access key ID"),
        (
            r"(?i)aws[_-]?secret[_-]?access[_-]?key\s*[=:]\s*[\"']?[a-zA-Z0-9/+=]{40}",
            "AWS secret access key",
        ),
        (r"AIza[0-9A-Za-z\-_]{35}", "Google API key"),
        (r"AccountKey=[a-zA-Z0-9+/=]{88}", "Azure storage account key"),
        (r"sk_live_[a-zA-Z0-9]{24,}", "Stripe secret key"),
        # Connection strings with inline credentials
        (
            r"(?i)(postgres(?:ql)?|mysql|mongodb(?:\+srv)?|redis|amqp)://[^:]+:[^@]+@[^\s]+",
            "Database connection string",
        ),
        (
            r"-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----",
            "Private key header",
        ),
        (
            r"eyJ[a-zA-Z0-9_-]*\.eyJ[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*",
            "JWT token",
        ),
    )

    def __init__(
        self,
        placeholder: str = "[REDACTED]",
        custom_patterns: Sequence[tuple[str, str]] | None = None,
    ) -> None:
        """Initialize the SecretRedactor.

        Args:
            placeholder: String to replace detected secrets with.
            custom_patterns: Additional (pattern, name) tuples to detect.

        Raises:
            RedactionError: If any pattern fails to compile.
        """
        self.placeholder = placeholder
        self._pattern_names: dict[re.Pattern[str], str] = {}

        all_patterns = list(self.DEFAULT_PATTERNS)
        if custom_patterns:
            all_patterns.extend(custom_patterns)

        try:
            for pattern_str, name in all_patterns:
                self._pattern_names[re.compile(pattern_str)] = name
        except re.error as e:
            log.error("pattern_compilation_failed", pattern=pattern_str, error=str(e))
            raise RedactionError(f"Failed to compile secret pattern '{pattern_str}': {e}") from e

    @property
    def patterns(self) -> list[re.Pattern[str]]:
        """Return the list of compiled patterns."""
        return list(self._pattern_names.keys())

    def redact(self, text: str) -> str:
        """Replace every detected secret in ``text`` with the placeholder.

        Raises:
            RedactionError: If any pattern fails to apply.
        """
        if not text:
            return text

        try:
            result = text
            for pattern in self._pattern_names:
                result = pattern.sub(self.placeholder, result)
            return result
        except Exception as e:
            log.error("redaction_failed", error=str(e))
            raise RedactionError(f"Redaction failed: {e}") from e


def mask_config_value(key: str, value: str) -> str:
    """Mask sensitive config values for logging.

    Args:
        key: The configuration key name.
        value: The configuration value.

    Returns:
        The masked value if the key indicates sensitivity, otherwise the original.
    """
    sensitive_keys = {"token", "key", "secret", "password", "credential"}

    if any(s in key.lower() for s in sensitive_keys):
        if len(value) > 8:
            return f"{value[:4]}...{value[-4:]}"
        return "***"

    return value

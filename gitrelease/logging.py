"""
gitrelease logging utilities.

Provides configurable logging for git invocations and credential flows.
Ensures no sensitive data (passwords, tokens, URL userinfo) is logged.
"""

import logging
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any

# Create package-specific loggers
_root_logger = logging.getLogger("gitrelease")
_git_logger = logging.getLogger("gitrelease.git")
_credentials_logger = logging.getLogger("gitrelease.credentials")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # user:password@ in URLs
    (re.compile(r"(?P<scheme>[a-zA-Z][a-zA-Z0-9+.-]*://)[^/@\s]+@"), r"\g<scheme>[REDACTED]@"),
    # HTTP authorization headers
    (re.compile(r"(authorization\s*[:=]\s*)(basic|bearer)\s+\S+", re.IGNORECASE), r"\1\2 [REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|passphrase|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_DEFAULT_SENSITIVE_KEYS = {"password", "passphrase", "secret", "token", "api_key", "askpass"}

# Handler added by the last configure_logging() call, replaced on reconfiguration
_installed_handler: logging.Handler | None = None


def configure_logging(
    level: int = logging.INFO,
    git_level: int | None = None,
    credentials_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure gitrelease logging.

    Args:
        level: Default log level for all package loggers (default: INFO)
        git_level: Log level for git command logging (default: same as level)
        credentials_level: Log level for credential flows (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from gitrelease.logging import configure_logging

        # Show every git command that is executed
        configure_logging(level=logging.INFO, git_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    global _installed_handler
    if _installed_handler is not None:
        _root_logger.removeHandler(_installed_handler)
    _installed_handler = handler

    _root_logger.setLevel(level)
    _root_logger.addHandler(handler)

    _git_logger.setLevel(git_level if git_level is not None else level)
    _credentials_logger.setLevel(
        credentials_level if credentials_level is not None else level
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a gitrelease logger.

    Args:
        name: Logger name suffix (e.g., "git", "credentials"). If None, returns
            the package logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _root_logger
    return logging.getLogger(f"gitrelease.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Replaces URL credentials, authorization headers and secret assignments
    with redacted placeholders.

    Args:
        text: Text that may contain sensitive data

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Set of key fragments to mask (default: password,
            passphrase, secret, token, api_key, askpass)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _DEFAULT_SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = str(key).lower()
        if any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, str):
            result[key] = mask_sensitive_data(value)
        else:
            result[key] = value

    return result


def log_git_command(argv: Sequence[str], cwd: Path | None = None) -> None:
    """
    Log a git invocation at DEBUG level with sensitive data masked.

    Args:
        argv: Full command line, including the ``git`` executable
        cwd: Working directory of the command (optional)
    """
    if not _git_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [mask_sensitive_data(" ".join(argv))]
    if cwd is not None:
        log_parts.append(f"cwd={cwd}")

    _git_logger.debug(" | ".join(log_parts))


def log_git_result(
    argv: Sequence[str],
    returncode: int,
    elapsed_ms: float | None = None,
    stderr: str | None = None,
) -> None:
    """
    Log the outcome of a git invocation at DEBUG level.

    Args:
        argv: Command line that was executed
        returncode: Process exit status
        elapsed_ms: Duration in milliseconds (optional)
        stderr: Captured standard error, logged only on failure (optional)
    """
    if not _git_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"exit {returncode} from {argv[1] if len(argv) > 1 else argv[0]}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    if returncode != 0 and stderr:
        log_parts.append(f"stderr={mask_sensitive_data(stderr.strip())}")

    _git_logger.debug(" | ".join(log_parts))


def log_credential_request(endpoint: str, identities: Sequence[str], source: str) -> None:
    """
    Log where a credential request for an endpoint was answered from.

    Only field identities are logged, never values.

    Args:
        endpoint: Cache key of the remote (masked before logging)
        identities: Requested field identities
        source: "cache", "prompt", "cancelled" or "reset"
    """
    _credentials_logger.info(
        "credentials for %s (%s): %s",
        mask_sensitive_data(endpoint),
        ", ".join(identities) or "-",
        source,
    )


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_git_command",
    "log_git_result",
    "log_credential_request",
]

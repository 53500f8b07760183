"""
Credential prompt implementations.

A prompt is handed every field of a request at once and returns the values
keyed by field identity, or None when the user cancels. Informational fields
are shown but contribute no value.
"""

import getpass
import os
import re
import sys
from collections.abc import Callable, Mapping, Sequence
from typing import Protocol, TextIO, runtime_checkable

from gitrelease.logging import get_logger, mask_sensitive_data
from gitrelease.types.credentials import CredentialField, CredentialKind

logger = get_logger("credentials")

_TRUE_WORDS = {"y", "yes", "true", "1", "on"}
_FALSE_WORDS = {"", "n", "no", "false", "0", "off"}


def parse_bool(value: str) -> bool | None:
    """Parse a yes/no answer; None when it is neither."""
    normalized = value.strip().lower()
    if normalized in _TRUE_WORDS:
        return True
    if normalized in _FALSE_WORDS:
        return False
    return None


@runtime_checkable
class CredentialPrompt(Protocol):
    """Solicits values for a batch of credential fields."""

    def present(
        self, endpoint: str, fields: Sequence[CredentialField]
    ) -> dict[str, str] | None:
        """Return values keyed by identity, or None if cancelled."""
        ...


class ConsolePrompt:
    """
    Interactive terminal form.

    Booleans are asked as ``[y/N]`` and default to false, secrets are read
    without echo and trimmed. End of input or Ctrl-C cancels the whole form.
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        secret_func: Callable[[str], str] = getpass.getpass,
        output: TextIO | None = None,
    ) -> None:
        self._input = input_func
        self._secret = secret_func
        self._output = output

    def present(
        self, endpoint: str, fields: Sequence[CredentialField]
    ) -> dict[str, str] | None:
        out = self._output or sys.stderr
        print(f"Enter credentials for {mask_sensitive_data(endpoint)}", file=out)

        values: dict[str, str] = {}
        try:
            for field in fields:
                if field.kind is CredentialKind.INFO:
                    print(field.label, file=out)
                elif field.kind is CredentialKind.BOOLEAN:
                    answer = parse_bool(self._input(f"{field.label} [y/N]: "))
                    values[field.identity] = "true" if answer else "false"
                else:
                    values[field.identity] = self._secret(f"{field.label}: ").strip()
        except (EOFError, KeyboardInterrupt):
            print(file=out)
            return None
        return values


class EnvironmentPrompt:
    """
    Headless prompt reading ``GITRELEASE_CREDENTIAL_<IDENTITY>`` variables.

    The identity is upper-cased with every non-alphanumeric character replaced
    by ``_``. A missing value cancels the request.
    """

    PREFIX = "GITRELEASE_CREDENTIAL_"

    def __init__(
        self, environ: Mapping[str, str] | None = None, prefix: str = PREFIX
    ) -> None:
        self._environ = environ if environ is not None else os.environ
        self._prefix = prefix

    def variable_for(self, field: CredentialField) -> str:
        return self._prefix + re.sub(r"[^A-Za-z0-9]", "_", field.identity).upper()

    def present(
        self, endpoint: str, fields: Sequence[CredentialField]
    ) -> dict[str, str] | None:
        values: dict[str, str] = {}
        for field in fields:
            if not field.carries_value:
                continue
            variable = self.variable_for(field)
            raw = self._environ.get(variable)
            if raw is None:
                logger.warning(
                    "no %s in the environment for %s",
                    variable,
                    mask_sensitive_data(endpoint),
                )
                return None
            if field.kind is CredentialKind.BOOLEAN:
                values[field.identity] = "true" if parse_bool(raw) else "false"
            else:
                values[field.identity] = raw.strip()
        return values


class StaticPrompt:
    """Answers from a fixed mapping; cancels when a requested value is missing."""

    def __init__(self, values: Mapping[str, str]) -> None:
        self._values = dict(values)

    def present(
        self, endpoint: str, fields: Sequence[CredentialField]
    ) -> dict[str, str] | None:
        wanted = [field.identity for field in fields if field.carries_value]
        if any(identity not in self._values for identity in wanted):
            return None
        return {identity: self._values[identity] for identity in wanted}


__all__ = [
    "CredentialPrompt",
    "ConsolePrompt",
    "EnvironmentPrompt",
    "StaticPrompt",
    "parse_bool",
]

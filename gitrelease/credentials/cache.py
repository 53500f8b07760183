"""
Process-wide credential cache keyed by remote endpoint.

A cache hit needs an entry that covers every value-carrying field of the
request; anything less triggers one batched interactive prompt on the UI
thread. Confirmed answers replace the endpoint's entry as a whole.

Concurrent misses for the same endpoint are not coalesced: each caller
prompts on its own.
"""

import threading
from collections.abc import Mapping, Sequence
from concurrent.futures import CancelledError
from types import MappingProxyType

import httpx

from gitrelease.credentials.prompts import CredentialPrompt, parse_bool
from gitrelease.credentials.ui import UiExecutor
from gitrelease.exceptions import CredentialResolutionError
from gitrelease.logging import get_logger, log_credential_request, mask_sensitive_data
from gitrelease.types.credentials import CredentialField, CredentialKind

logger = get_logger("credentials")


def endpoint_key(endpoint: str) -> str:
    """
    Turn a remote URL into a cache key.

    The URL is used as given, so different user names get separate entries.
    Only an embedded password is removed, keeping ``https://me:pw@host/repo.git``
    and ``https://me@host/repo.git`` on one entry. Strings that are not URLs,
    such as scp-like ``git@host:org/repo.git``, are returned unchanged.
    """
    endpoint = endpoint.strip()
    if "://" not in endpoint:
        return endpoint
    try:
        url = httpx.URL(endpoint)
    except httpx.InvalidURL:
        return endpoint
    if not url.password:
        return endpoint
    return str(url.copy_with(username=url.username, password=None))


def _normalize_answer(
    key: str, fields: Sequence[CredentialField], answer: Mapping[str, str]
) -> dict[str, str]:
    values: dict[str, str] = {}
    for field in fields:
        if not field.carries_value:
            continue
        if field.identity not in answer:
            raise CredentialResolutionError(
                key,
                f"The credential prompt returned no value for {field.identity!r}",
                code="CREDENTIALS_INCOMPLETE",
            )
        raw = answer[field.identity]
        if field.kind is CredentialKind.BOOLEAN:
            values[field.identity] = "true" if parse_bool(raw) else "false"
        else:
            values[field.identity] = raw.strip()
    return values


class CredentialCache:
    """
    Cache of resolved credential values, one entry per endpoint.

    Example:
        ```python
        from gitrelease.credentials import ConsolePrompt, CredentialCache
        from gitrelease.types import CredentialField

        cache = CredentialCache(ConsolePrompt())
        fields = [CredentialField("username", "Username"), CredentialField("password", "Password")]
        values = cache.resolve("https://example.com/repo.git", fields)
        if values is None:
            print("cancelled")
        ```
    """

    def __init__(self, prompt: CredentialPrompt, ui: UiExecutor | None = None) -> None:
        """
        Args:
            prompt: Solicits values on a cache miss
            ui: Execution context prompts must run on (default: a private UI thread)
        """
        self._prompt = prompt
        self._ui = ui if ui is not None else UiExecutor()
        self._entries: dict[str, Mapping[str, str]] = {}
        self._lock = threading.Lock()

    @property
    def ui(self) -> UiExecutor:
        return self._ui

    def resolve(
        self, endpoint: str, fields: Sequence[CredentialField]
    ) -> dict[str, str] | None:
        """
        Get values for ``fields``, prompting on a cache miss.

        Args:
            endpoint: Remote URL the credentials are for
            fields: Fields of the request, presented together in this order

        Returns:
            Values keyed by identity for every value-carrying field, or None
            if the user cancelled

        Raises:
            CredentialResolutionError: If the prompt answered without a required field
        """
        key = endpoint_key(endpoint)
        wanted = [field.identity for field in fields if field.carries_value]

        with self._lock:
            cached = self._entries.get(key)
        if cached is not None and all(identity in cached for identity in wanted):
            log_credential_request(key, wanted, "cache")
            return {identity: cached[identity] for identity in wanted}

        log_credential_request(key, wanted, "prompt")
        request = list(fields)
        try:
            answer = self._ui.invoke_and_wait(lambda: self._prompt.present(key, request))
        except CancelledError:
            answer = None

        if answer is None:
            log_credential_request(key, wanted, "cancelled")
            return None

        values = _normalize_answer(key, request, answer)
        with self._lock:
            self._entries[key] = MappingProxyType(dict(values))
        return values

    def resolve_or_raise(
        self, endpoint: str, fields: Sequence[CredentialField]
    ) -> dict[str, str]:
        """
        Like :meth:`resolve`, but a cancellation is an error.

        Raises:
            CredentialResolutionError: If the user cancelled
        """
        values = self.resolve(endpoint, fields)
        if values is None:
            key = endpoint_key(endpoint)
            raise CredentialResolutionError(
                key,
                f"The credential request for {mask_sensitive_data(key)} was cancelled",
                code="CREDENTIALS_CANCELLED",
            )
        return values

    def reset(self, endpoint: str) -> None:
        """Forget the entry of ``endpoint`` so the next request prompts again."""
        key = endpoint_key(endpoint)
        with self._lock:
            self._entries.pop(key, None)
        log_credential_request(key, [], "reset")

    def cached_endpoints(self) -> list[str]:
        """Snapshot of the endpoints that currently have an entry."""
        with self._lock:
            return list(self._entries)


__all__ = ["CredentialCache", "endpoint_key"]

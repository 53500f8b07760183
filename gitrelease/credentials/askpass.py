"""
Bridge between the credential cache and git's ``GIT_ASKPASS`` protocol.

Git runs the askpass program with a prompt such as ``Username for
'https://host': `` and reads the answer from its stdout. The generated
script answers from environment variables that only the git child process
receives.
"""

import re
import tempfile
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import NoReturn

from gitrelease.credentials.cache import CredentialCache, endpoint_key
from gitrelease.exceptions import CredentialResolutionError
from gitrelease.logging import get_logger, mask_sensitive_data
from gitrelease.types.credentials import CredentialField, CredentialKind

USERNAME_FIELD = CredentialField("username", "Username", CredentialKind.SECRET)
PASSWORD_FIELD = CredentialField("password", "Password", CredentialKind.SECRET)

USERNAME_VARIABLE = "GITRELEASE_ASKPASS_USERNAME"
PASSWORD_VARIABLE = "GITRELEASE_ASKPASS_PASSWORD"

_ASKPASS_SCRIPT = f"""#!/bin/sh
case "$1" in
    [Uu]sername*) printf '%s\\n' "${USERNAME_VARIABLE}" ;;
    *) printf '%s\\n' "${PASSWORD_VARIABLE}" ;;
esac
"""

_AUTH_FAILURE = re.compile(
    r"authentication failed"
    r"|could not read (username|password)"
    r"|terminal prompts disabled"
    r"|invalid username or password"
    r"|access denied"
    r"|returned error: 40[13]",
    re.IGNORECASE,
)

logger = get_logger("credentials")


class GitAuthenticator:
    """
    Supplies cached credentials to git network commands.

    Example:
        ```python
        from gitrelease.credentials import CredentialCache, EnvironmentPrompt, GitAuthenticator

        auth = GitAuthenticator(CredentialCache(EnvironmentPrompt()))
        repo.push("origin", ["refs/heads/docs:refs/heads/docs"], authenticator=auth)
        ```
    """

    def __init__(
        self,
        cache: CredentialCache,
        fields: Sequence[CredentialField] = (USERNAME_FIELD, PASSWORD_FIELD),
    ) -> None:
        self.cache = cache
        self.fields = tuple(fields)

    @contextmanager
    def environment(self, url: str) -> Iterator[dict[str, str]]:
        """
        Resolve credentials for ``url`` and yield the environment git needs.

        The askpass script lives in a private temporary directory that is
        removed when the block exits.

        Raises:
            CredentialResolutionError: If the user cancelled the request
        """
        values = self.cache.resolve_or_raise(url, self.fields)
        with tempfile.TemporaryDirectory(prefix="gitrelease-askpass-") as directory:
            script = Path(directory) / "askpass.sh"
            script.write_text(_ASKPASS_SCRIPT, encoding="utf-8")
            script.chmod(0o700)
            yield {
                "GIT_ASKPASS": str(script),
                "GIT_TERMINAL_PROMPT": "0",
                USERNAME_VARIABLE: values.get("username", ""),
                PASSWORD_VARIABLE: values.get("password", ""),
            }

    def is_auth_failure(self, stderr: str) -> bool:
        """Whether git's error output reports rejected credentials."""
        return bool(_AUTH_FAILURE.search(stderr))

    def reject(self, url: str) -> NoReturn:
        """
        Discard the cached credentials of ``url`` and fail.

        Raises:
            CredentialResolutionError: Always
        """
        self.cache.reset(url)
        key = endpoint_key(url)
        logger.warning("credentials for %s were rejected", mask_sensitive_data(key))
        raise CredentialResolutionError(
            key,
            f"The remote {mask_sensitive_data(key)} rejected the supplied credentials; "
            "they were discarded and will be requested again on the next attempt",
            code="CREDENTIALS_REJECTED",
        )


__all__ = [
    "GitAuthenticator",
    "USERNAME_FIELD",
    "PASSWORD_FIELD",
]

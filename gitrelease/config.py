"""
gitrelease settings.

Settings come from explicit arguments or from ``GITRELEASE_*`` environment
variables, so the same workflows run from a pipeline or a terminal.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from gitrelease.credentials.prompts import ConsolePrompt, CredentialPrompt, EnvironmentPrompt
from gitrelease.exceptions import ConfigurationError, NotFoundError
from gitrelease.versions import VERSION_FILE
from gitrelease.workflows.docs import DEFAULT_START_POINT

CREDENTIAL_SOURCES = ("console", "env")

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(value: str | None) -> bool:
    return value is not None and value.strip().lower() in _TRUTHY


@dataclass
class ReleaseSettings:
    """
    Configuration shared by the release and documentation workflows.

    Example:
        ```python
        from gitrelease.config import ReleaseSettings

        # Explicit configuration
        settings = ReleaseSettings(repo_root=Path("."), project_name="MyProject")

        # Or from GITRELEASE_* environment variables
        settings = ReleaseSettings.from_env()
        settings.require_release()
        ```
    """

    repo_root: Path
    project_name: str
    display_name: str | None = None
    version_file: str = VERSION_FILE
    do_release: bool = False
    api_doc_repo: Path | None = None
    default_start: str = DEFAULT_START_POINT
    credential_source: str = "console"

    def __post_init__(self) -> None:
        if self.credential_source not in CREDENTIAL_SOURCES:
            raise ConfigurationError(
                f"Invalid credential source: {self.credential_source}. "
                f"Must be one of {', '.join(CREDENTIAL_SOURCES)}"
            )

    @property
    def effective_display_name(self) -> str:
        return self.display_name or self.project_name

    @property
    def version_path(self) -> Path:
        return self.repo_root / self.version_file

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ReleaseSettings":
        """
        Create settings from environment variables.

        Environment variables:
            GITRELEASE_REPO_ROOT: Repository to release (optional, default: cwd)
            GITRELEASE_PROJECT_NAME: Project name (optional, default: repository directory name)
            GITRELEASE_DISPLAY_NAME: Name used in messages (optional, default: project name)
            GITRELEASE_VERSION_FILE: Version file relative to the root (optional, default: version.txt)
            GITRELEASE_DO_RELEASE: Opt-in for the release action (optional, default: false)
            GITRELEASE_API_DOC_REPO: Repository receiving API docs (optional)
            GITRELEASE_DEFAULT_START_POINT: Start of new doc branches (optional, default: master)
            GITRELEASE_CREDENTIALS: "console" or "env" (optional, default: console)

        Raises:
            ConfigurationError: If a variable has an invalid value
        """
        env = os.environ if environ is None else environ

        repo_root = Path(env.get("GITRELEASE_REPO_ROOT") or os.getcwd()).expanduser()
        api_doc_repo = env.get("GITRELEASE_API_DOC_REPO")

        return cls(
            repo_root=repo_root,
            project_name=env.get("GITRELEASE_PROJECT_NAME") or repo_root.resolve().name,
            display_name=env.get("GITRELEASE_DISPLAY_NAME") or None,
            version_file=env.get("GITRELEASE_VERSION_FILE") or VERSION_FILE,
            do_release=_flag(env.get("GITRELEASE_DO_RELEASE")),
            api_doc_repo=Path(api_doc_repo).expanduser() if api_doc_repo else None,
            default_start=env.get("GITRELEASE_DEFAULT_START_POINT") or DEFAULT_START_POINT,
            credential_source=(env.get("GITRELEASE_CREDENTIALS") or "console").lower(),
        )

    def require_release(self) -> None:
        """
        Raises:
            ConfigurationError: Unless the release opt-in was given
        """
        if not self.do_release:
            raise ConfigurationError(
                "You must specify --do-release (or set GITRELEASE_DO_RELEASE=1) "
                "to execute the release task.",
                code="RELEASE_NOT_REQUESTED",
            )

    def require_api_doc_repo(self) -> Path:
        """
        Get the documentation repository, validating it exists.

        Raises:
            ConfigurationError: If no documentation repository is configured
            NotFoundError: If it is missing or not a git repository
        """
        if self.api_doc_repo is None:
            raise ConfigurationError(
                "You must specify --doc-repo (or GITRELEASE_API_DOC_REPO) to publish the API doc."
            )
        if not self.api_doc_repo.is_dir():
            raise NotFoundError(
                "DOC_REPO_NOT_FOUND", f"The directory {self.api_doc_repo} does not exist."
            )
        if not (self.api_doc_repo / ".git").exists():
            raise NotFoundError(
                "DOC_REPO_NOT_FOUND",
                f"The directory {self.api_doc_repo} is not a git repository.",
            )
        return self.api_doc_repo

    def credential_prompt(self) -> CredentialPrompt:
        """Build the prompt selected by ``credential_source``."""
        if self.credential_source == "env":
            return EnvironmentPrompt()
        return ConsolePrompt()


__all__ = ["ReleaseSettings", "CREDENTIAL_SOURCES"]

"""gitrelease - release tagging and API doc publishing on top of git."""

from gitrelease.branches import BranchResolver
from gitrelease.config import ReleaseSettings
from gitrelease.credentials import (
    ConsolePrompt,
    CredentialCache,
    CredentialPrompt,
    EnvironmentPrompt,
    GitAuthenticator,
    StaticPrompt,
    UiExecutor,
)
from gitrelease.exceptions import (
    AlreadyExistsError,
    BranchNotFoundError,
    ConfigurationError,
    CredentialResolutionError,
    DocSourceNotFoundError,
    GitCommandError,
    GitReleaseError,
    InvalidVersionError,
    NoRemoteAvailableError,
    NothingToCommitError,
    NotFoundError,
    PartialReleaseError,
    PreconditionError,
    RepositoryClosedError,
    RepositoryNotFoundError,
    TagAlreadyExistsError,
    VersionFileNotFoundError,
)
from gitrelease.git import Repository
from gitrelease.logging import configure_logging, get_logger
from gitrelease.registry import RepositoryRegistry
from gitrelease.types import (
    BranchResolution,
    CredentialField,
    CredentialKind,
    DocPublishResult,
    ReleaseResult,
    RemoteDescriptor,
    RepoStatus,
    ResolutionKind,
)
from gitrelease.versions import VersionStore, increment_version
from gitrelease.workflows import DocPublishWorkflow, ReleaseWorkflow

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Repositories
    "Repository",
    "RepositoryRegistry",
    "BranchResolver",
    # Workflows
    "ReleaseWorkflow",
    "DocPublishWorkflow",
    "VersionStore",
    "increment_version",
    # Credentials
    "CredentialCache",
    "CredentialPrompt",
    "ConsolePrompt",
    "EnvironmentPrompt",
    "StaticPrompt",
    "UiExecutor",
    "GitAuthenticator",
    # Types
    "BranchResolution",
    "ResolutionKind",
    "CredentialField",
    "CredentialKind",
    "RemoteDescriptor",
    "RepoStatus",
    "ReleaseResult",
    "DocPublishResult",
    # Exceptions
    "GitReleaseError",
    "ConfigurationError",
    "InvalidVersionError",
    "PreconditionError",
    "NothingToCommitError",
    "NotFoundError",
    "RepositoryNotFoundError",
    "NoRemoteAvailableError",
    "BranchNotFoundError",
    "DocSourceNotFoundError",
    "AlreadyExistsError",
    "TagAlreadyExistsError",
    "VersionFileNotFoundError",
    "CredentialResolutionError",
    "GitCommandError",
    "RepositoryClosedError",
    "PartialReleaseError",
    # Settings and logging
    "ReleaseSettings",
    "configure_logging",
    "get_logger",
]

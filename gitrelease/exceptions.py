"""gitrelease exception classes."""

from collections.abc import Sequence
from pathlib import Path


class GitReleaseError(Exception):
    """Base exception for all gitrelease errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(GitReleaseError):
    """Raised when configuration is invalid or a required opt-in is missing."""

    def __init__(self, message: str, code: str = "CONFIGURATION_ERROR") -> None:
        super().__init__(code, message)


class InvalidVersionError(ConfigurationError):
    """Raised when a stored version string cannot be incremented."""

    def __init__(self, version: str) -> None:
        super().__init__(
            f"Invalid version {version!r}: expected dot-separated non-negative integers",
            code="INVALID_VERSION",
        )
        self.version = version


class PreconditionError(GitReleaseError):
    """Raised when the repository is not in the state an operation requires."""

    pass


class NothingToCommitError(PreconditionError):
    """Raised when a commit is requested but nothing changed."""

    def __init__(self, message: str = "There are no changes to commit") -> None:
        super().__init__("NOTHING_TO_COMMIT", message)


class NotFoundError(GitReleaseError):
    """Raised when a repository, branch, remote or directory is not found."""

    pass


class RepositoryNotFoundError(NotFoundError):
    """Raised when a path holds no git metadata."""

    def __init__(self, path: Path) -> None:
        super().__init__(
            "REPOSITORY_NOT_FOUND",
            f"The directory {path} is not a git repository",
        )
        self.path = path


class NoRemoteAvailableError(NotFoundError):
    """Raised when a new branch must be wired to a remote but none exist."""

    def __init__(self, branch: str) -> None:
        super().__init__(
            "NO_REMOTE",
            f"Couldn't find any remote for new branch {branch!r}; add a remote first",
        )
        self.branch = branch


class BranchNotFoundError(NotFoundError):
    """Raised when a named branch does not exist."""

    def __init__(self, branch: str) -> None:
        super().__init__("BRANCH_NOT_FOUND", f"Branch {branch!r} does not exist")
        self.branch = branch


class DocSourceNotFoundError(NotFoundError):
    """Raised when the documentation source directory is missing."""

    def __init__(self, path: Path) -> None:
        super().__init__(
            "DOC_SOURCE_NOT_FOUND",
            f"The documentation directory {path} does not exist",
        )
        self.path = path


class VersionFileNotFoundError(NotFoundError):
    """Raised when the version file is missing or unreadable."""

    def __init__(self, path: Path, reason: str = "") -> None:
        detail = f" ({reason})" if reason else ""
        super().__init__(
            "VERSION_FILE_NOT_FOUND",
            f"Couldn't read the version file {path}{detail}; "
            "create it with the current version on its first line, e.g. 1.0.0",
        )
        self.path = path


class AlreadyExistsError(GitReleaseError):
    """Raised when creating something that already exists."""

    pass


class TagAlreadyExistsError(AlreadyExistsError):
    """Raised on a tag name collision."""

    def __init__(self, tag: str) -> None:
        super().__init__(
            "TAG_EXISTS",
            f"Tag {tag!r} already exists; delete it or bump the version before releasing",
        )
        self.tag = tag


class CredentialResolutionError(GitReleaseError):
    """Raised when credentials were cancelled or rejected by the remote."""

    def __init__(self, endpoint: str, message: str, code: str = "CREDENTIALS") -> None:
        super().__init__(code, message)
        self.endpoint = endpoint


class GitCommandError(GitReleaseError):
    """Raised when a git invocation exits with a non-zero status."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str) -> None:
        detail = stderr.strip() or "no output"
        super().__init__(
            "GIT_FAILED",
            f"'{' '.join(argv)}' exited with status {returncode}: {detail}",
        )
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr


class RepositoryClosedError(GitReleaseError):
    """Raised when a closed repository handle is used."""

    def __init__(self, path: Path) -> None:
        super().__init__("REPOSITORY_CLOSED", f"The repository handle for {path} is closed")
        self.path = path


class PartialReleaseError(GitReleaseError):
    """Raised when a release failed after it already mutated the repository.

    Nothing is rolled back; ``mutations`` lists what an operator has to undo.
    """

    def __init__(self, mutations: Sequence[str], cause: Exception) -> None:
        done = "; ".join(mutations)
        super().__init__(
            "PARTIAL_RELEASE",
            f"The release failed after these changes were made: {done}. "
            f"Revert them manually before retrying. Cause: {cause}",
        )
        self.mutations = list(mutations)
        self.cause = cause

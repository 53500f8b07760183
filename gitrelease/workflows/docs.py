"""Publishing a generated documentation tree into a branch."""

import shutil
from pathlib import Path

from gitrelease.branches import BranchResolver
from gitrelease.credentials.askpass import GitAuthenticator
from gitrelease.exceptions import ConfigurationError, DocSourceNotFoundError
from gitrelease.git import R_HEADS, Repository
from gitrelease.logging import get_logger
from gitrelease.types.releases import DocPublishResult

API_DIR_NAME = "api"
DEFAULT_START_POINT = "master"

logger = get_logger()


def doc_commit_message(display_name: str, version: str) -> str:
    return f"Added API doc for {display_name} {version}."


def replace_directory(source: Path, destination: Path) -> None:
    """Discard ``destination`` entirely and copy ``source`` in its place."""
    if destination.exists():
        shutil.rmtree(destination)
    shutil.copytree(source, destination)


class DocPublishWorkflow:
    """
    Replaces the ``api/`` directory of a branch with a documentation tree.

    Example:
        ```python
        from gitrelease.git import Repository
        from gitrelease.workflows import DocPublishWorkflow

        with Repository.open("../site") as repo:
            result = DocPublishWorkflow(repo).publish(
                "build/docs/javadoc", branch="my-lib", display_name="My Lib", version="1.2.0"
            )
        ```
    """

    def __init__(
        self,
        repo: Repository,
        default_start: str = DEFAULT_START_POINT,
        api_dir_name: str = API_DIR_NAME,
    ) -> None:
        """
        Args:
            repo: Repository receiving the documentation
            default_start: Starting point of the branch when it exists nowhere yet
            api_dir_name: Directory at the repository root that is replaced
        """
        self.repo = repo
        self.default_start = default_start
        self.api_dir_name = api_dir_name

    def publish(
        self,
        source_dir: str | Path,
        branch: str,
        display_name: str,
        version: str,
    ) -> DocPublishResult:
        """
        Commit ``source_dir`` as the new ``api/`` content of ``branch``.

        Untracked and ignored files of the repository are deleted first.

        Args:
            source_dir: Generated documentation tree
            branch: Target branch, conventionally the project name
            display_name: Project name shown in the commit message
            version: Version shown in the commit message

        Returns:
            DocPublishResult with the branch resolution and the new commit

        Raises:
            DocSourceNotFoundError: If ``source_dir`` is not a directory
            NoRemoteAvailableError: If the branch must be created but no remote exists
            NothingToCommitError: If the published tree equals the committed one
        """
        source = Path(source_dir)
        if not source.is_dir():
            raise DocSourceNotFoundError(source)

        self.repo.clean()
        resolution = BranchResolver(self.repo).checkout_or_create(branch, self.default_start)

        destination = self.repo.root / self.api_dir_name
        replace_directory(source, destination)
        self.repo.add_paths_under_tree(self.repo.root, self.api_dir_name)
        commit = self.repo.commit_all(doc_commit_message(display_name, version))

        files = tuple(
            sorted(
                path.relative_to(self.repo.root)
                for path in destination.rglob("*")
                if path.is_file()
            )
        )
        logger.info(
            "published %d documentation files of %s %s to branch %s",
            len(files),
            display_name,
            version,
            branch,
        )
        return DocPublishResult(
            branch=branch, resolution=resolution, commit=commit, files=files
        )

    def push(
        self,
        branch: str,
        remote: str | None = None,
        authenticator: GitAuthenticator | None = None,
    ) -> str:
        """
        Push ``branch`` to ``remote`` or, by default, to its configured upstream.

        Returns:
            Name of the remote pushed to

        Raises:
            ConfigurationError: If no remote is given and none is configured
            CredentialResolutionError: If credentials were cancelled or rejected
        """
        if remote is None:
            upstream = self.repo.branch_upstream(branch)
            if upstream is None:
                raise ConfigurationError(
                    f"Branch {branch!r} has no upstream remote; pass one explicitly"
                )
            remote, merge_ref = upstream
        else:
            merge_ref = R_HEADS + branch

        self.repo.push(remote, [f"{R_HEADS}{branch}:{merge_ref}"], authenticator=authenticator)
        return remote


__all__ = [
    "DocPublishWorkflow",
    "doc_commit_message",
    "replace_directory",
    "API_DIR_NAME",
    "DEFAULT_START_POINT",
]

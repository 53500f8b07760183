"""Release finalization: clean check, tag, version bump, commit."""

from gitrelease.exceptions import GitReleaseError, PartialReleaseError, PreconditionError
from gitrelease.git import Repository
from gitrelease.logging import get_logger
from gitrelease.types.releases import ReleaseResult
from gitrelease.versions import VersionStore, increment_version

logger = get_logger()


def release_tag_name(version: str) -> str:
    return f"v{version}"


def release_tag_message(project: str, version: str) -> str:
    return f"Release of {project} {version}"


def version_commit_message(next_version: str) -> str:
    return f"Set the version to {next_version}"


class ReleaseWorkflow:
    """
    Finalizes the release of the version stored in ``versions``.

    Example:
        ```python
        from gitrelease.git import Repository
        from gitrelease.versions import VersionStore
        from gitrelease.workflows import ReleaseWorkflow

        with Repository.open(".") as repo:
            result = ReleaseWorkflow(repo, VersionStore.at_root(repo.root), "MyProject").release()
            print(result.tag, result.next_version)
        ```
    """

    def __init__(self, repo: Repository, versions: VersionStore, project: str) -> None:
        """
        Args:
            repo: Repository to release; must hold the version file
            versions: Version file of the project
            project: Display name used in the tag message
        """
        self.repo = repo
        self.versions = versions
        self.project = project

    def check_preconditions(self) -> None:
        """
        Verify the working tree can be released.

        Raises:
            PreconditionError: If there are untracked files or uncommitted changes
        """
        status = self.repo.status()
        if status.untracked:
            paths = ", ".join(sorted(p.as_posix() for p in status.untracked))
            raise PreconditionError(
                "UNTRACKED_FILES",
                f"There are untracked files in {self.repo.root} and so the release "
                f"cannot be completed: {paths}. Remove or commit them first.",
            )
        if not status.clean:
            paths = ", ".join(sorted(p.as_posix() for p in status.changed))
            raise PreconditionError(
                "DIRTY_WORKING_TREE",
                f"The repository {self.repo.root} is not clean (contains uncommitted "
                f"changes: {paths}) and so the release cannot be completed. "
                "Commit or revert them first.",
            )

    def release(self) -> ReleaseResult:
        """
        Tag the current version and commit the next one.

        Returns:
            ReleaseResult with the released and the next version

        Raises:
            PreconditionError: If the working tree is not clean
            TagAlreadyExistsError: If the release tag exists
            VersionFileNotFoundError: If the version file cannot be read
            InvalidVersionError: If the stored version cannot be incremented
            PartialReleaseError: If a step failed after the tag was created
        """
        self.check_preconditions()

        version = self.versions.read()
        next_version = increment_version(version)
        tag = release_tag_name(version)

        self.repo.tag(tag, release_tag_message(self.project, version))

        mutations = [f"created tag {tag}"]
        try:
            self.versions.write(next_version)
            mutations.append(f"rewrote {self.versions.path.name} to {next_version}")
            self.repo.add_update(self.versions.path)
            commit = self.repo.commit_all(version_commit_message(next_version))
        except (GitReleaseError, OSError) as exc:
            raise PartialReleaseError(mutations, exc) from exc

        logger.info("New Release: %s %s (next: %s)", self.project, version, next_version)
        return ReleaseResult(
            project=self.project,
            version=version,
            next_version=next_version,
            tag=tag,
            commit=commit,
        )


__all__ = [
    "ReleaseWorkflow",
    "release_tag_message",
    "release_tag_name",
    "version_commit_message",
]

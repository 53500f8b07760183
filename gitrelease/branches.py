"""
Branch checkout-or-create decision procedure.

Used to land on a publishing branch that may exist locally, only on a remote,
or nowhere yet.
"""

from gitrelease.exceptions import NoRemoteAvailableError
from gitrelease.git import Repository
from gitrelease.logging import get_logger
from gitrelease.types.branches import BranchResolution

PREFERRED_REMOTE_NAME = "origin"

logger = get_logger("git")


def find_remote_for_branch(repo: Repository, branch: str) -> str | None:
    """Return the first remote, in config order, that has ``branch``."""
    for remote in repo.list_remotes():
        if repo.has_remote_branch(remote.name, branch):
            return remote.name
    return None


def find_default_remote(repo: Repository) -> str | None:
    """Return ``origin`` if configured, else the first remote, else None."""
    best_match = None
    for remote in repo.list_remotes():
        if remote.name == PREFERRED_REMOTE_NAME:
            return remote.name
        if best_match is None:
            best_match = remote.name
    return best_match


class BranchResolver:
    """
    Checks out a branch, creating it when needed.

    Rules, first match wins:

    1. a local branch exists: check it out;
    2. a remote has the branch: create a local branch tracking it;
    3. otherwise create the branch at the default starting point and wire its
       upstream to the default remote, even though the remote branch does not
       exist yet.

    The working tree must be clean beforehand; checkout failures propagate.
    """

    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    def checkout_or_create(self, branch: str, default_start: str) -> BranchResolution:
        """
        Check out ``branch``, creating it if necessary.

        Args:
            branch: Desired local branch name
            default_start: Starting point of a brand-new branch (e.g. "master")

        Returns:
            BranchResolution describing which rule applied

        Raises:
            NoRemoteAvailableError: If a new branch is needed and no remote exists
            GitCommandError: If branch creation or checkout fails
        """
        if self.repo.has_local_branch(branch):
            self.repo.checkout_branch(branch)
            logger.info("checked out existing branch %s", branch)
            return BranchResolution.checked_out_local(branch)

        remote = find_remote_for_branch(self.repo, branch)
        if remote is not None:
            self.repo.create_tracking_branch(branch, remote)
            self.repo.checkout_branch(branch)
            logger.info("created branch %s tracking %s/%s", branch, remote, branch)
            return BranchResolution.created_tracking(branch, remote)

        remote = find_default_remote(self.repo)
        if remote is None:
            raise NoRemoteAvailableError(branch)

        self.repo.create_branch(branch, default_start)
        self.repo.set_upstream_config(branch, remote)
        self.repo.checkout_branch(branch)
        logger.info(
            "created branch %s from %s with upstream %s/%s",
            branch,
            default_start,
            remote,
            branch,
        )
        return BranchResolution.created_fresh(branch, remote)


__all__ = [
    "BranchResolver",
    "PREFERRED_REMOTE_NAME",
    "find_default_remote",
    "find_remote_for_branch",
]

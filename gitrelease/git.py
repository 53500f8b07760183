"""
Git repository handle and primitive operations.

Every operation shells out to the ``git`` executable, synchronously and once.
Workflows compose these primitives; nothing here retries or rolls back.
"""

import os
import subprocess
import time
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from gitrelease.exceptions import (
    BranchNotFoundError,
    GitCommandError,
    NothingToCommitError,
    NotFoundError,
    RepositoryClosedError,
    RepositoryNotFoundError,
    TagAlreadyExistsError,
)
from gitrelease.logging import get_logger, log_git_command, log_git_result, mask_sensitive_data
from gitrelease.types.repos import RemoteDescriptor, RepoStatus

if TYPE_CHECKING:
    from gitrelease.credentials.askpass import GitAuthenticator

logger = get_logger("git")

R_HEADS = "refs/heads/"
R_REMOTES = "refs/remotes/"
R_TAGS = "refs/tags/"


def to_remote_ref(branch: str, remote: str) -> str:
    """Return the fully qualified remote-tracking ref of ``remote/branch``."""
    return f"{R_REMOTES}{remote}/{branch}"


class Repository:
    """
    Handle on a local git checkout.

    Example:
        ```python
        from gitrelease.git import Repository

        with Repository.open("./my-project") as repo:
            if repo.status().clean:
                repo.tag("v1.0.0", "Release of my-project 1.0.0")
        ```
    """

    GIT_EXECUTABLE = "git"

    def __init__(self, root: Path) -> None:
        """
        Wrap an existing checkout. Prefer :meth:`open`, which validates the path.

        Args:
            root: Working tree root of the repository
        """
        self.root = Path(root).resolve()
        self._closed = False

    @classmethod
    def open(cls, path: str | Path) -> "Repository":
        """
        Open the repository rooted at ``path``.

        Raises:
            RepositoryNotFoundError: If ``path`` holds no ``.git`` directory or gitfile
        """
        root = Path(path).expanduser().resolve()
        if not (root / ".git").exists():
            raise RepositoryNotFoundError(root)
        logger.debug("opened repository %s", root)
        return cls(root)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the handle. Calling it again is a no-op."""
        if not self._closed:
            self._closed = True
            logger.debug("closed repository %s", self.root)

    def __enter__(self) -> "Repository":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Repository {self.root} ({state})>"

    # ------------------------------------------------------------------
    # Status and staging
    # ------------------------------------------------------------------

    def status(self) -> RepoStatus:
        """
        Get the working tree status. Does not modify the repository.

        Returns:
            RepoStatus; ``clean`` is False if anything is untracked or changed
        """
        result = self._run(
            "status", "--porcelain=v1", "-z", "--untracked-files=all"
        )

        untracked: set[Path] = set()
        changed: set[Path] = set()
        entries = result.stdout.split("\0")
        index = 0
        while index < len(entries):
            entry = entries[index]
            index += 1
            if not entry:
                continue
            code, path = entry[:2], entry[3:]
            if code == "??":
                untracked.add(Path(path))
                continue
            changed.add(Path(path))
            if code[0] in "RC":
                # -z puts the rename source in the next entry
                index += 1

        return RepoStatus(
            clean=not untracked and not changed,
            untracked=frozenset(untracked),
            changed=frozenset(changed),
        )

    def add_paths_under_tree(self, root: str | Path, subdir_name: str) -> None:
        """
        Stage every file under ``root/subdir_name``.

        Removals inside the subtree are staged too, nothing outside of it is
        touched. Ignored files are skipped. Does nothing if the subtree is absent.

        Args:
            root: Working tree root containing the subtree
            subdir_name: Name of the subdirectory to stage
        """
        subtree = Path(root) / subdir_name
        if not subtree.is_dir():
            logger.debug("nothing to add, %s does not exist", subtree)
            return

        pathspec = subtree.resolve().relative_to(self.root).as_posix()
        self._run("add", "--all", "--", pathspec)

    def add_update(self, *paths: str | Path) -> None:
        """Stage modifications of already tracked ``paths`` (``git add --update``)."""
        self._run("add", "--update", "--", *(self._pathspec(p) for p in paths))

    def commit_all(self, message: str) -> str:
        """
        Commit staged changes plus modifications of every tracked file.

        Args:
            message: Commit message

        Returns:
            Id of the new commit

        Raises:
            NothingToCommitError: If nothing is staged or modified
        """
        pending = self._run("status", "--porcelain=v1", "--untracked-files=no")
        if not pending.stdout.strip():
            raise NothingToCommitError(
                f"Nothing to commit in {self.root} for {message!r}"
            )

        self._run("commit", "--all", "--quiet", "--message", message)
        commit = self.head()
        logger.info("committed %s: %s", commit[:12], message)
        return commit

    def clean(self) -> set[Path]:
        """
        Remove untracked and ignored files and directories.

        Returns:
            Removed paths, relative to the repository root
        """
        result = self._run("-c", "core.quotePath=false", "clean", "-f", "-d", "-x")

        removed: set[Path] = set()
        for line in result.stdout.splitlines():
            if line.startswith("Removing "):
                removed.add(Path(line[len("Removing "):].rstrip("/")))

        if removed:
            logger.info("removed %d untracked paths from %s", len(removed), self.root)
        return removed

    # ------------------------------------------------------------------
    # Refs
    # ------------------------------------------------------------------

    def head(self) -> str:
        """Get the commit id HEAD points to."""
        return self._run("rev-parse", "HEAD").stdout.strip()

    def current_branch(self) -> str | None:
        """Get the short name of the checked out branch, or None when detached."""
        result = self._run("symbolic-ref", "--quiet", "--short", "HEAD", check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def has_ref(self, qualified_name: str) -> bool:
        """Check whether the fully qualified ref exists."""
        result = self._run(
            "show-ref", "--verify", "--quiet", qualified_name, check=False
        )
        return result.returncode == 0

    def has_local_branch(self, name: str) -> bool:
        return self.has_ref(R_HEADS + name)

    def has_remote_branch(self, remote: str, name: str) -> bool:
        return self.has_ref(to_remote_ref(name, remote))

    def has_tag(self, name: str) -> bool:
        return self.has_ref(R_TAGS + name)

    def tag(self, name: str, message: str) -> None:
        """
        Create an annotated tag at HEAD.

        Raises:
            TagAlreadyExistsError: If a tag called ``name`` exists
        """
        if self.has_tag(name):
            raise TagAlreadyExistsError(name)
        self._run("tag", "--annotate", "--message", message, name)
        logger.info("tagged %s in %s", name, self.root)

    def tag_message(self, name: str) -> str:
        """Get the message of an annotated tag."""
        return self._run(
            "for-each-ref", "--format=%(contents)", R_TAGS + name
        ).stdout.strip()

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    def checkout_branch(self, name: str) -> None:
        """
        Check out an existing local branch.

        Raises:
            BranchNotFoundError: If there is no local branch called ``name``
            GitCommandError: If the checkout fails, e.g. on conflicting local changes
        """
        if not self.has_local_branch(name):
            raise BranchNotFoundError(name)
        self._run("checkout", "--quiet", name, "--")

    def create_tracking_branch(self, name: str, remote: str) -> None:
        """Create branch ``name`` starting at and tracking ``remote/name``."""
        self._run("branch", "--track", name, to_remote_ref(name, remote))

    def create_branch(self, name: str, start_point: str) -> None:
        """Create branch ``name`` at ``start_point`` without upstream config."""
        self._run("branch", "--no-track", name, start_point)

    def set_upstream_config(self, name: str, remote: str) -> None:
        """
        Point the upstream of branch ``name`` at ``remote``'s branch of the same name.

        The remote branch does not need to exist yet.
        """
        self._run("config", f"branch.{name}.remote", remote)
        self._run("config", f"branch.{name}.merge", R_HEADS + name)

    def branch_upstream(self, name: str) -> tuple[str, str] | None:
        """Get ``(remote, merge_ref)`` configured for branch ``name``, if any."""
        remote = self._config_get(f"branch.{name}.remote")
        merge = self._config_get(f"branch.{name}.merge")
        if remote is None or merge is None:
            return None
        return remote, merge

    # ------------------------------------------------------------------
    # Remotes
    # ------------------------------------------------------------------

    def list_remotes(self) -> list[RemoteDescriptor]:
        """
        List configured remotes in the order they appear in git config.

        Returns:
            A fresh snapshot on every call
        """
        result = self._run("config", "--get-regexp", r"^remote\.", check=False)
        if result.returncode == 1:
            return []
        if result.returncode != 0:
            raise GitCommandError(
                self._argv(("config", "--get-regexp")), result.returncode, result.stderr
            )

        urls: dict[str, dict[str, list[str]]] = {}
        for line in result.stdout.splitlines():
            key, _, value = line.partition(" ")
            name, _, variable = key[len("remote."):].rpartition(".")
            if not name:
                continue
            entry = urls.setdefault(name, {"url": [], "pushurl": []})
            if variable in entry:
                entry[variable].append(value)

        return [
            RemoteDescriptor(
                name=name,
                fetch_urls=tuple(entry["url"]),
                push_urls=tuple(entry["pushurl"]),
            )
            for name, entry in urls.items()
        ]

    def remote(self, name: str) -> RemoteDescriptor:
        """
        Get a single remote by name.

        Raises:
            NotFoundError: If no such remote is configured
        """
        for remote in self.list_remotes():
            if remote.name == name:
                return remote
        raise NotFoundError("REMOTE_NOT_FOUND", f"Remote {name!r} is not configured in {self.root}")

    def fetch(
        self,
        remote: str = "origin",
        authenticator: "GitAuthenticator | None" = None,
    ) -> None:
        """
        Fetch from a remote.

        Args:
            remote: Remote name (default: "origin")
            authenticator: Supplies credentials when the remote requires them

        Raises:
            CredentialResolutionError: If credentials were cancelled or rejected
            GitCommandError: If git fetch fails for another reason
        """
        url = self.remote(remote).url or remote
        self._run_remote(("fetch", "--quiet", remote), url, authenticator)

    def push(
        self,
        remote: str,
        refspecs: Sequence[str],
        authenticator: "GitAuthenticator | None" = None,
    ) -> None:
        """
        Push refspecs to a remote.

        Args:
            remote: Remote name
            refspecs: Refspecs to push (e.g. ``["refs/heads/docs:refs/heads/docs"]``)
            authenticator: Supplies credentials when the remote requires them

        Raises:
            CredentialResolutionError: If credentials were cancelled or rejected
            GitCommandError: If git push fails for another reason
        """
        url = self.remote(remote).push_url or remote
        self._run_remote(("push", "--quiet", remote, *refspecs), url, authenticator)
        logger.info("pushed %s to %s", ", ".join(refspecs), remote)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run_remote(
        self,
        args: Sequence[str],
        url: str,
        authenticator: "GitAuthenticator | None",
    ) -> subprocess.CompletedProcess[str]:
        result = self._run(*args, check=False)
        if result.returncode == 0:
            return result
        if authenticator is None or not authenticator.is_auth_failure(result.stderr):
            raise GitCommandError(self._argv(args), result.returncode, result.stderr)

        # Credentials are only requested once the remote asked for them
        logger.debug("%s needs credentials, retrying with askpass", mask_sensitive_data(url))
        with authenticator.environment(url) as extra_env:
            result = self._run(*args, check=False, env=extra_env)

        if result.returncode != 0:
            if authenticator.is_auth_failure(result.stderr):
                authenticator.reject(url)
            raise GitCommandError(self._argv(args), result.returncode, result.stderr)
        return result

    def _config_get(self, key: str) -> str | None:
        result = self._run("config", "--get", key, check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def _pathspec(self, path: str | Path) -> str:
        candidate = Path(path)
        if candidate.is_absolute():
            candidate = candidate.resolve().relative_to(self.root)
        return candidate.as_posix()

    def _argv(self, args: Iterable[str]) -> list[str]:
        return [self.GIT_EXECUTABLE, *args]

    def _run(
        self,
        *args: str,
        check: bool = True,
        env: dict[str, str] | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """Run git in the working tree and capture its output."""
        if self._closed:
            raise RepositoryClosedError(self.root)

        argv = self._argv(args)
        full_env = os.environ.copy()
        # Stable, untranslated output and never a blocking terminal prompt
        full_env["LC_ALL"] = "C"
        full_env["GIT_TERMINAL_PROMPT"] = "0"
        if env:
            full_env.update(env)

        log_git_command(argv, self.root)
        started = time.monotonic()
        result = subprocess.run(
            argv,
            cwd=self.root,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            env=full_env,
        )
        log_git_result(
            argv,
            result.returncode,
            elapsed_ms=(time.monotonic() - started) * 1000,
            stderr=result.stderr,
        )

        if check and result.returncode != 0:
            raise GitCommandError(argv, result.returncode, result.stderr)
        return result


__all__ = ["Repository", "to_remote_ref", "R_HEADS", "R_REMOTES", "R_TAGS"]

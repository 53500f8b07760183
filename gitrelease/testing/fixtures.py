"""
Pytest fixtures for gitrelease testing.

Repositories are real git repositories created under ``tmp_path`` with a
local identity, so workflows run against git exactly as in production.
"""

import os
import subprocess
from collections.abc import Generator, Mapping
from pathlib import Path

import pytest

from gitrelease.credentials.cache import CredentialCache
from gitrelease.credentials.ui import UiExecutor
from gitrelease.git import Repository
from gitrelease.testing.mock import MockPrompt
from gitrelease.types.credentials import CredentialField, CredentialKind

DEFAULT_BRANCH = "master"
INITIAL_VERSION = "1.4.0"


# ============================================================================
# Helper Functions
# ============================================================================


def run_git(cwd: Path, *args: str) -> str:
    """Run git in ``cwd`` and return its stripped stdout, failing loudly."""
    env = dict(os.environ)
    env.update(
        {
            "LC_ALL": "C",
            "GIT_TERMINAL_PROMPT": "0",
            "GIT_CONFIG_NOSYSTEM": "1",
        }
    )
    completed = subprocess.run(
        ["git", *args],
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )
    if completed.returncode != 0:
        raise AssertionError(
            f"git {' '.join(args)} failed ({completed.returncode}): {completed.stderr}"
        )
    return completed.stdout.strip()


def write_files(root: Path, files: Mapping[str, str]) -> None:
    """Write ``files`` (relative path to content) below ``root``."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def init_repository(
    path: Path,
    files: Mapping[str, str] | None = None,
    branch: str = DEFAULT_BRANCH,
) -> Path:
    """
    Create a repository at ``path`` with one commit containing ``files``.

    Returns:
        The repository root
    """
    path.mkdir(parents=True, exist_ok=True)
    run_git(path, "init", "--quiet")
    run_git(path, "symbolic-ref", "HEAD", f"refs/heads/{branch}")
    run_git(path, "config", "user.name", "Release Tester")
    run_git(path, "config", "user.email", "release-tester@example.com")
    run_git(path, "config", "commit.gpgsign", "false")
    run_git(path, "config", "tag.gpgsign", "false")

    write_files(path, files or {"README.md": "# test\n"})
    run_git(path, "add", "--all")
    run_git(path, "commit", "--quiet", "--message", "Initial commit")
    return path


def create_bare_remote(path: Path, branch: str = DEFAULT_BRANCH) -> Path:
    """Create an empty bare repository usable as a remote."""
    path.mkdir(parents=True, exist_ok=True)
    run_git(path, "init", "--quiet", "--bare")
    run_git(path, "symbolic-ref", "HEAD", f"refs/heads/{branch}")
    return path


def add_remote(repo: Path, name: str, remote: Path, push: str | None = DEFAULT_BRANCH) -> None:
    """Register ``remote`` under ``name``, optionally pushing a branch and fetching."""
    run_git(repo, "remote", "add", name, str(remote))
    if push is not None:
        run_git(repo, "push", "--quiet", name, f"{push}:{push}")
    run_git(repo, "fetch", "--quiet", name)


def commit_on_branch(repo: Path, branch: str, files: Mapping[str, str], message: str) -> str:
    """Commit ``files`` on a new or existing ``branch`` and return to the previous branch."""
    previous = run_git(repo, "rev-parse", "--abbrev-ref", "HEAD")
    exists = run_git(repo, "branch", "--list", branch) != ""
    if exists:
        run_git(repo, "checkout", "--quiet", branch)
    else:
        run_git(repo, "checkout", "--quiet", "-b", branch)
    write_files(repo, files)
    run_git(repo, "add", "--all")
    run_git(repo, "commit", "--quiet", "--message", message)
    commit = run_git(repo, "rev-parse", "HEAD")
    run_git(repo, "checkout", "--quiet", previous)
    return commit


def create_credential_field(
    identity: str = "password",
    label: str | None = None,
    kind: CredentialKind = CredentialKind.SECRET,
) -> CredentialField:
    """Create a credential field with a label derived from its identity."""
    return CredentialField(identity, label or identity.capitalize(), kind)


# ============================================================================
# Repository Fixtures
# ============================================================================


@pytest.fixture
def git_repo(tmp_path: Path) -> Generator[Repository, None, None]:
    """
    Provide a project repository with ``version.txt`` committed on master.

    Example:
        ```python
        def test_release(git_repo):
            workflow = ReleaseWorkflow(git_repo, VersionStore.at_root(git_repo.root), "Demo")
            assert workflow.release().version == "1.4.0"
        ```
    """
    root = init_repository(
        tmp_path / "project",
        {"version.txt": INITIAL_VERSION, "README.md": "# project\n"},
    )
    repo = Repository.open(root)
    yield repo
    repo.close()


@pytest.fixture
def bare_remote(tmp_path: Path) -> Path:
    """Provide an empty bare repository."""
    return create_bare_remote(tmp_path / "remote.git")


@pytest.fixture
def doc_repo(tmp_path: Path) -> Generator[Repository, None, None]:
    """
    Provide a documentation repository whose master is published to ``origin``.

    The remote is a local bare repository, so fetch and push need no
    credentials.
    """
    root = init_repository(tmp_path / "site", {"index.html": "<html></html>\n"})
    remote = create_bare_remote(tmp_path / "site.git")
    add_remote(root, "origin", remote)
    repo = Repository.open(root)
    yield repo
    repo.close()


@pytest.fixture
def doc_source(tmp_path: Path) -> Path:
    """Provide a generated API documentation tree."""
    source = tmp_path / "build" / "docs"
    write_files(
        source,
        {
            "index.html": "<html>api</html>\n",
            "package-list": "com.example\n",
            "com/example/Widget.html": "<html>Widget</html>\n",
        },
    )
    return source


# ============================================================================
# Credential Fixtures
# ============================================================================


@pytest.fixture
def mock_prompt() -> Generator[MockPrompt, None, None]:
    """Provide a MockPrompt answering username and password."""
    prompt = MockPrompt({"username": "release-bot", "password": "s3cret"})
    yield prompt
    prompt.reset()


@pytest.fixture
def ui_executor() -> Generator[UiExecutor, None, None]:
    """Provide a UI executor that is shut down after the test."""
    executor = UiExecutor(name="test-ui")
    yield executor
    executor.cancel()
    executor.shutdown(wait=True)


@pytest.fixture
def credential_cache(
    mock_prompt: MockPrompt, ui_executor: UiExecutor
) -> CredentialCache:
    """Provide a CredentialCache backed by ``mock_prompt``."""
    return CredentialCache(mock_prompt, ui=ui_executor)


__all__ = [
    "run_git",
    "write_files",
    "init_repository",
    "create_bare_remote",
    "add_remote",
    "commit_on_branch",
    "create_credential_field",
    "git_repo",
    "bare_remote",
    "doc_repo",
    "doc_source",
    "mock_prompt",
    "ui_executor",
    "credential_cache",
]

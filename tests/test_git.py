"""
Tests for the git repository handle against real repositories.
"""

from pathlib import Path

import pytest

from gitrelease.exceptions import (
    BranchNotFoundError,
    GitCommandError,
    NotFoundError,
    NothingToCommitError,
    RepositoryClosedError,
    RepositoryNotFoundError,
    TagAlreadyExistsError,
)
from gitrelease.git import Repository, to_remote_ref
from gitrelease.testing import add_remote, create_bare_remote, init_repository, run_git


def changed_files(root: Path, revision: str = "HEAD") -> list[str]:
    return run_git(root, "show", "--name-only", "--format=", revision).splitlines()


class TestOpen:
    """Tests for opening and closing repositories."""

    def test_open_resolves_root(self, git_repo: Repository) -> None:
        with Repository.open(git_repo.root / ".") as repo:
            assert repo.root == git_repo.root.resolve()

    def test_open_non_repository_raises(self, tmp_path: Path) -> None:
        with pytest.raises(RepositoryNotFoundError) as exc_info:
            Repository.open(tmp_path)

        assert exc_info.value.code == "REPOSITORY_NOT_FOUND"

    def test_closed_handle_rejects_operations(self, git_repo: Repository) -> None:
        repo = Repository.open(git_repo.root)
        repo.close()
        repo.close()

        assert repo.closed
        with pytest.raises(RepositoryClosedError):
            repo.head()


class TestStatus:
    """Tests for status()."""

    def test_fresh_repository_is_clean(self, git_repo: Repository) -> None:
        status = git_repo.status()

        assert status.clean
        assert status.untracked == frozenset()
        assert status.changed == frozenset()

    def test_untracked_files_are_listed_individually(self, git_repo: Repository) -> None:
        (git_repo.root / "notes").mkdir()
        (git_repo.root / "notes" / "a.txt").write_text("a", encoding="utf-8")
        (git_repo.root / "b.txt").write_text("b", encoding="utf-8")

        status = git_repo.status()

        assert not status.clean
        assert status.untracked == {Path("notes/a.txt"), Path("b.txt")}
        assert status.changed == frozenset()

    def test_modified_and_staged_files_are_changed(self, git_repo: Repository) -> None:
        (git_repo.root / "README.md").write_text("changed\n", encoding="utf-8")
        (git_repo.root / "new.txt").write_text("new", encoding="utf-8")
        run_git(git_repo.root, "add", "new.txt")

        status = git_repo.status()

        assert not status.clean
        assert status.changed == {Path("README.md"), Path("new.txt")}
        assert status.untracked == frozenset()

    def test_rename_reports_destination_only(self, git_repo: Repository) -> None:
        run_git(git_repo.root, "mv", "README.md", "READ.md")

        status = git_repo.status()

        assert status.changed == {Path("READ.md")}

    def test_ignored_files_do_not_count(self, git_repo: Repository) -> None:
        (git_repo.root / ".gitignore").write_text("*.log\n", encoding="utf-8")
        run_git(git_repo.root, "add", ".gitignore")
        run_git(git_repo.root, "commit", "--quiet", "--message", "ignore logs")
        (git_repo.root / "build.log").write_text("log", encoding="utf-8")

        assert git_repo.status().clean


class TestStagingAndCommit:
    """Tests for add_paths_under_tree(), add_update(), commit_all() and clean()."""

    def test_add_paths_under_tree_stages_only_subtree(self, git_repo: Repository) -> None:
        (git_repo.root / "api").mkdir()
        (git_repo.root / "api" / "index.html").write_text("api", encoding="utf-8")
        (git_repo.root / "other.txt").write_text("other", encoding="utf-8")

        git_repo.add_paths_under_tree(git_repo.root, "api")
        git_repo.commit_all("add api")

        assert changed_files(git_repo.root) == ["api/index.html"]
        assert git_repo.status().untracked == {Path("other.txt")}

    def test_add_paths_under_tree_stages_removals(self, git_repo: Repository) -> None:
        (git_repo.root / "api").mkdir()
        (git_repo.root / "api" / "old.html").write_text("old", encoding="utf-8")
        git_repo.add_paths_under_tree(git_repo.root, "api")
        git_repo.commit_all("add api")

        (git_repo.root / "api" / "old.html").unlink()
        (git_repo.root / "api" / "new.html").write_text("new", encoding="utf-8")
        git_repo.add_paths_under_tree(git_repo.root, "api")
        git_repo.commit_all("replace api")

        assert sorted(changed_files(git_repo.root)) == ["api/new.html", "api/old.html"]
        assert run_git(git_repo.root, "ls-files", "api") == "api/new.html"

    def test_add_paths_under_missing_tree_is_noop(self, git_repo: Repository) -> None:
        git_repo.add_paths_under_tree(git_repo.root, "missing")

        assert git_repo.status().clean

    def test_commit_all_includes_tracked_modifications(self, git_repo: Repository) -> None:
        (git_repo.root / "README.md").write_text("changed\n", encoding="utf-8")
        (git_repo.root / "untracked.txt").write_text("x", encoding="utf-8")

        commit = git_repo.commit_all("update readme")

        assert commit == git_repo.head()
        assert changed_files(git_repo.root) == ["README.md"]
        assert run_git(git_repo.root, "log", "-1", "--format=%s") == "update readme"

    def test_commit_all_without_changes_raises(self, git_repo: Repository) -> None:
        head = git_repo.head()

        with pytest.raises(NothingToCommitError) as exc_info:
            git_repo.commit_all("nothing")

        assert exc_info.value.code == "NOTHING_TO_COMMIT"
        assert git_repo.head() == head

    def test_add_update_accepts_absolute_paths(self, git_repo: Repository) -> None:
        version = git_repo.root / "version.txt"
        version.write_text("1.4.1", encoding="utf-8")

        git_repo.add_update(version)

        assert run_git(git_repo.root, "diff", "--cached", "--name-only") == "version.txt"

    def test_clean_removes_untracked_and_ignored(self, git_repo: Repository) -> None:
        (git_repo.root / ".gitignore").write_text("*.log\n", encoding="utf-8")
        run_git(git_repo.root, "add", ".gitignore")
        run_git(git_repo.root, "commit", "--quiet", "--message", "ignore logs")
        (git_repo.root / "build.log").write_text("log", encoding="utf-8")
        (git_repo.root / "junk.txt").write_text("junk", encoding="utf-8")
        (git_repo.root / "tmp").mkdir()
        (git_repo.root / "tmp" / "x").write_text("x", encoding="utf-8")

        removed = git_repo.clean()

        assert removed == {Path("build.log"), Path("junk.txt"), Path("tmp")}
        assert not (git_repo.root / "build.log").exists()
        assert not (git_repo.root / "tmp").exists()
        assert (git_repo.root / "README.md").exists()
        assert git_repo.status().clean


class TestRefs:
    """Tests for tags and branch primitives."""

    def test_current_branch(self, git_repo: Repository) -> None:
        assert git_repo.current_branch() == "master"
        assert git_repo.has_local_branch("master")
        assert not git_repo.has_local_branch("missing")

    def test_tag_is_annotated_with_message(self, git_repo: Repository) -> None:
        git_repo.tag("v1.4.0", "Release of Demo 1.4.0")

        assert git_repo.has_tag("v1.4.0")
        assert git_repo.tag_message("v1.4.0") == "Release of Demo 1.4.0"
        assert run_git(git_repo.root, "cat-file", "-t", "v1.4.0") == "tag"

    def test_duplicate_tag_raises(self, git_repo: Repository) -> None:
        git_repo.tag("v1.4.0", "first")

        with pytest.raises(TagAlreadyExistsError) as exc_info:
            git_repo.tag("v1.4.0", "second")

        assert exc_info.value.code == "TAG_EXISTS"
        assert git_repo.tag_message("v1.4.0") == "first"

    def test_create_and_checkout_branch(self, git_repo: Repository) -> None:
        git_repo.create_branch("docs", "master")
        git_repo.checkout_branch("docs")

        assert git_repo.current_branch() == "docs"
        assert git_repo.branch_upstream("docs") is None

    def test_checkout_missing_branch_raises(self, git_repo: Repository) -> None:
        with pytest.raises(BranchNotFoundError):
            git_repo.checkout_branch("missing")

    def test_create_branch_from_unknown_start_raises(self, git_repo: Repository) -> None:
        with pytest.raises(GitCommandError) as exc_info:
            git_repo.create_branch("docs", "no-such-start")

        assert exc_info.value.returncode != 0
        assert exc_info.value.argv[:2] == ["git", "branch"]

    def test_set_upstream_config(self, git_repo: Repository) -> None:
        git_repo.create_branch("docs", "master")
        git_repo.set_upstream_config("docs", "origin")

        assert git_repo.branch_upstream("docs") == ("origin", "refs/heads/docs")

    def test_to_remote_ref(self) -> None:
        assert to_remote_ref("docs", "origin") == "refs/remotes/origin/docs"


class TestRemotes:
    """Tests for remote listing, fetch and push."""

    def test_no_remotes(self, git_repo: Repository) -> None:
        assert git_repo.list_remotes() == []

    def test_remotes_in_config_order(self, tmp_path: Path) -> None:
        root = init_repository(tmp_path / "repo")
        add_remote(root, "upstream", create_bare_remote(tmp_path / "upstream.git"))
        add_remote(root, "origin", create_bare_remote(tmp_path / "origin.git"))

        with Repository.open(root) as repo:
            remotes = repo.list_remotes()

        assert [r.name for r in remotes] == ["upstream", "origin"]
        assert remotes[0].url == str(tmp_path / "upstream.git")
        assert remotes[0].push_url == remotes[0].url

    def test_push_url_overrides_fetch_url(self, doc_repo: Repository, tmp_path: Path) -> None:
        run_git(doc_repo.root, "remote", "set-url", "--push", "origin", str(tmp_path / "push.git"))

        remote = doc_repo.remote("origin")

        assert remote.push_url == str(tmp_path / "push.git")
        assert remote.url != remote.push_url

    def test_unknown_remote_raises(self, git_repo: Repository) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            git_repo.remote("origin")

        assert exc_info.value.code == "REMOTE_NOT_FOUND"

    def test_push_and_fetch(self, doc_repo: Repository) -> None:
        doc_repo.create_branch("docs", "master")
        doc_repo.push("origin", ["refs/heads/docs:refs/heads/docs"])
        remote_path = Path(doc_repo.remote("origin").url)

        assert run_git(remote_path, "rev-parse", "refs/heads/docs") == doc_repo.head()

        doc_repo.fetch("origin")
        assert doc_repo.has_remote_branch("origin", "docs")

    def test_push_failure_raises_git_command_error(self, doc_repo: Repository) -> None:
        with pytest.raises(GitCommandError) as exc_info:
            doc_repo.push("origin", ["refs/heads/missing:refs/heads/missing"])

        assert exc_info.value.code == "GIT_FAILED"
        assert "missing" in exc_info.value.stderr

#!/usr/bin/env python3
"""
Basic gitrelease usage example.

Builds a throwaway project and documentation site in a temporary directory,
releases the project and publishes its API docs.
Run with: python examples/basic_usage.py
"""

import subprocess
import tempfile
from pathlib import Path

from gitrelease import (
    CredentialCache,
    DocPublishWorkflow,
    GitAuthenticator,
    GitReleaseError,
    PreconditionError,
    ReleaseWorkflow,
    RepositoryRegistry,
    StaticPrompt,
    VersionStore,
)


def git(cwd: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True)


def init(path: Path, files: dict[str, str]) -> Path:
    path.mkdir(parents=True)
    git(path, "init", "--quiet")
    git(path, "symbolic-ref", "HEAD", "refs/heads/master")
    git(path, "config", "user.name", "Example")
    git(path, "config", "user.email", "example@example.com")
    for name, content in files.items():
        (path / name).write_text(content, encoding="utf-8")
    git(path, "add", "--all")
    git(path, "commit", "--quiet", "--message", "Initial commit")
    return path


print("=== gitrelease Basic Usage Example ===\n")

with tempfile.TemporaryDirectory() as tmp:
    workspace = Path(tmp)
    project = init(workspace / "widgets", {"version.txt": "1.4.0", "README.md": "# widgets\n"})
    site = init(workspace / "site", {"index.html": "<html></html>\n"})
    remote = workspace / "site.git"
    git(workspace, "init", "--quiet", "--bare", str(remote))
    git(site, "remote", "add", "origin", str(remote))
    git(site, "push", "--quiet", "origin", "master")

    docs = workspace / "build" / "docs"
    docs.mkdir(parents=True)
    (docs / "index.html").write_text("<html>Widgets API</html>\n", encoding="utf-8")

    with RepositoryRegistry() as registry:
        registry.register("project", project)
        registry.register("site", site)

        # 1. A dirty working tree blocks the release
        print("1. Releasing a dirty repository...")
        (project / "notes.txt").write_text("todo", encoding="utf-8")
        try:
            with registry.exclusive("project") as repo:
                ReleaseWorkflow(repo, VersionStore.at_root(repo.root), "Widgets").release()
        except PreconditionError as e:
            print(f"   Caught PreconditionError: {e.code}")
        (project / "notes.txt").unlink()

        # 2. Release
        print("2. Releasing...")
        with registry.exclusive("project") as repo:
            result = ReleaseWorkflow(repo, VersionStore.at_root(repo.root), "Widgets").release()
        print(f"   New Release: Widgets {result.version} (tag {result.tag})")
        print(f"   Next version: {result.next_version}")

        # 3. Publish the API docs and push them
        print("3. Publishing API docs...")
        cache = CredentialCache(StaticPrompt({"username": "bot", "password": "token"}))
        try:
            with registry.exclusive("site") as repo:
                workflow = DocPublishWorkflow(repo)
                published = workflow.publish(
                    docs, branch="widgets", display_name="Widgets", version=result.version
                )
                remote_name = workflow.push("widgets", authenticator=GitAuthenticator(cache))
        except GitReleaseError as e:
            print(f"   Failed: {e}")
        else:
            print(f"   Branch {published.branch}: {published.resolution.kind.value}")
            print(f"   Files: {[str(p) for p in published.files]}")
            print(f"   Pushed to {remote_name}")
        finally:
            cache.ui.shutdown()

print("\n=== Example completed ===")

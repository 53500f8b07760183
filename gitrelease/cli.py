"""
Command line entry points.

Usage:
    gitrelease release --do-release
    gitrelease publish-docs --source build/docs --doc-repo ../site [--push]
    gitrelease version [--release]
"""

import argparse
import dataclasses
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from gitrelease.config import CREDENTIAL_SOURCES, ReleaseSettings
from gitrelease.credentials import CredentialCache, GitAuthenticator
from gitrelease.exceptions import GitReleaseError
from gitrelease.logging import configure_logging
from gitrelease.registry import RepositoryRegistry
from gitrelease.versions import VersionStore
from gitrelease.workflows import DocPublishWorkflow, ReleaseWorkflow

PROJECT_REPO = "project"
DOC_REPO = "api-doc"


def _cmd_release(
    args: argparse.Namespace, settings: ReleaseSettings, registry: RepositoryRegistry
) -> int:
    if args.do_release:
        settings = dataclasses.replace(settings, do_release=True)
    settings.require_release()

    registry.register(PROJECT_REPO, settings.repo_root)
    with registry.exclusive(PROJECT_REPO) as repo:
        versions = VersionStore(repo.root / settings.version_file)
        result = ReleaseWorkflow(repo, versions, settings.effective_display_name).release()

    print(f"New Release: {settings.project_name} {result.version}")
    print(f"Next version: {result.next_version}")
    return 0


def _cmd_publish_docs(
    args: argparse.Namespace, settings: ReleaseSettings, registry: RepositoryRegistry
) -> int:
    doc_repo = args.doc_repo or settings.require_api_doc_repo()
    version = args.version or VersionStore(settings.version_path).version(settings.do_release)
    branch = args.branch or settings.project_name

    registry.register(DOC_REPO, doc_repo)
    with registry.exclusive(DOC_REPO) as repo:
        workflow = DocPublishWorkflow(repo, default_start=settings.default_start)
        result = workflow.publish(
            args.source,
            branch=branch,
            display_name=settings.effective_display_name,
            version=version,
        )
        print(
            f"Published {len(result.files)} files to branch {result.branch} "
            f"({result.resolution.kind.value}) as {result.commit[:12]}"
        )

        if args.push:
            cache = CredentialCache(settings.credential_prompt())
            try:
                remote = workflow.push(branch, authenticator=GitAuthenticator(cache))
            finally:
                cache.ui.shutdown(wait=False)
            print(f"Pushed {branch} to {remote}")
    return 0


def _cmd_version(
    args: argparse.Namespace, settings: ReleaseSettings, registry: RepositoryRegistry
) -> int:
    print(VersionStore(settings.version_path).version(args.release or settings.do_release))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitrelease",
        description="Tag releases and publish API documentation with git",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More output (-vv shows git commands)"
    )
    parser.add_argument("--repo", type=Path, help="Project repository (default: cwd)")
    parser.add_argument("--project", help="Project name (default: repository directory name)")
    parser.add_argument("--display-name", help="Name used in tag and commit messages")
    parser.add_argument("--version-file", help="Version file relative to the repository root")
    parser.add_argument(
        "--credentials",
        choices=CREDENTIAL_SOURCES,
        help="Where credentials come from when a remote asks for them",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    release = commands.add_parser("release", help="Tag the current version and bump it")
    release.add_argument(
        "--do-release",
        action="store_true",
        help="Required opt-in; the release mutates the repository",
    )
    release.set_defaults(handler=_cmd_release)

    docs = commands.add_parser("publish-docs", help="Commit API docs into a branch")
    docs.add_argument("--source", type=Path, required=True, help="Generated documentation tree")
    docs.add_argument("--doc-repo", type=Path, help="Repository receiving the documentation")
    docs.add_argument("--branch", help="Target branch (default: project name)")
    docs.add_argument("--version", help="Version named in the commit message")
    docs.add_argument("--start-point", help="Start of the branch if it exists nowhere yet")
    docs.add_argument("--push", action="store_true", help="Push the branch to its upstream")
    docs.set_defaults(handler=_cmd_publish_docs)

    version = commands.add_parser("version", help="Print the project version")
    version.add_argument("--release", action="store_true", help="Print the release version")
    version.set_defaults(handler=_cmd_version)

    return parser


def _settings_from(args: argparse.Namespace) -> ReleaseSettings:
    settings = ReleaseSettings.from_env()
    overrides: dict[str, object] = {}
    if args.repo is not None:
        overrides["repo_root"] = args.repo
        if args.project is None and "GITRELEASE_PROJECT_NAME" not in os.environ:
            overrides["project_name"] = args.repo.resolve().name
    if args.project is not None:
        overrides["project_name"] = args.project
    if args.display_name is not None:
        overrides["display_name"] = args.display_name
    if args.version_file is not None:
        overrides["version_file"] = args.version_file
    if args.credentials is not None:
        overrides["credential_source"] = args.credentials
    if getattr(args, "start_point", None):
        overrides["default_start"] = args.start_point
    return dataclasses.replace(settings, **overrides)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    configure_logging(level=level)

    try:
        settings = _settings_from(args)
        with RepositoryRegistry() as registry:
            return args.handler(args, settings, registry)
    except GitReleaseError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

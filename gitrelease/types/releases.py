"""Workflow result models."""

from dataclasses import dataclass
from pathlib import Path

from gitrelease.types.branches import BranchResolution


@dataclass(frozen=True)
class ReleaseResult:
    """Result of a finalized release."""

    project: str
    version: str
    next_version: str
    tag: str
    commit: str


@dataclass(frozen=True)
class DocPublishResult:
    """Result of publishing a documentation tree into a branch."""

    branch: str
    resolution: BranchResolution
    commit: str
    files: tuple[Path, ...]

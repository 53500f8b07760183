"""Release-engineering workflows built on the repository primitives."""

from gitrelease.workflows.docs import DocPublishWorkflow
from gitrelease.workflows.release import ReleaseWorkflow

__all__ = [
    "ReleaseWorkflow",
    "DocPublishWorkflow",
]

"""gitrelease testing utilities.

Provides a scripted credential prompt and real-repository fixtures for
testing code that uses gitrelease.
"""

from gitrelease.testing.fixtures import (
    add_remote,
    commit_on_branch,
    create_bare_remote,
    create_credential_field,
    init_repository,
    run_git,
    write_files,
)
from gitrelease.testing.mock import MockCall, MockPrompt, MockResponse

__all__ = [
    # Mock prompt
    "MockPrompt",
    "MockCall",
    "MockResponse",
    # Helper functions
    "run_git",
    "write_files",
    "init_repository",
    "create_bare_remote",
    "add_remote",
    "commit_on_branch",
    "create_credential_field",
]

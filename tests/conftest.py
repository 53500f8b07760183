"""Shared fixtures for the gitrelease test suite."""

# Re-export the package fixtures for pytest discovery
from gitrelease.testing.conftest import (  # noqa: F401
    bare_remote,
    credential_cache,
    doc_repo,
    doc_source,
    git_repo,
    mock_prompt,
    ui_executor,
)

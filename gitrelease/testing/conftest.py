"""
Pytest plugin for gitrelease testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["gitrelease.testing.conftest"]

Or import the fixtures directly:

    from gitrelease.testing.fixtures import git_repo, mock_prompt
"""

# Re-export all fixtures for pytest auto-discovery
from gitrelease.testing.fixtures import (
    bare_remote,
    credential_cache,
    doc_repo,
    doc_source,
    git_repo,
    mock_prompt,
    ui_executor,
)

__all__ = [
    "git_repo",
    "bare_remote",
    "doc_repo",
    "doc_source",
    "mock_prompt",
    "ui_executor",
    "credential_cache",
]

"""Credential resolution for authenticated git operations."""

from gitrelease.credentials.askpass import PASSWORD_FIELD, USERNAME_FIELD, GitAuthenticator
from gitrelease.credentials.cache import CredentialCache, endpoint_key
from gitrelease.credentials.prompts import (
    ConsolePrompt,
    CredentialPrompt,
    EnvironmentPrompt,
    StaticPrompt,
)
from gitrelease.credentials.ui import UiExecutor

__all__ = [
    "CredentialCache",
    "endpoint_key",
    "CredentialPrompt",
    "ConsolePrompt",
    "EnvironmentPrompt",
    "StaticPrompt",
    "UiExecutor",
    "GitAuthenticator",
    "USERNAME_FIELD",
    "PASSWORD_FIELD",
]

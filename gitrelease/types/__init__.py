"""gitrelease type definitions.

This module exports all data model types used by the package.
"""

from gitrelease.types.branches import BranchResolution, ResolutionKind
from gitrelease.types.credentials import CredentialField, CredentialKind
from gitrelease.types.releases import DocPublishResult, ReleaseResult
from gitrelease.types.repos import RemoteDescriptor, RepoStatus

__all__ = [
    # Repository types
    "RemoteDescriptor",
    "RepoStatus",
    # Branch resolution
    "BranchResolution",
    "ResolutionKind",
    # Credential requests
    "CredentialField",
    "CredentialKind",
    # Workflow results
    "ReleaseResult",
    "DocPublishResult",
]

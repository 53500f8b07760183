"""Branch resolution result types."""

from dataclasses import dataclass
from enum import Enum


class ResolutionKind(Enum):
    """How the desired branch came to be checked out."""

    CHECKED_OUT_LOCAL = "checked_out_local"
    CREATED_TRACKING_FROM_REMOTE = "created_tracking_from_remote"
    CREATED_FRESH_FROM_DEFAULT = "created_fresh_from_default"


@dataclass(frozen=True)
class BranchResolution:
    """Outcome of a single checkout-or-create call.

    ``remote`` is None exactly when an existing local branch was checked out.
    """

    kind: ResolutionKind
    branch: str
    remote: str | None = None

    @classmethod
    def checked_out_local(cls, branch: str) -> "BranchResolution":
        return cls(ResolutionKind.CHECKED_OUT_LOCAL, branch)

    @classmethod
    def created_tracking(cls, branch: str, remote: str) -> "BranchResolution":
        return cls(ResolutionKind.CREATED_TRACKING_FROM_REMOTE, branch, remote)

    @classmethod
    def created_fresh(cls, branch: str, remote: str) -> "BranchResolution":
        return cls(ResolutionKind.CREATED_FRESH_FROM_DEFAULT, branch, remote)

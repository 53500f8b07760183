"""Credential request data models."""

from dataclasses import dataclass
from enum import Enum


class CredentialKind(Enum):
    """How a credential field is presented and read."""

    BOOLEAN = "boolean"  # toggle, false by default
    SECRET = "secret"  # never echoed, trimmed on read
    INFO = "info"  # display only, contributes no value


@dataclass(frozen=True)
class CredentialField:
    """A single named field of a credential request."""

    identity: str
    label: str
    kind: CredentialKind = CredentialKind.SECRET

    @property
    def carries_value(self) -> bool:
        """Whether the user is expected to supply a value for this field."""
        return self.kind is not CredentialKind.INFO

"""Repository-related data models."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class RemoteDescriptor:
    """A configured remote, as read from git config."""

    name: str
    fetch_urls: tuple[str, ...]
    push_urls: tuple[str, ...] = field(default=())

    @property
    def url(self) -> str | None:
        """The first fetch URL, if any."""
        return self.fetch_urls[0] if self.fetch_urls else None

    @property
    def push_url(self) -> str | None:
        """The URL git pushes to: pushurl when configured, else the fetch URL."""
        if self.push_urls:
            return self.push_urls[0]
        return self.url


@dataclass(frozen=True)
class RepoStatus:
    """Working tree status relative to HEAD."""

    clean: bool
    untracked: frozenset[Path]
    changed: frozenset[Path]

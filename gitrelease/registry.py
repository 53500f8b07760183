"""
Named repository handles with exclusive use.

A :class:`RepositoryRegistry` is built once per process scope and passed to
the workflows. Each registered name maps to one lazily opened
:class:`~gitrelease.git.Repository` and one lock, so at most one workflow
touches a given repository at a time.
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeVar

from gitrelease.exceptions import ConfigurationError
from gitrelease.git import Repository
from gitrelease.logging import get_logger

T = TypeVar("T")

logger = get_logger()


@dataclass
class _Entry:
    path: Path
    lock: threading.Lock = field(default_factory=threading.Lock)
    repository: Repository | None = None


class RepositoryRegistry:
    """
    Registry of named, exclusively used repositories.

    Example:
        ```python
        from gitrelease.registry import RepositoryRegistry

        with RepositoryRegistry() as registry:
            registry.register("main", "./my-project")
            with registry.exclusive("main") as repo:
                print(repo.status())
        ```
    """

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}
        self._guard = threading.Lock()
        self._closed = False

    def register(self, name: str, path: str | Path) -> None:
        """
        Register ``path`` under ``name``. Re-registering the same path is a no-op.

        Raises:
            ConfigurationError: If ``name`` is already bound to another path
        """
        resolved = Path(path).expanduser().resolve()
        with self._guard:
            existing = self._entries.get(name)
            if existing is None:
                self._entries[name] = _Entry(resolved)
            elif existing.path != resolved:
                raise ConfigurationError(
                    f"Repository {name!r} is already registered for {existing.path}, "
                    f"cannot register it again for {resolved}"
                )

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def get(self, name: str) -> Repository:
        """
        Get the handle registered as ``name``, opening it on first reference.

        The handle is not locked; use :meth:`exclusive` for mutations.

        Raises:
            ConfigurationError: If ``name`` was never registered
            RepositoryNotFoundError: If the registered path is not a repository
        """
        entry = self._entry(name)
        with self._guard:
            if entry.repository is None:
                entry.repository = Repository.open(entry.path)
            return entry.repository

    @contextmanager
    def exclusive(self, name: str) -> Iterator[Repository]:
        """
        Hold the exclusive-use gate of ``name`` for the duration of the block.

        A second caller for the same name blocks until the first one leaves.
        """
        entry = self._entry(name)
        with entry.lock:
            logger.debug("acquired repository %s", name)
            try:
                yield self.get(name)
            finally:
                logger.debug("released repository %s", name)

    def with_exclusive_use(self, name: str, body: Callable[[Repository], T]) -> T:
        """Run ``body(repository)`` while holding the gate of ``name``."""
        with self.exclusive(name) as repository:
            return body(repository)

    def close(self) -> None:
        """Close every opened handle. Calling it again is a no-op."""
        with self._guard:
            if self._closed:
                return
            self._closed = True
            for entry in self._entries.values():
                if entry.repository is not None:
                    entry.repository.close()

    def __enter__(self) -> "RepositoryRegistry":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _entry(self, name: str) -> _Entry:
        if self._closed:
            raise ConfigurationError("The repository registry is closed")
        try:
            return self._entries[name]
        except KeyError:
            raise ConfigurationError(f"No repository registered as {name!r}") from None


__all__ = ["RepositoryRegistry"]

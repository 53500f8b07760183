"""Stored project version and next-version computation."""

from pathlib import Path

from gitrelease.exceptions import InvalidVersionError, VersionFileNotFoundError
from gitrelease.logging import get_logger

VERSION_FILE = "version.txt"
DEFAULT_SUFFIX = "SNAPSHOT"

logger = get_logger()


def parse_version(version: str) -> tuple[int, ...]:
    """
    Split a dot-separated numeric version into its components.

    Raises:
        InvalidVersionError: If any component is not a non-negative integer
    """
    parts = version.strip().split(".")
    if not all(part.isdigit() and part.isascii() for part in parts):
        raise InvalidVersionError(version)
    return tuple(int(part) for part in parts)


def increment_version(version: str) -> str:
    """
    Increment the last component of ``version`` by one.

    The prefix is kept verbatim, so ``"1.02.9"`` becomes ``"1.02.10"``.

    Raises:
        InvalidVersionError: If ``version`` is not dot-separated integers
    """
    version = version.strip()
    parse_version(version)
    prefix, sep, last = version.rpartition(".")
    return f"{prefix}{sep}{int(last) + 1}"


class VersionStore:
    """
    A single-line version file, e.g. ``version.txt`` holding ``1.4.0``.

    Example:
        ```python
        from gitrelease.versions import VersionStore

        store = VersionStore.at_root("./my-project")
        old, new = store.bump()  # "1.4.0", "1.4.1"
        ```
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @classmethod
    def at_root(cls, root: str | Path, file_name: str = VERSION_FILE) -> "VersionStore":
        return cls(Path(root) / file_name)

    def read(self) -> str:
        """
        Read the base version (first line, surrounding whitespace removed).

        Raises:
            VersionFileNotFoundError: If the file is missing or unreadable
            InvalidVersionError: If the file is empty
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise VersionFileNotFoundError(self.path, exc.strerror or str(exc)) from exc
        lines = text.strip().splitlines()
        if not lines:
            raise InvalidVersionError(text)
        return lines[0].strip()

    def write(self, version: str) -> None:
        """Overwrite the file with ``version``."""
        self.path.write_text(version, encoding="utf-8")

    def next_version(self) -> str:
        return increment_version(self.read())

    def bump(self) -> tuple[str, str]:
        """
        Replace the stored version with its increment.

        Returns:
            ``(previous, next)`` versions
        """
        current = self.read()
        following = increment_version(current)
        self.write(following)
        logger.info("version in %s set to %s", self.path.name, following)
        return current, following

    def version(self, release: bool, suffix: str = DEFAULT_SUFFIX) -> str:
        """
        Get the effective project version.

        Args:
            release: True for a release build, which uses the bare base version
            suffix: Qualifier appended to development versions

        Returns:
            ``"1.4.0"`` for releases, ``"1.4.0-SNAPSHOT"`` otherwise
        """
        base = self.read()
        if release or not suffix:
            return base
        return f"{base}-{suffix}"


__all__ = ["VersionStore", "increment_version", "parse_version", "VERSION_FILE"]

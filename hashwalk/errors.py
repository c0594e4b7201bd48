"""Exception hierarchy shared by the traversal strategies and the CLI."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from hashwalk.scan.compare import MappingDiff


class HashwalkError(Exception):
    """Base class for every failure surfaced by a hashing run."""


class TraversalError(HashwalkError):
    """Raised when the directory tree cannot be walked."""

    def __init__(self, message: str, *, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class FileReadError(HashwalkError):
    """Raised when a discovered file cannot be opened or fully read."""

    def __init__(self, message: str, *, path: Path | str) -> None:
        super().__init__(message)
        self.path = Path(path)


class CancellationError(HashwalkError):
    """Raised by a pipeline role that unwound because the run was cancelled."""


class ConsistencyError(HashwalkError):
    """Raised when the sequential and parallel mappings disagree."""

    def __init__(self, message: str, *, diff: "MappingDiff") -> None:
        super().__init__(message)
        self.diff = diff


class ArtifactError(HashwalkError):
    """Raised when a result artifact cannot be written or read back."""

    def __init__(self, message: str, *, path: Path | str) -> None:
        super().__init__(message)
        self.path = Path(path)

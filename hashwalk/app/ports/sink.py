"""Result sink port interface for persisting mappings."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from hashwalk.app.ports.scanner import ResultMapping


class ResultSinkPort(Protocol):
    """Port interface for durable result artifacts.

    Side effects: Reads/writes files (offline).
    """

    def write(self, path: Path, mapping: Mapping[str, bytes]) -> Path:
        """Persist ``mapping`` at ``path``.

        Args:
            path: Artifact destination
            mapping: Complete result mapping

        Returns:
            Path of the written artifact

        Raises:
            ArtifactError: If the artifact cannot be written
        """
        ...

    def read(self, path: Path) -> ResultMapping:
        """Load a previously written artifact.

        Args:
            path: Artifact location

        Returns:
            Parsed result mapping

        Raises:
            ArtifactError: If the artifact cannot be opened
            ValueError: If the content is not a valid artifact
        """
        ...

    def discard(self, path: Path) -> bool:
        """Remove an artifact that must no longer be trusted.

        Args:
            path: Artifact location

        Returns:
            True if a file was removed
        """
        ...

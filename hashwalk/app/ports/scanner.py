"""Scanner port interface for traversal strategies."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

ResultMapping = dict[str, bytes]


class ScannerPort(Protocol):
    """Port interface for producing a path → fingerprint mapping.

    Implementations either return the complete mapping or raise; a partial
    mapping is never returned.

    Side effects: Reads files under ``root`` (offline).
    """

    name: str

    def scan(self, root: Path) -> ResultMapping:
        """Fingerprint every regular file under ``root``.

        Args:
            root: Directory (or single file) to traverse

        Returns:
            Mapping of canonical slash-separated key to fingerprint bytes
        """
        ...

"""Path utilities for directory traversal and canonical keys."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from hashwalk.errors import TraversalError

logger = logging.getLogger(__name__)

SymlinkPolicy = Literal["skip", "follow", "error"]
SYMLINK_POLICIES: tuple[SymlinkPolicy, ...] = ("skip", "follow", "error")


@dataclass(frozen=True, slots=True)
class DiscoveredFile:
    """A regular file found during traversal."""

    path: Path
    key: str


def canonical_key(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` with forward-slash separators."""
    try:
        relative = path.relative_to(root)
    except ValueError:
        relative = path
    return relative.as_posix()


def iter_files(root: Path, *, symlinks: SymlinkPolicy = "skip") -> Iterator[DiscoveredFile]:
    """Yield every regular file under ``root`` depth-first.

    Entries within a directory are visited in lexical order, so the sequence
    is stable for a fixed tree. Sockets, FIFOs and device nodes are skipped.

    Args:
        root: Directory to traverse, or a single regular file
        symlinks: ``skip`` ignores symlinks, ``follow`` yields symlinks that
            point at regular files (symlinked directories are never entered),
            ``error`` raises on the first symlink

    Yields:
        DiscoveredFile objects as they are found

    Raises:
        TraversalError: If ``root`` is missing or a directory cannot be listed
    """
    if symlinks not in SYMLINK_POLICIES:
        raise ValueError(f"Unknown symlink policy: {symlinks!r}")

    root = Path(root)
    try:
        root_is_dir = root.is_dir()
        root_is_file = not root_is_dir and root.is_file()
    except OSError as exc:
        raise TraversalError(f"Cannot stat root {root}: {exc}", path=root) from exc

    if root_is_file:
        yield DiscoveredFile(path=root, key=root.name)
        return

    if not root_is_dir:
        raise TraversalError(f"Path not found: {root}", path=root)

    stack: list[Path] = [root]
    while stack:
        directory = stack.pop()
        try:
            with os.scandir(directory) as scanner:
                entries = sorted(scanner, key=lambda entry: entry.name)
        except OSError as exc:
            raise TraversalError(
                f"Cannot read directory {directory}: {exc}", path=directory
            ) from exc

        subdirectories: list[Path] = []
        for entry in entries:
            entry_path = Path(entry.path)

            if entry.is_symlink():
                if symlinks == "error":
                    raise TraversalError(f"Symlink encountered: {entry_path}", path=entry_path)
                if symlinks == "follow" and entry.is_file(follow_symlinks=True):
                    yield DiscoveredFile(path=entry_path, key=canonical_key(entry_path, root))
                else:
                    logger.debug("Skipping symlink %s", entry_path)
                continue

            if entry.is_dir(follow_symlinks=False):
                subdirectories.append(entry_path)
            elif entry.is_file(follow_symlinks=False):
                yield DiscoveredFile(path=entry_path, key=canonical_key(entry_path, root))
            else:
                logger.debug("Skipping non-regular file %s", entry_path)

        stack.extend(reversed(subdirectories))

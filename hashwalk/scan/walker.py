"""Single-threaded baseline traversal."""

from __future__ import annotations

import logging
from pathlib import Path

from hashwalk.utils.artifacts import ResultMapping
from hashwalk.utils.hashing import (
    DEFAULT_ALGORITHM,
    DEFAULT_CHUNK_SIZE,
    FileHasher,
    hash_file,
    new_digest,
)
from hashwalk.utils.paths import SymlinkPolicy, iter_files

logger = logging.getLogger(__name__)


def walk(
    root: Path,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    algorithm: str = DEFAULT_ALGORITHM,
    symlinks: SymlinkPolicy = "skip",
    hasher: FileHasher = hash_file,
) -> ResultMapping:
    """Hash every regular file under ``root`` one at a time.

    Args:
        root: Root directory (or single file) to fingerprint
        chunk_size: Read size passed to the hasher
        algorithm: hashlib algorithm name
        symlinks: Symlink policy, see :func:`hashwalk.utils.paths.iter_files`
        hasher: Single-path hasher, replaceable for fault injection

    Returns:
        Complete mapping of canonical key to fingerprint

    Raises:
        TraversalError: If the tree cannot be walked
        FileReadError: If any file cannot be read
    """
    digest = new_digest(algorithm)
    mapping: ResultMapping = {}

    for discovered in iter_files(Path(root), symlinks=symlinks):
        mapping[discovered.key] = hasher(discovered.path, digest, chunk_size=chunk_size)

    logger.debug("Sequential walk of %s hashed %d files", root, len(mapping))
    return mapping

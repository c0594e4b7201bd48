"""Utility modules for hashing, traversal and artifact persistence."""

from hashwalk.utils.hashing import (
    DEFAULT_ALGORITHM,
    DEFAULT_CHUNK_SIZE,
    Digest,
    HashlibDigest,
    hash_file,
    new_digest,
)
from hashwalk.utils.paths import DiscoveredFile, SymlinkPolicy, iter_files

__all__ = [
    "DEFAULT_ALGORITHM",
    "DEFAULT_CHUNK_SIZE",
    "Digest",
    "DiscoveredFile",
    "HashlibDigest",
    "SymlinkPolicy",
    "hash_file",
    "iter_files",
    "new_digest",
]

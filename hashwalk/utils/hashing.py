"""Hashing utilities for deterministic file fingerprints."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Protocol

from hashwalk.errors import FileReadError

DEFAULT_ALGORITHM = "md5"
DEFAULT_CHUNK_SIZE = 65536


class Digest(Protocol):
    """Resettable accumulator producing a fixed-length fingerprint."""

    def reset(self) -> None: ...

    def update(self, chunk: bytes) -> None: ...

    def finalize(self) -> bytes: ...


class FileHasher(Protocol):
    """Callable signature shared by :func:`hash_file` and test doubles."""

    def __call__(
        self, path: Path, digest: Digest | None = None, *, chunk_size: int = ...
    ) -> bytes: ...


class HashlibDigest:
    """:class:`Digest` backed by a ``hashlib`` constructor.

    ``finalize`` may be called once per accumulation; folding more bytes or
    finalizing again requires an explicit :meth:`reset`.
    """

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM) -> None:
        validate_algorithm(algorithm)
        self.algorithm = algorithm
        self._state = hashlib.new(algorithm)
        self._finalized = False

    @property
    def digest_size(self) -> int:
        return self._state.digest_size

    def reset(self) -> None:
        self._state = hashlib.new(self.algorithm)
        self._finalized = False

    def update(self, chunk: bytes) -> None:
        if self._finalized:
            raise RuntimeError("Digest already finalized; call reset() before reuse")
        self._state.update(chunk)

    def finalize(self) -> bytes:
        if self._finalized:
            raise RuntimeError("Digest already finalized; call reset() before reuse")
        self._finalized = True
        return self._state.digest()


def validate_algorithm(algorithm: str) -> str:
    """Return ``algorithm`` if hashlib can construct it, else raise ``ValueError``."""
    try:
        hashlib.new(algorithm)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Unsupported hash algorithm: {algorithm!r}") from exc
    return algorithm


def new_digest(algorithm: str = DEFAULT_ALGORITHM) -> HashlibDigest:
    """Create a fresh digest accumulator."""
    return HashlibDigest(algorithm)


def hash_file(
    path: Path,
    digest: Digest | None = None,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> bytes:
    """Compute the fingerprint of a file's full content.

    Args:
        path: File to read
        digest: Accumulator to reuse; it is reset before any bytes are fed.
            A fresh md5 digest is created when omitted.
        chunk_size: Size of chunks to read (default 64KB)

    Returns:
        Raw fingerprint bytes

    Raises:
        FileReadError: If the file cannot be opened or a read fails
        ValueError: If ``chunk_size`` is not positive
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    if digest is None:
        digest = new_digest()
    else:
        digest.reset()

    try:
        with open(path, "rb") as handle:
            for chunk in iter(lambda: handle.read(chunk_size), b""):
                digest.update(chunk)
    except OSError as exc:
        raise FileReadError(f"Cannot read {path}: {exc}", path=path) from exc

    return digest.finalize()


def compute_hex_digest(
    path: Path,
    *,
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> str:
    """Return the lowercase hexadecimal fingerprint of ``path``."""
    return hash_file(path, new_digest(algorithm), chunk_size=chunk_size).hex()

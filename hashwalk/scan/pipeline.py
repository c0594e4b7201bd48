"""Concurrent traversal/hash/aggregate pipeline.

One producer walks the tree and feeds a bounded path queue, a fixed pool of
workers hashes paths into a bounded result queue, and a single aggregator
owns the result mapping. All roles share one :class:`RunContext`: the first
failure cancels every role and becomes the outcome of the run.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Any

from hashwalk.errors import CancellationError
from hashwalk.scan.channels import BoundedQueue, RunContext
from hashwalk.utils.artifacts import ResultMapping
from hashwalk.utils.hashing import (
    DEFAULT_ALGORITHM,
    DEFAULT_CHUNK_SIZE,
    FileHasher,
    hash_file,
    new_digest,
)
from hashwalk.utils.paths import DiscoveredFile, SymlinkPolicy, iter_files

logger = logging.getLogger(__name__)


def default_workers() -> int:
    """Number of hashing workers when none is configured."""
    return max(1, os.cpu_count() or 1)


def _run_role(context: RunContext, role: str, target: Callable[..., None], *args: Any) -> None:
    """Execute one pipeline role, reporting any failure to ``context``."""
    logger.debug("%s started", role)
    try:
        target(*args)
    except CancellationError as exc:
        context.fail(exc)
        logger.debug("%s unwound after cancellation", role)
    except Exception as exc:  # noqa: BLE001 - every role failure cancels the run
        if context.fail(exc):
            logger.debug("%s failed first: %s", role, exc)
        else:
            logger.debug("%s failed after cancellation: %s", role, exc)
    else:
        logger.debug("%s finished", role)


def run_pipeline(
    root: Path,
    *,
    workers: int | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    algorithm: str = DEFAULT_ALGORITHM,
    symlinks: SymlinkPolicy = "skip",
    hasher: FileHasher = hash_file,
    context: RunContext | None = None,
) -> ResultMapping:
    """Hash every regular file under ``root`` with a bounded worker pool.

    Args:
        root: Root directory (or single file) to fingerprint
        workers: Concurrency degree P; also the capacity of both queues
            (default: ``os.cpu_count()``)
        chunk_size: Read size passed to the hasher
        algorithm: hashlib algorithm name; each worker owns its own digest
        symlinks: Symlink policy, see :func:`hashwalk.utils.paths.iter_files`
        hasher: Single-path hasher, replaceable for fault injection
        context: Cancellation context; pass one to cancel the run externally

    Returns:
        Complete mapping of canonical key to fingerprint

    Raises:
        TraversalError: If the producer could not walk the tree
        FileReadError: If a worker could not read a file
        CancellationError: If the run was cancelled externally
    """
    degree = default_workers() if workers is None else workers
    if degree < 1:
        raise ValueError(f"workers must be positive, got {degree}")

    # Validate eagerly so a bad name fails before any thread starts.
    new_digest(algorithm)

    root = Path(root)
    ctx = context if context is not None else RunContext()
    paths: BoundedQueue[DiscoveredFile] = BoundedQueue(degree, ctx)
    results: BoundedQueue[tuple[str, bytes]] = BoundedQueue(degree, ctx)
    mapping: ResultMapping = {}

    def produce() -> None:
        try:
            for discovered in iter_files(root, symlinks=symlinks):
                paths.put(discovered)
        finally:
            paths.close()

    def work() -> None:
        digest = new_digest(algorithm)
        for discovered in paths:
            fingerprint = hasher(discovered.path, digest, chunk_size=chunk_size)
            results.put((discovered.key, fingerprint))

    def aggregate() -> None:
        for key, fingerprint in results:
            mapping[key] = fingerprint

    with ThreadPoolExecutor(
        max_workers=degree + 2, thread_name_prefix="hashwalk"
    ) as executor:
        producer = executor.submit(_run_role, ctx, "producer", produce)
        aggregator = executor.submit(_run_role, ctx, "aggregator", aggregate)
        pool: list[Future[None]] = [
            executor.submit(_run_role, ctx, f"worker-{index}", work)
            for index in range(degree)
        ]

        # Workers only exit once the path queue is closed and drained or the
        # run is cancelled, so closing here cannot drop a result.
        wait(pool)
        results.close()
        wait([producer, aggregator])

    error = ctx.error
    if error is not None:
        raise error

    logger.debug("Pipeline over %s hashed %d files with %d workers", root, len(mapping), degree)
    return mapping

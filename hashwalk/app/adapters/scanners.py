"""Scanner adapters bridging the traversal strategies into application ports."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from hashwalk.app.ports import ResultMapping, ScannerPort
from hashwalk.scan.channels import RunContext
from hashwalk.scan.pipeline import run_pipeline
from hashwalk.scan.walker import walk
from hashwalk.utils.hashing import DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE
from hashwalk.utils.paths import SymlinkPolicy

logger = logging.getLogger(__name__)


class SequentialScanner(ScannerPort):
    """Adapter running the single-threaded baseline walk."""

    name = "sequential"

    def __init__(
        self,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        algorithm: str = DEFAULT_ALGORITHM,
        symlinks: SymlinkPolicy = "skip",
    ) -> None:
        self._chunk_size = chunk_size
        self._algorithm = algorithm
        self._symlinks = symlinks

    def scan(self, root: Path) -> ResultMapping:
        return walk(
            root,
            chunk_size=self._chunk_size,
            algorithm=self._algorithm,
            symlinks=self._symlinks,
        )


class ParallelScanner(ScannerPort):
    """Adapter running the worker-pool pipeline with an optional deadline."""

    name = "parallel"

    def __init__(
        self,
        *,
        workers: int | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        algorithm: str = DEFAULT_ALGORITHM,
        symlinks: SymlinkPolicy = "skip",
        timeout_seconds: float | None = None,
    ) -> None:
        self.workers = workers
        self._chunk_size = chunk_size
        self._algorithm = algorithm
        self._symlinks = symlinks
        self._timeout_seconds = timeout_seconds

    def scan(self, root: Path) -> ResultMapping:
        context = RunContext()
        timer: threading.Timer | None = None
        if self._timeout_seconds is not None:
            timer = threading.Timer(
                self._timeout_seconds,
                context.cancel,
                kwargs={"reason": f"timed out after {self._timeout_seconds}s"},
            )
            timer.daemon = True
            timer.start()

        try:
            return run_pipeline(
                root,
                workers=self.workers,
                chunk_size=self._chunk_size,
                algorithm=self._algorithm,
                symlinks=self._symlinks,
                context=context,
            )
        finally:
            if timer is not None:
                timer.cancel()

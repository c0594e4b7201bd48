"""Filesystem-backed result sink implementation."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from hashwalk.app.ports import ResultMapping, ResultSinkPort
from hashwalk.errors import ArtifactError
from hashwalk.utils.artifacts import atomic_write_artifact, read_artifact

logger = logging.getLogger(__name__)


class JSONResultSink(ResultSinkPort):
    """Adapter that stores mappings as sorted, hex-encoded JSON objects."""

    def write(self, path: Path, mapping: Mapping[str, bytes]) -> Path:
        try:
            return atomic_write_artifact(Path(path), mapping)
        except OSError as exc:
            raise ArtifactError(f"Cannot write artifact {path}: {exc}", path=path) from exc

    def read(self, path: Path) -> ResultMapping:
        try:
            return read_artifact(Path(path))
        except OSError as exc:
            raise ArtifactError(f"Cannot read artifact {path}: {exc}", path=path) from exc

    def discard(self, path: Path) -> bool:
        target = Path(path)
        # Only a file at the destination can be a stale artifact.
        if not (target.is_file() or target.is_symlink()):
            return False
        try:
            target.unlink()
        except FileNotFoundError:
            return False
        logger.warning("Discarded stale artifact %s", target)
        return True

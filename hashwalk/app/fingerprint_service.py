"""Fingerprint run orchestration built on application ports."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from hashwalk.app.ports import ResultMapping, ResultSinkPort, ScannerPort
from hashwalk.errors import ConsistencyError
from hashwalk.scan.compare import MappingDiff, diff_mappings

logger = logging.getLogger(__name__)

StageStatus = Literal["pending", "completed", "skipped", "failed"]


@dataclass(slots=True)
class PipelineStage:
    """Represents the status of a run phase."""

    name: str
    status: StageStatus = "pending"
    detail: str | None = None
    duration_seconds: float | None = None
    metrics: dict[str, Any] | None = None


class StrategyResult(BaseModel):
    """Outcome of one traversal strategy."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    strategy: str
    artifact_path: Path
    file_count: int
    mapping: ResultMapping = Field(default_factory=dict, exclude=True)


class FingerprintRunResult(BaseModel):
    """Summary of a full run over both strategies."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    root: Path
    results: list[StrategyResult] = Field(default_factory=list)
    stages: list[PipelineStage] = Field(default_factory=list)
    diff: MappingDiff | None = None

    @property
    def consistent(self) -> bool:
        return self.diff is not None and self.diff.identical


class FingerprintService:
    """Run traversal strategies and persist their mappings without direct I/O."""

    def __init__(
        self,
        *,
        sequential_scanner: ScannerPort,
        parallel_scanner: ScannerPort,
        sink: ResultSinkPort,
    ) -> None:
        self._sequential = sequential_scanner
        self._parallel = parallel_scanner
        self._sink = sink
        self._scanners: dict[str, ScannerPort] = {
            sequential_scanner.name: sequential_scanner,
            parallel_scanner.name: parallel_scanner,
        }

    @property
    def strategies(self) -> list[str]:
        return list(self._scanners)

    @contextmanager
    def _stage(
        self,
        stages: list[PipelineStage],
        name: str,
    ) -> Iterator[PipelineStage]:
        """Context manager to standardize stage error handling."""

        stage = PipelineStage(name=name)
        stages.append(stage)
        start_time = time.monotonic()
        try:
            yield stage
        except Exception as exc:
            stage.status = "failed"
            stage.detail = str(exc)
            raise
        else:
            if stage.status == "pending":
                stage.status = "completed"
        finally:
            stage.duration_seconds = time.monotonic() - start_time

    def run(
        self,
        root: Path,
        *,
        single_artifact: Path,
        parallel_artifact: Path,
        stages: list[PipelineStage] | None = None,
    ) -> FingerprintRunResult:
        """Fingerprint ``root`` with both strategies and verify they agree.

        The sequential baseline runs first; a failure in either strategy
        aborts the run before the next one starts. A failed strategy
        discards the artifact it would have written, and a failed baseline
        also discards the parallel destination. Pass ``stages`` to inspect
        stage status when the run raises.

        Raises:
            TraversalError: If the tree cannot be walked
            FileReadError: If a file cannot be read
            ArtifactError: If an artifact cannot be written
            CancellationError: If the parallel run was cancelled
            ConsistencyError: If the two mappings differ
        """
        stages = stages if stages is not None else []
        try:
            sequential = self._run_strategy(self._sequential, root, single_artifact, stages)
        except Exception:
            self._sink.discard(parallel_artifact)
            raise
        parallel = self._run_strategy(self._parallel, root, parallel_artifact, stages)
        diff = self._verify(sequential, parallel, stages)

        logger.info(
            "Fingerprinted %d files under %s; artifacts %s and %s",
            sequential.file_count,
            root,
            sequential.artifact_path,
            parallel.artifact_path,
        )

        return FingerprintRunResult(
            root=root,
            results=[sequential, parallel],
            stages=stages,
            diff=diff,
        )

    def scan(
        self,
        strategy: str,
        root: Path,
        *,
        artifact: Path,
        stages: list[PipelineStage] | None = None,
    ) -> StrategyResult:
        """Fingerprint ``root`` with a single named strategy."""
        try:
            scanner = self._scanners[strategy]
        except KeyError:
            raise ValueError(
                f"Unknown strategy {strategy!r}; expected one of {', '.join(self._scanners)}"
            ) from None
        return self._run_strategy(scanner, root, artifact, stages if stages is not None else [])

    def compare(self, left: Path, right: Path) -> MappingDiff:
        """Diff two persisted artifacts as mappings."""
        return diff_mappings(self._sink.read(left), self._sink.read(right))

    # ------------------------------------------------------------------#
    # Internal helpers
    # ------------------------------------------------------------------#

    def _run_strategy(
        self,
        scanner: ScannerPort,
        root: Path,
        artifact: Path,
        stages: list[PipelineStage],
    ) -> StrategyResult:
        with self._stage(stages, scanner.name) as stage:
            start_time = time.monotonic()
            try:
                mapping = scanner.scan(root)
                elapsed = time.monotonic() - start_time
                written = self._sink.write(artifact, mapping)
            except Exception:
                # An artifact left over from an earlier run must not pass
                # for the output of this failed one.
                self._sink.discard(artifact)
                raise

            stage.detail = f"{len(mapping)} files hashed; artifact stored at {written}"
            stage.metrics = {
                "file_count": len(mapping),
                "files_per_second": len(mapping) / elapsed if elapsed > 0 else 0.0,
            }
            return StrategyResult(
                strategy=scanner.name,
                artifact_path=written,
                file_count=len(mapping),
                mapping=mapping,
            )

    def _verify(
        self,
        baseline: StrategyResult,
        candidate: StrategyResult,
        stages: list[PipelineStage],
    ) -> MappingDiff:
        with self._stage(stages, "verify") as stage:
            diff = diff_mappings(baseline.mapping, candidate.mapping)
            if not diff.identical:
                raise ConsistencyError(
                    f"{candidate.strategy} result differs from {baseline.strategy}: "
                    f"{diff.summary()}",
                    diff=diff,
                )
            stage.detail = diff.summary()
            return diff

"""Tests for the fingerprint service and application wiring."""

import json
from pathlib import Path

import pytest

from hashwalk.app.adapters import JSONResultSink, ParallelScanner, SequentialScanner
from hashwalk.app.fingerprint_service import FingerprintService, PipelineStage
from hashwalk.bootstrap import bootstrap_application
from hashwalk.errors import ArtifactError, CancellationError, ConsistencyError, TraversalError

HELLO_MD5 = "5d41402abc4b2a76b9719d911017c592"


class _StaticScanner:
    """Scanner double returning a fixed mapping."""

    def __init__(self, name: str, mapping: dict[str, bytes]) -> None:
        self.name = name
        self._mapping = mapping

    def scan(self, root: Path) -> dict[str, bytes]:
        return dict(self._mapping)


class _UnwritableSink(JSONResultSink):
    """Sink double whose writes always fail."""

    def write(self, path: Path, mapping) -> Path:
        raise ArtifactError(f"Cannot write artifact {path}: disk full", path=path)


def _service(**overrides) -> FingerprintService:
    return FingerprintService(
        sequential_scanner=overrides.get("sequential", SequentialScanner()),
        parallel_scanner=overrides.get("parallel", ParallelScanner(workers=3)),
        sink=overrides.get("sink", JSONResultSink()),
    )


def test_run_writes_both_artifacts(sample_tree: Path, temp_dir: Path):
    single = temp_dir / "out" / "result_single.json"
    parallel = temp_dir / "out" / "result_parallels.json"

    result = _service().run(sample_tree, single_artifact=single, parallel_artifact=parallel)

    assert result.consistent
    assert [item.strategy for item in result.results] == ["sequential", "parallel"]
    assert all(item.file_count == 2 for item in result.results)
    assert single.read_bytes() == parallel.read_bytes()
    assert [stage.name for stage in result.stages] == ["sequential", "parallel", "verify"]
    assert all(stage.status == "completed" for stage in result.stages)
    assert result.stages[0].metrics["file_count"] == 2


def test_run_missing_root_leaves_no_artifact(temp_dir: Path):
    single = temp_dir / "result_single.json"
    parallel = temp_dir / "result_parallels.json"
    # stale output from an earlier run
    single.write_text("{}\n", encoding="utf-8")
    parallel.write_text("{}\n", encoding="utf-8")
    stages: list[PipelineStage] = []

    with pytest.raises(TraversalError):
        _service().run(
            temp_dir / "missing",
            single_artifact=single,
            parallel_artifact=parallel,
            stages=stages,
        )

    assert not single.exists()
    assert not parallel.exists()
    assert [(stage.name, stage.status) for stage in stages] == [("sequential", "failed")]


def test_failed_write_discards_stale_artifact(sample_tree: Path, temp_dir: Path):
    single = temp_dir / "result_single.json"
    parallel = temp_dir / "result_parallels.json"
    single.write_text(json.dumps({"old.txt": "00"}), encoding="utf-8")
    parallel.write_text(json.dumps({"old.txt": "00"}), encoding="utf-8")
    stages: list[PipelineStage] = []

    with pytest.raises(ArtifactError, match="disk full"):
        _service(sink=_UnwritableSink()).run(
            sample_tree,
            single_artifact=single,
            parallel_artifact=parallel,
            stages=stages,
        )

    assert not single.exists()
    assert not parallel.exists()
    assert [(stage.name, stage.status) for stage in stages] == [("sequential", "failed")]


def test_run_detects_inconsistent_strategies(sample_tree: Path, temp_dir: Path):
    service = _service(
        parallel=_StaticScanner("parallel", {"a.txt": bytes.fromhex(HELLO_MD5)}),
    )
    stages: list[PipelineStage] = []

    with pytest.raises(ConsistencyError) as excinfo:
        service.run(
            sample_tree,
            single_artifact=temp_dir / "s.json",
            parallel_artifact=temp_dir / "p.json",
            stages=stages,
        )

    assert excinfo.value.diff.missing == ["sub/b.txt"]
    assert stages[-1].name == "verify"
    assert stages[-1].status == "failed"


def test_scan_single_strategy(sample_tree: Path, temp_dir: Path):
    service = _service()

    result = service.scan("parallel", sample_tree, artifact=temp_dir / "p.json")

    assert result.strategy == "parallel"
    assert result.file_count == 2
    assert service.compare(temp_dir / "p.json", result.artifact_path).identical


def test_scan_unknown_strategy(sample_tree: Path, temp_dir: Path):
    with pytest.raises(ValueError, match="Unknown strategy"):
        _service().scan("quantum", sample_tree, artifact=temp_dir / "x.json")


def test_parallel_scanner_timeout_cancels(temp_dir: Path):
    root = temp_dir / "big"
    root.mkdir()
    for index in range(4):
        (root / f"blob_{index}.bin").write_bytes(b"\0" * 300_000)
    scanner = ParallelScanner(workers=1, chunk_size=1, timeout_seconds=0.05)

    with pytest.raises(CancellationError, match="timed out"):
        scanner.scan(root)


def test_bootstrap_uses_settings(override_settings):
    container = bootstrap_application(override_settings)

    assert container.settings is override_settings
    assert container.parallel_scanner.workers == 4
    assert container.fingerprint_service.strategies == ["sequential", "parallel"]

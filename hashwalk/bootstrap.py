"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

from dataclasses import dataclass

from hashwalk.app import FingerprintService
from hashwalk.app.adapters import JSONResultSink, ParallelScanner, SequentialScanner
from hashwalk.app.ports import ResultSinkPort, ScannerPort
from hashwalk.config import Settings, get_settings


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    sequential_scanner: ScannerPort
    parallel_scanner: ScannerPort
    result_sink: ResultSinkPort
    fingerprint_service: FingerprintService


def bootstrap_application(settings: Settings | None = None) -> ApplicationContainer:
    """Create the application container using ``settings``."""

    active_settings = settings or get_settings()

    sequential_scanner = SequentialScanner(
        chunk_size=active_settings.chunk_size,
        algorithm=active_settings.algorithm,
        symlinks=active_settings.symlinks,
    )
    parallel_scanner = ParallelScanner(
        workers=active_settings.get_workers(),
        chunk_size=active_settings.chunk_size,
        algorithm=active_settings.algorithm,
        symlinks=active_settings.symlinks,
        timeout_seconds=active_settings.timeout_seconds,
    )
    result_sink = JSONResultSink()

    fingerprint_service = FingerprintService(
        sequential_scanner=sequential_scanner,
        parallel_scanner=parallel_scanner,
        sink=result_sink,
    )

    return ApplicationContainer(
        settings=active_settings,
        sequential_scanner=sequential_scanner,
        parallel_scanner=parallel_scanner,
        result_sink=result_sink,
        fingerprint_service=fingerprint_service,
    )

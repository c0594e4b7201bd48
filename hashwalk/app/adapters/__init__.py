"""Concrete adapters wiring application ports to built-in implementations."""

from __future__ import annotations

from .scanners import ParallelScanner, SequentialScanner
from .sink import JSONResultSink

__all__ = [
    "JSONResultSink",
    "ParallelScanner",
    "SequentialScanner",
]

"""Traversal strategies producing path → fingerprint mappings."""

from hashwalk.scan.channels import BoundedQueue, RunContext
from hashwalk.scan.compare import MappingDiff, diff_mappings
from hashwalk.scan.pipeline import default_workers, run_pipeline
from hashwalk.scan.walker import walk

__all__ = [
    "BoundedQueue",
    "MappingDiff",
    "RunContext",
    "default_workers",
    "diff_mappings",
    "run_pipeline",
    "walk",
]

"""Pytest configuration and fixtures."""

import gc
import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from hashwalk.config import Settings


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        # Force garbage collection to release any file handles
        gc.collect()
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def sample_tree(temp_dir: Path) -> Path:
    """Create ``a.txt`` ("hello") and ``sub/b.txt`` ("world")."""
    root = temp_dir / "tree"
    (root / "sub").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"hello")
    (root / "sub" / "b.txt").write_bytes(b"world")
    return root


@pytest.fixture
def wide_tree(temp_dir: Path) -> Path:
    """Create a nested tree with enough files to keep every worker busy."""
    root = temp_dir / "wide"
    for branch in range(4):
        for depth in range(3):
            directory = root.joinpath(*[f"d{branch}_{level}" for level in range(depth + 1)])
            directory.mkdir(parents=True, exist_ok=True)
            for index in range(6):
                payload = f"branch={branch} depth={depth} file={index}\n".encode() * (index + 1)
                (directory / f"file_{index}.bin").write_bytes(payload)
    (root / "empty_dir").mkdir()
    (root / "zero.bin").write_bytes(b"")
    return root


@pytest.fixture
def override_settings(temp_dir: Path) -> Generator[Settings, None, None]:
    """Provide isolated hashwalk settings scoped to tests."""

    import hashwalk.config as config_module

    previous_settings = getattr(config_module, "_settings", None)

    output_dir = temp_dir / "artifacts"
    output_dir.mkdir(parents=True, exist_ok=True)

    settings = config_module.Settings(
        output_dir=output_dir,
        workers=4,
    )

    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = previous_settings

"""Tests for traversal and the sequential walker."""

import os
import socket
from pathlib import Path

import pytest

from hashwalk.errors import FileReadError, TraversalError
from hashwalk.scan.walker import walk
from hashwalk.utils.paths import canonical_key, iter_files

HELLO_MD5 = "5d41402abc4b2a76b9719d911017c592"
WORLD_MD5 = "7d793037a0760186574b0282f2f435e7"

requires_symlinks = pytest.mark.skipif(
    not hasattr(os, "symlink") or os.name == "nt",
    reason="symlinks not reliably available",
)


def test_walk_sample_tree(sample_tree: Path):
    """Concrete scenario: a.txt and sub/b.txt."""
    mapping = walk(sample_tree)

    assert {key: value.hex() for key, value in mapping.items()} == {
        "a.txt": HELLO_MD5,
        "sub/b.txt": WORLD_MD5,
    }


def test_walk_empty_tree(temp_dir: Path):
    (temp_dir / "only" / "dirs").mkdir(parents=True)

    assert walk(temp_dir) == {}


def test_walk_missing_root(temp_dir: Path):
    with pytest.raises(TraversalError) as excinfo:
        walk(temp_dir / "does-not-exist")

    assert excinfo.value.path == temp_dir / "does-not-exist"


def test_walk_single_file_root(sample_tree: Path):
    mapping = walk(sample_tree / "sub" / "b.txt")

    assert {key: value.hex() for key, value in mapping.items()} == {"b.txt": WORLD_MD5}


def test_walk_surfaces_first_hash_error(sample_tree: Path):
    def failing_hasher(path, digest=None, *, chunk_size=65536):
        raise FileReadError(f"Cannot read {path}", path=path)

    with pytest.raises(FileReadError):
        walk(sample_tree, hasher=failing_hasher)


def test_walk_chunk_size_does_not_change_mapping(wide_tree: Path):
    assert walk(wide_tree, chunk_size=1) == walk(wide_tree, chunk_size=65536)


def test_iter_files_depth_first_lexical(temp_dir: Path):
    for relative in ["b/z.txt", "b/a/y.txt", "a.txt", "c.txt", "a/x.txt"]:
        path = temp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(relative)

    keys = [discovered.key for discovered in iter_files(temp_dir)]

    assert keys == ["a.txt", "c.txt", "a/x.txt", "b/z.txt", "b/a/y.txt"]


def test_iter_files_visits_every_file_once(wide_tree: Path):
    keys = [discovered.key for discovered in iter_files(wide_tree)]

    expected = {
        path.relative_to(wide_tree).as_posix() for path in wide_tree.rglob("*") if path.is_file()
    }
    assert len(keys) == len(set(keys))
    assert set(keys) == expected


def test_iter_files_rejects_unknown_policy(temp_dir: Path):
    with pytest.raises(ValueError):
        list(iter_files(temp_dir, symlinks="maybe"))  # type: ignore[arg-type]


def test_canonical_key_uses_forward_slashes():
    root = Path("/data/root")

    assert canonical_key(root / "sub" / "dir" / "file.txt", root) == "sub/dir/file.txt"


@requires_symlinks
def test_symlinks_skipped_by_default(sample_tree: Path):
    (sample_tree / "link.txt").symlink_to(sample_tree / "a.txt")
    (sample_tree / "linkdir").symlink_to(sample_tree / "sub", target_is_directory=True)

    assert set(walk(sample_tree)) == {"a.txt", "sub/b.txt"}


@requires_symlinks
def test_symlinks_follow_hashes_target_files_only(sample_tree: Path):
    (sample_tree / "link.txt").symlink_to(sample_tree / "a.txt")
    (sample_tree / "linkdir").symlink_to(sample_tree / "sub", target_is_directory=True)
    (sample_tree / "dangling").symlink_to(sample_tree / "missing")

    mapping = walk(sample_tree, symlinks="follow")

    assert set(mapping) == {"a.txt", "link.txt", "sub/b.txt"}
    assert mapping["link.txt"].hex() == HELLO_MD5


@requires_symlinks
def test_symlinks_error_policy(sample_tree: Path):
    (sample_tree / "link.txt").symlink_to(sample_tree / "a.txt")

    with pytest.raises(TraversalError, match="Symlink"):
        walk(sample_tree, symlinks="error")


@pytest.mark.skipif(not hasattr(socket, "AF_UNIX"), reason="unix sockets unavailable")
def test_special_files_are_skipped(sample_tree: Path):
    sock_path = sample_tree / "s.sock"
    server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        server.bind(str(sock_path))
    except OSError as exc:  # pragma: no cover - path too long on some hosts
        server.close()
        pytest.skip(f"cannot bind unix socket: {exc}")

    try:
        assert set(walk(sample_tree)) == {"a.txt", "sub/b.txt"}
    finally:
        server.close()


@pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="requires POSIX non-root")
def test_unreadable_directory_raises_traversal_error(sample_tree: Path):
    locked = sample_tree / "locked"
    locked.mkdir()
    (locked / "secret.txt").write_text("secret")
    locked.chmod(0)
    try:
        with pytest.raises(TraversalError) as excinfo:
            walk(sample_tree)
        assert excinfo.value.path == locked
    finally:
        locked.chmod(0o755)

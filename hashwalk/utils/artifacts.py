"""JSON artifact helpers with durability guarantees."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path

ResultMapping = dict[str, bytes]

ARTIFACT_INDENT = 1


def artifact_key(key: str) -> str:
    """Return ``key`` as valid UTF-8 text.

    File names that are not valid UTF-8 decode to lone surrogates; those bytes
    are replaced with U+FFFD so the key can be written.
    """
    return key.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def render_artifact(mapping: Mapping[str, bytes]) -> str:
    """Serialize ``mapping`` with sorted keys and lowercase hex fingerprints."""
    payload = {artifact_key(key): fingerprint.hex() for key, fingerprint in mapping.items()}
    return json.dumps(payload, indent=ARTIFACT_INDENT, sort_keys=True, ensure_ascii=False) + "\n"


def atomic_write_artifact(path: Path, mapping: Mapping[str, bytes]) -> Path:
    """Write ``mapping`` to ``path`` atomically as indented JSON.

    The write is performed via a temporary file followed by an ``os.replace``
    once the contents are flushed and fsynced, so readers never observe a
    half-written artifact.
    """
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    content = render_artifact(mapping)

    fd: int | None = None
    tmp_path: str | None = None

    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(destination.parent),
            prefix=destination.name,
            suffix=".tmp",
            text=True,
        )

        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            fd = None  # Ownership transferred to file object
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())

        os.replace(tmp_path, destination)
        tmp_path = None
    finally:
        if fd is not None:
            os.close(fd)
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass

    return destination


def read_artifact(path: Path) -> ResultMapping:
    """Load an artifact written by :func:`atomic_write_artifact`.

    Raises:
        FileNotFoundError: If the artifact does not exist
        ValueError: If the content is not an object of hex strings
    """
    with Path(path).open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, dict):
        raise ValueError(f"Artifact {path} must contain a JSON object")

    mapping: ResultMapping = {}
    for key, value in payload.items():
        if not isinstance(value, str):
            raise ValueError(f"Artifact {path}: fingerprint for {key!r} is not a string")
        try:
            mapping[key] = bytes.fromhex(value)
        except ValueError as exc:
            raise ValueError(f"Artifact {path}: invalid hex for {key!r}") from exc
    return mapping

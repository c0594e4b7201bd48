"""Schema-stamped JSON envelopes for CLI output."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from hashwalk import __version__


def json_response(
    schema_id: str,
    schema_version: int,
    **data: Any,
) -> str:
    """Create schema-wrapped JSON response for CLI output.

    Example:
        >>> json_response("compare_result", 1, identical=True)
        {
          "schema_id": "compare_result",
          "schema_version": 1,
          "producer": "hashwalk-0.1.0",
          "produced_at": "2026-10-19T10:30:00+00:00",
          "identical": true
        }
    """
    wrapped = {
        "schema_id": schema_id,
        "schema_version": schema_version,
        "producer": f"hashwalk-{__version__}",
        "produced_at": datetime.now(UTC).isoformat(),
        **data,
    }
    return json.dumps(wrapped, indent=2, default=str)

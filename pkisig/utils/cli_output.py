"""CLI JSON output wrapper with schema metadata."""

from __future__ import annotations

import json
from typing import Any

from pkisig.utils.schema import build_schema_stamp


def json_response(
    schema_id: str,
    schema_version: int,
    **data: Any,
) -> str:
    """Create schema-wrapped JSON response for CLI output.

    Args:
        schema_id: Identifier for the output type (e.g., "verification").
        schema_version: Integer version for backward compatibility.
        **data: Payload data to include in the response.

    Returns:
        JSON string with schema metadata and payload.

    Example:
        >>> json_response("algorithms", 1, algorithms=["sha256"])
        {
          "schema_id": "algorithms",
          "schema_version": 1,
          "producer": "pkisig-0.1.0",
          "produced_at": "2026-10-19T10:30:00+00:00",
          "algorithms": ["sha256"]
        }
    """
    stamp = build_schema_stamp(schema_id=schema_id, schema_version=schema_version)
    wrapped = {
        "schema_id": stamp.schema_id,
        "schema_version": stamp.schema_version,
        "producer": stamp.producer,
        "produced_at": stamp.produced_at,
        **data,
    }
    return json.dumps(wrapped, indent=2, default=str)

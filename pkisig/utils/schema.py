"""Schema metadata stamping for persisted and printed records."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from pkisig import __version__


@dataclass(frozen=True, slots=True)
class SchemaStamp:
    """Schema metadata applied to persisted records."""

    schema_id: str
    schema_version: int
    producer: str
    produced_at: str

    def apply(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Return a copy of ``payload`` augmented with schema metadata."""

        stamped = dict(payload)
        stamped["schema_id"] = self.schema_id
        stamped["schema_version"] = self.schema_version
        stamped["producer"] = self.producer
        stamped["produced_at"] = self.produced_at
        return stamped


def build_schema_stamp(
    *,
    schema_id: str,
    schema_version: int,
    producer: str | None = None,
    produced_at: str | None = None,
) -> SchemaStamp:
    """Construct a :class:`SchemaStamp` for reuse across writers."""

    default_producer = producer or f"pkisig-{__version__}"
    timestamp = produced_at or datetime.now(UTC).isoformat()
    return SchemaStamp(
        schema_id=schema_id,
        schema_version=schema_version,
        producer=default_producer,
        produced_at=timestamp,
    )

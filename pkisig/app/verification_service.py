"""Batch verification of signature manifests against a single public key."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, StrictInt, StrictStr, ValidationError

from pkisig.app.ports import VerificationStatus
from pkisig.container import SignatureRegistry
from pkisig.utils.crypto import SignatureEncoding, decode_signature
from pkisig.utils.hashing import compute_sha256
from pkisig.utils.jsonl import atomic_write_jsonl, iter_jsonl
from pkisig.x509.algorithms import AlgorithmRegistry
from pkisig.x509.signature import Signature

logger = logging.getLogger(__name__)

REPORT_SCHEMA_ID = "verification_report"
REPORT_SCHEMA_VERSION = 1


class ManifestError(ValueError):
    """Raised when a manifest line cannot be turned into a signature."""


class ManifestEntry(BaseModel):
    """One signature described by a manifest line."""

    id: str = Field(..., min_length=1, description="Signature identifier")
    data: Path = Field(..., description="File holding the signed bytes")
    signature: Path = Field(..., description="File holding the signature value")
    algorithm: StrictStr | StrictInt | None = Field(
        default=None,
        description="Digest name or OpenSSL code (defaults to settings)",
    )
    encoding: Literal["raw", "base64"] | None = Field(
        default=None,
        description="Signature file encoding (defaults to settings)",
    )


class VerificationRecord(BaseModel):
    """Outcome of verifying one signature."""

    id: str
    status: VerificationStatus
    algorithm: str
    data_sha256: str
    message: str | None = None


@dataclass(slots=True)
class VerificationService:
    """Build signature containers from manifests and verify them in bulk."""

    registry: AlgorithmRegistry
    default_algorithm: str = "sha256"
    default_encoding: SignatureEncoding = "raw"

    def load_manifest(self, manifest_path: Path) -> SignatureRegistry:
        """Read ``manifest_path`` into a :class:`SignatureRegistry`.

        Relative paths in the manifest resolve against its directory. A
        repeated id replaces the earlier signature.

        Raises:
            ManifestError: If a line is malformed or references unreadable files
            UnsupportedAlgorithmError: If a line names an unsupported algorithm
        """
        base_dir = manifest_path.parent
        container = SignatureRegistry()

        for line_num, line in iter_jsonl(manifest_path):
            try:
                entry = ManifestEntry.model_validate_json(line.decode("utf-8"))
            except (UnicodeDecodeError, ValidationError) as exc:
                raise ManifestError(
                    f"Invalid entry at line {line_num} in {manifest_path}: {exc}"
                ) from exc

            try:
                data = (base_dir / entry.data).read_bytes()
                signature_bytes = decode_signature(
                    (base_dir / entry.signature).read_bytes(),
                    entry.encoding or self.default_encoding,
                )
            except (OSError, ValueError) as exc:
                raise ManifestError(
                    f"Entry '{entry.id}' at line {line_num} in {manifest_path}: {exc}"
                ) from exc

            if entry.id in container:
                logger.warning(
                    "Signature id %s at line %d replaces an earlier entry", entry.id, line_num
                )

            container.add(
                Signature(
                    data,
                    signature_bytes,
                    entry.algorithm if entry.algorithm is not None else self.default_algorithm,
                    signature_id=entry.id,
                    registry=self.registry,
                )
            )

        return container

    def verify_all(self, container: SignatureRegistry, key: Any) -> list[VerificationRecord]:
        """Verify every signature in ``container`` against ``key``.

        Provider errors are reported per record with their diagnostic rather
        than raised, so one malformed entry does not hide the others.
        """
        records: list[VerificationRecord] = []
        for signature_id, signature in container.items():
            outcome = signature.verify(key)
            if outcome.is_error:
                logger.debug("Verification of %s failed: %s", signature_id, outcome.message)

            records.append(
                VerificationRecord(
                    id=signature_id,
                    status=outcome.status,
                    algorithm=signature.algorithm,
                    data_sha256=compute_sha256(signature.bytes_signed),
                    message=outcome.message,
                )
            )
        return records

    def write_report(self, records: list[VerificationRecord], report_path: Path) -> None:
        """Persist ``records`` as schema-stamped JSONL."""
        atomic_write_jsonl(
            report_path,
            records,
            schema_id=REPORT_SCHEMA_ID,
            schema_version=REPORT_SCHEMA_VERSION,
        )

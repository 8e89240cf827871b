"""Tests for manifest-driven batch verification."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from cryptography.hazmat.primitives import hashes

from pkisig.app.ports import VerificationStatus
from pkisig.app.verification_service import ManifestError, VerificationService
from pkisig.utils.crypto import encode_bytes
from pkisig.utils.hashing import compute_sha256
from pkisig.x509.algorithms import get_algorithm_registry
from pkisig.x509.signature import UnsupportedAlgorithmError


def write_manifest(path: Path, entries: list[dict | str]) -> Path:
    lines = [entry if isinstance(entry, str) else json.dumps(entry) for entry in entries]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def service() -> VerificationService:
    return VerificationService(registry=get_algorithm_registry())


@pytest.fixture
def signed_docs(temp_dir: Path, sign_rsa) -> Path:
    """Two signed documents: one raw signature, one base64 signature."""
    docs = temp_dir / "docs"
    docs.mkdir()

    (docs / "a.txt").write_bytes(b"first document")
    (docs / "a.sig").write_bytes(sign_rsa(b"first document"))

    (docs / "b.txt").write_bytes(b"second document")
    (docs / "b.sig.b64").write_text(encode_bytes(sign_rsa(b"second document")) + "\n")

    return docs


def test_load_manifest_builds_container(service, signed_docs):
    manifest = write_manifest(
        signed_docs / "manifest.jsonl",
        [
            {"id": "S01", "data": "a.txt", "signature": "a.sig"},
            {
                "id": "S02",
                "data": "b.txt",
                "signature": "b.sig.b64",
                "algorithm": 7,
                "encoding": "base64",
            },
        ],
    )

    container = service.load_manifest(manifest)

    assert container.ids() == ["S01", "S02"]
    assert container.get("S01").bytes_signed == b"first document"
    assert container.get("S02").algorithm == "sha256"
    assert container.get("S02").declared_algorithm == 7


def test_verify_all_reports_each_status(service, signed_docs, rsa_private_key):
    (signed_docs / "bad.sig").write_bytes(b"\x00" * 256)
    manifest = write_manifest(
        signed_docs / "manifest.jsonl",
        [
            {"id": "S01", "data": "a.txt", "signature": "a.sig"},
            {"id": "S02", "data": "b.txt", "signature": "b.sig.b64", "encoding": "base64"},
            {"id": "S03", "data": "a.txt", "signature": "bad.sig"},
        ],
    )

    records = service.verify_all(service.load_manifest(manifest), rsa_private_key.public_key())

    assert [(record.id, record.status) for record in records] == [
        ("S01", VerificationStatus.VALID),
        ("S02", VerificationStatus.VALID),
        ("S03", VerificationStatus.INVALID),
    ]
    assert records[0].data_sha256 == compute_sha256(b"first document")
    assert all(record.message is None for record in records)


def test_verify_all_keeps_provider_errors(service, signed_docs):
    manifest = write_manifest(
        signed_docs / "manifest.jsonl",
        [{"id": "S01", "data": "a.txt", "signature": "a.sig"}],
    )

    records = service.verify_all(service.load_manifest(manifest), "not a key")

    assert len(records) == 1
    assert records[0].status is VerificationStatus.ERROR
    assert "Unsupported public key type" in (records[0].message or "")


def test_duplicate_ids_last_write_wins(service, signed_docs, caplog):
    manifest = write_manifest(
        signed_docs / "manifest.jsonl",
        [
            {"id": "S01", "data": "a.txt", "signature": "a.sig"},
            {"id": "S01", "data": "b.txt", "signature": "b.sig.b64", "encoding": "base64"},
        ],
    )

    with caplog.at_level("WARNING"):
        container = service.load_manifest(manifest)

    assert len(container) == 1
    assert container.get("S01").bytes_signed == b"second document"
    assert "replaces an earlier entry" in caplog.text


def test_malformed_line_names_line_number(service, signed_docs):
    manifest = write_manifest(
        signed_docs / "manifest.jsonl",
        [
            {"id": "S01", "data": "a.txt", "signature": "a.sig"},
            '{"id": "S02", "data": "b.txt"}',
        ],
    )

    with pytest.raises(ManifestError, match="line 2"):
        service.load_manifest(manifest)


def test_invalid_json_raises_manifest_error(service, signed_docs):
    manifest = write_manifest(signed_docs / "manifest.jsonl", ["{not json"])

    with pytest.raises(ManifestError, match="line 1"):
        service.load_manifest(manifest)


def test_missing_file_raises_manifest_error(service, signed_docs):
    manifest = write_manifest(
        signed_docs / "manifest.jsonl",
        [{"id": "S09", "data": "missing.txt", "signature": "a.sig"}],
    )

    with pytest.raises(ManifestError, match="S09"):
        service.load_manifest(manifest)


def test_bad_base64_raises_manifest_error(service, signed_docs):
    manifest = write_manifest(
        signed_docs / "manifest.jsonl",
        [{"id": "S01", "data": "a.txt", "signature": "a.sig", "encoding": "base64"}],
    )

    with pytest.raises(ManifestError, match="S01"):
        service.load_manifest(manifest)


def test_unsupported_algorithm_propagates(service, signed_docs):
    manifest = write_manifest(
        signed_docs / "manifest.jsonl",
        [{"id": "S01", "data": "a.txt", "signature": "a.sig", "algorithm": "md2"}],
    )

    with pytest.raises(UnsupportedAlgorithmError):
        service.load_manifest(manifest)


def test_default_algorithm_from_service(signed_docs, sign_rsa, rsa_private_key):
    (signed_docs / "a.sha512.sig").write_bytes(sign_rsa(b"first document", hashes.SHA512()))
    manifest = write_manifest(
        signed_docs / "manifest.jsonl",
        [{"id": "S01", "data": "a.txt", "signature": "a.sha512.sig"}],
    )
    service = VerificationService(registry=get_algorithm_registry(), default_algorithm="sha512")

    records = service.verify_all(service.load_manifest(manifest), rsa_private_key.public_key())

    assert records[0].algorithm == "sha512"
    assert records[0].status is VerificationStatus.VALID


def test_write_report_stamps_schema(service, temp_dir, signed_docs, rsa_private_key):
    manifest = write_manifest(
        signed_docs / "manifest.jsonl",
        [{"id": "S01", "data": "a.txt", "signature": "a.sig"}],
    )
    records = service.verify_all(service.load_manifest(manifest), rsa_private_key.public_key())

    report = temp_dir / "reports" / "report.jsonl"
    service.write_report(records, report)

    lines = report.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    payload = json.loads(lines[0])
    assert payload["id"] == "S01"
    assert payload["status"] == "valid"
    assert payload["schema_id"] == "verification_report"
    assert payload["schema_version"] == 1
    assert payload["producer"].startswith("pkisig-")


def test_undecodable_line_raises_manifest_error(service, signed_docs):
    manifest = signed_docs / "manifest.jsonl"
    manifest.write_bytes(
        json.dumps({"id": "S01", "data": "a.txt", "signature": "a.sig"}).encode("utf-8")
        + b"\n\xff\xfe\n"
    )

    with pytest.raises(ManifestError, match="line 2"):
        service.load_manifest(manifest)


@pytest.mark.parametrize("algorithm", [True, False])
def test_non_string_non_integer_algorithm_rejected(service, signed_docs, algorithm):
    manifest = write_manifest(
        signed_docs / "manifest.jsonl",
        [{"id": "S01", "data": "a.txt", "signature": "a.sig", "algorithm": algorithm}],
    )

    with pytest.raises(ManifestError, match="line 1"):
        service.load_manifest(manifest)

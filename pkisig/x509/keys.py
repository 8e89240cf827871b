"""Load public key handles from PEM/DER keys or certificates."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

_PEM_MARKER = b"-----BEGIN"
_PEM_CERTIFICATE_MARKER = b"-----BEGIN CERTIFICATE-----"


class KeyLoadError(ValueError):
    """Raised when no public key can be extracted from the input."""


def load_public_key(data: bytes) -> Any:
    """Return a public key handle from ``data``.

    Accepts a SubjectPublicKeyInfo public key or an X.509 certificate, in PEM
    or DER form. Certificates are parsed only to reach their public key; no
    trust decision is made.

    Raises:
        KeyLoadError: If ``data`` holds neither a public key nor a certificate
    """
    stripped = data.strip()
    if stripped.startswith(_PEM_MARKER):
        if _PEM_CERTIFICATE_MARKER in stripped:
            loaders = (_load_pem_certificate_key,)
        else:
            loaders = (serialization.load_pem_public_key,)
    else:
        loaders = (serialization.load_der_public_key, _load_der_certificate_key)

    errors: list[str] = []
    for loader in loaders:
        try:
            return loader(stripped)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            errors.append(str(exc) or type(exc).__name__)

    raise KeyLoadError("Unable to load public key: " + "; ".join(errors))


def load_public_key_file(path: Path) -> Any:
    """Load a public key handle from ``path``.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        KeyLoadError: If the file holds no usable key
    """
    try:
        return load_public_key(path.read_bytes())
    except KeyLoadError as exc:
        raise KeyLoadError(f"{path}: {exc}") from exc


def _load_pem_certificate_key(data: bytes) -> Any:
    return x509.load_pem_x509_certificate(data).public_key()


def _load_der_certificate_key(data: bytes) -> Any:
    return x509.load_der_x509_certificate(data).public_key()

"""Provider adapter backed by the ``cryptography`` package (OpenSSL)."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, padding, rsa

from pkisig.app.ports import CryptoProviderPort, VerificationOutcome

logger = logging.getLogger(__name__)

# Canonical digest name -> hash class. Availability is checked at runtime.
DIGESTS: dict[str, type[hashes.HashAlgorithm]] = {
    "md5": hashes.MD5,
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
    "sha512-224": hashes.SHA512_224,
    "sha512-256": hashes.SHA512_256,
    "sha3-224": hashes.SHA3_224,
    "sha3-256": hashes.SHA3_256,
    "sha3-384": hashes.SHA3_384,
    "sha3-512": hashes.SHA3_512,
    "sm3": hashes.SM3,
}


class CryptographyProvider(CryptoProviderPort):
    """Verify signatures with ``cryptography`` public key objects.

    RSA keys use PKCS#1 v1.5 padding, EC keys ECDSA and DSA keys plain DSA,
    each with the requested digest. Ed25519 and Ed448 carry their own digest,
    so the requested one only has to be supported. Certificates are accepted
    in place of a key; their embedded public key is used.
    """

    def __init__(self, backend: Any | None = None) -> None:
        self._backend = backend if backend is not None else default_backend()

    def digest_names(self) -> Iterator[str]:
        for name, hash_cls in DIGESTS.items():
            if self._backend.hash_supported(hash_cls()):
                yield name
            else:
                logger.debug("Digest %s not available in this OpenSSL build", name)

    def verify(
        self,
        data: bytes,
        signature: bytes,
        key: Any,
        algorithm: str,
    ) -> VerificationOutcome:
        hash_cls = DIGESTS.get(algorithm)
        if hash_cls is None:
            return VerificationOutcome.error(f"Digest '{algorithm}' is not available")

        if isinstance(key, x509.Certificate):
            try:
                key = key.public_key()
            except (ValueError, UnsupportedAlgorithm) as exc:
                return VerificationOutcome.error(_describe(exc))

        try:
            if isinstance(key, rsa.RSAPublicKey):
                key.verify(signature, data, padding.PKCS1v15(), hash_cls())
            elif isinstance(key, ec.EllipticCurvePublicKey):
                key.verify(signature, data, ec.ECDSA(hash_cls()))
            elif isinstance(key, dsa.DSAPublicKey):
                key.verify(signature, data, hash_cls())
            elif isinstance(key, (ed25519.Ed25519PublicKey, ed448.Ed448PublicKey)):
                key.verify(signature, data)
            else:
                return VerificationOutcome.error(
                    f"Unsupported public key type: {type(key).__name__}"
                )
        except InvalidSignature:
            return VerificationOutcome.invalid()
        except (TypeError, ValueError, UnsupportedAlgorithm) as exc:
            return VerificationOutcome.error(_describe(exc))

        return VerificationOutcome.valid()


def _describe(exc: Exception) -> str:
    """Return the provider diagnostic, falling back to the exception type."""
    message = str(exc).strip()
    return message or type(exc).__name__

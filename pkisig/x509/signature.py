"""PKI signature value object.

A signature on its own proves little: verifying it needs the bytes that were
signed, the raw signature value, and the digest algorithm used to produce
it. :class:`Signature` brings the three together and answers whether a
particular public key (usually the one embedded in a certificate) was used to
sign the data.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pkisig.app.ports import VerificationOutcome, VerificationStatus
from pkisig.x509.algorithms import AlgorithmRegistry, get_algorithm_registry, normalize_algorithm

if TYPE_CHECKING:  # pragma: no cover
    from pkisig.app.ports import CryptoProviderPort


class UnsupportedAlgorithmError(ValueError):
    """Raised when a signature names an algorithm the provider cannot use."""

    def __init__(self, algorithm: Any) -> None:
        super().__init__(f'Algorithm "{algorithm}" is not supported.')
        self.algorithm = algorithm


class VerificationError(RuntimeError):
    """Raised when the provider could not decide whether a signature is valid."""


def _as_bytes(value: Any, field: str) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"{field} must be bytes, got {type(value).__name__}")


class Signature:
    """Signed bytes, raw signature, and a validated digest algorithm.

    Instances are immutable. The algorithm is checked against the algorithm
    registry on construction, so an instance never holds an unsupported one.
    """

    __slots__ = (
        "_algorithm",
        "_bytes_signed",
        "_declared_algorithm",
        "_id",
        "_provider",
        "_signature_bytes",
    )

    def __init__(
        self,
        bytes_signed: bytes,
        signature_bytes: bytes,
        algorithm: str | int,
        *,
        signature_id: str | None = None,
        registry: AlgorithmRegistry | None = None,
        provider: CryptoProviderPort | None = None,
    ) -> None:
        """Create a signature.

        Args:
            bytes_signed: The data used to generate the signature
            signature_bytes: Raw binary signature, as produced by the signer
            algorithm: Digest name or OpenSSL numeric code used to sign
            signature_id: Identifier under which containers file the signature
            registry: Algorithm registry (defaults to the process-wide one)
            provider: Provider used for verification (defaults to the registry's)

        Raises:
            UnsupportedAlgorithmError: If the algorithm is unsupported
            TypeError: If either byte sequence is not bytes-like
        """
        signed = _as_bytes(bytes_signed, "bytes_signed")
        raw_signature = _as_bytes(signature_bytes, "signature_bytes")

        registry = registry if registry is not None else get_algorithm_registry()
        if not registry.is_supported(algorithm):
            raise UnsupportedAlgorithmError(algorithm)

        canonical = normalize_algorithm(algorithm)
        if canonical is None:
            raise UnsupportedAlgorithmError(algorithm)

        setattr_ = object.__setattr__
        setattr_(self, "_bytes_signed", signed)
        setattr_(self, "_signature_bytes", raw_signature)
        setattr_(self, "_algorithm", canonical)
        setattr_(self, "_declared_algorithm", algorithm)
        setattr_(self, "_id", signature_id)
        setattr_(self, "_provider", provider if provider is not None else registry.provider)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        return (
            f"Signature(id={self._id!r}, algorithm={self._algorithm!r}, "
            f"signed={len(self._bytes_signed)} bytes, "
            f"signature={len(self._signature_bytes)} bytes)"
        )

    @property
    def id(self) -> str | None:
        return self._id

    @property
    def bytes_signed(self) -> bytes:
        return self._bytes_signed

    @property
    def signature_bytes(self) -> bytes:
        return self._signature_bytes

    @property
    def algorithm(self) -> str:
        """Canonical digest name."""
        return self._algorithm

    @property
    def declared_algorithm(self) -> str | int:
        """Algorithm identifier exactly as supplied by the caller."""
        return self._declared_algorithm

    def verify(self, key: Any) -> VerificationOutcome:
        """Run the provider's verify primitive and return its raw outcome.

        The key is borrowed for the duration of the call and never stored.
        """
        return self._provider.verify(
            self._bytes_signed,
            self._signature_bytes,
            key,
            self._algorithm,
        )

    def is_signed_by_key(self, key: Any) -> bool:
        """Tell whether ``key`` was used to produce this signature.

        Args:
            key: Public key (or certificate) matching the signer's private key

        Returns:
            True if the signature verifies, False if it does not

        Raises:
            VerificationError: If the provider failed to verify (e.g. malformed key)
        """
        outcome = self.verify(key)

        if outcome.status is VerificationStatus.VALID:
            return True

        if outcome.status is VerificationStatus.INVALID:
            return False

        raise VerificationError(outcome.message or "Signature verification failed")

"""Cryptographic provider port for signature verification."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol


class VerificationStatus(str, Enum):
    """Tri-state result of a single verify call."""

    VALID = "valid"
    INVALID = "invalid"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class VerificationOutcome:
    """Result reported by a provider.

    ``message`` carries the provider diagnostic and is only set for
    :attr:`VerificationStatus.ERROR`.
    """

    status: VerificationStatus
    message: str | None = None

    @classmethod
    def valid(cls) -> VerificationOutcome:
        return cls(VerificationStatus.VALID)

    @classmethod
    def invalid(cls) -> VerificationOutcome:
        return cls(VerificationStatus.INVALID)

    @classmethod
    def error(cls, message: str) -> VerificationOutcome:
        return cls(VerificationStatus.ERROR, message)

    @property
    def is_valid(self) -> bool:
        return self.status is VerificationStatus.VALID

    @property
    def is_error(self) -> bool:
        return self.status is VerificationStatus.ERROR


class CryptoProviderPort(Protocol):
    """Port interface for the library performing digest and signature math.

    Adapters implementing this port must provide:
    - Runtime introspection of usable digest algorithms
    - A verify primitive that reports errors instead of raising them

    Side effects: None (pure computation).
    """

    def digest_names(self) -> Iterable[str]:
        """Return canonical lower-case names of the usable digests.

        Returns:
            Names such as ``"sha256"`` that :meth:`verify` accepts
        """
        ...

    def verify(
        self,
        data: bytes,
        signature: bytes,
        key: Any,
        algorithm: str,
    ) -> VerificationOutcome:
        """Verify ``signature`` over ``data`` with ``key``.

        Args:
            data: Bytes that were originally signed
            signature: Raw signature value
            key: Public key handle owned by the caller
            algorithm: Canonical digest name

        Returns:
            Valid, invalid, or error outcome; never raises for provider failures
        """
        ...

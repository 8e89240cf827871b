"""Port interfaces for the pkisig application layer.

Domain code depends on these protocols, never on a concrete provider.
"""

__all__ = [
    "CryptoProviderPort",
    "VerificationOutcome",
    "VerificationStatus",
]

from pkisig.app.ports.provider import (
    CryptoProviderPort,
    VerificationOutcome,
    VerificationStatus,
)

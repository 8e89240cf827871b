"""In-memory container of signatures addressable by identifier."""

from __future__ import annotations

from pkisig.x509.signature import Signature


class SignatureRegistry:
    """Keyed working set of :class:`Signature` objects.

    Signatures are filed under their own ``id``. Adding a signature whose id
    is already present replaces the earlier one (last write wins); entries
    under other ids are untouched. The registry is not synchronized.
    """

    def __init__(self) -> None:
        self._signatures: dict[str, Signature] = {}

    def add(self, signature: Signature) -> None:
        """File ``signature`` under its identifier.

        Raises:
            ValueError: If the signature carries no identifier
        """
        signature_id = signature.id
        if signature_id is None:
            raise ValueError("Cannot add a signature without an id")
        self._signatures[signature_id] = signature

    def get(self, signature_id: str) -> Signature | None:
        """Return the signature filed under ``signature_id``, or None."""
        return self._signatures.get(signature_id)

    def ids(self) -> list[str]:
        """Return stored identifiers in sorted order."""
        return sorted(self._signatures)

    def items(self) -> list[tuple[str, Signature]]:
        """Return ``(id, signature)`` pairs sorted by identifier."""
        return sorted(self._signatures.items(), key=lambda item: item[0])

    def __contains__(self, signature_id: object) -> bool:
        return signature_id in self._signatures

    def __len__(self) -> int:
        return len(self._signatures)

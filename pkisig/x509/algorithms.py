"""Registry of digest algorithms usable for signature verification.

Algorithms may be named (``"sha256"``, ``"RSA-SHA256"``,
``"sha256WithRSAEncryption"``) or given as the classic OpenSSL numeric
signature codes (``7`` for SHA-256). Every form is normalized to one
canonical lower-case digest name at this boundary so callers never branch on
representation.
"""

from __future__ import annotations

import logging
import threading
from enum import IntEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover
    from pkisig.app.ports import CryptoProviderPort

logger = logging.getLogger(__name__)


class AlgorithmCode(IntEnum):
    """OpenSSL numeric signature algorithm codes."""

    SHA1 = 1
    MD5 = 2
    MD4 = 3
    MD2 = 4
    DSS1 = 5
    SHA224 = 6
    SHA256 = 7
    SHA384 = 8
    SHA512 = 9
    RMD160 = 10

    @property
    def digest_name(self) -> str:
        return _CODE_DIGESTS[self]


_CODE_DIGESTS: dict[AlgorithmCode, str] = {
    AlgorithmCode.SHA1: "sha1",
    AlgorithmCode.MD5: "md5",
    AlgorithmCode.MD4: "md4",
    AlgorithmCode.MD2: "md2",
    AlgorithmCode.DSS1: "sha1",
    AlgorithmCode.SHA224: "sha224",
    AlgorithmCode.SHA256: "sha256",
    AlgorithmCode.SHA384: "sha384",
    AlgorithmCode.SHA512: "sha512",
    AlgorithmCode.RMD160: "ripemd160",
}

_ALIASES: dict[str, str] = {
    "dss1": "sha1",
    "rmd160": "ripemd160",
    "sha-1": "sha1",
    "sha-224": "sha224",
    "sha-256": "sha256",
    "sha-384": "sha384",
    "sha-512": "sha512",
    "sha512/224": "sha512-224",
    "sha512/256": "sha512-256",
    "sha-512/224": "sha512-224",
    "sha-512/256": "sha512-256",
}

# Prefixes and suffixes OpenSSL uses for signature (digest + key type) names.
_SIGNATURE_PREFIXES = ("rsa-", "dsa-", "ecdsa-with-")
_SIGNATURE_SUFFIXES = ("withrsaencryption", "withrsa", "withdsa", "withecdsa")


def normalize_algorithm(algorithm: Any) -> str | None:
    """Return the canonical digest name for ``algorithm``.

    Args:
        algorithm: Digest name, OpenSSL signature name, or numeric code

    Returns:
        Lower-case digest name, or None when ``algorithm`` is not recognizable
    """
    if isinstance(algorithm, bool):
        return None

    if isinstance(algorithm, int):
        try:
            return AlgorithmCode(algorithm).digest_name
        except ValueError:
            return None

    if not isinstance(algorithm, str):
        return None

    name = algorithm.strip().lower()
    if not name:
        return None

    for prefix in _SIGNATURE_PREFIXES:
        if name.startswith(prefix):
            name = name[len(prefix) :]
            break
    else:
        for suffix in _SIGNATURE_SUFFIXES:
            if name.endswith(suffix):
                name = name[: -len(suffix)]
                break

    return _ALIASES.get(name, name) or None


class AlgorithmRegistry:
    """Answers whether an algorithm is usable with the configured provider.

    The supported set holds the digests the provider reports. Numeric codes
    normalize to digest names, so a code is supported exactly when its digest
    is. The set is computed on first use and reused afterwards; the provider's
    capabilities do not change at runtime.
    """

    def __init__(self, provider: CryptoProviderPort) -> None:
        self._provider = provider
        self._supported: frozenset[str] | None = None
        self._lock = threading.Lock()

    @property
    def provider(self) -> CryptoProviderPort:
        return self._provider

    def supported(self) -> frozenset[str]:
        """Return the supported canonical digest names."""
        supported = self._supported
        if supported is not None:
            return supported

        with self._lock:
            if self._supported is None:
                self._supported = self._compute()
            return self._supported

    def _compute(self) -> frozenset[str]:
        supported = frozenset(name.lower() for name in self._provider.digest_names())
        logger.debug("Supported signature digests: %s", ", ".join(sorted(supported)))
        return supported

    def is_supported(self, algorithm: Any) -> bool:
        """Return True when ``algorithm`` can be used for verification."""
        name = normalize_algorithm(algorithm)
        if name is None:
            return False
        return name in self.supported()

    def reset(self) -> None:
        """Forget the cached set; the next lookup recomputes it."""
        with self._lock:
            self._supported = None


# Process-wide registry instance
_registry: AlgorithmRegistry | None = None
_registry_lock = threading.Lock()


def get_algorithm_registry() -> AlgorithmRegistry:
    """Get or create the process-wide registry backed by ``cryptography``."""
    global _registry
    registry = _registry
    if registry is not None:
        return registry

    with _registry_lock:
        if _registry is None:
            from pkisig.app.adapters import CryptographyProvider

            _registry = AlgorithmRegistry(CryptographyProvider())
        return _registry


def set_algorithm_registry(registry: AlgorithmRegistry | None) -> None:
    """Set the process-wide registry (None restores the default on next use)."""
    global _registry
    with _registry_lock:
        _registry = registry


def is_supported(algorithm: Any) -> bool:
    """Return True when the process-wide registry supports ``algorithm``."""
    return get_algorithm_registry().is_supported(algorithm)

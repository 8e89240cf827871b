"""X.509 signature primitives: algorithm registry, signatures, key loading."""

from pkisig.x509.algorithms import (
    AlgorithmCode,
    AlgorithmRegistry,
    get_algorithm_registry,
    is_supported,
    normalize_algorithm,
    set_algorithm_registry,
)
from pkisig.x509.keys import KeyLoadError, load_public_key, load_public_key_file
from pkisig.x509.signature import Signature, UnsupportedAlgorithmError, VerificationError

__all__ = [
    "AlgorithmCode",
    "AlgorithmRegistry",
    "KeyLoadError",
    "Signature",
    "UnsupportedAlgorithmError",
    "VerificationError",
    "get_algorithm_registry",
    "is_supported",
    "load_public_key",
    "load_public_key_file",
    "normalize_algorithm",
    "set_algorithm_registry",
]

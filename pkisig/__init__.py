"""pkisig - PKI signature verification toolkit.

Checks whether a public key produced a raw signature over a byte sequence,
delegating the digest and signature math to the ``cryptography`` package.
"""

__version__ = "0.1.0"
__author__ = "pkisig Contributors"

from pkisig.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]

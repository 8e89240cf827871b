"""Concrete adapters wiring application ports to built-in implementations."""

from __future__ import annotations

from .cryptography_provider import CryptographyProvider

__all__ = [
    "CryptographyProvider",
]

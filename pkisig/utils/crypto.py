"""Encoding helpers for signature material."""

from __future__ import annotations

import base64
import binascii
from typing import Literal

SignatureEncoding = Literal["raw", "base64"]


def encode_bytes(data: bytes) -> str:
    """Encode binary data for JSON persistence."""
    return base64.b64encode(data).decode("utf-8")


def decode_bytes(encoded: str) -> bytes:
    """Decode data produced by :func:`encode_bytes`.

    Raises:
        ValueError: If ``encoded`` is not valid base64
    """
    try:
        return base64.b64decode(encoded.encode("utf-8"), validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Invalid base64 data: {exc}") from exc


def decode_signature(data: bytes, encoding: SignatureEncoding) -> bytes:
    """Return raw signature bytes from file contents in ``encoding``."""
    if encoding == "raw":
        return data
    if encoding == "base64":
        # Armored signatures are commonly wrapped across lines.
        return decode_bytes("".join(data.decode("ascii", errors="replace").split()))
    raise ValueError(f"Unknown signature encoding: {encoding}")

"""
Module 02 - Hashing Utilities
Byte-level hashing and hex encoding helpers shared by the engine,
the HTTP API and the CLI.

This module provides:
- SHA-256 hashing for raw bytes (used to derive value digests)
- Hex encoding/decoding with 0x prefix
- 32-byte digest validation
"""
from __future__ import annotations

import hashlib

from mmr_core.schemas.errors import InvalidDigestException


DIGEST_SIZE: int = 32

# Root of an empty tree and the value reported for unmaterialized nodes
ZERO_HASH: bytes = bytes(DIGEST_SIZE)


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def ensure_digest(data: bytes) -> bytes:
    """Return ``data`` unchanged if it is a 32-byte digest, else raise."""
    if not isinstance(data, (bytes, bytearray)) or len(data) != DIGEST_SIZE:
        length = len(data) if isinstance(data, (bytes, bytearray)) else -1
        raise InvalidDigestException(length)
    return bytes(data)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def digest_from_hex(hex_string: str) -> bytes:
    """Decode a 0x-prefixed hex string that must hold exactly 32 bytes."""
    return ensure_digest(from_hex(hex_string))


__all__ = [
    "DIGEST_SIZE",
    "ZERO_HASH",
    "sha256",
    "ensure_digest",
    "to_hex",
    "from_hex",
    "digest_from_hex",
]

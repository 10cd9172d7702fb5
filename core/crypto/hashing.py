"""
Module 02 - Hashing Utilities
Digest and pair-combination primitives for the hash-tree engine.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- SHA-256 digest of raw blocks
- The left/right-aware pair combination used for every interior node
- Hex encoding/decoding with 0x prefix for persisted roots and wire payloads

Canonical Combination Rule (Hard Contract):
    combine(left, right) = sha256((hex(left) + hex(right)).encode("ascii"))
    where hex() is the fixed-width lowercase hex of the 32-byte digest
    (64 characters, no prefix). Changing this encoding changes every root.

Security/Determinism Notes:
- Always hash raw bytes exactly as given
- str blocks are UTF-8 encoded before hashing, nothing is stripped
- All operations are deterministic
"""
from __future__ import annotations

import hashlib
from typing import Union

# Digests are opaque 32-byte values
Digest = bytes
Block = Union[bytes, bytearray, str]

DIGEST_SIZE: int = 32


def digest(data: bytes) -> Digest:
    """
    Compute the SHA-256 digest of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte SHA-256 digest

    Example:
        >>> digest(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


# Digest of the explicitly empty block, used for padding and the empty tree
EMPTY_BLOCK_DIGEST: Digest = digest(b"")


def block_bytes(block: Block) -> bytes:
    """
    Normalize a block to bytes.

    Args:
        block: Raw bytes, or text that will be UTF-8 encoded

    Returns:
        The block as immutable bytes

    Raises:
        TypeError: If the block is neither bytes nor str
    """
    if isinstance(block, str):
        return block.encode("utf-8")
    if isinstance(block, (bytes, bytearray)):
        return bytes(block)
    raise TypeError(f"Block must be bytes or str, got {type(block).__name__}")


def hash_block(block: Block) -> Digest:
    """Digest a single block (the leaf value for that block)."""
    return digest(block_bytes(block))


def combine(left: Digest, right: Digest) -> Digest:
    """
    Fold two child digests into their parent digest.

    Each digest is rendered as lowercase hex, the left rendering is
    placed before the right one, and the ASCII text is hashed. The
    argument order is significant: combine(a, b) != combine(b, a).

    Args:
        left: Left child digest
        right: Right child digest

    Returns:
        Parent digest (32 bytes)
    """
    return digest((left.hex() + right.hex()).encode("ascii"))


def is_digest(value: object) -> bool:
    """Check that a value has the shape of a digest (32 raw bytes)."""
    return isinstance(value, (bytes, bytearray)) and len(value) == DIGEST_SIZE


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Args:
        data: Raw bytes

    Returns:
        Hex string with 0x prefix (e.g., "0x1234abcd")

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

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
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


def digest_from_hex(hex_string: str) -> Digest:
    """
    Decode a 0x-prefixed hex string that must hold exactly one digest.

    Raises:
        ValueError: If the string is malformed or not 32 bytes long
    """
    value = from_hex(hex_string)
    if len(value) != DIGEST_SIZE:
        raise ValueError(
            f"Digest must be {DIGEST_SIZE} bytes, got {len(value)}"
        )
    return value


__all__ = [
    "Digest",
    "Block",
    "DIGEST_SIZE",
    "EMPTY_BLOCK_DIGEST",
    "digest",
    "block_bytes",
    "hash_block",
    "combine",
    "is_digest",
    "to_hex",
    "from_hex",
    "digest_from_hex",
]

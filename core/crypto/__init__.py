"""
Core cryptographic utilities.

Module 02 provides the digest and pair-combination primitives.
"""
from .hashing import (
    Digest,
    Block,
    DIGEST_SIZE,
    EMPTY_BLOCK_DIGEST,
    digest,
    block_bytes,
    hash_block,
    combine,
    is_digest,
    to_hex,
    from_hex,
    digest_from_hex,
)

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

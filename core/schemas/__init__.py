"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
Wire models live in core.schemas.proof and are imported from there
(they depend on core.merkle, which itself depends on the errors here).
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
    loads_canonical,
)

# Error models and exceptions
from .errors import (
    ErrorCodes,
    MerkleError,
    MerkleException,
    IndexOutOfRangeException,
    DuplicateIndexException,
    CanonicalizationException,
)

__all__ = [
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    "loads_canonical",
    "ErrorCodes",
    "MerkleError",
    "MerkleException",
    "IndexOutOfRangeException",
    "DuplicateIndexException",
    "CanonicalizationException",
]

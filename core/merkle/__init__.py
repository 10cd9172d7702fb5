"""
Modules 02/03 - Merkle Trees and Proofs
Deterministic hash-tree construction + single and compact multi proofs.

Owner: Protocol/Crypto Engineer
Module IDs: M02, M03

This module provides:
- build_root: Root digest for the padded or ragged tree shape
- generate_proof / validate_proof: Single-block sibling path (padded tree)
- generate_multiproof / validate_multiproof: Compact proof for many
  blocks with shared siblings deduplicated (ragged tree)

Canonical Commitment Rules:
1. Leaf hashing: sha256(block)
2. Parent hashing: sha256(hex(left) + hex(right))
3. Padding (single proofs only): sha256(b"") up to a power of two
4. Ragged carry (multiproofs only): odd trailing node moves up unchanged
5. Empty sequence: sha256(b"")

Usage:
    from core.merkle import generate_proof, validate_proof, blocks_from_sentence

    blocks = blocks_from_sentence("You trust, me, right?")
    root, proof = generate_proof(blocks, 1)
    assert validate_proof(root, b"trust,", proof)

    root, multiproof = generate_multiproof(blocks, [0, 3])
    assert validate_multiproof(root, [b"You", b"right?"], multiproof)
"""
from .merkle_tree import (
    TreeShape,
    Known,
    Unknown,
    NodeState,
    blocks_from_sentence,
    leaf_digests,
    pad_leaves,
    fold_level,
    build_root,
    compute_tree_depth,
    walk_ragged_levels,
)

from .merkle_proofs import (
    Side,
    SiblingNode,
    MerkleProof,
    generate_proof,
    validate_proof,
)

from .multiproof import (
    CompactMerkleMultiProof,
    generate_multiproof,
    validate_multiproof,
)


__all__ = [
    # Tree shape
    "TreeShape",
    "Known",
    "Unknown",
    "NodeState",
    "blocks_from_sentence",
    "leaf_digests",
    "pad_leaves",
    "fold_level",
    "build_root",
    "compute_tree_depth",
    "walk_ragged_levels",
    # Single proofs
    "Side",
    "SiblingNode",
    "MerkleProof",
    "generate_proof",
    "validate_proof",
    # Multiproofs
    "CompactMerkleMultiProof",
    "generate_multiproof",
    "validate_multiproof",
]

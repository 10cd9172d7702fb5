"""
Module 02 - Single Merkle Proofs
Sibling-path proof generation and verification over the padded tree.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Side / SiblingNode: a sibling digest tagged with its position
- generate_proof: root plus sibling path for one block
- validate_proof: replay a sibling path against a claimed block

Proof Rules:
- The proof is ordered from the leaf level up to, but excluding, the root
- Side.LEFT(s) means the sibling sits left: parent = combine(s, current)
- Side.RIGHT(s) means the sibling sits right: parent = combine(current, s)
- Proofs are always built over the PADDED tree shape
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from core.crypto.hashing import (
    Block,
    Digest,
    block_bytes,
    combine,
    digest,
    is_digest,
)
from core.merkle.merkle_tree import TreeShape, build_leaf_level, fold_level
from core.schemas.errors import IndexOutOfRangeException


logger = logging.getLogger(__name__)


class Side(str, Enum):
    """Position of a sibling relative to the node being proven."""

    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class SiblingNode:
    """
    A sibling along the path from a leaf to the root.

    Attributes:
        side: Which side of the path node the sibling sits on
        digest: The sibling's digest
    """
    side: Side
    digest: Digest

    @classmethod
    def left(cls, value: Digest) -> "SiblingNode":
        return cls(Side.LEFT, value)

    @classmethod
    def right(cls, value: Digest) -> "SiblingNode":
        return cls(Side.RIGHT, value)


# A proof is an ordered list of sibling nodes, leaf level first
MerkleProof = list[SiblingNode]


def generate_proof(blocks: Sequence[Block], index: int) -> tuple[Digest, MerkleProof]:
    """
    Generate the root and inclusion proof for the block at `index`.

    Algorithm:
    1. Build the padded leaf level
    2. At each level record the sibling of the current node:
       Side.RIGHT if the current node is a left child,
       Side.LEFT if it is a right child
    3. Move up: index = index // 2, until one node remains

    Example:
        >>> blocks = blocks_from_sentence("You trust, me, right?")
        >>> root, proof = generate_proof(blocks, 1)
        >>> len(proof)
        2
        >>> validate_proof(root, b"trust,", proof)
        True

    Args:
        blocks: Ordered blocks
        index: 0-based index of the block to prove

    Returns:
        (root, proof) where proof is ordered leaf level first

    Raises:
        IndexOutOfRangeException: If index does not address a real block
            (padding leaves cannot be proven)
    """
    if index < 0 or index >= len(blocks):
        raise IndexOutOfRangeException(index, len(blocks))

    level = build_leaf_level(blocks, TreeShape.PADDED)
    proof: MerkleProof = []
    current_index = index

    while len(level) > 1:
        if current_index % 2 == 0:
            proof.append(SiblingNode.right(level[current_index + 1]))
        else:
            proof.append(SiblingNode.left(level[current_index - 1]))

        level = fold_level(level)
        current_index //= 2

    logger.debug("Generated proof for index %d with %d siblings", index, len(proof))
    return level[0], proof


def validate_proof(root: Digest, claimed_block: Block, proof: Sequence[SiblingNode]) -> bool:
    """
    Check that `claimed_block` is included under `root` via `proof`.

    Never raises: a malformed proof (wrong entry type, wrong digest
    width, unknown side) or a wrong block simply returns False.

    Args:
        root: The trusted root digest
        claimed_block: The block whose inclusion is claimed
        proof: Sibling path, leaf level first

    Returns:
        True if replaying the path reproduces `root`, False otherwise
    """
    if not is_digest(root):
        return False
    if not isinstance(claimed_block, (bytes, bytearray, str)):
        return False
    if not isinstance(proof, (list, tuple)):
        return False

    current = digest(block_bytes(claimed_block))

    for node in proof:
        if not isinstance(node, SiblingNode) or not is_digest(node.digest):
            return False
        if node.side == Side.LEFT:
            current = combine(bytes(node.digest), current)
        elif node.side == Side.RIGHT:
            current = combine(current, bytes(node.digest))
        else:
            return False

    return current == bytes(root)


__all__ = [
    "Side",
    "SiblingNode",
    "MerkleProof",
    "generate_proof",
    "validate_proof",
]

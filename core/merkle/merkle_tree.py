"""
Module 02 - Merkle Tree Implementation
Deterministic tree construction for both tree-shape policies.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Leaf digests for an ordered block sequence
- The padded (power-of-two) and ragged (unpadded) tree shapes
- Root computation for either shape
- The Known/Unknown level walker that emits multiproof fill-in digests

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = sha256(block)
2. Parent hashing: parent = combine(left, right)
   - Implemented via core.crypto.hashing.combine()
3. PADDED shape: leaf level is right-padded with sha256(b"") up to the
   next power of two
4. RAGGED shape: no padding; an odd trailing node is carried up to the
   next level unchanged
5. Empty sequence: root = sha256(b"") for both shapes
6. Single block: root = sha256(block)

Determinism Notes:
- No randomness or non-deterministic ordering
- This module never sorts blocks - it trusts input order
- No tree object is kept; every call derives fresh level lists
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence, Union

from core.crypto.hashing import (
    EMPTY_BLOCK_DIGEST,
    Block,
    Digest,
    combine,
    hash_block,
)


logger = logging.getLogger(__name__)


class TreeShape(str, Enum):
    """Tree-shape policy used when folding leaves into a root."""

    PADDED = "padded"
    RAGGED = "ragged"


def is_power_of_two(n: int) -> bool:
    """Check whether n is a positive power of two."""
    return n > 0 and (n & (n - 1)) == 0


def blocks_from_sentence(sentence: str) -> list[bytes]:
    """
    Split a sentence into word blocks.

    Words are separated by one or more whitespace characters.
    Punctuation stays attached to its word.

    Example:
        >>> blocks_from_sentence("You trust  me, right?")
        [b'You', b'trust', b'me,', b'right?']
    """
    return [word.encode("utf-8") for word in sentence.split()]


def leaf_digests(blocks: Sequence[Block]) -> list[Digest]:
    """Digest every block in order, producing the unpadded leaf level."""
    return [hash_block(block) for block in blocks]


def pad_leaves(leaves: Sequence[Digest]) -> list[Digest]:
    """
    Right-pad a leaf level with the empty-block digest up to a power of two.

    An empty level becomes a single empty-block leaf.

    Example: [a, b, c] -> [a, b, c, sha256(b"")]
    """
    padded = list(leaves)
    while not is_power_of_two(len(padded)):
        padded.append(EMPTY_BLOCK_DIGEST)
    return padded


def fold_level(level: Sequence[Digest]) -> list[Digest]:
    """
    Combine adjacent pairs of a level into the next level up.

    A trailing unpaired node is carried into the next level unchanged.
    Padded levels are always even, so the carry only ever applies to
    the ragged shape.
    """
    next_level = [
        combine(level[i], level[i + 1])
        for i in range(0, len(level) - 1, 2)
    ]
    if len(level) % 2 == 1:
        next_level.append(level[-1])
    return next_level


def build_leaf_level(
    blocks: Sequence[Block],
    shape: TreeShape = TreeShape.PADDED,
) -> list[Digest]:
    """
    Build the leaf level for the given shape.

    The padded shape always has a power-of-two leaf count. The ragged
    shape has exactly one leaf per block and may be empty.
    """
    leaves = leaf_digests(blocks)
    if shape == TreeShape.PADDED:
        return pad_leaves(leaves)
    return leaves


def build_root(
    blocks: Sequence[Block],
    shape: TreeShape = TreeShape.PADDED,
) -> Digest:
    """
    Build the root digest of an ordered block sequence.

    Algorithm:
    1. Digest each block (leaf level)
    2. PADDED only: pad with sha256(b"") to a power of two
    3. Fold adjacent pairs level by level until one digest remains

    Example:
        >>> blocks = [b"a", b"b", b"c"]
        >>> build_root(blocks) == combine(
        ...     combine(digest(b"a"), digest(b"b")),
        ...     combine(digest(b"c"), EMPTY_BLOCK_DIGEST),
        ... )
        True
        >>> build_root(blocks, TreeShape.RAGGED) == combine(
        ...     combine(digest(b"a"), digest(b"b")),
        ...     digest(b"c"),
        ... )
        True

    Args:
        blocks: Ordered blocks (bytes, or str encoded as UTF-8)
        shape: Tree-shape policy

    Returns:
        32-byte root digest
    """
    level = build_leaf_level(blocks, shape)
    if not level:
        return EMPTY_BLOCK_DIGEST

    while len(level) > 1:
        level = fold_level(level)

    logger.debug("Built %s root over %d blocks", shape.value, len(blocks))
    return level[0]


def compute_tree_depth(
    num_leaves: int,
    shape: TreeShape = TreeShape.PADDED,
) -> int:
    """
    Compute the number of combine levels between the leaves and the root.

    This equals the length of a single proof in the padded shape.
    Zero or one leaf has depth 0.
    """
    if num_leaves <= 1:
        return 0

    depth = 0
    n = num_leaves
    while n > 1:
        if shape == TreeShape.PADDED and n % 2 == 1:
            n += 1
        n = (n + 1) // 2
        depth += 1
    return depth


# =============================================================================
# Known/Unknown level walker (ragged shape)
# =============================================================================

@dataclass(frozen=True)
class Known:
    """A node whose digest follows from the claimed blocks alone."""
    digest: Digest


@dataclass(frozen=True)
class Unknown:
    """
    A node that needs a fill-in digest once it meets a Known node.

    The prover tracks the true digest so it can hand it out when the
    node gets paired against a Known one; without one it carries None.
    """
    digest: Optional[Digest] = None


NodeState = Union[Known, Unknown]

# Supplies the digest of an Unknown node at the moment it is paired
# against a Known node. Called in level order, left to right.
FillIn = Callable[[Unknown], Digest]


def _fold_pair(left: NodeState, right: NodeState, fill_in: FillIn) -> NodeState:
    if isinstance(left, Known) and isinstance(right, Known):
        return Known(combine(left.digest, right.digest))
    if isinstance(left, Known):
        return Known(combine(left.digest, fill_in(right)))
    if isinstance(right, Known):
        return Known(combine(fill_in(left), right.digest))
    if left.digest is None or right.digest is None:
        return Unknown()
    return Unknown(combine(left.digest, right.digest))


def walk_ragged_levels(
    leaves: Sequence[NodeState],
    fill_in: FillIn,
) -> NodeState:
    """
    Propagate Known/Unknown tags from the leaf level up to the root.

    Per level, nodes are paired left to right:
    - Known + Known: parent is Known, nothing requested
    - Known + Unknown: fill_in() supplies the Unknown side, parent is Known
    - Unknown + Unknown: parent is Unknown (value tracked if both sides
      carry one), nothing requested yet
    - An odd trailing node is carried to the next level unchanged

    Args:
        leaves: Tagged leaf level, one node per real block (no padding)
        fill_in: Called once per Unknown node that meets a Known node,
            in level order and ascending position within a level

    Returns:
        The single remaining node (the root)

    Raises:
        ValueError: If the leaf level is empty
    """
    if not leaves:
        raise ValueError("Cannot walk an empty leaf level")

    level: list[NodeState] = list(leaves)
    while len(level) > 1:
        next_level = [
            _fold_pair(level[i], level[i + 1], fill_in)
            for i in range(0, len(level) - 1, 2)
        ]
        if len(level) % 2 == 1:
            next_level.append(level[-1])
        level = next_level

    return level[0]


__all__ = [
    "TreeShape",
    "is_power_of_two",
    "blocks_from_sentence",
    "leaf_digests",
    "pad_leaves",
    "fold_level",
    "build_leaf_level",
    "build_root",
    "compute_tree_depth",
    "Known",
    "Unknown",
    "NodeState",
    "FillIn",
    "walk_ragged_levels",
]

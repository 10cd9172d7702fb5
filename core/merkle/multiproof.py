"""
Module 03 - Compact Merkle Multiproofs
Proof of inclusion for many blocks at once over the ragged tree.

Owner: Protocol/Crypto Engineer
Module ID: M03

To verify a proof for the X's below only the H nodes are needed; every
O can be recomputed. The H's are numbered by their position in the
proof, which is the order the verifier consumes them in: level by level
from the leaves up, left to right within a level.

                         O
                      /     \\
                   O           O
                 /   \\       /   \\
                O    H_1   H_2    O
               / \\   / \\   / \\   / \\
              X  X  O  O  O  O  X  H_0

    CompactMerkleMultiProof(leaf_indices=[0, 1, 6],
                            hashes=[H_0, H_1, H_2],
                            leaf_count=8)

Proof Rules:
- The tree is never padded: leaf count equals block count, and an odd
  trailing node is carried up unchanged
- leaf_indices keeps the caller's order; claimed blocks are matched to
  indices by list position
- A repeated index is rejected at generation (DuplicateIndexException)
  and at validation (returns False)
- Validation only visits claimed positions; the proof's leaf_count
  is bound to the tree only when the caller supplies the trusted count
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from core.crypto.hashing import (
    EMPTY_BLOCK_DIGEST,
    Block,
    Digest,
    block_bytes,
    combine,
    digest,
    is_digest,
)
from core.merkle.merkle_tree import (
    Known,
    NodeState,
    TreeShape,
    Unknown,
    compute_tree_depth,
    leaf_digests,
    walk_ragged_levels,
)
from core.schemas.errors import DuplicateIndexException, IndexOutOfRangeException


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompactMerkleMultiProof:
    """
    A compact proof that several blocks belong to one ragged tree.

    Attributes:
        leaf_indices: The requested indices, in request order
        hashes: Fill-in digests, leaf level first, ascending position
            within a level
        leaf_count: Number of real blocks in the committed sequence,
            which fixes the ragged tree shape
    """
    leaf_indices: list[int]
    hashes: list[Digest] = field(default_factory=list)
    leaf_count: int = 0


class _FillInExhausted(Exception):
    """The verifier needed a fill-in digest the proof did not supply."""


def _check_indices(indices: Sequence[int], block_count: int) -> None:
    seen: set[int] = set()
    for index in indices:
        if index < 0 or index >= block_count:
            raise IndexOutOfRangeException(index, block_count)
        if index in seen:
            raise DuplicateIndexException(index)
        seen.add(index)


def generate_multiproof(
    blocks: Sequence[Block],
    indices: Sequence[int],
) -> tuple[Digest, CompactMerkleMultiProof]:
    """
    Generate the ragged root and a compact multiproof for `indices`.

    Algorithm:
    1. Build the unpadded leaf level
    2. Tag requested leaves Known and all others Unknown, each carrying
       its true digest
    3. Walk the levels; each time an Unknown node is paired against a
       Known node its digest is appended to the proof
    4. The remaining node's digest is the root

    Args:
        blocks: Ordered blocks
        indices: Indices to prove, in any order

    Returns:
        (root, multiproof); root equals build_root(blocks, TreeShape.RAGGED)

    Raises:
        IndexOutOfRangeException: If an index does not address a block
        DuplicateIndexException: If an index is requested twice
    """
    _check_indices(indices, len(blocks))

    if not blocks:
        return EMPTY_BLOCK_DIGEST, CompactMerkleMultiProof(
            leaf_indices=[], hashes=[], leaf_count=0,
        )

    requested = set(indices)
    leaves: list[NodeState] = [
        Known(leaf) if position in requested else Unknown(leaf)
        for position, leaf in enumerate(leaf_digests(blocks))
    ]

    hashes: list[Digest] = []

    def emit(node: Unknown) -> Digest:
        hashes.append(node.digest)
        return node.digest

    root_node = walk_ragged_levels(leaves, emit)

    logger.debug(
        "Generated multiproof for %d of %d blocks with %d fill-in hashes",
        len(requested), len(blocks), len(hashes),
    )
    return root_node.digest, CompactMerkleMultiProof(
        leaf_indices=list(indices),
        hashes=hashes,
        leaf_count=len(blocks),
    )


def _next_fill_in(supplied: Iterator[Digest]) -> Digest:
    try:
        return bytes(next(supplied))
    except StopIteration:
        raise _FillInExhausted() from None


def _fold_known_positions(
    known: dict[int, Digest],
    level_len: int,
    supplied: Iterator[Digest],
) -> dict[int, Digest]:
    """
    Fold the known nodes of one ragged level into the next level up.

    Only known positions are visited, in ascending order, so fill-in
    digests are consumed in the same order generate_multiproof emits
    them. The node at position level_len - 1 of an odd level is carried.
    """
    parents: dict[int, Digest] = {}
    for position in sorted(known):
        parent = position // 2
        if parent in parents:
            # right half of a Known + Known pair
            continue
        node = known[position]
        if position % 2 == 1:
            parents[parent] = combine(_next_fill_in(supplied), node)
        elif position == level_len - 1:
            parents[parent] = node
        elif position + 1 in known:
            parents[parent] = combine(node, known[position + 1])
        else:
            parents[parent] = combine(node, _next_fill_in(supplied))
    return parents


def _is_index(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_multiproof(
    root: Digest,
    claimed_blocks: Sequence[Block],
    multiproof: CompactMerkleMultiProof,
    expected_leaf_count: Optional[int] = None,
) -> bool:
    """
    Check that `claimed_blocks` sit at `multiproof.leaf_indices` under `root`.

    claimed_blocks[i] is checked against leaf_indices[i]. Fill-in hashes
    are consumed in order as the walk needs them. Work is proportional
    to the number of indices times the tree depth, whatever leaf_count
    the proof claims.

    The root alone does not fix leaf_count: a prover can pick a smaller
    tree whose subtree digests line up with the real one. Callers that
    know how many blocks were committed pass it as expected_leaf_count.

    Never raises. Returns False when:
    - the proof fields or claimed blocks are not lists of the right types
    - the number of blocks and indices differ, or no index is given
    - an index repeats or falls outside [0, leaf_count)
    - leaf_count differs from expected_leaf_count
    - the proof carries more fill-in hashes than the tree could need
    - the proof runs out of fill-in hashes or has some left over
    - the recomputed root differs from `root`

    Args:
        root: The trusted ragged root
        claimed_blocks: Blocks in the same order as leaf_indices
        multiproof: The proof to check
        expected_leaf_count: Trusted block count, if the caller has one

    Returns:
        True if the proof is valid, False otherwise
    """
    if not is_digest(root) or not isinstance(multiproof, CompactMerkleMultiProof):
        return False

    indices = multiproof.leaf_indices
    hashes = multiproof.hashes
    leaf_count = multiproof.leaf_count

    if not all(isinstance(v, (list, tuple)) for v in (indices, hashes, claimed_blocks)):
        return False
    if not indices or len(claimed_blocks) != len(indices):
        return False
    if not _is_index(leaf_count):
        return False
    if expected_leaf_count is not None and leaf_count != expected_leaf_count:
        return False
    if any(not _is_index(i) or i < 0 or i >= leaf_count for i in indices):
        return False
    if len(set(indices)) != len(indices):
        return False
    if not all(isinstance(b, (bytes, bytearray, str)) for b in claimed_blocks):
        return False
    if len(hashes) > len(indices) * compute_tree_depth(leaf_count, TreeShape.RAGGED):
        return False
    if not all(is_digest(h) for h in hashes):
        return False

    known = {
        index: digest(block_bytes(block))
        for index, block in zip(indices, claimed_blocks)
    }
    supplied: Iterator[Digest] = iter(hashes)

    level_len = leaf_count
    try:
        while level_len > 1:
            known = _fold_known_positions(known, level_len, supplied)
            level_len = (level_len + 1) // 2
    except _FillInExhausted:
        logger.debug("Multiproof rejected: ran out of fill-in hashes")
        return False

    if next(supplied, None) is not None:
        logger.debug("Multiproof rejected: unused fill-in hashes")
        return False

    return known.get(0) == bytes(root)


__all__ = [
    "CompactMerkleMultiProof",
    "generate_multiproof",
    "validate_multiproof",
]

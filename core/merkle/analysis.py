"""
Module 03 - Proof Size Analysis

Compares the size of one compact multiproof against the combined size
of independent single proofs for the same indices. Used for analysis
only; proof correctness never depends on it.

Size model (bytes):
- compact:    8 per leaf index + 32 per fill-in hash
- individual: 33 per sibling entry (32-byte digest + 1 side byte)
"""
from __future__ import annotations

import random
import string
from dataclasses import dataclass
from typing import Optional, Sequence

from core.crypto.hashing import DIGEST_SIZE, Block
from core.merkle.merkle_proofs import generate_proof
from core.merkle.multiproof import generate_multiproof


INDEX_SIZE = 8
SIDE_TAG_SIZE = 1


@dataclass(frozen=True)
class ProofSizeComparison:
    """Result of compare_proof_sizes()."""
    indices: list[int]
    compact_size: int
    individual_size: int

    @property
    def ratio(self) -> float:
        """How many times smaller the compact proof is."""
        if self.compact_size == 0:
            return 0.0
        return self.individual_size / self.compact_size


def string_of_random_words(n: int, rng: Optional[random.Random] = None) -> str:
    """Generate a space-separated string of `n` random 4-letter words."""
    rng = rng or random.Random()
    return " ".join(
        "".join(rng.choice(string.ascii_lowercase) for _ in range(4))
        for _ in range(n)
    )


def compare_proof_sizes(
    blocks: Sequence[Block],
    length: int,
    num_proofs: int,
    seed: int = 0,
) -> ProofSizeComparison:
    """
    Compare compact and individual proof sizes for random indices.

    `num_proofs` distinct indices are sampled from [0, length) with a
    seeded RNG, so results are reproducible.

    Args:
        blocks: Ordered blocks the tree is built from
        length: Upper bound (exclusive) of the sampled indices
        num_proofs: Number of indices to prove
        seed: RNG seed

    Returns:
        ProofSizeComparison with both sizes in bytes

    Raises:
        ValueError: If more proofs than indices are requested, or
            length exceeds the number of blocks
    """
    if num_proofs > length:
        raise ValueError("Cannot make more proofs than available indices")
    if length > len(blocks):
        raise ValueError(
            f"Index range {length} exceeds block count {len(blocks)}"
        )

    rng = random.Random(seed)
    indices = rng.sample(range(length), num_proofs)

    _, compact = generate_multiproof(blocks, indices)
    compact_size = INDEX_SIZE * len(compact.leaf_indices) + DIGEST_SIZE * len(compact.hashes)

    individual_size = 0
    for index in indices:
        _, proof = generate_proof(blocks, index)
        individual_size += (DIGEST_SIZE + SIDE_TAG_SIZE) * len(proof)

    return ProofSizeComparison(
        indices=indices,
        compact_size=compact_size,
        individual_size=individual_size,
    )


__all__ = [
    "ProofSizeComparison",
    "string_of_random_words",
    "compare_proof_sizes",
]

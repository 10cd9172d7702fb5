"""
Module 01 - Schemas & Canonicalization
File: proof.py

Purpose: Wire representations of proofs for files and HTTP bodies.
Digests travel as 0x-prefixed lowercase hex (66 characters).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.crypto.hashing import Digest, digest_from_hex, to_hex
from core.merkle.merkle_proofs import MerkleProof, Side, SiblingNode
from core.merkle.multiproof import CompactMerkleMultiProof


def _check_digest_hex(value: str) -> str:
    digest_from_hex(value)
    return value.lower()


class SiblingModel(BaseModel):
    """One sibling entry of a single proof."""

    model_config = ConfigDict(extra="forbid")

    side: Side = Field(..., description="Side of the sibling relative to the path node")
    hash: str = Field(..., description="Sibling digest as 0x-prefixed hex")

    @field_validator("hash")
    @classmethod
    def validate_hash(cls, v: str) -> str:
        return _check_digest_hex(v)

    @classmethod
    def from_domain(cls, node: SiblingNode) -> "SiblingModel":
        return cls(side=node.side, hash=to_hex(node.digest))

    def to_domain(self) -> SiblingNode:
        return SiblingNode(self.side, digest_from_hex(self.hash))


class MerkleProofEnvelope(BaseModel):
    """
    A single-block proof together with the root it proves against.

    The root is informational: a verifier must compare against a root
    it obtained independently.
    """

    model_config = ConfigDict(extra="forbid")

    root: str = Field(..., description="Padded-tree root as 0x-prefixed hex")
    index: int = Field(..., ge=0, description="Index of the proven block")
    proof: list[SiblingModel] = Field(default_factory=list)

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: str) -> str:
        return _check_digest_hex(v)

    @classmethod
    def from_domain(cls, root: Digest, index: int, proof: MerkleProof) -> "MerkleProofEnvelope":
        return cls(
            root=to_hex(root),
            index=index,
            proof=[SiblingModel.from_domain(node) for node in proof],
        )

    @property
    def root_digest(self) -> Digest:
        return digest_from_hex(self.root)

    def to_domain(self) -> MerkleProof:
        return [entry.to_domain() for entry in self.proof]


class MultiProofEnvelope(BaseModel):
    """A compact multiproof together with the ragged root it proves against."""

    model_config = ConfigDict(extra="forbid")

    root: str = Field(..., description="Ragged-tree root as 0x-prefixed hex")
    leaf_count: int = Field(..., ge=0, description="Number of blocks in the tree")
    leaf_indices: list[int] = Field(default_factory=list)
    hashes: list[str] = Field(default_factory=list)

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: str) -> str:
        return _check_digest_hex(v)

    @field_validator("hashes")
    @classmethod
    def validate_hashes(cls, v: list[str]) -> list[str]:
        return [_check_digest_hex(h) for h in v]

    @classmethod
    def from_domain(cls, root: Digest, multiproof: CompactMerkleMultiProof) -> "MultiProofEnvelope":
        return cls(
            root=to_hex(root),
            leaf_count=multiproof.leaf_count,
            leaf_indices=list(multiproof.leaf_indices),
            hashes=[to_hex(h) for h in multiproof.hashes],
        )

    @property
    def root_digest(self) -> Digest:
        return digest_from_hex(self.root)

    def to_domain(self) -> CompactMerkleMultiProof:
        return CompactMerkleMultiProof(
            leaf_indices=list(self.leaf_indices),
            hashes=[digest_from_hex(h) for h in self.hashes],
            leaf_count=self.leaf_count,
        )


__all__ = [
    "SiblingModel",
    "MerkleProofEnvelope",
    "MultiProofEnvelope",
]

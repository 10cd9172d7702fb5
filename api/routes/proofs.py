"""
Module 09D - Proof Routes

Generate proofs for held files, and check proofs on request.

Single proofs are over the padded tree, multiproofs over the ragged
tree; the two roots differ whenever the file count is not a power of
two.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_store
from api.errors import FileNotFoundAPIError, InvalidRequestError
from api.models.requests import (
    MultiProofRequest,
    VerifyMultiProofRequest,
    VerifyProofRequest,
)
from api.models.responses import MultiProofResponse, ProofResponse, VerifyResponse
from api.store import BlockStore
from core.crypto.hashing import digest_from_hex
from core.merkle import (
    generate_multiproof,
    generate_proof,
    validate_multiproof,
    validate_proof,
)
from core.schemas.proof import MerkleProofEnvelope, MultiProofEnvelope


logger = logging.getLogger(__name__)

router = APIRouter(tags=["proofs"])


@router.get("/proof/{name}", response_model=ProofResponse)
def proof(name: str, store: BlockStore = Depends(get_store)) -> ProofResponse:
    """Single inclusion proof for one held file."""
    snapshot = store.snapshot()
    try:
        index = snapshot.index_of(name)
    except KeyError:
        raise FileNotFoundAPIError(name) from None

    root, siblings = generate_proof(snapshot.contents, index)
    logger.info(f"Proof for {name} (index {index}): {len(siblings)} siblings")

    return ProofResponse(
        name=name,
        proof=MerkleProofEnvelope.from_domain(root, index, siblings),
    )


@router.post("/multiproof", response_model=MultiProofResponse)
def multiproof(
    request: MultiProofRequest,
    store: BlockStore = Depends(get_store),
) -> MultiProofResponse:
    """
    Compact multiproof for several held files.

    A repeated name maps to a repeated index and is rejected with
    DUPLICATE_INDEX by the proof generator.
    """
    snapshot = store.snapshot()
    indices: list[int] = []
    for name in request.names:
        try:
            indices.append(snapshot.index_of(name))
        except KeyError:
            raise FileNotFoundAPIError(name) from None

    root, compact = generate_multiproof(snapshot.contents, indices)
    logger.info(f"Multiproof for {len(indices)} files: {len(compact.hashes)} fill-in hashes")

    return MultiProofResponse(
        names=list(request.names),
        proof=MultiProofEnvelope.from_domain(root, compact),
    )


def _trusted_root(value: str) -> bytes:
    try:
        return digest_from_hex(value)
    except ValueError as e:
        raise InvalidRequestError(f"Invalid root: {e}") from e


@router.post("/verify", response_model=VerifyResponse)
def verify(request: VerifyProofRequest) -> VerifyResponse:
    """Check a single proof against a caller-supplied root."""
    root = _trusted_root(request.root)
    valid = validate_proof(root, request.block, request.proof.to_domain())
    return VerifyResponse(valid=valid)


@router.post("/verify/multiproof", response_model=VerifyResponse)
def verify_multiproof(request: VerifyMultiProofRequest) -> VerifyResponse:
    """Check a compact multiproof against a caller-supplied root."""
    root = _trusted_root(request.root)
    valid = validate_multiproof(
        root, request.blocks, request.proof.to_domain(), request.leaf_count,
    )
    return VerifyResponse(valid=valid)

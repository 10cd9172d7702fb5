"""
Module 09D - API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field

from core.schemas.proof import MerkleProofEnvelope, MultiProofEnvelope


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "blockproof-api"
    version: str = "v1"
    files: int = Field(default=0, description="Number of files held")


class UploadResponse(BaseModel):
    """Response for POST /upload endpoint."""

    ok: bool = True
    root: str = Field(..., description="Padded-tree root over all held files")
    count: int = Field(..., description="Number of files held after the upload")
    names: list[str] = Field(default_factory=list, description="Held files in block order")


class FileEntry(BaseModel):
    """One held file."""

    name: str
    index: int = Field(..., description="Leaf index of the file")
    size: int = Field(..., description="Content size in bytes")


class FileListResponse(BaseModel):
    """Response for GET /files endpoint."""

    ok: bool = True
    root: str = Field(..., description="Padded-tree root (single proofs)")
    ragged_root: str = Field(..., description="Ragged-tree root (multiproofs)")
    files: list[FileEntry] = Field(default_factory=list)


class ProofResponse(BaseModel):
    """Response for GET /proof/{name} endpoint."""

    ok: bool = True
    name: str = Field(..., description="Proven file")
    proof: MerkleProofEnvelope


class MultiProofResponse(BaseModel):
    """Response for POST /multiproof endpoint."""

    ok: bool = True
    names: list[str] = Field(default_factory=list, description="Proven files, in proof order")
    proof: MultiProofEnvelope


class VerifyResponse(BaseModel):
    """Response for POST /verify and POST /verify/multiproof."""

    ok: bool = True
    valid: bool = Field(..., description="Whether the proof checks out against the root")


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")

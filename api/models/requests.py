"""
Module 09D - API Request Models

Pydantic models for API request validation.
"""

import base64
import binascii
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from core.schemas.proof import MerkleProofEnvelope, MultiProofEnvelope


class UploadRequest(BaseModel):
    """Request body for POST /upload endpoint."""

    files: dict[str, str] = Field(
        ...,
        min_length=1,
        description="File name to content, stored in the given order",
    )
    encoding: Literal["utf-8", "base64"] = Field(
        default="utf-8",
        description="How file contents are encoded in this body",
    )

    @model_validator(mode="after")
    def validate_contents(self) -> "UploadRequest":
        """Reject empty names and undecodable base64 contents."""
        for name, content in self.files.items():
            if not name.strip() or "/" in name:
                raise ValueError(f"Invalid file name: {name!r}")
            if self.encoding == "base64":
                try:
                    base64.b64decode(content, validate=True)
                except binascii.Error as e:
                    raise ValueError(f"Invalid base64 content for {name!r}: {e}") from e
        return self

    def decoded_files(self) -> dict[str, bytes]:
        """File contents as raw bytes, in request order."""
        if self.encoding == "base64":
            return {name: base64.b64decode(c) for name, c in self.files.items()}
        return {name: c.encode("utf-8") for name, c in self.files.items()}


class MultiProofRequest(BaseModel):
    """Request body for POST /multiproof endpoint."""

    names: list[str] = Field(
        ...,
        min_length=1,
        description="Files to prove, in the order their contents will be supplied",
    )


class VerifyProofRequest(BaseModel):
    """Request body for POST /verify endpoint."""

    root: str = Field(..., description="Trusted padded-tree root as 0x-prefixed hex")
    block: str = Field(..., description="Claimed block content (UTF-8 text)")
    proof: MerkleProofEnvelope = Field(..., description="Proof to check")


class VerifyMultiProofRequest(BaseModel):
    """Request body for POST /verify/multiproof endpoint."""

    root: str = Field(..., description="Trusted ragged-tree root as 0x-prefixed hex")
    blocks: list[str] = Field(..., description="Claimed block contents, in proof order")
    proof: MultiProofEnvelope = Field(..., description="Proof to check")
    leaf_count: Optional[int] = Field(
        default=None,
        ge=0,
        description="Trusted number of committed blocks; the proof must match it",
    )

"""API request and response models."""

from api.models.requests import (
    UploadRequest,
    MultiProofRequest,
    VerifyProofRequest,
    VerifyMultiProofRequest,
)
from api.models.responses import (
    HealthResponse,
    UploadResponse,
    FileEntry,
    FileListResponse,
    ProofResponse,
    MultiProofResponse,
    VerifyResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "UploadRequest",
    "MultiProofRequest",
    "VerifyProofRequest",
    "VerifyMultiProofRequest",
    "HealthResponse",
    "UploadResponse",
    "FileEntry",
    "FileListResponse",
    "ProofResponse",
    "MultiProofResponse",
    "VerifyResponse",
    "ErrorDetail",
    "ErrorResponse",
]

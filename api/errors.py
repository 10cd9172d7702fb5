"""
Module 09D - API Error Handling

Every failure leaves the service as an ErrorResponse body:
- APIError subclasses for service-level problems (unknown file, bad root)
- MerkleException from proof generation, as 400 with its own code
- Anything else as a 500 INTERNAL_ERROR
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorDetail, ErrorResponse
from core.schemas.errors import ErrorCodes, MerkleException


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details or {}),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


class APIError(Exception):
    """Service error carrying its HTTP status and a stable code."""

    status_code = 400
    code = "API_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidRequestError(APIError):
    """Well-formed body with an unusable value (e.g. a root of the wrong width)."""

    code = "INVALID_REQUEST"


class FileNotFoundAPIError(APIError):
    """Requested file is not held by the server."""

    status_code = 404
    code = ErrorCodes.FILE_NOT_FOUND

    def __init__(self, name: str):
        super().__init__(f"File not found: {name}", details={"name": name})


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    return error_response(exc.status_code, exc.code, exc.message, exc.details)


async def merkle_error_handler(request: Request, exc: MerkleException) -> JSONResponse:
    """Proof generation rejected the requested indices."""
    error = exc.to_error_model()
    return error_response(400, error.code, error.message, error.details)


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(
        500,
        "INTERNAL_ERROR",
        "An unexpected error occurred",
        {"type": type(exc).__name__},
    )

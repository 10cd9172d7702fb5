"""
HTTP Client Module

HTTP client and the verifier-side client for the file-holder service.
"""

from .client import HttpClient, HttpError, HttpResponse
from .file_server import FileServerClient, VerificationError, connect

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
    "FileServerClient",
    "VerificationError",
    "connect",
]

"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Error taxonomy for the hash-tree engine and its collaborators.

Only proof *generation* raises. Validation functions are total and
report dishonest or malformed proofs by returning False. Each exception
has a MerkleError twin so a failure can cross a process boundary (HTTP
body, CLI JSON output) as data.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field


class ErrorCodes:
    """Stable machine-readable error codes."""

    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    DUPLICATE_INDEX = "DUPLICATE_INDEX"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"


class MerkleError(BaseModel):
    """A MerkleException as data."""

    model_config = ConfigDict(extra="forbid")

    code: str = Field(..., examples=[ErrorCodes.INDEX_OUT_OF_RANGE])
    message: str
    details: dict[str, Any] = Field(default_factory=dict)

    def to_exception(self) -> "MerkleException":
        return MerkleException(self.message, code=self.code, details=self.details)


class MerkleException(Exception):
    """
    Base exception for all hash-tree errors.

    Subclasses fix `default_code`; a bare MerkleException may carry any
    code (e.g. one rebuilt from a MerkleError).
    """

    default_code: ClassVar[str] = "MERKLE_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def to_error_model(self) -> MerkleError:
        return MerkleError(code=self.code, message=self.message, details=self.details)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class IndexOutOfRangeException(MerkleException, IndexError):
    """An index does not address a real block (padding leaves included)."""

    default_code = ErrorCodes.INDEX_OUT_OF_RANGE

    def __init__(
        self,
        index: int,
        block_count: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            f"Leaf index {index} out of range for {block_count} blocks",
            details={**(details or {}), "index": index, "block_count": block_count},
        )


class DuplicateIndexException(MerkleException, ValueError):
    """The same index was requested twice in one multiproof."""

    default_code = ErrorCodes.DUPLICATE_INDEX

    def __init__(self, index: int, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            f"Leaf index {index} requested more than once",
            details={**(details or {}), "index": index},
        )


class CanonicalizationException(MerkleException):
    """A value has no canonical JSON rendering."""

    default_code = ErrorCodes.CANONICALIZATION_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=details)


__all__ = [
    "ErrorCodes",
    "MerkleError",
    "MerkleException",
    "IndexOutOfRangeException",
    "DuplicateIndexException",
    "CanonicalizationException",
]

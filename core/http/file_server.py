"""
File Server Client

Talks to the file-holder service and checks what it returns against a
root the caller committed to earlier. The server is never trusted:
every downloaded file is validated locally before it is handed back.
"""

from __future__ import annotations

import base64
import logging
from typing import Mapping, Optional, Sequence, Union
from urllib.parse import quote

from core.crypto.hashing import Digest, digest_from_hex
from core.http.client import HttpClient, HttpError
from core.merkle import validate_multiproof, validate_proof
from core.schemas.proof import MerkleProofEnvelope, MultiProofEnvelope


logger = logging.getLogger(__name__)


class VerificationError(Exception):
    """Raised when served content does not match the trusted root."""

    def __init__(self, message: str, names: Sequence[str]) -> None:
        super().__init__(message)
        self.names = list(names)


class FileServerClient:
    """
    Client for the file-holder service.

    Usage:
        client = FileServerClient(HttpClient(base_url="http://localhost:8000"))
        root = client.upload({"a.txt": b"hello"})
        content = client.fetch_and_verify("a.txt", root, held=["a.txt"])
    """

    def __init__(self, http: HttpClient) -> None:
        self.http = http

    def upload(self, files: Mapping[str, Union[bytes, str]]) -> Digest:
        """
        Upload files in the given order.

        Returns:
            The padded-tree root reported by the server. Callers that
            need a trusted root should compute it locally instead.
        """
        payload = {
            "encoding": "base64",
            "files": {
                name: base64.b64encode(
                    content.encode("utf-8") if isinstance(content, str) else content
                ).decode("ascii")
                for name, content in files.items()
            },
        }
        response = self.http.post("/upload", json=payload)
        response.raise_for_status()
        data = response.json()
        logger.info(f"Uploaded {len(files)} files, server holds {data['count']}")
        return digest_from_hex(data["root"])

    def list_files(self) -> list[str]:
        """Names held by the server, in block order."""
        response = self.http.get("/files")
        response.raise_for_status()
        return [entry["name"] for entry in response.json()["files"]]

    def download(self, name: str) -> bytes:
        response = self.http.get(f"/download/{quote(name)}")
        response.raise_for_status()
        return response.content

    def get_proof(self, name: str) -> MerkleProofEnvelope:
        response = self.http.get(f"/proof/{quote(name)}")
        response.raise_for_status()
        return MerkleProofEnvelope.model_validate(response.json()["proof"])

    def get_multiproof(self, names: Sequence[str]) -> MultiProofEnvelope:
        response = self.http.post("/multiproof", json={"names": list(names)})
        response.raise_for_status()
        return MultiProofEnvelope.model_validate(response.json()["proof"])

    def fetch_and_verify(
        self,
        name: str,
        root: Digest,
        held: Optional[Sequence[str]] = None,
    ) -> bytes:
        """
        Download a file and validate it against a trusted padded root.

        Args:
            name: File to fetch
            root: Trusted padded root
            held: Names in block order as recorded at upload. When given,
                the proof must be for the index `name` had then.

        Raises:
            VerificationError: If the content is not included under root
            HttpError: If the server request fails
        """
        expected_index = _expected_indices([name], held)
        content = self.download(name)
        envelope = self.get_proof(name)

        if expected_index is not None and envelope.index != expected_index[0]:
            raise VerificationError(
                f"File {name} proven at index {envelope.index}, expected {expected_index[0]}",
                [name],
            )
        if not validate_proof(root, content, envelope.to_domain()):
            raise VerificationError(f"File {name} failed verification", [name])

        logger.info(f"File {name} verified")
        return content

    def fetch_many_and_verify(
        self,
        names: Sequence[str],
        ragged_root: Digest,
        held: Optional[Sequence[str]] = None,
    ) -> dict[str, bytes]:
        """
        Download several files and validate them with one multiproof.

        Args:
            names: Files to fetch
            ragged_root: Trusted ragged root
            held: Names in block order as recorded at upload. When given,
                the proof must use their indices and the recorded count.

        Raises:
            VerificationError: If any content is not included under root
            HttpError: If a server request fails
        """
        expected = _expected_indices(names, held)
        contents = [self.download(name) for name in names]
        envelope = self.get_multiproof(names)

        if expected is not None and envelope.leaf_indices != expected:
            raise VerificationError(
                f"Files {', '.join(names)} proven at indices {envelope.leaf_indices}, expected {expected}",
                names,
            )
        leaf_count = len(held) if held is not None else None
        if not validate_multiproof(ragged_root, contents, envelope.to_domain(), leaf_count):
            raise VerificationError(
                f"Files {', '.join(names)} failed verification", names
            )

        logger.info(f"Files {', '.join(names)} verified")
        return dict(zip(names, contents))


def _expected_indices(names: Sequence[str], held: Optional[Sequence[str]]) -> Optional[list[int]]:
    if held is None:
        return None
    positions = {name: index for index, name in enumerate(held)}
    missing = [name for name in names if name not in positions]
    if missing:
        raise VerificationError(f"Not in the uploaded set: {', '.join(missing)}", missing)
    return [positions[name] for name in names]


def connect(base_url: str, timeout: float = 30.0, session: Optional[object] = None) -> FileServerClient:
    """Build a FileServerClient for the given base URL."""
    return FileServerClient(HttpClient(base_url=base_url, timeout=timeout, session=session))


__all__ = [
    "FileServerClient",
    "VerificationError",
    "HttpError",
    "connect",
]

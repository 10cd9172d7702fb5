"""
Module 09D - File Routes

Upload, list and download the files held by the service.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from api.deps import get_store
from api.errors import FileNotFoundAPIError
from api.models.requests import UploadRequest
from api.models.responses import FileEntry, FileListResponse, UploadResponse
from api.store import BlockStore
from core.crypto.hashing import to_hex
from core.merkle import TreeShape, build_root


logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])


@router.post("/upload", response_model=UploadResponse)
def upload(
    request: UploadRequest,
    store: BlockStore = Depends(get_store),
) -> UploadResponse:
    """
    Store files and return the padded-tree root over everything held.

    Files keep their first-upload position; re-uploading a name
    replaces its content in place.
    """
    snapshot = store.put_many(request.decoded_files())
    root = build_root(snapshot.contents)
    logger.info(f"Stored {len(request.files)} files, holding {len(snapshot.names)}, root {to_hex(root)}")

    return UploadResponse(
        root=to_hex(root),
        count=len(snapshot.names),
        names=snapshot.names,
    )


@router.get("/files", response_model=FileListResponse)
def list_files(store: BlockStore = Depends(get_store)) -> FileListResponse:
    """List held files in block order together with both roots."""
    snapshot = store.snapshot()
    return FileListResponse(
        root=to_hex(build_root(snapshot.contents)),
        ragged_root=to_hex(build_root(snapshot.contents, TreeShape.RAGGED)),
        files=[
            FileEntry(name=name, index=i, size=len(content))
            for i, (name, content) in enumerate(zip(snapshot.names, snapshot.contents))
        ],
    )


@router.get("/download/{name}")
def download(name: str, store: BlockStore = Depends(get_store)) -> Response:
    """Return the raw content of a held file."""
    content = store.get(name)
    if content is None:
        raise FileNotFoundAPIError(name)
    return Response(content=content, media_type="application/octet-stream")

"""
Module 09D - API Smoke Tests

Tests for the FastAPI endpoints:
1. GET /health returns ok
2. POST /upload stores files and returns the padded root
3. GET /files, GET /download/{name}
4. GET /proof/{name} and POST /multiproof return proofs that validate
5. POST /verify and POST /verify/multiproof
6. Error responses (404, 400, 422)
"""

import base64

import pytest
from fastapi.testclient import TestClient

from api.app import app
from api.deps import get_store
from core.crypto.hashing import digest, to_hex
from core.merkle import (
    TreeShape,
    build_root,
    validate_multiproof,
    validate_proof,
)
from core.schemas.proof import MerkleProofEnvelope, MultiProofEnvelope


# Create test client
client = TestClient(app)

FILES = {
    "a.txt": "alpha",
    "b.txt": "bravo",
    "c.txt": "charlie",
}
CONTENTS = [c.encode("utf-8") for c in FILES.values()]


@pytest.fixture(autouse=True)
def _empty_store():
    get_store().clear()
    yield
    get_store().clear()


@pytest.fixture
def uploaded():
    response = client.post("/upload", json={"files": FILES})
    assert response.status_code == 200
    return response.json()


# =============================================================================
# Health
# =============================================================================

class TestHealth:
    """Tests for GET /health."""

    def test_health_ok(self):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["service"] == "blockproof-api"
        assert data["files"] == 0

    def test_health_counts_held_files(self, uploaded):
        assert client.get("/health").json()["files"] == 3

    def test_root_endpoint(self):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["ok"] is True


# =============================================================================
# Files
# =============================================================================

class TestUpload:
    """Tests for POST /upload."""

    def test_upload_returns_padded_root(self, uploaded):
        assert uploaded["root"] == to_hex(build_root(CONTENTS))
        assert uploaded["count"] == 3
        assert uploaded["names"] == ["a.txt", "b.txt", "c.txt"]

    def test_upload_base64(self):
        body = {
            "encoding": "base64",
            "files": {"bin": base64.b64encode(b"\x00\xff").decode("ascii")},
        }
        response = client.post("/upload", json=body)

        assert response.status_code == 200
        assert response.json()["root"] == to_hex(digest(b"\x00\xff"))

    def test_second_upload_appends(self, uploaded):
        response = client.post("/upload", json={"files": {"d.txt": "delta"}})

        assert response.json()["count"] == 4
        assert response.json()["root"] == to_hex(build_root(CONTENTS + [b"delta"]))

    def test_reupload_replaces_in_place(self, uploaded):
        response = client.post("/upload", json={"files": {"a.txt": "ALPHA"}})

        assert response.json()["names"] == ["a.txt", "b.txt", "c.txt"]
        assert response.json()["root"] == to_hex(build_root([b"ALPHA"] + CONTENTS[1:]))

    def test_empty_files_rejected(self):
        assert client.post("/upload", json={"files": {}}).status_code == 422

    def test_bad_base64_rejected(self):
        body = {"encoding": "base64", "files": {"x": "not base64!"}}
        assert client.post("/upload", json=body).status_code == 422

    def test_slash_in_name_rejected(self):
        assert client.post("/upload", json={"files": {"a/b": "x"}}).status_code == 422


class TestListAndDownload:
    """Tests for GET /files and GET /download/{name}."""

    def test_list_files(self, uploaded):
        data = client.get("/files").json()

        assert data["root"] == to_hex(build_root(CONTENTS))
        assert data["ragged_root"] == to_hex(build_root(CONTENTS, TreeShape.RAGGED))
        assert [f["name"] for f in data["files"]] == ["a.txt", "b.txt", "c.txt"]
        assert [f["index"] for f in data["files"]] == [0, 1, 2]
        assert data["files"][2]["size"] == len(b"charlie")

    def test_list_empty(self):
        data = client.get("/files").json()

        assert data["files"] == []
        assert data["root"] == to_hex(digest(b""))

    def test_download(self, uploaded):
        response = client.get("/download/b.txt")

        assert response.status_code == 200
        assert response.content == b"bravo"

    def test_download_missing(self, uploaded):
        response = client.get("/download/zzz.txt")

        assert response.status_code == 404
        data = response.json()
        assert data["ok"] is False
        assert data["error"]["code"] == "FILE_NOT_FOUND"


# =============================================================================
# Proofs
# =============================================================================

class TestProofs:
    """Tests for GET /proof/{name} and POST /multiproof."""

    def test_single_proof_validates(self, uploaded):
        response = client.get("/proof/b.txt")
        assert response.status_code == 200

        envelope = MerkleProofEnvelope.model_validate(response.json()["proof"])
        root = build_root(CONTENTS)

        assert envelope.index == 1
        assert envelope.root_digest == root
        assert validate_proof(root, b"bravo", envelope.to_domain())
        assert not validate_proof(root, b"forged", envelope.to_domain())

    def test_single_proof_missing(self, uploaded):
        assert client.get("/proof/nope").status_code == 404

    def test_multiproof_validates(self, uploaded):
        response = client.post("/multiproof", json={"names": ["c.txt", "a.txt"]})
        assert response.status_code == 200

        data = response.json()
        envelope = MultiProofEnvelope.model_validate(data["proof"])
        ragged = build_root(CONTENTS, TreeShape.RAGGED)

        assert data["names"] == ["c.txt", "a.txt"]
        assert envelope.leaf_indices == [2, 0]
        assert envelope.leaf_count == 3
        assert validate_multiproof(ragged, [b"charlie", b"alpha"], envelope.to_domain())

    def test_multiproof_duplicate_name(self, uploaded):
        response = client.post("/multiproof", json={"names": ["a.txt", "a.txt"]})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "DUPLICATE_INDEX"

    def test_multiproof_missing_name(self, uploaded):
        response = client.post("/multiproof", json={"names": ["a.txt", "x"]})
        assert response.status_code == 404

    def test_multiproof_empty_names(self, uploaded):
        assert client.post("/multiproof", json={"names": []}).status_code == 422


# =============================================================================
# Verification
# =============================================================================

class TestVerify:
    """Tests for POST /verify and POST /verify/multiproof."""

    def test_verify_single(self, uploaded):
        proof = client.get("/proof/c.txt").json()["proof"]
        body = {"root": uploaded["root"], "block": "charlie", "proof": proof}

        response = client.post("/verify", json=body)

        assert response.status_code == 200
        assert response.json()["valid"] is True

    def test_verify_single_wrong_block(self, uploaded):
        proof = client.get("/proof/c.txt").json()["proof"]
        body = {"root": uploaded["root"], "block": "charles", "proof": proof}

        assert client.post("/verify", json=body).json()["valid"] is False

    def test_verify_against_trusted_root_not_envelope_root(self, uploaded):
        proof = client.get("/proof/c.txt").json()["proof"]
        body = {"root": to_hex(digest(b"other")), "block": "charlie", "proof": proof}

        assert client.post("/verify", json=body).json()["valid"] is False

    def test_verify_bad_root(self, uploaded):
        proof = client.get("/proof/c.txt").json()["proof"]
        body = {"root": "0x1234", "block": "charlie", "proof": proof}

        response = client.post("/verify", json=body)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_verify_multiproof(self, uploaded):
        proof = client.post("/multiproof", json={"names": ["a.txt", "b.txt"]}).json()["proof"]
        ragged = client.get("/files").json()["ragged_root"]
        body = {"root": ragged, "blocks": ["alpha", "bravo"], "proof": proof}

        assert client.post("/verify/multiproof", json=body).json()["valid"] is True

    def test_verify_multiproof_swapped_blocks(self, uploaded):
        proof = client.post("/multiproof", json={"names": ["a.txt", "b.txt"]}).json()["proof"]
        ragged = client.get("/files").json()["ragged_root"]
        body = {"root": ragged, "blocks": ["bravo", "alpha"], "proof": proof}

        assert client.post("/verify/multiproof", json=body).json()["valid"] is False

    def test_verify_multiproof_trusted_leaf_count(self, uploaded):
        proof = client.post("/multiproof", json={"names": ["a.txt", "c.txt"]}).json()["proof"]
        ragged = client.get("/files").json()["ragged_root"]
        body = {"root": ragged, "blocks": ["alpha", "charlie"], "proof": proof}

        assert client.post("/verify/multiproof", json={**body, "leaf_count": 3}).json()["valid"] is True
        assert client.post("/verify/multiproof", json={**body, "leaf_count": 4}).json()["valid"] is False

    def test_verify_multiproof_huge_leaf_count(self, uploaded):
        ragged = client.get("/files").json()["ragged_root"]
        proof = {
            "root": ragged,
            "leaf_count": 10**12,
            "leaf_indices": [0],
            "hashes": [to_hex(digest(b"x"))] * 25,
        }
        body = {"root": ragged, "blocks": ["alpha"], "proof": proof}

        response = client.post("/verify/multiproof", json=body)

        assert response.status_code == 200
        assert response.json()["valid"] is False

"""
Module 09C - CLI Remote Commands

Upload files to a file-holder service and fetch them back with proof.

The uploader computes both roots locally and keeps them in the root
file (ClientConfig.root_path): the padded root on the first line, the
ragged root on the second, then the uploaded names in block order.
Fetched files are written only after they verify against those roots
at the index and tree size recorded at upload.

Usage:
    blockproof upload a.txt b.txt c.txt
    blockproof fetch b.txt --out downloads/
    blockproof fetch a.txt c.txt --multi
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass
from pathlib import Path

from blockproof_cli.exit_codes import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
)
from core.config.runtime import RuntimeConfig
from core.crypto import Digest, digest_from_hex, to_hex
from core.http import FileServerClient, HttpError, VerificationError, connect
from core.merkle import TreeShape, build_root


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrustedRoots:
    """What the uploader committed to: both roots and the names in block order."""
    padded: Digest
    ragged: Digest
    names: list[str]


def save_roots(path: Path, roots: TrustedRoots) -> None:
    """Write the padded root, the ragged root, then one file name per line."""
    lines = [to_hex(roots.padded), to_hex(roots.ragged), *roots.names]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def load_roots(path: Path) -> TrustedRoots:
    """
    Read the trusted roots written by save_roots.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the file does not hold two digests and at least one name
    """
    lines = [line.strip() for line in path.read_text(encoding="utf-8").splitlines()]
    lines = [line for line in lines if line]
    if len(lines) < 3:
        raise ValueError(f"Root file {path} must hold two digests and the file names")
    return TrustedRoots(
        padded=digest_from_hex(lines[0]),
        ragged=digest_from_hex(lines[1]),
        names=lines[2:],
    )


def build_client(config: RuntimeConfig) -> FileServerClient:
    return connect(config.client.base_url, timeout=config.client.timeout)


def upload_cmd(args: Namespace) -> int:
    """Upload files, then keep the locally computed roots."""
    config: RuntimeConfig = args.cli_config
    paths = [Path(p) for p in args.files]

    names = [p.name for p in paths]
    if len(set(names)) != len(names):
        print("Error: file names must be unique", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    if any(name != name.strip() or "\n" in name for name in names):
        print("Error: file names must not contain line breaks or edge whitespace", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        contents = [p.read_bytes() for p in paths]
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    padded = build_root(contents, TreeShape.PADDED)
    ragged = build_root(contents, TreeShape.RAGGED)

    client = build_client(config)
    try:
        server_root = client.upload(dict(zip(names, contents)))
    except HttpError as e:
        print(f"Error uploading: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    finally:
        client.http.close()

    if server_root != padded:
        logger.warning(
            f"Server reported root {to_hex(server_root)}, expected {to_hex(padded)}"
        )

    root_path = Path(config.client.root_path)
    save_roots(root_path, TrustedRoots(padded, ragged, names))
    logger.info(f"Stored trusted roots in {root_path}")

    if args.json:
        print(json.dumps({
            "root": to_hex(padded),
            "ragged_root": to_hex(ragged),
            "count": len(contents),
            "root_path": str(root_path),
        }))
    else:
        print(f"Uploaded {len(contents)} files")
        print(f"root: {to_hex(padded)}")
        print(f"ragged_root: {to_hex(ragged)}")
    return EXIT_SUCCESS


def fetch_cmd(args: Namespace) -> int:
    """Download files and write the ones that verify."""
    config: RuntimeConfig = args.cli_config
    out_dir = Path(args.out)

    try:
        trusted = load_roots(Path(config.client.root_path))
    except (OSError, ValueError) as e:
        print(f"Error reading trusted roots: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    client = build_client(config)
    try:
        if args.multi:
            verified = client.fetch_many_and_verify(args.names, trusted.ragged, trusted.names)
        else:
            verified = {
                name: client.fetch_and_verify(name, trusted.padded, trusted.names)
                for name in args.names
            }
    except VerificationError as e:
        if args.json:
            print(json.dumps({"valid": False, "names": list(e.names)}))
        else:
            print(f"Verification failed: {e}", file=sys.stderr)
        return EXIT_VERIFICATION_FAILED
    except HttpError as e:
        print(f"Error fetching: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    finally:
        client.http.close()

    out_dir.mkdir(parents=True, exist_ok=True)
    for name, content in verified.items():
        (out_dir / name).write_bytes(content)

    if args.json:
        print(json.dumps({"valid": True, "names": list(verified)}))
    else:
        for name in verified:
            print(f"✓ {name}")
    return EXIT_SUCCESS

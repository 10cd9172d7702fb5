"""
Module 09C - CLI Tree Commands

Local root, proof and verification commands. Nothing here talks to a
server; blocks come from files or from the words of a sentence.

Usage:
    blockproof root a.txt b.txt c.txt [--ragged]
    blockproof prove --sentence "You trust, me, right?" --index 1 --out proof.json
    blockproof verify --root 0x... --proof proof.json --block "trust,"
    blockproof multiprove a.txt b.txt c.txt --indices 0,2 --out multi.json
    blockproof multiverify --root 0x... --proof multi.json --files a.txt c.txt
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from pydantic import ValidationError

from blockproof_cli.exit_codes import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
)
from core.crypto import digest_from_hex, to_hex
from core.merkle import (
    TreeShape,
    blocks_from_sentence,
    build_root,
    generate_multiproof,
    generate_proof,
    validate_multiproof,
    validate_proof,
)
from core.schemas.canonical import dumps_canonical
from core.schemas.errors import MerkleException
from core.schemas.proof import MerkleProofEnvelope, MultiProofEnvelope


logger = logging.getLogger(__name__)


def load_blocks(args: Namespace) -> list[bytes]:
    """
    Read the block sequence named by the command line.

    --sentence wins over positional files. With neither, the sequence
    is empty.
    """
    if args.sentence is not None:
        return blocks_from_sentence(args.sentence)
    return [Path(path).read_bytes() for path in args.files]


def parse_indices(text: str) -> list[int]:
    """Parse "0,1,6" into [0, 1, 6], keeping order and repeats."""
    parts = [part.strip() for part in text.split(",")]
    return [int(part) for part in parts if part]


def _emit(payload: str, out: str | None) -> None:
    if out:
        Path(out).write_text(payload + "\n", encoding="utf-8")
        logger.info(f"Wrote {out}")
    else:
        print(payload)


def _report_error(exc: MerkleException, output_json: bool) -> int:
    if output_json:
        print(exc.to_error_model().model_dump_json())
    else:
        print(f"Error: {exc.message}", file=sys.stderr)
    return EXIT_RUNTIME_ERROR


def _report_validity(valid: bool, output_json: bool) -> int:
    if output_json:
        print(json.dumps({"valid": valid}))
    else:
        print("valid" if valid else "invalid")
    return EXIT_SUCCESS if valid else EXIT_VERIFICATION_FAILED


def root_cmd(args: Namespace) -> int:
    """Print the root digest of the given blocks."""
    blocks = load_blocks(args)
    shape = TreeShape.RAGGED if args.ragged else TreeShape.PADDED
    root = to_hex(build_root(blocks, shape))

    if args.json:
        print(json.dumps({"root": root, "shape": shape.value, "count": len(blocks)}))
    else:
        print(root)
    return EXIT_SUCCESS


def prove_cmd(args: Namespace) -> int:
    """Generate a single inclusion proof and write its envelope."""
    blocks = load_blocks(args)

    try:
        root, proof = generate_proof(blocks, args.index)
    except MerkleException as e:
        return _report_error(e, args.json)

    envelope = MerkleProofEnvelope.from_domain(root, args.index, proof)
    _emit(dumps_canonical(envelope.model_dump(mode="json")), args.out)
    return EXIT_SUCCESS


def verify_cmd(args: Namespace) -> int:
    """Check a proof file against a trusted root and a claimed block."""
    try:
        root = digest_from_hex(args.root)
        envelope = MerkleProofEnvelope.model_validate_json(
            Path(args.proof).read_text(encoding="utf-8")
        )
    except (ValueError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    claimed: bytes | str = (
        Path(args.file).read_bytes() if args.file is not None else args.block
    )
    valid = validate_proof(root, claimed, envelope.to_domain())
    return _report_validity(valid, args.json)


def multiprove_cmd(args: Namespace) -> int:
    """Generate a compact multiproof and write its envelope."""
    blocks = load_blocks(args)

    try:
        indices = parse_indices(args.indices)
    except ValueError as e:
        print(f"Error: invalid --indices: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        root, multiproof = generate_multiproof(blocks, indices)
    except MerkleException as e:
        return _report_error(e, args.json)

    envelope = MultiProofEnvelope.from_domain(root, multiproof)
    _emit(dumps_canonical(envelope.model_dump(mode="json")), args.out)
    return EXIT_SUCCESS


def multiverify_cmd(args: Namespace) -> int:
    """Check a multiproof file against a trusted ragged root."""
    try:
        root = digest_from_hex(args.root)
        envelope = MultiProofEnvelope.model_validate_json(
            Path(args.proof).read_text(encoding="utf-8")
        )
    except (ValueError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.files is not None:
        claimed: list[bytes | str] = [Path(path).read_bytes() for path in args.files]
    else:
        claimed = list(args.blocks)

    valid = validate_multiproof(root, claimed, envelope.to_domain(), args.leaf_count)
    return _report_validity(valid, args.json)

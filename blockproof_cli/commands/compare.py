"""
Module 09C - CLI Compare Command

Build a tree of random words, sample indices and report how much smaller
one compact multiproof is than the same number of single proofs.

Usage:
    blockproof compare --length 2023 --proofs 500 [--words N] [--seed N] [--json]
"""

from __future__ import annotations

import json
import random
import sys
from argparse import Namespace

from blockproof_cli.exit_codes import EXIT_RUNTIME_ERROR, EXIT_SUCCESS
from core.merkle import blocks_from_sentence
from core.merkle.analysis import compare_proof_sizes, string_of_random_words


def compare_cmd(args: Namespace) -> int:
    words = args.words if args.words is not None else args.length
    sentence = string_of_random_words(words, random.Random(args.seed))
    blocks = blocks_from_sentence(sentence)

    try:
        result = compare_proof_sizes(blocks, args.length, args.proofs, seed=args.seed)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps({
            "blocks": len(blocks),
            "proofs": len(result.indices),
            "compact_size": result.compact_size,
            "individual_size": result.individual_size,
            "ratio": result.ratio,
        }))
    else:
        print(f"blocks: {len(blocks)}")
        print(f"proofs: {len(result.indices)}")
        print(f"compact_size: {result.compact_size} bytes")
        print(f"individual_size: {result.individual_size} bytes")
        print(f"ratio: {result.ratio:.2f}")
    return EXIT_SUCCESS

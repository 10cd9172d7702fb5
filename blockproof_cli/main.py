"""
Module 09C - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m blockproof_cli root FILE... [--ragged] [--json]
    python -m blockproof_cli prove --sentence "You trust, me, right?" --index 1 [--out PATH]
    python -m blockproof_cli verify --root 0x... --proof PATH --block "trust,"
    python -m blockproof_cli multiprove FILE... --indices 0,1,6 [--out PATH]
    python -m blockproof_cli multiverify --root 0x... --proof PATH --files a.txt b.txt
    python -m blockproof_cli compare --length 2023 --proofs 500 [--seed N]
    python -m blockproof_cli upload FILE...
    python -m blockproof_cli fetch NAME... [--out DIR]
    python -m blockproof_cli config --init

Environment Variables:
    BLOCKPROOF_SERVER_URL       File-holder base URL (default: http://localhost:8000)
    BLOCKPROOF_TIMEOUT          Request timeout in seconds (default: 30)
    BLOCKPROOF_ROOT_PATH        Where upload stores the trusted roots
    BLOCKPROOF_LOG_LEVEL        Log level (default: INFO)
    BLOCKPROOF_LOG_FILE         Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from blockproof_cli import __version__
from blockproof_cli.commands import compare, remote, tree
from blockproof_cli.exit_codes import EXIT_RUNTIME_ERROR, EXIT_SUCCESS
from core.config.runtime import get_default_config_template, load_runtime_config


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def _add_block_source(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "files",
        nargs="*",
        help="Files to use as blocks, in order (one file per block)",
    )
    parser.add_argument(
        "--sentence", "-s",
        type=str,
        default=None,
        help="Use the whitespace-separated words of a sentence as blocks",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="blockproof",
        description="BlockProof CLI - Build roots, generate and check inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./blockproof.json or ~/.config/blockproof/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- root command ---
    root_parser = subparsers.add_parser(
        "root",
        help="Compute the root digest of a block sequence",
    )
    _add_block_source(root_parser)
    root_parser.add_argument(
        "--ragged",
        action="store_true",
        default=False,
        help="Use the unpadded tree (the root multiproofs are checked against)",
    )
    root_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    root_parser.set_defaults(func=tree.root_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate a single inclusion proof",
    )
    _add_block_source(prove_parser)
    prove_parser.add_argument("--index", "-i", type=int, required=True, help="Block index to prove")
    prove_parser.add_argument("--out", "-o", type=str, default=None, help="Write the proof to this file")
    prove_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    prove_parser.set_defaults(func=tree.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Check a single inclusion proof against a trusted root",
    )
    verify_parser.add_argument("--root", type=str, required=True, help="Trusted root (0x hex)")
    verify_parser.add_argument("--proof", type=str, required=True, help="Proof file written by 'prove'")
    claimed = verify_parser.add_mutually_exclusive_group(required=True)
    claimed.add_argument("--block", type=str, help="Claimed block as text")
    claimed.add_argument("--file", type=str, help="File holding the claimed block")
    verify_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    verify_parser.set_defaults(func=tree.verify_cmd)

    # --- multiprove command ---
    multiprove_parser = subparsers.add_parser(
        "multiprove",
        help="Generate a compact multiproof for several blocks",
    )
    _add_block_source(multiprove_parser)
    multiprove_parser.add_argument(
        "--indices",
        type=str,
        required=True,
        help="Comma-separated block indices, order preserved (e.g. 0,1,6)",
    )
    multiprove_parser.add_argument("--out", "-o", type=str, default=None, help="Write the proof to this file")
    multiprove_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    multiprove_parser.set_defaults(func=tree.multiprove_cmd)

    # --- multiverify command ---
    multiverify_parser = subparsers.add_parser(
        "multiverify",
        help="Check a compact multiproof against a trusted root",
    )
    multiverify_parser.add_argument("--root", type=str, required=True, help="Trusted ragged root (0x hex)")
    multiverify_parser.add_argument("--leaf-count", type=int, default=None, help="Trusted number of committed blocks")
    multiverify_parser.add_argument("--proof", type=str, required=True, help="Proof file written by 'multiprove'")
    claimed_many = multiverify_parser.add_mutually_exclusive_group(required=True)
    claimed_many.add_argument("--blocks", nargs="+", help="Claimed blocks as text, in proof order")
    claimed_many.add_argument("--files", nargs="+", help="Files holding the claimed blocks, in proof order")
    multiverify_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    multiverify_parser.set_defaults(func=tree.multiverify_cmd)

    # --- compare command ---
    compare_parser = subparsers.add_parser(
        "compare",
        help="Compare compact multiproof size with independent single proofs",
    )
    compare_parser.add_argument("--length", type=int, required=True, help="Sample indices from [0, length)")
    compare_parser.add_argument("--proofs", type=int, required=True, help="Number of indices to prove")
    compare_parser.add_argument(
        "--words",
        type=int,
        default=None,
        help="Number of random words in the tree (default: length)",
    )
    compare_parser.add_argument("--seed", type=int, default=0, help="RNG seed (default: 0)")
    compare_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    compare_parser.set_defaults(func=compare.compare_cmd)

    # --- upload command ---
    upload_parser = subparsers.add_parser(
        "upload",
        help="Upload files to the file holder and keep the trusted roots locally",
    )
    upload_parser.add_argument("files", nargs="+", help="Files to upload, in order")
    upload_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    upload_parser.set_defaults(func=remote.upload_cmd)

    # --- fetch command ---
    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Download files and verify them against the stored roots",
    )
    fetch_parser.add_argument("names", nargs="+", help="File names to download")
    fetch_parser.add_argument(
        "--multi",
        action="store_true",
        default=False,
        help="Verify all names with one compact multiproof",
    )
    fetch_parser.add_argument("--out", "-o", type=str, default=".", help="Output directory (default: .)")
    fetch_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    fetch_parser.set_defaults(func=remote.fetch_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="blockproof.json",
        help="Path for config file (default: blockproof.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (BLOCKPROOF_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: blockproof config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_runtime_config(args.config)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    setup_logging(level=args.log_level or config.log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.log_level == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())

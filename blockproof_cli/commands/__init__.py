"""
CLI command modules.
"""

from blockproof_cli.commands import compare, remote, tree

__all__ = ["compare", "remote", "tree"]

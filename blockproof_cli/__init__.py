"""
Module 09C - BlockProof CLI

Command-line interface for building roots and proofs, and for talking
to a file-holder service.

Usage:
    python -m blockproof_cli root a.txt b.txt c.txt
    python -m blockproof_cli prove --sentence "You trust, me, right?" --index 1
    python -m blockproof_cli upload a.txt b.txt
    python -m blockproof_cli fetch a.txt
"""

__version__ = "0.1.0"

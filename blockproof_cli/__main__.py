"""
Module execution entry point.

Allows running with: python -m blockproof_cli
"""

import sys
from blockproof_cli.main import main

if __name__ == "__main__":
    sys.exit(main())

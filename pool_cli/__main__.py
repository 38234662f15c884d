"""
Module execution entry point.

Allows running with: python -m pool_cli
"""

import sys
from pool_cli.main import main

if __name__ == "__main__":
    sys.exit(main())

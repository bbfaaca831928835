"""
Module execution entry point.

Allows running with: python -m reserves_cli
"""

import sys
from reserves_cli.main import main

if __name__ == "__main__":
    sys.exit(main())

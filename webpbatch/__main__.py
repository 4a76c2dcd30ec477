"""
Main entry point for running the package as a module.

Usage:
    python -m webpbatch scan --source ./images
    python -m webpbatch run --config config.ini
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())

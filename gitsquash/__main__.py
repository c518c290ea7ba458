#!/usr/bin/env python3
"""Main entry point for gitsquash when run as python -m gitsquash."""

import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())

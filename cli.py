#!/usr/bin/env python
"""
Buildsweep CLI entry point.

Usage:
    python cli.py clean [TARGET_DIR]     # Strip diagnostics and comments in place
    python cli.py clean --dry-run lib    # Report without rewriting
    python cli.py watch                  # Rebuild on every source change
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from buildsweep.cli.app import main

if __name__ == "__main__":
    main()

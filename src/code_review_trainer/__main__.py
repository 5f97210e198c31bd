"""
Entry point for running the trainer as a module.

Usage:
    python -m code_review_trainer analyze --base <sha> --head <sha>
    python -m code_review_trainer post --run-id <id>
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())

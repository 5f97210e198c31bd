#!/usr/bin/env python3
"""
Disabled-Code Analysis Demo

Scans local C# files for commented-out code and prints the review that
the CI workflow would post to the pull request.

Usage:
    python examples/analysis_demo.py <file.cs> [<file.cs> ...]

Example:
    python examples/analysis_demo.py src/Services/OrderService.cs
"""

import sys
import os
import logging

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from code_review_trainer.api import ReviewTrainerAPI
from code_review_trainer.config import AppConfig
from code_review_trainer.github.collector import ChangedFileCollector


def setup_logging():
    """Set up logging configuration."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def print_header():
    """Print demo header."""
    print("🚀 Code Review Trainer - Analysis Demo")
    print("=" * 50)
    print()


def print_findings(result):
    """Print findings grouped by file."""
    print("🔍 Findings")
    print("-" * 30)

    if not result.findings:
        print("No disabled code found.")
        print()
        return

    for path in result.files_with_issues:
        print(f"📄 {path}")
        for finding in result.findings:
            if finding.path == path:
                print(f"   L{finding.line} [{finding.category.value}] {finding.body}")
    print()


def main():
    """Main demo function."""
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    setup_logging()
    print_header()

    config = AppConfig()
    api = ReviewTrainerAPI(config)
    collector = ChangedFileCollector(extensions=config.analysis.file_extensions)

    files = collector.load_files(collector.filter_relevant_paths(sys.argv[1:]))
    print(f"📥 Loaded {len(files)} files")
    print()

    result, payload = api.analyze(files)
    print_findings(result)

    print("📝 Review")
    print("-" * 30)
    print(f"Verdict: {payload.verdict.value}")
    print(f"Body: {payload.short_body}")
    print()
    print(payload.long_summary)


if __name__ == "__main__":
    main()

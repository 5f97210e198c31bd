"""
Review Formatter

This module provides verdict derivation and Markdown summaries
for the pull request review.
"""

from .verdict import VerdictBuilder, failing_tests_payload

__all__ = ['VerdictBuilder', 'failing_tests_payload']

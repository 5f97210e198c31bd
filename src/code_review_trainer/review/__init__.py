"""
Disabled-Code Analysis

This module provides the pattern rule table, the per-file scanner,
and the aggregator that merges findings across changed files.
"""

from .rules import PatternRule, WindowRule, DEFAULT_RULES, build_rules
from .scanner import FileScanner
from .aggregator import Aggregator

__all__ = ['PatternRule', 'WindowRule', 'DEFAULT_RULES', 'build_rules', 'FileScanner', 'Aggregator']

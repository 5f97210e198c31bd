"""
File Scanner

Applies the pattern rule table to a single changed file and produces
line-anchored findings.
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..models.changed_file import ChangedFile
from ..models.review import Finding, IssueCategory
from .rules import DEFAULT_RULES, PatternRule


logger = logging.getLogger(__name__)


class FileScanner:
    """
    Scans changed files for intentionally disabled code.

    Findings are emitted rule by rule in table order, and within a rule in
    ascending line order, so identical input always yields identical output.
    """

    def __init__(self, rules: Optional[Sequence[PatternRule]] = None):
        """
        Initialize file scanner.

        Args:
            rules: Rule table to apply (default: DEFAULT_RULES)
        """
        self.rules = tuple(rules) if rules is not None else DEFAULT_RULES

    def scan(self, changed_file: ChangedFile) -> List[Finding]:
        """
        Scan one file.

        Args:
            changed_file: File to scan

        Returns:
            Ordered list of findings (empty for a file with no lines)
        """
        if not changed_file.lines:
            logger.debug(f"Skipping empty file: {changed_file.path}")
            return []

        findings = []
        for rule in self.rules:
            for line_number in rule.match_lines(changed_file.lines):
                findings.append(Finding(
                    path=changed_file.path,
                    line=line_number,
                    category=rule.category,
                    body=rule.comment_template,
                ))

        if findings:
            logger.debug(f"{changed_file.path}: {len(findings)} findings")
        return findings

    def get_rule_names(self) -> List[str]:
        """Rule names in scan order."""
        return [rule.name for rule in self.rules]

    def summarize(self, findings: Sequence[Finding]) -> Dict[IssueCategory, int]:
        """Count findings per category."""
        counts: Dict[IssueCategory, int] = {}
        for finding in findings:
            counts[finding.category] = counts.get(finding.category, 0) + 1
        return counts

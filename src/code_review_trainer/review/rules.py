"""
Pattern Rules

Declarative table of disabled-code detectors. Each rule pairs a line
matcher with the review comment it produces. Matching is purely textual;
source code is never parsed.
"""

import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..models.review import IssueCategory


STEP2_MARKER = "STEP 2: AFTER TESTS PASS"
STEP2_WINDOW = 30


@dataclass(frozen=True)
class PatternRule:
    """
    Single-line detector.

    A line matches when any of ``patterns`` is found in it. ``first_only``
    rules report only the first matching line of a file.
    """
    name: str
    category: IssueCategory
    patterns: Tuple[re.Pattern, ...]
    comment_template: str
    first_only: bool = False

    def match_lines(self, lines: Sequence[str]) -> List[int]:
        """Return 1-indexed numbers of matching lines in ascending order."""
        matched = []
        for number, line in enumerate(lines, 1):
            if any(p.search(line) for p in self.patterns):
                matched.append(number)
                if self.first_only:
                    break
        return matched


@dataclass(frozen=True)
class WindowRule(PatternRule):
    """
    Detector bounded to a window after an anchor line.

    Finds the first line containing ``anchor``, then reports the first line
    matching ``patterns`` among the ``window`` lines that follow it.
    """
    anchor: str = STEP2_MARKER
    window: int = STEP2_WINDOW

    def match_lines(self, lines: Sequence[str]) -> List[int]:
        anchor_index = next((i for i, line in enumerate(lines) if self.anchor in line), None)
        if anchor_index is None:
            return []

        start = anchor_index + 1
        for offset, line in enumerate(lines[start:start + self.window]):
            if any(p.search(line) for p in self.patterns):
                return [start + offset + 1]
        return []


def _compile(*expressions: str) -> Tuple[re.Pattern, ...]:
    return tuple(re.compile(e) for e in expressions)


NULL_CHECK_COMMENT = (
    "Missing null check: This appears to be a commented-out null check. "
    "For proper error handling, uncomment this code to validate inputs before processing."
)
VALIDATION_COMMENT = (
    "Missing input validation: This commented code contains important input validation logic. "
    "Uncomment it to ensure proper validation of inputs."
)
DOCUMENTATION_MARKER_COMMENT = (
    "Missing documentation: XML documentation is required for public methods and classes. "
    "Uncomment the documentation comments."
)
DOCUMENTATION_BLOCK_COMMENT = (
    "Missing documentation: XML documentation is block-commented. "
    "Uncomment this documentation block to properly document the code."
)
TRY_COMMENT = "Missing exception handling: Uncomment this try block to properly handle exceptions."
CATCH_COMMENT = "Missing exception handling: Uncomment this catch block to properly handle exceptions."
LOGGING_COMMENT = (
    "Missing logging: Proper logging is important for production monitoring and debugging. "
    "Uncomment these logging statements."
)
STEP2_COMMENT = (
    "Code quality issues in STEP 2: There are block-commented sections in STEP 2 that should be "
    "uncommented. These may include logging and documentation."
)


def build_rules(step2_window: int = STEP2_WINDOW) -> Tuple[PatternRule, ...]:
    """
    Build the rule table in scan order.

    Args:
        step2_window: Number of lines searched after the STEP 2 marker

    Returns:
        Tuple of rules; findings are emitted in this order per file
    """
    if step2_window <= 0:
        raise ValueError("STEP 2 window must be positive")

    return (
        PatternRule(
            name="null_check",
            category=IssueCategory.NULL_CHECK,
            patterns=_compile(r"//\s*if\s*\(.*\s*==\s*null\)"),
            comment_template=NULL_CHECK_COMMENT,
        ),
        PatternRule(
            name="validation",
            category=IssueCategory.VALIDATION,
            patterns=_compile(r"//\s*if\s*\(!.*\.IsValid", r"//\s*validator\.Validate"),
            comment_template=VALIDATION_COMMENT,
        ),
        PatternRule(
            name="documentation_marker",
            category=IssueCategory.DOCUMENTATION,
            patterns=_compile(re.escape("Uncomment for DOCUMENTATION issue")),
            comment_template=DOCUMENTATION_MARKER_COMMENT,
        ),
        PatternRule(
            name="documentation_block",
            category=IssueCategory.DOCUMENTATION,
            patterns=_compile(r"/\*.*/// <summary>"),
            comment_template=DOCUMENTATION_BLOCK_COMMENT,
            first_only=True,
        ),
        PatternRule(
            name="exception_try",
            category=IssueCategory.EXCEPTION_HANDLING,
            patterns=_compile(r"//\s*try"),
            comment_template=TRY_COMMENT,
        ),
        PatternRule(
            name="exception_catch",
            category=IssueCategory.EXCEPTION_HANDLING,
            patterns=_compile(r"//\s*catch"),
            comment_template=CATCH_COMMENT,
        ),
        PatternRule(
            name="logging_marker",
            category=IssueCategory.LOGGING,
            patterns=_compile(re.escape("Uncomment for LOGGING issue")),
            comment_template=LOGGING_COMMENT,
        ),
        PatternRule(
            name="logging_block",
            category=IssueCategory.LOGGING,
            patterns=_compile(r"/\*.*_logger\.Log"),
            comment_template=LOGGING_COMMENT,
        ),
        WindowRule(
            name="step2_block",
            category=IssueCategory.STEP2_BLOCK,
            patterns=_compile(r"/\*"),
            comment_template=STEP2_COMMENT,
            anchor=STEP2_MARKER,
            window=step2_window,
        ),
    )


DEFAULT_RULES = build_rules()

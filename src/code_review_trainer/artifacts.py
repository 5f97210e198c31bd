"""
Review Artifacts

Persists a review payload as separate named files so that a differently
privileged posting stage can read it back, and reads those files with
validation.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from pydantic import ValidationError

from .errors import ArtifactError
from .models.review import (
    AnalysisResult,
    IssueCategory,
    LineCommentRecord,
    ReviewPayload,
)


logger = logging.getLogger(__name__)


REVIEW_TYPE_FILE = "review_type.txt"
REVIEW_BODY_FILE = "review_body.txt"
REVIEW_MESSAGE_FILE = "review_message.md"
LINE_COMMENTS_FILE = "line_comments.json"
ANALYSIS_RESULTS_FILE = "analysis_results.txt"
PR_NUMBER_FILE = "pr_number.txt"

ANALYSIS_FLAGS = (
    ("MISSING_NULL_CHECKS", IssueCategory.NULL_CHECK),
    ("MISSING_VALIDATION", IssueCategory.VALIDATION),
    ("MISSING_DOCUMENTATION", IssueCategory.DOCUMENTATION),
    ("MISSING_EXCEPTION_HANDLING", IssueCategory.EXCEPTION_HANDLING),
    ("MISSING_LOGGING", IssueCategory.LOGGING),
)


@dataclass
class StoredReview:
    """Review data read back from the artifact directory."""
    review_type: str
    review_body: str
    review_message: Optional[str]
    comments: List[LineCommentRecord] = field(default_factory=list)
    pr_number: Optional[int] = None


class ArtifactStore:
    """
    Reads and writes review artifacts in a directory.

    Every payload field becomes its own file; the failing-tests payload
    carries no line comments file.
    """

    def __init__(self, directory: Union[str, Path] = "artifacts"):
        """
        Initialize artifact store.

        Args:
            directory: Artifact directory path
        """
        self.directory = Path(directory)

    def write_payload(
        self,
        payload: ReviewPayload,
        result: Optional[AnalysisResult] = None,
        pr_number: Optional[int] = None,
    ) -> List[Path]:
        """
        Write payload artifacts.

        Args:
            payload: Review payload to persist
            result: Analysis result for the category flag file (omitted when tests failed)
            pr_number: Pull request number, when known

        Returns:
            Paths written
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        written = [
            self._write_text(REVIEW_TYPE_FILE, payload.verdict.value + "\n"),
            self._write_text(REVIEW_BODY_FILE, payload.short_body + "\n"),
            self._write_text(REVIEW_MESSAGE_FILE, payload.long_summary),
        ]

        if result is not None:
            comments = [c.to_comment() for c in payload.comments]
            written.append(self._write_text(LINE_COMMENTS_FILE, json.dumps(comments, indent=2) + "\n"))
            written.append(self._write_text(ANALYSIS_RESULTS_FILE, self.render_analysis_flags(result)))

        if pr_number is not None:
            written.append(self._write_text(PR_NUMBER_FILE, f"{pr_number}\n"))

        logger.info(f"Wrote {len(written)} artifacts to {self.directory}")
        return written

    @staticmethod
    def render_analysis_flags(result: AnalysisResult) -> str:
        """Render the KEY=true/false flag file."""
        seen = result.categories_seen
        lines = [f"ISSUES_FOUND={'true' if result.has_issues else 'false'}"]
        for key, category in ANALYSIS_FLAGS:
            lines.append(f"{key}={'true' if category in seen else 'false'}")
        return "\n".join(lines) + "\n"

    def read_review(self) -> StoredReview:
        """
        Read review artifacts.

        Returns:
            StoredReview

        Raises:
            ArtifactError: Directory empty, required file missing, or comments unparseable
        """
        if not self.directory.is_dir() or not any(self.directory.iterdir()):
            raise ArtifactError(
                f"Failed to download artifacts or artifacts directory is empty: {self.directory}"
            )

        review_type = self._read_required(REVIEW_TYPE_FILE)
        review_body = self._read_required(REVIEW_BODY_FILE)

        message_path = self.directory / REVIEW_MESSAGE_FILE
        review_message = message_path.read_text(encoding="utf-8") if message_path.is_file() else None

        comments = self._read_comments()
        logger.info(f"Loaded {len(comments)} line-specific comments")

        return StoredReview(
            review_type=review_type,
            review_body=review_body,
            review_message=review_message,
            comments=comments,
            pr_number=self.read_pr_number(),
        )

    def read_pr_number(self) -> Optional[int]:
        """Read pr_number.txt if present."""
        path = self.directory / PR_NUMBER_FILE
        if not path.is_file():
            return None

        raw = path.read_text(encoding="utf-8").strip()
        try:
            number = int(raw)
        except ValueError:
            raise ArtifactError(f"Invalid PR number in {PR_NUMBER_FILE}: {raw!r}", PR_NUMBER_FILE)
        if number <= 0:
            raise ArtifactError(f"Invalid PR number in {PR_NUMBER_FILE}: {raw!r}", PR_NUMBER_FILE)
        return number

    def _read_required(self, name: str) -> str:
        path = self.directory / name
        if not path.is_file():
            raise ArtifactError(f"Required review file not found in artifacts: {name}", name)
        return path.read_text(encoding="utf-8").strip()

    def _read_comments(self) -> List[LineCommentRecord]:
        path = self.directory / LINE_COMMENTS_FILE
        if not path.is_file():
            return []

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ArtifactError(f"Error parsing line comments JSON: {e}", LINE_COMMENTS_FILE)

        if not isinstance(data, list):
            raise ArtifactError("Line comments JSON must be an array", LINE_COMMENTS_FILE)

        try:
            return [LineCommentRecord.model_validate(item) for item in data]
        except ValidationError as e:
            raise ArtifactError(f"Invalid line comment: {e}", LINE_COMMENTS_FILE)

    def _write_text(self, name: str, content: str) -> Path:
        path = self.directory / name
        path.write_text(content, encoding="utf-8")
        logger.debug(f"Wrote artifact {path}")
        return path

"""
Error Types

리뷰 트레이너 단계별 오류 정의
"""

from typing import Optional


class ReviewTrainerError(Exception):
    """Base error for the review trainer"""


class ArtifactError(ReviewTrainerError):
    """Artifact missing or unparseable"""
    def __init__(self, message: str, artifact: Optional[str] = None):
        super().__init__(message)
        self.artifact = artifact


class InvalidVerdictError(ReviewTrainerError):
    """Verdict value is not one of the supported review events"""
    def __init__(self, value: str):
        super().__init__(f"Invalid review type: {value!r}. Must be one of: APPROVE, REQUEST_CHANGES")
        self.value = value


class PullRequestNotFound(ReviewTrainerError):
    """Workflow run could not be mapped to a pull request"""
    def __init__(self, run_id: Optional[int] = None):
        super().__init__(f"Could not find PR number for workflow run {run_id}")
        self.run_id = run_id

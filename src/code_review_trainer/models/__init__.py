"""
Data Models

Code Review Trainer 시스템의 핵심 데이터 모델들
"""

from .changed_file import ChangedFile, ChangedFileRequest, AnalyzeRequest
from .review import (
    IssueCategory,
    SUMMARY_CATEGORY_ORDER,
    Verdict,
    Finding,
    AnalysisResult,
    ReviewPayload,
    LineCommentRecord,
)

__all__ = [
    "ChangedFile",
    "ChangedFileRequest",
    "AnalyzeRequest",
    "IssueCategory",
    "SUMMARY_CATEGORY_ORDER",
    "Verdict",
    "Finding",
    "AnalysisResult",
    "ReviewPayload",
    "LineCommentRecord",
]

"""
Review Data Models

패턴 분석 결과와 리뷰 페이로드 관련 데이터 모델들
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Tuple
from pydantic import BaseModel, field_validator

from ..errors import InvalidVerdictError


class IssueCategory(Enum):
    """Disabled-code issue categories."""
    NULL_CHECK = "null_check"
    VALIDATION = "validation"
    DOCUMENTATION = "documentation"
    EXCEPTION_HANDLING = "exception_handling"
    LOGGING = "logging"
    STEP2_BLOCK = "step2_block"

    @property
    def flagged_categories(self) -> Tuple["IssueCategory", ...]:
        """요약에 표시될 카테고리들 (STEP 2 블록은 문서화와 로깅을 함께 표시)"""
        if self is IssueCategory.STEP2_BLOCK:
            return (IssueCategory.DOCUMENTATION, IssueCategory.LOGGING)
        return (self,)


# 요약 문서에 표시되는 카테고리 순서
SUMMARY_CATEGORY_ORDER: Tuple[IssueCategory, ...] = (
    IssueCategory.NULL_CHECK,
    IssueCategory.VALIDATION,
    IssueCategory.DOCUMENTATION,
    IssueCategory.EXCEPTION_HANDLING,
    IssueCategory.LOGGING,
)


class Verdict(Enum):
    """Review event submitted to the pull request."""
    APPROVE = "APPROVE"
    REQUEST_CHANGES = "REQUEST_CHANGES"

    @classmethod
    def parse(cls, value: str) -> "Verdict":
        """문자열을 Verdict로 변환 (허용되지 않는 값은 InvalidVerdictError)"""
        try:
            return cls(value.strip())
        except (ValueError, AttributeError):
            raise InvalidVerdictError(str(value))


@dataclass(frozen=True)
class Finding:
    """라인에 고정된 개별 분석 결과"""
    path: str
    line: int
    category: IssueCategory
    body: str

    def __post_init__(self):
        """데이터 검증"""
        if self.line <= 0:
            raise ValueError("Line number must be positive")
        if not self.body.strip():
            raise ValueError("Comment body cannot be empty")

    def to_comment(self) -> Dict[str, object]:
        """line_comments.json 형식으로 변환"""
        return {"path": self.path, "line": self.line, "body": self.body}


@dataclass(frozen=True)
class AnalysisResult:
    """전체 분석 결과"""
    findings: Tuple[Finding, ...] = ()
    files_scanned: int = 0

    def __post_init__(self):
        """데이터 검증"""
        if self.files_scanned < 0:
            raise ValueError("files_scanned must be non-negative")
        if not isinstance(self.findings, tuple):
            object.__setattr__(self, 'findings', tuple(self.findings))

    @property
    def categories_seen(self) -> FrozenSet[IssueCategory]:
        """발견된 카테고리 집합 (findings에서 항상 파생)"""
        seen = set()
        for finding in self.findings:
            seen.update(finding.category.flagged_categories)
        return frozenset(seen)

    @property
    def has_issues(self) -> bool:
        return bool(self.findings)

    @property
    def files_with_issues(self) -> List[str]:
        """이슈가 있는 파일 목록 (발견 순서 유지)"""
        paths = []
        for finding in self.findings:
            if finding.path not in paths:
                paths.append(finding.path)
        return paths

    def get_findings_by_category(self, category: IssueCategory) -> List[Finding]:
        """특정 카테고리의 결과 반환"""
        return [f for f in self.findings if f.category is category]


@dataclass(frozen=True)
class ReviewPayload:
    """리뷰 게시 단계로 전달되는 최종 결과물"""
    verdict: Verdict
    short_body: str
    long_summary: str
    comments: Tuple[Finding, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """데이터 검증"""
        if not isinstance(self.verdict, Verdict):
            raise InvalidVerdictError(str(self.verdict))
        if not isinstance(self.comments, tuple):
            object.__setattr__(self, 'comments', tuple(self.comments))

    def to_dict(self) -> Dict[str, object]:
        """JSON 직렬화용 딕셔너리 변환"""
        return {
            "verdict": self.verdict.value,
            "short_body": self.short_body,
            "long_summary": self.long_summary,
            "comments": [c.to_comment() for c in self.comments],
        }


# Pydantic models for artifact validation
class LineCommentRecord(BaseModel):
    """line_comments.json 항목 모델"""
    path: str
    line: int
    body: str

    @field_validator('path')
    @classmethod
    def validate_path(cls, v):
        if not v.strip():
            raise ValueError('Path cannot be empty')
        return v

    @field_validator('line')
    @classmethod
    def validate_line(cls, v):
        if v <= 0:
            raise ValueError('Line number must be positive')
        return v

    @field_validator('body')
    @classmethod
    def validate_body(cls, v):
        if not v.strip():
            raise ValueError('Comment body cannot be empty')
        return v

    def to_review_comment(self) -> Dict[str, object]:
        """GitHub 리뷰 코멘트 형식으로 변환"""
        return {"path": self.path, "line": self.line, "side": "RIGHT", "body": self.body}

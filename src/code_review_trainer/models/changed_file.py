"""
Changed File Data Models

PR에서 변경된 파일의 내용을 담는 데이터 모델
"""

from dataclasses import dataclass
from typing import List, Tuple
from pydantic import BaseModel, field_validator


@dataclass(frozen=True)
class ChangedFile:
    """분석 대상 변경 파일 (라인은 1부터 시작)"""
    path: str
    lines: Tuple[str, ...]

    def __post_init__(self):
        """데이터 검증"""
        if not self.path or not self.path.strip():
            raise ValueError("File path cannot be empty")
        if not isinstance(self.lines, tuple):
            # frozen dataclass이므로 object.__setattr__ 사용
            object.__setattr__(self, 'lines', tuple(self.lines))

    @classmethod
    def from_text(cls, path: str, text: str) -> "ChangedFile":
        """
        전체 텍스트로부터 ChangedFile 생성

        라인은 git과 같이 LF 기준으로만 나눈다. 행 끝의 CR은 제거하고
        마지막 개행 뒤의 빈 요소는 버린다.
        """
        lines = text.split('\n')
        if lines[-1] == '':
            lines.pop()
        return cls(path=path, lines=tuple(line[:-1] if line.endswith('\r') else line for line in lines))

    @property
    def line_count(self) -> int:
        """라인 수 반환"""
        return len(self.lines)


# Pydantic models for API validation
class ChangedFileRequest(BaseModel):
    """API 요청용 ChangedFile 모델"""
    path: str
    content: str

    @field_validator('path')
    @classmethod
    def validate_path(cls, v):
        if not v.strip():
            raise ValueError('File path cannot be empty')
        return v.strip()

    def to_changed_file(self) -> ChangedFile:
        return ChangedFile.from_text(self.path, self.content)


class AnalyzeRequest(BaseModel):
    """API 요청용 분석 요청 모델"""
    files: List[ChangedFileRequest] = []
    tests_passed: bool = True

    def to_changed_files(self) -> List[ChangedFile]:
        return [f.to_changed_file() for f in self.files]

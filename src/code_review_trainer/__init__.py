"""
Code Review Trainer

Pull Request 코드 리뷰 교육용 자동 피드백 시스템
"""

__version__ = "1.0.0"

from .api import ReviewTrainerAPI

__all__ = ["ReviewTrainerAPI"]

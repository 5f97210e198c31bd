"""
GitHub Integration Layer

This module provides GitHub API integration for pull request lookup,
changed-file collection, and review posting.
"""

from .client import GitHubClient, GitHubAPIError, RateLimitExceeded
from .collector import ChangedFileCollector
from .emitter import ReviewEmitter, EmitResult

__all__ = [
    'GitHubClient',
    'GitHubAPIError',
    'RateLimitExceeded',
    'ChangedFileCollector',
    'ReviewEmitter',
    'EmitResult',
]

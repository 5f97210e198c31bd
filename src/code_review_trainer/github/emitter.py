"""
Review Emitter

Posts a stored review to GitHub: the summary as a sticky PR comment and
the verdict as a pull request review with line comments. When the pull
request cannot be resolved, a tracking issue is opened instead.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..artifacts import StoredReview
from ..errors import InvalidVerdictError, PullRequestNotFound
from ..models.review import Verdict
from .client import GitHubAPIError, GitHubClient


logger = logging.getLogger(__name__)


PR_NOT_FOUND_TITLE = "Code Review Failed - PR Not Found"


@dataclass
class EmitResult:
    """Outcome of the posting stage."""
    status: str  # 'posted', 'pr_not_found'
    pr_number: Optional[int] = None
    verdict: Optional[Verdict] = None
    comments_posted: int = 0
    sticky_posted: bool = False
    issue_number: Optional[int] = None

    def __post_init__(self):
        """데이터 검증"""
        valid_statuses = {'posted', 'pr_not_found'}
        if self.status not in valid_statuses:
            raise ValueError(f"Invalid status: {self.status}")


class ReviewEmitter:
    """
    Submits stored review artifacts to a pull request.

    The verdict is validated before any API call is made.
    """

    def __init__(
        self,
        client: GitHubClient,
        repository: str,
        sticky_marker: str = "<!-- Sticky Pull Request Comment -->",
        recreate_sticky: bool = True
    ):
        """
        Initialize review emitter.

        Args:
            client: Authenticated GitHubClient
            repository: Repository in 'owner/repo' format
            sticky_marker: Hidden marker identifying the sticky comment
            recreate_sticky: Delete and recreate the sticky comment instead of editing it
        """
        if '/' not in repository:
            raise ValueError("Repository must be in format 'owner/repo'")

        self.client = client
        self.owner, self.repo = repository.split('/', 1)
        self.sticky_marker = sticky_marker
        self.recreate_sticky = recreate_sticky

    def emit(
        self,
        review: StoredReview,
        run_id: Optional[int] = None,
        pr_number: Optional[int] = None,
        details_url: Optional[str] = None
    ) -> EmitResult:
        """
        Post a stored review.

        Args:
            review: Review read from the artifact directory
            run_id: Workflow run that produced the artifacts
            pr_number: Explicit PR number (overrides artifact and lookup)
            details_url: Link to the posting run, used in the tracking issue

        Returns:
            EmitResult

        Raises:
            InvalidVerdictError: Stored review type is not a valid verdict
            GitHubAPIError: Review submission failed
        """
        try:
            verdict = Verdict.parse(review.review_type)
        except InvalidVerdictError as e:
            logger.error(str(e))
            raise

        pr_number = pr_number or review.pr_number
        if pr_number is None:
            try:
                pr_number = self.resolve_pull_request(run_id)
            except PullRequestNotFound as e:
                logger.warning(str(e))
                issue_number = self.open_tracking_issue(run_id, details_url)
                return EmitResult(status='pr_not_found', verdict=verdict, issue_number=issue_number)

        sticky_posted = False
        if review.review_message:
            try:
                self.post_sticky_comment(pr_number, review.review_message)
                sticky_posted = True
            except GitHubAPIError as e:
                logger.warning(f"Failed to post sticky comment on #{pr_number}: {e}")
        else:
            logger.warning("No review message artifact, skipping sticky comment")

        comments = [c.to_review_comment() for c in review.comments]
        self.client.create_review(
            self.owner, self.repo, pr_number,
            event=verdict.value,
            body=review.review_body,
            comments=comments
        )

        logger.info(
            f"Successfully created PR review of type: {verdict.value} with {len(comments)} line comments"
        )
        return EmitResult(
            status='posted',
            pr_number=pr_number,
            verdict=verdict,
            comments_posted=len(comments),
            sticky_posted=sticky_posted
        )

    def resolve_pull_request(self, run_id: Optional[int]) -> int:
        """Find the PR number of a workflow run."""
        if run_id is None:
            raise PullRequestNotFound(run_id)

        try:
            return self.client.find_pull_request_for_run(self.owner, self.repo, run_id)
        except GitHubAPIError as e:
            logger.warning(f"PR lookup failed: {e}")
            raise PullRequestNotFound(run_id)

    def post_sticky_comment(self, pr_number: int, body: str) -> Dict:
        """
        Create or replace the sticky summary comment.

        Existing comments carrying the marker are deleted when
        ``recreate_sticky`` is set, otherwise the first one is edited.
        """
        marked_body = f"{body.rstrip()}\n{self.sticky_marker}\n"
        existing = self._find_sticky_comments(pr_number)

        if existing and not self.recreate_sticky:
            return self.client.update_issue_comment(self.owner, self.repo, existing[0]['id'], marked_body)

        for comment in existing:
            self.client.delete_issue_comment(self.owner, self.repo, comment['id'])

        return self.client.create_issue_comment(self.owner, self.repo, pr_number, marked_body)

    def open_tracking_issue(self, run_id: Optional[int], details_url: Optional[str] = None) -> Optional[int]:
        """Open an issue reporting that no PR was found. Returns the issue number."""
        body = (
            f'The "Post PR Review" workflow could not find an associated PR '
            f'for workflow run #{run_id}.\n\n'
        )
        if details_url:
            body += f"Please check the workflow logs for more details: {details_url}"
        else:
            body += "Please check the workflow logs for more details."

        try:
            issue = self.client.create_issue(self.owner, self.repo, PR_NOT_FOUND_TITLE, body)
        except GitHubAPIError as e:
            logger.error(f"Error creating notification issue: {e}")
            return None
        return issue.get('number')

    def _find_sticky_comments(self, pr_number: int) -> List[Dict]:
        return [
            c for c in self.client.list_issue_comments(self.owner, self.repo, pr_number)
            if self.sticky_marker in (c.get('body') or '')
        ]

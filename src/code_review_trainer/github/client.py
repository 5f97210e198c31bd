"""
GitHub API Client

Handles GitHub API authentication, rate limiting, and communication.
Provides methods for pull request lookup, PR comments, reviews and issues.
"""

import time
import logging
from typing import Dict, List, Optional
from datetime import datetime
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..errors import PullRequestNotFound


logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """GitHub API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class RateLimitExceeded(GitHubAPIError):
    """GitHub API rate limit exceeded"""
    def __init__(self, reset_time: datetime):
        super().__init__(f"Rate limit exceeded. Resets at {reset_time}", status_code=429)
        self.reset_time = reset_time


class GitHubClient:
    """
    GitHub API client with authentication, rate limiting, and error handling.

    Provides methods for:
    - Resolving the pull request of a workflow run
    - Sticky PR comments (list, create, update, delete)
    - Pull request reviews with line comments
    - Tracking issues
    """

    def __init__(self, token: str, base_url: str = "https://api.github.com", timeout: int = 30):
        """
        Initialize GitHub client.

        Args:
            token: GitHub token
            base_url: GitHub API base URL (default: https://api.github.com)
            timeout: Request timeout in seconds
        """
        if not token:
            raise ValueError("GitHub token is required")

        self.token = token
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = self._create_session()
        self.rate_limit_remaining = 5000
        self.rate_limit_reset = datetime.now()

    @property
    def headers(self) -> Dict[str, str]:
        """Headers sent with every request."""
        return dict(self.session.headers)

    def _create_session(self) -> requests.Session:
        """Create requests session with retry strategy and authentication."""
        session = requests.Session()

        # Configure retry strategy
        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[500, 502, 503, 504],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        # Set authentication headers
        session.headers.update({
            'Authorization': f'token {self.token}',
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'Code-Review-Trainer/1.0'
        })

        return session

    def _check_rate_limit(self) -> None:
        """Check and handle GitHub API rate limits."""
        if self.rate_limit_remaining <= 10 and datetime.now() < self.rate_limit_reset:
            wait_time = (self.rate_limit_reset - datetime.now()).total_seconds()
            if wait_time > 0:
                logger.warning(f"Rate limit low ({self.rate_limit_remaining}), resets in {wait_time:.1f}s")
                raise RateLimitExceeded(self.rate_limit_reset)

    def _update_rate_limit(self, response: requests.Response) -> None:
        """Update rate limit information from response headers."""
        if 'X-RateLimit-Remaining' in response.headers:
            self.rate_limit_remaining = int(response.headers['X-RateLimit-Remaining'])

        if 'X-RateLimit-Reset' in response.headers:
            reset_timestamp = int(response.headers['X-RateLimit-Reset'])
            self.rate_limit_reset = datetime.fromtimestamp(reset_timestamp)

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to GitHub API with rate limiting.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            GitHubAPIError: For API errors
            RateLimitExceeded: When rate limit is exceeded
        """
        self._check_rate_limit()

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise GitHubAPIError(f"Request failed: {str(e)}")

        self._update_rate_limit(response)

        if response.status_code == 429:
            reset_time = datetime.fromtimestamp(int(response.headers.get('X-RateLimit-Reset', time.time() + 3600)))
            raise RateLimitExceeded(reset_time)

        if not response.ok:
            error_data = response.json() if response.content else {}
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {error_data.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    def get_workflow_run(self, owner: str, repo: str, run_id: int) -> Dict:
        """
        Get workflow run information.

        Args:
            owner: Repository owner
            repo: Repository name
            run_id: Workflow run id

        Returns:
            Workflow run data (head_branch, head_sha, ...)
        """
        logger.info(f"Fetching workflow run {owner}/{repo} #{run_id}")

        response = self._make_request('GET', f'/repos/{owner}/{repo}/actions/runs/{run_id}')
        return response.json()

    def list_pull_requests(
        self,
        owner: str,
        repo: str,
        state: str = 'open',
        head: Optional[str] = None
    ) -> List[Dict]:
        """
        List pull requests.

        Args:
            owner: Repository owner
            repo: Repository name
            state: 'open', 'closed' or 'all'
            head: Filter by 'user:branch'

        Returns:
            List of pull request data
        """
        params = {'state': state, 'per_page': 100}
        if head:
            params['head'] = head

        response = self._make_request('GET', f'/repos/{owner}/{repo}/pulls', params=params)
        return response.json()

    def find_pull_request_for_run(self, owner: str, repo: str, run_id: int) -> int:
        """
        Resolve the pull request number a workflow run belongs to.

        Looks for an open PR from the run's head branch first, then for any
        PR whose head commit matches the run's head SHA.

        Args:
            owner: Repository owner
            repo: Repository name
            run_id: Workflow run id

        Returns:
            Pull request number

        Raises:
            PullRequestNotFound: When no PR matches
        """
        logger.info(f"Looking for PR number in workflow run {run_id}")

        run_info = self.get_workflow_run(owner, repo, run_id)
        head_branch = run_info.get('head_branch')
        head_sha = run_info.get('head_sha')

        logger.info(f"Head branch: {head_branch}")
        logger.info(f"Head SHA: {head_sha}")

        if head_branch:
            pulls = self.list_pull_requests(owner, repo, state='open', head=f'{owner}:{head_branch}')
            if pulls and pulls[0].get('number'):
                pr_number = pulls[0]['number']
                logger.info(f"Found PR number: {pr_number}")
                return pr_number

        logger.info("No open PR found for branch. Checking by commit SHA...")
        if head_sha:
            for pull in self.list_pull_requests(owner, repo, state='all'):
                if pull.get('head', {}).get('sha') == head_sha:
                    logger.info(f"Found PR number: {pull['number']}")
                    return pull['number']

        logger.warning("Could not find PR number")
        raise PullRequestNotFound(run_id)

    def list_issue_comments(self, owner: str, repo: str, issue_number: int) -> List[Dict]:
        """
        Get all comments on an issue or pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            issue_number: Issue or pull request number

        Returns:
            List of comment data
        """
        comments = []
        page = 1
        per_page = 100

        while True:
            response = self._make_request(
                'GET',
                f'/repos/{owner}/{repo}/issues/{issue_number}/comments',
                params={'page': page, 'per_page': per_page}
            )

            page_comments = response.json()
            if not page_comments:
                break

            comments.extend(page_comments)

            if len(page_comments) < per_page:
                break

            page += 1

        return comments

    def create_issue_comment(self, owner: str, repo: str, issue_number: int, body: str) -> Dict:
        """Create a comment on an issue or pull request."""
        logger.info(f"Creating comment on {owner}/{repo}#{issue_number}")

        response = self._make_request(
            'POST', f'/repos/{owner}/{repo}/issues/{issue_number}/comments', json={'body': body}
        )
        return response.json()

    def update_issue_comment(self, owner: str, repo: str, comment_id: int, body: str) -> Dict:
        """Update an existing comment."""
        logger.info(f"Updating comment {comment_id} on {owner}/{repo}")

        response = self._make_request(
            'PATCH', f'/repos/{owner}/{repo}/issues/comments/{comment_id}', json={'body': body}
        )
        return response.json()

    def delete_issue_comment(self, owner: str, repo: str, comment_id: int) -> None:
        """Delete a comment."""
        logger.info(f"Deleting comment {comment_id} on {owner}/{repo}")

        self._make_request('DELETE', f'/repos/{owner}/{repo}/issues/comments/{comment_id}')

    def create_review(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        event: str,
        body: str,
        comments: Optional[List[Dict]] = None
    ) -> Dict:
        """
        Create a pull request review.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number
            event: 'APPROVE' or 'REQUEST_CHANGES'
            body: Review body
            comments: Line comments ({path, line, side, body})

        Returns:
            Review data
        """
        comments = comments or []
        logger.info(f"Creating {event} review on {owner}/{repo}#{pr_number} with {len(comments)} line comments")

        response = self._make_request(
            'POST',
            f'/repos/{owner}/{repo}/pulls/{pr_number}/reviews',
            json={'body': body, 'event': event, 'comments': comments}
        )
        return response.json()

    def create_issue(self, owner: str, repo: str, title: str, body: str) -> Dict:
        """Create an issue."""
        logger.info(f"Creating issue on {owner}/{repo}: {title}")

        response = self._make_request('POST', f'/repos/{owner}/{repo}/issues', json={'title': title, 'body': body})
        return response.json()


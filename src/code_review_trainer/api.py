"""
Main Review Trainer API

Main interface that orchestrates both stages of the training loop:
test gate and disabled-code analysis with artifact output, then
posting of the stored review to the pull request.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .artifacts import ArtifactStore
from .config import AppConfig, get_config
from .errors import ArtifactError
from .formatting.verdict import VerdictBuilder, failing_tests_payload
from .gate import run_tests, write_test_results
from .github.client import GitHubClient
from .github.collector import ChangedFileCollector
from .github.emitter import EmitResult, ReviewEmitter
from .models.changed_file import ChangedFile
from .models.review import AnalysisResult, ReviewPayload
from .review.aggregator import Aggregator
from .review.rules import build_rules
from .review.scanner import FileScanner


logger = logging.getLogger(__name__)


@dataclass
class AnalysisStageResult:
    """Result of the analysis stage."""
    payload: ReviewPayload
    result: Optional[AnalysisResult]
    artifacts: List[Path] = field(default_factory=list)
    processing_time: float = 0.0

    @property
    def tests_passed(self) -> bool:
        return self.result is not None


class ReviewTrainerAPI:
    """
    Main Review Trainer API interface.

    Orchestrates the training loop:
    1. Run tests and record the result
    2. Collect changed files and scan them for disabled code
    3. Build the verdict and write review artifacts
    4. Post the stored review to the pull request
    """

    def __init__(self, config: Optional[AppConfig] = None):
        """
        Initialize Review Trainer API.

        Args:
            config: Optional configuration object
        """
        self.config = config or get_config()

        self.scanner = FileScanner(build_rules(self.config.analysis.step2_window))
        self.aggregator = Aggregator(self.scanner, max_workers=self.config.analysis.max_workers)
        self.verdict_builder = VerdictBuilder()
        self.artifact_store = ArtifactStore(self.config.artifacts.directory)

        logger.debug("Review Trainer API initialized")

    def analyze(self, files: Sequence[ChangedFile]) -> Tuple[AnalysisResult, ReviewPayload]:
        """
        Analyze changed files and build the review payload.

        Args:
            files: Changed files in discovery order

        Returns:
            Tuple of (AnalysisResult, ReviewPayload)
        """
        result = self.aggregator.aggregate(files)
        return result, self.verdict_builder.build(result)

    def review(self, files: Sequence[ChangedFile], tests_passed: bool = True) -> ReviewPayload:
        """
        Build the review payload, short-circuiting when tests failed.

        Args:
            files: Changed files
            tests_passed: Upstream test result

        Returns:
            ReviewPayload
        """
        if not tests_passed:
            logger.info("Tests failed, skipping code analysis")
            return failing_tests_payload()
        return self.analyze(files)[1]

    def run_test_stage(self) -> bool:
        """Run the configured test command and write the results file."""
        passed = run_tests(self.config.tests.command, cwd=self.config.tests.working_directory)
        write_test_results(self.config.tests.results_file, passed)
        return passed

    def run_analysis_stage(
        self,
        tests_passed: bool,
        base_sha: Optional[str] = None,
        head_sha: Optional[str] = None,
        paths: Optional[Sequence[str]] = None,
        repo_dir: str = ".",
        pr_number: Optional[int] = None
    ) -> AnalysisStageResult:
        """
        Run the analysis stage and write the review artifacts.

        Changed files come from ``paths`` when given, otherwise from the
        git diff between ``base_sha`` and ``head_sha``.

        Args:
            tests_passed: Upstream test result
            base_sha: Base commit of the PR
            head_sha: Head commit of the PR
            paths: Explicit file list
            repo_dir: Root of the checkout
            pr_number: PR number to record for the posting stage

        Returns:
            AnalysisStageResult
        """
        start_time = datetime.now()

        if not tests_passed:
            payload = failing_tests_payload()
            written = self.artifact_store.write_payload(payload, result=None, pr_number=pr_number)
            return AnalysisStageResult(payload=payload, result=None, artifacts=written)

        files = self._collect_files(base_sha, head_sha, paths, repo_dir)
        result, payload = self.analyze(files)
        written = self.artifact_store.write_payload(payload, result=result, pr_number=pr_number)

        processing_time = (datetime.now() - start_time).total_seconds()
        logger.info(f"Analysis stage completed: {payload.verdict.value} ({processing_time:.2f}s)")
        return AnalysisStageResult(
            payload=payload,
            result=result,
            artifacts=written,
            processing_time=processing_time
        )

    def run_posting_stage(
        self,
        run_id: Optional[int] = None,
        pr_number: Optional[int] = None,
        details_url: Optional[str] = None,
        client: Optional[GitHubClient] = None
    ) -> EmitResult:
        """
        Post the stored review to the pull request.

        Args:
            run_id: Workflow run that produced the artifacts
            pr_number: Explicit PR number
            details_url: Link to the posting run for the tracking issue
            client: Optional pre-built GitHubClient

        Returns:
            EmitResult

        Raises:
            ArtifactError: Artifacts missing or malformed
            InvalidVerdictError: Stored review type is invalid
        """
        github = self.config.github
        if not github.repository:
            raise ValueError("GitHub repository is required for posting")

        try:
            review = self.artifact_store.read_review()
        except ArtifactError as e:
            logger.error(f"Cannot post review: {e}")
            raise

        if client is None:
            if not github.token:
                raise ValueError("GitHub token is required for posting")
            client = GitHubClient(github.token, base_url=github.api_base_url, timeout=github.timeout_seconds)

        emitter = ReviewEmitter(
            client,
            github.repository,
            sticky_marker=self.config.artifacts.sticky_marker,
            recreate_sticky=self.config.artifacts.recreate_sticky
        )
        return emitter.emit(review, run_id=run_id, pr_number=pr_number, details_url=details_url)

    def _collect_files(
        self,
        base_sha: Optional[str],
        head_sha: Optional[str],
        paths: Optional[Sequence[str]],
        repo_dir: str
    ) -> List[ChangedFile]:
        collector = ChangedFileCollector(repo_dir, extensions=self.config.analysis.file_extensions)

        if paths is not None:
            return collector.load_files(collector.filter_relevant_paths(paths))

        if not base_sha or not head_sha:
            raise ValueError("base_sha and head_sha are required when no paths are given")

        files = collector.collect(base_sha, head_sha)
        if not files:
            logger.warning("No changed files to analyze")
        return files

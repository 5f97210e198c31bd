"""
Command Line Interface

Entry points for the CI workflow steps:

    code-review-trainer test
    code-review-trainer analyze --base <sha> --head <sha> [--tests-passed|--tests-failed] [--pr-number N]
    code-review-trainer post --run-id <id>
"""

import argparse
import logging
import sys
from typing import List, Optional

from .api import ReviewTrainerAPI
from .config import AppConfig, ConfigManager
from .errors import ReviewTrainerError
from .gate import read_test_results
from .github.client import GitHubAPIError


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="code-review-trainer",
        description="Code review training: test gate, disabled-code analysis and PR review posting",
    )
    parser.add_argument("--config", help="Path to a YAML config file (default: environment variables)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("test", help="Run the test command and write the results file")

    analyze = subparsers.add_parser("analyze", help="Analyze changed files and write review artifacts")
    analyze.add_argument("--base", help="Base commit SHA of the pull request")
    analyze.add_argument("--head", help="Head commit SHA of the pull request")
    analyze.add_argument("--files", nargs="*", help="Explicit list of files to analyze")
    analyze.add_argument("--repo-dir", default=".", help="Root of the checkout")
    analyze.add_argument("--pr-number", type=int, help="Pull request number to record")
    gate = analyze.add_mutually_exclusive_group()
    gate.add_argument(
        "--tests-passed",
        action="store_true",
        help="Analyze without reading the test results file",
    )
    gate.add_argument(
        "--tests-failed",
        action="store_true",
        help="Skip analysis and write the failing-tests review",
    )

    post = subparsers.add_parser("post", help="Post stored review artifacts to the pull request")
    post.add_argument("--run-id", type=int, help="Workflow run that produced the artifacts")
    post.add_argument("--pr-number", type=int, help="Pull request number (skips lookup)")
    post.add_argument("--details-url", help="Link to this run, used if the PR is not found")

    return parser


def _load_config(path: Optional[str]) -> AppConfig:
    config = AppConfig.from_yaml(path) if path else AppConfig.from_env()
    return ConfigManager(config).config


def _tests_passed(args: argparse.Namespace, config: AppConfig) -> bool:
    if args.tests_failed:
        return False
    if args.tests_passed:
        return True

    recorded = read_test_results(config.tests.results_file)
    if recorded is None:
        logger.warning(f"No test result in {config.tests.results_file}, treating tests as failed")
        return False
    return recorded


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = _load_config(args.config)
    except (ValueError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    api = ReviewTrainerAPI(config)

    if args.command == "test":
        passed = api.run_test_stage()
        print(f"test_passed={'true' if passed else 'false'}")
        return 0

    if args.command == "analyze":
        try:
            stage = api.run_analysis_stage(
                tests_passed=_tests_passed(args, config),
                base_sha=args.base,
                head_sha=args.head,
                paths=args.files,
                repo_dir=args.repo_dir,
                pr_number=args.pr_number,
            )
        except ValueError as e:
            logger.error(str(e))
            return 2
        print(stage.payload.verdict.value)
        return 0

    try:
        outcome = api.run_posting_stage(
            run_id=args.run_id,
            pr_number=args.pr_number,
            details_url=args.details_url,
        )
    except (ReviewTrainerError, GitHubAPIError, ValueError) as e:
        logger.error(f"Posting failed: {e}")
        return 1

    if outcome.status == 'pr_not_found':
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Changed File Collector

Lists the files changed between two commits and loads their contents
as ChangedFile objects for analysis.
"""

import logging
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from ..models.changed_file import ChangedFile


logger = logging.getLogger(__name__)


class ChangedFileCollector:
    """
    Collects changed source files from a git checkout.

    Paths are filtered by extension and sorted lexically, which fixes the
    order findings are reported in. Files that cannot be read are skipped.
    """

    def __init__(
        self,
        repo_dir: Union[str, Path] = ".",
        extensions: Sequence[str] = (".cs",),
        git_timeout: int = 60
    ):
        """
        Initialize collector.

        Args:
            repo_dir: Root of the git checkout
            extensions: File extensions to analyze (e.g. ".cs")
            git_timeout: Timeout for git commands in seconds
        """
        self.repo_dir = Path(repo_dir)
        self.extensions = tuple(e.lower() if e.startswith('.') else f'.{e.lower()}' for e in extensions)
        self.git_timeout = git_timeout

    def list_changed_paths(self, base_sha: str, head_sha: str) -> List[str]:
        """
        List relevant paths changed between two commits.

        Args:
            base_sha: Base commit
            head_sha: Head commit

        Returns:
            Sorted list of repository-relative paths (empty if git fails)
        """
        cmd = ["git", "diff", "--name-only", base_sha, head_sha]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.git_timeout,
                cwd=self.repo_dir
            )
        except (subprocess.SubprocessError, OSError) as e:
            logger.warning(f"git diff failed: {e}")
            return []

        if result.returncode != 0:
            message = (result.stderr or "").strip() or f"exit code {result.returncode}"
            logger.warning(f"git diff failed: {message}")
            return []

        paths = self.filter_relevant_paths(result.stdout.splitlines())
        logger.info(f"Found {len(paths)} changed files matching {', '.join(self.extensions)}")
        return paths

    def filter_relevant_paths(self, paths: Iterable[str]) -> List[str]:
        """Keep paths with a configured extension, sorted and de-duplicated."""
        relevant = {p.strip() for p in paths if p.strip() and self.is_relevant(p.strip())}
        return sorted(relevant)

    def is_relevant(self, path: str) -> bool:
        """Check if a path has one of the configured extensions."""
        return path.lower().endswith(self.extensions)

    def collect(self, base_sha: str, head_sha: str) -> List[ChangedFile]:
        """
        Collect changed files between two commits.

        Args:
            base_sha: Base commit
            head_sha: Head commit

        Returns:
            Loaded ChangedFile objects in path order
        """
        return self.load_files(self.list_changed_paths(base_sha, head_sha))

    def load_files(self, paths: Iterable[str]) -> List[ChangedFile]:
        """
        Load files relative to the repository root.

        Deleted or unreadable files are skipped with a warning.
        """
        files = []
        for path in paths:
            changed_file = self.load_file(path)
            if changed_file is not None:
                files.append(changed_file)
        return files

    def load_file(self, path: str) -> Optional[ChangedFile]:
        """Load a single file, or None if it cannot be read."""
        full_path = self.repo_dir / path
        try:
            # 바이트로 읽어 개행 변환 없이 git과 같은 라인 번호를 유지
            text = full_path.read_bytes().decode("utf-8", errors="replace")
        except OSError as e:
            logger.warning(f"Skipping unreadable file {path}: {e}")
            return None

        logger.debug(f"Loaded {path} ({len(text)} chars)")
        return ChangedFile.from_text(path, text)

"""
Findings Aggregator

Runs the file scanner over every changed file and merges the per-file
findings into a single ordered analysis result.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from ..models.changed_file import ChangedFile
from ..models.review import AnalysisResult, Finding
from .scanner import FileScanner


logger = logging.getLogger(__name__)


class Aggregator:
    """
    Aggregates findings across changed files.

    Files are processed in the order given. With ``max_workers`` greater
    than one, files are scanned in a thread pool; results are still merged
    in input order.
    """

    def __init__(self, scanner: Optional[FileScanner] = None, max_workers: int = 1):
        """
        Initialize aggregator.

        Args:
            scanner: FileScanner instance (default: scanner with DEFAULT_RULES)
            max_workers: Number of scanning threads
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.scanner = scanner or FileScanner()
        self.max_workers = max_workers

    def aggregate(self, files: Sequence[ChangedFile]) -> AnalysisResult:
        """
        Scan all files and merge their findings.

        Args:
            files: Changed files in discovery order

        Returns:
            AnalysisResult (empty when there are no files or no matches)
        """
        files = list(files)
        logger.info(f"Analyzing {len(files)} changed files")

        per_file = self._scan_all(files)

        findings: List[Finding] = []
        for changed_file, file_findings in zip(files, per_file):
            logger.info(f"Analyzing {changed_file.path}... {len(file_findings)} issues")
            findings.extend(file_findings)

        result = AnalysisResult(findings=tuple(findings), files_scanned=len(files))
        categories = sorted(c.value for c in result.categories_seen)
        logger.info(f"Analysis complete: {len(findings)} findings, categories: {categories or 'none'}")
        return result

    def _scan_all(self, files: List[ChangedFile]) -> List[List[Finding]]:
        """Scan files, preserving input order."""
        if self.max_workers == 1 or len(files) <= 1:
            return [self.scanner.scan(f) for f in files]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            # map()는 입력 순서대로 결과를 반환
            return list(executor.map(self.scanner.scan, files))

"""
Property-based tests for disabled-code analysis.

Verdict, summary and findings must stay consistent with each other for
any combination of changed files.
"""

from hypothesis import given, settings, strategies as st

from code_review_trainer.formatting.verdict import CATEGORY_BULLETS, VerdictBuilder
from code_review_trainer.models.changed_file import ChangedFile
from code_review_trainer.models.review import IssueCategory, Verdict
from code_review_trainer.review.aggregator import Aggregator
from code_review_trainer.review.rules import STEP2_MARKER
from code_review_trainer.review.scanner import FileScanner


DISABLED_LINES = [
    "// if (order == null)",
    "// if (!ModelState.IsValid)",
    "// validator.Validate(order);",
    "// Uncomment for DOCUMENTATION issue",
    "/* /// <summary>",
    "// try",
    "// catch (Exception ex)",
    "// Uncomment for LOGGING issue",
    '/* _logger.LogError(ex, "failed"); */',
    f"// {STEP2_MARKER}",
    "/*",
]

LIVE_LINES = [
    "public void Run()",
    "{",
    "}",
    "    Save(order);",
    "    if (order == null) return;",
    "    var total = items.Sum(i => i.Price);",
    "",
]

source_lines = st.lists(st.sampled_from(DISABLED_LINES + LIVE_LINES), max_size=60)
changed_files = st.lists(
    st.tuples(st.from_regex(r"[A-Za-z]{1,8}", fullmatch=True), source_lines),
    max_size=6,
    unique_by=lambda item: item[0],
).map(lambda items: [ChangedFile(path=f"src/{name}.cs", lines=tuple(lines)) for name, lines in items])


class TestAnalysisProperties:
    """Property tests for scanner, aggregator and verdict builder."""

    @given(files=changed_files)
    def test_verdict_iff_findings(self, files):
        result = Aggregator().aggregate(files)
        payload = VerdictBuilder().build(result)

        if result.findings:
            assert payload.verdict is Verdict.REQUEST_CHANGES
        else:
            assert payload.verdict is Verdict.APPROVE
            assert payload.comments == ()

    @given(files=changed_files)
    def test_categories_seen_matches_findings(self, files):
        result = Aggregator().aggregate(files)

        expected = set()
        for finding in result.findings:
            expected.update(finding.category.flagged_categories)
        assert result.categories_seen == expected

    @given(files=changed_files)
    def test_summary_bullets_match_categories(self, files):
        result = Aggregator().aggregate(files)
        summary = VerdictBuilder().build(result).long_summary

        for category, bullet in CATEGORY_BULLETS.items():
            assert (bullet in summary) == (category in result.categories_seen)

    @given(files=changed_files)
    def test_findings_point_into_files(self, files):
        result = Aggregator().aggregate(files)
        line_counts = {f.path: f.line_count for f in files}

        for finding in result.findings:
            assert 1 <= finding.line <= line_counts[finding.path]

    @given(lines=source_lines)
    def test_live_code_never_flagged(self, lines):
        live_only = [line for line in lines if line in LIVE_LINES]
        assert FileScanner().scan(ChangedFile(path="Live.cs", lines=tuple(live_only))) == []

    @given(lines=source_lines)
    def test_at_most_one_step2_finding(self, lines):
        findings = FileScanner().scan(ChangedFile(path="Step2.cs", lines=tuple(lines)))
        assert len([f for f in findings if f.category is IssueCategory.STEP2_BLOCK]) <= 1

    @settings(max_examples=25)
    @given(files=changed_files)
    def test_deterministic_and_parallel_safe(self, files):
        sequential = Aggregator(max_workers=1).aggregate(files)

        assert Aggregator(max_workers=1).aggregate(files) == sequential
        assert Aggregator(max_workers=3).aggregate(files) == sequential

"""
Unit tests for data models and configuration.
"""

import pytest
from pydantic import ValidationError

from code_review_trainer.config import AppConfig, ConfigManager, TestConfig
from code_review_trainer.errors import InvalidVerdictError
from code_review_trainer.models.changed_file import AnalyzeRequest, ChangedFile, ChangedFileRequest
from code_review_trainer.models.review import (
    AnalysisResult,
    Finding,
    IssueCategory,
    LineCommentRecord,
    ReviewPayload,
    SUMMARY_CATEGORY_ORDER,
    Verdict,
)


class TestChangedFile:
    """Unit tests for ChangedFile."""

    def test_from_text(self):
        changed_file = ChangedFile.from_text("src/Foo.cs", "line one\nline two\n")

        assert changed_file.path == "src/Foo.cs"
        assert changed_file.lines == ("line one", "line two")
        assert changed_file.line_count == 2

    def test_from_text_handles_crlf(self):
        changed_file = ChangedFile.from_text("Foo.cs", "a\r\nb\r\n")
        assert changed_file.lines == ("a", "b")

    def test_list_lines_become_tuple(self):
        changed_file = ChangedFile(path="Foo.cs", lines=["a", "b"])
        assert changed_file.lines == ("a", "b")

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError):
            ChangedFile(path=" ", lines=())

    def test_immutable(self):
        changed_file = ChangedFile(path="Foo.cs", lines=("a",))
        with pytest.raises(Exception):
            changed_file.path = "Bar.cs"

    def test_from_text_splits_on_newline_only(self):
        """Form feeds and lone carriage returns stay inside their line."""
        changed_file = ChangedFile.from_text("Foo.cs", "// page\x0cbreak\n// a\rb\n// if (input == null)\n")

        assert changed_file.lines == ("// page\x0cbreak", "// a\rb", "// if (input == null)")

    @pytest.mark.parametrize("text,lines", [
        ("", ()),
        ("\n", ("",)),
        ("a", ("a",)),
        ("a\n\nb", ("a", "", "b")),
        ("a\u2028b\x85c\n", ("a\u2028b\x85c",)),
    ])
    def test_from_text_line_count_matches_git(self, text, lines):
        assert ChangedFile.from_text("Foo.cs", text).lines == lines


class TestFindingModels:
    """Unit tests for Finding and AnalysisResult."""

    def test_finding_validation(self):
        with pytest.raises(ValueError):
            Finding(path="Foo.cs", line=0, category=IssueCategory.NULL_CHECK, body="x")
        with pytest.raises(ValueError):
            Finding(path="Foo.cs", line=1, category=IssueCategory.NULL_CHECK, body="   ")

    def test_finding_to_comment(self):
        finding = Finding(path="Foo.cs", line=3, category=IssueCategory.LOGGING, body="Uncomment logging.")
        assert finding.to_comment() == {"path": "Foo.cs", "line": 3, "body": "Uncomment logging."}

    def test_flagged_categories(self):
        assert IssueCategory.STEP2_BLOCK.flagged_categories == (
            IssueCategory.DOCUMENTATION,
            IssueCategory.LOGGING,
        )
        for category in SUMMARY_CATEGORY_ORDER:
            assert category.flagged_categories == (category,)

    def test_analysis_result_derived_properties(self):
        findings = (
            Finding(path="B.cs", line=1, category=IssueCategory.VALIDATION, body="x"),
            Finding(path="A.cs", line=2, category=IssueCategory.VALIDATION, body="x"),
            Finding(path="B.cs", line=5, category=IssueCategory.NULL_CHECK, body="x"),
        )
        result = AnalysisResult(findings=findings, files_scanned=3)

        assert result.has_issues
        assert result.categories_seen == {IssueCategory.VALIDATION, IssueCategory.NULL_CHECK}
        assert result.files_with_issues == ["B.cs", "A.cs"]
        assert len(result.get_findings_by_category(IssueCategory.VALIDATION)) == 2

    def test_analysis_result_rejects_negative_count(self):
        with pytest.raises(ValueError):
            AnalysisResult(files_scanned=-1)


class TestVerdict:
    """Unit tests for Verdict parsing."""

    @pytest.mark.parametrize("value,expected", [
        ("APPROVE", Verdict.APPROVE),
        ("REQUEST_CHANGES\n", Verdict.REQUEST_CHANGES),
    ])
    def test_parse_valid(self, value, expected):
        assert Verdict.parse(value) is expected

    @pytest.mark.parametrize("value", ["COMMENT", "approve", "", "DISMISS"])
    def test_parse_invalid(self, value):
        with pytest.raises(InvalidVerdictError) as exc_info:
            Verdict.parse(value)
        assert exc_info.value.value == value

    def test_payload_requires_verdict(self):
        with pytest.raises(InvalidVerdictError):
            ReviewPayload(verdict="APPROVE", short_body="x", long_summary="y")

    def test_payload_to_dict(self):
        finding = Finding(path="Foo.cs", line=1, category=IssueCategory.NULL_CHECK, body="x")
        payload = ReviewPayload(
            verdict=Verdict.REQUEST_CHANGES, short_body="b", long_summary="s", comments=[finding]
        )

        assert payload.comments == (finding,)
        assert payload.to_dict() == {
            "verdict": "REQUEST_CHANGES",
            "short_body": "b",
            "long_summary": "s",
            "comments": [{"path": "Foo.cs", "line": 1, "body": "x"}],
        }


class TestRequestModels:
    """Unit tests for pydantic boundary models."""

    def test_line_comment_record(self):
        record = LineCommentRecord(path="Foo.cs", line=4, body="Uncomment.")
        assert record.to_review_comment() == {"path": "Foo.cs", "line": 4, "side": "RIGHT", "body": "Uncomment."}

    @pytest.mark.parametrize("data", [
        {"path": "Foo.cs", "line": 0, "body": "x"},
        {"path": "", "line": 1, "body": "x"},
        {"path": "Foo.cs", "line": 1, "body": " "},
        {"path": "Foo.cs", "body": "x"},
    ])
    def test_line_comment_record_validation(self, data):
        with pytest.raises(ValidationError):
            LineCommentRecord.model_validate(data)

    def test_analyze_request(self):
        request = AnalyzeRequest.model_validate({
            "files": [{"path": " Foo.cs ", "content": "// try\n"}],
        })

        files = request.to_changed_files()

        assert request.tests_passed is True
        assert files == [ChangedFile(path="Foo.cs", lines=("// try",))]

    def test_changed_file_request_rejects_blank_path(self):
        with pytest.raises(ValidationError):
            ChangedFileRequest(path="  ", content="")


class TestAppConfig:
    """Unit tests for configuration."""

    def test_defaults(self):
        config = AppConfig()

        assert config.analysis.file_extensions == [".cs"]
        assert config.analysis.step2_window == 30
        assert config.artifacts.directory == "artifacts"
        config.validate()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "secret")
        monkeypatch.setenv("GITHUB_REPOSITORY", "org/repo")
        monkeypatch.setenv("REVIEW_FILE_EXTENSIONS", ".cs, .cshtml")
        monkeypatch.setenv("SCAN_WORKERS", "4")
        monkeypatch.setenv("RECREATE_STICKY", "false")

        config = AppConfig.from_env()

        assert config.github.token == "secret"
        assert config.github.repository == "org/repo"
        assert config.analysis.file_extensions == [".cs", ".cshtml"]
        assert config.analysis.max_workers == 4
        assert config.artifacts.recreate_sticky is False

    def test_from_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "github:\n"
            "  repository: org/repo\n"
            "analysis:\n"
            "  step2_window: 10\n"
            "tests:\n"
            "  command: pytest -q\n"
            "debug: true\n",
            encoding="utf-8",
        )

        config = AppConfig.from_yaml(str(config_file))

        assert config.github.repository == "org/repo"
        assert config.analysis.step2_window == 10
        assert config.tests.command == "pytest -q"
        assert config.debug is True

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.from_yaml(str(tmp_path / "missing.yaml"))

    def test_validate_errors(self):
        config = AppConfig()
        config.github.repository = "no-slash"
        config.analysis.step2_window = 0
        config.logging.level = "LOUD"

        with pytest.raises(ValueError) as exc_info:
            config.validate()

        message = str(exc_info.value)
        assert "owner/repo" in message
        assert "STEP 2 window" in message
        assert "Invalid log level" in message

    def test_to_dict_excludes_token(self):
        config = AppConfig()
        config.github.token = "secret"

        assert "token" not in config.to_dict()["github"]

    def test_config_manager_logs_config_without_token(self, caplog):
        config = AppConfig()
        config.github.token = "secret"

        with caplog.at_level("DEBUG", logger="code_review_trainer.config"):
            manager = ConfigManager(config)

        assert manager.config is config
        assert "step2_window" in caplog.text
        assert "secret" not in caplog.text

    def test_config_manager_validates(self):
        config = AppConfig()
        config.analysis.max_workers = 0

        with pytest.raises(ValueError):
            ConfigManager(config)

    def test_test_config_not_collected(self):
        assert TestConfig.__test__ is False

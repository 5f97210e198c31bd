"""
Unit tests for the pattern rule table.
"""

import pytest

from code_review_trainer.models.review import IssueCategory
from code_review_trainer.review.rules import (
    DEFAULT_RULES,
    STEP2_MARKER,
    WindowRule,
    build_rules,
)


def rule(name):
    return next(r for r in DEFAULT_RULES if r.name == name)


class TestRuleTable:
    """Tests for the rule table layout."""

    def test_rule_order(self):
        """Rules are applied in a fixed, documented order."""
        assert [r.name for r in DEFAULT_RULES] == [
            "null_check",
            "validation",
            "documentation_marker",
            "documentation_block",
            "exception_try",
            "exception_catch",
            "logging_marker",
            "logging_block",
            "step2_block",
        ]

    def test_rule_categories(self):
        """Each rule reports its category."""
        categories = [r.category for r in DEFAULT_RULES]
        assert categories == [
            IssueCategory.NULL_CHECK,
            IssueCategory.VALIDATION,
            IssueCategory.DOCUMENTATION,
            IssueCategory.DOCUMENTATION,
            IssueCategory.EXCEPTION_HANDLING,
            IssueCategory.EXCEPTION_HANDLING,
            IssueCategory.LOGGING,
            IssueCategory.LOGGING,
            IssueCategory.STEP2_BLOCK,
        ]

    def test_templates_ask_to_uncomment(self):
        """Every comment template tells the reader to uncomment code."""
        for r in DEFAULT_RULES:
            assert "ncomment" in r.comment_template

    def test_build_rules_custom_window(self):
        """The STEP 2 window size is configurable."""
        rules = build_rules(step2_window=5)
        step2 = rules[-1]
        assert isinstance(step2, WindowRule)
        assert step2.window == 5

    def test_build_rules_rejects_non_positive_window(self):
        with pytest.raises(ValueError):
            build_rules(step2_window=0)


class TestSingleLineRules:
    """Tests for single-line matchers."""

    @pytest.mark.parametrize("line", [
        "// if (input == null)",
        "        //if(request == null) throw new ArgumentNullException(nameof(request));",
        "// if ( user.Name == null)",
    ])
    def test_null_check_matches(self, line):
        assert rule("null_check").match_lines([line]) == [1]

    @pytest.mark.parametrize("line", [
        "if (input == null)",
        "// if (input != null)",
        "/* if (input == null) */",
    ])
    def test_null_check_ignores(self, line):
        assert rule("null_check").match_lines([line]) == []

    @pytest.mark.parametrize("line", [
        "// if (!ModelState.IsValid)",
        "//if (!result.IsValid) return BadRequest();",
        "// validator.Validate(order);",
    ])
    def test_validation_matches(self, line):
        assert rule("validation").match_lines([line]) == [1]

    def test_validation_one_finding_per_line(self):
        """A line matching both validation patterns is reported once."""
        line = "// validator.Validate(x); // if (!x.IsValid)"
        assert rule("validation").match_lines([line]) == [1]

    def test_validation_ignores_live_code(self):
        assert rule("validation").match_lines(["if (!ModelState.IsValid)"]) == []

    def test_documentation_marker(self):
        lines = ["// Uncomment for DOCUMENTATION issue", "public void Run() { }"]
        assert rule("documentation_marker").match_lines(lines) == [1]

    def test_documentation_marker_is_case_sensitive(self):
        assert rule("documentation_marker").match_lines(["// uncomment for documentation issue"]) == []

    def test_documentation_block_reports_first_line_only(self):
        lines = [
            "/* /// <summary>",
            "   /// Creates an order.",
            "   /// </summary> */",
            "/* /// <summary> second block */",
        ]
        assert rule("documentation_block").match_lines(lines) == [1]

    def test_try_and_catch_are_separate_rules(self):
        lines = ["// try", "// {", "//     Process();", "// }", "// catch (Exception ex)"]
        assert rule("exception_try").match_lines(lines) == [1]
        assert rule("exception_catch").match_lines(lines) == [5]

    def test_logging_marker(self):
        assert rule("logging_marker").match_lines(["// Uncomment for LOGGING issue"]) == [1]

    def test_logging_block(self):
        lines = ['/* _logger.LogInformation("Processing order {Id}", id); */', '_logger.LogInformation("live");']
        assert rule("logging_block").match_lines(lines) == [1]

    def test_matches_in_ascending_order(self):
        lines = ["// try", "x();", "// try", "y();", "// try"]
        assert rule("exception_try").match_lines(lines) == [1, 3, 5]


class TestStep2WindowRule:
    """Tests for the bounded STEP 2 lookahead."""

    def setup_method(self):
        self.rule = rule("step2_block")

    def test_no_marker(self):
        assert self.rule.match_lines(["/*", "*/"]) == []

    def test_reports_first_opener_after_marker(self):
        lines = ["class A {", f"// {STEP2_MARKER}", "int x;", "/*", "a();", "*/", "/*", "*/"]
        assert self.rule.match_lines(lines) == [4]

    def test_opener_before_marker_is_ignored(self):
        lines = ["/* header */", f"// {STEP2_MARKER}", "int x;"]
        assert self.rule.match_lines(lines) == []

    def test_marker_line_itself_is_not_searched(self):
        lines = [f"/* {STEP2_MARKER} */", "int x;"]
        assert self.rule.match_lines(lines) == []

    def test_window_upper_bound(self):
        """The 30th line after the marker is inside the window, the 31st is not."""
        inside = [f"// {STEP2_MARKER}"] + ["x();"] * 29 + ["/*"]
        outside = [f"// {STEP2_MARKER}"] + ["x();"] * 30 + ["/*"]
        assert self.rule.match_lines(inside) == [31]
        assert self.rule.match_lines(outside) == []

    def test_only_first_marker_is_used(self):
        lines = [f"// {STEP2_MARKER}"] + ["x();"] * 35 + [f"// {STEP2_MARKER}", "/*"]
        assert self.rule.match_lines(lines) == []

    def test_window_rule_flags(self):
        """Only the documentation block rule stops at its first match."""
        assert self.rule.first_only is False
        assert [r.name for r in DEFAULT_RULES if r.first_only] == ["documentation_block"]

    def test_custom_rule(self):
        custom = WindowRule(
            name="custom",
            category=IssueCategory.STEP2_BLOCK,
            patterns=DEFAULT_RULES[-1].patterns,
            comment_template="Uncomment this.",
            anchor="MARK",
            window=2,
        )
        assert custom.match_lines(["MARK", "a", "/*"]) == [3]
        assert custom.match_lines(["MARK", "a", "b", "/*"]) == []

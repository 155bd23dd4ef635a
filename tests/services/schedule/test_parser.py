"""Tests for the dependency rule parser.

Test Coverage Strategy:
- Well-formed rules, comments and blank lines
- Every malformed-line filter (segments, forbidden characters)
- Pass-through behaviour (duplicates, self-dependencies, casing)
"""

import logging

import pytest

from taskgraph.services.schedule.parser import (
    FORBIDDEN_CHARACTER,
    NO_ARROW,
    SEGMENT_COUNT,
    RuleParser,
    is_valid_task_name,
    iter_rules,
    parse_line,
    parse_rules,
)


@pytest.fixture
def parser() -> RuleParser:
    return RuleParser()


class TestParseRules:
    """Tests for RuleParser.parse."""

    def test_comments_and_blank_lines_are_skipped(self, parser: RuleParser):
        """Comments and blank lines produce no pairs."""
        assert parser.parse("A -> B\n# comment\n\nC->D") == [("A", "B"), ("C", "D")]

    def test_empty_text_yields_nothing(self, parser: RuleParser):
        assert parser.parse("") == []

    def test_whitespace_only_text_yields_nothing(self, parser: RuleParser):
        assert parser.parse("   \n\t\n  \r\n") == []

    def test_mixed_line_endings(self, parser: RuleParser):
        """CR, LF and CRLF all separate lines."""
        text = "A -> B\r\nB -> C\rC -> D\nD -> E"
        assert parser.parse(text) == [("A", "B"), ("B", "C"), ("C", "D"), ("D", "E")]

    def test_surrounding_whitespace_is_trimmed(self, parser: RuleParser):
        assert parser.parse("   Fetch   ->\tCompile  ") == [("Fetch", "Compile")]

    def test_input_order_is_preserved(self, parser: RuleParser):
        text = "Z -> Y\nA -> B\nM -> N"
        assert parser.parse(text) == [("Z", "Y"), ("A", "B"), ("M", "N")]

    def test_space_in_name_rejects_pair(self, parser: RuleParser):
        assert parser.parse("foo bar -> baz") == []

    def test_space_in_target_rejects_pair(self, parser: RuleParser):
        assert parser.parse("foo -> baz qux") == []

    @pytest.mark.parametrize(
        "line",
        [
            'say"hi -> B',
            'A -> "B"',
            "drop; -> B",
            "A -> B;",
        ],
    )
    def test_quote_or_semicolon_rejects_pair(self, parser: RuleParser, line: str):
        assert parser.parse(line) == []

    def test_line_without_arrow_is_skipped(self, parser: RuleParser):
        assert parser.parse("A depends on B\nA - > B\nA => B") == []

    def test_chained_arrows_are_skipped(self, parser: RuleParser):
        """Three segments is not a rule."""
        assert parser.parse("A -> B -> C") == []

    def test_arrow_with_missing_side_is_skipped(self, parser: RuleParser):
        assert parser.parse("-> B\nA ->\n->") == []

    def test_adjacent_arrows_collapse(self, parser: RuleParser):
        """Zero-length pieces between back-to-back arrows are dropped."""
        assert parser.parse("A->->B") == [("A", "B")]

    def test_whitespace_between_arrows_is_a_segment(self, parser: RuleParser):
        assert parser.parse("A -> -> B") == []

    def test_indented_comment_is_skipped(self, parser: RuleParser):
        assert parser.parse("   # A -> B") == []

    def test_duplicates_are_preserved(self, parser: RuleParser):
        assert parser.parse("A -> B\nA -> B") == [("A", "B"), ("A", "B")]

    def test_self_dependency_passes_through(self, parser: RuleParser):
        assert parser.parse("X -> X") == [("X", "X")]

    def test_casing_is_preserved(self, parser: RuleParser):
        assert parser.parse("Task -> task") == [("Task", "task")]

    def test_other_punctuation_is_allowed(self, parser: RuleParser):
        text = "lib/core.py -> build:debug\nstep-1 -> step_2"
        assert parser.parse(text) == [
            ("lib/core.py", "build:debug"),
            ("step-1", "step_2"),
        ]

    def test_malformed_lines_do_not_affect_neighbours(self, parser: RuleParser):
        text = "A -> B\nthis is junk\nprint(\"x\");\nB -> C"
        assert parser.parse(text) == [("A", "B"), ("B", "C")]

    def test_parse_rules_shortcut(self):
        assert parse_rules("A -> B") == [("A", "B")]


class TestParseLine:
    """Tests for the per-line predicate helpers."""

    def test_valid_line(self):
        assert parse_line("A -> B") == ("A", "B")

    @pytest.mark.parametrize("line", ["", "   ", "# A -> B", "A B", "A -> B -> C"])
    def test_invalid_lines_return_none(self, line: str):
        assert parse_line(line) is None

    def test_iter_rules_is_lazy(self):
        rules = iter_rules("A -> B\nC -> D")
        assert next(rules) == ("A", "B")
        assert next(rules) == ("C", "D")
        with pytest.raises(StopIteration):
            next(rules)


class TestIsValidTaskName:
    """Tests for is_valid_task_name."""

    @pytest.mark.parametrize("name", ["A", "build", "lib/core.py", "x-1", "Émile"])
    def test_accepts_plain_names(self, name: str):
        assert is_valid_task_name(name) is True

    @pytest.mark.parametrize("name", ["", "a b", 'a"b', "a;b"])
    def test_rejects_empty_and_forbidden(self, name: str):
        assert is_valid_task_name(name) is False


class TestSkippedLineLogging:
    """Tests for the DEBUG record written for each malformed line."""

    PARSER_LOGGER = "taskgraph.services.schedule.parser"

    def _skipped(self, caplog: pytest.LogCaptureFixture, text: str) -> list[dict]:
        with caplog.at_level(logging.DEBUG, logger=self.PARSER_LOGGER):
            list(iter_rules(text))
        return [
            record.context
            for record in caplog.records
            if record.message == "Skipping malformed rule line"
        ]

    def test_reason_and_line_number(self, caplog: pytest.LogCaptureFixture):
        text = "A -> B\n\n# note\nno arrow here\nA -> B -> C\nfoo bar -> baz"
        assert self._skipped(caplog, text) == [
            {"line_no": 4, "line": "no arrow here", "reason": NO_ARROW},
            {"line_no": 5, "line": "A -> B -> C", "reason": SEGMENT_COUNT},
            {"line_no": 6, "line": "foo bar -> baz", "reason": FORBIDDEN_CHARACTER},
        ]

    def test_crlf_counts_as_one_line_break(self, caplog: pytest.LogCaptureFixture):
        skipped = self._skipped(caplog, "A -> B\r\nB -> C\r\njunk")
        assert [entry["line_no"] for entry in skipped] == [3]

    def test_blank_and_comment_lines_are_not_logged(self, caplog: pytest.LogCaptureFixture):
        assert self._skipped(caplog, "\n   \n# A -> B\n") == []

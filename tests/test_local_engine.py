"""
Unit tests for the local rule engine.

Tests cover:
- Issues for the documented example sentences
- Span bounds and snapshot consistency
- Termination on zero-width patterns
- Determinism and rule ordering
- Disabled rules
"""

import re
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from grammar_coach.local_engine import LocalRuleEngine, iter_matches
from grammar_coach.models import IssueKind, Severity
from grammar_coach.rules import Rule

SAMPLE_TEXTS = [
    "She don't likes to go outside when it's rain.",
    "He are happy",
    "I have alot of work",
    "They is late. We was there. It's snow! Recieve it, John don't.",
    "The committee reviewed the proposal and approved the budget.",
    "",
    "   \n\t ",
    "x",
]


def _zero_width_rule(pattern: str) -> Rule:
    return Rule(
        rule_id="ZERO_WIDTH",
        pattern=re.compile(pattern),
        kind=IssueKind.STYLE,
        severity=Severity.LOW,
        explanation="zero width",
        suggest=lambda matched: [],
    )


# ============================================================================
# Documented Examples
# ============================================================================


class TestExamples:
    """Tests for the example sentences."""

    def test_example_sentence_issues(self, local_engine: LocalRuleEngine, example_text: str):
        issues = local_engine.detect(example_text)
        matched = [i.matched_text for i in issues]
        assert matched == ["She don't", "don't likes", "it's rain"]
        assert all(i.kind == IssueKind.GRAMMAR for i in issues)

    def test_subject_verb_agreement(self, local_engine: LocalRuleEngine):
        issues = local_engine.detect("He are happy")
        assert len(issues) == 1
        issue = issues[0]
        assert issue.kind == IssueKind.GRAMMAR
        assert (issue.span.start, issue.span.end) == (0, 6)
        assert issue.matched_text == "He are"
        assert issue.corrections[0].replacement_text == "He is"

    def test_spelling(self, local_engine: LocalRuleEngine):
        issues = local_engine.detect("I have alot of work")
        assert len(issues) == 1
        issue = issues[0]
        assert issue.kind == IssueKind.SPELLING
        assert issue.matched_text == "alot"
        assert (issue.span.start, issue.span.end) == (7, 11)
        assert issue.corrections[0].replacement_text == "a lot"

    def test_clean_text_has_no_issues(self, local_engine: LocalRuleEngine, clean_text: str):
        assert local_engine.detect(clean_text) == []

    def test_empty_and_whitespace(self, local_engine: LocalRuleEngine):
        assert local_engine.detect("") == []
        assert local_engine.detect("   \n ") == []


# ============================================================================
# Invariants
# ============================================================================


class TestInvariants:
    """Tests for span bounds, determinism and ordering."""

    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    def test_spans_within_text(self, local_engine: LocalRuleEngine, text: str):
        for issue in local_engine.detect(text):
            assert 0 <= issue.span.start <= issue.span.end <= len(text)
            assert text[issue.span.start:issue.span.end] == issue.matched_text

    @pytest.mark.parametrize("text", SAMPLE_TEXTS)
    def test_idempotent(self, local_engine: LocalRuleEngine, text: str):
        assert local_engine.detect(text) == local_engine.detect(text)

    def test_ids_unique_within_pass(self, local_engine: LocalRuleEngine):
        issues = local_engine.detect(SAMPLE_TEXTS[3])
        ids = [i.id for i in issues]
        assert len(ids) == len(set(ids))
        assert ids[0] == "local-issue-0"

    def test_rule_order_not_position_order(self, local_engine: LocalRuleEngine):
        # The misspelling comes first in the text but its rule runs last
        issues = local_engine.detect("Alot of people say He are late.")
        assert [i.matched_text for i in issues] == ["He are", "Alot"]

    def test_overlaps_are_kept(self, local_engine: LocalRuleEngine, example_text: str):
        first, second = local_engine.detect(example_text)[:2]
        assert first.span.end > second.span.start

    def test_every_issue_tagged_local(self, local_engine: LocalRuleEngine, example_text: str):
        issues = local_engine.detect(example_text)
        assert {i.source for i in issues} == {"local"}
        assert issues[0].rule_id == "THIRD_PERSON_DONT"


# ============================================================================
# Termination
# ============================================================================


class TestTermination:
    """Tests for zero-width match handling."""

    def test_lookahead_pattern_terminates(self):
        engine = LocalRuleEngine(rules=[_zero_width_rule(r"(?=a)")])
        issues = engine.detect("aaa")
        assert [(i.span.start, i.span.end) for i in issues] == [(0, 0), (1, 1), (2, 2)]

    def test_empty_pattern_terminates(self):
        rule = _zero_width_rule(r"x*")
        matches = list(iter_matches(rule, "abc"))
        assert [m.start() for m in matches] == [0, 1, 2, 3]

    def test_mixed_width_pattern(self):
        rule = _zero_width_rule(r"b*")
        matches = [(m.start(), m.end()) for m in iter_matches(rule, "abba")]
        assert matches == [(0, 0), (1, 3), (3, 3), (4, 4)]


# ============================================================================
# Configuration
# ============================================================================


class TestDisabledRules:
    """Tests for disabling rules by id."""

    def test_disabled_rule_skipped(self):
        engine = LocalRuleEngine(disabled_rules=["MISSPELLING_ALOT"])
        assert engine.detect("I have alot of work") == []

    def test_other_rules_still_run(self):
        engine = LocalRuleEngine(disabled_rules=["MISSPELLING_ALOT"])
        issues = engine.detect("He are happy with alot")
        assert [i.rule_id for i in issues] == ["SINGULAR_SUBJECT_PLURAL_VERB"]

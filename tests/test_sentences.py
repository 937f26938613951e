"""
Unit tests for sentence analysis.

Tests cover:
- Sentence splitting and minimum fragment length
- Offset-based issue attribution, including repeated sentences
- Grammar, tone and clarity scores
- Passive voice and complexity
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from grammar_coach.local_engine import LocalRuleEngine
from grammar_coach.models import Complexity, IssueKind, WritingStyle
from grammar_coach.sentences import (
    SentenceAnalyzer,
    clarity_score,
    grammar_score,
    is_passive,
    split_sentences,
    tone_score,
)

# ============================================================================
# Splitting
# ============================================================================


class TestSplitSentences:
    """Tests for split_sentences."""

    def test_short_fragments_dropped(self):
        spans = split_sentences("Hi. This is a longer sentence for testing.")
        assert [s.text for s in spans] == ["This is a longer sentence for testing"]
        assert spans[0].start == 4

    def test_offsets_point_at_trimmed_text(self):
        text = "  First sentence here!   Second sentence here?"
        for start, sentence in split_sentences(text):
            assert text[start:start + len(sentence)] == sentence

    def test_repeated_sentences_keep_positions(self):
        spans = split_sentences("He are late today. He are late today.")
        assert [s.start for s in spans] == [0, 19]

    def test_no_terminal_punctuation(self):
        assert [s.text for s in split_sentences("He are happy and well")] == [
            "He are happy and well"
        ]

    def test_exactly_ten_chars_kept(self):
        assert len(split_sentences("abcdefghij.")) == 1
        assert split_sentences("abcdefghi.") == []

    def test_empty(self):
        assert split_sentences("") == []


# ============================================================================
# Scores
# ============================================================================


class TestScores:
    """Tests for the per-sentence scores."""

    def test_grammar_score_counts_grammar_and_spelling(self, make_issue):
        text = "He are happy with alot"
        issues = [
            make_issue(text, 0, 6, IssueKind.GRAMMAR),
            make_issue(text, 18, 22, IssueKind.SPELLING),
            make_issue(text, 7, 12, IssueKind.STYLE),
        ]
        assert grammar_score(issues) == 50

    def test_grammar_score_floor(self, make_issue):
        text = "He are happy"
        assert grammar_score([make_issue(text, 0, 6)] * 5) == 0

    def test_tone_formal(self):
        assert tone_score("Yeah this stuff is gonna work fine.", WritingStyle.FORMAL) == 10

    @pytest.mark.parametrize(
        "style", [WritingStyle.CASUAL, WritingStyle.ACADEMIC, WritingStyle.CREATIVE]
    )
    def test_tone_other_styles(self, style: WritingStyle):
        assert tone_score("Yeah this stuff is gonna work fine.", style) == 100

    def test_tone_whole_words_only(self):
        assert tone_score("The booking was okay and thorough.", WritingStyle.FORMAL) == 100

    def test_clarity(self):
        assert clarity_score("This means that it will help someone.") == 40

    def test_clarity_whole_words_only(self):
        assert clarity_score("The witness spoke with authority.") == 100

    def test_clarity_floor(self):
        assert clarity_score("this that it they things stuff something someone") == 0

    @pytest.mark.parametrize(
        "sentence,expected",
        [
            ("The report was written by the team.", True),
            ("The cake was baked yesterday.", True),
            ("Mistakes were made.", True),
            ("The team wrote the report.", False),
        ],
    )
    def test_passive(self, sentence: str, expected: bool):
        assert is_passive(sentence) is expected


# ============================================================================
# Analyzer
# ============================================================================


class TestSentenceAnalyzer:
    """Tests for SentenceAnalyzer.analyze."""

    def test_issue_attribution_by_offset(self):
        text = "He are late today. He are late today."
        issues = LocalRuleEngine().detect(text)
        records = SentenceAnalyzer().analyze(text, issues)

        assert len(records) == 2
        assert [len(r.issues) for r in records] == [1, 1]
        assert records[0].issues[0].span.start == 0
        assert records[1].issues[0].span.start == 19
        assert [r.grammar_score for r in records] == [75, 75]

    def test_clean_sentence(self, clean_text: str):
        records = SentenceAnalyzer().analyze(clean_text, [])

        assert len(records) == 1
        record = records[0]
        assert record.grammar_score == 100
        assert record.word_count == 9
        assert record.complexity == Complexity.SIMPLE
        assert not record.is_passive
        assert record.end == record.start + len(record.sentence_text)

    def test_complexity_buckets(self):
        text = " ".join(["word"] * 25) + "."
        record = SentenceAnalyzer().analyze(text, [])[0]
        assert record.complexity == Complexity.COMPLEX

    def test_issue_outside_sentences_ignored(self, make_issue):
        text = "Hi. This is a longer sentence for testing."
        records = SentenceAnalyzer().analyze(text, [make_issue(text, 0, 2)])
        assert records[0].issues == ()

    def test_style_affects_tone_only(self):
        text = "Yeah this stuff is gonna work fine."
        formal = SentenceAnalyzer(WritingStyle.FORMAL).analyze(text, [])[0]
        casual = SentenceAnalyzer(WritingStyle.CASUAL).analyze(text, [])[0]

        assert formal.tone_score == 10
        assert casual.tone_score == 100
        assert formal.clarity_score == casual.clarity_score

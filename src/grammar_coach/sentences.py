"""
Sentence analysis.

Splits text into sentences and scores each one for grammar, tone and
clarity, and flags passive voice. All scores are coarse linear penalties
from 100, not calibrated metrics.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import NamedTuple

from grammar_coach.models import (
    Complexity,
    Issue,
    IssueKind,
    SentenceRecord,
    WritingStyle,
)

MIN_SENTENCE_CHARS = 10

GRAMMAR_PENALTY = 25
TONE_PENALTY = 30
CLARITY_PENALTY = 15

IRREGULAR_PARTICIPLES = (
    "given", "taken", "made", "done", "seen", "heard", "found", "lost",
    "broken", "written", "spoken", "chosen", "driven", "eaten", "forgotten",
    "hidden", "known", "shown", "thrown", "worn",
)

CASUAL_MARKERS = ("gonna", "wanna", "yeah", "ok", "stuff", "things", "guys")

AMBIGUOUS_REFERENTS = ("this", "that", "it", "they", "things", "stuff", "something", "someone")

_SENTENCE_BODY = re.compile(r"[^.!?]+")
_PASSIVE = re.compile(
    r"\b(?:was|were|is|are|am|be|been|being)\s+"
    rf"(?:\w+ed|\w+en|{'|'.join(IRREGULAR_PARTICIPLES)})\b",
    re.IGNORECASE,
)
_CASUAL = re.compile(rf"\b(?:{'|'.join(CASUAL_MARKERS)})\b", re.IGNORECASE)
_AMBIGUOUS = re.compile(rf"\b(?:{'|'.join(AMBIGUOUS_REFERENTS)})\b", re.IGNORECASE)


class SentenceSpan(NamedTuple):
    """A trimmed sentence and where it starts in the document."""
    start: int
    text: str


def split_sentences(text: str) -> list[SentenceSpan]:
    """
    Split on runs of '.', '!' and '?'.

    Fragments with fewer than 10 characters after trimming are not
    sentences and are dropped. Offsets come straight from the split, so
    repeated sentences keep their own positions.
    """
    sentences = []
    for piece in _SENTENCE_BODY.finditer(text):
        raw = piece.group(0)
        trimmed = raw.strip()
        if len(trimmed) < MIN_SENTENCE_CHARS:
            continue
        leading = len(raw) - len(raw.lstrip())
        sentences.append(SentenceSpan(piece.start() + leading, trimmed))
    return sentences


def is_passive(sentence: str) -> bool:
    """A form of 'to be' directly followed by a past participle."""
    return _PASSIVE.search(sentence) is not None


def grammar_score(issues: Sequence[Issue]) -> int:
    errors = sum(1 for i in issues if i.kind in (IssueKind.GRAMMAR, IssueKind.SPELLING))
    return max(0, 100 - GRAMMAR_PENALTY * errors)


def tone_score(sentence: str, style: WritingStyle) -> int:
    # Only formal writing is penalised for casual language
    if style is not WritingStyle.FORMAL:
        return 100
    return max(0, 100 - TONE_PENALTY * len(_CASUAL.findall(sentence)))


def clarity_score(sentence: str) -> int:
    return max(0, 100 - CLARITY_PENALTY * len(_AMBIGUOUS.findall(sentence)))


class SentenceAnalyzer:
    """Builds SentenceRecords from text and the pass's issue set."""

    def __init__(self, style: WritingStyle = WritingStyle.FORMAL):
        self.style = style

    def analyze(self, text: str, issues: Sequence[Issue] = ()) -> list[SentenceRecord]:
        """
        Score every sentence of the text.

        Args:
            text: The text snapshot the issues were detected in
            issues: Issues of the same pass

        Returns:
            One SentenceRecord per sentence, in document order
        """
        records = []
        for start, sentence in split_sentences(text):
            end = start + len(sentence)
            sentence_issues = tuple(i for i in issues if i.span.within(start, end))
            word_count = len(sentence.split())

            records.append(
                SentenceRecord(
                    sentence_text=sentence,
                    start=start,
                    word_count=word_count,
                    complexity=Complexity.from_word_count(word_count),
                    is_passive=is_passive(sentence),
                    grammar_score=grammar_score(sentence_issues),
                    tone_score=tone_score(sentence, self.style),
                    clarity_score=clarity_score(sentence),
                    issues=sentence_issues,
                )
            )
        return records

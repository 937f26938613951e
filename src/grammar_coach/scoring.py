"""
Document-level statistics and overall quality score.

The score is a normalised issue density: one issue per 10 words is the
tolerated baseline, and the score floors at 0.
"""

from collections import Counter
from collections.abc import Sequence

from grammar_coach.models import DocumentStats, Issue, IssueKind
from grammar_coach.sentences import split_sentences

WORDS_PER_TOLERATED_ISSUE = 10


def overall_score(total_issues: int, word_count: int) -> float:
    """``max(0, 100 - (issues / max(words / 10, 1)) * 100)``."""
    baseline = max(word_count / WORDS_PER_TOLERATED_ISSUE, 1)
    return max(0.0, 100 - (total_issues / baseline) * 100)


def summarize(text: str, issues: Sequence[Issue]) -> DocumentStats:
    """
    Compute word, character and sentence counts plus per-kind issue counts.

    Args:
        text: The text snapshot
        issues: Issues of the same pass

    Returns:
        DocumentStats for the text
    """
    words = len(text.split())
    counts = Counter(issue.kind for issue in issues)

    return DocumentStats(
        words=words,
        characters=len(text),
        sentences=len(split_sentences(text)),
        grammar_errors=counts[IssueKind.GRAMMAR],
        spelling_errors=counts[IssueKind.SPELLING],
        style_issues=counts[IssueKind.STYLE],
        tone_issues=counts[IssueKind.TONE],
        passive_voice=counts[IssueKind.PASSIVE],
        clarity_issues=counts[IssueKind.CLARITY],
        punctuation_issues=counts[IssueKind.PUNCTUATION],
        total_errors=counts[IssueKind.GRAMMAR] + counts[IssueKind.SPELLING],
        total_issues=len(issues),
        overall_score=overall_score(len(issues), words) if text else 100.0,
    )

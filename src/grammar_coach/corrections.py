"""
Correction application.

Applying a correction produces new text. It never edits the Issue, and it
invalidates every other Issue of the pass: offsets after the edit have
moved, so the caller must discard the whole issue set and detect again.
"""

import structlog

from grammar_coach.errors import InvalidCorrectionIndexError, StaleIssueError
from grammar_coach.models import Issue

logger = structlog.get_logger()


def apply_correction(text: str, issue: Issue, correction_index: int = 0) -> str:
    """
    Splice one of the issue's corrections into the document text.

    Args:
        text: The document text the issue was detected in
        issue: The issue to fix
        correction_index: Which correction option to use (0 = best)

    Returns:
        The new document text

    Raises:
        InvalidCorrectionIndexError: If the index is out of range.
        StaleIssueError: If the issue does not belong to this text.
    """
    if not 0 <= correction_index < len(issue.corrections):
        raise InvalidCorrectionIndexError(
            f"Issue {issue.id} has {len(issue.corrections)} corrections; "
            f"index {correction_index} is out of range",
            issue_id=issue.id,
            index=correction_index,
        )

    start, end = issue.span.start, issue.span.end
    if end > len(text) or text[start:end] != issue.matched_text:
        raise StaleIssueError(
            f"Issue {issue.id} does not match the current text; re-run detection",
            issue_id=issue.id,
        )

    replacement = issue.corrections[correction_index].replacement_text
    logger.info(
        "correction_applied",
        issue_id=issue.id,
        correction_index=correction_index,
        span_start=start,
        span_end=end,
        length_delta=len(replacement) - (end - start),
    )
    return text[:start] + replacement + text[end:]

"""
Issue detector facade.

Tries the remote LanguageTool checker first and falls back to the local
rule engine when it fails. The two sources are never merged: when the
remote checker answers it is authoritative, and the local rules exist only
as the offline substitute.
"""

from __future__ import annotations

import structlog

from grammar_coach.local_engine import LocalRuleEngine
from grammar_coach.models import DetectionResult, WritingStyle
from grammar_coach.remote import RemoteDetector

logger = structlog.get_logger()

OFFLINE_REASON = "remote checker disabled"


class IssueDetector:
    """Produces the canonical issue set for a text and style."""

    def __init__(
        self,
        remote: RemoteDetector | None = None,
        local: LocalRuleEngine | None = None,
    ):
        """
        Initialize the detector.

        Args:
            remote: Remote checker; None means offline mode
            local: Local rule engine used as fallback
        """
        self.remote = remote
        self.local = local or LocalRuleEngine()

    def detect(self, text: str, style: WritingStyle = WritingStyle.FORMAL) -> DetectionResult:
        """
        Detect issues in a text snapshot.

        Args:
            text: Full current document text
            style: Writing style hint

        Returns:
            DetectionResult bound to ``text``
        """
        if not text.strip():
            return DetectionResult(text=text, source="none")

        if self.remote is not None:
            remote_result = self.remote.detect(text, style)
            if remote_result.ok:
                return DetectionResult(text=text, issues=tuple(remote_result.issues), source="remote")
            fallback_reason = remote_result.error or "remote check failed"
        else:
            fallback_reason = OFFLINE_REASON

        issues = self.local.detect(text)
        logger.info(
            "local_fallback_used",
            reason=fallback_reason,
            issue_count=len(issues),
        )
        return DetectionResult(
            text=text,
            issues=tuple(issues),
            source="local",
            fallback_reason=fallback_reason,
        )

    def close(self) -> None:
        if self.remote is not None:
            self.remote.close()

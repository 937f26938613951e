"""Debounced analysis session for one editable document.

The session owns the document text and a generation counter. Every edit
bumps the generation and restarts a quiescence timer; when the timer fires
a detection pass runs on the text captured at that moment. A pass whose
generation is no longer current when it finishes is thrown away, so a
report is never published for superseded text.

Example:
    session = AnalysisSession(pipeline, debounce_seconds=0.5)
    session.update_text("He are happy")
    report = session.flush()  # or wait for the timer
    session.apply(report.issues[0].id, 0)
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

import structlog

from grammar_coach.corrections import apply_correction
from grammar_coach.errors import StaleIssueError
from grammar_coach.models import AnalysisReport, WritingStyle
from grammar_coach.pipeline import WritingPipeline

logger = structlog.get_logger()

ReportCallback = Callable[[AnalysisReport], None]


class AnalysisSession:
    """Single-writer controller around a WritingPipeline.

    Thread-safe: edits may come from one thread while a pass runs on the
    timer thread.
    """

    def __init__(
        self,
        pipeline: WritingPipeline,
        style: Optional[WritingStyle] = None,
        debounce_seconds: Optional[float] = None,
        on_report: Optional[ReportCallback] = None,
    ) -> None:
        """Initialize the session.

        Args:
            pipeline: Pipeline used for every pass.
            style: Writing style (pipeline default when omitted).
            debounce_seconds: Quiet period before a pass starts
                (default: the pipeline config's session.debounce_seconds).
            on_report: Called with each published report.
        """
        self._pipeline = pipeline
        self._style = style or pipeline.default_style
        self._debounce_seconds = (
            pipeline.config.session.debounce_seconds
            if debounce_seconds is None
            else debounce_seconds
        )
        self._on_report = on_report

        self._text = ""
        self._generation = 0
        self._report: Optional[AnalysisReport] = None
        self._timer: Optional[threading.Timer] = None

        self._lock = threading.Lock()

    @property
    def text(self) -> str:
        with self._lock:
            return self._text

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def style(self) -> WritingStyle:
        with self._lock:
            return self._style

    @property
    def report(self) -> Optional[AnalysisReport]:
        """Latest report for the current text, or None while one is pending."""
        with self._lock:
            return self._report

    def update_text(self, text: str) -> int:
        """Replace the document text and schedule a pass.

        Returns:
            The new generation.
        """
        with self._lock:
            return self._edit_locked(text, self._style)

    def set_style(self, style: WritingStyle) -> int:
        """Change the writing style; counts as an edit."""
        with self._lock:
            return self._edit_locked(self._text, style)

    def flush(self) -> Optional[AnalysisReport]:
        """Cancel the pending timer and run a pass now.

        A timer pass that has already started is not interrupted; whichever
        pass finishes first publishes, and the other returns that report.

        Returns:
            The report for the current text, or None if an edit superseded
            the pass.
        """
        with self._lock:
            self._cancel_timer_locked()
            generation = self._generation
        return self._run_pass(generation)

    def apply(self, issue_id: str, correction_index: int = 0) -> str:
        """Apply a correction from the current report and schedule a new pass.

        Raises:
            StaleIssueError: If there is no current report or the issue is unknown.
            InvalidCorrectionIndexError: If the index is out of range.
        """
        with self._lock:
            report = self._report
            if report is None or report.generation != self._generation:
                raise StaleIssueError(
                    "No analysis for the current text; wait for detection", issue_id=issue_id
                )
            issue = report.detection.get_issue(issue_id)
            if issue is None:
                raise StaleIssueError(f"Unknown issue {issue_id}", issue_id=issue_id)

            new_text = apply_correction(self._text, issue, correction_index)
            self._edit_locked(new_text, self._style)
            return new_text

    def close(self) -> None:
        """Cancel any pending pass."""
        with self._lock:
            self._cancel_timer_locked()

    def _edit_locked(self, text: str, style: WritingStyle) -> int:
        self._text = text
        self._style = style
        self._generation += 1
        # Issues are bound to the old text
        self._report = None
        self._schedule_locked()
        return self._generation

    def _schedule_locked(self) -> None:
        self._cancel_timer_locked()
        timer = threading.Timer(self._debounce_seconds, self._run_pass, args=(self._generation,))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _cancel_timer_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _run_pass(self, generation: int) -> Optional[AnalysisReport]:
        with self._lock:
            if generation != self._generation:
                return None
            # A timer pass and a flush can race; the report is cleared on every edit
            if self._report is not None:
                return self._report
            text, style = self._text, self._style

        report = self._pipeline.run(text, style, generation=generation)

        with self._lock:
            if generation != self._generation:
                logger.info(
                    "stale_pass_discarded",
                    pass_generation=generation,
                    current_generation=self._generation,
                )
                return None
            if self._report is not None:
                logger.debug("duplicate_pass_discarded", generation=generation)
                return self._report
            self._report = report

        if self._on_report is not None:
            self._on_report(report)
        return report

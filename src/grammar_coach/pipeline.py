"""
Analysis Pipeline

Runs one detection pass over a text snapshot.

Processing flow:
1. Issue detection - remote LanguageTool, local rules as fallback
2. Sentence analysis - per-sentence scores from text + issues
3. Scoring - document statistics and overall quality score

Every pass starts from scratch: nothing from a previous pass is reused.
"""

from __future__ import annotations

import time
from pathlib import Path

import structlog

from grammar_coach.config import CoachConfig, normalize_style
from grammar_coach.detector import IssueDetector
from grammar_coach.local_engine import LocalRuleEngine
from grammar_coach.models import AnalysisReport, WritingStyle
from grammar_coach.remote import RemoteDetector, create_transport
from grammar_coach.scoring import summarize
from grammar_coach.sentences import SentenceAnalyzer

logger = structlog.get_logger()


class WritingPipeline:
    """
    Main orchestrator for text analysis.

    The pipeline holds configuration and detectors only; it keeps no
    per-document state, so one instance can serve many documents.
    """

    def __init__(
        self,
        config: CoachConfig | None = None,
        detector: IssueDetector | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Coach configuration
            detector: Pre-built detector (built from config when omitted)
        """
        self.config = config or CoachConfig()
        self.detector = detector or self._build_detector()
        self.default_style = WritingStyle(self.config.analysis.style)

        logger.info(
            "pipeline_initialized",
            remote_enabled=self.detector.remote is not None,
            backend=self.config.remote.backend,
            style=self.default_style.value,
        )

    def _build_detector(self) -> IssueDetector:
        local = LocalRuleEngine(disabled_rules=self.config.analysis.disabled_rules)

        remote: RemoteDetector | None = None
        if self.config.remote.enabled:
            transport = create_transport(
                self.config.remote.backend,
                api_url=self.config.remote.api_url,
                language=self.config.remote.language,
                timeout_seconds=self.config.remote.timeout_seconds,
            )
            remote = RemoteDetector(transport, language=self.config.remote.language)

        return IssueDetector(remote=remote, local=local)

    def run(
        self,
        text: str,
        style: WritingStyle | None = None,
        generation: int = 0,
    ) -> AnalysisReport:
        """
        Run a full detection pass.

        Args:
            text: Full current document text
            style: Writing style (config default when omitted)
            generation: Session generation this pass belongs to

        Returns:
            AnalysisReport with issues, sentences and stats for ``text``
        """
        style = style or self.default_style
        start_time = time.monotonic()

        detection = self.detector.detect(text, style)
        sentences = SentenceAnalyzer(style).analyze(text, detection.issues)
        stats = summarize(text, detection.issues)

        logger.info(
            "detection_complete",
            generation=generation,
            source=detection.source,
            fallback_reason=detection.fallback_reason,
            issue_count=len(detection.issues),
            sentence_count=len(sentences),
            overall_score=round(stats.overall_score, 1),
            duration_seconds=round(time.monotonic() - start_time, 3),
        )

        return AnalysisReport(
            text=text,
            style=style,
            generation=generation,
            detection=detection,
            sentences=tuple(sentences),
            stats=stats,
        )

    def close(self) -> None:
        """Release the remote transport (e.g. a local LanguageTool server)."""
        self.detector.close()


def create_pipeline(
    config_path: str | None = None,
    offline: bool = False,
    style: str | None = None,
) -> WritingPipeline:
    """
    Create a configured pipeline.

    Args:
        config_path: Path to settings.yaml
        offline: Skip the remote checker and use local rules only
        style: Override the configured default style

    Returns:
        Configured WritingPipeline
    """
    config = CoachConfig.from_yaml(Path(config_path) if config_path else None)
    if offline:
        config.remote.enabled = False
    if style:
        config.analysis.style = normalize_style(style)
    return WritingPipeline(config=config)

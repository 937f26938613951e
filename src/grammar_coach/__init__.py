"""Grammar Coach - grammar, spelling and style checking with ranked corrections.

This package detects issues in free text with LanguageTool, falls back to a
deterministic local rule engine when LanguageTool is unreachable, scores
sentences and documents, and applies corrections one at a time.
"""

__version__ = "0.1.0"
__author__ = "Grammar Coach Team"

from grammar_coach.corrections import apply_correction
from grammar_coach.detector import IssueDetector
from grammar_coach.local_engine import LocalRuleEngine
from grammar_coach.models import (
    AnalysisReport,
    CorrectionOption,
    DetectionResult,
    DocumentStats,
    Issue,
    IssueKind,
    SentenceRecord,
    Severity,
    WritingStyle,
)
from grammar_coach.pipeline import WritingPipeline, create_pipeline
from grammar_coach.scoring import summarize
from grammar_coach.sentences import SentenceAnalyzer

__all__ = [
    "__version__",
    "__author__",
    "AnalysisReport",
    "CorrectionOption",
    "DetectionResult",
    "DocumentStats",
    "Issue",
    "IssueDetector",
    "IssueKind",
    "LocalRuleEngine",
    "SentenceAnalyzer",
    "SentenceRecord",
    "Severity",
    "WritingPipeline",
    "WritingStyle",
    "apply_correction",
    "create_pipeline",
    "summarize",
]

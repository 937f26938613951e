"""
Core data models for the grammar coach.

All data structures are defined here to ensure consistent typing
across detection, sentence analysis, and scoring.

Issues are snapshot-bound: their spans are only valid against the exact
text that produced them.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class IssueKind(str, Enum):
    """Category of a detected issue."""
    GRAMMAR = "grammar"
    SPELLING = "spelling"
    STYLE = "style"
    TONE = "tone"
    PASSIVE = "passive"
    CLARITY = "clarity"
    PUNCTUATION = "punctuation"


class Severity(str, Enum):
    """How serious an issue is."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class WritingStyle(str, Enum):
    """Writing style hint used by the remote checker and the tone score."""
    FORMAL = "formal"
    CASUAL = "casual"
    ACADEMIC = "academic"
    BUSINESS = "business"
    CREATIVE = "creative"

    @property
    def is_formal_family(self) -> bool:
        return self in (WritingStyle.FORMAL, WritingStyle.ACADEMIC, WritingStyle.BUSINESS)


class Complexity(str, Enum):
    """Sentence complexity bucket derived from word count."""
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"

    @classmethod
    def from_word_count(cls, word_count: int) -> "Complexity":
        if word_count < 10:
            return cls.SIMPLE
        if word_count < 20:
            return cls.MODERATE
        return cls.COMPLEX


class TextSpan(BaseModel):
    """Half-open character range [start, end) into a text snapshot."""
    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0, description="Inclusive start offset")
    end: int = Field(ge=0, description="Exclusive end offset")

    @model_validator(mode="after")
    def _check_order(self) -> "TextSpan":
        if self.end < self.start:
            raise ValueError(f"span end {self.end} precedes start {self.start}")
        return self

    @property
    def length(self) -> int:
        return self.end - self.start

    def within(self, start: int, end: int) -> bool:
        """Whether this span lies inside [start, end]."""
        return self.start >= start and self.end <= end


class CorrectionOption(BaseModel):
    """One candidate replacement for an issue's matched text."""
    model_config = ConfigDict(frozen=True)

    replacement_text: str = Field(description="Text to substitute for the matched span")
    rationale: str = Field(default="", description="Short explanation")
    confidence: int = Field(
        ge=0,
        le=100,
        description="Ranking hint; not calibrated across sources",
    )


class Issue(BaseModel):
    """A detected problem in a span of text."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique within one detection pass")
    kind: IssueKind
    span: TextSpan
    matched_text: str = Field(description="text[span.start:span.end] at detection time")
    severity: Severity
    explanation: str = Field(description="Human-readable rationale")
    corrections: tuple[CorrectionOption, ...] = Field(
        default=(),
        description="Correction candidates, best first",
    )
    rule_id: str = Field(default="", description="Local rule id or remote rule id")
    source: str = Field(default="local", description="'local' or 'remote'")

    @property
    def best_correction(self) -> CorrectionOption | None:
        return self.corrections[0] if self.corrections else None


class SentenceRecord(BaseModel):
    """Per-sentence structural scores, recomputed on every pass."""
    model_config = ConfigDict(frozen=True)

    sentence_text: str
    start: int = Field(ge=0, description="Offset of the trimmed sentence in the document")
    word_count: int = Field(ge=0)
    complexity: Complexity
    is_passive: bool
    grammar_score: int = Field(ge=0, le=100)
    tone_score: int = Field(ge=0, le=100)
    clarity_score: int = Field(ge=0, le=100)
    issues: tuple[Issue, ...] = Field(default=())

    @property
    def end(self) -> int:
        return self.start + len(self.sentence_text)


class DocumentStats(BaseModel):
    """Document-level statistics and overall quality score."""
    model_config = ConfigDict(frozen=True)

    words: int = 0
    characters: int = 0
    sentences: int = 0

    grammar_errors: int = 0
    spelling_errors: int = 0
    style_issues: int = 0
    tone_issues: int = 0
    passive_voice: int = 0
    clarity_issues: int = 0
    punctuation_issues: int = 0

    total_errors: int = Field(default=0, description="Grammar plus spelling")
    total_issues: int = 0
    overall_score: float = Field(default=100.0, ge=0.0, le=100.0)


class DetectionResult(BaseModel):
    """The canonical issue set for one text snapshot."""
    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Snapshot the issues are bound to")
    issues: tuple[Issue, ...] = Field(default=())
    source: str = Field(default="none", description="'remote', 'local' or 'none'")
    fallback_reason: str | None = Field(
        default=None,
        description="Why the remote checker was not used, if it failed",
    )

    @property
    def used_fallback(self) -> bool:
        return self.fallback_reason is not None

    def get_issue(self, issue_id: str) -> Issue | None:
        for issue in self.issues:
            if issue.id == issue_id:
                return issue
        return None


class AnalysisReport(BaseModel):
    """Everything one detection pass produces."""
    model_config = ConfigDict(frozen=True)

    text: str
    style: WritingStyle
    generation: int = 0
    detection: DetectionResult
    sentences: tuple[SentenceRecord, ...] = Field(default=())
    stats: DocumentStats

    @property
    def issues(self) -> tuple[Issue, ...]:
        return self.detection.issues

"""
Shared pytest fixtures for grammar_coach tests.

This module provides common fixtures used across test modules including:
- Sample text fixtures
- Fake and failing remote transports
- Offline pipeline fixtures
- Issue factory for hand-built issues
"""

import sys
from pathlib import Path
from typing import Any, Callable, List

import pytest
import structlog

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from grammar_coach.config import CoachConfig
from grammar_coach.errors import TransportError
from grammar_coach.local_engine import LocalRuleEngine
from grammar_coach.models import CorrectionOption, Issue, IssueKind, Severity, TextSpan
from grammar_coach.pipeline import WritingPipeline

# ============================================================================
# Logging
# ============================================================================


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo the CLI's structlog setup, which binds the runner's stderr."""
    yield
    structlog.reset_defaults()


# ============================================================================
# Text Fixtures
# ============================================================================


@pytest.fixture
def example_text() -> str:
    """Sentence with three local-rule issues."""
    return "She don't likes to go outside when it's rain."


@pytest.fixture
def clean_text() -> str:
    """Text with nothing for the local rules to flag."""
    return "The committee reviewed the proposal and approved the budget."


# ============================================================================
# Transport Fixtures
# ============================================================================


class FakeTransport:
    """Transport returning canned LanguageTool matches and recording calls."""

    def __init__(self, matches: List[dict[str, Any]] | None = None) -> None:
        self.matches = matches or []
        self.calls: List[tuple[str, str, tuple[str, ...]]] = []
        self.closed = False

    def check(
        self, text: str, language: str, enabled_categories: tuple[str, ...]
    ) -> List[dict[str, Any]]:
        self.calls.append((text, language, enabled_categories))
        return self.matches

    def close(self) -> None:
        self.closed = True


class FailingTransport:
    """Transport that always fails like an unreachable service."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or TransportError("LanguageTool API error: 500", status_code=500)
        self.calls = 0

    def check(
        self, text: str, language: str, enabled_categories: tuple[str, ...]
    ) -> List[dict[str, Any]]:
        self.calls += 1
        raise self.error

    def close(self) -> None:
        pass


def lt_match(
    offset: int,
    length: int,
    category: str = "GRAMMAR",
    replacements: List[str] | None = None,
    message: str = "Possible grammar error",
    rule_id: str = "TEST_RULE",
) -> dict[str, Any]:
    """Build one match in the LanguageTool v2 response shape."""
    return {
        "offset": offset,
        "length": length,
        "message": message,
        "replacements": [{"value": r} for r in (replacements or [])],
        "rule": {"id": rule_id, "category": {"id": category}},
    }


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def failing_transport() -> FailingTransport:
    return FailingTransport()


# ============================================================================
# Engine / Pipeline Fixtures
# ============================================================================


@pytest.fixture
def local_engine() -> LocalRuleEngine:
    return LocalRuleEngine()


@pytest.fixture
def offline_config() -> CoachConfig:
    config = CoachConfig()
    config.remote.enabled = False
    return config


@pytest.fixture
def offline_pipeline(offline_config: CoachConfig) -> WritingPipeline:
    """Pipeline that only uses the local rules."""
    return WritingPipeline(config=offline_config)


# ============================================================================
# Issue Factory
# ============================================================================


@pytest.fixture
def make_issue() -> Callable[..., Issue]:
    """Factory for hand-built issues against a given text."""

    def _make(
        text: str,
        start: int,
        end: int,
        kind: IssueKind = IssueKind.GRAMMAR,
        replacements: List[str] | None = None,
        issue_id: str = "test-issue-0",
    ) -> Issue:
        return Issue(
            id=issue_id,
            kind=kind,
            span=TextSpan(start=start, end=end),
            matched_text=text[start:end],
            severity=Severity.HIGH,
            explanation="Test issue",
            corrections=tuple(
                CorrectionOption(replacement_text=r, rationale="test", confidence=90)
                for r in (replacements or [])
            ),
        )

    return _make

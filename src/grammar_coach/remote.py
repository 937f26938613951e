"""
Remote grammar checking through LanguageTool.

Two transports reach the same service:

- HttpTransport posts to a LanguageTool HTTP API (public or self-hosted).
- LanguageToolServerTransport drives a local LanguageTool Java server via
  language_tool_python.

Both return raw matches in the LanguageTool v2 JSON shape. RemoteDetector
maps them into Issues. Any failure is logged and reported as a flag on the
result; nothing is raised to the caller.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

import language_tool_python
import requests
import structlog
from language_tool_python.utils import LanguageToolError

from grammar_coach.errors import MalformedResponseError, TransportError
from grammar_coach.models import (
    CorrectionOption,
    Issue,
    IssueKind,
    Severity,
    TextSpan,
    WritingStyle,
)

logger = structlog.get_logger()

# LanguageTool category id -> (kind, severity)
CATEGORY_MAPPING: dict[str, tuple[IssueKind, Severity]] = {
    "TYPOS": (IssueKind.SPELLING, Severity.HIGH),
    "GRAMMAR": (IssueKind.GRAMMAR, Severity.HIGH),
    "STYLE": (IssueKind.STYLE, Severity.MEDIUM),
    "PUNCTUATION": (IssueKind.PUNCTUATION, Severity.MEDIUM),
}
DEFAULT_MAPPING = (IssueKind.GRAMMAR, Severity.MEDIUM)

FORMAL_CATEGORIES = ("STYLE", "GRAMMAR", "TYPOS", "PUNCTUATION")
BASIC_CATEGORIES = ("GRAMMAR", "TYPOS")

# LanguageTool gives no confidence, so every suggestion gets the same one
REMOTE_CONFIDENCE = 95
MAX_REPLACEMENTS = 3


def enabled_categories_for(style: WritingStyle) -> tuple[str, ...]:
    """Rule categories to enable upstream for a writing style."""
    return FORMAL_CATEGORIES if style.is_formal_family else BASIC_CATEGORIES


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def utf16_to_code_points(text: str, matches: list[Any]) -> list[Any]:
    """
    Rewrite match offsets from UTF-16 code units to Python string indices.

    The LanguageTool server is a Java service and counts characters outside
    the Basic Multilingual Plane (emoji, some CJK) as two units. Offsets that
    land inside such a character round up to the next index. Matches with
    missing or negative offsets are passed through for validation.
    """
    if all(ord(char) <= 0xFFFF for char in text):
        return matches

    # unit_starts[i] is the UTF-16 offset of text[i]; the last entry is the total
    unit_starts = [0]
    for char in text:
        unit_starts.append(unit_starts[-1] + (2 if ord(char) > 0xFFFF else 1))

    converted = []
    for match in matches:
        if isinstance(match, dict) and _is_count(match.get("offset")) and _is_count(
            match.get("length")
        ):
            start = bisect.bisect_left(unit_starts, match["offset"])
            end = bisect.bisect_left(unit_starts, match["offset"] + match["length"])
            match = {**match, "offset": start, "length": end - start}
        converted.append(match)
    return converted


class GrammarTransport(Protocol):
    """The black-box remote capability: text in, raw matches out, or raise.

    Matches use the LanguageTool v2 shape, with ``offset`` and ``length``
    already converted to Python string indices.
    """

    def check(
        self, text: str, language: str, enabled_categories: tuple[str, ...]
    ) -> list[dict[str, Any]]:
        ...

    def close(self) -> None:
        ...


class HttpTransport:
    """Posts form-encoded requests to a LanguageTool ``/v2/check`` endpoint."""

    def __init__(
        self,
        api_url: str = "https://api.languagetool.org",
        timeout_seconds: float = 10.0,
    ):
        self.api_url = api_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    @property
    def check_url(self) -> str:
        return f"{self.api_url}/v2/check"

    def check(
        self, text: str, language: str, enabled_categories: tuple[str, ...]
    ) -> list[dict[str, Any]]:
        """
        Send one check request.

        Raises:
            TransportError: On network failure, timeout or non-2xx status.
            MalformedResponseError: If the body is not the expected JSON.
        """
        params = {
            "text": text,
            "language": language,
            "enabledCategories": ",".join(enabled_categories),
            "enabledOnly": "true",
        }

        try:
            response = requests.post(
                self.check_url,
                data=params,
                headers={"Accept": "application/json"},
                timeout=self.timeout_seconds,
            )
        except requests.Timeout as e:
            raise TransportError(
                f"LanguageTool API timed out after {self.timeout_seconds}s"
            ) from e
        except requests.RequestException as e:
            raise TransportError(f"LanguageTool API unreachable: {e}") from e

        if not response.ok:
            raise TransportError(
                f"LanguageTool API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponseError(
                "LanguageTool API returned invalid JSON",
                payload_excerpt=response.text[:200],
            ) from e

        matches = payload.get("matches") if isinstance(payload, dict) else None
        if not isinstance(matches, list):
            raise MalformedResponseError(
                "LanguageTool API response has no 'matches' list",
                payload_excerpt=str(payload)[:200],
            )
        return utf16_to_code_points(text, matches)

    def close(self) -> None:
        pass


class LanguageToolServerTransport:
    """
    Runs checks against a local LanguageTool Java server.

    The server is started lazily on first use; startup takes 10-30 seconds.
    """

    def __init__(self, language: str = "en-US"):
        self.language = language
        self._tool: language_tool_python.LanguageTool | None = None

    @property
    def tool(self) -> language_tool_python.LanguageTool:
        """Lazy initialization of LanguageTool."""
        if self._tool is None:
            logger.info("starting_language_tool_server", language=self.language)
            try:
                self._tool = language_tool_python.LanguageTool(self.language)
            except (LanguageToolError, OSError) as e:
                raise TransportError(f"LanguageTool server failed to start: {e}") from e
        return self._tool

    def check(
        self, text: str, language: str, enabled_categories: tuple[str, ...]
    ) -> list[dict[str, Any]]:
        tool = self.tool
        tool.enabled_categories = set(enabled_categories)
        tool.enabled_rules_only = True

        try:
            matches = tool.check(text)
        except (LanguageToolError, OSError) as e:
            raise TransportError(f"LanguageTool server error: {e}") from e

        return [
            {
                "offset": match.offset,
                "length": match.errorLength,
                "message": match.message,
                "replacements": [{"value": value} for value in match.replacements],
                "rule": {"id": match.ruleId, "category": {"id": match.category}},
            }
            for match in matches
        ]

    def close(self) -> None:
        """Shut down the LanguageTool server."""
        if self._tool is not None:
            self._tool.close()
            self._tool = None
            logger.debug("language_tool_closed")


@dataclass
class RemoteDetection:
    """Outcome of one remote check.

    ``ok`` is False when the transport failed; ``error`` then says why.
    ``skipped`` is True when empty input was short-circuited.
    """

    issues: list[Issue] = field(default_factory=list)
    ok: bool = True
    error: Optional[str] = None
    skipped: bool = False


def _category_of(match: dict[str, Any]) -> str:
    if "ruleCategoryId" in match:
        return str(match["ruleCategoryId"])
    rule = match.get("rule")
    if isinstance(rule, dict):
        category = rule.get("category")
        if isinstance(category, dict):
            return str(category.get("id", ""))
    return ""


def _rule_id_of(match: dict[str, Any]) -> str:
    rule = match.get("rule")
    if isinstance(rule, dict):
        return str(rule.get("id", ""))
    return ""


class RemoteDetector:
    """Maps LanguageTool matches into Issues for a given text snapshot."""

    def __init__(self, transport: GrammarTransport, language: str = "en-US"):
        """
        Initialize the detector.

        Args:
            transport: How to reach LanguageTool
            language: Language code (e.g., "en-US", "en-GB")
        """
        self.transport = transport
        self.language = language

    def detect(self, text: str, style: WritingStyle = WritingStyle.FORMAL) -> RemoteDetection:
        """
        Check text remotely.

        Args:
            text: The text snapshot to check
            style: Writing style hint selecting the enabled rule categories

        Returns:
            RemoteDetection; on failure ``ok`` is False and issues is empty
        """
        if not text.strip():
            return RemoteDetection(skipped=True)

        categories = enabled_categories_for(style)
        logger.debug(
            "remote_check_started",
            text_length=len(text),
            language=self.language,
            categories=list(categories),
        )

        try:
            raw_matches = self.transport.check(text, self.language, categories)
            issues = self.map_matches(text, raw_matches)
        except TransportError as e:
            logger.warning(
                "remote_check_failed",
                error=str(e),
                error_type=type(e).__name__,
                status_code=e.status_code,
            )
            return RemoteDetection(ok=False, error=str(e))
        except Exception as e:
            logger.error("remote_check_crashed", error=str(e), error_type=type(e).__name__)
            return RemoteDetection(ok=False, error=f"{type(e).__name__}: {e}")

        logger.info("remote_check_complete", issue_count=len(issues))
        return RemoteDetection(issues=issues)

    def map_matches(self, text: str, raw_matches: list[Any]) -> list[Issue]:
        """
        Convert raw LanguageTool matches into Issues.

        Raises:
            MalformedResponseError: If any match has an unusable shape.
        """
        issues = []
        for index, match in enumerate(raw_matches):
            if not isinstance(match, dict):
                raise MalformedResponseError(f"match {index} is not an object")

            offset = match.get("offset")
            length = match.get("length")
            if (
                not isinstance(offset, int)
                or not isinstance(length, int)
                or isinstance(offset, bool)
                or isinstance(length, bool)
                or offset < 0
                or length < 0
                or offset + length > len(text)
            ):
                raise MalformedResponseError(
                    f"match {index} has invalid offset/length ({offset!r}, {length!r})"
                )

            kind, severity = CATEGORY_MAPPING.get(_category_of(match), DEFAULT_MAPPING)
            issues.append(
                Issue(
                    id=f"remote-issue-{index}",
                    kind=kind,
                    span=TextSpan(start=offset, end=offset + length),
                    matched_text=text[offset : offset + length],
                    severity=severity,
                    explanation=match.get("message") or "Grammar or style issue detected",
                    corrections=self._corrections(match),
                    rule_id=_rule_id_of(match),
                    source="remote",
                )
            )
        return issues

    @staticmethod
    def _corrections(match: dict[str, Any]) -> tuple[CorrectionOption, ...]:
        replacements = match.get("replacements") or []
        if not isinstance(replacements, list):
            raise MalformedResponseError("'replacements' is not a list")

        options = []
        for replacement in replacements[:MAX_REPLACEMENTS]:
            value = replacement.get("value") if isinstance(replacement, dict) else None
            if not isinstance(value, str):
                raise MalformedResponseError("replacement without a string 'value'")
            options.append(
                CorrectionOption(
                    replacement_text=value,
                    rationale="Suggested replacement",
                    confidence=REMOTE_CONFIDENCE,
                )
            )
        return tuple(options)

    def close(self) -> None:
        self.transport.close()


def create_transport(
    backend: str,
    api_url: str = "https://api.languagetool.org",
    language: str = "en-US",
    timeout_seconds: float = 10.0,
) -> GrammarTransport:
    """Build the transport named by ``backend``."""
    if backend == "http":
        return HttpTransport(api_url=api_url, timeout_seconds=timeout_seconds)
    if backend == "language_tool_server":
        return LanguageToolServerTransport(language=language)
    raise ValueError(f"Unknown remote backend: {backend!r}")

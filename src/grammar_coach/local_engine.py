"""
Local rule engine.

Applies the rule catalog to raw text. This is a pure function of the
text: no network, no shared state, same input gives the same issues.
It is the offline substitute for the remote grammar service.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from re import Match

import structlog

from grammar_coach.models import Issue, TextSpan
from grammar_coach.rules import DEFAULT_RULES, Rule

logger = structlog.get_logger()


def iter_matches(rule: Rule, text: str) -> Iterator[Match[str]]:
    """Yield every match of ``rule`` in ``text``, left to right.

    A zero-width match moves the scan position forward by one character,
    so the scan always terminates.
    """
    pos = 0
    while pos <= len(text):
        match = rule.pattern.search(text, pos)
        if match is None:
            return
        yield match
        pos = match.end() if match.end() > match.start() else match.start() + 1


class LocalRuleEngine:
    """
    Deterministic rule-based issue detector.

    Issues come out in rule order, then match order within each rule.
    Overlapping matches from different rules are all kept.
    """

    def __init__(
        self,
        rules: Sequence[Rule] = DEFAULT_RULES,
        disabled_rules: list[str] | None = None,
    ):
        """
        Initialize the engine.

        Args:
            rules: Ordered rule catalog
            disabled_rules: Rule ids to skip
        """
        self.disabled_rules = set(disabled_rules or [])
        self.rules = tuple(r for r in rules if r.rule_id not in self.disabled_rules)

        if self.disabled_rules:
            logger.info("local_rules_disabled", rules=sorted(self.disabled_rules))

    def detect(self, text: str) -> list[Issue]:
        """
        Run every enabled rule over the text.

        Args:
            text: The text snapshot to check

        Returns:
            List of Issue objects bound to ``text``
        """
        if not text.strip():
            return []

        issues: list[Issue] = []

        for rule in self.rules:
            for match in iter_matches(rule, text):
                matched_text = match.group(0)
                issues.append(
                    Issue(
                        id=f"local-issue-{len(issues)}",
                        kind=rule.kind,
                        span=TextSpan(start=match.start(), end=match.end()),
                        matched_text=matched_text,
                        severity=rule.severity,
                        explanation=rule.explanation,
                        corrections=tuple(rule.suggest(matched_text)),
                        rule_id=rule.rule_id,
                        source="local",
                    )
                )

        logger.debug("local_detection_complete", issue_count=len(issues), text_length=len(text))
        return issues

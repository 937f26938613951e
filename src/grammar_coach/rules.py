"""
Local rule catalog.

Each rule is plain data: a compiled pattern, an issue kind and severity,
an explanation, and a pure function that turns the literal matched text
into ranked correction options. The engine treats every rule the same way,
so rules can be tested one at a time.

Patterns are case-insensitive. The capitalised-name subject alternative is
matched case-sensitively so that ordinary lowercase words are not taken
for subjects. Capitalised words ending in 's' are read as plurals.
"""

import re
from dataclasses import dataclass
from re import Pattern
from typing import Callable

from grammar_coach.models import CorrectionOption, IssueKind, Severity

SuggestFn = Callable[[str], list[CorrectionOption]]


@dataclass(frozen=True)
class Rule:
    """A declarative pattern rule."""

    rule_id: str
    pattern: Pattern[str]
    kind: IssueKind
    severity: Severity
    explanation: str
    suggest: SuggestFn


# ============================================================================
# Word tables
# ============================================================================

# Base verbs that are wrong after "is/are/... not" without -ing
BASE_VERBS = (
    "work", "go", "come", "run", "play", "study", "learn", "eat", "sleep",
    "think", "write", "read", "speak", "listen", "watch", "look", "see",
    "hear", "feel", "know", "understand", "believe", "remember", "forget",
    "help", "try", "start", "stop", "finish", "begin", "end", "continue",
    "practice", "exercise", "dance", "sing", "cook", "clean", "wash",
    "drive", "walk", "talk", "laugh", "cry", "smile", "jump", "sit",
    "stand", "lie", "rest", "relax", "travel", "visit", "move", "live",
    "stay", "leave", "arrive", "return", "wait", "search", "find", "lose",
    "win", "fail", "succeed", "improve", "change", "grow", "develop",
    "create", "build", "make", "produce", "design", "plan", "organize",
    "manage", "teach", "explain", "describe", "discuss", "argue", "agree",
    "decide", "choose", "buy", "sell", "pay", "spend", "save", "earn",
    "give", "take", "receive", "send", "deliver", "carry", "bring",
    "open", "close", "fix", "repair", "install", "remove", "add", "count",
    "compare", "analyze", "explore", "discover", "imagine", "plan",
    "ask", "answer", "meet", "share", "use", "do", "get", "swim", "fly",
)

# Irregular or spelling-sensitive progressive forms
PROGRESSIVE_FORMS = {
    "run": "running",
    "sit": "sitting",
    "swim": "swimming",
    "begin": "beginning",
    "forget": "forgetting",
    "stop": "stopping",
    "plan": "planning",
    "win": "winning",
    "get": "getting",
    "lie": "lying",
    "die": "dying",
    "see": "seeing",
    "agree": "agreeing",
    "travel": "traveling",
}

THIRD_PERSON_VERBS = {
    "likes": "like",
    "goes": "go",
    "does": "do",
    "has": "have",
    "says": "say",
    "thinks": "think",
    "wants": "want",
    "needs": "need",
    "makes": "make",
    "takes": "take",
    "gives": "give",
    "gets": "get",
    "comes": "come",
    "runs": "run",
    "walks": "walk",
    "talks": "talk",
    "works": "work",
    "plays": "play",
    "lives": "live",
    "loves": "love",
    "hates": "hate",
    "knows": "know",
    "sees": "see",
    "hears": "hear",
    "feels": "feel",
    "looks": "look",
    "seems": "seem",
    "appears": "appear",
}

# Capitalised words that look like a name but are not singular subjects
NON_SINGULAR_SUBJECTS = (
    "i", "you", "we", "they", "these", "those", "there", "here", "both",
    "many", "some", "all", "people", "what", "who", "where", "how", "why",
    "when", "which", "few", "several", "others", "if", "most", "more",
    "none", "half", "such",
    # irregular and collective plurals
    "children", "men", "women", "police", "data", "media",
    "cattle", "feet", "teeth", "mice", "geese", "criteria", "phenomena",
)

# misspelling -> (correction, explanation, alternatives)
MISSPELLINGS: dict[str, tuple[str, str, tuple[str, ...]]] = {
    "alot": ("a lot", "Spelling error: 'A lot' should be written as two words", ("many",)),
    "recieve": ("receive", "Spelling error: Remember 'i before e except after c'", ()),
    "definately": ("definitely", "Spelling error: 'definitely' contains 'finite'", ()),
    "seperate": ("separate", "Spelling error: there is 'a rat' in 'separate'", ()),
    "occured": ("occurred", "Spelling error: 'occurred' doubles the 'r'", ()),
    "untill": ("until", "Spelling error: 'until' has a single 'l'", ()),
    "wich": ("which", "Spelling error: 'which' is spelled with 'wh'", ()),
    "teh": ("the", "Spelling error: transposed letters", ()),
    "accomodate": ("accommodate", "Spelling error: 'accommodate' doubles both 'c' and 'm'", ()),
    "acheive": ("achieve", "Spelling error: 'i' comes before 'e' in 'achieve'", ()),
    "beleive": ("believe", "Spelling error: 'i' comes before 'e' in 'believe'", ()),
    "goverment": ("government", "Spelling error: 'government' keeps the 'n'", ()),
    "neccessary": ("necessary", "Spelling error: 'necessary' has one 'c' and two 's'", ()),
    "tommorow": ("tomorrow", "Spelling error: 'tomorrow' has one 'm' and two 'r'", ()),
}


# ============================================================================
# Helpers
# ============================================================================


def match_case(original: str, replacement: str) -> str:
    """Copy the capitalisation style of ``original`` onto ``replacement``."""
    if len(original) > 1 and original.isupper():
        return replacement.upper()
    if original[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def progressive_form(verb: str) -> str:
    """Return the -ing form of a base verb.

    Known verbs come from a lookup table; unknown verbs drop a silent
    final 'e' and take '-ing'.
    """
    lower = verb.lower()
    if lower in PROGRESSIVE_FORMS:
        return PROGRESSIVE_FORMS[lower]
    if lower.endswith("ie"):
        return lower[:-2] + "ying"
    if lower.endswith("e") and not lower.endswith(("ee", "ye", "oe")) and len(lower) > 2:
        return lower[:-1] + "ing"
    return lower + "ing"


def base_form(verb: str) -> str:
    """Strip third-person -s from a verb."""
    lower = verb.lower()
    if lower in THIRD_PERSON_VERBS:
        return THIRD_PERSON_VERBS[lower]
    return re.sub(r"s$", "", lower)


def _words(words: tuple[str, ...] | list[str]) -> str:
    # Longest first so alternation never stops at a shorter prefix
    return "|".join(sorted(set(words), key=len, reverse=True))


_APOS = "['’]"
_SINGULAR_SUBJECT = (
    r"(?P<subject>he|she|it|"
    rf"(?!(?:{_words(NON_SINGULAR_SUBJECTS)})\b)(?-i:[A-Z][a-z]*[a-rt-z]))"
)


def _compile(pattern: str) -> Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


# ============================================================================
# Suggestion functions
# ============================================================================


_BE_NOT_VERB = _compile(
    rf"\b(?P<be>is|are|am|was|were)\s+not\s+(?P<verb>{_words(BASE_VERBS)})\b"
)


def suggest_progressive(matched: str) -> list[CorrectionOption]:
    m = _BE_NOT_VERB.fullmatch(matched)
    if m is None:
        return []
    verb = m.group("verb")
    replacement = matched[: m.start("verb")] + match_case(verb, progressive_form(verb))
    return [
        CorrectionOption(
            replacement_text=replacement,
            rationale="Use progressive form (-ing) after 'be' verbs",
            confidence=100,
        )
    ]


_SUBJECT_BE = _compile(rf"\b{_SINGULAR_SUBJECT}\s+(?P<verb>are|were)\b")
_PLURAL_BE = _compile(r"\b(?P<subject>they|we|you)\s+(?P<verb>is|was)\b")

_SINGULAR_OF = {"are": "is", "were": "was"}
_PLURAL_OF = {"is": "are", "was": "were"}
_OTHER_TENSE = {"is": "was", "was": "is", "are": "were", "were": "are"}


def _swap_verb(
    pattern: Pattern[str],
    table: dict[str, str],
    matched: str,
    rationale: str,
    alt_rationale: str,
) -> list[CorrectionOption]:
    m = pattern.fullmatch(matched)
    if m is None:
        return []
    verb = m.group("verb")
    prefix = matched[: m.start("verb")]
    fixed = table[verb.lower()]
    alternative = _OTHER_TENSE[fixed]
    return [
        CorrectionOption(
            replacement_text=prefix + match_case(verb, fixed),
            rationale=rationale,
            confidence=100,
        ),
        CorrectionOption(
            replacement_text=prefix + match_case(verb, alternative),
            rationale=alt_rationale,
            confidence=95,
        ),
    ]


def suggest_singular_verb(matched: str) -> list[CorrectionOption]:
    return _swap_verb(
        _SUBJECT_BE,
        _SINGULAR_OF,
        matched,
        "Singular subject requires a singular verb",
        "Other tense, singular form",
    )


def suggest_plural_verb(matched: str) -> list[CorrectionOption]:
    return _swap_verb(
        _PLURAL_BE,
        _PLURAL_OF,
        matched,
        "Plural subject requires a plural verb",
        "Other tense, plural form",
    )


_SUBJECT_DONT = _compile(rf"\b{_SINGULAR_SUBJECT}\s+(?P<verb>don{_APOS}t)\b")


def suggest_doesnt(matched: str) -> list[CorrectionOption]:
    m = _SUBJECT_DONT.fullmatch(matched)
    if m is None:
        return []
    prefix = matched[: m.start("verb")]
    apostrophe = m.group("verb")[3]
    return [
        CorrectionOption(
            replacement_text=prefix + f"doesn{apostrophe}t",
            rationale="Third person singular uses 'doesn't'",
            confidence=100,
        ),
        CorrectionOption(
            replacement_text=prefix + "does not",
            rationale="Formal alternative",
            confidence=95,
        ),
    ]


_DO_NOT_VERB_S = _compile(
    rf"\b(?P<aux>doesn{_APOS}t|don{_APOS}t)\s+(?P<verb>{_words(list(THIRD_PERSON_VERBS))})\b"
)


def suggest_base_form(matched: str) -> list[CorrectionOption]:
    m = _DO_NOT_VERB_S.fullmatch(matched)
    if m is None:
        return []
    verb = m.group("verb")
    replacement = matched[: m.start("verb")] + match_case(verb, base_form(verb))
    return [
        CorrectionOption(
            replacement_text=replacement,
            rationale="Use base form after 'doesn't/don't'",
            confidence=100,
        )
    ]


_WEATHER = _compile(rf"\bit{_APOS}s\s+(?P<noun>rain|snow|sun)\b")

_WEATHER_FORMS = {
    "rain": (("raining", "Use progressive form for weather"), ("rainy", "Adjective form")),
    "snow": (("snowing", "Use progressive form for weather"), ("snowy", "Adjective form")),
    "sun": (("sunny", "Use adjective form"),),
}


def suggest_weather(matched: str) -> list[CorrectionOption]:
    m = _WEATHER.fullmatch(matched)
    if m is None:
        return []
    prefix = matched[: m.start("noun")]
    noun = m.group("noun")
    options = []
    for rank, (form, rationale) in enumerate(_WEATHER_FORMS[noun.lower()]):
        options.append(
            CorrectionOption(
                replacement_text=prefix + match_case(noun, form),
                rationale=rationale,
                confidence=100 if rank == 0 else 80,
            )
        )
    return options


def _misspelling_suggester(correct: str, alternatives: tuple[str, ...]) -> SuggestFn:
    def suggest(matched: str) -> list[CorrectionOption]:
        options = [
            CorrectionOption(
                replacement_text=match_case(matched, correct),
                rationale="Correct spelling",
                confidence=100,
            )
        ]
        for alternative in alternatives:
            options.append(
                CorrectionOption(
                    replacement_text=match_case(matched, alternative),
                    rationale="More concise alternative",
                    confidence=80,
                )
            )
        return options

    return suggest


# ============================================================================
# Catalog
# ============================================================================


def _misspelling_rules() -> list[Rule]:
    rules = []
    for wrong, (correct, explanation, alternatives) in MISSPELLINGS.items():
        rules.append(
            Rule(
                rule_id=f"MISSPELLING_{wrong.upper()}",
                pattern=_compile(rf"\b{wrong}\b"),
                kind=IssueKind.SPELLING,
                severity=Severity.HIGH,
                explanation=explanation,
                suggest=_misspelling_suggester(correct, alternatives),
            )
        )
    return rules


DEFAULT_RULES: tuple[Rule, ...] = (
    Rule(
        rule_id="BE_NOT_BASE_VERB",
        pattern=_BE_NOT_VERB,
        kind=IssueKind.GRAMMAR,
        severity=Severity.HIGH,
        explanation=(
            "Verb form error: After 'be' verbs (is/are/am/was/were), "
            "use the progressive form (-ing) of the verb"
        ),
        suggest=suggest_progressive,
    ),
    Rule(
        rule_id="SINGULAR_SUBJECT_PLURAL_VERB",
        pattern=_SUBJECT_BE,
        kind=IssueKind.GRAMMAR,
        severity=Severity.HIGH,
        explanation="Subject-verb disagreement: Singular subjects (he/she/it) require singular verbs",
        suggest=suggest_singular_verb,
    ),
    Rule(
        rule_id="PLURAL_SUBJECT_SINGULAR_VERB",
        pattern=_PLURAL_BE,
        kind=IssueKind.GRAMMAR,
        severity=Severity.HIGH,
        explanation="Subject-verb disagreement: Plural subjects require plural verbs",
        suggest=suggest_plural_verb,
    ),
    Rule(
        rule_id="THIRD_PERSON_DONT",
        pattern=_SUBJECT_DONT,
        kind=IssueKind.GRAMMAR,
        severity=Severity.HIGH,
        explanation=(
            "Subject-verb disagreement: Third person singular requires 'doesn't', not 'don't'"
        ),
        suggest=suggest_doesnt,
    ),
    Rule(
        rule_id="BASE_FORM_AFTER_DO_NOT",
        pattern=_DO_NOT_VERB_S,
        kind=IssueKind.GRAMMAR,
        severity=Severity.HIGH,
        explanation=(
            "Verb form error: After 'doesn't' or 'don't', "
            "use the base form of the verb (without -s)"
        ),
        suggest=suggest_base_form,
    ),
    Rule(
        rule_id="WEATHER_PROGRESSIVE",
        pattern=_WEATHER,
        kind=IssueKind.GRAMMAR,
        severity=Severity.HIGH,
        explanation=(
            "Weather expression error: Use progressive form (raining) "
            "or adjective (sunny) for weather"
        ),
        suggest=suggest_weather,
    ),
    *_misspelling_rules(),
)


def get_rule(rule_id: str, rules: tuple[Rule, ...] = DEFAULT_RULES) -> Rule | None:
    """Find a rule by id."""
    for rule in rules:
        if rule.rule_id == rule_id:
            return rule
    return None

"""Rule-based grammar and spelling corrections."""

import re
from collections.abc import Callable, Collection
from dataclasses import dataclass

import structlog

from writeright.models.corrections import Correction, CorrectionResult
from writeright.models.preferences import Tone

logger = structlog.get_logger()


def _padded(text: str) -> str:
    """Treat the start and end of the text like a space."""
    return f" {text} "


@dataclass(frozen=True)
class GrammarRule:
    """A detection predicate plus the fix reported when it fires."""

    type: str
    original: str
    correction: str
    explanation: str
    matches: Callable[[str], bool]


# Order matters: corrections are reported and applied in this order.
GRAMMAR_RULES: list[GrammarRule] = [
    GrammarRule(
        type="subject_verb_agreement",
        original="are",
        correction="am",
        explanation='Subject-verb agreement: "I" should be followed by "am" not "are"',
        # Only checks that both words occur, not that they are linked.
        matches=lambda text: " are " in _padded(text) and " I " in _padded(text),
    ),
    GrammarRule(
        type="spelling",
        original="recieve",
        correction="receive",
        explanation='Spelling correction: "i before e except after c" rule',
        matches=lambda text: "recieve" in text.lower(),
    ),
    GrammarRule(
        type="spelling",
        original="alot",
        correction="a lot",
        explanation='Spelling correction: "a lot" should be two words',
        matches=lambda text: " alot " in _padded(text),
    ),
]


def apply_corrections(text: str, errors: list[Correction]) -> str:
    """Substitute every correction case-insensitively, in order."""
    corrected = text
    for error in errors:
        corrected = re.sub(
            re.escape(error.original),
            lambda _m, fix=error.correction: fix,
            corrected,
            flags=re.IGNORECASE,
        )
    return corrected


def check_grammar(
    text: str | None,
    context: Tone | str = Tone.PROFESSIONAL,
    mistake_history: Collection[str] = (),
) -> CorrectionResult:
    """Run every rule against the original text.

    Args:
        text: Text to check. ``None`` is treated as empty.
        context: Target register. Currently informational only.
        mistake_history: Mistake types the user has made before.

    Returns:
        CorrectionResult with the corrected text and the fired rules.
    """
    if not text:
        return CorrectionResult(corrected_text="")

    known = set(mistake_history)
    errors = [
        Correction(
            type=rule.type,
            original=rule.original,
            correction=rule.correction,
            explanation=rule.explanation,
            is_recurring=rule.type in known,
        )
        for rule in GRAMMAR_RULES
        if rule.matches(text)
    ]

    result = CorrectionResult(corrected_text=apply_corrections(text, errors), errors=errors)

    logger.debug(
        "grammar_check",
        context=str(context),
        error_count=len(errors),
        recurring=sum(1 for e in errors if e.is_recurring),
    )
    return result

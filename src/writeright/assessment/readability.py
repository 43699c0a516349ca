"""Sentence-length readability estimate."""

import re

from writeright.models.corrections import ReadabilityReport
from writeright.models.preferences import Proficiency

READABILITY_SUGGESTIONS: list[str] = [
    "Use shorter sentences for better readability",
    "Simplify complex vocabulary where possible",
    "Improve paragraph structure and flow",
    "Add transition words for better coherence",
]

# (exclusive lower bound, label), checked top-down
LEVEL_THRESHOLDS: list[tuple[float, str]] = [
    (80, "Excellent"),
    (60, "Good"),
    (40, "Fair"),
]


def get_readability_level(score: float) -> str:
    """Map a score to its label."""
    for threshold, label in LEVEL_THRESHOLDS:
        if score > threshold:
            return label
    return "Needs Improvement"


def adjust_for_proficiency(score: float, proficiency: Proficiency | str | None) -> float:
    """Ease scoring for beginners, tighten it for advanced writers.

    The beginner bonus is not re-clamped, so the result can exceed 100.
    """
    if proficiency == Proficiency.BEGINNER and score < 70:
        return score + 10
    if proficiency == Proficiency.ADVANCED and score > 80:
        return score - 5
    return score


def score_readability(
    text: str | None, proficiency: Proficiency | str | None = None
) -> ReadabilityReport:
    """Score text by average sentence length.

    Args:
        text: Text to score. ``None`` is treated as empty.
        proficiency: The writer's proficiency, if known.

    Returns:
        ReadabilityReport with score, level and generic suggestions.
    """
    text = text or ""
    # Leading and trailing whitespace does not produce empty words.
    word_count = len(text.split())
    sentences = [s for s in re.split(r"[.!?]+", text) if s.strip()]
    avg_sentence_length = word_count / len(sentences) if sentences else 0.0

    score = max(0.0, min(100.0, 100 - avg_sentence_length * 2))
    score = adjust_for_proficiency(score, proficiency)

    return ReadabilityReport(
        score=score,
        level=get_readability_level(score),
        suggestions=list(READABILITY_SUGGESTIONS),
        word_count=word_count,
        sentence_count=len(sentences),
        avg_sentence_length=avg_sentence_length,
    )

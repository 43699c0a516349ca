"""Correction, readability and style report models."""

from pydantic import BaseModel, Field


class Correction(BaseModel):
    """A single rule-based correction."""

    type: str
    original: str
    correction: str
    explanation: str
    is_recurring: bool = False


class CorrectionResult(BaseModel):
    corrected_text: str = ""
    errors: list[Correction] = Field(default_factory=list)


class ReadabilityReport(BaseModel):
    """Readability estimate (nominally 0-100, see beginner adjustment)."""

    score: float
    level: str
    suggestions: list[str] = Field(default_factory=list)
    word_count: int = 0
    sentence_count: int = 0
    avg_sentence_length: float = 0.0


class StyleReport(BaseModel):
    improved_text: str
    style_changes: list[str] = Field(default_factory=list)
    tone_adjustment: str = ""


class AssistantReply(BaseModel):
    """Everything the assistant returns for one piece of text."""

    text: str
    explanation: str = ""
    suggestions: list[str] = Field(default_factory=list)
    corrections: CorrectionResult = Field(default_factory=CorrectionResult)
    readability: ReadabilityReport | None = None
    source: str = "rule_based"  # "rule_based" or "llm"

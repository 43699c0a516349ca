"""User preference and learning history models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator


class Tone(StrEnum):
    """Writing register a correction targets."""

    CASUAL = "casual"
    PROFESSIONAL = "professional"
    ACADEMIC = "academic"
    CREATIVE = "creative"


class Proficiency(StrEnum):
    """Self-reported writing proficiency."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


DEFAULT_GOALS = ["clarity", "professionalism"]


def _unique(items: list[str] | None) -> list[str] | None:
    """Drop repeated entries, keeping first-seen order."""
    if items is None:
        return None
    return list(dict.fromkeys(items))


class UserPreferences(BaseModel):
    tone: Tone = Tone.PROFESSIONAL
    goals: list[str] = Field(default_factory=lambda: list(DEFAULT_GOALS))
    proficiency: Proficiency = Proficiency.INTERMEDIATE
    updated_at: datetime | None = None

    @field_validator("goals")
    @classmethod
    def unique_goals(cls, goals):
        return _unique(goals)


class PreferencesUpdate(BaseModel):
    """Partial preferences; only fields that are set get merged."""

    tone: Tone | None = None
    goals: list[str] | None = None
    proficiency: Proficiency | None = None

    @field_validator("goals")
    @classmethod
    def unique_goals(cls, goals):
        return _unique(goals)


class Feedback(BaseModel):
    mistake_type: str | None = None
    improvement_area: str | None = None
    context: str | None = None


class FeedbackEvent(Feedback):
    timestamp: datetime = Field(default_factory=datetime.now)


class UserHistory(BaseModel):
    common_mistakes: list[str] = Field(default_factory=list)
    improvement_history: list[FeedbackEvent] = Field(default_factory=list)
    sessions: int = 0
    first_session: datetime | None = None
    last_session: datetime | None = None


class UserProfileSummary(BaseModel):
    """Flattened view of a user's preferences and history."""

    preferred_tone: Tone = Tone.PROFESSIONAL
    common_mistakes: list[str] = Field(default_factory=list)
    writing_goals: list[str] = Field(default_factory=lambda: list(DEFAULT_GOALS))
    proficiency_level: Proficiency = Proficiency.INTERMEDIATE
    total_sessions: int = 0


class UpdatedFlags(BaseModel):
    preferences: bool = False
    history: bool = False


class WriteResult(BaseModel):
    """Outcome of a preference store write.

    Storage failures are reported here instead of being raised.
    """

    success: bool
    updated: UpdatedFlags = Field(default_factory=UpdatedFlags)
    preferences: UserPreferences | None = None
    history: UserHistory | None = None
    error: str | None = None

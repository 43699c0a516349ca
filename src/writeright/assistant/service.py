"""Writing assistant: grammar, readability and style backed by the preference store."""

import structlog

from writeright.assessment.grammar import check_grammar
from writeright.assessment.readability import score_readability
from writeright.assessment.style import analyze_style
from writeright.assistant.report import explain_corrections
from writeright.assistant.rewriter import LLMRewriter
from writeright.config import Settings
from writeright.models.corrections import (
    AssistantReply,
    CorrectionResult,
    ReadabilityReport,
    StyleReport,
)
from writeright.models.preferences import (
    Feedback,
    PreferencesUpdate,
    Tone,
    UserProfileSummary,
    WriteResult,
)
from writeright.storage.backends import InMemoryStore, JsonFileStore
from writeright.storage.preferences import PreferenceStore

logger = structlog.get_logger()


class WritingAssistant:
    """Caller-facing operations with the preference store injected.

    Args:
        store: Per-user preferences and history.
        rewriter: Optional LLM rewriter used by ``assist``.
    """

    def __init__(self, store: PreferenceStore, rewriter: LLMRewriter | None = None):
        self.store = store
        self.rewriter = rewriter

    def check(self, text: str, context: Tone | str, user_id: str | None = None) -> CorrectionResult:
        mistakes: list[str] = []
        if user_id:
            mistakes = self.store.get_history(user_id).common_mistakes
        return check_grammar(text, context, mistakes)

    def score(self, text: str, user_id: str | None = None) -> ReadabilityReport:
        proficiency = None
        if user_id:
            proficiency = self.store.get_preferences(user_id).proficiency
        return score_readability(text, proficiency)

    def restyle(
        self,
        text: str,
        current_context: Tone | str,
        target_context: Tone | str | None = None,
        user_id: str | None = None,
    ) -> StyleReport:
        if target_context is None:
            target_context = (
                self.store.get_preferences(user_id).tone if user_id else Tone.PROFESSIONAL
            )
        return analyze_style(text, current_context, target_context)

    def record_feedback(self, user_id: str, feedback: Feedback) -> WriteResult:
        return self.store.record_feedback(user_id, feedback)

    def update_preferences(self, user_id: str, partial: PreferencesUpdate) -> WriteResult:
        return self.store.update_preferences(user_id, partial)

    def get_profile(self, user_id: str) -> UserProfileSummary:
        preferences = self.store.get_preferences(user_id)
        history = self.store.get_history(user_id)
        return UserProfileSummary(
            preferred_tone=preferences.tone,
            common_mistakes=history.common_mistakes,
            writing_goals=preferences.goals,
            proficiency_level=preferences.proficiency,
            total_sessions=history.sessions,
        )

    async def assist(self, text: str, context: Tone | str, user_id: str) -> AssistantReply:
        """Full pass: rule-based corrections, readability, optional LLM rewrite."""
        preferences = self.store.get_preferences(user_id)
        history = self.store.get_history(user_id)

        corrections = check_grammar(text, context, history.common_mistakes)
        readability = score_readability(text, preferences.proficiency)

        logger.info(
            "assist_request",
            user_id=user_id,
            context=str(context),
            corrections=len(corrections.errors),
            readability=readability.score,
        )

        if self.rewriter is not None:
            rewritten = await self.rewriter.rewrite(
                text, str(context), preferences, history, corrections
            )
            if rewritten is not None:
                return AssistantReply(
                    text=rewritten["text"],
                    explanation=rewritten["explanation"],
                    suggestions=rewritten["suggestions"],
                    corrections=corrections,
                    readability=readability,
                    source="llm",
                )

        return AssistantReply(
            text=corrections.corrected_text,
            explanation=explain_corrections(corrections),
            suggestions=readability.suggestions,
            corrections=corrections,
            readability=readability,
        )


def build_assistant(settings: Settings) -> WritingAssistant:
    """Wire the configured storage backend and rewriter."""
    if settings.storage_backend == "json":
        backend = JsonFileStore(settings.preferences_dir)
    else:
        backend = InMemoryStore()

    rewriter = None
    if settings.openai_api_key:
        rewriter = LLMRewriter(
            api_key=settings.openai_api_key,
            model=settings.rewrite_model,
            timeout=settings.rewrite_timeout_seconds,
        )

    logger.info(
        "assistant_configured",
        storage_backend=settings.storage_backend,
        llm_rewrite=rewriter is not None,
    )
    return WritingAssistant(PreferenceStore(backend), rewriter)

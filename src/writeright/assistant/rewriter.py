"""Optional LLM rewrite that takes the user's preferences into account."""

import json

import structlog
from openai import AsyncOpenAI

from writeright.models.corrections import CorrectionResult
from writeright.models.preferences import UserHistory, UserPreferences

logger = structlog.get_logger()

REWRITE_PROMPT = """\
You are WriteRight, a writing assistant that helps users improve their writing.

Rewrite the user's text for a {context} context. Fix grammar and spelling,
improve clarity and flow, and keep the original meaning.

Context guide:
- casual: friendly, conversational, preserve the informal voice
- professional: clear, respectful, business-appropriate language
- academic: formal, precise, scholarly standards
- creative: expressive, engaging, enhance storytelling

About this user:
- Preferred tone: {tone}
- Proficiency: {proficiency}
- Writing goals: {goals}
- Mistakes they make regularly: {mistakes}
- Sessions so far: {sessions}

Rule-based checks already found:
{findings}

Explain key changes, especially for recurring mistakes, and be encouraging.

Respond with a JSON object:
{{
    "text": "<improved text>",
    "explanation": "<what changed and why>",
    "suggestions": ["<suggestion 1>", "<suggestion 2>"]
}}
"""


class LLMRewriter:
    """Rewrites text with an OpenAI chat model.

    Args:
        api_key: OpenAI API key.
        model: Model to use for rewriting.
        timeout: Request timeout in seconds.
    """

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout: float = 30.0):
        self.client = AsyncOpenAI(api_key=api_key, timeout=timeout)
        self.model = model

    def build_prompt(
        self,
        context: str,
        preferences: UserPreferences,
        history: UserHistory,
        corrections: CorrectionResult,
    ) -> str:
        findings = "\n".join(
            f"- {e.type}: '{e.original}' -> '{e.correction}'"
            + (" (recurring)" if e.is_recurring else "")
            for e in corrections.errors
        ) or "- none"
        return REWRITE_PROMPT.format(
            context=context,
            tone=preferences.tone,
            proficiency=preferences.proficiency,
            goals=", ".join(preferences.goals) or "none",
            mistakes=", ".join(history.common_mistakes) or "none recorded",
            sessions=history.sessions,
            findings=findings,
        )

    async def rewrite(
        self,
        text: str,
        context: str,
        preferences: UserPreferences,
        history: UserHistory,
        corrections: CorrectionResult,
    ) -> dict | None:
        """Ask the model for a rewrite.

        Returns:
            Dict with text, explanation, suggestions; None on any failure.
        """
        prompt = self.build_prompt(context, preferences, history, corrections)
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": prompt},
                    {"role": "user", "content": text},
                ],
                temperature=0.4,
                response_format={"type": "json_object"},
            )
            result = json.loads(response.choices[0].message.content)
        except Exception:
            logger.exception("llm_rewrite_failed")
            return None

        if not isinstance(result, dict) or not result.get("text"):
            logger.warning("llm_rewrite_empty")
            return None

        suggestions = result.get("suggestions") or []
        if not isinstance(suggestions, list):
            logger.warning("llm_rewrite_bad_suggestions", suggestions=suggestions)
            return None

        logger.info("llm_rewrite_complete", model=self.model)
        return {
            "text": str(result["text"]),
            "explanation": str(result.get("explanation") or ""),
            "suggestions": [str(s) for s in suggestions if s is not None],
        }

"""REST and A2A routes for the writing assistant."""

import functools

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from writeright.api.schemas import (
    A2ARequest,
    A2AResponse,
    CheckRequest,
    MessageContent,
    ReadabilityRequest,
    StyleRequest,
)
from writeright.assistant.report import ERROR_MESSAGE, format_report
from writeright.assistant.service import WritingAssistant, build_assistant
from writeright.config import get_settings
from writeright.models.corrections import CorrectionResult, ReadabilityReport, StyleReport
from writeright.models.preferences import (
    Feedback,
    PreferencesUpdate,
    UserHistory,
    UserPreferences,
    UserProfileSummary,
    WriteResult,
)

logger = structlog.get_logger()
router = APIRouter(prefix="/api")
a2a_router = APIRouter(prefix="/a2a")


@functools.lru_cache
def get_assistant() -> WritingAssistant:
    """Process-wide assistant built from settings."""
    return build_assistant(get_settings())


@a2a_router.post("/agent/writingAssistant", response_model=A2AResponse)
async def writing_assistant(
    request: A2ARequest, assistant: WritingAssistant = Depends(get_assistant)
):
    """Single A2A endpoint returning a markdown report."""
    settings = get_settings()
    context = request.context or settings.default_context
    user_id = request.user_id or settings.default_user_id

    logger.info(
        "a2a_request",
        text=request.text[:100] + ("..." if len(request.text) > 100 else ""),
        context=str(context),
        user_id=user_id,
    )
    try:
        reply = await assistant.assist(request.text, context, user_id)
    except Exception:
        logger.exception("a2a_request_failed", user_id=user_id)
        error = A2AResponse(content=MessageContent(text=ERROR_MESSAGE))
        return JSONResponse(error.model_dump(), status_code=500)

    logger.info("a2a_response_sent", user_id=user_id, source=reply.source)
    return A2AResponse(content=MessageContent(text=format_report(reply)))


@router.post("/check")
async def check(
    request: CheckRequest, assistant: WritingAssistant = Depends(get_assistant)
) -> CorrectionResult:
    """Rule-based grammar and spelling check."""
    return assistant.check(request.text, request.context, request.user_id)


@router.post("/readability")
async def readability(
    request: ReadabilityRequest, assistant: WritingAssistant = Depends(get_assistant)
) -> ReadabilityReport:
    """Readability score adjusted for the user's proficiency."""
    return assistant.score(request.text, request.user_id)


@router.post("/style")
async def style(
    request: StyleRequest, assistant: WritingAssistant = Depends(get_assistant)
) -> StyleReport:
    """Style changes for moving text between registers."""
    return assistant.restyle(
        request.text, request.current_context, request.target_context, request.user_id
    )


@router.get("/users/{user_id}/profile")
async def get_profile(
    user_id: str, assistant: WritingAssistant = Depends(get_assistant)
) -> UserProfileSummary:
    """Summary of a user's preferences and history."""
    return assistant.get_profile(user_id)


@router.get("/users/{user_id}/preferences")
async def get_preferences(
    user_id: str, assistant: WritingAssistant = Depends(get_assistant)
) -> UserPreferences:
    """Get a user's preferences (defaults when none are stored)."""
    return assistant.store.get_preferences(user_id)


@router.patch("/users/{user_id}/preferences")
async def update_preferences(
    user_id: str,
    partial: PreferencesUpdate,
    assistant: WritingAssistant = Depends(get_assistant),
) -> WriteResult:
    """Merge the supplied fields into the user's preferences."""
    return assistant.update_preferences(user_id, partial)


@router.get("/users/{user_id}/history")
async def get_history(
    user_id: str, assistant: WritingAssistant = Depends(get_assistant)
) -> UserHistory:
    """Get a user's mistake and feedback history."""
    return assistant.store.get_history(user_id)


@router.post("/users/{user_id}/feedback")
async def record_feedback(
    user_id: str,
    feedback: Feedback,
    assistant: WritingAssistant = Depends(get_assistant),
) -> WriteResult:
    """Record feedback and count a session."""
    return assistant.record_feedback(user_id, feedback)


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}

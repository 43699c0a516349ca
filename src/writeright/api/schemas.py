"""Request and response bodies for the HTTP API."""

from pydantic import BaseModel, ConfigDict, Field

from writeright.models.preferences import Tone


class A2ARequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str = ""
    context: Tone | None = None
    user_id: str | None = Field(default=None, alias="userId")


class MessageContent(BaseModel):
    text: str
    format: str = "markdown"


class A2AResponse(BaseModel):
    type: str = "message"
    content: MessageContent


class CheckRequest(BaseModel):
    text: str
    context: Tone = Tone.PROFESSIONAL
    user_id: str | None = None


class ReadabilityRequest(BaseModel):
    text: str
    user_id: str | None = None


class StyleRequest(BaseModel):
    text: str
    current_context: Tone
    target_context: Tone | None = None
    user_id: str | None = None

# =============================================================================
# core/models/assistant.py - Health Assistant Schemas
# =============================================================================

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=2000, description="The user's question")


class ChatResponse(BaseModel):
    """
    The assistant's answer.

    `model` names whatever produced the text: a Gemini or Hugging Face
    model, "help" for the canned help reply, or the knowledge base.
    """

    response: str
    model: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    isHelpResponse: bool = False
    fallback: bool = Field(default=False, description="True when no AI provider answered")

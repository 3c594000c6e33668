# =============================================================================
# app/routers/assistant.py - Health Assistant Endpoint
# =============================================================================

from fastapi import APIRouter

from app.dependencies import AssistantServiceDep
from core.models.assistant import ChatRequest, ChatResponse

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest, service: AssistantServiceDep):
    """
    Ask the health assistant a question.

    Always answers: when no AI provider is configured or reachable the
    reply comes from the built-in knowledge base (`fallback: true`).
    """
    return service.ask(request.prompt)

# =============================================================================
# core/services/assistant_service.py - Health Assistant
# =============================================================================
# Answers free-text health questions. Sources, in order:
# 1. A canned reply when the user is asking what the assistant can do
# 2. Gemini (GEMINI_API_KEY), each model in GEMINI_MODELS
# 3. Hugging Face Inference API (HUGGINGFACE_API_KEY), each model below
# 4. A small built-in knowledge base, keyed on common complaints
#
# A provider that fails or returns nothing is logged and skipped, so a
# question always gets an answer.
# =============================================================================

import logging
import re
from typing import Any

import httpx

from app.config import settings
from core.models.assistant import ChatResponse

logger = logging.getLogger(__name__)

HELP_KEYWORDS = ("help", "how to", "what can you do", "guide", "assist")
HELP_RESPONSE = (
    "I can help with medicine info, interactions, symptoms, and health questions. "
    "What would you like to know?"
)

DISCLAIMER = "⚠️ Always consult healthcare professionals for medical advice."
GENERAL_INFO_DISCLAIMER = (
    "⚠️ This is general information. Always consult healthcare professionals for medical advice."
)

HUGGINGFACE_MODELS = [
    "microsoft/DialoGPT-large",
    "facebook/blenderbot-400M-distill",
    "microsoft/DialoGPT-medium",
    "google/flan-t5-large",
]

# Matched as substrings, first hit wins
MEDICAL_KNOWLEDGE = {
    "migraine": (
        "For migraines, try ibuprofen (400-600mg), acetaminophen (500-1000mg), or aspirin. "
        "Excedrin Migraine combines all three with caffeine. Rest in a dark, quiet room with a "
        "cold compress. See a doctor if migraines are frequent (3+ per month) or severe."
    ),
    "headache": (
        "For headaches, try acetaminophen (500-1000mg every 4-6 hours) or ibuprofen (200-400mg "
        "every 4-6 hours). Stay hydrated, rest, and apply cold or heat. See a doctor for severe, "
        "sudden, or persistent headaches."
    ),
    "pain": (
        "For mild-moderate pain: acetaminophen (Tylenol) 500-1000mg every 4-6 hours, or ibuprofen "
        "(Advil) 200-400mg every 4-6 hours. Take ibuprofen with food. For severe or chronic pain, "
        "consult a healthcare provider."
    ),
    "cold": (
        "For colds: rest, fluids, and symptom relief with acetaminophen/ibuprofen for aches, "
        "decongestants for stuffiness, and cough suppressants. Honey helps coughs. See a doctor "
        "if fever lasts 3+ days or symptoms worsen."
    ),
    "fever": (
        "For fever: acetaminophen or ibuprofen, plenty of fluids, rest, and light clothing. See a "
        "doctor if fever is over 101.3°F (38.5°C) for more than 3 days, or if you have severe symptoms."
    ),
    "allergy": (
        "For allergies: antihistamines like loratadine (Claritin), cetirizine (Zyrtec), or "
        "fexofenadine (Allegra). Nasal sprays like Flonase help congestion. Avoid known allergens "
        "and consider air purifiers."
    ),
}

GENERAL_RESPONSE = (
    "I can help with medical questions about medications, symptoms, and treatments. Could you be "
    "more specific about your health concern? For example, you could ask about headache relief, "
    "cold symptoms, pain medication, or any other health topic."
)

_PROMPT_ECHO = re.compile(r"^(medical assistant:\s*|you are nick.*?:)", re.IGNORECASE)


def is_help_request(prompt: str) -> bool:
    lowered = prompt.lower()
    return any(keyword in lowered for keyword in HELP_KEYWORDS)


def knowledge_base_answer(prompt: str) -> tuple[str, str]:
    """
    Answer from the built-in table.

    Returns:
        (text, model) where model is "medical-knowledge-base" on a match,
        otherwise "helpful-assistant" with a prompt to be more specific
    """
    lowered = prompt.lower()
    for condition, info in MEDICAL_KNOWLEDGE.items():
        if condition in lowered:
            return f"{info}\n\n{GENERAL_INFO_DISCLAIMER}", "medical-knowledge-base"
    return f"{GENERAL_RESPONSE}\n\n{DISCLAIMER}", "helpful-assistant"


def clean_generated_text(text: str) -> str:
    """Strip the instruction prefix some models echo back."""
    text = text.strip()
    while True:
        cleaned = _PROMPT_ECHO.sub("", text, count=1).strip()
        if cleaned == text:
            return text
        text = cleaned


def with_disclaimer(text: str) -> str:
    """Append the disclaimer unless the answer already points to a professional."""
    lowered = text.lower()
    if "consult" in lowered or "doctor" in lowered:
        return text
    return f"{text}\n\n{DISCLAIMER}"


def huggingface_text(result: Any) -> str:
    """Pull generated text out of the response shapes the Inference API uses."""
    if isinstance(result, list) and result:
        first = result[0]
        if isinstance(first, str):
            return first
        if isinstance(first, dict):
            return first.get("generated_text") or first.get("translation_text") or ""
    if isinstance(result, dict):
        return result.get("generated_text") or ""
    return ""


def gemini_text(result: Any) -> str:
    """First candidate's text from a generateContent response."""
    if not isinstance(result, dict):
        return ""
    for candidate in result.get("candidates") or []:
        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if text.strip():
            return text.strip()
    return ""


class AssistantService:
    """
    Health assistant backed by Gemini, Hugging Face and a local fallback.

    Example:
        service = AssistantService()
        answer = service.ask("What helps with a migraine?")
        print(answer.model, answer.response)
    """

    def __init__(self, http_client: httpx.Client | None = None):
        self._client = http_client or httpx.Client(timeout=settings.HTTP_TIMEOUT_SECONDS)

    def close(self) -> None:
        self._client.close()

    def ask(self, prompt: str) -> ChatResponse:
        """Answer one question; never raises for provider failures."""
        prompt = prompt.strip()

        if is_help_request(prompt):
            return ChatResponse(response=HELP_RESPONSE, model="help", isHelpResponse=True)

        for provider in (self._ask_gemini, self._ask_huggingface):
            answer = provider(prompt)
            if answer:
                text, model = answer
                return ChatResponse(response=text, model=model)

        text, model = knowledge_base_answer(prompt)
        logger.info(f"Assistant fell back to {model}")
        return ChatResponse(response=text, model=model, fallback=True)

    # -------------------------------------------------------------------------
    # Providers
    # -------------------------------------------------------------------------

    def _post_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        try:
            response = self._client.post(url, json=payload, headers=headers, params=params)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Assistant request to {url} failed: {e}")
            return None

    def _ask_gemini(self, prompt: str) -> tuple[str, str] | None:
        if not settings.GEMINI_API_KEY:
            return None

        base = settings.GEMINI_BASE_URL.rstrip("/")
        payload = {
            "contents": [{"parts": [{"text": f"Medical assistant: {prompt}"}]}],
            "generationConfig": {"maxOutputTokens": 100, "temperature": 0.7},
        }
        for model in settings.gemini_models_list:
            result = self._post_json(
                f"{base}/models/{model}:generateContent",
                payload,
                params={"key": settings.GEMINI_API_KEY},
            )
            text = gemini_text(result)
            if text:
                return text, model
            logger.debug(f"Gemini model {model} gave no answer")
        return None

    def _ask_huggingface(self, prompt: str) -> tuple[str, str] | None:
        if not settings.HUGGINGFACE_API_KEY:
            return None

        base = settings.HUGGINGFACE_BASE_URL.rstrip("/")
        payload = {
            "inputs": (
                "Medical Assistant: You are Nick, a helpful medical assistant. "
                f"Answer this health question accurately and concisely: {prompt}"
            ),
            "parameters": {
                "max_length": 200,
                "temperature": 0.7,
                "do_sample": True,
                "return_full_text": False,
            },
            "options": {"wait_for_model": True},
        }
        headers = {"Authorization": f"Bearer {settings.HUGGINGFACE_API_KEY}"}

        for model in HUGGINGFACE_MODELS:
            result = self._post_json(f"{base}/{model}", payload, headers=headers)
            text = clean_generated_text(huggingface_text(result))
            # Very short generations are usually noise
            if len(text) > 10:
                return with_disclaimer(text), model
            logger.debug(f"Hugging Face model {model} gave no usable answer")
        return None

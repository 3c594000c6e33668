# =============================================================================
# tests/test_assistant_service.py - Health Assistant Tests
# =============================================================================
# This module contains tests for:
# - The canned help reply
# - Gemini first, then Hugging Face, then the built-in knowledge base
# - Text cleanup and the disclaimer
# =============================================================================

import httpx
import pytest

from app.config import settings
from core.services.assistant_service import (
    DISCLAIMER,
    HELP_RESPONSE,
    AssistantService,
    clean_generated_text,
    huggingface_text,
    knowledge_base_answer,
    with_disclaimer,
)


def make_service(handler) -> AssistantService:
    return AssistantService(http_client=httpx.Client(transport=httpx.MockTransport(handler)))


def refuse(request):
    raise AssertionError(f"unexpected request to {request.url}")


@pytest.fixture
def no_provider_keys(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", None)
    monkeypatch.setattr(settings, "HUGGINGFACE_API_KEY", None)


@pytest.fixture
def provider_keys(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "gemini-key")
    monkeypatch.setattr(settings, "GEMINI_BASE_URL", "https://gemini.test/v1beta")
    monkeypatch.setattr(settings, "GEMINI_MODELS", "gemini-1.5-flash,gemini-pro")
    monkeypatch.setattr(settings, "HUGGINGFACE_API_KEY", "hf-key")
    monkeypatch.setattr(settings, "HUGGINGFACE_BASE_URL", "https://hf.test/models")


# =============================================================================
# Provider Order Tests
# =============================================================================

class TestAsk:
    """Test AssistantService.ask."""

    def test_help_request_answered_locally(self, provider_keys):
        answer = make_service(refuse).ask("What can you do?")

        assert answer.response == HELP_RESPONSE
        assert answer.model == "help"
        assert answer.isHelpResponse is True

    def test_gemini_answers(self, provider_keys):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={
                "candidates": [{"content": {"parts": [{"text": " Rest and drink fluids. "}]}}]
            })

        answer = make_service(handler).ask("I have a cold")

        assert answer.response == "Rest and drink fluids."
        assert answer.model == "gemini-1.5-flash"
        assert answer.fallback is False
        assert seen[0].url.path == "/v1beta/models/gemini-1.5-flash:generateContent"
        assert seen[0].url.params["key"] == "gemini-key"

    def test_next_gemini_model_tried(self, provider_keys):
        def handler(request):
            if "gemini-1.5-flash" in request.url.path:
                return httpx.Response(404, json={"error": {"message": "model not found"}})
            return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "Take it with food."}]}}]})

        answer = make_service(handler).ask("When do I take ibuprofen?")

        assert answer.model == "gemini-pro"

    def test_huggingface_after_gemini_fails(self, provider_keys):
        def handler(request):
            if request.url.host == "gemini.test":
                return httpx.Response(500)
            assert request.headers["Authorization"] == "Bearer hf-key"
            return httpx.Response(200, json=[{"generated_text": "Medical Assistant: Stay hydrated and rest."}])

        answer = make_service(handler).ask("I feel tired")

        assert answer.model == "microsoft/DialoGPT-large"
        assert answer.response == f"Stay hydrated and rest.\n\n{DISCLAIMER}"

    def test_short_generation_skipped(self, provider_keys, monkeypatch):
        monkeypatch.setattr(settings, "GEMINI_API_KEY", None)
        calls = []

        def handler(request):
            calls.append(request.url.path)
            if len(calls) == 1:
                return httpx.Response(200, json=[{"generated_text": "Ok."}])
            return httpx.Response(200, json=[{"generated_text": "See a doctor if it persists."}])

        answer = make_service(handler).ask("Is a rash serious?")

        assert answer.model == "facebook/blenderbot-400M-distill"
        # Already points to a professional: no disclaimer appended
        assert answer.response == "See a doctor if it persists."

    def test_knowledge_base_when_unconfigured(self, no_provider_keys):
        answer = make_service(refuse).ask("What relieves a migraine?")

        assert answer.model == "medical-knowledge-base"
        assert answer.fallback is True
        assert answer.response.startswith("For migraines")

    def test_knowledge_base_when_all_providers_fail(self, provider_keys):
        answer = make_service(lambda request: httpx.Response(503)).ask("Something for my fever")

        assert answer.model == "medical-knowledge-base"
        assert answer.fallback is True


# =============================================================================
# Helper Tests
# =============================================================================

class TestKnowledgeBase:

    def test_first_match_wins(self):
        # "migraine" is listed before "headache"
        text, model = knowledge_base_answer("migraine headache")

        assert model == "medical-knowledge-base"
        assert text.startswith("For migraines")

    def test_general_response(self):
        text, model = knowledge_base_answer("Tell me about vitamins")

        assert model == "helpful-assistant"
        assert text.endswith(DISCLAIMER)


class TestTextHelpers:

    @pytest.mark.parametrize("raw, expected", [
        ("Medical Assistant: Drink water.", "Drink water."),
        ("You are Nick, a helpful medical assistant: Rest.", "Rest."),
        ("  Plain answer  ", "Plain answer"),
    ])
    def test_clean_generated_text(self, raw, expected):
        assert clean_generated_text(raw) == expected

    def test_disclaimer_appended_once(self):
        assert with_disclaimer("Drink water.") == f"Drink water.\n\n{DISCLAIMER}"
        assert with_disclaimer("Consult your pharmacist.") == "Consult your pharmacist."

    @pytest.mark.parametrize("result, expected", [
        ([{"generated_text": "a"}], "a"),
        ([{"translation_text": "b"}], "b"),
        (["c"], "c"),
        ({"generated_text": "d"}, "d"),
        ({"error": "loading"}, ""),
        ([], ""),
    ])
    def test_huggingface_text(self, result, expected):
        assert huggingface_text(result) == expected

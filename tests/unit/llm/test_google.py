"""Tests for GoogleProvider."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from squix.llm.google import GoogleProvider
from squix.llm.models import LLMMessage, LLMRequest


class _FakeCandidate:
    def __init__(self, finish_reason):
        self.finish_reason = finish_reason


class _FakeResponse:
    def __init__(self, text="", finish_reason=None):
        self.text = text
        self.candidates = [_FakeCandidate(finish_reason)]


class _BlockedResponse:
    candidates = [_FakeCandidate("SAFETY")]

    @property
    def text(self):
        raise ValueError("Response was blocked")


@pytest.fixture
def provider():
    return GoogleProvider(api_key="dummy", model="gemini-2.5-flash", timeout=12)


def test_finish_reason_maps_length_like_values():
    assert GoogleProvider._map_finish_reason("MAX_TOKENS") == "length"


def test_finish_reason_maps_content_filter_values():
    assert GoogleProvider._map_finish_reason("SAFETY") == "content_filter"


def test_finish_reason_defaults_to_stop_for_unknown():
    assert GoogleProvider._map_finish_reason("FINISH_REASON_UNSPECIFIED") == "stop"
    assert GoogleProvider._map_finish_reason("") == "stop"


def test_raw_finish_reason_from_first_candidate():
    response = _FakeResponse(text="{}", finish_reason="MAX_TOKENS")

    assert GoogleProvider._extract_raw_finish_reason(response) == "MAX_TOKENS"
    assert GoogleProvider._extract_raw_finish_reason(SimpleNamespace(candidates=[])) == ""


def test_extract_response_text_handles_non_string_payload(provider):
    response = SimpleNamespace(text=None, candidates=[])

    assert provider._extract_response_text(response) == ""


def test_extract_response_text_handles_blocked_response(provider):
    assert provider._extract_response_text(_BlockedResponse()) == ""


def test_request_flattens_to_labelled_prompt():
    request = LLMRequest(
        messages=[
            LLMMessage(role="system", content="You are Ace."),
            LLMMessage(role="user", content="How am I doing?"),
        ]
    )

    assert request.as_prompt() == "System: You are Ace.\n\nUser: How am I doing?"


@pytest.mark.asyncio
async def test_generate_sends_single_prompt(provider):
    model = MagicMock()
    model.generate_content_async = AsyncMock(
        return_value=_FakeResponse(text='{"intent": "general_chat"}', finish_reason="STOP")
    )
    genai = MagicMock()
    genai.GenerativeModel.return_value = model
    provider.genai = genai

    response = await provider.generate(
        LLMRequest(
            messages=[LLMMessage(role="user", content="hello")],
            temperature=0.5,
            model="gemini-2.0-flash",
        )
    )

    genai.GenerativeModel.assert_called_once_with("gemini-2.0-flash")
    args, kwargs = model.generate_content_async.call_args
    assert args[0] == "User: hello"
    assert kwargs["request_options"] == {"timeout": 12}
    genai.types.GenerationConfig.assert_called_once_with(
        temperature=0.5, max_output_tokens=2000
    )
    assert response.content == '{"intent": "general_chat"}'
    assert response.model == "gemini-2.0-flash"
    assert response.provider == "google"
    assert response.finish_reason == "stop"
    assert response.usage.total_tokens == (
        response.usage.prompt_tokens + response.usage.completion_tokens
    )


@pytest.mark.asyncio
async def test_generate_propagates_sdk_errors(provider):
    model = MagicMock()
    model.generate_content_async = AsyncMock(side_effect=RuntimeError("quota exceeded"))
    provider.genai = MagicMock()
    provider.genai.GenerativeModel.return_value = model

    with pytest.raises(RuntimeError, match="quota exceeded"):
        await provider.generate(LLMRequest(messages=[LLMMessage(role="user", content="hi")]))

"""
Google LLM Provider

Gemini via the google-generativeai SDK. Gemini receives the request as a
single flattened prompt string.
"""

import logging
import warnings
from typing import Any

from squix.llm.base import BaseLLMProvider
from squix.llm.models import FinishReason, LLMRequest, LLMResponse, LLMUsage

logger = logging.getLogger(__name__)

# Substrings of Gemini finish reasons, checked in order
_FINISH_REASON_MARKERS: tuple[tuple[tuple[str, ...], FinishReason], ...] = (
    (("max_tokens", "length"), "length"),
    (("safety", "blocked", "recitation"), "content_filter"),
    (("error",), "error"),
)


class GoogleProvider(BaseLLMProvider):
    """Gemini provider. Token usage is estimated from prompt and completion length."""

    provider_name = "google"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.0,
        max_tokens: int = 2000,
        timeout: int = 30,
    ):
        super().__init__(model=model, temperature=temperature, max_tokens=max_tokens, timeout=timeout)

        with warnings.catch_warnings():
            warnings.simplefilter("ignore", FutureWarning)
            import google.generativeai as genai

        genai.configure(api_key=api_key)
        self.genai = genai

    async def generate(self, request: LLMRequest) -> LLMResponse:
        request = self._resolve(request)
        prompt = request.as_prompt()

        client = self.genai.GenerativeModel(request.model)
        response = await client.generate_content_async(
            prompt,
            generation_config=self.genai.types.GenerationConfig(
                temperature=request.temperature,
                max_output_tokens=request.max_tokens,
            ),
            request_options={"timeout": self.timeout},
        )

        text = self._extract_response_text(response)
        raw_reason = self._extract_raw_finish_reason(response)
        llm_response = LLMResponse(
            content=text,
            model=request.model,
            usage=LLMUsage.estimate(prompt, text),
            finish_reason=self._map_finish_reason(raw_reason),
            provider=self.provider_name,
            metadata={"raw_finish_reason": raw_reason},
        )
        self._log_completion(llm_response)
        return llm_response

    @staticmethod
    def _extract_response_text(response: Any) -> str:
        # .text raises ValueError when the candidate was blocked
        try:
            text = response.text
        except (AttributeError, ValueError):
            return ""
        return "" if text is None else str(text)

    @staticmethod
    def _extract_raw_finish_reason(response: Any) -> str:
        candidates = getattr(response, "candidates", None)
        if not candidates:
            return ""
        return str(getattr(candidates[0], "finish_reason", "") or "")

    @staticmethod
    def _map_finish_reason(raw_reason: str) -> FinishReason:
        lowered = raw_reason.lower()
        for markers, reason in _FINISH_REASON_MARKERS:
            if any(marker in lowered for marker in markers):
                return reason
        return "stop"

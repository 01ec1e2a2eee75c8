"""
OpenAI LLM Provider

Chat Completions through the official async SDK. System and user messages
are sent as-is.
"""

import logging

import openai
from openai import AsyncOpenAI

from squix.llm.base import BaseLLMProvider
from squix.llm.models import FinishReason, LLMRequest, LLMResponse, LLMUsage

logger = logging.getLogger(__name__)

_FINISH_REASONS: dict[str, FinishReason] = {
    "stop": "stop",
    "length": "length",
    "content_filter": "content_filter",
}


class OpenAIProvider(BaseLLMProvider):
    """OpenAI GPT provider."""

    provider_name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        temperature: float = 0.0,
        max_tokens: int = 2000,
        timeout: int = 30,
    ):
        super().__init__(model=model, temperature=temperature, max_tokens=max_tokens, timeout=timeout)
        self.client = AsyncOpenAI(api_key=api_key, timeout=float(timeout))

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Raises:
            openai.APIError: On API errors, including timeouts
        """
        request = self._resolve(request)

        try:
            completion = await self.client.chat.completions.create(
                model=request.model,
                messages=[msg.model_dump() for msg in request.messages],
                temperature=request.temperature,
                max_tokens=request.max_tokens,
            )
        except openai.APIError as e:
            logger.error(
                f"OpenAI request failed: {e}",
                extra={"provider": self.provider_name, "model": request.model},
            )
            raise

        choice = completion.choices[0]
        usage = completion.usage
        llm_response = LLMResponse(
            content=choice.message.content or "",
            model=completion.model,
            usage=LLMUsage(
                prompt_tokens=usage.prompt_tokens,
                completion_tokens=usage.completion_tokens,
                total_tokens=usage.total_tokens,
            )
            if usage
            else LLMUsage(),
            finish_reason=self._map_finish_reason(choice.finish_reason),
            provider=self.provider_name,
            metadata={"id": completion.id},
        )
        self._log_completion(llm_response)
        return llm_response

    @staticmethod
    def _map_finish_reason(reason: str | None) -> FinishReason:
        return _FINISH_REASONS.get(reason or "stop", "stop")

"""
Base LLM Provider

The pipeline needs exactly one capability from a model: turn a single
self-contained prompt into a single text completion. Providers hold their
defaults (model, temperature, token limit, timeout) and resolve each request
against them without mutating the caller's request.
"""

import logging
from abc import ABC, abstractmethod

from squix.llm.models import LLMRequest, LLMResponse

logger = logging.getLogger(__name__)


class BaseLLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    Subclasses implement generate() and should call _resolve() first and
    _log_completion() before returning.
    """

    provider_name: str = "base"

    def __init__(
        self,
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 2000,
        timeout: int = 30,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

        logger.info(
            f"Initialized {self.provider_name} provider ({model})",
            extra={"provider": self.provider_name, "model": model, "timeout": timeout},
        )

    @abstractmethod
    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Send one prompt and return the completion.

        Provider SDK errors (authentication, quota, timeout) propagate unchanged.
        """

    def _resolve(self, request: LLMRequest) -> LLMRequest:
        """Return a copy of the request with this provider's defaults filled in."""
        resolved = request.model_copy(
            update={
                "temperature": self.temperature if request.temperature is None else request.temperature,
                "max_tokens": request.max_tokens or self.max_tokens,
                "model": request.model or self.model,
            }
        )
        logger.debug(
            f"{self.provider_name} request",
            extra={
                "provider": self.provider_name,
                "model": resolved.model,
                "message_count": len(resolved.messages),
                "temperature": resolved.temperature,
                "max_tokens": resolved.max_tokens,
            },
        )
        return resolved

    def _log_completion(self, response: LLMResponse) -> None:
        level = logging.WARNING if response.truncated else logging.DEBUG
        logger.log(
            level,
            f"{self.provider_name} response ({response.finish_reason})",
            extra={
                "provider": self.provider_name,
                "model": response.model,
                "total_tokens": response.usage.total_tokens,
                "finish_reason": response.finish_reason,
            },
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} model={self.model}>"

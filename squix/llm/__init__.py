"""
LLM providers for Google Gemini and OpenAI.

Usage:
    from squix.config import get_settings
    from squix.llm import LLMMessage, LLMProviderFactory, LLMRequest

    provider = LLMProviderFactory.create_agent_provider("chat", get_settings().llm)
    response = await provider.generate(
        LLMRequest(messages=[LLMMessage(role="user", content="Hello!")])
    )
"""

from squix.llm.base import BaseLLMProvider
from squix.llm.factory import LLMProviderFactory
from squix.llm.google import GoogleProvider
from squix.llm.models import LLMMessage, LLMRequest, LLMResponse, LLMUsage
from squix.llm.openai import OpenAIProvider

__all__ = [
    "BaseLLMProvider",
    "GoogleProvider",
    "LLMMessage",
    "LLMProviderFactory",
    "LLMRequest",
    "LLMResponse",
    "LLMUsage",
    "OpenAIProvider",
]

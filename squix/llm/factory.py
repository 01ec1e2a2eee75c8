"""
LLM Provider Factory

Builds providers for the four pipeline roles. Each role can be routed to its
own provider (LLM_<ROLE>_PROVIDER) and model (LLM_<ROLE>_MODEL); otherwise it
uses LLM_DEFAULT_PROVIDER with that provider's main or mini model.
"""

import logging
from typing import Literal

from squix.config import LLMSettings
from squix.llm.base import BaseLLMProvider
from squix.llm.google import GoogleProvider
from squix.llm.openai import OpenAIProvider

logger = logging.getLogger(__name__)

AgentRole = Literal["classifier", "sql", "analysis", "chat"]
ModelType = Literal["main", "mini"]

# Routing and small-talk use the lightweight model
ROLE_MODEL_TYPES: dict[str, ModelType] = {
    "classifier": "mini",
    "sql": "main",
    "analysis": "main",
    "chat": "mini",
}


class LLMProviderFactory:
    """Creates configured provider instances."""

    PROVIDERS: dict[str, type[BaseLLMProvider]] = {
        "google": GoogleProvider,
        "openai": OpenAIProvider,
    }

    @staticmethod
    def create_provider(
        provider_type: str,
        config: LLMSettings,
        model_type: ModelType = "main",
        model: str | None = None,
    ) -> BaseLLMProvider:
        """
        Create a provider instance.

        Args:
            provider_type: "google" or "openai"
            config: LLM configuration settings
            model_type: Use the provider's main or mini model
            model: Explicit model name, overriding model_type

        Raises:
            ValueError: If the provider is unknown or its API key is missing
        """
        provider_cls = LLMProviderFactory.PROVIDERS.get(provider_type)
        if provider_cls is None:
            raise ValueError(
                f"Unknown provider type: {provider_type}. "
                f"Available providers: {sorted(LLMProviderFactory.PROVIDERS)}"
            )

        api_key = getattr(config, f"{provider_type}_api_key")
        if not api_key:
            label = "Google" if provider_type == "google" else "OpenAI"
            raise ValueError(f"{label} API key is required but not configured")

        if model is None:
            suffix = "" if model_type == "main" else "_mini"
            model = getattr(config, f"{provider_type}_model{suffix}")

        return provider_cls(
            api_key=api_key,
            model=model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.timeout,
        )

    @staticmethod
    def create_agent_provider(
        agent_name: AgentRole,
        config: LLMSettings,
        model: str | None = None,
    ) -> BaseLLMProvider:
        """
        Create the provider for one pipeline role.

        Args:
            agent_name: "classifier", "sql", "analysis" or "chat"
            config: LLM configuration
            model: Explicit model name, taking precedence over configuration
        """
        provider_type = config.provider_for(agent_name)
        resolved_model = model or config.model_for(agent_name)
        model_type = ROLE_MODEL_TYPES.get(agent_name, "main")

        logger.info(
            f"Creating {provider_type} provider for {agent_name} role",
            extra={
                "agent": agent_name,
                "provider": provider_type,
                "model": resolved_model,
                "model_type": model_type,
            },
        )
        return LLMProviderFactory.create_provider(
            provider_type, config, model_type, model=resolved_model
        )

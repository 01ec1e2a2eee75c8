"""
ResponseSynthesisAgent: produces the final user-facing answer.

Three modes:
- analysis: interpret query rows (analysis model), one insight and one recommendation
- clarification: deterministic follow-up question, no model call
- chat: short in-character reply (chat model)
"""

import json
import logging

from squix.agents.base import BaseAgent
from squix.config import get_settings
from squix.llm.base import BaseLLMProvider
from squix.llm.factory import LLMProviderFactory
from squix.llm.models import LLMMessage
from squix.models.agent import (
    AgentError,
    ModelAssignments,
    SynthesisAgentInput,
    SynthesisAgentOutput,
)
from squix.prompts.loader import PromptLoader

logger = logging.getLogger(__name__)

ANALYSIS_PROMPT = "agents/analysis.md"
CHAT_PROMPT = "agents/chat.md"
CLARIFICATION_TEMPLATE = "responses/clarification.md"


class ResponseSynthesisAgent(BaseAgent):
    """Final answer agent. Holds one provider for analysis and one for chat."""

    def __init__(
        self,
        llm_provider: BaseLLMProvider | None = None,
        chat_provider: BaseLLMProvider | None = None,
        models: ModelAssignments | None = None,
    ):
        """
        Args:
            llm_provider: Provider for analysis. If None, creates the analysis role provider.
            chat_provider: Provider for chat. Defaults to llm_provider when that is given,
                otherwise creates the chat role provider.
            models: Optional per-role model names
        """
        models = models or ModelAssignments()
        if llm_provider is None:
            llm_settings = get_settings().llm
            llm_provider = LLMProviderFactory.create_agent_provider(
                "analysis", llm_settings, model=models.analysis
            )
            if chat_provider is None:
                chat_provider = LLMProviderFactory.create_agent_provider(
                    "chat", llm_settings, model=models.chat
                )
        super().__init__(name="ResponseSynthesisAgent", llm_provider=llm_provider)
        self.chat_llm = chat_provider or llm_provider
        self.prompts = PromptLoader()

    async def execute(self, input: SynthesisAgentInput) -> SynthesisAgentOutput:
        if input.mode == "clarification":
            answer = self.render_clarification(input.missing_info)
        elif input.mode == "analysis":
            if input.result is None:
                raise AgentError(self.name, "Analysis requires a query result")
            answer = await self._analyze(input)
        else:
            answer = await self._chat(input)

        logger.info(
            f"[{self.name}] Produced {input.mode} answer",
            extra={"agent": self.name, "mode": input.mode, "answer_length": len(answer)},
        )
        return SynthesisAgentOutput(success=True, answer=answer, metadata=self._metadata)

    def render_clarification(self, missing_info: str | None) -> str:
        """Follow-up question asking for missing_info; a generic phrase when absent."""
        return self.prompts.render(CLARIFICATION_TEMPLATE, missing_info=missing_info)

    async def _analyze(self, input: SynthesisAgentInput) -> str:
        result_json = json.dumps(input.result.rows, indent=2)
        user_prompt = self.prompts.render(
            ANALYSIS_PROMPT, user_query=input.query, result_json=result_json
        )
        temperature = self.prompts.get_metadata(ANALYSIS_PROMPT).get("temperature")
        response = await self._generate(
            self._with_persona(input.system_prompt, user_prompt), temperature=temperature
        )
        return response.content.strip()

    async def _chat(self, input: SynthesisAgentInput) -> str:
        user_prompt = self.prompts.render(CHAT_PROMPT, user_query=input.query)
        temperature = self.prompts.get_metadata(CHAT_PROMPT).get("temperature")
        messages = self._with_persona(input.system_prompt, user_prompt)

        response = await self._generate(
            messages, temperature=temperature, provider=self.chat_llm
        )
        return response.content.strip()

    @staticmethod
    def _with_persona(system_prompt: str, user_prompt: str) -> list[LLMMessage]:
        messages = []
        if system_prompt.strip():
            messages.append(LLMMessage(role="system", content=system_prompt))
        messages.append(LLMMessage(role="user", content=user_prompt))
        return messages
